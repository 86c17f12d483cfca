"""
Backend selection.

The active client is chosen once at startup from configuration; requests
never branch on the provider.
"""

import logging
from typing import Callable, Dict, Optional

import httpx

from .config import LlamaConfig, DEFAULT_TIMEOUT, PROVIDER_OLLAMA, PROVIDER_OPENAI_COMPATIBLE
from .errors import GatewayNotFoundError
from .interface import AbstractModelClient
from ..adapters.ollama_adapter import OllamaClient
from ..adapters.openai_compatible_adapter import OpenAICompatibleClient

logger = logging.getLogger(__name__)

ClientFactory = Callable[[LlamaConfig, Optional[httpx.AsyncBaseTransport]], AbstractModelClient]


def _ollama_factory(config: LlamaConfig, transport=None) -> AbstractModelClient:
    return OllamaClient(
        base_url=config.ollama.base_url,
        timeout=DEFAULT_TIMEOUT,
        chat_path=config.ollama.chat_path,
        transport=transport,
    )


def _openai_compatible_factory(config: LlamaConfig, transport=None) -> AbstractModelClient:
    return OpenAICompatibleClient(
        base_url=config.openai_compatible.base_url,
        api_key=config.openai_compatible.api_key,
        timeout=DEFAULT_TIMEOUT,
        transport=transport,
    )


_FACTORIES: Dict[str, ClientFactory] = {
    PROVIDER_OLLAMA: _ollama_factory,
    PROVIDER_OPENAI_COMPATIBLE: _openai_compatible_factory,
}


def create_model_client(
    config: LlamaConfig,
    transport: Optional[httpx.AsyncBaseTransport] = None,
) -> AbstractModelClient:
    """
    Create the backend client for the configured provider.

    Args:
        config: Validated configuration
        transport: Optional transport override passed to the client

    Returns:
        Unconnected backend client

    Raises:
        GatewayNotFoundError: If the provider has no registered client
    """
    provider = config.provider_type
    factory = _FACTORIES.get(provider)
    if factory is None:
        raise GatewayNotFoundError(f"Unknown provider: {config.provider}")

    client = factory(config, transport)
    logger.info(f"Selected backend: {client.name} ({client.base_url})")
    return client

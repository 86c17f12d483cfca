"""
Core gateway components.

``registry`` is imported from the package root, after the adapters.
"""

from .errors import (
    GatewayError,
    GatewayConfigurationError,
    GatewayNotFoundError,
    GatewayConnectionError,
    GatewayTimeoutError,
    GatewayResponseError,
)
from .config import LlamaConfig, load_config
from .interface import AbstractModelClient
from .translators import ChatDefaults

__all__ = [
    "GatewayError",
    "GatewayConfigurationError",
    "GatewayNotFoundError",
    "GatewayConnectionError",
    "GatewayTimeoutError",
    "GatewayResponseError",
    "LlamaConfig",
    "load_config",
    "AbstractModelClient",
    "ChatDefaults",
]

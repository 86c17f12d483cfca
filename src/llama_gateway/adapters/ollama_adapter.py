"""
Ollama backend client.

Talks to a self-hosted Ollama server. Sampling parameters are nested under
``options`` and ``max_tokens`` is sent as ``num_predict``.
"""
import logging
from typing import Any, Dict, Optional

import httpx
from pydantic import ValidationError

from ..core.config import DEFAULT_OLLAMA_CHAT_PATH
from ..core.errors import GatewayResponseError
from ..core.interface import AbstractModelClient, drop_none
from ..models.chat import ChatInput, ChatResult

logger = logging.getLogger(__name__)


class OllamaClient(AbstractModelClient):
    """
    Ollama client for local LLM inference.

    Response decoding is tolerant: a missing ``message`` object or
    ``content`` field yields an absent content rather than an error.
    Fields that are present but mistyped still fail the call.
    """

    def __init__(
        self,
        base_url: str,
        timeout: float = 90.0,
        chat_path: str = DEFAULT_OLLAMA_CHAT_PATH,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        """
        Initialize Ollama client.

        Args:
            base_url: Ollama server URL
            timeout: Request timeout in seconds
            chat_path: Chat endpoint, relative to ``base_url``
            transport: Optional transport override
        """
        super().__init__(base_url, timeout=timeout, transport=transport)
        self._chat_path = chat_path

    @property
    def name(self) -> str:
        return "ollama"

    def build_payload(self, request: ChatInput) -> Dict[str, Any]:
        """Build the Ollama ``/api/chat`` body."""
        return drop_none({
            "model": request.model,
            "messages": request.wire_messages(),
            "options": {
                "temperature": request.temperature,
                "num_predict": request.max_tokens,
                "top_p": request.top_p,
            },
            "stream": False,
        })

    async def chat(self, request: ChatInput) -> ChatResult:
        """Execute chat request."""
        data = await self._post_json(self._chat_path, self.build_payload(request))
        return self.parse_response(data)

    def parse_response(self, data: Dict[str, Any]) -> ChatResult:
        """
        Parse Ollama response: ``{model, message: {content}, done_reason}``.

        Raises:
            GatewayResponseError: If a present field has the wrong type
        """
        content = None
        message = data.get("message")
        if isinstance(message, dict):
            content = message.get("content")

        try:
            return ChatResult(
                model=data.get("model"),
                content=content,
                finish_reason=data.get("done_reason") or "stop",
                raw=data,
            )
        except ValidationError as e:
            logger.warning(f"Malformed reply from {self._base_url}: {e.error_count()} invalid field(s)")
            raise GatewayResponseError(f"{self.name} returned an invalid chat reply: {e}", gateway=self.name)

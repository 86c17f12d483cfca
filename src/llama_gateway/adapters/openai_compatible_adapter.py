"""
OpenAI-compatible backend client.

Works against any server exposing ``/v1/chat/completions`` (OpenAI, vLLM,
LiteLLM, llama.cpp server).
"""

import logging
from typing import Any, Dict, Optional

import httpx
from pydantic import ValidationError

from ..core.errors import GatewayResponseError
from ..core.interface import AbstractModelClient, drop_none
from ..models.chat import ChatInput, ChatResult

logger = logging.getLogger(__name__)


class OpenAICompatibleClient(AbstractModelClient):
    """
    OpenAI-compatible chat completions client.

    Unlike the Ollama client, response decoding is strict: the first choice's
    message content must be present or the call fails.
    """

    CHAT_PATH = "/v1/chat/completions"

    def __init__(
        self,
        base_url: str,
        api_key: Optional[str] = None,
        timeout: float = 90.0,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        """
        Initialize OpenAI-compatible client.

        Args:
            base_url: API base URL
            api_key: Bearer token sent on every request
            timeout: Request timeout in seconds
            transport: Optional transport override
        """
        super().__init__(base_url, timeout=timeout, transport=transport)
        self._api_key = api_key

    @property
    def name(self) -> str:
        return "openai_compatible"

    def _default_headers(self) -> Dict[str, str]:
        headers = super()._default_headers()
        if self._api_key:
            headers["Authorization"] = f"Bearer {self._api_key}"
        return headers

    def build_payload(self, request: ChatInput) -> Dict[str, Any]:
        """Build the flat chat completions body."""
        return drop_none({
            "model": request.model,
            "temperature": request.temperature,
            "max_tokens": request.max_tokens,
            "top_p": request.top_p,
            "messages": request.wire_messages(),
            "stream": False,
        })

    async def chat(self, request: ChatInput) -> ChatResult:
        """Create a chat completion."""
        data = await self._post_json(self.CHAT_PATH, self.build_payload(request))
        return self.parse_response(data)

    def parse_response(self, data: Dict[str, Any]) -> ChatResult:
        """
        Parse ``choices[0].message.content`` without defaults.

        Raises:
            GatewayResponseError: If ``choices`` is empty, the path is missing
                or a field has the wrong type
        """
        try:
            choice = data["choices"][0]
            content = choice["message"]["content"]
        except (KeyError, IndexError, TypeError) as e:
            logger.warning(f"Malformed completion from {self._base_url}: {e!r}")
            raise GatewayResponseError(
                f"Backend response missing choices[0].message.content: {e!r}",
                gateway=self.name,
            )

        try:
            return ChatResult(
                model=data.get("model"),
                content=content,
                finish_reason=choice.get("finish_reason") or "stop",
                raw=data,
            )
        except ValidationError as e:
            logger.warning(f"Malformed completion from {self._base_url}: {e.error_count()} invalid field(s)")
            raise GatewayResponseError(f"{self.name} returned an invalid completion: {e}", gateway=self.name)

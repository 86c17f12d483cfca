"""
Abstract backend client interface.

Defines the contract that both backend adapters implement.
"""

import logging
from abc import ABC, abstractmethod
from typing import Any, Dict, Optional

import httpx

from ..models.chat import ChatInput, ChatResult
from .errors import GatewayConnectionError, GatewayTimeoutError, GatewayResponseError

logger = logging.getLogger(__name__)


class AbstractModelClient(ABC):
    """
    Abstract base class for LLM backend clients.

    Each client owns one pooled ``httpx.AsyncClient`` bound to a fixed base
    URL and timeout. ``chat`` issues exactly one request per call and never
    retries.
    """

    def __init__(
        self,
        base_url: str,
        timeout: float = 90.0,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        """
        Initialize the client.

        Args:
            base_url: Backend base URL
            timeout: Per-call timeout in seconds
            transport: Optional transport override (used for testing)
        """
        self._base_url = base_url
        self._timeout = timeout
        self._transport = transport
        self._client: Optional[httpx.AsyncClient] = None

    @property
    @abstractmethod
    def name(self) -> str:
        """Backend type identifier (e.g., "ollama")."""
        pass

    @property
    def base_url(self) -> str:
        return self._base_url

    @property
    def is_connected(self) -> bool:
        return self._client is not None

    def _default_headers(self) -> Dict[str, str]:
        return {"Content-Type": "application/json"}

    async def connect(self) -> None:
        """Create the pooled HTTP client."""
        if self._client is not None:
            return

        self._client = httpx.AsyncClient(
            base_url=self._base_url,
            headers=self._default_headers(),
            timeout=httpx.Timeout(self._timeout),
            transport=self._transport,
        )
        logger.info(f"Connected {self.name} client to {self._base_url}")

    async def disconnect(self) -> None:
        """Close the pooled HTTP client."""
        if self._client:
            await self._client.aclose()
            self._client = None
            logger.info(f"Disconnected {self.name} client")

    @abstractmethod
    async def chat(self, request: ChatInput) -> ChatResult:
        """
        Send one chat request to the backend.

        Args:
            request: Resolved chat input

        Returns:
            Normalized chat result

        Raises:
            GatewayConnectionError: Backend unreachable or non-success status
            GatewayTimeoutError: Backend did not answer within the timeout
            GatewayResponseError: Success body could not be decoded
        """
        pass

    async def _post_json(self, path: str, payload: Dict[str, Any]) -> Dict[str, Any]:
        """POST ``payload`` and return the decoded JSON body."""
        if not self._client:
            await self.connect()

        logger.debug(f"POST {self.name} {path} messages={len(payload.get('messages', []))}")

        try:
            response = await self._client.post(path, json=payload)
        except httpx.TimeoutException:
            raise GatewayTimeoutError(
                f"{self.name} request timed out after {self._timeout}s",
                gateway=self.name,
            )
        except httpx.RequestError as e:
            raise GatewayConnectionError(f"Cannot reach {self.name} backend: {e}", gateway=self.name)

        if not response.is_success:
            logger.error(f"{self.name} backend returned {response.status_code}: {response.text}")
            raise GatewayConnectionError(
                f"{self.name} error: {response.status_code} - {response.text}",
                gateway=self.name,
                status_code=response.status_code,
            )

        try:
            data = response.json()
        except ValueError as e:
            raise GatewayResponseError(f"{self.name} returned invalid JSON: {e}", gateway=self.name)

        if not isinstance(data, dict):
            raise GatewayResponseError(f"{self.name} returned a non-object body", gateway=self.name)
        return data

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}(base_url={self._base_url!r})"


def drop_none(payload: Dict[str, Any]) -> Dict[str, Any]:
    """Remove ``None`` values, one level of nesting deep."""
    cleaned = {}
    for key, value in payload.items():
        if isinstance(value, dict):
            value = {k: v for k, v in value.items() if v is not None}
        if value is not None:
            cleaned[key] = value
    return cleaned

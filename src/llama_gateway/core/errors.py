"""
Gateway error types.
"""

from typing import Optional


class GatewayError(Exception):
    """Base exception for gateway errors."""

    status_code: int = 500
    error_type: str = "gateway_error"

    def __init__(self, message: str, gateway: str = None):
        self.message = message
        self.gateway = gateway
        super().__init__(message)

    def to_dict(self) -> dict:
        """Render as an OpenAI-style error envelope."""
        return {
            "error": {
                "message": self.message,
                "type": self.error_type,
                "code": self.code,
            }
        }

    @property
    def code(self) -> Optional[str]:
        return self.gateway


class GatewayConfigurationError(GatewayError):
    """Raised when startup configuration is missing or invalid."""
    error_type = "configuration_error"


class GatewayNotFoundError(GatewayError):
    """Raised when a backend provider is not registered."""
    error_type = "provider_not_found"


class GatewayConnectionError(GatewayError):
    """Raised when the backend is unreachable or returns a non-success status."""

    status_code = 502
    error_type = "backend_unavailable"

    def __init__(self, message: str, gateway: str = None, status_code: int = None):
        super().__init__(message, gateway)
        self.upstream_status = status_code
        if status_code is not None:
            self.error_type = "backend_error"

    @property
    def code(self) -> Optional[str]:
        if self.upstream_status is not None:
            return str(self.upstream_status)
        return self.gateway


class GatewayTimeoutError(GatewayConnectionError):
    """Raised when the backend call exceeds its timeout."""

    status_code = 504
    error_type = "backend_timeout"


class GatewayResponseError(GatewayError):
    """Raised when a backend success response cannot be decoded."""

    status_code = 502
    error_type = "malformed_backend_response"


"""Custom exceptions for the HTTP boundary.

Scoring never raises for bad input: malformed answers, carbon figures or
websites degrade to defaults. These errors cover the boundary itself.
"""

from typing import Any

from fastapi import status


class ReadinessError(Exception):
    """Base exception for the gap-score service."""

    def __init__(
        self,
        message: str,
        code: str = "server_error",
        status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR,
        details: dict[str, Any] | None = None,
    ):
        self.message = message
        self.code = code
        self.status_code = status_code
        self.details = details or {}
        super().__init__(message)

    def to_dict(self) -> dict[str, Any]:
        return {
            "error": {
                "code": self.code,
                "message": self.message,
                **({"details": self.details} if self.details else {}),
            }
        }


class AuthenticationError(ReadinessError):
    """Missing or wrong API key."""

    def __init__(self, message: str = "unauthorized"):
        super().__init__(
            message=message,
            code="authentication_error",
            status_code=status.HTTP_401_UNAUTHORIZED,
        )


class ConfigurationError(ReadinessError):
    """The service is not configured to handle requests."""

    def __init__(self, message: str):
        super().__init__(
            message=message,
            code="configuration_error",
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
        )

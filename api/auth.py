"""Shared-secret authentication for the scoring endpoint."""

import hmac
from typing import Annotated

import structlog
from fastapi import Depends, Header

from api.config import Settings, get_settings
from api.exceptions import AuthenticationError, ConfigurationError

logger = structlog.get_logger(__name__)


def keys_match(provided: str | None, expected: str) -> bool:
    """Compare keys in constant time."""
    if not provided:
        return False
    return hmac.compare_digest(provided.encode(), expected.encode())


async def require_api_key(
    settings: Annotated[Settings, Depends(get_settings)],
    x_key: Annotated[str | None, Header()] = None,
) -> None:
    """Reject requests whose x-key header does not match the configured secret."""
    if not settings.api_key:
        raise ConfigurationError("API key is not configured")
    if not keys_match(x_key, settings.api_key):
        logger.warning("api_key_rejected", provided=x_key is not None)
        raise AuthenticationError()


ApiKeyDep = Depends(require_api_key)

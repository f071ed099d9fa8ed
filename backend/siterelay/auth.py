"""
Shared-secret authentication for the relay endpoints
"""
import secrets
from fastapi import Header
from typing import Optional
from .config import settings
from .exceptions import InvalidApiKeyError, ServerMisconfiguredError

async def require_api_key(x_api_key: Optional[str] = Header(None, alias="X-Api-Key")) -> None:
    """
    Dependency guarding every endpoint except the liveness check.

    A server without API_KEY refuses all requests instead of running open.
    """
    if not settings.API_KEY:
        raise ServerMisconfiguredError("API_KEY")
    if not x_api_key or not secrets.compare_digest(x_api_key.encode(), settings.API_KEY.encode()):
        raise InvalidApiKeyError()

"""
API Key Security Module

This module authenticates callers by a static shared secret sent in the
X-API-Key header.

Design Decisions:
- Use constant-time comparison to prevent timing attacks
- Verify the key before the body is read or any outbound call is made
- An unconfigured secret is a server error, not an open door
"""

import hmac

from fastapi import Depends, HTTPException, Request, status

from pr_analyzer.api.dependencies import load_settings
from pr_analyzer.config import Settings
from pr_analyzer.logging_config import get_logger

logger = get_logger(__name__)

API_KEY_HEADER = "X-API-Key"


async def verify_api_key(
    request: Request,
    settings: Settings = Depends(load_settings)
) -> None:
    """
    Verify the caller's API key.

    Args:
        request: FastAPI request object
        settings: Application settings

    Raises:
        HTTPException: 500 if no secret is configured, 401 if the key is
            missing or does not match
    """
    remote_addr = request.client.host if request.client else "unknown"

    if not settings.api_key:
        logger.error("Shared API key is not configured")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Internal server error"
        )

    provided = request.headers.get(API_KEY_HEADER)

    if not provided:
        logger.warning("Missing API key header", remote_addr=remote_addr)
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Unauthorized"
        )

    if not hmac.compare_digest(provided.encode(), settings.api_key.encode()):
        logger.warning("API key mismatch", remote_addr=remote_addr)
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Unauthorized"
        )

    logger.debug("API key verified", remote_addr=remote_addr)

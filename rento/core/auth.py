"""Caller identity resolution.

Authentication itself is delegated to the hosting platform; the API only needs
to know *who* is calling. Callers present an ``X-API-Key`` that maps to a
user id via ``APP_API_KEYS`` (``key:user_id`` pairs). For local development,
``APP_API_KEY_REQUIRED=false`` trusts an ``X-User-Id`` header instead.

Usage:
    @router.post("/thing")
    async def endpoint(user: Annotated[CurrentUser, Depends(get_current_user)]):
        ...
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Annotated

from fastapi import Header, HTTPException, status

from rento.core.config import settings
from rento.core.errors import AuthenticationAppError
from rento.core.logging import hash_identifier

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class CurrentUser:
    """Authenticated caller."""

    id: str


def parse_api_keys(keys_string: str | None) -> dict[str, str]:
    """Parse ``key:user_id`` pairs into a lookup table.

    Entries without a user id, or with an empty key, are ignored. Later
    entries win when a key repeats.

    Examples:
        >>> parse_api_keys("k1:user-1, k2:user-2")
        {'k1': 'user-1', 'k2': 'user-2'}
        >>> parse_api_keys(None)
        {}
    """
    if not keys_string:
        return {}

    keys: dict[str, str] = {}
    for entry in keys_string.split(","):
        key, sep, user_id = entry.strip().partition(":")
        if sep and key.strip() and user_id.strip():
            keys[key.strip()] = user_id.strip()
    return keys


def resolve_api_key(provided_key: str) -> CurrentUser:
    """Map an API key onto the caller it belongs to.

    Pure lookup without FastAPI dependencies for easy testing.

    Raises:
        AuthenticationAppError: If no keys are configured or the key is unknown.
    """
    known_keys = parse_api_keys(settings.app.api_keys)

    if not known_keys:
        logger.error(
            "auth.failed",
            extra={"reason": "api_keys_not_configured"},
        )
        raise AuthenticationAppError(
            code="api_keys_not_configured",
            message="API key authentication is enabled but no valid keys are configured",
            details={"hint": "Set APP_API_KEYS or disable auth with APP_API_KEY_REQUIRED=false"},
        )

    user_id = known_keys.get(provided_key)
    if user_id is None:
        logger.warning(
            "auth.failed",
            extra={"reason": "invalid_api_key", "api_key_hash": hash_identifier(provided_key)},
        )
        raise AuthenticationAppError(code="invalid_api_key", message="Invalid API key")

    return CurrentUser(id=user_id)


async def get_current_user(
    x_api_key: Annotated[str | None, Header(alias="X-API-Key")] = None,
    x_user_id: Annotated[str | None, Header(alias="X-User-Id")] = None,
) -> CurrentUser:
    """FastAPI dependency returning the authenticated caller.

    Raises:
        HTTPException: 401 when no identity can be established.
    """
    if not settings.app.api_key_required:
        if not x_user_id:
            logger.warning("auth.missing_identity", extra={"auth_required": False})
            raise HTTPException(
                status_code=status.HTTP_401_UNAUTHORIZED,
                detail="Authentication required",
            )
        return CurrentUser(id=x_user_id)

    if not x_api_key:
        logger.warning("auth.missing_key", extra={"auth_required": True})
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Authentication required",
        )

    try:
        user = resolve_api_key(x_api_key)
    except AuthenticationAppError as exc:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail=exc.message,
        ) from exc

    logger.debug("auth.success", extra={"user_hash": hash_identifier(user.id)})
    return user

"""Session token issuance and verification.

Tokens are HS256 JWTs carrying the account email as ``sub``. They are not
stored server side; a token is valid while its signature checks out and
``exp`` lies in the future.
"""

from __future__ import annotations

import logging
from datetime import UTC, datetime, timedelta
from typing import Any

import jwt
from fastapi import Response

from unity_hands.config import Settings, get_settings
from unity_hands.core.errors import UnauthorizedError

logger = logging.getLogger(__name__)


def issue_token(subject: str, *, now: datetime | None = None, settings: Settings | None = None) -> str:
    settings = settings or get_settings()
    issued_at = now or datetime.now(UTC)
    payload = {
        "sub": subject,
        "iat": issued_at,
        "exp": issued_at + timedelta(days=settings.token_ttl_days),
    }
    logger.info("Issued session token for %s", subject)
    return jwt.encode(payload, settings.secret_key, algorithm=settings.jwt_algorithm)


def verify_token(token: str | None, *, settings: Settings | None = None) -> str:
    """Return the token subject or raise ``UnauthorizedError``."""
    if not token:
        raise UnauthorizedError("missing token")

    settings = settings or get_settings()
    try:
        payload = jwt.decode(
            token,
            settings.secret_key,
            algorithms=[settings.jwt_algorithm],
            options={"require": ["exp", "sub"]},
        )
    except jwt.ExpiredSignatureError as exc:
        raise UnauthorizedError("token expired") from exc
    except jwt.InvalidTokenError as exc:
        raise UnauthorizedError("invalid token") from exc

    subject = payload.get("sub")
    if not isinstance(subject, str) or not subject:
        raise UnauthorizedError("token has no subject")
    return subject


def cookie_options(settings: Settings | None = None) -> dict[str, Any]:
    # Cross-site frontends need SameSite=None, which browsers only accept with Secure.
    settings = settings or get_settings()
    return {
        "httponly": True,
        "secure": settings.is_production,
        "samesite": "none" if settings.is_production else "lax",
        "path": "/",
    }


def set_token_cookie(response: Response, token: str, settings: Settings | None = None) -> None:
    settings = settings or get_settings()
    response.set_cookie(
        settings.token_cookie_name,
        token,
        max_age=settings.token_ttl_days * 24 * 60 * 60,
        **cookie_options(settings),
    )


def clear_token_cookie(response: Response, settings: Settings | None = None) -> None:
    settings = settings or get_settings()
    response.delete_cookie(settings.token_cookie_name, **cookie_options(settings))

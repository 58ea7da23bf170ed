"""Request guards for the session token cookie.

``require_auth`` protects mutating endpoints. ``require_matching_subject``
protects listings scoped by a ``user`` query parameter: it only checks the
token when that parameter is present, and then insists the token belongs to
that user.
"""

from __future__ import annotations

from fastapi import HTTPException, Query, Request, status

from unity_hands.config import get_settings
from unity_hands.core.errors import UnauthorizedError
from unity_hands.core.tokens import verify_token

UNAUTHORIZED_DETAIL = "Unauthorized Access"


def _unauthorized() -> HTTPException:
    return HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail=UNAUTHORIZED_DETAIL)


def _token_subject(request: Request) -> str:
    token = request.cookies.get(get_settings().token_cookie_name)
    try:
        return verify_token(token)
    except UnauthorizedError as exc:
        raise _unauthorized() from exc


def require_auth(request: Request) -> str:
    return _token_subject(request)


def require_matching_subject(request: Request, user: str | None = Query(default=None)) -> str | None:
    if not user:
        return None
    if _token_subject(request) != user:
        raise _unauthorized()
    return user


def require_owner_listing_subject(request: Request, user: str | None = Query(default=None)) -> str | None:
    """Apply ``require_matching_subject`` to owner listings when configured to."""
    if not get_settings().owner_listing_requires_token:
        return user
    return require_matching_subject(request, user)

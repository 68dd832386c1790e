"""Authentication helpers — resolve the signed-in manager from the session."""

from __future__ import annotations

from typing import Any

from fastapi import HTTPException, Request, status

_USER_ID_KEYS = ("uid", "oid", "sub", "id")


def get_user(request: Request) -> dict[str, Any] | None:
    """Extract the authenticated user from the session, if present."""
    return request.session.get("user") if hasattr(request, "session") else None


def require_authenticated_user(request: Request) -> dict[str, Any]:
    """Return the authenticated user or raise HTTP 401."""
    user = get_user(request)
    if not user:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Authentication required",
        )
    return user


def current_user_id(request: Request) -> str:
    """FastAPI dependency returning the caller's user id."""
    user = require_authenticated_user(request)
    for key in _USER_ID_KEYS:
        value = user.get(key)
        if isinstance(value, str) and value:
            return value
    raise HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail="Session user has no id",
    )

"""Session cookie helpers: attach and clear the JWT on the response."""

from typing import TYPE_CHECKING

from fastapi import Response

if TYPE_CHECKING:
    from app.core.config import Settings


def set_session_cookie(response: Response, token: str, settings: "Settings") -> None:
    response.set_cookie(
        settings.SESSION_COOKIE_NAME,
        token,
        max_age=settings.SESSION_COOKIE_MAX_AGE_SEC,
        path="/",
        httponly=True,
        secure=settings.is_production,
        samesite="strict",
    )


def clear_session_cookie(response: Response, settings: "Settings") -> None:
    """Expire the session cookie; same attributes so browsers accept the removal."""
    response.delete_cookie(
        settings.SESSION_COOKIE_NAME,
        path="/",
        httponly=True,
        secure=settings.is_production,
        samesite="strict",
    )

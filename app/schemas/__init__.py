"""Pydantic request/response schemas."""

from app.schemas.auth import (
    AuthResponse,
    ErrorResponse,
    MessageResponse,
    SignInRequest,
    SignUpRequest,
    UserPublic,
    UserSummary,
)
from app.schemas.health import HealthResponse

__all__ = [
    "AuthResponse",
    "ErrorResponse",
    "HealthResponse",
    "MessageResponse",
    "SignInRequest",
    "SignUpRequest",
    "UserPublic",
    "UserSummary",
]

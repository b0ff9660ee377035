"""Sign-up, sign-in and sign-out endpoints (session token in an HttpOnly cookie)."""

import logging
from typing import Annotated

from fastapi import APIRouter, Depends, Response, status
from fastapi.responses import JSONResponse
from sqlalchemy.orm import Session

from app.core.config import Settings, get_settings
from app.core.cookies import clear_session_cookie, set_session_cookie
from app.core.database import get_db
from app.core.security import PasswordHasher
from app.core.tokens import TokenService, get_token_service
from app.schemas.auth import (
    AuthResponse,
    ErrorResponse,
    MessageResponse,
    SignInRequest,
    SignUpRequest,
    UserPublic,
    UserSummary,
)
from app.services.auth import AuthErrorKind, AuthFailure, AuthService
from app.services.identity_store import UserStore

logger = logging.getLogger(__name__)
router = APIRouter()

# Unknown email and wrong password share one response.
FAILURE_RESPONSES: dict[AuthErrorKind, tuple[int, str]] = {
    AuthErrorKind.DUPLICATE_IDENTITY: (status.HTTP_409_CONFLICT, "Email already registered"),
    AuthErrorKind.IDENTITY_NOT_FOUND: (status.HTTP_401_UNAUTHORIZED, "Invalid credentials"),
    AuthErrorKind.INVALID_CREDENTIALS: (status.HTTP_401_UNAUTHORIZED, "Invalid credentials"),
}


def get_auth_service(
    db: Annotated[Session, Depends(get_db)],
    settings: Annotated[Settings, Depends(get_settings)],
    tokens: Annotated[TokenService, Depends(get_token_service)],
) -> AuthService:
    """Dependency: auth orchestrator bound to the request's DB session."""
    return AuthService(
        store=UserStore(db),
        hasher=PasswordHasher(rounds=settings.BCRYPT_ROUNDS),
        tokens=tokens,
    )


def _summary(user: UserPublic) -> UserSummary:
    return UserSummary(id=user.id, name=user.name, email=user.email, role=user.role)


def _failure_response(failure: AuthFailure) -> JSONResponse:
    status_code, error = FAILURE_RESPONSES[failure.kind]
    return JSONResponse(status_code=status_code, content={"error": error})


@router.post(
    "/sign-up",
    status_code=status.HTTP_201_CREATED,
    response_model=AuthResponse,
    responses={status.HTTP_409_CONFLICT: {"model": ErrorResponse}},
)
def sign_up(
    body: SignUpRequest,
    response: Response,
    auth: Annotated[AuthService, Depends(get_auth_service)],
    settings: Annotated[Settings, Depends(get_settings)],
):
    """Register a new user and start a session. 409 if the email is taken."""
    result = auth.register(
        name=body.name,
        email=body.email,
        password=body.password,
        role=body.role,
    )
    if isinstance(result, AuthFailure):
        return _failure_response(result)

    set_session_cookie(response, result.token, settings)
    return AuthResponse(message="User registered", user=_summary(result.user))


@router.post(
    "/sign-in",
    response_model=AuthResponse,
    responses={status.HTTP_401_UNAUTHORIZED: {"model": ErrorResponse}},
)
def sign_in(
    body: SignInRequest,
    response: Response,
    auth: Annotated[AuthService, Depends(get_auth_service)],
    settings: Annotated[Settings, Depends(get_settings)],
):
    """
    Authenticate with email and password and start a session.
    Unknown email and wrong password both answer 401 with the same body.
    """
    result = auth.authenticate(email=body.email, password=body.password)
    if isinstance(result, AuthFailure):
        return _failure_response(result)

    set_session_cookie(response, result.token, settings)
    return AuthResponse(message="User signed in", user=_summary(result.user))


@router.post("/sign-out", response_model=MessageResponse)
def sign_out(
    response: Response,
    settings: Annotated[Settings, Depends(get_settings)],
) -> MessageResponse:
    """Clear the session cookie. Always succeeds; the server keeps no session state."""
    clear_session_cookie(response, settings)
    logger.info("User signed out successfully")
    return MessageResponse(message="User signed out")

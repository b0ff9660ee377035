"""Signed session tokens (JWT) carrying the subject's id, email and role."""

import logging
from datetime import UTC, datetime, timedelta
from functools import lru_cache
from typing import Any

import jwt
from pydantic import BaseModel, ValidationError

from app.core.config import get_settings
from app.core.errors import InvalidTokenError, SigningError

logger = logging.getLogger(__name__)

# Default lifetime: one day.
DEFAULT_EXPIRE_MINUTES = 1440


class TokenClaims(BaseModel):
    """Identity claims carried by a session token."""

    id: int
    email: str
    role: str


class TokenService:
    """Issues and verifies session tokens signed with a server-held secret."""

    def __init__(
        self,
        secret: str,
        algorithm: str = "HS256",
        expire_minutes: int = DEFAULT_EXPIRE_MINUTES,
    ) -> None:
        self._secret = secret
        self.algorithm = algorithm
        self.lifetime = timedelta(minutes=expire_minutes)

    def issue(self, claims: TokenClaims, now: datetime | None = None) -> str:
        """Create a signed token with the claims plus iat and exp."""
        if not self._secret:
            raise SigningError("Token signing secret is not configured")
        issued_at = now or datetime.now(UTC)
        payload: dict[str, Any] = {
            **claims.model_dump(),
            "iat": issued_at,
            "exp": issued_at + self.lifetime,
        }
        try:
            return jwt.encode(payload, self._secret, algorithm=self.algorithm)
        except (jwt.PyJWTError, NotImplementedError, TypeError, ValueError) as e:
            logger.error("Failed to sign token: %s", e)
            raise SigningError("Failed to sign token") from e

    def verify(self, token: str) -> TokenClaims:
        """
        Validate signature and expiry; return the identity claims.
        Raises InvalidTokenError on invalid, malformed or expired tokens.
        """
        try:
            payload = jwt.decode(
                token,
                self._secret,
                algorithms=[self.algorithm],
                options={"require": ["exp", "iat"]},
            )
        except jwt.PyJWTError as e:
            logger.info("Token rejected: %s", e)
            raise InvalidTokenError("Invalid or expired token") from e
        try:
            return TokenClaims(
                id=payload.get("id"),
                email=payload.get("email"),
                role=payload.get("role"),
            )
        except ValidationError as e:
            raise InvalidTokenError("Invalid token payload") from e


@lru_cache
def get_token_service() -> TokenService:
    """Return the process-wide token service built from settings."""
    settings = get_settings()
    return TokenService(
        secret=settings.JWT_SECRET.get_secret_value(),
        algorithm=settings.JWT_ALGORITHM,
        expire_minutes=settings.JWT_EXPIRE_MINUTES,
    )

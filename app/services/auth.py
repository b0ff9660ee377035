"""Registration and authentication flows.

Both flows return a typed result instead of raising for expected outcomes:
``AuthSuccess`` carries the public user and a fresh session token,
``AuthFailure`` carries an ``AuthErrorKind`` the API maps to a status code.
Infrastructure failures (hashing, storage, signing) propagate as
``AuthServiceError`` subclasses.
"""

import logging
from dataclasses import dataclass
from enum import Enum

from app.core.errors import IdentityConflictError
from app.core.security import PasswordHasher
from app.core.tokens import TokenClaims, TokenService
from app.models.user import ROLE_USER, User
from app.schemas.auth import UserPublic
from app.services.identity_store import UserStore, normalize_email

logger = logging.getLogger(__name__)


class AuthErrorKind(str, Enum):
    DUPLICATE_IDENTITY = "duplicate_identity"
    IDENTITY_NOT_FOUND = "identity_not_found"
    INVALID_CREDENTIALS = "invalid_credentials"


@dataclass(frozen=True)
class AuthSuccess:
    user: UserPublic
    token: str


@dataclass(frozen=True)
class AuthFailure:
    kind: AuthErrorKind


AuthResult = AuthSuccess | AuthFailure


class AuthService:
    """Composes the identity store, password hasher and token service."""

    def __init__(
        self,
        store: UserStore,
        hasher: PasswordHasher,
        tokens: TokenService,
    ) -> None:
        self.store = store
        self.hasher = hasher
        self.tokens = tokens

    def register(
        self,
        name: str,
        email: str,
        password: str,
        role: str = ROLE_USER,
    ) -> AuthResult:
        """Create a user and sign them in. Rejects (never merges) a taken email."""
        email = normalize_email(email)
        if self.store.find_by_email(email) is not None:
            logger.warning("Registration rejected, email already registered: %s", email)
            return AuthFailure(AuthErrorKind.DUPLICATE_IDENTITY)

        hashed = self.hasher.hash(password)
        try:
            user = self.store.insert(name=name, email=email, hashed_password=hashed, role=role)
        except IdentityConflictError:
            logger.warning("Registration lost a race for email: %s", email)
            return AuthFailure(AuthErrorKind.DUPLICATE_IDENTITY)

        token = self._issue(user)
        logger.info("User registered successfully: %s", email)
        return AuthSuccess(user=UserPublic.model_validate(user), token=token)

    def authenticate(self, email: str, password: str) -> AuthResult:
        """Check credentials and issue a fresh session token."""
        email = normalize_email(email)
        user = self.store.find_by_email(email)
        if user is None:
            # Unknown accounts pay the same bcrypt cost as a wrong password.
            self.hasher.verify_dummy(password)
            logger.warning("Authentication failed, unknown email: %s", email)
            return AuthFailure(AuthErrorKind.IDENTITY_NOT_FOUND)

        if not self.hasher.verify(password, user.password):
            logger.warning("Authentication failed, wrong password for: %s", email)
            return AuthFailure(AuthErrorKind.INVALID_CREDENTIALS)

        token = self._issue(user)
        logger.info("User authenticated successfully: %s", email)
        return AuthSuccess(user=UserPublic.model_validate(user), token=token)

    def _issue(self, user: User) -> str:
        return self.tokens.issue(TokenClaims(id=user.id, email=user.email, role=user.role))

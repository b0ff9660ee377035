"""Infrastructure error taxonomy for the auth core.

Domain outcomes (duplicate email, unknown email, wrong password) are not
exceptions; see ``AuthErrorKind`` in ``app.services.auth``. Everything here is
an unexpected failure that the API answers with a generic 500.
"""


class AuthServiceError(Exception):
    """Base class for infrastructure failures in the auth core."""

    def __init__(self, message: str) -> None:
        self.message = message
        super().__init__(message)


class HashingError(AuthServiceError):
    """Raised when the password hashing primitive fails."""


class VerificationError(AuthServiceError):
    """Raised when password verification cannot run (e.g. malformed stored hash)."""


class SigningError(AuthServiceError):
    """Raised when a session token cannot be signed."""


class InvalidTokenError(AuthServiceError):
    """Raised when a session token is malformed, tampered with, or expired."""


class StorageError(AuthServiceError):
    """Raised when the identity store fails (connectivity, constraints, ...)."""


class IdentityConflictError(StorageError):
    """Raised when an insert violates the unique email constraint."""

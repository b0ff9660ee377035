"""Password hashing and verification (bcrypt)."""

from functools import lru_cache

import bcrypt

from app.core.errors import HashingError, VerificationError

# Bcrypt cost (log rounds); overridable through BCRYPT_ROUNDS.
BCRYPT_ROUNDS = 10

# bcrypt only considers the first 72 bytes of a password.
BCRYPT_MAX_BYTES = 72


def _encode(plain_password: str) -> bytes:
    # bcrypt 5 rejects inputs over 72 bytes; truncate to keep the 4.x behaviour.
    return plain_password.encode("utf-8")[:BCRYPT_MAX_BYTES]


@lru_cache
def _dummy_hash(rounds: int) -> str:
    """Hash of a fixed throwaway value at the given cost; built once per cost."""
    return bcrypt.hashpw(b"acquisitions_timing_dummy", bcrypt.gensalt(rounds=rounds)).decode("utf-8")


class PasswordHasher:
    """One-way salted hashing of plaintext passwords."""

    def __init__(self, rounds: int = BCRYPT_ROUNDS) -> None:
        self.rounds = rounds

    def hash(self, plain_password: str) -> str:
        """Hash a plain-text password for storage. Do not store plain passwords."""
        try:
            salt = bcrypt.gensalt(rounds=self.rounds)
            return bcrypt.hashpw(_encode(plain_password), salt).decode("utf-8")
        except (ValueError, TypeError) as e:
            raise HashingError("Password hashing failed") from e

    def verify(self, plain_password: str, hashed: str) -> bool:
        """
        Verify a plain password against a stored hash.

        Returns False on mismatch. Raises VerificationError if the stored hash
        cannot be checked at all.
        """
        try:
            return bcrypt.checkpw(_encode(plain_password), hashed.encode("utf-8"))
        except (ValueError, TypeError, AttributeError) as e:
            raise VerificationError("Password comparison failed") from e

    def verify_dummy(self, plain_password: str) -> None:
        """Run a verification of the same cost as verify() against a throwaway hash."""
        try:
            dummy = _dummy_hash(self.rounds)
        except (ValueError, TypeError) as e:
            raise VerificationError("Password comparison failed") from e
        self.verify(plain_password, dummy)

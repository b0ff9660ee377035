"""Identity store: users keyed by (lowercased) email, backed by SQLAlchemy."""

import logging

from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session

from app.core.errors import IdentityConflictError, StorageError
from app.models.user import ROLE_USER, User

logger = logging.getLogger(__name__)

# SQLSTATE for unique_violation (psycopg2 pgcode, psycopg 3 sqlstate).
UNIQUE_VIOLATION_SQLSTATE = "23505"
SQLITE_UNIQUE_VIOLATION = "SQLITE_CONSTRAINT_UNIQUE"


def normalize_email(email: str) -> str:
    """Emails are case-insensitive: trim and lowercase before any lookup or insert."""
    return email.strip().lower()


def is_unique_violation(error: IntegrityError) -> bool:
    """True when the driver reports a unique constraint violation (not NOT NULL, length, ...)."""
    orig = error.orig
    if getattr(orig, "pgcode", None) == UNIQUE_VIOLATION_SQLSTATE:
        return True
    if getattr(orig, "sqlstate", None) == UNIQUE_VIOLATION_SQLSTATE:
        return True
    return getattr(orig, "sqlite_errorname", None) == SQLITE_UNIQUE_VIOLATION


class UserStore:
    """Lookup and creation of users within one database session."""

    def __init__(self, session: Session) -> None:
        self.session = session

    def find_by_email(self, email: str) -> User | None:
        try:
            return (
                self.session.query(User)
                .filter(User.email == normalize_email(email))
                .first()
            )
        except SQLAlchemyError as e:
            logger.error("User lookup failed: %s", e)
            raise StorageError("User lookup failed") from e

    def insert(
        self,
        name: str,
        email: str,
        hashed_password: str,
        role: str = ROLE_USER,
    ) -> User:
        """
        Persist a new user and return it with id and created_at populated.

        Raises IdentityConflictError when the email is already taken (e.g. a
        concurrent registration won the race), StorageError on any other failure.
        """
        user = User(
            name=name,
            email=normalize_email(email),
            password=hashed_password,
            role=role,
        )
        try:
            self.session.add(user)
            self.session.commit()
            self.session.refresh(user)
        except IntegrityError as e:
            self.session.rollback()
            if is_unique_violation(e):
                logger.warning("User insert hit the unique email constraint for %s", user.email)
                raise IdentityConflictError("User with this email already exists") from e
            logger.error("User insert violated a constraint: %s", e)
            raise StorageError("User insert failed") from e
        except SQLAlchemyError as e:
            self.session.rollback()
            logger.error("User insert failed: %s", e)
            raise StorageError("User insert failed") from e
        return user

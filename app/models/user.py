"""ORM model for registered users."""

from sqlalchemy import Column, DateTime, Integer, String, func

from app.models.base import Base

ROLE_USER = "user"
ROLE_ADMIN = "admin"
# Role labels accepted at registration; carried into tokens, not enforced here.
ROLES = (ROLE_USER, ROLE_ADMIN)


class User(Base):
    """
    Registered user. Email is stored lowercased and is unique.

    password holds a bcrypt hash, never the plain value.
    """

    __tablename__ = "users"

    id = Column(Integer, primary_key=True, autoincrement=True)
    name = Column(String(255), nullable=False)
    email = Column(String(255), nullable=False, unique=True, index=True)
    password = Column(String(255), nullable=False)
    role = Column(String(32), nullable=False, default=ROLE_USER, server_default=ROLE_USER)
    created_at = Column(
        DateTime(timezone=True),
        nullable=False,
        server_default=func.now(),
    )
    updated_at = Column(
        DateTime(timezone=True),
        nullable=False,
        server_default=func.now(),
        onupdate=func.now(),
    )

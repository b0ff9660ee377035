"""Request/response schemas for auth endpoints."""

from datetime import datetime

from pydantic import BaseModel, ConfigDict, EmailStr, Field, field_validator

from app.models.user import ROLE_USER, ROLES

# Length limits for sign-up/sign-in input validation.
NAME_MIN_LEN = 2
NAME_MAX_LEN = 255
EMAIL_MAX_LEN = 255
PASSWORD_MIN_LEN = 6
PASSWORD_MAX_LEN = 128


def _normalize_email(value: object) -> object:
    if isinstance(value, str):
        value = value.strip().lower()
        if len(value) > EMAIL_MAX_LEN:
            raise ValueError(f"Email must be at most {EMAIL_MAX_LEN} characters")
    return value


class SignUpRequest(BaseModel):
    """Registration payload."""

    name: str = Field(..., min_length=NAME_MIN_LEN, max_length=NAME_MAX_LEN)
    email: EmailStr
    password: str = Field(..., min_length=PASSWORD_MIN_LEN, max_length=PASSWORD_MAX_LEN)
    role: str = ROLE_USER

    model_config = ConfigDict(
        json_schema_extra={
            "example": {
                "name": "Ann",
                "email": "a@example.com",
                "password": "secret123",
                "role": "user",
            },
        },
    )

    @field_validator("name", mode="before")
    @classmethod
    def strip_name(cls, v: object) -> object:
        return v.strip() if isinstance(v, str) else v

    @field_validator("role")
    @classmethod
    def validate_role(cls, v: str) -> str:
        if v not in ROLES:
            raise ValueError(f"Role must be one of: {', '.join(ROLES)}")
        return v

    @field_validator("email", mode="before")
    @classmethod
    def normalize_email(cls, v: object) -> object:
        return _normalize_email(v)


class SignInRequest(BaseModel):
    """Credentials for sign-in."""

    email: EmailStr
    password: str = Field(..., min_length=1, max_length=PASSWORD_MAX_LEN)

    @field_validator("email", mode="before")
    @classmethod
    def normalize_email(cls, v: object) -> object:
        return _normalize_email(v)


class UserPublic(BaseModel):
    """User as exposed to clients and callers (never includes the password)."""

    id: int
    name: str
    email: str
    role: str
    created_at: datetime | None = None

    model_config = ConfigDict(from_attributes=True)


class UserSummary(BaseModel):
    """User fields returned in auth responses."""

    id: int
    name: str
    email: str
    role: str


class AuthResponse(BaseModel):
    """Body of a successful sign-up or sign-in."""

    message: str
    user: UserSummary


class MessageResponse(BaseModel):
    message: str


class ErrorResponse(BaseModel):
    error: str
    details: str | None = None

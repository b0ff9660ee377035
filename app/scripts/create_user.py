"""
Create a user (e.g. the first admin) without going through the HTTP API.
Run from project root:
  python -m app.scripts.create_user NAME EMAIL PASSWORD [role]
Example:
  python -m app.scripts.create_user "Ann Admin" admin@example.com your-secure-password admin
"""
import argparse
import sys

from pydantic import ValidationError

from app.core.config import get_settings
from app.core.database import SessionLocal
from app.core.security import PasswordHasher
from app.core.tokens import get_token_service
from app.models.user import ROLE_USER, ROLES
from app.schemas.auth import SignUpRequest
from app.services.auth import AuthFailure, AuthService
from app.services.identity_store import UserStore


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Create an Acquisitions API user.")
    parser.add_argument("name", help="Display name (2-255 chars)")
    parser.add_argument("email", help="Email address (case-insensitive, must be unused)")
    parser.add_argument("password", help="Password (6-128 chars)")
    parser.add_argument("role", nargs="?", default=ROLE_USER, choices=list(ROLES))
    return parser


def main(argv: list[str] | None = None, session_factory=SessionLocal) -> int:
    args = build_parser().parse_args(argv)
    try:
        body = SignUpRequest(
            name=args.name,
            email=args.email,
            password=args.password,
            role=args.role,
        )
    except ValidationError as e:
        for err in e.errors():
            field = ".".join(str(p) for p in err["loc"])
            print(f"Invalid {field}: {err['msg']}", file=sys.stderr)
        return 1

    settings = get_settings()
    db = session_factory()
    try:
        auth = AuthService(
            store=UserStore(db),
            hasher=PasswordHasher(rounds=settings.BCRYPT_ROUNDS),
            tokens=get_token_service(),
        )
        result = auth.register(
            name=body.name,
            email=body.email,
            password=body.password,
            role=body.role,
        )
        if isinstance(result, AuthFailure):
            print(f"User '{body.email}' already exists.", file=sys.stderr)
            return 1
        user = result.user
        print(f"Created user '{user.email}' (id={user.id}) with role '{user.role}'.")
        return 0
    finally:
        db.close()


if __name__ == "__main__":
    sys.exit(main())

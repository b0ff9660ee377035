"""HTTP tests for /api/auth: sign-up, sign-in and sign-out against an in-memory database."""

import unittest
from unittest.mock import MagicMock

from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from app.api.auth import get_auth_service
from app.core.database import get_db
from app.core.errors import SigningError, StorageError
from app.core.tokens import get_token_service
from app.main import app
from app.models import Base

ANN = {"name": "Ann", "email": "a@x.com", "password": "secret123"}


def _session_factory() -> sessionmaker:
    """In-memory SQLite database with the users table."""
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(engine)
    return sessionmaker(bind=engine, autocommit=False, autoflush=False)


class ApiTestCase(unittest.TestCase):
    def setUp(self) -> None:
        factory = _session_factory()

        def override_get_db():
            db = factory()
            try:
                yield db
            finally:
                db.close()

        app.dependency_overrides[get_db] = override_get_db
        self.client = TestClient(app)

    def tearDown(self) -> None:
        app.dependency_overrides.clear()

    def sign_up(self, **overrides: object):
        return self.client.post("/api/auth/sign-up", json={**ANN, **overrides})


class TestSignUp(ApiTestCase):
    """POST /api/auth/sign-up."""

    def test_registers_user_and_sets_cookie(self) -> None:
        r = self.sign_up()
        self.assertEqual(r.status_code, 201)
        body = r.json()
        self.assertEqual(body["message"], "User registered")
        self.assertEqual(body["user"]["email"], "a@x.com")
        self.assertEqual(body["user"]["name"], "Ann")
        self.assertEqual(body["user"]["role"], "user")
        self.assertIsInstance(body["user"]["id"], int)
        self.assertNotIn("password", body["user"])
        self.assertIn("token", r.cookies)

        claims = get_token_service().verify(r.cookies["token"])
        self.assertEqual(claims.id, body["user"]["id"])
        self.assertEqual(claims.email, "a@x.com")
        self.assertEqual(claims.role, "user")

    def test_cookie_attributes(self) -> None:
        cookie = self.sign_up().headers["set-cookie"].lower()
        self.assertTrue(cookie.startswith("token="))
        self.assertIn("httponly", cookie)
        self.assertIn("samesite=strict", cookie)
        self.assertIn("max-age=86400", cookie)
        self.assertIn("path=/", cookie)

    def test_duplicate_email_returns_409(self) -> None:
        self.assertEqual(self.sign_up().status_code, 201)
        r = self.sign_up(name="Other Ann")
        self.assertEqual(r.status_code, 409)
        self.assertEqual(r.json(), {"error": "Email already registered"})
        self.assertNotIn("set-cookie", r.headers)

    def test_duplicate_email_differing_only_in_case(self) -> None:
        self.sign_up()
        r = self.sign_up(email="A@X.COM")
        self.assertEqual(r.status_code, 409)

    def test_email_is_lowercased(self) -> None:
        r = self.sign_up(email="Ann@Example.com")
        self.assertEqual(r.json()["user"]["email"], "ann@example.com")

    def test_admin_role(self) -> None:
        r = self.sign_up(role="admin")
        self.assertEqual(r.json()["user"]["role"], "admin")

    def test_validation_errors_return_400(self) -> None:
        cases = [
            {"name": "A"},
            {"email": "not-an-email"},
            {"password": "123"},
            {"role": "root"},
        ]
        for overrides in cases:
            with self.subTest(overrides=overrides):
                r = self.sign_up(**overrides)
                self.assertEqual(r.status_code, 400)
                body = r.json()
                self.assertEqual(body["error"], "Validation Failed")
                self.assertTrue(body["details"])

    def test_missing_body_returns_400(self) -> None:
        r = self.client.post("/api/auth/sign-up")
        self.assertEqual(r.status_code, 400)
        self.assertEqual(r.json()["error"], "Validation Failed")


class TestSignIn(ApiTestCase):
    """POST /api/auth/sign-in."""

    def setUp(self) -> None:
        super().setUp()
        self.registered = self.sign_up().json()["user"]

    def test_valid_credentials(self) -> None:
        r = self.client.post(
            "/api/auth/sign-in", json={"email": "a@x.com", "password": "secret123"}
        )
        self.assertEqual(r.status_code, 200)
        body = r.json()
        self.assertEqual(body["message"], "User signed in")
        self.assertEqual(body["user"], self.registered)
        claims = get_token_service().verify(r.cookies["token"])
        self.assertEqual(claims.id, self.registered["id"])

    def test_email_case_is_ignored(self) -> None:
        r = self.client.post(
            "/api/auth/sign-in", json={"email": "A@X.com", "password": "secret123"}
        )
        self.assertEqual(r.status_code, 200)

    def test_wrong_password_and_unknown_email_are_indistinguishable(self) -> None:
        wrong = self.client.post(
            "/api/auth/sign-in", json={"email": "a@x.com", "password": "wrong"}
        )
        unknown = self.client.post(
            "/api/auth/sign-in", json={"email": "nobody@x.com", "password": "secret123"}
        )
        self.assertEqual(wrong.status_code, 401)
        self.assertEqual(unknown.status_code, 401)
        self.assertEqual(wrong.json(), {"error": "Invalid credentials"})
        self.assertEqual(unknown.json(), wrong.json())
        self.assertNotIn("set-cookie", wrong.headers)

    def test_validation_error(self) -> None:
        r = self.client.post("/api/auth/sign-in", json={"email": "a@x.com"})
        self.assertEqual(r.status_code, 400)
        self.assertEqual(r.json()["error"], "Validation Failed")


class TestRegisterThenSignIn(ApiTestCase):
    """Register Ann, fail with a wrong password, then sign in with the right one."""

    def test_scenario(self) -> None:
        r = self.sign_up()
        self.assertEqual(r.status_code, 201)
        self.assertEqual(r.json()["user"]["email"], "a@x.com")
        self.assertNotIn("password", r.json()["user"])
        self.assertIn("token", r.cookies)

        r = self.client.post(
            "/api/auth/sign-in", json={"email": "a@x.com", "password": "wrong"}
        )
        self.assertEqual(r.status_code, 401)
        self.assertEqual(r.json(), {"error": "Invalid credentials"})

        r = self.client.post(
            "/api/auth/sign-in", json={"email": "a@x.com", "password": "secret123"}
        )
        self.assertEqual(r.status_code, 200)
        self.assertEqual(get_token_service().verify(r.cookies["token"]).email, "a@x.com")


class TestSignOut(ApiTestCase):
    """POST /api/auth/sign-out always succeeds and clears the cookie."""

    def assert_cleared(self, r) -> None:
        self.assertEqual(r.status_code, 200)
        self.assertEqual(r.json(), {"message": "User signed out"})
        cookie = r.headers["set-cookie"].lower()
        self.assertTrue(cookie.startswith("token="))
        self.assertIn("max-age=0", cookie)
        self.assertIn("httponly", cookie)
        self.assertIn("samesite=strict", cookie)

    def test_with_session(self) -> None:
        self.sign_up()
        self.assert_cleared(self.client.post("/api/auth/sign-out"))

    def test_without_session(self) -> None:
        self.assert_cleared(self.client.post("/api/auth/sign-out"))


class TestUnexpectedErrors(ApiTestCase):
    """An unanticipated exception still gets a generic 500, security headers and an access log line."""

    def setUp(self) -> None:
        super().setUp()
        self.client = TestClient(app, raise_server_exceptions=False)
        auth = MagicMock()
        auth.register.side_effect = RuntimeError("boom")
        app.dependency_overrides[get_auth_service] = lambda: auth

    def test_generic_500_with_headers(self) -> None:
        r = self.sign_up()
        self.assertEqual(r.status_code, 500)
        self.assertEqual(r.json(), {"error": "Internal Server Error"})
        self.assertEqual(r.headers["x-content-type-options"], "nosniff")
        self.assertEqual(r.headers["x-frame-options"], "DENY")
        self.assertEqual(r.headers["referrer-policy"], "no-referrer")
        self.assertIn("x-process-time", r.headers)

    def test_access_line_logged(self) -> None:
        with self.assertLogs("app.access", level="INFO") as logs:
            self.sign_up()
        self.assertTrue(
            any("POST /api/auth/sign-up 500" in line for line in logs.output)
        )


class TestInfrastructureFailures(ApiTestCase):
    """Infrastructure errors answer a generic 500 without details."""

    def test_storage_error(self) -> None:
        auth = MagicMock()
        auth.register.side_effect = StorageError("connection refused on 10.0.0.5")
        app.dependency_overrides[get_auth_service] = lambda: auth
        r = self.sign_up()
        self.assertEqual(r.status_code, 500)
        self.assertEqual(r.json(), {"error": "Internal Server Error"})

    def test_signing_error(self) -> None:
        auth = MagicMock()
        auth.authenticate.side_effect = SigningError("Failed to sign token")
        app.dependency_overrides[get_auth_service] = lambda: auth
        r = self.client.post(
            "/api/auth/sign-in", json={"email": "a@x.com", "password": "secret123"}
        )
        self.assertEqual(r.status_code, 500)
        self.assertNotIn("sign", r.text.lower())


if __name__ == "__main__":
    unittest.main()

"""API tests for /api/auth: register, login and the token dependency."""

import unittest
from datetime import UTC, datetime, timedelta

import jwt

from tests.base import TEST_PASSWORD, ApiTestCase


class TestRegister(ApiTestCase):
    def test_register_returns_token_and_user(self) -> None:
        resp = self.register()
        self.assertEqual(resp.status_code, 201)
        data = resp.json()
        self.assertTrue(data["token"])
        self.assertEqual(data["user"]["username"], "alice")
        self.assertEqual(data["user"]["email"], "alice@example.com")
        self.assertEqual(data["user"]["role"], "user")
        self.assertNotIn("password", data["user"])
        self.assertNotIn("password_hash", data["user"])

    def test_duplicate_username_rejected(self) -> None:
        self.assertEqual(self.register().status_code, 201)
        resp = self.register(email="other@example.com")
        self.assertEqual(resp.status_code, 400)
        self.assertEqual(resp.json(), {"error": "Username or email already exists"})

    def test_duplicate_email_rejected(self) -> None:
        self.assertEqual(self.register().status_code, 201)
        resp = self.register(username="someone-else")
        self.assertEqual(resp.status_code, 400)
        self.assertEqual(resp.json(), {"error": "Username or email already exists"})

    def test_invalid_inputs_rejected(self) -> None:
        cases = [
            ({"username": "ab", "email": "ab@example.com", "password": TEST_PASSWORD}, "Username"),
            ({"username": "bob", "email": "nope", "password": TEST_PASSWORD}, "email"),
            ({"username": "bob", "email": "bob@example.com", "password": "123"}, "Password"),
            ({"email": "bob@example.com", "password": TEST_PASSWORD}, "username"),
        ]
        for body, fragment in cases:
            with self.subTest(body=body):
                resp = self.client.post("/api/auth/register", json=body)
                self.assertEqual(resp.status_code, 400)
                self.assertIn(fragment, resp.json()["error"])


class TestLogin(ApiTestCase):
    def setUp(self) -> None:
        super().setUp()
        self.assertEqual(self.register().status_code, 201)

    def test_login_success(self) -> None:
        resp = self.client.post(
            "/api/auth/login",
            json={"email": "alice@example.com", "password": TEST_PASSWORD},
        )
        self.assertEqual(resp.status_code, 200)
        data = resp.json()
        self.assertEqual(data["user"]["username"], "alice")
        me = self.client.get("/api/auth/me", headers={"Authorization": f"Bearer {data['token']}"})
        self.assertEqual(me.status_code, 200)
        self.assertEqual(me.json()["email"], "alice@example.com")

    def test_wrong_password_and_unknown_email_look_the_same(self) -> None:
        wrong = self.client.post(
            "/api/auth/login",
            json={"email": "alice@example.com", "password": "wrong-password"},
        )
        unknown = self.client.post(
            "/api/auth/login",
            json={"email": "nobody@example.com", "password": TEST_PASSWORD},
        )
        self.assertEqual(wrong.status_code, 401)
        self.assertEqual(unknown.status_code, 401)
        self.assertEqual(wrong.json(), unknown.json())
        self.assertEqual(wrong.json(), {"error": "Invalid email or password"})

    def test_malformed_login_is_validation_error(self) -> None:
        bad_email = self.client.post("/api/auth/login", json={"email": "alice", "password": "x"})
        empty_password = self.client.post(
            "/api/auth/login", json={"email": "alice@example.com", "password": ""}
        )
        self.assertEqual(bad_email.status_code, 400)
        self.assertEqual(empty_password.status_code, 400)
        self.assertEqual(empty_password.json(), {"error": "Password is required"})

    def test_admin_role_reflected_in_token(self) -> None:
        headers = self.admin_headers()
        me = self.client.get("/api/auth/me", headers=headers)
        self.assertEqual(me.json()["role"], "admin")


class TestTokenDependency(ApiTestCase):
    def _token(self, **overrides: object) -> str:
        now = datetime.now(UTC)
        claims: dict[str, object] = {
            "sub": "1",
            "id": 1,
            "username": "alice",
            "email": "alice@example.com",
            "role": "user",
            "iat": now,
            "exp": now + timedelta(hours=1),
        }
        claims.update(overrides)
        return jwt.encode(claims, "test-secret", algorithm="HS256")

    def test_missing_header(self) -> None:
        resp = self.client.get("/api/auth/me")
        self.assertEqual(resp.status_code, 401)
        self.assertEqual(resp.json(), {"error": "Not authenticated"})
        self.assertEqual(resp.headers.get("www-authenticate"), "Bearer")

    def test_non_bearer_scheme(self) -> None:
        resp = self.client.get("/api/auth/me", headers={"Authorization": f"Basic {self._token()}"})
        self.assertEqual(resp.status_code, 401)

    def test_expired_token(self) -> None:
        token = self._token(exp=datetime.now(UTC) - timedelta(seconds=5))
        resp = self.client.get("/api/auth/me", headers={"Authorization": f"Bearer {token}"})
        self.assertEqual(resp.status_code, 401)
        self.assertEqual(resp.json(), {"error": "Invalid or expired token"})

    def test_garbage_token(self) -> None:
        resp = self.client.get("/api/auth/me", headers={"Authorization": "Bearer not.a.jwt"})
        self.assertEqual(resp.status_code, 401)

    def test_identity_comes_from_claims(self) -> None:
        token = self._token(id=42, sub="42", username="carol", email="carol@example.com", role="admin")
        resp = self.client.get("/api/auth/me", headers={"Authorization": f"Bearer {token}"})
        self.assertEqual(resp.status_code, 200)
        self.assertEqual(
            resp.json(),
            {"id": 42, "username": "carol", "email": "carol@example.com", "role": "admin"},
        )


if __name__ == "__main__":
    unittest.main()

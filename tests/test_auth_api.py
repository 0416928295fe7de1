import unittest
import uuid
from unittest import mock

from app.routers import auth as auth_router
from tests.support import ApiTestCase


class AuthApiTests(ApiTestCase):
    def register(self, email="dj@example.com", password="hunter22", name="DJ Nova"):
        return self.client.post(
            "/api/auth/register",
            json={"email": email, "password": password, "name": name},
        )

    def test_register_returns_user_and_token(self):
        response = self.register()
        self.assertEqual(response.status_code, 201, response.text)
        payload = response.json()
        self.assertEqual(payload["user"]["email"], "dj@example.com")
        self.assertFalse(payload["user"]["is_admin"])
        self.assertNotIn("password_hash", payload["user"])
        self.assertTrue(payload["token"])

    def test_register_twice_conflicts(self):
        self.assertEqual(self.register().status_code, 201)
        response = self.register(name="Someone Else")
        self.assertEqual(response.status_code, 400)
        self.assertEqual(response.json()["detail"], "Email already registered")

    def test_register_validation_errors(self):
        response = self.register(email="not-an-email", password="123", name="x")
        self.assertEqual(response.status_code, 400)
        fields = {tuple(err["loc"])[-1] for err in response.json()["detail"]}
        self.assertEqual(fields, {"email", "password", "name"})

    def test_password_limit_counts_bytes(self):
        # 40 characters, 80 UTF-8 bytes
        response = self.register(password="\u00e9" * 40)
        self.assertEqual(response.status_code, 400)
        self.assertEqual(response.json()["detail"][0]["loc"][-1], "password")

        ok = self.register(email="multibyte@example.com", password="\u00e9" * 36)
        self.assertEqual(ok.status_code, 201, ok.text)

    def test_login(self):
        self.register()
        response = self.client.post(
            "/api/auth/login",
            json={"email": "dj@example.com", "password": "hunter22"},
        )
        self.assertEqual(response.status_code, 200, response.text)
        self.assertEqual(response.json()["user"]["name"], "DJ Nova")

    def test_login_failures_look_the_same(self):
        self.register()
        wrong_password = self.client.post(
            "/api/auth/login",
            json={"email": "dj@example.com", "password": "nope-nope"},
        )
        unknown_email = self.client.post(
            "/api/auth/login",
            json={"email": "ghost@example.com", "password": "hunter22"},
        )
        self.assertEqual(wrong_password.status_code, 401)
        self.assertEqual(unknown_email.status_code, 401)
        self.assertEqual(wrong_password.json(), unknown_email.json())

    def test_phone_auth_find_or_create(self):
        first = self.client.post(
            "/api/auth/phone-auth",
            json={"phone": "+919876543210", "name": "Riya"},
        )
        self.assertEqual(first.status_code, 200, first.text)
        user = first.json()["user"]
        self.assertIsNone(user["email"])

        again = self.client.post(
            "/api/auth/phone-auth",
            json={"phone": "+919876543210", "name": "Riya Sharma"},
        )
        self.assertEqual(again.status_code, 200)
        self.assertEqual(again.json()["user"]["id"], user["id"])
        self.assertEqual(again.json()["user"]["name"], "Riya Sharma")

    def test_phone_auth_race_returns_existing_user(self):
        first = self.client.post(
            "/api/auth/phone-auth",
            json={"phone": "+919876543210", "name": "Riya"},
        ).json()["user"]

        real_lookup = auth_router.repo.get_by_phone
        lookups = []

        def stale_first_lookup(session, phone):
            # The first lookup misses, as if another request inserted the row meanwhile
            lookups.append(phone)
            if len(lookups) == 1:
                return None
            return real_lookup(session, phone)

        with mock.patch.object(auth_router.repo, "get_by_phone", side_effect=stale_first_lookup):
            response = self.client.post(
                "/api/auth/phone-auth",
                json={"phone": "+919876543210", "name": "Riya"},
            )

        self.assertEqual(response.status_code, 200, response.text)
        self.assertEqual(response.json()["user"]["id"], first["id"])
        self.assertEqual(len(lookups), 2)

    def test_phone_auth_short_phone_rejected(self):
        response = self.client.post(
            "/api/auth/phone-auth", json={"phone": "12345", "name": "Riya"}
        )
        self.assertEqual(response.status_code, 400)

    def test_me_with_token(self):
        token = self.register().json()["token"]
        response = self.client.get(
            "/api/auth/me", headers={"Authorization": f"Bearer {token}"}
        )
        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.json()["email"], "dj@example.com")

    def test_me_for_deleted_user_is_404(self):
        response = self.client.get("/api/auth/me", headers=self.auth_headers(uuid.uuid4()))
        self.assertEqual(response.status_code, 404)

    def test_missing_malformed_and_invalid_tokens_are_401(self):
        for headers in (
            {},
            {"Authorization": "Token abc"},
            {"Authorization": "Bearer"},
            {"Authorization": "Bearer not-a-token"},
        ):
            response = self.client.get("/api/auth/me", headers=headers)
            self.assertEqual(response.status_code, 401, headers)
            self.assertEqual(response.json()["detail"], "Invalid or missing token")


if __name__ == "__main__":
    unittest.main()

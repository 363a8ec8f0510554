import unittest

from quizdesk.db.base import SessionLocal, engine
from quizdesk.db.init_db import init_db
from quizdesk.db.store import DocumentStore
from quizdesk.models import Base
from tests.base import API, ApiTestCase


class AuthApiTests(ApiTestCase):
    def test_signup_creates_profile_with_role(self) -> None:
        user = self.signup("Ada@School.org", role="admin", name="Ada")

        self.assertEqual(user["email"], "ada@school.org")
        self.assertEqual(user["role"], "admin")
        self.assertEqual(user["display_name"], "Ada")
        self.assertNotIn("hashed_password", user)

    def test_duplicate_email_is_rejected(self) -> None:
        self.signup("sam@school.org")

        response = self.client.post(
            f"{API}/auth/signup",
            json={"email": "SAM@school.org", "password": "another1", "display_name": "Sam", "role": "student"},
        )

        self.assertEqual(response.status_code, 400)
        self.assertEqual(response.json()["detail"], "Email already registered")

    def test_login_returns_token_and_role(self) -> None:
        self.signup("ada@school.org", role="admin")

        response = self.client.post(
            f"{API}/auth/login", data={"username": "ada@school.org", "password": "secret123"}
        )

        body = response.json()
        self.assertEqual(response.status_code, 200)
        self.assertEqual(body["token_type"], "bearer")
        self.assertEqual(body["role"], "admin")

    def test_wrong_password_is_rejected(self) -> None:
        self.signup("sam@school.org")

        response = self.client.post(
            f"{API}/auth/login", data={"username": "sam@school.org", "password": "nope"}
        )

        self.assertEqual(response.status_code, 401)
        self.assertEqual(response.json()["detail"], "Incorrect email or password")

    def test_me_requires_a_token(self) -> None:
        self.assertEqual(self.client.get(f"{API}/auth/me").status_code, 401)

    def test_logout_revokes_the_token(self) -> None:
        headers = self.account("sam@school.org", name="Sam")
        self.assertEqual(self.client.get(f"{API}/auth/me", headers=headers).json()["display_name"], "Sam")

        response = self.client.post(f"{API}/auth/logout", headers=headers)

        self.assertEqual(response.status_code, 200)
        self.assertEqual(self.client.get(f"{API}/auth/me", headers=headers).status_code, 401)
        self.assertEqual(self.client.get(f"{API}/dashboard", headers=headers).status_code, 401)

    def test_student_cannot_reach_admin_pages(self) -> None:
        headers = self.account("sam@school.org")

        response = self.client.get(f"{API}/admin/quizzes", headers=headers)

        self.assertEqual(response.status_code, 403)
        self.assertEqual(response.json()["redirect_to"], "/dashboard")

    def test_admin_cannot_take_quizzes(self) -> None:
        headers = self.account("ada@school.org", role="admin")

        response = self.client.get(f"{API}/student/quizzes", headers=headers)

        self.assertEqual(response.status_code, 403)

    def test_tampered_token_is_rejected(self) -> None:
        headers = self.account("sam@school.org")
        headers["Authorization"] = headers["Authorization"].rsplit(".", 1)[0] + ".not-a-signature"

        self.assertEqual(self.client.get(f"{API}/auth/me", headers=headers).status_code, 401)


class SeedAdminTests(unittest.TestCase):
    def setUp(self) -> None:
        Base.metadata.create_all(bind=engine)
        self.db = SessionLocal()

    def tearDown(self) -> None:
        self.db.close()
        Base.metadata.drop_all(bind=engine)

    def test_seeding_is_idempotent(self) -> None:
        first = init_db(self.db)
        second = init_db(self.db)

        self.assertEqual(first.id, second.id)
        self.assertEqual(first.role, "admin")
        self.assertEqual(len(DocumentStore(self.db).users.query(role="admin")), 1)


if __name__ == "__main__":
    unittest.main()

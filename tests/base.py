"""API test case: fresh in-memory database and quiz runner per test."""
import unittest
from typing import Any, Dict, List, Optional

from fastapi.testclient import TestClient

from quizdesk.core.config import settings
from quizdesk.db.base import engine
from quizdesk.main import app
from quizdesk.models import Base
from quizdesk.services.quiz_runner import QuizRunner
from tests.fixtures import FakeClock

API = settings.API_V1_PREFIX


class ApiTestCase(unittest.TestCase):
    def setUp(self) -> None:
        Base.metadata.create_all(bind=engine)
        self.clock = FakeClock()
        self.runner = QuizRunner(clock=self.clock)
        app.state.quiz_runner = self.runner
        self.client = TestClient(app)

    def tearDown(self) -> None:
        self.client.close()
        Base.metadata.drop_all(bind=engine)

    # ----- accounts -----

    def signup(self, email: str, role: str = "student", name: Optional[str] = None) -> Dict[str, Any]:
        response = self.client.post(
            f"{API}/auth/signup",
            json={
                "email": email,
                "password": "secret123",
                "display_name": name or email.split("@")[0].title(),
                "role": role,
            },
        )
        self.assertEqual(response.status_code, 201, response.text)
        return response.json()

    def login(self, email: str, password: str = "secret123") -> Dict[str, str]:
        response = self.client.post(
            f"{API}/auth/login", data={"username": email, "password": password}
        )
        self.assertEqual(response.status_code, 200, response.text)
        return {"Authorization": f"Bearer {response.json()['access_token']}"}

    def account(self, email: str, role: str = "student", name: Optional[str] = None) -> Dict[str, str]:
        self.signup(email, role, name)
        return self.login(email)

    # ----- quizzes -----

    def create_quiz(
        self,
        headers: Dict[str, str],
        questions: List[Dict[str, Any]],
        title: str = "Capitals",
        pass_threshold: int = 60,
        time_limit: Optional[int] = None,
        draft: bool = False,
    ) -> Dict[str, Any]:
        payload = {
            "title": title,
            "description": f"{title} quiz",
            "pass_threshold": pass_threshold,
            "time_limit": time_limit,
            "questions": questions,
        }
        response = self.client.post(
            f"{API}/admin/quizzes",
            json=payload,
            params={"draft": draft},
            headers=headers,
        )
        self.assertEqual(response.status_code, 201, response.text)
        return response.json()

    def take(self, headers: Dict[str, str], quiz_id: str, answers: Dict[str, str], submit: bool = True):
        """Open a quiz, select the given answers and optionally submit it."""
        response = self.client.get(f"{API}/student/quizzes/{quiz_id}", headers=headers)
        self.assertEqual(response.status_code, 200, response.text)
        for question_id, option_id in answers.items():
            response = self.client.post(
                f"{API}/student/quizzes/{quiz_id}/answers",
                json={"question_id": question_id, "option_id": option_id},
                headers=headers,
            )
            self.assertEqual(response.status_code, 200, response.text)
        if submit:
            response = self.client.post(f"{API}/student/quizzes/{quiz_id}/submit", headers=headers)
        return response

import unittest
from unittest import mock

from sqlalchemy.exc import OperationalError

from quizdesk.core.exceptions import StoreUnavailable
from quizdesk.db.base import SessionLocal, engine
from quizdesk.db.store import Collection, DocumentStore
from quizdesk.models import Base
from tests.base import API, ApiTestCase
from tests.fixtures import mc_questions, right


class CollectionTests(unittest.TestCase):
    def setUp(self) -> None:
        Base.metadata.create_all(bind=engine)
        self.db = SessionLocal()
        self.store = DocumentStore(self.db)

    def tearDown(self) -> None:
        self.db.close()
        Base.metadata.drop_all(bind=engine)

    def add_attempt(self, student_id: str, score: int):
        return self.store.attempts.add(
            quiz_id="quiz-1",
            quiz_title="Capitals",
            student_id=student_id,
            quiz_created_by="admin-1",
            score=score,
            passed=score >= 60,
            answers={},
        )

    def test_add_assigns_id(self) -> None:
        attempt = self.add_attempt("s1", 80)

        self.assertEqual(len(attempt.id), 32)
        self.assertIsNotNone(attempt.completed_at)
        self.assertEqual(self.store.attempts.get(attempt.id).score, 80)

    def test_query_filters_orders_and_limits(self) -> None:
        for score in (40, 90, 70):
            self.add_attempt("s1", score)
        self.add_attempt("s2", 100)

        found = self.store.attempts.query(student_id="s1", order_by="score", descending=True, limit=2)

        self.assertEqual([a.score for a in found], [90, 70])
        self.assertEqual(self.store.attempts.first(student_id="s2").score, 100)
        self.assertIsNone(self.store.attempts.first(student_id="s3"))

    def test_update_and_delete_by_id(self) -> None:
        attempt = self.add_attempt("s1", 10)

        self.assertEqual(self.store.attempts.update(attempt.id, score=20).score, 20)
        self.assertTrue(self.store.attempts.delete(attempt.id))
        self.assertFalse(self.store.attempts.delete(attempt.id))
        self.assertIsNone(self.store.attempts.update(attempt.id, score=30))

    def test_driver_errors_become_store_unavailable(self) -> None:
        error = OperationalError("SELECT", {}, Exception("database is locked"))
        with mock.patch.object(self.db, "get", side_effect=error):
            with self.assertRaises(StoreUnavailable) as ctx:
                self.store.quizzes.get("quiz-1")

        self.assertEqual(ctx.exception.detail, "Failed to load quizzes")
        self.assertEqual(ctx.exception.status_code, 503)


class StoreFailureApiTests(ApiTestCase):
    def setUp(self) -> None:
        super().setUp()
        self.admin = self.account("ada@school.org", role="admin")
        self.student = self.account("sam@school.org")

    def test_failed_list_is_reported_not_empty(self) -> None:
        with mock.patch.object(Collection, "query", side_effect=StoreUnavailable("Failed to load quizzes")):
            admin_list = self.client.get(f"{API}/admin/quizzes", headers=self.admin).json()
            results = self.client.get(f"{API}/student/results", headers=self.student).json()
            dashboard = self.client.get(f"{API}/dashboard", headers=self.student).json()

        self.assertEqual(admin_list, {"items": [], "error": "Failed to load quizzes"})
        self.assertEqual(results["error"], "Failed to load quiz results")
        self.assertEqual(dashboard["error"], "Failed to load dashboard data")
        self.assertEqual(dashboard["available_quizzes"], [])

    def test_failed_submit_keeps_the_quiz_open_for_retry(self) -> None:
        quiz = self.create_quiz(self.admin, mc_questions(1))
        self.take(self.student, quiz["id"], {"q1": right("q1")}, submit=False)
        submit_url = f"{API}/student/quizzes/{quiz['id']}/submit"

        with mock.patch.object(Collection, "add", side_effect=StoreUnavailable("Failed to save attempts")):
            failed = self.client.post(submit_url, headers=self.student)

        self.assertEqual(failed.status_code, 503)
        self.assertEqual(failed.json()["detail"], "Failed to submit quiz")
        still_open = self.client.get(f"{API}/student/quizzes/{quiz['id']}", headers=self.student).json()
        self.assertEqual(still_open["state"], "active")
        self.assertEqual(still_open["answers"], {"q1": right("q1")})

        retried = self.client.post(submit_url, headers=self.student).json()
        self.assertEqual(retried["state"], "done")
        self.assertEqual(retried["score"], 100)


if __name__ == "__main__":
    unittest.main()

import unittest

from quizdesk.core.exceptions import InvalidFlowState, QuestionsRemaining, ValidationFailed
from quizdesk.core.quiz_flow import Countdown, FlowState, QuizTakingFlow
from tests.fixtures import FakeClock, mc_questions, quiz_document, right, wrong


def active_flow(count: int = 3, time_limit=None, pass_threshold: int = 60, clock=None) -> QuizTakingFlow:
    flow = QuizTakingFlow("quiz-1", "student-1", "Sam", clock=clock or FakeClock())
    flow.load(quiz_document(mc_questions(count), pass_threshold=pass_threshold, time_limit=time_limit))
    return flow


class CountdownTests(unittest.TestCase):
    def test_fires_exactly_once_at_zero(self) -> None:
        clock = FakeClock()
        countdown = Countdown(60, clock)

        clock.advance(59.5)
        self.assertFalse(countdown.tick())
        self.assertEqual(countdown.remaining, 1)

        clock.advance(0.5)
        self.assertTrue(countdown.tick())
        self.assertTrue(countdown.expired)

        clock.advance(10)
        self.assertFalse(countdown.tick())
        self.assertEqual(countdown.remaining, 0)

    def test_late_tick_still_fires_once(self) -> None:
        clock = FakeClock()
        countdown = Countdown(30, clock)

        clock.advance(600)

        self.assertTrue(countdown.tick())
        self.assertFalse(countdown.tick())


class LoadingTests(unittest.TestCase):
    def test_missing_quiz_is_an_error(self) -> None:
        flow = QuizTakingFlow("quiz-1", "student-1")

        self.assertEqual(flow.load(None), FlowState.ERROR)
        self.assertEqual(flow.error, "Quiz not found")

    def test_unpublished_quiz_is_not_available(self) -> None:
        flow = QuizTakingFlow("quiz-1", "student-1")

        flow.load(quiz_document(mc_questions(2), published=False))

        self.assertEqual(flow.state, FlowState.ERROR)
        self.assertEqual(flow.error, "This quiz is not available")

    def test_existing_attempt_blocks_the_flow(self) -> None:
        flow = QuizTakingFlow("quiz-1", "student-1")

        flow.block("attempt-9")

        self.assertEqual(flow.state, FlowState.BLOCKED)
        self.assertEqual(flow.attempt_id, "attempt-9")
        with self.assertRaises(InvalidFlowState):
            flow.select("q1", right("q1"))

    def test_untimed_quiz_has_no_countdown(self) -> None:
        clock = FakeClock()
        flow = active_flow(time_limit=None, clock=clock)

        clock.advance(10_000)

        self.assertIsNone(flow.countdown)
        self.assertIsNone(flow.remaining_seconds)
        self.assertFalse(flow.tick())
        self.assertFalse(flow.time_expired)
        with self.assertRaises(QuestionsRemaining):
            flow.begin_submission()

    def test_timed_quiz_counts_down_from_minutes(self) -> None:
        clock = FakeClock()
        flow = active_flow(time_limit=2, clock=clock)

        self.assertEqual(flow.remaining_seconds, 120)
        clock.advance(45)
        flow.tick()
        self.assertEqual(flow.remaining_seconds, 75)


class ActiveTests(unittest.TestCase):
    def test_navigation_is_clamped(self) -> None:
        flow = active_flow(count=3)

        self.assertEqual(flow.previous(), 0)
        self.assertEqual(flow.next(), 1)
        self.assertEqual(flow.next(), 2)
        self.assertEqual(flow.next(), 2)
        self.assertEqual(flow.jump(0), 0)
        with self.assertRaises(ValidationFailed):
            flow.jump(3)

    def test_selection_replaces_earlier_choice(self) -> None:
        flow = active_flow(count=3)

        flow.select("q1", wrong("q1"))
        flow.select("q1", right("q1"))

        self.assertEqual(flow.answers, {"q1": right("q1")})
        self.assertEqual(flow.unanswered_count(), 2)

    def test_navigation_keeps_answers(self) -> None:
        flow = active_flow(count=3)

        flow.select("q1", right("q1"))
        flow.next()
        flow.previous()

        self.assertEqual(flow.answers["q1"], right("q1"))

    def test_unknown_question_or_option_is_rejected(self) -> None:
        flow = active_flow(count=2)

        with self.assertRaises(ValidationFailed):
            flow.select("q9", "q9-0")
        with self.assertRaises(ValidationFailed):
            flow.select("q1", "q2-0")


class SubmissionTests(unittest.TestCase):
    def test_manual_submit_requires_every_answer(self) -> None:
        flow = active_flow(count=5)
        for qid in ("q1", "q2", "q3"):
            flow.select(qid, right(qid))

        with self.assertRaises(QuestionsRemaining) as ctx:
            flow.begin_submission()

        self.assertEqual(ctx.exception.remaining, 2)
        self.assertIn("(2 remaining)", ctx.exception.detail)
        self.assertEqual(flow.state, FlowState.ACTIVE)
        self.assertFalse(flow.submission_triggered)

    def test_manual_submit_grades_and_completes(self) -> None:
        flow = active_flow(count=4, pass_threshold=60)
        for qid in ("q1", "q2", "q3"):
            flow.select(qid, right(qid))
        flow.select("q4", wrong("q4"))

        result = flow.begin_submission()
        flow.complete("attempt-1")

        self.assertEqual(result.score, 75)
        self.assertTrue(result.passed)
        self.assertEqual(flow.state, FlowState.DONE)
        self.assertFalse(flow.forced)

    def test_submission_triggers_only_once(self) -> None:
        flow = active_flow(count=1)
        flow.select("q1", right("q1"))

        flow.begin_submission()

        with self.assertRaises(InvalidFlowState):
            flow.begin_submission(forced=True)
        self.assertEqual(flow.state, FlowState.SUBMITTING)

    def test_expiry_forces_submission_with_unanswered_questions(self) -> None:
        clock = FakeClock()
        flow = active_flow(count=3, time_limit=1, pass_threshold=50, clock=clock)
        flow.select("q1", right("q1"))

        clock.advance(60)
        self.assertTrue(flow.tick())
        result = flow.begin_submission(forced=True)

        self.assertTrue(flow.forced)
        self.assertEqual(result.score, 33)
        self.assertFalse(result.passed)

    def test_failed_persist_returns_to_active_for_retry(self) -> None:
        flow = active_flow(count=1)
        flow.select("q1", right("q1"))
        flow.begin_submission()

        flow.abort_submission()

        self.assertEqual(flow.state, FlowState.ACTIVE)
        self.assertFalse(flow.submission_triggered)
        self.assertEqual(flow.answers, {"q1": right("q1")})
        flow.begin_submission()
        self.assertEqual(flow.state, FlowState.SUBMITTING)

    def test_retry_after_expiry_skips_the_answer_gate(self) -> None:
        clock = FakeClock()
        flow = active_flow(count=2, time_limit=1, clock=clock)
        clock.advance(61)
        flow.tick()
        flow.begin_submission(forced=True)
        flow.abort_submission()

        flow.begin_submission()

        self.assertTrue(flow.forced)


if __name__ == "__main__":
    unittest.main()

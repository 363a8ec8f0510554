"""
Hosts quiz-taking flows for the lifetime of each take session.

One flow exists per (student, quiz) while the student is taking it. Every
request that touches a flow first applies the elapsed countdown time, and a
background sweeper does the same once per interval, so a timed quiz is
force-submitted at zero even when the student has gone idle. All flow
mutation happens under one lock.
"""
import asyncio
import logging
import threading
import time
from typing import Any, Callable, Dict, Optional, Tuple

from sqlalchemy.orm import Session

from quizdesk.core.config import settings
from quizdesk.core.exceptions import NotFound, QuizDeskError, StoreUnavailable
from quizdesk.core.grading import GradeResult, count_correct
from quizdesk.core.quiz_flow import Clock, FlowState, QuizTakingFlow
from quizdesk.core.session import UserSession
from quizdesk.db.base import SessionLocal
from quizdesk.db.store import DocumentStore
from quizdesk.models.quiz import Quiz

logger = logging.getLogger(__name__)

QUIZ_LIST_PATH = "/student/quizzes"

FlowKey = Tuple[str, str]


def result_path(attempt_id: str) -> str:
    return f"/student/results/{attempt_id}"


def quiz_snapshot(quiz: Quiz) -> Dict[str, Any]:
    """The in-memory copy of a quiz document a flow works from."""
    return {
        "id": quiz.id,
        "title": quiz.title,
        "description": quiz.description,
        "pass_threshold": quiz.pass_threshold,
        "time_limit": quiz.time_limit,
        "questions": list(quiz.questions or []),
        "is_published": bool(quiz.is_published),
        "created_by": quiz.created_by,
    }


class QuizRunner:
    """Registry of in-progress flows and the countdown sweeper that drives them."""

    def __init__(
        self,
        session_factory: Callable[[], Session] = SessionLocal,
        clock: Clock = time.monotonic,
        idle_timeout: Optional[float] = None,
    ):
        self._session_factory = session_factory
        self._clock = clock
        self._idle_timeout = (
            idle_timeout if idle_timeout is not None else settings.TAKE_SESSION_IDLE_SECONDS
        )
        self._flows: Dict[FlowKey, QuizTakingFlow] = {}
        self._lock = threading.RLock()

    def __len__(self) -> int:
        return len(self._flows)

    # ----- take session lifecycle -----

    def open(self, store: DocumentStore, session: UserSession, quiz_id: str) -> QuizTakingFlow:
        """
        Start or resume taking a quiz.

        Returns a BLOCKED flow when the student already has an attempt for the
        quiz, otherwise the ACTIVE (or just completed) flow.

        Raises:
            NotFound: If the quiz is missing or not published
            StoreUnavailable: If the quiz could not be loaded
        """
        key = (session.user_id, quiz_id)
        with self._lock:
            flow = self._flows.get(key)
            if flow is not None:
                flow.touch()
                try:
                    self._ensure_available(flow, store)
                except StoreUnavailable:
                    raise StoreUnavailable("Failed to load quiz", redirect_to=QUIZ_LIST_PATH)
                self._advance(flow, store)
                return flow

            flow = QuizTakingFlow(
                quiz_id=quiz_id,
                student_id=session.user_id,
                student_name=session.display_name,
                clock=self._clock,
            )
            try:
                existing = store.attempts.first(quiz_id=quiz_id, student_id=session.user_id)
                if existing is not None:
                    flow.block(existing.id)
                    return flow
                quiz = store.quizzes.get(quiz_id)
            except StoreUnavailable:
                flow.fail("Failed to load quiz")
                raise StoreUnavailable("Failed to load quiz", redirect_to=QUIZ_LIST_PATH)

            if flow.load(quiz_snapshot(quiz) if quiz else None) == FlowState.ERROR:
                logger.info(f"Student {session.user_id} cannot take quiz {quiz_id}: {flow.error}")
                raise NotFound(flow.error, redirect_to=QUIZ_LIST_PATH)

            self._flows[key] = flow
            logger.info(
                f"Student {session.user_id} started quiz {quiz_id} "
                f"(time limit: {flow.quiz.get('time_limit') or 'none'})"
            )
            return flow

    def leave(self, session: UserSession, quiz_id: str) -> bool:
        """Discard an unfinished flow; nothing is persisted."""
        with self._lock:
            flow = self._flows.get((session.user_id, quiz_id))
            if flow is None or flow.submission_triggered:
                return False
            del self._flows[(session.user_id, quiz_id)]
            logger.info(f"Student {session.user_id} left quiz {quiz_id} without submitting")
            return True

    # ----- active operations -----

    def select(
        self,
        store: DocumentStore,
        session: UserSession,
        quiz_id: str,
        question_id: str,
        option_id: str,
    ) -> QuizTakingFlow:
        with self._lock:
            flow = self._get(session, quiz_id)
            if not self._advance(flow, store):
                flow.select(question_id, option_id)
            return flow

    def navigate(
        self,
        store: DocumentStore,
        session: UserSession,
        quiz_id: str,
        action: str,
        index: Optional[int] = None,
    ) -> QuizTakingFlow:
        with self._lock:
            flow = self._get(session, quiz_id)
            if self._advance(flow, store):
                return flow
            if action == "next":
                flow.next()
            elif action == "previous":
                flow.previous()
            else:
                flow.jump(index if index is not None else -1)
            return flow

    def submit(self, store: DocumentStore, session: UserSession, quiz_id: str) -> QuizTakingFlow:
        """Manual submission; rejected while questions remain unless time is up."""
        with self._lock:
            flow = self._get(session, quiz_id)
            if not self._advance(flow, store):
                self._submit(flow, store, forced=False)
            return flow

    # ----- countdown -----

    def expire_due(self) -> int:
        """
        Force-submit every flow whose countdown has reached zero.

        Expired flows whose forced save failed earlier are retried on every
        sweep. Idle flows are discarded first (see evict_idle).

        Returns:
            Number of forced submissions attempted
        """
        with self._lock:
            self.evict_idle()
            due = []
            for flow in self._flows.values():
                if flow.tick():
                    flow.touch()
                    due.append(flow)
                elif flow.time_expired and flow.state == FlowState.ACTIVE:
                    due.append(flow)
            if not due:
                return 0
            db = self._session_factory()
            try:
                store = DocumentStore(db)
                for flow in due:
                    logger.info(
                        f"Time is up for student {flow.student_id} on quiz {flow.quiz_id}"
                    )
                    try:
                        self._submit(flow, store, forced=True)
                    except QuizDeskError as e:
                        logger.error(
                            f"Forced submission failed for student {flow.student_id} "
                            f"on quiz {flow.quiz_id}: {e.detail}"
                        )
            finally:
                db.close()
        return len(due)

    def evict_idle(self) -> int:
        """
        Discard flows nobody has touched for the idle timeout.

        A timed flow still counting down is kept, since it is submitted at zero
        anyway. An expired flow is kept for the idle timeout after expiry so a
        failed forced save can be retried.
        """
        with self._lock:
            stale = [
                key
                for key, flow in self._flows.items()
                if flow.idle_seconds() > self._idle_timeout
                and (flow.countdown is None or flow.time_expired)
            ]
            for key in stale:
                flow = self._flows.pop(key)
                logger.warning(
                    f"Discarding idle quiz {flow.quiz_id} for student {flow.student_id} "
                    f"({len(flow.answers)} answers, expired: {flow.time_expired})"
                )
            return len(stale)

    async def run_sweeper(self, interval: float = 1.0) -> None:
        """Check all countdowns every interval until cancelled."""
        logger.info(f"Countdown sweeper running every {interval}s")
        while True:
            await asyncio.sleep(interval)
            try:
                await asyncio.to_thread(self.expire_due)
            except Exception as e:
                logger.error(f"Countdown sweep failed: {e}", exc_info=True)

    # ----- internals -----

    def _get(self, session: UserSession, quiz_id: str) -> QuizTakingFlow:
        flow = self._flows.get((session.user_id, quiz_id))
        if flow is None:
            raise NotFound(
                "No quiz in progress, open the quiz first",
                redirect_to=f"{QUIZ_LIST_PATH}/{quiz_id}",
            )
        flow.touch()
        return flow

    def _ensure_available(self, flow: QuizTakingFlow, store: DocumentStore) -> None:
        """
        The quiz may have been deleted or unpublished since the flow was opened;
        if so the flow is dropped without an attempt.

        Raises:
            NotFound: If the quiz is gone or no longer published
        """
        quiz = store.quizzes.get(flow.quiz_id)
        if quiz is not None and quiz.is_published:
            return
        self._flows.pop((flow.student_id, flow.quiz_id), None)
        message = "Quiz not found" if quiz is None else "This quiz is not available"
        logger.info(
            f"Dropping quiz {flow.quiz_id} for student {flow.student_id}: {message}"
        )
        raise NotFound(message, redirect_to=QUIZ_LIST_PATH)

    def _advance(self, flow: QuizTakingFlow, store: DocumentStore) -> bool:
        """
        Apply elapsed time; True if the flow was force-submitted by this call.

        An expired flow still ACTIVE had its forced save fail; it is retried
        here instead of accepting further answers.
        """
        if not flow.tick() and not flow.time_expired:
            return False
        logger.info(f"Time is up for student {flow.student_id} on quiz {flow.quiz_id}")
        self._submit(flow, store, forced=True)
        return True

    def _submit(self, flow: QuizTakingFlow, store: DocumentStore, forced: bool) -> None:
        try:
            self._ensure_available(flow, store)
        except StoreUnavailable:
            raise StoreUnavailable("Failed to submit quiz")

        result = flow.begin_submission(forced=forced)
        key = (flow.student_id, flow.quiz_id)
        quiz = flow.quiz
        stored: Optional[GradeResult] = None
        try:
            # Another process may have stored an attempt since this flow was opened;
            # the first stored attempt stands.
            attempt = store.attempts.first(quiz_id=flow.quiz_id, student_id=flow.student_id)
            if attempt is None:
                attempt = store.attempts.add(
                    quiz_id=flow.quiz_id,
                    quiz_title=quiz["title"],
                    student_id=flow.student_id,
                    student_name=flow.student_name,
                    quiz_created_by=quiz["created_by"],
                    score=result.score,
                    passed=result.passed,
                    answers=dict(flow.answers),
                )
            else:
                logger.warning(
                    f"Attempt {attempt.id} already stored for student {flow.student_id} "
                    f"on quiz {flow.quiz_id}; keeping it"
                )
                stored = GradeResult(
                    correct=count_correct(flow.questions, attempt.answers or {}),
                    total=flow.question_count,
                    score=attempt.score,
                    passed=attempt.passed,
                )
        except StoreUnavailable:
            flow.abort_submission()
            raise StoreUnavailable("Failed to submit quiz")

        flow.complete(attempt.id, stored)
        self._flows.pop(key, None)
        logger.info(
            f"Student {flow.student_id} submitted quiz {flow.quiz_id}"
            f"{' (time expired)' if flow.forced else ''}: "
            f"score {flow.result.score}, {'passed' if flow.result.passed else 'failed'}"
        )

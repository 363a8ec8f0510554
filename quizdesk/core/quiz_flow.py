"""
Quiz-taking state machine.

    LOADING -> BLOCKED | ERROR | ACTIVE
    ACTIVE  -> SUBMITTING          (manual submit with every question answered,
                                    or forced when the countdown reaches zero)
    SUBMITTING -> DONE             (attempt persisted)
    SUBMITTING -> ACTIVE           (persisting failed, the student may retry)

The flow holds no store handle; the runner loads documents into it and
persists the attempt it grades. A single flag records that submission has been
triggered, so manual and forced submission can never both go through.
"""
import time
from enum import Enum
from typing import Any, Callable, Dict, List, Mapping, Optional

from quizdesk.core.exceptions import InvalidFlowState, QuestionsRemaining, ValidationFailed
from quizdesk.core.grading import GradeResult, grade

Clock = Callable[[], float]


class FlowState(str, Enum):
    LOADING = "loading"
    BLOCKED = "blocked"
    ERROR = "error"
    ACTIVE = "active"
    SUBMITTING = "submitting"
    DONE = "done"


class Countdown:
    """
    Whole-second countdown driven by a monotonic clock.

    tick() applies the seconds elapsed since the countdown started and reports
    True exactly once, on the call that first observes zero.
    """

    def __init__(self, total_seconds: int, clock: Clock = time.monotonic):
        self.total_seconds = total_seconds
        self._clock = clock
        self._started_at = clock()
        self._remaining = total_seconds
        self._fired = False

    @property
    def remaining(self) -> int:
        return self._remaining

    @property
    def expired(self) -> bool:
        return self._remaining == 0

    def tick(self) -> bool:
        if self._fired:
            return False
        elapsed = int(self._clock() - self._started_at)
        self._remaining = max(0, self.total_seconds - elapsed)
        if self._remaining == 0:
            self._fired = True
            return True
        return False


class QuizTakingFlow:
    """One student's pass through one quiz."""

    def __init__(
        self,
        quiz_id: str,
        student_id: str,
        student_name: Optional[str] = None,
        clock: Clock = time.monotonic,
    ):
        self.quiz_id = quiz_id
        self.student_id = student_id
        self.student_name = student_name
        self._clock = clock

        self.state = FlowState.LOADING
        self.quiz: Optional[Dict[str, Any]] = None
        self.error: Optional[str] = None
        self.attempt_id: Optional[str] = None
        self.result: Optional[GradeResult] = None
        self.forced = False
        self.already_stored = False

        self.current_index = 0
        self.answers: Dict[str, str] = {}
        self.countdown: Optional[Countdown] = None
        self._submission_triggered = False
        self.last_active = clock()

    # ----- loading -----

    def block(self, attempt_id: str) -> None:
        """An attempt already exists; the only way out is its result."""
        self._require(FlowState.LOADING)
        self.attempt_id = attempt_id
        self.state = FlowState.BLOCKED

    def fail(self, message: str) -> None:
        self._require(FlowState.LOADING)
        self.error = message
        self.state = FlowState.ERROR

    def load(self, quiz: Optional[Mapping[str, Any]]) -> FlowState:
        """Enter ACTIVE with the quiz, or ERROR if it is missing or unpublished."""
        self._require(FlowState.LOADING)
        if quiz is None:
            self.fail("Quiz not found")
        elif not quiz.get("is_published"):
            self.fail("This quiz is not available")
        elif not quiz.get("questions"):
            self.fail("This quiz has no questions")
        else:
            self.quiz = dict(quiz)
            time_limit = quiz.get("time_limit")
            if time_limit:
                self.countdown = Countdown(int(time_limit) * 60, self._clock)
            self.state = FlowState.ACTIVE
        return self.state

    # ----- active -----

    def touch(self) -> None:
        self.last_active = self._clock()

    def idle_seconds(self) -> float:
        return self._clock() - self.last_active

    @property
    def questions(self) -> List[Mapping[str, Any]]:
        return list(self.quiz["questions"]) if self.quiz else []

    @property
    def question_count(self) -> int:
        return len(self.questions)

    @property
    def current_question(self) -> Optional[Mapping[str, Any]]:
        questions = self.questions
        return questions[self.current_index] if questions else None

    @property
    def remaining_seconds(self) -> Optional[int]:
        return self.countdown.remaining if self.countdown else None

    @property
    def time_expired(self) -> bool:
        return self.countdown is not None and self.countdown.expired

    @property
    def submission_triggered(self) -> bool:
        return self._submission_triggered

    def unanswered_count(self) -> int:
        return sum(1 for q in self.questions if q["id"] not in self.answers)

    def next(self) -> int:
        self._require(FlowState.ACTIVE)
        self.current_index = min(self.current_index + 1, self.question_count - 1)
        return self.current_index

    def previous(self) -> int:
        self._require(FlowState.ACTIVE)
        self.current_index = max(self.current_index - 1, 0)
        return self.current_index

    def jump(self, index: int) -> int:
        self._require(FlowState.ACTIVE)
        if not 0 <= index < self.question_count:
            raise ValidationFailed(
                f"Question index must be between 0 and {self.question_count - 1}"
            )
        self.current_index = index
        return self.current_index

    def select(self, question_id: str, option_id: str) -> None:
        """Record the single selected option for a question, replacing any earlier one."""
        self._require(FlowState.ACTIVE)
        question = next((q for q in self.questions if q["id"] == question_id), None)
        if question is None:
            raise ValidationFailed("Unknown question")
        if not any(o["id"] == option_id for o in question.get("options", [])):
            raise ValidationFailed("Unknown option for this question")
        self.answers[question_id] = option_id

    def tick(self) -> bool:
        """Advance the countdown; True when time has just run out and submission must be forced."""
        if self.state != FlowState.ACTIVE or self.countdown is None:
            return False
        return self.countdown.tick()

    # ----- submission -----

    def begin_submission(self, forced: bool = False) -> GradeResult:
        """
        Enter SUBMITTING and grade the answers.

        Once time has expired every submission is treated as forced and skips
        the all-answered gate.

        Raises:
            InvalidFlowState: If submission was already triggered or the flow is not active
            QuestionsRemaining: On a manual submission with unanswered questions
        """
        if self._submission_triggered:
            raise InvalidFlowState("This quiz has already been submitted")
        self._require(FlowState.ACTIVE)

        forced = forced or self.time_expired
        if not forced:
            remaining = self.unanswered_count()
            if remaining:
                raise QuestionsRemaining(remaining)

        self._submission_triggered = True
        self.forced = forced
        self.state = FlowState.SUBMITTING
        self.result = grade(self.questions, self.answers, int(self.quiz["pass_threshold"]))
        return self.result

    def complete(self, attempt_id: str, stored: Optional[GradeResult] = None) -> None:
        """
        Enter DONE with the persisted attempt.

        `stored` is the outcome of an attempt that already existed; it replaces
        this flow's own grade, which was never written.
        """
        self._require(FlowState.SUBMITTING)
        self.attempt_id = attempt_id
        if stored is not None:
            self.result = stored
            self.already_stored = True
        self.state = FlowState.DONE

    def abort_submission(self) -> None:
        """Persisting failed: back to ACTIVE with answers intact so the student can retry."""
        self._require(FlowState.SUBMITTING)
        self._submission_triggered = False
        self.result = None
        self.state = FlowState.ACTIVE

    def _require(self, state: FlowState) -> None:
        if self.state != state:
            raise InvalidFlowState(
                f"Quiz is {self.state.value}, expected {state.value}"
            )

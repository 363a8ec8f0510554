"""
Result endpoints: attempt lists and per-attempt review for admins and students.
"""
from typing import Any, List

from fastapi import APIRouter, Depends, Query

from quizdesk.core.dependencies import get_store, require_admin, require_student
from quizdesk.core.exceptions import NotFound, PermissionDenied, StoreUnavailable
from quizdesk.core.grading import count_correct, percentage, review_questions
from quizdesk.core.session import UserSession
from quizdesk.db.store import DocumentStore
from quizdesk.models.attempt import Attempt
from quizdesk.schemas.attempt import (
    AttemptDetail,
    AttemptSummary,
    QuestionReview,
    ResultFilter,
)
from quizdesk.schemas.common import ListResponse

admin_router = APIRouter()
student_router = APIRouter()


def filter_attempts(attempts: List[Attempt], result: str) -> List[Attempt]:
    """All / passed / failed filter over an already loaded list."""
    if result == "passed":
        return [a for a in attempts if a.passed]
    if result == "failed":
        return [a for a in attempts if not a.passed]
    return list(attempts)


def attempt_detail(store: DocumentStore, attempt: Attempt) -> AttemptDetail:
    """
    Attempt with its per-question review.

    The verdicts use the scoring predicate, so recounting them reproduces the
    stored score. If the quiz has since been deleted the attempt is still
    returned, without the breakdown.
    """
    detail = AttemptDetail(
        id=attempt.id,
        quiz_id=attempt.quiz_id,
        quiz_title=attempt.quiz_title,
        student_id=attempt.student_id,
        student_name=attempt.student_name,
        score=attempt.score,
        passed=attempt.passed,
        completed_at=attempt.completed_at,
        answers=dict(attempt.answers or {}),
    )
    quiz = store.quizzes.get(attempt.quiz_id)
    if quiz is None:
        detail.notice = "Quiz not found"
        return detail

    questions = list(quiz.questions or [])
    detail.pass_threshold = quiz.pass_threshold
    detail.total_questions = len(questions)
    detail.correct_answers = count_correct(questions, detail.answers)
    detail.questions = [
        QuestionReview(**review) for review in review_questions(questions, detail.answers)
    ]
    if percentage(detail.correct_answers, detail.total_questions) != attempt.score:
        detail.notice = "This quiz was edited after the attempt was submitted"
    return detail


# ============= Admin =============

@admin_router.get("", response_model=ListResponse[AttemptSummary])
def list_results_for_admin(
    result: ResultFilter = Query("all", description="all, passed or failed"),
    store: DocumentStore = Depends(get_store),
    session: UserSession = Depends(require_admin),
) -> Any:
    """Attempts on the current admin's quizzes, newest first."""
    try:
        attempts = store.attempts.query(
            quiz_created_by=session.user_id, order_by="completed_at", descending=True
        )
    except StoreUnavailable:
        return {"items": [], "error": "Failed to load quiz results"}
    return {"items": filter_attempts(attempts, result)}


@admin_router.get("/{attempt_id}", response_model=AttemptDetail)
def get_result_for_admin(
    attempt_id: str,
    store: DocumentStore = Depends(get_store),
    session: UserSession = Depends(require_admin),
) -> Any:
    """
    Review one attempt on a quiz the current admin created.

    Raises:
        NotFound: If the attempt does not exist
        PermissionDenied: If the attempt is on another admin's quiz
    """
    attempt = store.attempts.get(attempt_id)
    if attempt is None:
        raise NotFound("Attempt not found", redirect_to="/admin/results")
    if attempt.quiz_created_by != session.user_id:
        raise PermissionDenied(
            "You do not have permission to view this result", redirect_to="/admin/results"
        )
    return attempt_detail(store, attempt)


# ============= Student =============

@student_router.get("", response_model=ListResponse[AttemptSummary])
def list_results_for_student(
    store: DocumentStore = Depends(get_store),
    session: UserSession = Depends(require_student),
) -> Any:
    """The current student's attempts, newest first."""
    try:
        attempts = store.attempts.query(
            student_id=session.user_id, order_by="completed_at", descending=True
        )
    except StoreUnavailable:
        return {"items": [], "error": "Failed to load quiz results"}
    return {"items": attempts}


@student_router.get("/{attempt_id}", response_model=AttemptDetail)
def get_result_for_student(
    attempt_id: str,
    store: DocumentStore = Depends(get_store),
    session: UserSession = Depends(require_student),
) -> Any:
    """
    Review one of the current student's attempts.

    Raises:
        NotFound: If the attempt does not exist
        PermissionDenied: If the attempt belongs to another student
    """
    attempt = store.attempts.get(attempt_id)
    if attempt is None:
        raise NotFound("Attempt not found", redirect_to="/student/results")
    if attempt.student_id != session.user_id:
        raise PermissionDenied(
            "You do not have permission to view this result", redirect_to="/student/results"
        )
    return attempt_detail(store, attempt)

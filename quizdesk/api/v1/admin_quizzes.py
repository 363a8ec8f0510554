"""
Admin endpoints for authoring quizzes: list, create, view, edit and delete.
"""
import logging
from typing import Any

from fastapi import APIRouter, Depends, Query, status

from quizdesk.core.authoring import (
    QUESTION_TYPES,
    ensure_quiz_owner,
    new_question,
    prepare_questions,
)
from quizdesk.core.dependencies import get_store, require_admin
from quizdesk.core.exceptions import StoreUnavailable, ValidationFailed
from quizdesk.core.session import UserSession
from quizdesk.db.base import utcnow
from quizdesk.db.store import DocumentStore
from quizdesk.schemas.common import ListResponse, Message
from quizdesk.schemas.quiz import QuestionOut, QuizCreate, QuizOut, QuizSummary, QuizUpdate

logger = logging.getLogger(__name__)

router = APIRouter()


@router.get("", response_model=ListResponse[QuizSummary])
def list_my_quizzes(
    store: DocumentStore = Depends(get_store),
    session: UserSession = Depends(require_admin),
) -> Any:
    """Quizzes created by the current admin, newest first."""
    try:
        quizzes = store.quizzes.query(
            created_by=session.user_id, order_by="created_at", descending=True
        )
    except StoreUnavailable:
        return {"items": [], "error": "Failed to load quizzes"}
    return {"items": quizzes}


@router.get("/question-template", response_model=QuestionOut)
def question_template(
    type: str = Query("multiple-choice", description="multiple-choice or true-false"),
    session: UserSession = Depends(require_admin),
) -> Any:
    """
    Blank question for the editor.

    Multiple-choice questions start with four empty options; true-false
    questions start with the fixed True/False pair.
    """
    if type not in QUESTION_TYPES:
        raise ValidationFailed(f"Unknown question type '{type}'")
    return new_question(type)


@router.post("", response_model=QuizOut, status_code=status.HTTP_201_CREATED)
def create_quiz(
    quiz_in: QuizCreate,
    draft: bool = Query(False, description="Save without publishing"),
    store: DocumentStore = Depends(get_store),
    session: UserSession = Depends(require_admin),
) -> Any:
    """
    Create a quiz.

    Args:
        quiz_in: Quiz details and questions
        draft: When true the quiz is saved unpublished
        store: Document store
        session: Current admin

    Raises:
        ValidationFailed: If a question is malformed or lacks a correct answer
    """
    questions = prepare_questions([q.model_dump() for q in quiz_in.questions])

    quiz = store.quizzes.add(
        title=quiz_in.title.strip(),
        description=quiz_in.description.strip(),
        pass_threshold=quiz_in.pass_threshold,
        time_limit=quiz_in.time_limit,
        questions=questions,
        question_count=len(questions),
        is_published=not draft,
        created_by=session.user_id,
    )
    logger.info(
        f"Admin {session.user_id} created quiz {quiz.id} "
        f"({'draft' if draft else 'published'}, {len(questions)} questions)"
    )
    return quiz


@router.get("/{quiz_id}", response_model=QuizOut)
def get_quiz(
    quiz_id: str,
    store: DocumentStore = Depends(get_store),
    session: UserSession = Depends(require_admin),
) -> Any:
    """A quiz with its correct answers, for its creator only."""
    return ensure_quiz_owner(store.quizzes.get(quiz_id), session, action="view")


@router.put("/{quiz_id}", response_model=QuizOut)
def update_quiz(
    quiz_id: str,
    quiz_in: QuizUpdate,
    store: DocumentStore = Depends(get_store),
    session: UserSession = Depends(require_admin),
) -> Any:
    """
    Replace a quiz's details and question list.

    Raises:
        NotFound: If the quiz does not exist
        PermissionDenied: If the current admin did not create the quiz
        ValidationFailed: If a question is malformed or lacks a correct answer
    """
    quiz = ensure_quiz_owner(store.quizzes.get(quiz_id), session)
    questions = prepare_questions([q.model_dump() for q in quiz_in.questions])

    fields = dict(
        title=quiz_in.title.strip(),
        description=quiz_in.description.strip(),
        pass_threshold=quiz_in.pass_threshold,
        time_limit=quiz_in.time_limit,
        questions=questions,
        question_count=len(questions),
        updated_at=utcnow(),
    )
    if quiz_in.is_published is not None:
        fields["is_published"] = quiz_in.is_published

    quiz = store.quizzes.update(quiz.id, **fields)
    logger.info(f"Admin {session.user_id} updated quiz {quiz_id}")
    return quiz


@router.delete("/{quiz_id}", response_model=Message)
def delete_quiz(
    quiz_id: str,
    confirm: bool = Query(False, description="Must be true; deletion cannot be undone"),
    store: DocumentStore = Depends(get_store),
    session: UserSession = Depends(require_admin),
) -> Any:
    """
    Delete a quiz owned by the current admin.

    Attempts already taken on the quiz are kept.
    """
    quiz = ensure_quiz_owner(store.quizzes.get(quiz_id), session, action="delete")
    if not confirm:
        raise ValidationFailed(
            "Are you sure you want to delete this quiz? This action cannot be undone. "
            "Repeat the request with confirm=true."
        )
    store.quizzes.delete(quiz.id)
    logger.info(f"Admin {session.user_id} deleted quiz {quiz_id}")
    return {"message": "Quiz deleted successfully"}

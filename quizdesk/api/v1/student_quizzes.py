"""
Student endpoints: list published quizzes and take one.

Taking a quiz is a short-lived flow held by the QuizRunner: open it, select
answers and move between questions, then submit. A timed quiz is submitted
automatically when its countdown reaches zero.
"""
from typing import Any, Dict, List, Mapping

from fastapi import APIRouter, Depends

from quizdesk.core.dependencies import get_quiz_runner, get_store, require_student
from quizdesk.core.exceptions import StoreUnavailable
from quizdesk.core.quiz_flow import FlowState, QuizTakingFlow
from quizdesk.core.session import UserSession
from quizdesk.db.store import DocumentStore
from quizdesk.schemas.common import ListResponse, Message
from quizdesk.schemas.quiz import StudentOption, StudentQuestion, StudentQuizSummary
from quizdesk.schemas.take import AnswerSelect, NavigateRequest, TakeView
from quizdesk.services.quiz_runner import QuizRunner, result_path

router = APIRouter()


def _student_question(question: Mapping[str, Any]) -> StudentQuestion:
    return StudentQuestion(
        id=question["id"],
        text=question.get("text", ""),
        type=question.get("type", "multiple-choice"),
        options=[
            StudentOption(id=o["id"], text=o.get("text", ""))
            for o in question.get("options", [])
        ],
    )


def take_view(flow: QuizTakingFlow) -> TakeView:
    """What the student sees of a flow; correct answers are never included."""
    quiz = flow.quiz or {}
    view = TakeView(
        state=flow.state.value,
        quiz_id=flow.quiz_id,
        quiz_title=quiz.get("title"),
        description=quiz.get("description"),
        pass_threshold=quiz.get("pass_threshold"),
        time_limit=quiz.get("time_limit"),
        remaining_seconds=flow.remaining_seconds,
        question_count=flow.question_count,
        current_index=flow.current_index,
        answers=dict(flow.answers),
        answered_count=len(flow.answers),
        unanswered_count=flow.unanswered_count(),
        attempt_id=flow.attempt_id,
        time_expired=flow.time_expired,
    )
    if flow.state == FlowState.ACTIVE:
        view.questions = [_student_question(q) for q in flow.questions]
        view.current_question = view.questions[flow.current_index]
    elif flow.state == FlowState.BLOCKED:
        view.redirect_to = result_path(flow.attempt_id)
        view.message = "You have already taken this quiz"
    elif flow.state == FlowState.DONE:
        view.score = flow.result.score
        view.passed = flow.result.passed
        view.redirect_to = result_path(flow.attempt_id)
        if flow.already_stored:
            view.message = "This quiz had already been submitted; showing the stored result"
        elif flow.forced:
            view.message = "Time is up! Your quiz was submitted"
        else:
            view.message = "Quiz submitted successfully!"
    return view


@router.get("", response_model=ListResponse[StudentQuizSummary])
def list_available_quizzes(
    store: DocumentStore = Depends(get_store),
    session: UserSession = Depends(require_student),
) -> Any:
    """
    Published quizzes, newest first.

    Each quiz is flagged `attempted` when the student already has an attempt
    for it, and carries the display name of its creator.
    """
    try:
        quizzes = store.quizzes.query(is_published=True, order_by="created_at", descending=True)
        attempted = {a.quiz_id for a in store.attempts.query(student_id=session.user_id)}
    except StoreUnavailable:
        return {"items": [], "error": "Failed to load quizzes"}

    creator_names: Dict[str, str] = {}
    items: List[StudentQuizSummary] = []
    for quiz in quizzes:
        if quiz.created_by not in creator_names:
            try:
                creator = store.users.get(quiz.created_by)
            except StoreUnavailable:
                creator = None
            creator_names[quiz.created_by] = creator.display_name if creator else "Unknown"
        summary = StudentQuizSummary.model_validate(quiz)
        summary.creator_name = creator_names[quiz.created_by]
        summary.attempted = quiz.id in attempted
        items.append(summary)
    return {"items": items}


@router.get("/{quiz_id}", response_model=TakeView)
def open_quiz(
    quiz_id: str,
    store: DocumentStore = Depends(get_store),
    session: UserSession = Depends(require_student),
    runner: QuizRunner = Depends(get_quiz_runner),
) -> Any:
    """
    Start or resume taking a quiz.

    If the student has already taken it, the view is `blocked` and points at
    the existing result instead of showing any question.

    Raises:
        NotFound: If the quiz does not exist or is not published
    """
    return take_view(runner.open(store, session, quiz_id))


@router.post("/{quiz_id}/answers", response_model=TakeView)
def select_answer(
    quiz_id: str,
    answer: AnswerSelect,
    store: DocumentStore = Depends(get_store),
    session: UserSession = Depends(require_student),
    runner: QuizRunner = Depends(get_quiz_runner),
) -> Any:
    """Select an option; replaces any earlier selection for the same question."""
    flow = runner.select(store, session, quiz_id, answer.question_id, answer.option_id)
    return take_view(flow)


@router.post("/{quiz_id}/navigate", response_model=TakeView)
def navigate(
    quiz_id: str,
    move: NavigateRequest,
    store: DocumentStore = Depends(get_store),
    session: UserSession = Depends(require_student),
    runner: QuizRunner = Depends(get_quiz_runner),
) -> Any:
    """Go to the next, previous or a given question. Answers are kept."""
    flow = runner.navigate(store, session, quiz_id, move.action, move.index)
    return take_view(flow)


@router.post("/{quiz_id}/submit", response_model=TakeView)
def submit_quiz(
    quiz_id: str,
    store: DocumentStore = Depends(get_store),
    session: UserSession = Depends(require_student),
    runner: QuizRunner = Depends(get_quiz_runner),
) -> Any:
    """
    Submit the quiz and store the attempt.

    Raises:
        QuestionsRemaining: If some questions are unanswered and time is not up
        StoreUnavailable: If the attempt could not be saved; the quiz stays open
    """
    return take_view(runner.submit(store, session, quiz_id))


@router.delete("/{quiz_id}/take", response_model=Message)
def leave_quiz(
    quiz_id: str,
    session: UserSession = Depends(require_student),
    runner: QuizRunner = Depends(get_quiz_runner),
) -> Any:
    """Abandon an unfinished quiz without storing an attempt."""
    if runner.leave(session, quiz_id):
        return {"message": "Quiz left without submitting"}
    return {"message": "No quiz in progress"}

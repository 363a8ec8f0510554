"""
Schemas for the quiz-taking flow.
"""
from typing import Dict, List, Literal, Optional

from pydantic import BaseModel, Field

from quizdesk.schemas.quiz import StudentQuestion

FlowStateName = Literal["loading", "blocked", "error", "active", "submitting", "done"]


class AnswerSelect(BaseModel):
    """Select one option for one question."""

    question_id: str
    option_id: str


class NavigateRequest(BaseModel):
    """Move between questions: next, previous, or jump to an index."""

    action: Literal["next", "previous", "jump"]
    index: Optional[int] = Field(None, description="Target index for 'jump' (0-based)")


class TakeView(BaseModel):
    """
    State of a student's take session.

    `redirect_to` is set when the flow has nothing more to show: the result of
    an existing attempt (blocked) or of the attempt just submitted (done).
    """

    state: FlowStateName
    quiz_id: str
    quiz_title: Optional[str] = None
    description: Optional[str] = None
    pass_threshold: Optional[int] = None
    time_limit: Optional[int] = None
    remaining_seconds: Optional[int] = None
    question_count: int = 0
    current_index: int = 0
    current_question: Optional[StudentQuestion] = None
    questions: List[StudentQuestion] = []
    answers: Dict[str, str] = {}
    answered_count: int = 0
    unanswered_count: int = 0
    attempt_id: Optional[str] = None
    score: Optional[int] = None
    passed: Optional[bool] = None
    time_expired: bool = False
    redirect_to: Optional[str] = None
    message: Optional[str] = None

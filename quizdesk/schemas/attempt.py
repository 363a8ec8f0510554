"""
Pydantic schemas for attempts and their review.
"""
from datetime import datetime
from typing import Dict, List, Literal, Optional

from pydantic import BaseModel, ConfigDict

from quizdesk.schemas.quiz import QuestionType, StudentOption

ResultFilter = Literal["all", "passed", "failed"]


class AttemptSummary(BaseModel):
    """Schema for attempt list rows."""

    model_config = ConfigDict(from_attributes=True)

    id: str
    quiz_id: str
    quiz_title: str
    student_id: str
    student_name: Optional[str] = None
    score: int
    passed: bool
    completed_at: Optional[datetime] = None


class QuestionReview(BaseModel):
    """One question of a reviewed attempt."""

    position: int
    question_id: str
    text: str
    type: QuestionType
    options: List[StudentOption]
    selected_option_id: Optional[str] = None
    selected_option_text: Optional[str] = None
    correct_option_id: Optional[str] = None
    correct_option_text: Optional[str] = None
    is_correct: bool


class AttemptDetail(AttemptSummary):
    """Schema for a single attempt with its per-question breakdown."""

    answers: Dict[str, str]
    pass_threshold: Optional[int] = None
    total_questions: int = 0
    correct_answers: int = 0
    questions: List[QuestionReview] = []
    notice: Optional[str] = None

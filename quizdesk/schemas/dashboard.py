"""
Dashboard schema.
"""
from typing import List, Optional

from pydantic import BaseModel

from quizdesk.schemas.attempt import AttemptSummary
from quizdesk.schemas.quiz import QuizSummary, StudentQuizSummary


class Dashboard(BaseModel):
    """
    Recent activity for the signed-in user.

    Admins get `recent_quizzes` (their own); students get
    `available_quizzes` (published and not yet attempted).
    """

    role: str
    display_name: str
    recent_quizzes: List[QuizSummary] = []
    available_quizzes: List[StudentQuizSummary] = []
    recent_attempts: List[AttemptSummary] = []
    error: Optional[str] = None

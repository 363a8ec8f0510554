"""Schemas module - Import all schemas."""
from quizdesk.schemas.user import User, UserCreate, Token
from quizdesk.schemas.quiz import (
    QuizCreate,
    QuizUpdate,
    QuizOut,
    QuizSummary,
    QuestionIn,
    QuestionOut,
    StudentQuizSummary,
    StudentQuestion,
)
from quizdesk.schemas.attempt import AttemptSummary, AttemptDetail, QuestionReview
from quizdesk.schemas.take import AnswerSelect, NavigateRequest, TakeView
from quizdesk.schemas.dashboard import Dashboard
from quizdesk.schemas.common import Message, ErrorResponse, ListResponse

__all__ = [
    "User",
    "UserCreate",
    "Token",
    "QuizCreate",
    "QuizUpdate",
    "QuizOut",
    "QuizSummary",
    "QuestionIn",
    "QuestionOut",
    "StudentQuizSummary",
    "StudentQuestion",
    "AttemptSummary",
    "AttemptDetail",
    "QuestionReview",
    "AnswerSelect",
    "NavigateRequest",
    "TakeView",
    "Dashboard",
    "Message",
    "ErrorResponse",
    "ListResponse",
]

"""Models module - Import all models here so metadata sees every table."""
from quizdesk.db.base import Base
from quizdesk.models.user import User, RevokedToken
from quizdesk.models.quiz import Quiz
from quizdesk.models.attempt import Attempt

__all__ = ["Base", "User", "RevokedToken", "Quiz", "Attempt"]

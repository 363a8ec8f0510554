"""
Application error taxonomy.

Every failure the service reports to a caller is one of these. Each carries the
HTTP status it maps to and, where the browser should move somewhere safe, the
path it should be sent to.
"""
from typing import Optional

from fastapi import status


class QuizDeskError(Exception):
    """Base class for errors surfaced to the caller."""

    status_code: int = status.HTTP_400_BAD_REQUEST

    def __init__(self, detail: str, redirect_to: Optional[str] = None):
        super().__init__(detail)
        self.detail = detail
        self.redirect_to = redirect_to


class AuthenticationFailed(QuizDeskError):
    """Bad credentials, expired or revoked token."""

    status_code = status.HTTP_401_UNAUTHORIZED


class AccountExists(QuizDeskError):
    """Signup with an email that is already registered."""

    status_code = status.HTTP_400_BAD_REQUEST


class PermissionDenied(QuizDeskError):
    """Wrong role or not the owner of the document."""

    status_code = status.HTTP_403_FORBIDDEN


class NotFound(QuizDeskError):
    status_code = status.HTTP_404_NOT_FOUND


class ValidationFailed(QuizDeskError):
    """Input accepted by the schema but rejected by a business rule."""

    status_code = status.HTTP_400_BAD_REQUEST


class QuestionsRemaining(ValidationFailed):
    """Manual submission attempted with unanswered questions."""

    def __init__(self, remaining: int):
        super().__init__(
            f"Please answer all questions before submitting ({remaining} remaining)"
        )
        self.remaining = remaining


class StoreUnavailable(QuizDeskError):
    """The document store rejected or failed an operation."""

    status_code = status.HTTP_503_SERVICE_UNAVAILABLE


class InvalidFlowState(QuizDeskError):
    """Operation not allowed in the quiz-taking flow's current state."""

    status_code = status.HTTP_409_CONFLICT

"""
Dependency injection for FastAPI endpoints.
"""
import logging

from fastapi import Depends, Request
from fastapi.security import OAuth2PasswordBearer
from sqlalchemy.orm import Session

from quizdesk.core.config import settings
from quizdesk.core.exceptions import PermissionDenied
from quizdesk.core.session import SessionManager, UserSession
from quizdesk.db.base import get_db
from quizdesk.db.store import DocumentStore
from quizdesk.services.quiz_runner import QuizRunner

logger = logging.getLogger(__name__)

oauth2_scheme = OAuth2PasswordBearer(tokenUrl=f"{settings.API_V1_PREFIX}/auth/login")


def get_store(db: Session = Depends(get_db)) -> DocumentStore:
    return DocumentStore(db)


def get_session_manager(store: DocumentStore = Depends(get_store)) -> SessionManager:
    return SessionManager(store)


def get_current_session(
    token: str = Depends(oauth2_scheme),
    sessions: SessionManager = Depends(get_session_manager),
) -> UserSession:
    """
    Resolve the bearer token into the caller's session.

    Raises:
        AuthenticationFailed: If the token is invalid, revoked or orphaned
    """
    return sessions.open(token)


def require_admin(session: UserSession = Depends(get_current_session)) -> UserSession:
    if not session.is_admin:
        logger.warning(f"Access denied for non-admin user_id: {session.user_id}")
        raise PermissionDenied("Administrative privileges required", redirect_to="/dashboard")
    return session


def require_student(session: UserSession = Depends(get_current_session)) -> UserSession:
    if not session.is_student:
        logger.warning(f"Access denied for non-student user_id: {session.user_id}")
        raise PermissionDenied("This page is for students only", redirect_to="/dashboard")
    return session


def get_quiz_runner(request: Request) -> QuizRunner:
    return request.app.state.quiz_runner

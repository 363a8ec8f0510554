"""
Dashboard endpoint - recent activity for the signed-in user.
"""
import logging
from typing import Any

from fastapi import APIRouter, Depends

from quizdesk.core.config import settings
from quizdesk.core.dependencies import get_current_session, get_store
from quizdesk.core.exceptions import StoreUnavailable
from quizdesk.core.session import UserSession
from quizdesk.db.store import DocumentStore
from quizdesk.schemas.dashboard import Dashboard
from quizdesk.schemas.attempt import AttemptSummary
from quizdesk.schemas.quiz import QuizSummary, StudentQuizSummary

logger = logging.getLogger(__name__)

router = APIRouter()


def _admin_dashboard(store: DocumentStore, session: UserSession, dashboard: Dashboard) -> None:
    limit = settings.DASHBOARD_RECENT_LIMIT
    quizzes = store.quizzes.query(
        created_by=session.user_id, order_by="created_at", descending=True, limit=limit
    )
    attempts = store.attempts.query(
        quiz_created_by=session.user_id, order_by="completed_at", descending=True, limit=limit
    )
    dashboard.recent_quizzes = [QuizSummary.model_validate(q) for q in quizzes]
    dashboard.recent_attempts = [AttemptSummary.model_validate(a) for a in attempts]


def _student_dashboard(store: DocumentStore, session: UserSession, dashboard: Dashboard) -> None:
    limit = settings.DASHBOARD_RECENT_LIMIT
    attempted = {a.quiz_id for a in store.attempts.query(student_id=session.user_id)}
    published = store.quizzes.query(is_published=True, order_by="created_at", descending=True)
    dashboard.available_quizzes = [
        StudentQuizSummary.model_validate(q) for q in published if q.id not in attempted
    ][:limit]
    attempts = store.attempts.query(
        student_id=session.user_id, order_by="completed_at", descending=True, limit=limit
    )
    dashboard.recent_attempts = [AttemptSummary.model_validate(a) for a in attempts]


@router.get("", response_model=Dashboard)
def get_dashboard(
    store: DocumentStore = Depends(get_store),
    session: UserSession = Depends(get_current_session),
) -> Any:
    """
    Admins see their latest quizzes and the latest attempts on them; students
    see quizzes they can still take and their latest attempts.
    """
    dashboard = Dashboard(role=session.role, display_name=session.display_name)
    try:
        if session.is_admin:
            _admin_dashboard(store, session, dashboard)
        else:
            _student_dashboard(store, session, dashboard)
    except StoreUnavailable:
        logger.warning(f"Dashboard data unavailable for user {session.user_id}")
        dashboard.recent_quizzes = []
        dashboard.available_quizzes = []
        dashboard.recent_attempts = []
        dashboard.error = "Failed to load dashboard data"
    return dashboard

"""
Database initialization and seeding.
"""
import logging

from sqlalchemy.orm import Session

from quizdesk.core.config import settings
from quizdesk.core.session import SessionManager
from quizdesk.db.store import DocumentStore
from quizdesk.models.user import User

logger = logging.getLogger(__name__)


def init_db(db: Session) -> User:
    """
    Initialize database with default data.

    Args:
        db: Database session

    Returns:
        The seeded admin account, existing or newly created
    """
    store = DocumentStore(db)
    admin = store.users.first(email=settings.FIRST_ADMIN_EMAIL.lower())
    if not admin:
        admin = SessionManager(store).sign_up(
            email=settings.FIRST_ADMIN_EMAIL,
            password=settings.FIRST_ADMIN_PASSWORD,
            display_name=settings.FIRST_ADMIN_NAME,
            role="admin",
        )
        logger.info(f"Admin user {admin.email} created")
    return admin

"""
Quiz model. Questions and their options are embedded in the quiz document.
"""
from sqlalchemy import Boolean, Column, ForeignKey, Integer, String, Text, DateTime, JSON

from quizdesk.db.base import Base, new_id, utcnow


class Quiz(Base):
    """Quiz authored by an admin."""

    __tablename__ = "quizzes"

    id = Column(String(32), primary_key=True, default=new_id)
    title = Column(String, nullable=False)
    description = Column(Text, nullable=False)
    pass_threshold = Column(Integer, nullable=False, default=60)  # percentage, 1-100
    time_limit = Column(Integer, nullable=True)  # minutes

    # [{id, text, type, options: [{id, text, is_correct}]}]
    questions = Column(JSON, nullable=False, default=list)
    question_count = Column(Integer, nullable=False, default=0)

    is_published = Column(Boolean, nullable=False, default=False)
    created_by = Column(String(32), ForeignKey("users.id"), index=True, nullable=False)

    created_at = Column(DateTime(timezone=True), default=utcnow)
    updated_at = Column(DateTime(timezone=True), default=utcnow)

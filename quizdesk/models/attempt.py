"""
Attempt model - one completed quiz per (student, quiz).
"""
from sqlalchemy import Boolean, Column, Integer, String, DateTime, JSON

from quizdesk.db.base import Base, new_id, utcnow


class Attempt(Base):
    """
    A student's submitted quiz.

    quiz_title, student_name and quiz_created_by are copies taken at submission
    time so admin listings need no join. They are never refreshed. quiz_id is
    not a foreign key: deleting a quiz leaves its attempts in place.
    """

    __tablename__ = "attempts"

    id = Column(String(32), primary_key=True, default=new_id)
    quiz_id = Column(String(32), index=True, nullable=False)
    quiz_title = Column(String, nullable=False)
    student_id = Column(String(32), index=True, nullable=False)
    student_name = Column(String, nullable=True)
    quiz_created_by = Column(String(32), index=True, nullable=False)

    score = Column(Integer, nullable=False)
    passed = Column(Boolean, nullable=False)
    answers = Column(JSON, nullable=False, default=dict)  # question id -> option id

    completed_at = Column(DateTime(timezone=True), default=utcnow)

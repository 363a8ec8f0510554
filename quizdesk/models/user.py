"""
User profile and token revocation models.
"""
from sqlalchemy import Column, String, DateTime

from quizdesk.db.base import Base, new_id, utcnow


class User(Base):
    """User profile. The role is fixed at signup."""

    __tablename__ = "users"

    id = Column(String(32), primary_key=True, default=new_id)
    email = Column(String, unique=True, index=True, nullable=False)
    display_name = Column(String, nullable=False)
    hashed_password = Column(String, nullable=False)
    role = Column(String, nullable=False, default="student")  # admin, student

    created_at = Column(DateTime(timezone=True), default=utcnow)


class RevokedToken(Base):
    """Access tokens ended by sign-out before their expiry."""

    __tablename__ = "revoked_tokens"

    jti = Column(String(64), primary_key=True)
    user_id = Column(String(32), index=True, nullable=False)
    revoked_at = Column(DateTime(timezone=True), default=utcnow)

"""
Session/identity adapter.

Wraps account creation, sign-in and bearer-token verification, and resolves
the caller's profile into a UserSession that is passed explicitly to every
operation that needs the current user. A session starts when a token is
opened and ends when it is closed (sign-out), which revokes the token.
"""
import logging
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Optional

from quizdesk.core.exceptions import AccountExists, AuthenticationFailed, ValidationFailed
from quizdesk.core.security import (
    create_access_token,
    decode_token,
    get_password_hash,
    verify_password,
)
from quizdesk.db.store import DocumentStore
from quizdesk.models.user import User

logger = logging.getLogger(__name__)

ROLES = ("admin", "student")


@dataclass(frozen=True)
class UserSession:
    """The signed-in user as seen by the rest of the application."""

    user_id: str
    email: str
    display_name: str
    role: str
    token_id: str
    expires_at: Optional[datetime] = None

    @property
    def is_admin(self) -> bool:
        return self.role == "admin"

    @property
    def is_student(self) -> bool:
        return self.role == "student"


class SessionManager:
    """Identity operations against the users collection."""

    def __init__(self, store: DocumentStore):
        self.store = store

    def sign_up(self, email: str, password: str, display_name: str, role: str) -> User:
        if role not in ROLES:
            raise ValidationFailed(f"Unknown role '{role}'")
        email = email.lower()
        if self.store.users.first(email=email):
            raise AccountExists("Email already registered")

        user = self.store.users.add(
            email=email,
            display_name=display_name,
            hashed_password=get_password_hash(password),
            role=role,
        )
        logger.info(f"Created {role} account {user.id}")
        return user

    def sign_in(self, email: str, password: str) -> str:
        """Check credentials and return a new access token."""
        user = self.store.users.first(email=email.lower())
        if not user or not verify_password(password, user.hashed_password):
            raise AuthenticationFailed("Incorrect email or password")
        logger.info(f"User {user.id} signed in")
        return create_access_token(subject=user.id, extra_claims={"role": user.role})

    def open(self, token: str) -> UserSession:
        """
        Start a session from a bearer token.

        Raises:
            AuthenticationFailed: If the token is invalid, revoked, or its user is gone
        """
        payload = decode_token(token)
        if payload is None or payload.get("type") != "access":
            raise AuthenticationFailed("Could not validate credentials")

        user_id = payload.get("sub")
        token_id = payload.get("jti")
        if not user_id or not token_id:
            raise AuthenticationFailed("Could not validate credentials")

        if self.store.revoked_tokens.get(token_id) is not None:
            raise AuthenticationFailed("Session has ended, please sign in again")

        user = self.store.users.get(user_id)
        if user is None:
            raise AuthenticationFailed("User not found")

        exp = payload.get("exp")
        return UserSession(
            user_id=user.id,
            email=user.email,
            display_name=user.display_name,
            role=user.role,
            token_id=token_id,
            expires_at=datetime.fromtimestamp(exp, tz=timezone.utc) if exp else None,
        )

    def close(self, session: UserSession) -> None:
        """End the session; its token is rejected from now on."""
        if self.store.revoked_tokens.get(session.token_id) is None:
            self.store.revoked_tokens.add(jti=session.token_id, user_id=session.user_id)
        logger.info(f"User {session.user_id} signed out")

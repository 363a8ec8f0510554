"""
Authentication endpoints for account creation, sign-in and sign-out.
"""
from typing import Any

from fastapi import APIRouter, Depends, status
from fastapi.security import OAuth2PasswordRequestForm

from quizdesk.core.config import settings
from quizdesk.core.dependencies import get_current_session, get_session_manager
from quizdesk.core.session import SessionManager, UserSession
from quizdesk.schemas.common import Message
from quizdesk.schemas.user import Token, User as UserSchema, UserCreate

router = APIRouter()


@router.post("/signup", response_model=UserSchema, status_code=status.HTTP_201_CREATED)
def signup(
    user_in: UserCreate,
    sessions: SessionManager = Depends(get_session_manager),
) -> Any:
    """
    Create an account with its profile.

    Args:
        user_in: Email, password, display name and role
        sessions: Identity adapter

    Returns:
        Created user

    Raises:
        AccountExists: If the email is already registered
    """
    return sessions.sign_up(
        email=user_in.email,
        password=user_in.password,
        display_name=user_in.display_name,
        role=user_in.role,
    )


@router.post("/login", response_model=Token)
def login(
    form_data: OAuth2PasswordRequestForm = Depends(),
    sessions: SessionManager = Depends(get_session_manager),
) -> Any:
    """
    Sign in with email and password and return a bearer token.

    Raises:
        AuthenticationFailed: If the credentials are wrong
    """
    access_token = sessions.sign_in(form_data.username, form_data.password)
    session = sessions.open(access_token)
    return {
        "access_token": access_token,
        "token_type": "bearer",
        "expires_in": settings.ACCESS_TOKEN_EXPIRE_MINUTES * 60,
        "role": session.role,
    }


@router.post("/logout", response_model=Message)
def logout(
    session: UserSession = Depends(get_current_session),
    sessions: SessionManager = Depends(get_session_manager),
) -> Any:
    """End the current session. The token stops working immediately."""
    sessions.close(session)
    return {"message": "Signed out"}


@router.get("/me", response_model=UserSchema)
def read_current_user(
    session: UserSession = Depends(get_current_session),
    sessions: SessionManager = Depends(get_session_manager),
) -> Any:
    """Profile of the signed-in user."""
    return sessions.store.users.get(session.user_id)

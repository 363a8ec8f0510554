"""
Common schemas for API responses.
"""
from typing import Generic, List, Optional, TypeVar

from pydantic import BaseModel

T = TypeVar("T")


class Message(BaseModel):
    """Generic message response."""

    message: str


class ErrorResponse(BaseModel):
    """Error response schema."""

    detail: str
    redirect_to: Optional[str] = None


class ListResponse(BaseModel, Generic[T]):
    """
    List view payload.

    When the store fails the list is empty and `error` says why, so a failed
    load is never mistaken for an empty one.
    """

    items: List[T]
    error: Optional[str] = None

"""
Pydantic schemas for quizzes and their embedded questions.
"""
from datetime import datetime
from typing import List, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field

QuestionType = Literal["multiple-choice", "true-false"]


class OptionIn(BaseModel):
    id: Optional[str] = None
    text: str = ""
    is_correct: bool = False


class QuestionIn(BaseModel):
    """A question as sent by the editor. Ids are generated when missing."""

    id: Optional[str] = None
    text: str = ""
    type: QuestionType = "multiple-choice"
    options: List[OptionIn] = Field(default_factory=list)


class QuizBase(BaseModel):
    title: str = Field(..., min_length=1)
    description: str = Field(..., min_length=1)
    pass_threshold: int = Field(60, ge=1, le=100, description="Passing percentage")
    time_limit: Optional[int] = Field(None, ge=1, description="Time limit in minutes")


class QuizCreate(QuizBase):
    """Schema for creating a quiz."""

    questions: List[QuestionIn]


class QuizUpdate(QuizBase):
    """Schema for editing a quiz; the question list is replaced as a whole."""

    questions: List[QuestionIn]
    is_published: Optional[bool] = None


class OptionOut(BaseModel):
    id: str
    text: str
    is_correct: bool


class QuestionOut(BaseModel):
    id: str
    text: str
    type: QuestionType
    options: List[OptionOut]


class QuizSummary(BaseModel):
    """Quiz without its questions, for list views."""

    model_config = ConfigDict(from_attributes=True)

    id: str
    title: str
    description: str
    pass_threshold: int
    time_limit: Optional[int] = None
    question_count: int
    is_published: bool
    created_by: str
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


class QuizOut(QuizSummary):
    """Full quiz for its creator, correct answers included."""

    questions: List[QuestionOut]


class StudentQuizSummary(BaseModel):
    """Published quiz as listed to a student."""

    model_config = ConfigDict(from_attributes=True)

    id: str
    title: str
    description: str
    pass_threshold: int
    time_limit: Optional[int] = None
    question_count: int
    created_at: Optional[datetime] = None
    creator_name: str = "Unknown"
    attempted: bool = False


class StudentOption(BaseModel):
    """Option shown while taking a quiz; whether it is correct is never sent."""

    id: str
    text: str


class StudentQuestion(BaseModel):
    id: str
    text: str
    type: QuestionType
    options: List[StudentOption]

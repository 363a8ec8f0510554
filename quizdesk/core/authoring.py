"""
Quiz authoring rules.

Builds blank questions for the editor, normalizes submitted question lists and
rejects any list that would store an unanswerable question. Nothing is written
unless the whole list passes.
"""
import uuid
from typing import Any, Dict, List, Mapping, Optional, Sequence

from quizdesk.core.exceptions import NotFound, PermissionDenied, ValidationFailed
from quizdesk.core.session import UserSession
from quizdesk.models.quiz import Quiz

MULTIPLE_CHOICE = "multiple-choice"
TRUE_FALSE = "true-false"
QUESTION_TYPES = (MULTIPLE_CHOICE, TRUE_FALSE)

DEFAULT_OPTION_COUNT = 4
MIN_OPTIONS = 2
TRUE_FALSE_LABELS = ("True", "False")


def _new_id() -> str:
    return str(uuid.uuid4())


def new_option(text: str = "", is_correct: bool = False) -> Dict[str, Any]:
    return {"id": _new_id(), "text": text, "is_correct": is_correct}


def new_question(question_type: str = MULTIPLE_CHOICE, text: str = "") -> Dict[str, Any]:
    """Blank question: four empty options, or the fixed True/False pair."""
    if question_type not in QUESTION_TYPES:
        raise ValidationFailed(f"Unknown question type '{question_type}'")
    if question_type == TRUE_FALSE:
        options = [new_option(label) for label in TRUE_FALSE_LABELS]
    else:
        options = [new_option() for _ in range(DEFAULT_OPTION_COUNT)]
    return {"id": _new_id(), "text": text, "type": question_type, "options": options}


def normalize_questions(raw_questions: Sequence[Mapping[str, Any]]) -> List[Dict[str, Any]]:
    """
    Turn submitted questions into stored question documents.

    Missing ids are generated. A question sent without options gets the
    blank defaults of its type (four empty options, or the True/False pair).
    True-false labels are always stored in canonical form.
    """
    questions = []
    for raw in raw_questions:
        question_type = raw.get("type") or MULTIPLE_CHOICE
        options = [
            {
                "id": o.get("id") or _new_id(),
                "text": (o.get("text") or "").strip(),
                "is_correct": bool(o.get("is_correct")),
            }
            for o in raw.get("options") or []
        ]
        if not options and question_type in QUESTION_TYPES:
            options = new_question(question_type)["options"]
        elif question_type == TRUE_FALSE:
            for option in options:
                for label in TRUE_FALSE_LABELS:
                    if option["text"].lower() == label.lower():
                        option["text"] = label
        questions.append(
            {
                "id": raw.get("id") or _new_id(),
                "text": (raw.get("text") or "").strip(),
                "type": question_type,
                "options": options,
            }
        )
    return questions


def _check_structure(position: int, question: Mapping[str, Any]) -> None:
    if question["type"] not in QUESTION_TYPES:
        raise ValidationFailed(f"Question {position} has an unknown type '{question['type']}'")
    if not question["text"]:
        raise ValidationFailed(f"Question {position} text is required")

    options = question["options"]
    if question["type"] == TRUE_FALSE:
        labels = tuple(o["text"] for o in options)
        if len(options) != 2 or sorted(labels) != sorted(TRUE_FALSE_LABELS):
            raise ValidationFailed(
                f"Question {position} must have exactly the options True and False"
            )
    elif len(options) < MIN_OPTIONS:
        raise ValidationFailed(f"Question {position} needs at least {MIN_OPTIONS} options")

    if any(not o["text"] for o in options):
        raise ValidationFailed(f"Question {position} has an option without text")
    if len({o["id"] for o in options}) != len(options):
        raise ValidationFailed(f"Question {position} has duplicate option ids")


def validate_questions(questions: Sequence[Mapping[str, Any]]) -> None:
    """
    Reject a question list that cannot be stored.

    Structure is checked for every question first; the correct-answer rule is
    checked afterwards and names the first question that breaks it.

    Raises:
        ValidationFailed: With a message naming the offending question's position
    """
    if not questions:
        raise ValidationFailed("A quiz needs at least one question")
    if len({q["id"] for q in questions}) != len(questions):
        raise ValidationFailed("Question ids must be unique within a quiz")

    for position, question in enumerate(questions, start=1):
        _check_structure(position, question)

    for position, question in enumerate(questions, start=1):
        marked = sum(1 for o in question["options"] if o["is_correct"])
        if marked == 0:
            raise ValidationFailed(f"Question {position} doesn't have a correct answer selected")
        if marked > 1:
            raise ValidationFailed(f"Question {position} has more than one correct answer selected")


def prepare_questions(raw_questions: Sequence[Mapping[str, Any]]) -> List[Dict[str, Any]]:
    questions = normalize_questions(raw_questions)
    validate_questions(questions)
    return questions


def ensure_quiz_owner(quiz: Optional[Quiz], session: UserSession, action: str = "edit") -> Quiz:
    """
    Authorization check for creator-only operations.

    Raises:
        NotFound: If the quiz does not exist
        PermissionDenied: If the caller did not create the quiz
    """
    if quiz is None:
        raise NotFound("Quiz not found", redirect_to="/admin/quizzes")
    if quiz.created_by != session.user_id:
        raise PermissionDenied(
            f"You do not have permission to {action} this quiz",
            redirect_to="/admin/quizzes",
        )
    return quiz

"""
Scoring of quiz answers.

Questions are the embedded quiz documents:
    {"id", "text", "type", "options": [{"id", "text", "is_correct"}]}
Answers map question id to the selected option id; unanswered questions are
absent. The same predicate is used when an attempt is submitted and when it
is reviewed, so a recomputed score always matches the stored one.
"""
from dataclasses import dataclass
from typing import Any, Dict, List, Mapping, Optional, Sequence

Question = Mapping[str, Any]


@dataclass(frozen=True)
class GradeResult:
    correct: int
    total: int
    score: int
    passed: bool


def correct_option(question: Question) -> Optional[Mapping[str, Any]]:
    for option in question.get("options", []):
        if option.get("is_correct"):
            return option
    return None


def is_answer_correct(question: Question, selected_option_id: Optional[str]) -> bool:
    """A question counts as correct iff an option was selected and it is the correct one."""
    if not selected_option_id:
        return False
    correct = correct_option(question)
    return correct is not None and correct["id"] == selected_option_id


def count_correct(questions: Sequence[Question], answers: Mapping[str, str]) -> int:
    return sum(1 for q in questions if is_answer_correct(q, answers.get(q["id"])))


def percentage(correct: int, total: int) -> int:
    """round(100 * correct / total), halves rounded up, computed exactly."""
    if total <= 0:
        return 0
    return (200 * correct + total) // (2 * total)


def grade(
    questions: Sequence[Question],
    answers: Mapping[str, str],
    pass_threshold: int,
) -> GradeResult:
    correct = count_correct(questions, answers)
    score = percentage(correct, len(questions))
    return GradeResult(
        correct=correct,
        total=len(questions),
        score=score,
        passed=score >= pass_threshold,
    )


def review_questions(
    questions: Sequence[Question],
    answers: Mapping[str, str],
) -> List[Dict[str, Any]]:
    """Per-question breakdown: what was selected, what was correct, and the verdict."""
    review = []
    for position, question in enumerate(questions, start=1):
        selected_id = answers.get(question["id"])
        selected = next(
            (o for o in question.get("options", []) if o["id"] == selected_id), None
        )
        correct = correct_option(question)
        review.append(
            {
                "position": position,
                "question_id": question["id"],
                "text": question.get("text", ""),
                "type": question.get("type", "multiple-choice"),
                "options": [
                    {"id": o["id"], "text": o.get("text", "")}
                    for o in question.get("options", [])
                ],
                "selected_option_id": selected_id,
                "selected_option_text": selected.get("text") if selected else None,
                "correct_option_id": correct["id"] if correct else None,
                "correct_option_text": correct.get("text") if correct else None,
                "is_correct": is_answer_correct(question, selected_id),
            }
        )
    return review

"""Shared quiz documents and a controllable clock for the test suite."""
from typing import Any, Dict, List, Sequence


class FakeClock:
    """Monotonic clock that only moves when told to."""

    def __init__(self, start: float = 1000.0):
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


def mc_question(qid: str, labels: Sequence[str] = ("A", "B", "C", "D"), correct: int = 0) -> Dict[str, Any]:
    return {
        "id": qid,
        "text": f"Question {qid}?",
        "type": "multiple-choice",
        "options": [
            {"id": f"{qid}-{i}", "text": label, "is_correct": i == correct}
            for i, label in enumerate(labels)
        ],
    }


def tf_question(qid: str, answer: bool = True) -> Dict[str, Any]:
    return {
        "id": qid,
        "text": f"Statement {qid}.",
        "type": "true-false",
        "options": [
            {"id": f"{qid}-t", "text": "True", "is_correct": answer},
            {"id": f"{qid}-f", "text": "False", "is_correct": not answer},
        ],
    }


def mc_questions(count: int) -> List[Dict[str, Any]]:
    """Questions q1..qN whose correct option is always `{qid}-0`."""
    return [mc_question(f"q{n}") for n in range(1, count + 1)]


def right(qid: str) -> str:
    return f"{qid}-0"


def wrong(qid: str) -> str:
    return f"{qid}-1"


def quiz_document(questions, pass_threshold: int = 60, time_limit=None, published: bool = True) -> Dict[str, Any]:
    return {
        "id": "quiz-1",
        "title": "Sample quiz",
        "description": "A quiz used in tests",
        "pass_threshold": pass_threshold,
        "time_limit": time_limit,
        "questions": list(questions),
        "is_published": published,
        "created_by": "admin-1",
    }

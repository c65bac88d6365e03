"""Question bank: records, validation, category filters, game selection."""

from __future__ import annotations

import json
import logging
import random
from collections import Counter
from dataclasses import dataclass
from typing import Any

logger = logging.getLogger(__name__)

REQUIRED_FIELDS = ("id", "question", "options", "answer", "category", "difficulty")
ALL_CATEGORIES = "All"


def validate_question(q: dict[str, Any]) -> bool:
    """True when every required field is present and the answer is one of the options."""
    if not isinstance(q, dict) or not all(q.get(k) for k in REQUIRED_FIELDS):
        logger.warning("question missing required properties: %r", q.get("id") if isinstance(q, dict) else q)
        return False
    options = q["options"]
    if not isinstance(options, (list, tuple)) or q["answer"] not in options:
        logger.warning("correct answer not in options: %r", q.get("id"))
        return False
    return True


@dataclass(frozen=True)
class Question:
    id: str
    question: str
    options: tuple[str, ...]
    answer: str
    category: str
    difficulty: str
    explanation: str = ""

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "Question":
        return cls(
            id=str(data["id"]),
            question=str(data["question"]),
            options=tuple(str(o) for o in data["options"]),
            answer=str(data["answer"]),
            category=str(data["category"]),
            difficulty=str(data["difficulty"]),
            explanation=str(data.get("explanation") or ""),
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "question": self.question,
            "options": list(self.options),
            "answer": self.answer,
            "category": self.category,
            "difficulty": self.difficulty,
            "explanation": self.explanation,
        }


class QuestionBank:
    def __init__(self, questions: list[Question], rejected: list[dict[str, Any]] | None = None):
        self.questions = list(questions)
        self.rejected = list(rejected or [])

    def __len__(self) -> int:
        return len(self.questions)

    @classmethod
    def from_records(cls, records: list[Any]) -> "QuestionBank":
        good: list[Question] = []
        bad: list[dict[str, Any]] = []
        for r in records:
            if validate_question(r):
                good.append(Question.from_dict(r))
            else:
                bad.append(r)
        return cls(good, bad)

    @classmethod
    def load(cls, path: str) -> "QuestionBank":
        with open(path, "r", encoding="utf-8") as f:
            data = json.load(f)
        if not isinstance(data, list):
            raise ValueError(f"{path}: question bank must be a JSON array")
        bank = cls.from_records(data)
        logger.info("loaded %d questions from %s (%d rejected)", len(bank), path, len(bank.rejected))
        return bank

    def get(self, question_id: str) -> Question | None:
        for q in self.questions:
            if q.id == question_id:
                return q
        return None

    def categories(self) -> list[str]:
        return sorted({q.category for q in self.questions})

    def difficulties(self) -> list[str]:
        return sorted({q.difficulty for q in self.questions})

    def by_category(self, category: str = ALL_CATEGORIES) -> list[Question]:
        if category == ALL_CATEGORIES:
            return list(self.questions)
        return [q for q in self.questions if q.category == category]

    def duplicate_ids(self) -> list[str]:
        counts = Counter(q.id for q in self.questions)
        return sorted(i for i, n in counts.items() if n > 1)

    def distribution(self) -> dict[str, dict[str, int]]:
        return {
            "category": dict(sorted(Counter(q.category for q in self.questions).items())),
            "difficulty": dict(sorted(Counter(q.difficulty for q in self.questions).items())),
        }

    def pick(self, count: int, category: str = ALL_CATEGORIES, rng: random.Random | None = None) -> list[Question]:
        """Shuffle the category pool and deal at most ``count`` questions."""
        rng = rng or random.Random()
        pool = self.by_category(category)
        rng.shuffle(pool)
        return pool[: max(0, int(count))]

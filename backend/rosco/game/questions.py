from __future__ import annotations

import json
import random
from functools import lru_cache
from pathlib import Path

from ..config import Config
from .models import Question


class QuestionCatalog:
    """Read-only question bank keyed by letter, in rosco order."""

    def __init__(self, entries: dict[str, list[Question]]):
        empty = [letter for letter, items in entries.items() if not items]
        if not entries or empty:
            raise ValueError(f"question bank has letters without questions: {empty}")
        self._entries = entries

    @classmethod
    def from_file(cls, path: str | Path) -> "QuestionCatalog":
        raw = json.loads(Path(path).read_text(encoding="utf-8"))
        entries: dict[str, list[Question]] = {}
        for letter, items in raw.items():
            entries[letter] = [Question(question=i["question"], answer=i["answer"]) for i in items]
        return cls(entries)

    @property
    def letters(self) -> list[str]:
        return list(self._entries.keys())

    def random_question(self, letter: str, rng: random.Random | None = None) -> Question:
        items = self._entries[letter]
        return (rng or random).choice(items)


@lru_cache(maxsize=4)
def load_catalog(path: str | None = None) -> QuestionCatalog:
    return QuestionCatalog.from_file(path or Config.QUESTIONS_PATH)

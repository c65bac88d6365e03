"""In-memory leaderboards, one ranked list per question-count tier."""

from __future__ import annotations

import threading
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any, Iterable


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


def format_date(d: datetime) -> str:
    return d.astimezone(timezone.utc).isoformat(timespec="milliseconds").replace("+00:00", "Z")


@dataclass(frozen=True)
class ScoreEntry:
    name: str
    score: float
    time: float
    questionCount: int
    date: datetime = field(default_factory=_utcnow)

    def rank_key(self) -> tuple[float, float]:
        return (-self.score, self.time)

    def to_dict(self) -> dict[str, Any]:
        return {
            "name": self.name,
            "score": self.score,
            "time": self.time,
            "date": format_date(self.date),
            "questionCount": self.questionCount,
        }


class MemoryStore:
    def __init__(self, tiers: Iterable[int], limit: int = 10):
        self.limit = int(limit)
        self._boards: dict[int, list[ScoreEntry]] = {int(t): [] for t in tiers}
        self._lock = threading.Lock()

    @property
    def tiers(self) -> tuple[int, ...]:
        return tuple(self._boards.keys())

    def has_tier(self, tier: int) -> bool:
        return tier in self._boards

    def submit(self, entry: ScoreEntry) -> bool:
        """Insert ``entry`` into its tier and re-establish top-N order.

        Returns whether the entry survived the cut. An unknown tier raises
        ValueError before any list is touched.
        """
        if not self.has_tier(entry.questionCount):
            raise ValueError(f"unknown tier {entry.questionCount!r}")
        board = self._boards[entry.questionCount]
        with self._lock:
            board.append(entry)
            # Stable: entries equal on both keys keep acceptance order.
            board.sort(key=ScoreEntry.rank_key)
            del board[self.limit :]
            return any(e is entry for e in board)

    def get_leaderboard(self, tier: int) -> list[ScoreEntry]:
        with self._lock:
            return list(self._boards.get(tier, ()))

    def get_all(self) -> dict[int, list[ScoreEntry]]:
        with self._lock:
            return {t: list(b) for t, b in self._boards.items()}

    def entry_count(self) -> int:
        with self._lock:
            return sum(len(b) for b in self._boards.values())

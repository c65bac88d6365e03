"""Submission schema + validation.

Wire format (POST /submit):
  {"name": "Ann", "score": 90, "time": 120, "questionCount": 10}
"""

from __future__ import annotations

import json
import math
from dataclasses import dataclass
from typing import Any, Iterable


class ProtocolError(Exception):
    pass


def loads(text: str | bytes) -> dict[str, Any]:
    try:
        obj = json.loads(text)
    except Exception as e:
        raise ProtocolError(f"invalid json: {e}")

    if not isinstance(obj, dict):
        raise ProtocolError("body must be object")
    return obj


def _float(n: int | float) -> float:
    # Integers past float range saturate, as they would in a JS engine.
    try:
        return float(n)
    except OverflowError:
        return math.inf if n > 0 else -math.inf


def to_number(v: Any) -> float | None:
    """Loose number coercion, as a browser client would apply it.

    Numbers pass through, booleans become 0/1, ``None`` and blank text are 0.
    Text is parsed as a float literal or a 0x/0o/0b prefixed integer.
    Returns ``None`` when the value is not a number.
    """
    if v is None:
        return 0.0
    if isinstance(v, bool):
        return float(v)
    if isinstance(v, (int, float)):
        return _float(v)
    if not isinstance(v, str):
        return None

    s = v.strip()
    if not s:
        return 0.0
    if "_" in s or not s.isascii():
        return None
    if s[:2].lower() in ("0x", "0o", "0b"):
        try:
            return _float(int(s, 0))
        except ValueError:
            return None
    try:
        return float(s)
    except ValueError:
        return None


def parse_tier(v: Any, tiers: Iterable[int]) -> int | None:
    n = to_number(v)
    if n is None or not math.isfinite(n):
        return None
    for t in tiers:
        if n == t:
            return t
    return None


def _is_number(v: Any) -> bool:
    # bool is an int subclass; JSON true/false are not scores.
    if isinstance(v, bool) or not isinstance(v, (int, float)):
        return False
    return math.isfinite(_float(v))


@dataclass
class Submission:
    name: str
    score: float
    time: float
    questionCount: int

    @classmethod
    def parse(cls, data: dict[str, Any], tiers: Iterable[int]) -> "Submission":
        name = data.get("name")
        if not isinstance(name, str):
            raise ProtocolError("submit.name must be a string")
        score = data.get("score")
        if not _is_number(score):
            raise ProtocolError("submit.score must be a number")
        t = data.get("time")
        if not _is_number(t):
            raise ProtocolError("submit.time must be a number")
        tier = parse_tier(data.get("questionCount"), tiers)
        if tier is None:
            raise ProtocolError("submit.questionCount not an allowed tier")
        return cls(name=name, score=score, time=t, questionCount=tier)

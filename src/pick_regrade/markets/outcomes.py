"""Grading outcomes shared by every market."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Union

from ..picks import GameResult


@dataclass(frozen=True)
class GradeOutcome:
    result: str
    actual_result: str


@dataclass(frozen=True)
class SkipOutcome:
    reason: str


Outcome = Union[GradeOutcome, SkipOutcome]


def is_likely_push_line(value: float) -> bool:
    """Only a whole-number line can land exactly on the final margin or total."""

    return float(value).is_integer()


def describe(game_result: GameResult, detail: str) -> str:
    return f"{game_result.label} — {detail}"


__all__ = ["GradeOutcome", "Outcome", "SkipOutcome", "describe", "is_likely_push_line"]

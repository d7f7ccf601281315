"""Game total (over/under) pick parsing and grading."""

from __future__ import annotations

from dataclasses import dataclass
import re

from ..picks import GameResult, Pick
from .outcomes import GradeOutcome, Outcome, SkipOutcome, describe, is_likely_push_line

_TOTAL_PICK = re.compile(r"^(over|under)\s+(\d+\.?\d*)$", re.IGNORECASE)


@dataclass(frozen=True)
class TotalPick:
    direction: str
    line: float


def parse_total_pick(selection: str | None) -> TotalPick | None:
    match = _TOTAL_PICK.match((selection or "").strip())
    if not match:
        return None
    return TotalPick(direction=match.group(1).lower(), line=float(match.group(2)))


def grade_total(pick: Pick, game_result: GameResult) -> Outcome:
    ou_result = game_result.ou_result
    if not ou_result:
        return SkipOutcome("game_not_final_total")
    parsed = parse_total_pick(pick.pick_selection)
    if parsed is None:
        return SkipOutcome("parse_error_total")

    actual = describe(game_result, f"Total: {ou_result}")
    outcome = ou_result.lower()
    if outcome == "push":
        if not is_likely_push_line(parsed.line):
            return SkipOutcome("impossible_total_push_hook_line")
        return GradeOutcome("push", actual)
    return GradeOutcome("won" if outcome == parsed.direction else "lost", actual)


__all__ = ["TotalPick", "grade_total", "parse_total_pick"]

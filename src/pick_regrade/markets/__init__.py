"""Per-market pick parsing and grading."""

from __future__ import annotations

from typing import Callable, Mapping

from ..picks import GameResult, Pick
from .moneyline import grade_moneyline, parse_moneyline_pick
from .outcomes import GradeOutcome, Outcome, SkipOutcome, is_likely_push_line
from .spread import SpreadPick, grade_spread, parse_spread_pick
from .total import TotalPick, grade_total, parse_total_pick

GRADERS: Mapping[str, Callable[[Pick, GameResult], Outcome]] = {
    "moneyline": grade_moneyline,
    "spread": grade_spread,
    "total": grade_total,
}


def regrade_pick(pick: Pick, game_result: GameResult) -> Outcome:
    """Recompute a push pick's outcome against a finalized result."""

    grader = GRADERS.get(pick.bet_type)
    if grader is None:
        return SkipOutcome("unknown_bet_type")
    return grader(pick, game_result)


__all__ = [
    "GRADERS",
    "GradeOutcome",
    "Outcome",
    "SkipOutcome",
    "SpreadPick",
    "TotalPick",
    "grade_moneyline",
    "grade_spread",
    "grade_total",
    "is_likely_push_line",
    "parse_moneyline_pick",
    "parse_spread_pick",
    "parse_total_pick",
    "regrade_pick",
]

"""Spread pick parsing and grading."""

from __future__ import annotations

from dataclasses import dataclass
import re

from ..picks import GameResult, Pick
from ..teams import resolve_canonical_team
from .outcomes import GradeOutcome, Outcome, SkipOutcome, describe, is_likely_push_line

_SPREAD_PICK = re.compile(r"^(.+?)\s*([+-]?\d+\.?\d*)$")


@dataclass(frozen=True)
class SpreadPick:
    team: str
    spread: float


def parse_spread_pick(selection: str | None) -> SpreadPick | None:
    """Split ``"Lakers -4.5"`` into the team and its signed line."""

    match = _SPREAD_PICK.match((selection or "").strip())
    if not match:
        return None
    return SpreadPick(team=match.group(1).strip(), spread=float(match.group(2)))


def grade_spread(pick: Pick, game_result: GameResult) -> Outcome:
    spread_result = game_result.spread_result
    if not spread_result:
        return SkipOutcome("game_not_final_spread")
    parsed = parse_spread_pick(pick.pick_selection)
    if parsed is None:
        return SkipOutcome("parse_error_spread")
    canonical = resolve_canonical_team(
        parsed.team, game_result, pick.matchup, pick.archived_game_data
    )
    if canonical is None:
        return SkipOutcome("unresolved_team_spread")

    actual = describe(game_result, f"Spread: {spread_result}")
    if spread_result.upper() == "PUSH":
        if not is_likely_push_line(parsed.spread):
            return SkipOutcome("impossible_spread_push_hook_line")
        return GradeOutcome("push", actual)
    return GradeOutcome("won" if canonical == spread_result else "lost", actual)


__all__ = ["SpreadPick", "grade_spread", "parse_spread_pick"]

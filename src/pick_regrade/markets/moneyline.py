"""Moneyline pick parsing and grading."""

from __future__ import annotations

import re

from ..picks import GameResult, Pick
from ..teams import resolve_canonical_team
from .outcomes import GradeOutcome, Outcome, SkipOutcome, describe

_ML_SUFFIX = re.compile(r"\s*ML$", re.IGNORECASE)
_ODDS_SUFFIX = re.compile(r"\s*[+-]\d+$")


def parse_moneyline_pick(selection: str | None) -> str | None:
    """Return the bare team name from ``"Heat ML"`` or ``"Heat +150"``."""

    cleaned = _ML_SUFFIX.sub("", (selection or "").strip()).strip()
    cleaned = _ODDS_SUFFIX.sub("", cleaned).strip()
    return cleaned or None


def grade_moneyline(pick: Pick, game_result: GameResult) -> Outcome:
    # Moneyline markets never push.
    winner = game_result.ml_result
    if not winner:
        return SkipOutcome("game_not_final_ml")
    picked_team = parse_moneyline_pick(pick.pick_selection)
    if picked_team is None:
        return SkipOutcome("parse_error_moneyline")
    canonical = resolve_canonical_team(
        picked_team, game_result, pick.matchup, pick.archived_game_data
    )
    if canonical is None:
        return SkipOutcome("unresolved_team_moneyline")
    return GradeOutcome(
        "won" if canonical == winner else "lost",
        describe(game_result, f"ML winner: {winner}"),
    )


__all__ = ["grade_moneyline", "parse_moneyline_pick"]

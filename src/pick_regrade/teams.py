"""Team-name normalization and matching utilities."""

from __future__ import annotations

from dataclasses import dataclass
import re
from typing import Callable, Iterable, Optional

from .picks import ArchivedGameData, GameResult

_AMPERSAND = re.compile(r"&")
_SAINT = re.compile(r"\bst\b\.?")
_NON_ALNUM = re.compile(r"[^a-z0-9\s]")
_WHITESPACE = re.compile(r"\s+")

MATCHUP_SEPARATORS = (" @ ", " vs ", " v ", " at ")


@dataclass(frozen=True)
class Matchup:
    away: str
    home: str

    @property
    def label(self) -> str:
        return f"{self.away} @ {self.home}"


def normalize_team_name(value: str | None) -> str:
    if not value:
        return ""
    text = str(value).lower()
    text = _AMPERSAND.sub(" and ", text)
    text = _SAINT.sub("saint", text)
    text = _NON_ALNUM.sub(" ", text)
    return _WHITESPACE.sub(" ", text).strip()


def parse_matchup(matchup: str | None) -> Matchup | None:
    """Split ``"Away @ Home"`` style text into its two sides."""

    if not matchup:
        return None
    raw = str(matchup).strip()
    for sep in MATCHUP_SEPARATORS:
        parts = raw.split(sep)
        if len(parts) == 2:
            return Matchup(away=parts[0].strip(), home=parts[1].strip())
    return None


def names_overlap(left: str, right: str) -> bool:
    """Containment in either direction between two normalized names."""

    if not left or not right:
        return False
    return left in right or right in left


def _pick_side(picked: str, away: str, home: str) -> str | None:
    home_match = names_overlap(picked, home)
    away_match = names_overlap(picked, away)
    if home_match and not away_match:
        return "home"
    if away_match and not home_match:
        return "away"
    return None


ResolverStage = Callable[[str, GameResult, Optional[str], ArchivedGameData], Optional[str]]


def _exact_stage(picked: str, result: GameResult, matchup, archived) -> str | None:
    if picked == normalize_team_name(result.home_team):
        return "home"
    if picked == normalize_team_name(result.away_team):
        return "away"
    return None


def _result_containment_stage(picked: str, result: GameResult, matchup, archived) -> str | None:
    return _pick_side(
        picked,
        normalize_team_name(result.away_team),
        normalize_team_name(result.home_team),
    )


def _matchup_containment_stage(picked: str, result: GameResult, matchup, archived) -> str | None:
    parsed = parse_matchup(matchup)
    if parsed is None:
        return None
    return _pick_side(picked, normalize_team_name(parsed.away), normalize_team_name(parsed.home))


def _archived_containment_stage(picked: str, result: GameResult, matchup, archived) -> str | None:
    return _pick_side(
        picked,
        normalize_team_name(archived.away_team),
        normalize_team_name(archived.home_team),
    )


RESOLVER_STAGES: tuple[ResolverStage, ...] = (
    _exact_stage,
    _result_containment_stage,
    _matchup_containment_stage,
    _archived_containment_stage,
)


def resolve_canonical_team(
    picked_team: str | None,
    game_result: GameResult,
    matchup: str | None = None,
    archived: ArchivedGameData | None = None,
    *,
    stages: Iterable[ResolverStage] = RESOLVER_STAGES,
) -> str | None:
    """Map a free-text team onto the result's home or away spelling.

    Each stage returns ``"home"``, ``"away"`` or ``None``; the first side found
    wins. A name matching both sides of a stage is ambiguous and falls through
    to the next stage, so an unresolved pick is never guessed.
    """

    picked = normalize_team_name(picked_team)
    if not picked:
        return None
    archived = archived or ArchivedGameData()
    for stage in stages:
        side = stage(picked, game_result, matchup, archived)
        if side == "home":
            return game_result.home_team
        if side == "away":
            return game_result.away_team
    return None


__all__ = [
    "MATCHUP_SEPARATORS",
    "Matchup",
    "RESOLVER_STAGES",
    "names_overlap",
    "normalize_team_name",
    "parse_matchup",
    "resolve_canonical_team",
]

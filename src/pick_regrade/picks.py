"""Records for avatar picks and finalized game results."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Mapping

PICK_RESULTS = ("won", "lost", "push", "pending")
BET_TYPES = ("spread", "moneyline", "total")


def _text(value: object) -> str | None:
    if value is None:
        return None
    text = str(value).strip()
    return text or None


def _mapping(value: object) -> Mapping[str, Any]:
    return value if isinstance(value, Mapping) else {}


def to_date_only(value: object) -> str | None:
    """Truncate an ISO date or timestamp to ``YYYY-MM-DD``."""

    text = _text(value)
    if text is None:
        return None
    return text[:10] if len(text) >= 10 else text


def normalize_date_token(value: object) -> str | None:
    """Return ``YYYY-MM-DD`` for ISO dates, timestamps or ``YYYYMMDD`` text."""

    text = _text(value)
    if text is None:
        return None
    try:
        return datetime.fromisoformat(text.replace("Z", "+00:00")).strftime("%Y-%m-%d")
    except ValueError:
        pass
    if len(text) == 8 and text.isdigit():
        try:
            return datetime.strptime(text, "%Y%m%d").strftime("%Y-%m-%d")
        except ValueError:
            return None
    return to_date_only(text)


@dataclass(frozen=True)
class ArchivedGameData:
    """Loose view over the game snapshot archived when a pick was issued.

    The capture shape has drifted over time, so team names may sit at the top
    level, under ``game_data_complete`` or under
    ``game_data_complete.raw_game_data``.
    """

    raw: Mapping[str, Any] = field(default_factory=dict)

    def _layers(self) -> list[Mapping[str, Any]]:
        complete = _mapping(self.raw.get("game_data_complete"))
        return [self.raw, complete, _mapping(complete.get("raw_game_data"))]

    def _first(self, key: str) -> str | None:
        for layer in self._layers():
            value = layer.get(key)
            if isinstance(value, str) and value.strip():
                return value
        return None

    @property
    def away_team(self) -> str | None:
        return self._first("away_team")

    @property
    def home_team(self) -> str | None:
        return self._first("home_team")


@dataclass(frozen=True)
class Pick:
    id: str
    avatar_id: str
    sport: str
    matchup: str | None
    game_date: str | None
    bet_type: str
    pick_selection: str
    archived_game_data: ArchivedGameData
    result: str
    actual_result: str | None
    game_id: str | None

    @classmethod
    def from_row(cls, row: Mapping[str, Any]) -> "Pick":
        return cls(
            id=str(row.get("id") or ""),
            avatar_id=str(row.get("avatar_id") or ""),
            sport=(_text(row.get("sport")) or "").lower(),
            matchup=_text(row.get("matchup")),
            game_date=_text(row.get("game_date")),
            bet_type=(_text(row.get("bet_type")) or "").lower(),
            pick_selection=_text(row.get("pick_selection")) or "",
            archived_game_data=ArchivedGameData(_mapping(row.get("archived_game_data"))),
            result=(_text(row.get("result")) or "pending").lower(),
            actual_result=_text(row.get("actual_result")),
            game_id=_text(row.get("game_id")),
        )

    @property
    def game_day(self) -> str | None:
        return normalize_date_token(self.game_date)


@dataclass(frozen=True)
class GameResult:
    """Authoritative result row; each outcome field is final independently."""

    league: str
    game_id: str
    game_date: str | None
    home_team: str
    away_team: str
    ml_result: str | None = None
    spread_result: str | None = None
    ou_result: str | None = None

    @classmethod
    def from_row(cls, row: Mapping[str, Any]) -> "GameResult":
        return cls(
            league=(_text(row.get("league")) or "").upper(),
            game_id=str(row.get("game_id") or ""),
            game_date=_text(row.get("game_date")),
            home_team=_text(row.get("home_team")) or "",
            away_team=_text(row.get("away_team")) or "",
            ml_result=_text(row.get("ml_result")),
            spread_result=_text(row.get("spread_result")),
            ou_result=_text(row.get("ou_result")),
        )

    @property
    def game_day(self) -> str | None:
        return normalize_date_token(self.game_date)

    @property
    def label(self) -> str:
        return f"{self.away_team} vs {self.home_team}"


__all__ = [
    "ArchivedGameData",
    "BET_TYPES",
    "GameResult",
    "PICK_RESULTS",
    "Pick",
    "normalize_date_token",
    "to_date_only",
]

"""Utilities for loading and locating finalized game results."""

from __future__ import annotations

from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass, field
import logging
from typing import Iterable, Mapping, Protocol

from .picks import GameResult, Pick, normalize_date_token
from .teams import names_overlap, normalize_team_name, parse_matchup

logger = logging.getLogger(__name__)


class ResultsSource(Protocol):
    def fetch_results(self, league: str, game_dates: Iterable[str]) -> list[GameResult]:
        ...


@dataclass
class LeagueResults:
    """Result rows for one league, keyed by game id and kept in fetch order."""

    league: str
    results: list[GameResult] = field(default_factory=list)
    by_id: dict[str, GameResult] = field(default_factory=dict)

    @classmethod
    def from_results(cls, league: str, results: Iterable[GameResult]) -> "LeagueResults":
        by_id: dict[str, GameResult] = {}
        for result in results:
            by_id[result.game_id] = result
        return cls(league=league, results=list(by_id.values()), by_id=by_id)


def group_game_dates(
    picks: Iterable[Pick],
    leagues: Mapping[str, str],
) -> dict[str, set[str]]:
    """Collect the game dates needed per results league for supported picks."""

    needed: dict[str, set[str]] = {}
    for pick in picks:
        league = leagues.get(pick.sport)
        if league is None:
            continue
        day = normalize_date_token(pick.game_date) or pick.game_date
        if day:
            needed.setdefault(league, set()).add(day)
    return needed


def load_results(
    source: ResultsSource,
    dates_by_league: Mapping[str, set[str]],
    *,
    max_workers: int = 4,
) -> dict[str, LeagueResults]:
    """Fetch each league's result set concurrently.

    A league whose fetch fails is logged and comes back empty, so its picks
    are skipped as ``game_not_found`` rather than aborting the run.
    """

    loaded: dict[str, LeagueResults] = {
        league: LeagueResults(league=league) for league in dates_by_league
    }
    if not dates_by_league:
        return loaded

    workers = max(1, min(max_workers, len(dates_by_league)))
    with ThreadPoolExecutor(max_workers=workers) as pool:
        futures = {
            league: pool.submit(source.fetch_results, league, sorted(dates))
            for league, dates in dates_by_league.items()
        }
        for league, future in futures.items():
            try:
                rows = future.result()
            except Exception as exc:
                logger.error("Error fetching game results for %s: %s", league, exc, exc_info=True)
                continue
            loaded[league] = LeagueResults.from_results(league, rows)
            logger.debug(
                "Loaded %d %s results across %d dates",
                len(loaded[league].results),
                league,
                len(dates_by_league[league]),
            )
    return loaded


def _pick_team_names(pick: Pick) -> tuple[str, str]:
    parsed = parse_matchup(pick.matchup)
    archived = pick.archived_game_data
    away = parsed.away if parsed else archived.away_team
    home = parsed.home if parsed else archived.home_team
    return normalize_team_name(away), normalize_team_name(home)


def find_game_result(pick: Pick, league_results: LeagueResults) -> GameResult | None:
    """Locate the result for a pick by game id, then by date and team names.

    The pick's stored id may come from a different id namespace than the
    results table, hence the fuzzy fallback.
    """

    if pick.game_id and pick.game_id in league_results.by_id:
        return league_results.by_id[pick.game_id]

    pick_day = pick.game_day
    away, home = _pick_team_names(pick)
    if not pick_day or not away or not home:
        return None

    for result in league_results.results:
        if result.game_day != pick_day:
            continue
        if names_overlap(normalize_team_name(result.home_team), home) and names_overlap(
            normalize_team_name(result.away_team), away
        ):
            return result
    return None


__all__ = [
    "LeagueResults",
    "ResultsSource",
    "find_game_result",
    "group_game_dates",
    "load_results",
    "normalize_date_token",
]

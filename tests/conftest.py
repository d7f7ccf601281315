from __future__ import annotations

import pytest

from pick_regrade.picks import GameResult, Pick
from pick_regrade.store import StoreError


class FakePickStore:
    """In-memory stand-in for the avatar_picks table."""

    def __init__(self, rows, *, fail_updates=(), fail_recalcs=()):
        self.rows = {row["id"]: dict(row) for row in rows}
        self.updates: list[dict] = []
        self.recalculated: list[str] = []
        self.fail_updates = set(fail_updates)
        self.fail_recalcs = set(fail_recalcs)

    def fetch_push_picks(self, sports, through_date):
        return [
            Pick.from_row(row)
            for row in self.rows.values()
            if row.get("result") == "push"
            and str(row.get("game_date", ""))[:10] <= through_date
            and row.get("sport") in sports
        ]

    def update_pick_result(self, pick_id, *, result, actual_result, graded_at):
        if pick_id in self.fail_updates:
            raise StoreError(f"update rejected for {pick_id}")
        self.rows[pick_id].update(
            {"result": result, "actual_result": actual_result, "graded_at": graded_at}
        )
        self.updates.append({"id": pick_id, "result": result, "actual_result": actual_result})

    def recalculate_performance(self, avatar_id):
        if avatar_id in self.fail_recalcs:
            raise StoreError(f"rpc failed for {avatar_id}")
        self.recalculated.append(avatar_id)


class FakeResultsStore:
    """In-memory stand-in for the all_game_results table."""

    def __init__(self, results, *, failing_leagues=()):
        self.results = list(results)
        self.failing_leagues = set(failing_leagues)
        self.calls: list[tuple[str, list[str]]] = []

    def fetch_results(self, league, game_dates):
        dates = list(game_dates)
        self.calls.append((league, dates))
        if league in self.failing_leagues:
            raise StoreError(f"{league} results unavailable")
        return [r for r in self.results if r.league == league and r.game_day in dates]


def make_pick_row(**overrides):
    row = {
        "id": "pick-1",
        "avatar_id": "avatar-1",
        "sport": "nba",
        "matchup": "Suns @ Lakers",
        "game_date": "2025-01-15",
        "bet_type": "spread",
        "pick_selection": "Lakers -4.5",
        "archived_game_data": {},
        "result": "push",
        "actual_result": None,
        "game_id": "nba-1",
    }
    row.update(overrides)
    return row


def make_result(**overrides):
    values = {
        "league": "NBA",
        "game_id": "nba-1",
        "game_date": "2025-01-15",
        "home_team": "Lakers",
        "away_team": "Suns",
        "ml_result": None,
        "spread_result": None,
        "ou_result": None,
    }
    values.update(overrides)
    return GameResult(**values)


@pytest.fixture
def pick_row():
    return make_pick_row


@pytest.fixture
def game_result():
    return make_result


@pytest.fixture
def pick_store():
    return FakePickStore


@pytest.fixture
def results_store():
    return FakeResultsStore

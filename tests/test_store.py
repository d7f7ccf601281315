from types import SimpleNamespace

import pytest
from postgrest.exceptions import APIError

from pick_regrade.store import PickStore, ResultsStore, StoreError


class FakeQuery:
    def __init__(self, client, table):
        self.client = client
        self.table = table
        self.filters = []
        self.payload = None

    def select(self, columns):
        return self

    def update(self, payload):
        self.payload = payload
        return self

    def eq(self, column, value):
        self.filters.append(("eq", column, value))
        return self

    def lte(self, column, value):
        self.filters.append(("lte", column, value))
        return self

    def in_(self, column, values):
        self.filters.append(("in", column, list(values)))
        return self

    def order(self, column):
        return self

    def range(self, start, end):
        self.filters.append(("range", start, end))
        return self

    def execute(self):
        self.client.executed.append(self)
        if self.client.error:
            raise APIError({"message": self.client.error, "code": "500"})
        if self.payload is not None:
            return SimpleNamespace(data=[])
        start, end = next((f[1], f[2]) for f in self.filters if f[0] == "range")
        return SimpleNamespace(data=self.client.rows[start : end + 1])


class FakeClient:
    def __init__(self, rows=(), error=None):
        self.rows = list(rows)
        self.error = error
        self.executed = []
        self.rpcs = []

    def table(self, name):
        return FakeQuery(self, name)

    def rpc(self, name, params):
        self.rpcs.append((name, params))
        client = self

        class _Call:
            def execute(self):
                if client.error:
                    raise APIError({"message": client.error, "code": "500"})
                return SimpleNamespace(data=None)

        return _Call()


def _pick_rows(count):
    return [
        {"id": f"p{i}", "avatar_id": "a", "sport": "nba", "bet_type": "spread", "result": "push"}
        for i in range(count)
    ]


def test_fetch_push_picks_pages_and_filters(monkeypatch):
    monkeypatch.setattr("pick_regrade.store.PAGE_SIZE", 2)
    client = FakeClient(_pick_rows(5))
    store = PickStore(client)

    picks = store.fetch_push_picks(["nba", "ncaab"], "2025-01-20")

    assert [pick.id for pick in picks] == ["p0", "p1", "p2", "p3", "p4"]
    assert len(client.executed) == 3
    first = client.executed[0]
    assert first.table == "avatar_picks"
    assert ("eq", "result", "push") in first.filters
    assert ("lte", "game_date", "2025-01-20") in first.filters
    assert ("in", "sport", ["nba", "ncaab"]) in first.filters


def test_fetch_push_picks_without_sports_skips_query():
    client = FakeClient(_pick_rows(1))
    assert PickStore(client).fetch_push_picks([], "2025-01-20") == []
    assert client.executed == []


def test_fetch_errors_become_store_errors():
    store = PickStore(FakeClient(error="permission denied"))
    with pytest.raises(StoreError, match="Failed fetching push picks: permission denied"):
        store.fetch_push_picks(["nba"], "2025-01-20")


def test_update_and_recalculate():
    client = FakeClient()
    store = PickStore(client, table="picks", recalculate_rpc="recalc")

    store.update_pick_result("p1", result="won", actual_result="A vs B", graded_at="2025-01-20T00:00:00+00:00")
    store.recalculate_performance("avatar-1")

    update = client.executed[0]
    assert update.table == "picks"
    assert update.payload["result"] == "won"
    assert ("eq", "id", "p1") in update.filters
    assert client.rpcs == [("recalc", {"p_avatar_id": "avatar-1"})]


def test_update_failure_raises_store_error():
    store = PickStore(FakeClient(error="conflict"))
    with pytest.raises(StoreError):
        store.update_pick_result("p1", result="lost", actual_result="x", graded_at="t")
    with pytest.raises(StoreError):
        store.recalculate_performance("avatar-1")


def test_fetch_results_by_league_and_dates():
    rows = [
        {"league": "nba", "game_id": "g1", "game_date": "2025-01-15", "home_team": "Lakers", "away_team": "Suns", "spread_result": ""},
    ]
    client = FakeClient(rows)
    results = ResultsStore(client).fetch_results("nba", ["2025-01-15", "2025-01-14", "2025-01-15"])

    assert results[0].league == "NBA"
    assert results[0].spread_result is None
    query = client.executed[0]
    assert query.table == "all_game_results"
    assert ("eq", "league", "NBA") in query.filters
    assert ("in", "game_date", ["2025-01-14", "2025-01-15"]) in query.filters
    assert ResultsStore(client).fetch_results("nba", []) == []

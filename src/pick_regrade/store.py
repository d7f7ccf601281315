"""Thin Supabase clients for the picks and game results tables."""

from __future__ import annotations

import logging
from typing import Any, Iterable, Mapping, Sequence

from postgrest.exceptions import APIError
from supabase import Client, create_client

from .config import StoreConfig
from .picks import GameResult, Pick

logger = logging.getLogger(__name__)

PAGE_SIZE = 1000


class StoreError(RuntimeError):
    """Raised when a Supabase request fails."""


def connect(config: StoreConfig) -> Client:
    config.require()
    try:
        return create_client(config.url, config.key)
    except Exception as exc:  # supabase raises its own exception type for bad URLs or keys
        raise StoreError(f"Unable to connect to {config.label}: {exc}") from exc


def _fetch_all(query_factory, *, page_size: int | None = None) -> list[Mapping[str, Any]]:
    page_size = page_size or PAGE_SIZE
    rows: list[Mapping[str, Any]] = []
    start = 0
    while True:
        response = query_factory().range(start, start + page_size - 1).execute()
        page = response.data or []
        rows.extend(page)
        if len(page) < page_size:
            return rows
        start += page_size


class PickStore:
    """Read push picks, write regraded results and trigger recalculation."""

    def __init__(
        self,
        client: Client,
        *,
        table: str = "avatar_picks",
        recalculate_rpc: str = "recalculate_avatar_performance",
    ) -> None:
        self._client = client
        self._table = table
        self._rpc = recalculate_rpc

    @classmethod
    def from_config(cls, config: StoreConfig) -> "PickStore":
        return cls(
            connect(config),
            table=config.table,
            recalculate_rpc=config.rpc or "recalculate_avatar_performance",
        )

    def fetch_push_picks(self, sports: Sequence[str], through_date: str) -> list[Pick]:
        """Return every pick still graded ``push`` on or before ``through_date``."""

        if not sports:
            return []

        def query():
            return (
                self._client.table(self._table)
                .select("*")
                .eq("result", "push")
                .lte("game_date", through_date)
                .in_("sport", list(sports))
                .order("id")
            )

        try:
            rows = _fetch_all(query)
        except APIError as exc:
            raise StoreError(f"Failed fetching push picks: {exc.message}") from exc
        logger.debug("Fetched %d push picks for %s", len(rows), ", ".join(sports))
        return [Pick.from_row(row) for row in rows]

    def update_pick_result(
        self,
        pick_id: str,
        *,
        result: str,
        actual_result: str,
        graded_at: str,
    ) -> None:
        payload = {"result": result, "actual_result": actual_result, "graded_at": graded_at}
        try:
            self._client.table(self._table).update(payload).eq("id", pick_id).execute()
        except APIError as exc:
            raise StoreError(f"Failed updating pick {pick_id}: {exc.message}") from exc

    def recalculate_performance(self, avatar_id: str) -> None:
        try:
            self._client.rpc(self._rpc, {"p_avatar_id": avatar_id}).execute()
        except APIError as exc:
            raise StoreError(f"Failed recalculating avatar {avatar_id}: {exc.message}") from exc


class ResultsStore:
    """Read-only access to the authoritative game results table."""

    def __init__(self, client: Client, *, table: str = "all_game_results") -> None:
        self._client = client
        self._table = table

    @classmethod
    def from_config(cls, config: StoreConfig) -> "ResultsStore":
        return cls(connect(config), table=config.table)

    def fetch_results(self, league: str, game_dates: Iterable[str]) -> list[GameResult]:
        dates = sorted({date for date in game_dates if date})
        if not dates:
            return []

        def query():
            return (
                self._client.table(self._table)
                .select("*")
                .eq("league", league.upper())
                .in_("game_date", dates)
                .order("game_id")
            )

        try:
            rows = _fetch_all(query)
        except APIError as exc:
            raise StoreError(f"Failed fetching {league} results: {exc.message}") from exc
        return [GameResult.from_row(row) for row in rows]


__all__ = ["PAGE_SIZE", "PickStore", "ResultsStore", "StoreError", "connect"]

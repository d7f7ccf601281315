"""Batch job that regrades push picks against finalized game results."""

from __future__ import annotations

from dataclasses import asdict, dataclass, field
from datetime import datetime, timezone
import logging
import time
from typing import Any, Protocol, Sequence
from zoneinfo import ZoneInfo

from .actuals import LeagueResults, ResultsSource, find_game_result, group_game_dates, load_results
from .config import AppConfig, ConfigError, RegradeSettings, default_settings
from .markets import SkipOutcome, regrade_pick
from .picks import Pick
from .store import PickStore, ResultsStore, StoreError

logger = logging.getLogger(__name__)


class PickSource(Protocol):
    def fetch_push_picks(self, sports: Sequence[str], through_date: str) -> list[Pick]:
        ...

    def update_pick_result(
        self,
        pick_id: str,
        *,
        result: str,
        actual_result: str,
        graded_at: str,
    ) -> None:
        ...

    def recalculate_performance(self, avatar_id: str) -> None:
        ...


@dataclass
class RegradeSummary:
    total_push_picks: int = 0
    evaluated: int = 0
    regraded_total: int = 0
    regraded_to_won: int = 0
    regraded_to_lost: int = 0
    remained_push: int = 0
    skipped: int = 0
    skipped_reasons: dict[str, int] = field(default_factory=dict)
    errors: int = 0

    def skip(self, reason: str) -> None:
        self.skipped += 1
        self.count_reason(reason)

    def error(self, reason: str) -> None:
        self.errors += 1
        self.count_reason(reason)

    def count_reason(self, reason: str) -> None:
        self.skipped_reasons[reason] = self.skipped_reasons.get(reason, 0) + 1

    def as_dict(self) -> dict[str, Any]:
        return asdict(self)


@dataclass
class RegradeReport:
    dry_run: bool
    sports: list[str]
    summary: RegradeSummary
    avatars_updated: list[str] = field(default_factory=list)
    changed: list[dict[str, Any]] = field(default_factory=list)
    report_generated_at: str = ""
    duration_ms: int = 0

    @property
    def changed_count_total(self) -> int:
        return self.summary.regraded_total

    def to_payload(self) -> dict[str, Any]:
        return {
            "success": True,
            "dry_run": self.dry_run,
            "sports": list(self.sports),
            "summary": self.summary.as_dict(),
            "avatars_updated": list(self.avatars_updated),
            "changed": list(self.changed),
            "changed_count_total": self.changed_count_total,
            "report_generated_at": self.report_generated_at,
            "duration_ms": self.duration_ms,
        }


def today_in(tz_name: str = "America/New_York", *, now: datetime | None = None) -> str:
    current = now or datetime.now(timezone.utc)
    return current.astimezone(ZoneInfo(tz_name)).strftime("%Y-%m-%d")


def _utc_now_iso() -> str:
    return datetime.now(timezone.utc).isoformat()


def _change_record(pick: Pick, result: str, actual_result: str) -> dict[str, Any]:
    return {
        "pick_id": pick.id,
        "avatar_id": pick.avatar_id,
        "sport": pick.sport,
        "game_date": pick.game_date,
        "matchup": pick.matchup,
        "pick_selection": pick.pick_selection,
        "bet_type": pick.bet_type,
        "from_result": pick.result,
        "to_result": result,
        "new_actual_result": actual_result,
    }


def run_regrade(
    picks_store: PickSource,
    results_store: ResultsSource,
    *,
    sports: Sequence[str] | None = None,
    dry_run: bool = False,
    settings: RegradeSettings | None = None,
    today: str | None = None,
    summary: RegradeSummary | None = None,
) -> RegradeReport:
    """Regrade every push pick for ``sports`` whose game date has passed.

    Picks are processed one at a time so avatar performance recalculation
    never races with pick writes. A failure on one pick is counted and the
    run moves on; only a failed pick fetch propagates.
    Pass ``summary`` to keep partial counts visible to the caller when the
    run fails.
    """

    started = time.monotonic()
    settings = settings or default_settings()
    sports = list(sports) if sports else list(settings.sports)
    summary = summary if summary is not None else RegradeSummary()
    through_date = today or today_in(settings.timezone)
    report = RegradeReport(dry_run=dry_run, sports=sports, summary=summary)

    picks = picks_store.fetch_push_picks(sports, through_date)
    summary.total_push_picks = len(picks)
    logger.info(
        "Found %d push picks through %s for %s%s",
        len(picks),
        through_date,
        ", ".join(sports),
        " (dry run)" if dry_run else "",
    )
    if not picks:
        return _finish(report, started)

    dates_by_league = group_game_dates(picks, settings.leagues)
    results = load_results(
        results_store,
        dates_by_league,
        max_workers=settings.max_fetch_workers,
    )

    affected: list[str] = []
    for pick in picks:
        summary.evaluated += 1
        try:
            _process_pick(
                pick,
                results,
                settings=settings,
                picks_store=picks_store,
                dry_run=dry_run,
                report=report,
                affected=affected,
            )
        except Exception:
            summary.error("processing_error")
            logger.exception("Pick processing error for %s", pick.id)

    for avatar_id in affected:
        if dry_run:
            report.avatars_updated.append(avatar_id)
            continue
        try:
            picks_store.recalculate_performance(avatar_id)
        except Exception as exc:
            logger.warning("Performance recalculation failed for avatar %s: %s", avatar_id, exc)
            continue
        report.avatars_updated.append(avatar_id)

    return _finish(report, started)


def regrade_from_config(
    config: AppConfig,
    *,
    sports: Sequence[str] | None = None,
    dry_run: bool = False,
) -> dict[str, Any]:
    """Connect both stores and run the job, returning the response payload.

    Missing store configuration, a failed pick fetch or any other error that
    escapes the run (network timeouts included) aborts it with a
    ``success: false`` payload that still carries the counts gathered so far.
    """

    started = time.monotonic()
    summary = RegradeSummary()
    try:
        config.picks_store.require()
        config.results_store.require()
        report = run_regrade(
            PickStore.from_config(config.picks_store),
            ResultsStore.from_config(config.results_store),
            sports=sports,
            dry_run=dry_run,
            settings=config.settings,
            summary=summary,
        )
    except (ConfigError, StoreError) as exc:
        logger.error("Regrade aborted: %s", exc)
        return _aborted(exc, summary, started)
    except Exception as exc:
        logger.exception("Regrade aborted by unexpected error")
        return _aborted(exc, summary, started)
    return report.to_payload()


def _aborted(exc: Exception, summary: RegradeSummary, started: float) -> dict[str, Any]:
    return {
        "success": False,
        "error": str(exc),
        "summary": summary.as_dict(),
        "duration_ms": int((time.monotonic() - started) * 1000),
    }


def _process_pick(
    pick: Pick,
    results: dict[str, LeagueResults],
    *,
    settings: RegradeSettings,
    picks_store: PickSource,
    dry_run: bool,
    report: RegradeReport,
    affected: list[str],
) -> None:
    summary = report.summary
    league = settings.league_for(pick.sport)
    if league is None:
        summary.skip("unsupported_sport")
        return

    game_result = find_game_result(pick, results.get(league) or LeagueResults(league=league))
    if game_result is None:
        summary.skip("game_not_found")
        logger.debug("No result for pick %s (%s on %s)", pick.id, pick.matchup, pick.game_date)
        return

    outcome = regrade_pick(pick, game_result)
    if isinstance(outcome, SkipOutcome):
        summary.skip(outcome.reason)
        logger.debug("Skipped pick %s: %s", pick.id, outcome.reason)
        return

    if outcome.result == "push":
        summary.remained_push += 1
        return

    if not dry_run:
        try:
            picks_store.update_pick_result(
                pick.id,
                result=outcome.result,
                actual_result=outcome.actual_result,
                graded_at=_utc_now_iso(),
            )
        except StoreError as exc:
            summary.error("update_error")
            logger.warning("Update failed for pick %s: %s", pick.id, exc)
            return

    summary.regraded_total += 1
    if outcome.result == "won":
        summary.regraded_to_won += 1
    elif outcome.result == "lost":
        summary.regraded_to_lost += 1
    if pick.avatar_id not in affected:
        affected.append(pick.avatar_id)
    if len(report.changed) < settings.changed_sample_limit:
        report.changed.append(_change_record(pick, outcome.result, outcome.actual_result))


def _finish(report: RegradeReport, started: float) -> RegradeReport:
    report.report_generated_at = _utc_now_iso()
    report.duration_ms = int((time.monotonic() - started) * 1000)
    summary = report.summary
    logger.info(
        "Regrade finished: %d evaluated, %d regraded (%d won, %d lost), "
        "%d remained push, %d skipped, %d errors in %d ms",
        summary.evaluated,
        summary.regraded_total,
        summary.regraded_to_won,
        summary.regraded_to_lost,
        summary.remained_push,
        summary.skipped,
        summary.errors,
        report.duration_ms,
    )
    return report


__all__ = [
    "PickSource",
    "RegradeReport",
    "RegradeSummary",
    "regrade_from_config",
    "run_regrade",
    "today_in",
]

"""Command-line entry point for the push-pick regrade job."""

from __future__ import annotations

import argparse
import json
import logging
from typing import Iterable, Mapping

from dotenv import load_dotenv

from .config import load_config, normalize_sports
from .regrade import RegradeReport, RegradeSummary, regrade_from_config
from .report import write_report

logger = logging.getLogger(__name__)


def main(argv: Iterable[str] | None = None) -> int:
    parser = argparse.ArgumentParser(description="Regrade push picks against finalized game results")
    parser.add_argument("--sports", help="Comma-separated sport keys (default from settings.yaml, nba,ncaab).")
    parser.add_argument("--dry-run", action="store_true", help="Evaluate every pick without writing results or recalculating avatars.")
    parser.add_argument("--report", action="store_true", help="Write a Markdown + CSV audit of the run.")
    parser.add_argument("--out-dir", default="reports", help="Directory for --report output (default: reports).")
    parser.add_argument("--json", dest="as_json", action="store_true", help="Print the full response payload as JSON.")
    parser.add_argument("--settings", default="settings.yaml", help="Path to settings.yaml.")
    parser.add_argument("--verbose", action="store_true", help="Enable debug logging.")
    args = parser.parse_args(list(argv) if argv is not None else None)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(levelname)s:%(name)s:%(message)s",
    )

    load_dotenv()
    config = load_config(args.settings)
    sports = normalize_sports(args.sports) if args.sports else None
    if args.sports and not sports:
        parser.error("--sports must name at least one sport")

    payload = regrade_from_config(config, sports=sports, dry_run=args.dry_run)

    if args.as_json:
        print(json.dumps(payload, indent=2, default=str))
    else:
        _print_summary(payload)

    if not payload.get("success"):
        return 1

    if args.report:
        paths = write_report(_report_from_payload(payload), out_dir=args.out_dir)
        for label, path in paths.items():
            logger.info("Wrote %s report to %s", label, path)
    return 0


def _print_summary(payload: Mapping[str, object]) -> None:
    summary = payload.get("summary") or {}
    if not payload.get("success"):
        print(f"Regrade failed: {payload.get('error')}")
        return
    mode = "DRY RUN" if payload.get("dry_run") else "LIVE"
    print(f"Regrade ({mode}) for {', '.join(payload.get('sports') or [])}")
    print(
        f"  push picks: {summary.get('total_push_picks', 0)}  "
        f"evaluated: {summary.get('evaluated', 0)}  "
        f"regraded: {summary.get('regraded_total', 0)} "
        f"(won {summary.get('regraded_to_won', 0)} / lost {summary.get('regraded_to_lost', 0)})"
    )
    print(
        f"  remained push: {summary.get('remained_push', 0)}  "
        f"skipped: {summary.get('skipped', 0)}  errors: {summary.get('errors', 0)}"
    )
    reasons = summary.get("skipped_reasons") or {}
    for reason, count in sorted(reasons.items(), key=lambda item: (-item[1], item[0])):
        print(f"    {reason}: {count}")
    avatars = payload.get("avatars_updated") or []
    if avatars:
        print(f"  avatars updated: {len(avatars)}")
    print(f"  duration: {payload.get('duration_ms', 0)} ms")


def _report_from_payload(payload: Mapping[str, object]) -> RegradeReport:
    summary_data = dict(payload.get("summary") or {})
    summary = RegradeSummary(**summary_data)
    return RegradeReport(
        dry_run=bool(payload.get("dry_run")),
        sports=list(payload.get("sports") or []),
        summary=summary,
        avatars_updated=list(payload.get("avatars_updated") or []),
        changed=list(payload.get("changed") or []),
        report_generated_at=str(payload.get("report_generated_at") or ""),
        duration_ms=int(payload.get("duration_ms") or 0),
    )


if __name__ == "__main__":  # pragma: no cover
    raise SystemExit(main())

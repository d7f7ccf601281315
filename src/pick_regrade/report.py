"""Reporting helpers for regrade audit outputs."""

from __future__ import annotations

from datetime import datetime, timezone
from pathlib import Path

import pandas as pd

from .regrade import RegradeReport

SUMMARY_LABELS = (
    ("total_push_picks", "Push picks found"),
    ("evaluated", "Evaluated"),
    ("regraded_total", "Regraded"),
    ("regraded_to_won", "Regraded to won"),
    ("regraded_to_lost", "Regraded to lost"),
    ("remained_push", "Confirmed push"),
    ("skipped", "Skipped"),
    ("errors", "Errors"),
)

CHANGED_COLUMNS = [
    "pick_id",
    "avatar_id",
    "sport",
    "game_date",
    "matchup",
    "bet_type",
    "pick_selection",
    "from_result",
    "to_result",
    "new_actual_result",
]


def changed_dataframe(report: RegradeReport) -> pd.DataFrame:
    if not report.changed:
        return pd.DataFrame(columns=CHANGED_COLUMNS)
    df = pd.DataFrame(report.changed)
    for col in CHANGED_COLUMNS:
        if col not in df.columns:
            df[col] = ""
    return df[CHANGED_COLUMNS].sort_values(["game_date", "pick_id"]).reset_index(drop=True)


def render_markdown(report: RegradeReport, *, title: str = "Push Pick Regrade") -> str:
    """Render the run summary in GitHub-flavoured Markdown."""

    summary = report.summary.as_dict()
    lines: list[str] = [f"# {title}", ""]
    lines.append(f"**Generated:** {_format_dt(report.report_generated_at)}")
    lines.append(f"**Sports:** {', '.join(report.sports) or 'N/A'}")
    lines.append(f"**Mode:** {'dry run (no writes)' if report.dry_run else 'live'}")
    lines.append(f"**Duration:** {report.duration_ms} ms")
    lines.append("")

    lines.append("## Summary")
    summary_df = pd.DataFrame(
        [{"Metric": label, "Count": summary[key]} for key, label in SUMMARY_LABELS]
    )
    lines.extend(_markdown_table(summary_df))
    lines.append("")

    reasons = summary.get("skipped_reasons") or {}
    if reasons:
        lines.append("## Skip & Error Reasons")
        reasons_df = (
            pd.DataFrame(sorted(reasons.items()), columns=["Reason", "Count"])
            .sort_values(["Count", "Reason"], ascending=[False, True])
        )
        lines.extend(_markdown_table(reasons_df))
        lines.append("")

    changed_df = changed_dataframe(report)
    if not changed_df.empty:
        lines.append("## Regraded Picks")
        if report.changed_count_total > len(changed_df):
            lines.append(
                f"_Showing {len(changed_df)} of {report.changed_count_total} regraded picks._"
            )
            lines.append("")
        lines.extend(_markdown_table(changed_df.drop(columns=["avatar_id"])))
        lines.append("")

    if report.avatars_updated:
        label = "Avatars to recalculate" if report.dry_run else "Avatars recalculated"
        lines.append(f"## {label}")
        for avatar_id in report.avatars_updated:
            lines.append(f"- `{avatar_id}`")
        lines.append("")

    return "\n".join(lines).strip() + "\n"


def write_report(
    report: RegradeReport,
    *,
    out_dir: str | Path = "reports",
    basename: str | None = None,
) -> dict[str, Path]:
    """Persist the Markdown summary and a CSV of regraded picks."""

    out_path = Path(out_dir)
    out_path.mkdir(parents=True, exist_ok=True)
    if basename is None:
        basename = f"regrade_{datetime.now(timezone.utc).strftime('%Y%m%d_%H%M%S')}"
    md_path = out_path / f"{basename}.md"
    csv_path = out_path / f"{basename}.csv"

    md_path.write_text(render_markdown(report), encoding="utf-8")
    changed_dataframe(report).to_csv(csv_path, index=False)
    return {"markdown": md_path, "csv": csv_path}


def _markdown_table(df: pd.DataFrame) -> list[str]:
    headers = [str(col) for col in df.columns]
    divider = ["---" for _ in headers]
    rows = ["| " + " | ".join(headers) + " |", "| " + " | ".join(divider) + " |"]
    for _, row in df.iterrows():
        cells = [str(row[col]).replace("|", "\\|") for col in df.columns]
        rows.append("| " + " | ".join(cells) + " |")
    return rows


def _format_dt(value: object) -> str:
    if isinstance(value, datetime):
        return value.strftime("%Y-%m-%d %H:%M UTC")
    if isinstance(value, str) and value:
        try:
            return datetime.fromisoformat(value).strftime("%Y-%m-%d %H:%M UTC")
        except ValueError:
            return value
    return "N/A"


__all__ = ["changed_dataframe", "render_markdown", "write_report"]

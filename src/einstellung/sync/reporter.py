"""Report and preview formatting.

- ``format_sync_report`` -- post-run summary.
- ``format_dry_run_preview`` -- what a real run would ask about.
- ``format_candidate`` -- one change candidate as a diff line.
- ``format_overwrite_preview`` -- unified diff shown before a write.
- ``report_to_json`` -- structured dict for ``--json`` output.
"""

from __future__ import annotations

import difflib
from typing import TYPE_CHECKING

from .models import SyncAction, SyncMode

if TYPE_CHECKING:
    from .models import ChangeCandidate, LineSequence, SyncReport


# ------------------------------------------------------------------
# Human-readable report
# ------------------------------------------------------------------


def format_sync_report(report: SyncReport) -> str:
    """Format a complete sync report as human-readable text.

    Sections are only included when they contain at least one result.

    Args:
        report: The completed sync report.

    Returns:
        Multi-line formatted string.
    """
    lines: list[str] = []

    header = f"Sync report ({report.mode.value})"
    if report.dry_run:
        header += " (DRY RUN)"
    lines.append(header)
    lines.append(f"Started: {report.started_at}")
    if report.completed_at:
        lines.append(f"Completed: {report.completed_at}")
    lines.append("")

    lines.append(
        f"Processed {len(report.results)} targets: "
        f"{len(report.updated)} updated, {len(report.declined)} declined, "
        f"{len(report.skipped)} unchanged, {len(report.errors)} errors"
    )
    lines.append("")

    verb = "Updated" if report.mode is SyncMode.READ else "Overwritten"
    if report.updated:
        lines.append(f"{verb}:")
        for r in report.updated:
            lines.append(f"  {_describe(r.canonical, r.location)}")
        lines.append("")

    if report.declined:
        lines.append("Declined:")
        for r in report.declined:
            lines.append(f"  {_describe(r.canonical, r.location)}")
        lines.append("")

    if report.errors:
        lines.append("Errors:")
        for r in report.errors:
            lines.append(f"  {r.target}: {r.error}")
        lines.append("")

    return "\n".join(lines).rstrip()


def _describe(canonical: str, location: str | None) -> str:
    if location is None:
        return canonical
    return f"{canonical} -> {location}"


# ------------------------------------------------------------------
# Dry-run preview
# ------------------------------------------------------------------


def format_dry_run_preview(report: SyncReport) -> str:
    """Format a dry-run report as a list of pending reviews.

    Args:
        report: A dry-run sync report (``dry_run=True``).

    Returns:
        Multi-line formatted string.
    """
    lines: list[str] = []
    lines.append("DRY RUN -- No changes will be made")
    lines.append(f"Mode: {report.mode.value}")
    lines.append("")

    pending = [
        r
        for r in report.results
        if r.success and r.action != SyncAction.SKIP
    ]
    for r in pending:
        if r.location is None:
            lines.append(f"  {r.canonical}: {r.changes} change(s) to review")
        else:
            lines.append(f"  {r.location}: differs from {r.canonical}")

    if not pending:
        lines.append("No changes needed.")
    lines.append("")

    if report.errors:
        lines.append("Errors:")
        for r in report.errors:
            lines.append(f"  {r.target}: {r.error}")
        lines.append("")

    return "\n".join(lines).rstrip()


# ------------------------------------------------------------------
# Candidates and previews
# ------------------------------------------------------------------


def format_candidate(candidate: ChangeCandidate) -> str:
    """Render *candidate* as ``+ line`` or ``- line``."""
    return f"{candidate.kind.prefix} {candidate.line}"


def format_overwrite_preview(
    current: LineSequence,
    replacement: LineSequence,
    location: str,
    context: int = 3,
    labels: tuple[str, str] = ("current", "canonical"),
) -> str:
    """Unified diff from *current* location content to *replacement*.

    *labels* name the two sides in the diff header.

    Returns:
        The diff text; empty when the sequences are equal.
    """
    diff_lines = difflib.unified_diff(
        list(current),
        list(replacement),
        fromfile=f"{location} ({labels[0]})",
        tofile=f"{location} ({labels[1]})",
        n=context,
        lineterm="",
    )
    return "\n".join(diff_lines)


# ------------------------------------------------------------------
# JSON output
# ------------------------------------------------------------------


def report_to_json(report: SyncReport) -> dict:
    """Convert a sync report to a structured dict for JSON serialisation.

    Args:
        report: The sync report.

    Returns:
        Dict with run info, counts, and per-result details.
    """
    results_list = []
    for r in report.results:
        entry: dict = {
            "canonical": r.canonical,
            "action": r.action.value,
            "success": r.success,
            "changes": r.changes,
        }
        if r.location is not None:
            entry["location"] = r.location
        if r.error:
            entry["error"] = r.error
        results_list.append(entry)

    return {
        "mode": report.mode.value,
        "dry_run": report.dry_run,
        "started_at": report.started_at,
        "completed_at": report.completed_at,
        "counts": {
            "total": len(report.results),
            "updated": len(report.updated),
            "declined": len(report.declined),
            "skipped": len(report.skipped),
            "errors": len(report.errors),
        },
        "results": results_list,
    }

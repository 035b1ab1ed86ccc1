"""Dry-run report rendering and persistence."""

from __future__ import annotations

import logging
from pathlib import Path

from vole.models.dry_run import DryRunOutput, DryRunReport
from vole.models.options import DownloadsChoice
from vole.models.rule import RuleKind
from vole.models.rule_scan import RuleScan

log = logging.getLogger(__name__)

DRY_RUN_REPORT_NAME = "vole-dry-run.txt"

_HEADER = (
    "Dry-run details (no files will be deleted):",
    "Note: directories are only removed if empty after file removal.",
)


def top_level_dirs(dirs: list[Path]) -> list[Path]:
    """Return the directories not nested under another directory in *dirs*."""
    recorded = set(dirs)
    return [d for d in dirs if not any(parent in recorded for parent in d.parents)]


def _is_under(path: Path, tops: set[Path]) -> bool:
    return any(parent in tops for parent in path.parents)


def render_scan(scan: RuleScan) -> list[str]:
    """Render one scan as report lines."""
    lines = [f"Rule: {scan.rule.label} ({scan.rule.id})"]

    if not scan.files and not scan.dirs:
        lines.append("  (no entries)")
    else:
        tops: list[Path] = []
        if scan.rule.kind is RuleKind.DOWNLOADS and scan.downloads_choice is DownloadsChoice.FOLDERS:
            tops = top_level_dirs(scan.dirs)

        if tops:
            top_set = set(tops)
            for path in scan.files:
                if not _is_under(path, top_set):
                    lines.append(f"  file: {path}")
            for path in tops:
                lines.append(f"  dir: {path}")
                lines.append("    (contents omitted)")
        else:
            lines.extend(f"  file: {path}" for path in scan.files)
            lines.extend(f"  dir: {path}" for path in scan.dirs)

    lines.extend(f"  error: {message}" for message in scan.error_messages)
    return lines


def dry_run_output(scans: list[RuleScan]) -> DryRunOutput:
    """Render every scan and total what a real run would touch.

    Totals always count every recorded path, including the ones the
    text summarizes away.
    """
    report = DryRunReport()
    lines: list[str] = list(_HEADER)

    for scan in scans:
        lines.extend(render_scan(scan))
        report.files_listed += len(scan.files)
        report.dirs_listed += len(scan.dirs)
        report.bytes_listed += scan.bytes
        report.errors += scan.errors

    return DryRunOutput(report=report, details="\n".join(lines) + "\n")


def dry_run_report_path(home: Path) -> Path:
    """Location of the saved dry-run report under *home*."""
    return home / DRY_RUN_REPORT_NAME


def write_dry_run_report(home: Path, details: str) -> Path:
    """Save the report text, replacing any earlier report.

    Raises:
        OSError: If the file cannot be written.
    """
    path = dry_run_report_path(home)
    path.write_text(details, encoding="utf-8")
    log.info("Dry-run report saved to %s", path)
    return path


def remove_dry_run_report(home: Path) -> bool:
    """Delete a stale dry-run report. Returns whether one was removed.

    Raises:
        OSError: If the report exists but cannot be removed.
    """
    path = dry_run_report_path(home)
    try:
        path.unlink()
    except FileNotFoundError:
        return False
    log.info("Removed stale dry-run report %s", path)
    return True

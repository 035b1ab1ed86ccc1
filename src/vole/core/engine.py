"""Rule scanning and cleaning orchestration."""

from __future__ import annotations

import errno
import logging
import os
from pathlib import Path
from typing import Callable

from vole.core.downloads import scan_downloads_rule
from vole.core.globs import compile_globs
from vole.core.logs import scan_logs_rule
from vole.core.walker import walk_tree
from vole.models.clean_report import CleanReport
from vole.models.options import ScanOptions
from vole.models.rule import Rule, RuleKind
from vole.models.rule_scan import RuleScan
from vole.utils import path_depth

log = logging.getLogger(__name__)

ProgressCallback = Callable[[str, str], None]  # (rule_id, status_message)
ScanCallback = Callable[[RuleScan], None]


def scan_rule(rule: Rule, options: ScanOptions | None = None) -> RuleScan:
    """Evaluate one rule against the live filesystem. Never deletes."""
    options = options or ScanOptions()
    match rule.kind:
        case RuleKind.DOWNLOADS:
            return scan_downloads_rule(rule, options)
        case RuleKind.LOGS:
            return scan_logs_rule(rule, options)
        case _:
            return scan_paths_rule(rule, options)


def scan_rules(
    rules: list[Rule],
    options: ScanOptions | None = None,
    on_progress: ProgressCallback | None = None,
    on_result: ScanCallback | None = None,
) -> list[RuleScan]:
    """Scan rules one at a time, in order.

    Args:
        rules: Rules to evaluate.
        options: Downloads choice, home directory and reference time.
        on_progress: Optional callback for progress updates.
        on_result: Optional callback fired after each rule is scanned.

    Returns:
        One scan per rule, in the same order.
    """
    options = options or ScanOptions()
    scans: list[RuleScan] = []
    for rule in rules:
        if on_progress:
            on_progress(rule.id, "scanning")
        try:
            scan = scan_rule(rule, options)
        except Exception as exc:
            log.exception("Rule '%s' failed during scan", rule.id)
            scan = RuleScan(rule=rule)
            scan.add_error(f"scan failed: {exc}")
        scans.append(scan)
        if on_result:
            on_result(scan)
        if on_progress:
            on_progress(rule.id, "error" if scan.errors else "done")
    return scans


def scan_paths_rule(rule: Rule, options: ScanOptions) -> RuleScan:
    """Walk every configured root, honoring the rule's exclusion globs."""
    scan = RuleScan(rule=rule)

    exclude, glob_errors = compile_globs(rule.exclude_globs)
    for message in glob_errors:
        scan.add_error(message)

    for root in rule.expanded_paths(options.home):
        if not os.path.lexists(root):
            log.debug("Rule '%s': %s does not exist", rule.id, root)
            continue
        walk_tree(root, scan, exclude)

    return scan


def apply_scan(scan: RuleScan) -> CleanReport:
    """Delete what a single scan recorded.

    Files go first. Directories follow deepest-first and are only removed
    when empty. Paths that are already gone are skipped silently; any
    other failure is counted and the sweep moves on.
    """
    report = CleanReport()

    for path in scan.files:
        try:
            size = path.lstat().st_size
            path.unlink()
        except FileNotFoundError:
            continue
        except OSError as exc:
            _record_failure(report, path, exc)
            continue
        report.files_removed += 1
        report.bytes_freed += size

    for path in sorted(scan.dirs, key=path_depth, reverse=True):
        try:
            os.rmdir(path)
        except FileNotFoundError:
            continue
        except OSError as exc:
            _record_failure(report, path, exc)
            continue
        report.dirs_removed += 1

    log.info(
        "Rule '%s': removed %d files and %d directories (%d bytes, %d errors)",
        scan.rule.id,
        report.files_removed,
        report.dirs_removed,
        report.bytes_freed,
        report.errors,
    )
    return report


def apply(scans: list[RuleScan], on_result: Callable[[str, CleanReport], None] | None = None) -> CleanReport:
    """Apply every scan in order and return the combined report."""
    total = CleanReport()
    for scan in scans:
        report = apply_scan(scan)
        if on_result:
            on_result(scan.rule.id, report)
        total.merge(report)
    return total


def _record_failure(report: CleanReport, path: Path, exc: OSError) -> None:
    reason = "directory not empty" if exc.errno == errno.ENOTEMPTY else (exc.strerror or str(exc))
    log.debug("Cannot remove %s: %s", path, reason)
    report.errors += 1
    report.error_messages.append(f"{path}: {reason}")

"""Scan and apply engine."""

from vole.core.engine import apply, apply_scan, scan_rule, scan_rules
from vole.core.report import dry_run_output, remove_dry_run_report, write_dry_run_report

__all__ = [
    "apply",
    "apply_scan",
    "dry_run_output",
    "remove_dry_run_report",
    "scan_rule",
    "scan_rules",
    "write_dry_run_report",
]

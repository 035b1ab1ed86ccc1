"""Dry-run report dataclasses."""

from __future__ import annotations

from dataclasses import dataclass, field


@dataclass(slots=True)
class DryRunReport:
    """Totals listed by a dry run across all scans."""

    files_listed: int = 0
    dirs_listed: int = 0
    bytes_listed: int = 0
    errors: int = 0


@dataclass(slots=True)
class DryRunOutput:
    """Dry-run totals plus the rendered report text."""

    report: DryRunReport = field(default_factory=DryRunReport)
    details: str = ""

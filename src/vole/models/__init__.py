"""Vole data models."""

from vole.models.rule import Rule, RuleKind
from vole.models.options import DownloadsChoice, ScanOptions
from vole.models.rule_scan import RuleScan
from vole.models.clean_report import CleanReport
from vole.models.dry_run import DryRunOutput, DryRunReport

__all__ = [
    "CleanReport",
    "DownloadsChoice",
    "DryRunOutput",
    "DryRunReport",
    "Rule",
    "RuleKind",
    "RuleScan",
    "ScanOptions",
]

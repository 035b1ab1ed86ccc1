"""Rule scan result dataclass."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from pathlib import Path

from vole.models.options import DownloadsChoice
from vole.models.rule import Rule

log = logging.getLogger(__name__)


@dataclass(slots=True)
class RuleScan:
    """Files and directories one rule resolved to on the live filesystem.

    ``bytes`` only ever counts the paths in ``files``; directories carry
    no size of their own.
    """

    rule: Rule
    bytes: int = 0
    entries: int = 0
    files: list[Path] = field(default_factory=list)
    dirs: list[Path] = field(default_factory=list)
    errors: int = 0
    error_messages: list[str] = field(default_factory=list)
    downloads_choice: DownloadsChoice | None = None

    def add_file(self, path: Path, size: int) -> None:
        self.files.append(path)
        self.bytes += size
        self.entries += 1

    def add_dir(self, path: Path) -> None:
        self.dirs.append(path)

    def add_error(self, message: str) -> None:
        """Record a non-fatal problem and keep going."""
        log.debug("Rule '%s': %s", self.rule.id, message)
        self.errors += 1
        self.error_messages.append(message)

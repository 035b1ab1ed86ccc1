"""Cleaning report dataclass."""

from __future__ import annotations

from dataclasses import dataclass, field


@dataclass(slots=True)
class CleanReport:
    """Result of applying one or more rule scans."""

    files_removed: int = 0
    dirs_removed: int = 0
    bytes_freed: int = 0
    errors: int = 0
    error_messages: list[str] = field(default_factory=list)

    def merge(self, other: CleanReport) -> None:
        """Add another report's counts into this one."""
        self.files_removed += other.files_removed
        self.dirs_removed += other.dirs_removed
        self.bytes_freed += other.bytes_freed
        self.errors += other.errors
        self.error_messages.extend(other.error_messages)

"""Per-invocation scan options."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from pathlib import Path


class DownloadsChoice(str, Enum):
    """Which side of an archive/folder pair a Downloads rule removes."""

    ARCHIVES = "archives"
    FOLDERS = "folders"

    @classmethod
    def parse(cls, value: str) -> DownloadsChoice | None:
        """Parse user input such as ``a``, ``archive`` or ``folders``."""
        match value.strip().lower():
            case "a" | "archive" | "archives":
                return cls.ARCHIVES
            case "f" | "folder" | "folders":
                return cls.FOLDERS
            case _:
                return None

    def __str__(self) -> str:
        return self.value


@dataclass(frozen=True, slots=True)
class ScanOptions:
    """Options threaded into every scan.

    ``home`` replaces the process home when expanding ``~`` and ``now``
    pins the reference time for age filtering. Both default to the live
    values when left as None.
    """

    downloads_choice: DownloadsChoice | None = None
    home: Path | None = None
    now: float | None = None

"""Linux distribution detection from os-release."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from pathlib import Path

log = logging.getLogger(__name__)

OS_RELEASE = Path("/etc/os-release")


@dataclass(slots=True)
class Distro:
    id: str | None = None
    id_like: list[str] = field(default_factory=list)

    def identifiers(self) -> list[str]:
        """Lowercased ``ID`` followed by the ``ID_LIKE`` entries."""
        ids = [self.id.lower()] if self.id else []
        ids.extend(item.lower() for item in self.id_like)
        return ids


def parse_os_release(content: str) -> Distro:
    distro = Distro()
    for line in content.splitlines():
        line = line.strip()
        if not line or line.startswith("#"):
            continue
        key, _, value = line.partition("=")
        value = value.strip().strip('"').strip("'")
        match key:
            case "ID":
                distro.id = value
            case "ID_LIKE":
                distro.id_like = value.split()
    return distro


def detect(path: Path = OS_RELEASE) -> Distro:
    """Read the running distribution, or an empty Distro if unknown."""
    try:
        content = path.read_text(encoding="utf-8")
    except OSError:
        log.debug("Cannot read %s", path)
        return Distro()
    return parse_os_release(content)

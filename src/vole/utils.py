"""Shared utility functions."""

from __future__ import annotations

import os
import re
from pathlib import Path

_HOME_VAR = re.compile(r"\$(?:\{HOME\}|HOME(?!\w))")


def xdg_config_home() -> Path:
    """Return XDG_CONFIG_HOME, defaulting to ~/.config."""
    return Path(os.environ.get("XDG_CONFIG_HOME", Path.home() / ".config"))


def expand_path(raw: str, home: Path | None = None) -> Path:
    """Expand ``~`` and ``$VAR``/``${VAR}`` references in a configured path.

    A leading ``~`` and any ``$HOME``/``${HOME}`` resolve against *home*
    when given, otherwise against the process home. Undefined variables
    are left as written.
    """
    if home is not None:
        raw = _HOME_VAR.sub(lambda _: str(home), raw)
    expanded = os.path.expandvars(raw)
    if home is not None and (expanded == "~" or expanded.startswith("~/")):
        return Path(str(home) + expanded[1:])
    return Path(os.path.expanduser(expanded))


def path_depth(path: Path) -> int:
    """Number of components in *path*, root included."""
    return len(path.parts)


def bytes_to_human(size_bytes: int) -> str:
    """Convert byte count to a human-readable string."""
    if size_bytes < 0:
        return f"-{bytes_to_human(-size_bytes)}"
    if size_bytes == 0:
        return "0 B"

    units = ("B", "KiB", "MiB", "GiB", "TiB")
    value = float(size_bytes)
    for unit in units[:-1]:
        if abs(value) < 1024:
            return f"{value:.1f} {unit}" if unit != "B" else f"{int(value)} B"
        value /= 1024
    return f"{value:.1f} {units[-1]}"

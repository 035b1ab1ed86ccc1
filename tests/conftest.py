"""Shared test fixtures."""

from __future__ import annotations

import os
from pathlib import Path

import pytest

from vole.models.rule import Rule, RuleKind

NOW = 1_700_000_000.0
DAY = 24 * 60 * 60


@pytest.fixture
def make_rule():
    """Factory for rules rooted at real temp paths."""

    def _make(
        *paths: Path | str,
        kind: RuleKind = RuleKind.PATHS,
        rule_id: str = "test",
        exclude: tuple[str, ...] = (),
        older_than_days: int | None = None,
        **kwargs,
    ) -> Rule:
        return Rule(
            id=rule_id,
            label=f"Test rule ({rule_id})",
            kind=kind,
            paths=tuple(str(p) for p in paths),
            exclude_globs=exclude,
            older_than_days=older_than_days,
            **kwargs,
        )

    return _make


def write(path: Path, size: int = 0, mtime: float | None = None) -> Path:
    """Create a file of *size* bytes, optionally with a fixed mtime."""
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_bytes(b"x" * size)
    if mtime is not None:
        os.utime(path, (mtime, mtime))
    return path


@pytest.fixture
def isolate_home(tmp_path, monkeypatch):
    """Point HOME and XDG_CONFIG_HOME at a temp directory."""
    home = tmp_path / "home"
    home.mkdir()
    monkeypatch.setenv("HOME", str(home))
    monkeypatch.setenv("XDG_CONFIG_HOME", str(home / ".config"))
    monkeypatch.delenv("SUDO_USER", raising=False)
    return home

"""JSON rule configuration."""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass, field
from importlib import resources
from pathlib import Path
from typing import Any

from vole.distro import Distro
from vole.models.rule import Rule
from vole.utils import xdg_config_home

log = logging.getLogger(__name__)

SUPPORTED_VERSION = 1

_CONFIG_DIR = "vole"
_CONFIG_FILE = "config.json"


class ConfigError(Exception):
    """Raised when a config file cannot be read or is not supported."""


def default_config_path() -> Path:
    """Return the per-user config location."""
    return xdg_config_home() / _CONFIG_DIR / _CONFIG_FILE


@dataclass(slots=True)
class Config:
    """Loaded rule configuration.

    Lookup order for :meth:`load`: an explicit path, then the user's
    config file, then the defaults shipped with the package.
    """

    version: int
    rules: list[Rule] = field(default_factory=list)

    @classmethod
    def load(cls, path: Path | None = None) -> Config:
        if path is not None:
            return cls.from_path(path)

        user_path = default_config_path()
        if user_path.exists():
            return cls.from_path(user_path)

        log.debug("Using built-in default rules")
        text = resources.files("vole").joinpath("data").joinpath("default.json").read_text(encoding="utf-8")
        return cls.from_text(text, source="built-in default config")

    @classmethod
    def from_path(cls, path: Path) -> Config:
        log.debug("Loading config from %s", path)
        try:
            text = path.read_text(encoding="utf-8")
        except OSError as e:
            raise ConfigError(f"Failed to read config file {path}: {e}") from e
        return cls.from_text(text, source=f"config file {path}")

    @classmethod
    def from_text(cls, text: str, source: str = "config") -> Config:
        try:
            data = json.loads(text)
        except json.JSONDecodeError as e:
            raise ConfigError(f"Failed to parse {source}: {e}") from e
        return cls.from_dict(data, source=source)

    @classmethod
    def from_dict(cls, data: Any, source: str = "config") -> Config:
        if not isinstance(data, dict):
            raise ConfigError(f"Failed to parse {source}: top level must be an object")

        version = data.get("version")
        if version != SUPPORTED_VERSION:
            raise ConfigError(f"Unsupported config version {version}")

        raw_rules = data.get("rules", [])
        if not isinstance(raw_rules, list):
            raise ConfigError(f"Failed to parse {source}: 'rules' must be a list")

        rules: list[Rule] = []
        for raw in raw_rules:
            try:
                rules.append(Rule.from_dict(raw))
            except ValueError as e:
                raise ConfigError(f"Failed to parse {source}: {e}") from e
        return cls(version=version, rules=rules)

    def available_rules(self, distro: Distro) -> list[Rule]:
        """Rules that apply to the detected distribution."""
        ids = distro.identifiers()
        return [rule for rule in self.rules if rule.matches_distro(ids)]

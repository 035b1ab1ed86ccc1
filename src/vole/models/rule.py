"""Cleanup rule definition."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import Any

from vole.utils import expand_path


class RuleKind(str, Enum):
    """Discovery strategy used to evaluate a rule."""

    PATHS = "paths"
    DOWNLOADS = "downloads"
    LOGS = "logs"


@dataclass(frozen=True, slots=True)
class Rule:
    """Declarative description of one category of cleanable content.

    ``kind`` decides which fields matter: ``older_than_days`` is only
    honored by ``logs`` rules, and ``downloads`` rules ignore
    ``exclude_globs``.
    """

    id: str
    label: str
    description: str | None = None
    kind: RuleKind = RuleKind.PATHS
    paths: tuple[str, ...] = ()
    requires_sudo: bool = False
    enabled_by_default: bool = False
    distros: tuple[str, ...] = ()
    exclude_globs: tuple[str, ...] = ()
    older_than_days: int | None = None

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> Rule:
        """Build a rule from its JSON form.

        Raises:
            ValueError: On missing keys or values of the wrong type.
        """
        if not isinstance(data, dict):
            raise ValueError(f"rule must be an object, got {type(data).__name__}")

        rule_id = data.get("id")
        label = data.get("label")
        if not isinstance(rule_id, str) or not rule_id:
            raise ValueError("rule is missing a string 'id'")
        if not isinstance(label, str):
            raise ValueError(f"rule '{rule_id}' is missing a string 'label'")

        try:
            kind = RuleKind(data.get("kind", RuleKind.PATHS.value))
        except ValueError:
            raise ValueError(f"rule '{rule_id}' has unknown kind {data.get('kind')!r}") from None

        older_than_days = data.get("older_than_days")
        if older_than_days is not None and (
            isinstance(older_than_days, bool) or not isinstance(older_than_days, int) or older_than_days < 0
        ):
            raise ValueError(f"rule '{rule_id}' has invalid older_than_days {older_than_days!r}")

        return cls(
            id=rule_id,
            label=label,
            description=data.get("description"),
            kind=kind,
            paths=_str_tuple(data, "paths", rule_id),
            requires_sudo=bool(data.get("requires_sudo", False)),
            enabled_by_default=bool(data.get("enabled_by_default", False)),
            distros=_str_tuple(data, "distros", rule_id),
            exclude_globs=_str_tuple(data, "exclude_globs", rule_id),
            older_than_days=older_than_days,
        )

    def matches_distro(self, distro_ids: list[str]) -> bool:
        """Whether the rule applies to a system with the given distro ids."""
        if not self.distros:
            return True
        wanted = {d.lower() for d in self.distros}
        return any(i.lower() in wanted for i in distro_ids)

    def expanded_paths(self, home: Path | None = None) -> list[Path]:
        """Return the configured paths with ``~`` and variables expanded."""
        return [expand_path(raw, home=home) for raw in self.paths]


def _str_tuple(data: dict[str, Any], key: str, rule_id: str) -> tuple[str, ...]:
    value = data.get(key, [])
    if not isinstance(value, list) or not all(isinstance(v, str) for v in value):
        raise ValueError(f"rule '{rule_id}': '{key}' must be a list of strings")
    return tuple(value)

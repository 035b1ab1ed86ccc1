"""Exclusion glob compilation.

Patterns follow shell glob syntax: ``*`` and ``?`` (both match ``/``),
``[...]`` classes with ``!`` or ``^`` negation, ``{a,b}`` alternation,
``**/`` for any number of leading directories and ``\\`` escapes.
Matching is always done against a path relative to the scanned root.
"""

from __future__ import annotations

import logging
import re
from pathlib import Path, PurePath

log = logging.getLogger(__name__)


class GlobError(ValueError):
    """Raised when a glob pattern cannot be parsed."""


class ExcludeMatcher:
    """Compiled set of exclusion globs."""

    def __init__(self, patterns: list[str], regex: re.Pattern[str]) -> None:
        self.patterns = patterns
        self._regex = regex

    def matches(self, rel: PurePath | str) -> bool:
        """Check a root-relative path against every pattern."""
        text = rel.as_posix() if isinstance(rel, PurePath) else rel
        if text == ".":
            text = ""
        return self._regex.fullmatch(text) is not None

    def is_excluded(self, path: Path, root: Path) -> bool:
        """Check *path* relative to *root*."""
        try:
            rel = path.relative_to(root)
        except ValueError:
            rel = path
        return self.matches(rel)

    def __repr__(self) -> str:
        return f"ExcludeMatcher({self.patterns!r})"


def compile_globs(patterns: list[str] | tuple[str, ...]) -> tuple[ExcludeMatcher | None, list[str]]:
    """Compile exclusion globs into a single matcher.

    Returns ``(matcher, errors)``. Patterns that fail to parse are skipped
    and reported; the rest still compile. An empty pattern list yields
    ``(None, [])``.
    """
    if not patterns:
        return None, []

    errors: list[str] = []
    compiled: list[str] = []
    kept: list[str] = []

    for pattern in patterns:
        try:
            compiled.append(translate(pattern))
            kept.append(pattern)
        except GlobError as exc:
            errors.append(f"invalid exclude glob {pattern!r}: {exc}")

    if not compiled:
        return None, errors

    try:
        regex = re.compile("|".join(f"(?:{body})" for body in compiled), re.DOTALL)
    except re.error as exc:
        log.warning("Could not build exclusion matcher: %s", exc)
        return None, errors + [f"could not build exclusion matcher: {exc}"]

    return ExcludeMatcher(kept, regex), errors


def translate(pattern: str) -> str:
    """Translate one glob pattern into a regular expression body.

    Raises:
        GlobError: On an unclosed class or group, a nested or unopened
            alternation, a reversed range or a dangling escape.
    """
    out: list[str] = []
    i, n = 0, len(pattern)
    in_alternation = False

    while i < n:
        c = pattern[i]
        if c == "*":
            if pattern.startswith("**/", i) and (i == 0 or pattern[i - 1] == "/"):
                out.append("(?:.*/)?")
                i += 3
                continue
            while i < n and pattern[i] == "*":
                i += 1
            out.append(".*")
            continue
        if c == "?":
            out.append(".")
        elif c == "[":
            body, i = _translate_class(pattern, i)
            out.append(body)
            continue
        elif c == "{":
            if in_alternation:
                raise GlobError("nested alternation groups are not supported")
            in_alternation = True
            out.append("(?:")
        elif c == "}":
            if not in_alternation:
                raise GlobError("unopened alternation group")
            in_alternation = False
            out.append(")")
        elif c == "," and in_alternation:
            out.append("|")
        elif c == "\\":
            if i + 1 >= n:
                raise GlobError("dangling escape")
            out.append(re.escape(pattern[i + 1]))
            i += 2
            continue
        else:
            out.append(re.escape(c))
        i += 1

    if in_alternation:
        raise GlobError("unclosed alternation group")
    return "".join(out)


def _translate_class(pattern: str, start: int) -> tuple[str, int]:
    """Translate the ``[...]`` class opening at *start*; return (regex, next index)."""
    n = len(pattern)
    j = start + 1
    negate = False
    if j < n and pattern[j] in "!^":
        negate = True
        j += 1

    members: list[str] = []
    if j < n and pattern[j] == "]":
        members.append("]")
        j += 1
    while j < n and pattern[j] != "]":
        members.append(pattern[j])
        j += 1
    if j >= n:
        raise GlobError("unclosed character class")

    parts: list[str] = []
    k = 0
    while k < len(members):
        if k + 2 < len(members) and members[k + 1] == "-":
            lo, hi = members[k], members[k + 2]
            if lo > hi:
                raise GlobError(f"invalid range {lo}-{hi}")
            parts.append(f"{re.escape(lo)}-{re.escape(hi)}")
            k += 3
        else:
            parts.append(re.escape(members[k]))
            k += 1

    return "[" + ("^" if negate else "") + "".join(parts) + "]", j + 1

"""Name and age based selection of log files."""

from __future__ import annotations

import logging
import os
import stat
import time
from pathlib import Path

from vole.core.globs import compile_globs
from vole.core.walker import FileFilter, walk_tree
from vole.models.options import ScanOptions
from vole.models.rule import Rule
from vole.models.rule_scan import RuleScan

log = logging.getLogger(__name__)

SECONDS_PER_DAY = 24 * 60 * 60

_EXACT_NAMES = ("xsession-errors",)
_PREFIXES = ("xsession-errors.",)
_SUFFIXES = (".log", ".err", ".error")
_INFIXES = (".log.",)


def is_log_name(name: str) -> bool:
    """Whether a file name looks like a log (``app.log``, ``x.log.1``, ...).

    Session logs are usually dotfiles, so leading dots are ignored for the
    ``xsession-errors`` checks.
    """
    lower = name.lower()
    bare = lower.lstrip(".")
    return (
        bare in _EXACT_NAMES
        or bare.startswith(_PREFIXES)
        or lower.endswith(_SUFFIXES)
        or any(infix in lower for infix in _INFIXES)
    )


def age_cutoff(older_than_days: int, now: float) -> float:
    """Latest modification time a file may have to count as old.

    Saturates at the epoch instead of going negative.
    """
    try:
        return max(now - older_than_days * SECONDS_PER_DAY, 0.0)
    except OverflowError:
        return 0.0


def log_filter(cutoff: float | None) -> FileFilter:
    """Build the walk predicate for a logs rule.

    Only regular files with a log-like name qualify. With a *cutoff*, the
    file must also have been modified at or before it. Files whose
    metadata cannot be read never reach the predicate; the walk records
    them as errors instead.
    """

    def accept(path: Path, st: os.stat_result) -> bool:
        if not stat.S_ISREG(st.st_mode) or not is_log_name(path.name):
            return False
        return cutoff is None or st.st_mtime <= cutoff

    return accept


def scan_logs_rule(rule: Rule, options: ScanOptions) -> RuleScan:
    """Collect log files under each root, optionally only stale ones.

    Directories are never recorded.
    """
    scan = RuleScan(rule=rule)

    exclude, glob_errors = compile_globs(rule.exclude_globs)
    for message in glob_errors:
        scan.add_error(message)

    cutoff = None
    if rule.older_than_days is not None:
        now = options.now if options.now is not None else time.time()
        cutoff = age_cutoff(rule.older_than_days, now)
        log.debug("Rule '%s': selecting logs modified at or before %s", rule.id, cutoff)

    accept = log_filter(cutoff)
    for root in rule.expanded_paths(options.home):
        if not os.path.lexists(root):
            continue
        walk_tree(root, scan, exclude, accept=accept, record_dirs=False)

    return scan

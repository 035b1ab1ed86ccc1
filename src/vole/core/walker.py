"""Recursive directory walk shared by every scan strategy."""

from __future__ import annotations

import logging
import os
import stat
from pathlib import Path
from typing import Callable

from vole.core.globs import ExcludeMatcher
from vole.models.rule_scan import RuleScan

log = logging.getLogger(__name__)

# (path, lstat result) -> whether the file belongs in the scan.
FileFilter = Callable[[Path, os.stat_result], bool]


def _describe(exc: OSError) -> str:
    return exc.strerror or str(exc)


def walk_tree(
    root: Path,
    scan: RuleScan,
    exclude: ExcludeMatcher | None = None,
    *,
    accept: FileFilter | None = None,
    record_dirs: bool = True,
) -> None:
    """Record everything beneath *root* into *scan*.

    The walk never follows symlinks, never descends into another
    filesystem and never records *root* itself. Excluded directories are
    pruned. A root that is a file or a symlink is recorded as a single
    file. Per-entry failures are added to ``scan`` and the walk continues.

    Args:
        root: Directory (or file) to walk.
        scan: Scan that receives files, directories and errors.
        exclude: Matcher evaluated against root-relative paths.
        accept: Extra predicate a regular file must pass to be recorded.
        record_dirs: Whether descendant directories are recorded.
    """
    try:
        root_stat = root.lstat()
    except FileNotFoundError:
        return
    except OSError as exc:
        scan.add_error(f"{root}: {_describe(exc)}")
        return

    if not stat.S_ISDIR(root_stat.st_mode):
        _record_root_file(root, root_stat, scan, exclude, accept)
        return

    root_dev = root_stat.st_dev
    stack: list[Path] = [root]

    while stack:
        current = stack.pop()
        try:
            with os.scandir(current) as it:
                children = sorted(it, key=lambda e: e.name)
        except OSError as exc:
            scan.add_error(f"{current}: {_describe(exc)}")
            continue

        subdirs: list[Path] = []
        for entry in children:
            path = Path(entry.path)
            if exclude is not None and exclude.is_excluded(path, root):
                continue
            try:
                st = entry.stat(follow_symlinks=False)
            except FileNotFoundError:
                continue
            except OSError as exc:
                scan.add_error(f"{path}: {_describe(exc)}")
                continue

            if stat.S_ISLNK(st.st_mode):
                continue
            if stat.S_ISDIR(st.st_mode):
                if record_dirs:
                    scan.add_dir(path)
                if st.st_dev == root_dev:
                    subdirs.append(path)
                else:
                    log.debug("Not crossing filesystem boundary at %s", path)
                continue
            if accept is not None and not accept(path, st):
                continue
            scan.add_file(path, st.st_size)

        stack.extend(reversed(subdirs))


def _record_root_file(
    root: Path,
    root_stat: os.stat_result,
    scan: RuleScan,
    exclude: ExcludeMatcher | None,
    accept: FileFilter | None,
) -> None:
    if exclude is not None and exclude.is_excluded(root, root):
        return
    if accept is not None and not accept(root, root_stat):
        return
    scan.add_file(root, root_stat.st_size)

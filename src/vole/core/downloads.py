"""Archive/extracted-folder pairing in a Downloads-style directory."""

from __future__ import annotations

import logging
import os
import stat
from dataclasses import dataclass
from pathlib import Path

from vole.core.walker import walk_tree
from vole.models.options import DownloadsChoice, ScanOptions
from vole.models.rule import Rule
from vole.models.rule_scan import RuleScan

log = logging.getLogger(__name__)

ARCHIVE_EXTENSIONS = (
    ".tar.gz",
    ".tgz",
    ".tar.xz",
    ".tar.zst",
    ".zip",
    ".7z",
    ".rar",
)


@dataclass(frozen=True, slots=True)
class ArchiveCandidate:
    """Archive file found directly inside a Downloads root."""

    base_name: str
    path: Path
    size: int


def archive_base_name(name: str) -> str | None:
    """Return the name without its archive extension, or None.

    The extension match is case-insensitive. A name that is nothing but
    an extension (``.zip``) has no base name.
    """
    lower = name.lower()
    for ext in ARCHIVE_EXTENSIONS:
        if lower.endswith(ext):
            base = name[: len(name) - len(ext)]
            return base or None
    return None


def list_pairing_candidates(root: Path, scan: RuleScan) -> tuple[list[ArchiveCandidate], dict[str, Path]]:
    """List *root* one level deep, collecting archives and directories.

    Symlinked children are ignored. Unreadable entries are recorded as
    errors on *scan*.
    """
    archives: list[ArchiveCandidate] = []
    folders: dict[str, Path] = {}

    try:
        with os.scandir(root) as it:
            children = sorted(it, key=lambda e: e.name)
    except OSError as exc:
        scan.add_error(f"{root}: {exc.strerror or exc}")
        return archives, folders

    for entry in children:
        path = Path(entry.path)
        try:
            entry.name.encode("utf-8")
        except UnicodeEncodeError:
            scan.add_error(f"{path!s}: file name is not valid UTF-8")
            continue
        try:
            st = entry.stat(follow_symlinks=False)
        except OSError as exc:
            scan.add_error(f"{path}: {exc.strerror or exc}")
            continue

        if stat.S_ISLNK(st.st_mode):
            continue
        if stat.S_ISDIR(st.st_mode):
            folders[entry.name] = path
            continue
        if not stat.S_ISREG(st.st_mode):
            continue
        base = archive_base_name(entry.name)
        if base is None:
            continue
        archives.append(ArchiveCandidate(base_name=base, path=path, size=st.st_size))

    return archives, folders


def scan_downloads_rule(rule: Rule, options: ScanOptions) -> RuleScan:
    """Resolve archive/folder pairs and keep the side the user chose.

    Without a choice the scan stays empty. Archives and folders that have
    no counterpart are never part of the result.
    """
    choice = options.downloads_choice
    scan = RuleScan(rule=rule, downloads_choice=choice)
    if choice is None:
        log.debug("Rule '%s': no downloads choice given, skipping", rule.id)
        return scan

    for root in rule.expanded_paths(options.home):
        try:
            root_stat = root.lstat()
        except FileNotFoundError:
            log.debug("Rule '%s': %s does not exist", rule.id, root)
            continue
        except OSError as exc:
            scan.add_error(f"{root}: {exc.strerror or exc}")
            continue
        if not stat.S_ISDIR(root_stat.st_mode):
            continue

        archives, folders = list_pairing_candidates(root, scan)
        seen_dirs: set[Path] = set()

        for archive in archives:
            folder = folders.get(archive.base_name)
            if folder is None:
                continue
            if choice is DownloadsChoice.ARCHIVES:
                scan.add_file(archive.path, archive.size)
            elif folder not in seen_dirs:
                seen_dirs.add(folder)
                walk_tree(folder, scan)
                scan.add_dir(folder)

    return scan

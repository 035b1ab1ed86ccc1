"""Root detection, home resolution and sudo re-execution."""

from __future__ import annotations

import logging
import os
import shutil
import subprocess
import sys
from pathlib import Path

log = logging.getLogger(__name__)

PASSWD_FILE = Path("/etc/passwd")


class PrivilegeError(Exception):
    """Raised when privilege escalation fails."""


def is_root() -> bool:
    """Check if the current process is running as root."""
    return os.geteuid() == 0


def home_from_sudo_user(passwd: Path = PASSWD_FILE) -> Path | None:
    """Home directory of the user who invoked sudo, from the passwd file."""
    user = os.environ.get("SUDO_USER")
    if not user:
        return None
    try:
        lines = passwd.read_text(encoding="utf-8").splitlines()
    except OSError:
        log.debug("Cannot read %s", passwd)
        return None

    for line in lines:
        fields = line.split(":")
        if len(fields) >= 6 and fields[0] == user:
            return Path(fields[5])
    return None


def resolve_home(root: bool, override: Path | None = None) -> Path | None:
    """Pick the home directory the engine should clean.

    An explicit override wins. Under sudo the invoking user's home is
    preferred over root's own.
    """
    if override is not None:
        return override
    if root:
        home = home_from_sudo_user()
        if home is not None:
            return home
    value = os.environ.get("HOME")
    return Path(value) if value else None


def sudo_available() -> bool:
    """Check if sudo is available on the system."""
    return shutil.which("sudo") is not None


def reexec_with_sudo(args: list[str]) -> int:
    """Run *args* through sudo and return its exit code.

    Raises:
        PrivilegeError: If sudo is missing or cannot be started.
    """
    if not sudo_available():
        raise PrivilegeError("Could not find 'sudo' on PATH")
    log.info("Re-running with sudo: %s", " ".join(args))
    try:
        proc = subprocess.run(["sudo", *args])
    except OSError as exc:
        raise PrivilegeError(f"Failed to invoke sudo: {exc}") from exc
    return proc.returncode


def find_vole_command() -> list[str]:
    """Command prefix that re-runs this program."""
    exe = shutil.which("vole")
    if exe is not None:
        return [exe]
    return [sys.executable, "-m", "vole"]

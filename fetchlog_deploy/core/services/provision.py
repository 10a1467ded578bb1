"""
Resource provisioner — service account, data directory, read access.

Every operation is an "ensure": safe to repeat, creating only what is
missing. The data directory's ownership and mode are re-applied on
every run so that drift (a manual chown, a restored backup) heals.
"""

from __future__ import annotations

import logging
import os
import shutil
import stat
from pathlib import Path

from fetchlog_deploy.adapters.base import CommandRunner
from fetchlog_deploy.core.errors import ProvisionFailed

logger = logging.getLogger(__name__)

DATA_DIR_MODE = 0o750
ACCOUNT_COMMENT = "FetchLog service account"

_NOLOGIN_CANDIDATES = ("/usr/sbin/nologin", "/sbin/nologin")


def nologin_shell() -> str:
    """First nologin shell present on the host (Debian path by default)."""
    for candidate in _NOLOGIN_CANDIDATES:
        if Path(candidate).exists():
            return candidate
    return _NOLOGIN_CANDIDATES[0]


# ── Execution identity ──────────────────────────────────────────


def identity_exists(name: str, runner: CommandRunner) -> bool:
    """Look the account up by name (``id -u``)."""
    return runner.run(["id", "-u", name], timeout=10).ok


def ensure_identity(name: str, runner: CommandRunner) -> bool:
    """Create a system, no-login, home-less account unless it exists.

    An existing account is left exactly as it is.

    Returns:
        True if the account was created by this call.

    Raises:
        ProvisionFailed: If ``useradd`` fails.
    """
    if identity_exists(name, runner):
        logger.debug("User %s already exists", name)
        return False

    result = runner.run(
        [
            "useradd",
            "--system",
            "--no-create-home",
            "--shell",
            nologin_shell(),
            "--comment",
            ACCOUNT_COMMENT,
            name,
        ],
        timeout=30,
    )
    if not result.ok:
        raise ProvisionFailed(
            f"Cannot create system user '{name}'.",
            diagnostic=result.diagnostic,
        )
    return True


# ── Data directory ──────────────────────────────────────────────


def ensure_data_directory(path: Path, owner: str) -> None:
    """Create ``path`` if needed, then enforce ``owner:owner`` and 0750.

    Raises:
        ProvisionFailed: On any filesystem or account lookup error.
    """
    try:
        path.mkdir(parents=True, exist_ok=True)
        shutil.chown(path, user=owner, group=owner)
        path.chmod(DATA_DIR_MODE)
    except LookupError as e:
        raise ProvisionFailed(f"Cannot chown {path}: {e}") from e
    except OSError as e:
        raise ProvisionFailed(f"Cannot prepare data directory {path}: {e}") from e


# ── Install tree read access ────────────────────────────────────


def _add_other_read(path: Path, is_dir: bool) -> None:
    """chmod o+rX: read for everyone, traverse/exec where appropriate."""
    mode = path.stat().st_mode
    new = mode | stat.S_IROTH
    if is_dir or mode & (stat.S_IXUSR | stat.S_IXGRP | stat.S_IXOTH):
        new |= stat.S_IXOTH
    if new != mode:
        path.chmod(new)


def grant_read_access(install_dir: Path) -> int:
    """Let the service account read (not write) the application files.

    Ownership is never changed, so the deploying user can still
    update the checkout. The top-level ``.git`` directory is skipped.

    Returns:
        Number of entries that could not be updated (logged, not fatal).

    Raises:
        ProvisionFailed: If the install directory itself can't be opened up.
    """
    try:
        _add_other_read(install_dir, is_dir=True)
    except OSError as e:
        raise ProvisionFailed(f"Cannot grant read access to {install_dir}: {e}") from e

    skipped = 0
    for root, dirs, files in os.walk(install_dir):
        root_path = Path(root)
        if root_path == install_dir and ".git" in dirs:
            dirs.remove(".git")
        for name, is_dir in [(d, True) for d in dirs] + [(f, False) for f in files]:
            target = root_path / name
            if target.is_symlink():
                continue
            skipped += _try_add_read(target, is_dir=is_dir)

    if skipped:
        logger.warning("Could not update permissions on %d file(s) under %s", skipped, install_dir)
    return skipped


def _try_add_read(path: Path, *, is_dir: bool) -> int:
    try:
        _add_other_read(path, is_dir)
    except OSError as e:
        logger.debug("Skipping %s: %s", path, e)
        return 1
    return 0

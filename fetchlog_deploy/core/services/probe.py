"""
Environment prober — validate preconditions before any mutation.

Read-only checks, in order, stopping at the first failure:
privilege, interpreter discovery, interpreter version, pip.
"""

from __future__ import annotations

import logging
import os
import re
import shutil

from fetchlog_deploy.adapters.base import CommandRunner
from fetchlog_deploy.core.errors import (
    InsufficientPrivilege,
    PackageManagerMissing,
    RuntimeMissing,
    RuntimeTooOld,
)
from fetchlog_deploy.core.models.config import DeployConfig
from fetchlog_deploy.core.models.environment import Environment

logger = logging.getLogger(__name__)

VERSION_SNIPPET = (
    'import sys; print(f"{sys.version_info.major}.{sys.version_info.minor}")'
)
_VERSION_RE = re.compile(r"(\d+)\.(\d+)")


def parse_version(text: str) -> tuple[int, int]:
    """Extract ``(major, minor)`` from version text.

    Patch and pre-release parts are ignored: ``"3.12.1rc1"`` → ``(3, 12)``.

    Raises:
        ValueError: If no ``N.N`` pair is present.
    """
    m = _VERSION_RE.search(text or "")
    if not m:
        raise ValueError(f"no version number in {text!r}")
    return int(m.group(1)), int(m.group(2))


def require_privilege(command: str = "") -> None:
    """Fail unless the effective user is root."""
    if os.geteuid() != 0:
        hint = f" Try: sudo fetchlog-deploy {command}".rstrip() if command else ""
        raise InsufficientPrivilege(f"This command must be run as root.{hint}")


def probe(
    config: DeployConfig,
    runner: CommandRunner,
    *,
    require_root: bool = True,
    command: str = "",
) -> Environment:
    """Validate the host and return what was found.

    Args:
        config: Resolved deployment configuration.
        runner: Command runner used to query the interpreter.
        require_root: Whether the privilege gate applies.
        command: Verb being run, used only in the privilege hint.

    Raises:
        InsufficientPrivilege, RuntimeMissing, RuntimeTooOld,
        PackageManagerMissing
    """
    if require_root:
        require_privilege(command)

    python_bin = shutil.which(config.python)
    if not python_bin:
        raise RuntimeMissing(
            f"{config.python} not found.",
            remediation=[f"Install it with: apt-get install {config.python}"],
        )

    result = runner.run([python_bin, "-c", VERSION_SNIPPET], timeout=30)
    if not result.ok:
        raise RuntimeMissing(
            f"Cannot query the version of {python_bin}.",
            diagnostic=result.diagnostic,
        )
    try:
        version = parse_version(result.stdout)
    except ValueError as e:
        raise RuntimeMissing(
            f"Unrecognised version output from {python_bin}.",
            diagnostic=result.stdout,
        ) from e

    logger.debug("Found %s version %d.%d", python_bin, *version)

    if version < tuple(config.min_python):
        required = ".".join(str(p) for p in config.min_python)
        raise RuntimeTooOld(
            f"Python {required}+ is required, found {version[0]}.{version[1]}. "
            "Please upgrade Python."
        )

    pip = runner.run([python_bin, "-m", "pip", "--version"], timeout=60)
    if not pip.ok:
        raise PackageManagerMissing(
            "pip not found.",
            diagnostic=pip.diagnostic,
            remediation=["Install with: apt-get install python3-pip"],
        )

    return Environment(
        python_bin=python_bin,
        version=version,
        pip_version=pip.stdout.strip(),
    )

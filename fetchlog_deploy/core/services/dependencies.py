"""
Dependency installer — pip install with policy-aware fallback.

The install is attempted plainly first. On failure, pip's stderr is
matched against PIP_FALLBACK_HANDLERS in order; the first handler
that matches (and has not been applied yet) contributes its extra
arguments to a single retry. When nothing matches, or the retry
fails too, the captured diagnostic is surfaced unchanged.
"""

from __future__ import annotations

import logging
import re
import stat
from dataclasses import dataclass, field
from pathlib import Path

from fetchlog_deploy.adapters.base import CommandRunner
from fetchlog_deploy.core.data.install_handlers import PIP_FALLBACK_HANDLERS
from fetchlog_deploy.core.errors import (
    DependenciesMissing,
    DependencyInstallFailed,
    ProvisionFailed,
)
from fetchlog_deploy.core.models.config import DeployConfig
from fetchlog_deploy.core.models.environment import Environment
from fetchlog_deploy.core.observability import console

logger = logging.getLogger(__name__)


@dataclass
class InstallOutcome:
    """What a successful install did."""

    command: list[str]
    applied: list[str] = field(default_factory=list)  # handler failure_ids
    extra_args: list[str] = field(default_factory=list)
    attempts: int = 1


def _matches(handler: dict, stderr: str, exit_code: int) -> bool:
    """Check whether a handler recognises this pip failure."""
    handler_exit = handler.get("exit_code")
    if handler_exit is not None and handler_exit != exit_code:
        return False

    pattern = handler.get("pattern", "")
    if not pattern:
        return handler_exit is not None

    try:
        return bool(re.search(pattern, stderr, re.IGNORECASE))
    except re.error:
        logger.warning("Bad fallback pattern for %s: %r", handler.get("failure_id"), pattern)
        return False


def select_fallback(
    stderr: str,
    exit_code: int,
    *,
    handlers: list[dict] | None = None,
    exclude: set[str] | None = None,
) -> dict | None:
    """Return the first handler matching a failure, or None."""
    exclude = exclude or set()
    for handler in PIP_FALLBACK_HANDLERS if handlers is None else handlers:
        if handler.get("failure_id") in exclude:
            continue
        if _matches(handler, stderr, exit_code):
            return handler
    return None


def venv_remediation(config: DeployConfig) -> list[str]:
    """Steps for installing into an isolated environment instead."""
    venv = config.venv_dir
    return [
        "If you prefer a virtual environment instead, run:",
        f"  python3 -m venv {venv}",
        f"  {venv}/bin/pip install -r {config.manifest_path}",
        f"Then edit {config.unit_path} to use {venv}/bin/python3",
    ]


def install_dependencies(
    config: DeployConfig,
    environment: Environment,
    runner: CommandRunner,
    *,
    handlers: list[dict] | None = None,
) -> InstallOutcome:
    """Install the manifest's packages into the discovered interpreter.

    Re-running against a satisfied manifest is a successful no-op (pip
    reports nothing to do). On success the entry artifact is made
    executable.

    Raises:
        DependencyInstallFailed: pip failed and no fallback recovered it.
        ProvisionFailed: the entry artifact is missing or can't be chmod'ed.
    """
    manifest = config.manifest_path
    if not manifest.is_file():
        raise DependencyInstallFailed(f"Requirements file not found: {manifest}")

    base = [environment.python_bin, "-m", "pip", "install", "-r", str(manifest), "--quiet"]
    command = list(base)
    applied: list[str] = []
    extra_args: list[str] = []
    attempts = 1

    result = runner.run(command)
    while not result.ok:
        handler = select_fallback(
            result.stderr,
            result.returncode,
            handlers=handlers,
            exclude=set(applied),
        )
        if handler is None:
            break
        console.warn(handler.get("notice") or f"Retrying pip ({handler['failure_id']})...")
        logger.debug("Retrying pip with %s", handler.get("extra_args", []))
        applied.append(handler["failure_id"])
        extra_args += handler.get("extra_args", [])
        command = base + extra_args
        attempts += 1
        result = runner.run(command)

    if not result.ok:
        raise DependencyInstallFailed(
            "Dependency installation failed.",
            diagnostic=result.diagnostic,
            remediation=venv_remediation(config),
        )

    mark_executable(config.entry_path)
    return InstallOutcome(
        command=command,
        applied=applied,
        extra_args=extra_args,
        attempts=attempts,
    )


def mark_executable(path: Path) -> None:
    """``chmod +x`` the entry artifact (all classes, like the shell)."""
    try:
        mode = path.stat().st_mode
        path.chmod(mode | stat.S_IXUSR | stat.S_IXGRP | stat.S_IXOTH)
    except FileNotFoundError as e:
        raise ProvisionFailed(f"Entry artifact not found: {path}") from e
    except OSError as e:
        raise ProvisionFailed(f"Cannot make {path} executable: {e}") from e


def verify_dependencies(
    config: DeployConfig,
    environment: Environment,
    runner: CommandRunner,
) -> None:
    """Check every required module imports in the target interpreter.

    Raises:
        DependenciesMissing: If any import fails.
    """
    if not config.required_modules:
        return
    snippet = "import " + ", ".join(config.required_modules)
    result = runner.run([environment.python_bin, "-c", snippet], timeout=60)
    if not result.ok:
        raise DependenciesMissing(
            "Required packages are missing. Run 'sudo fetchlog-deploy setup' first.",
            diagnostic=result.diagnostic,
        )

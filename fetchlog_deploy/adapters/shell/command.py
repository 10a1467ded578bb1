"""
Subprocess runner — execute host commands and capture output.

This is the SINGLE PLACE where ``subprocess.run`` is called.
"""

from __future__ import annotations

import logging
import subprocess
import time
from collections.abc import Sequence

from fetchlog_deploy.adapters.base import CommandRunner
from fetchlog_deploy.core.models.command import CommandResult

logger = logging.getLogger(__name__)

# Conventional shell exit codes for failures that never reach the program
EXIT_NOT_FOUND = 127
EXIT_TIMEOUT = 124


class SubprocessRunner(CommandRunner):
    """Run commands with ``subprocess.run`` (no shell) and capture output.

    Args:
        default_timeout: Seconds allowed per command when the caller
            passes none. pip installs can be slow, so this is generous.
    """

    def __init__(self, default_timeout: float = 600):
        self._default_timeout = default_timeout

    @property
    def name(self) -> str:
        return "subprocess"

    def run(
        self,
        argv: Sequence[str],
        *,
        timeout: float | None = None,
    ) -> CommandResult:
        cmd = [str(a) for a in argv]
        timeout = self._default_timeout if timeout is None else timeout

        logger.debug("Executing: %s", " ".join(cmd))
        start = time.monotonic()

        try:
            result = subprocess.run(
                cmd,
                capture_output=True,
                text=True,
                timeout=timeout,
            )
        except FileNotFoundError:
            return CommandResult.failure(
                cmd,
                stderr=f"{cmd[0]}: command not found",
                returncode=EXIT_NOT_FOUND,
            )
        except subprocess.TimeoutExpired:
            return CommandResult.failure(
                cmd,
                stderr=f"Command timed out after {timeout}s",
                returncode=EXIT_TIMEOUT,
            )
        except OSError as e:
            return CommandResult.failure(cmd, stderr=f"Command execution error: {e}")

        elapsed_ms = int((time.monotonic() - start) * 1000)
        logger.debug("Exit %d after %dms: %s", result.returncode, elapsed_ms, cmd[0])

        return CommandResult(
            argv=cmd,
            returncode=result.returncode,
            stdout=result.stdout or "",
            stderr=result.stderr or "",
            duration_ms=elapsed_ms,
        )

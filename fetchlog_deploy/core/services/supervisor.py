"""
Service controller — lifecycle verbs against systemd.

All state is read back from systemd on demand; nothing is cached
between calls. Control verbs raise SupervisorCommandFailed on a
nonzero exit; status queries report failures instead of raising.
"""

from __future__ import annotations

import logging
import time
from collections.abc import Callable

from fetchlog_deploy.adapters.base import CommandRunner
from fetchlog_deploy.core.errors import SupervisorCommandFailed
from fetchlog_deploy.core.models.command import CommandResult
from fetchlog_deploy.core.models.config import DeployConfig
from fetchlog_deploy.core.models.service import ServiceStatus, classify

logger = logging.getLogger(__name__)

SYSTEMCTL = "systemctl"
_STATUS_PROPERTIES = ("LoadState", "ActiveState", "SubState", "UnitFileState", "MainPID")
_TIMEOUT = 60


class ServiceController:
    """Start, stop and inspect the managed unit through ``systemctl``."""

    def __init__(
        self,
        config: DeployConfig,
        runner: CommandRunner,
        *,
        sleep: Callable[[float], None] = time.sleep,
    ):
        self._config = config
        self._runner = runner
        self._sleep = sleep

    @property
    def unit(self) -> str:
        return self._config.service_name

    # ------------------------------------------------------------------
    # Registry
    # ------------------------------------------------------------------

    def daemon_reload(self) -> None:
        """Make systemd rescan unit files."""
        self._systemctl("daemon-reload", with_unit=False)

    def enable(self) -> None:
        self._systemctl("enable")

    def disable(self) -> None:
        self._systemctl("disable")

    # ------------------------------------------------------------------
    # Start / Stop
    # ------------------------------------------------------------------

    def start(self) -> ServiceStatus:
        """Start the unit, wait briefly, and report one status snapshot.

        This is a liveness hint, not a readiness guarantee: the status
        is read once after ``start_settle_seconds``.
        """
        self._systemctl("start")
        self._sleep(self._config.start_settle_seconds)
        return self.status()

    def stop(self) -> None:
        self._systemctl("stop")

    def restart(self) -> ServiceStatus:
        self._systemctl("restart")
        self._sleep(self._config.start_settle_seconds)
        return self.status()

    # ------------------------------------------------------------------
    # Status
    # ------------------------------------------------------------------

    def is_active(self) -> bool:
        return self._query("is-active").ok

    def is_enabled(self) -> bool:
        return self._query("is-enabled").ok

    def status(self) -> ServiceStatus:
        """Snapshot of the unit's lifecycle state. Never raises."""
        result = self._runner.run(
            [SYSTEMCTL, "show", self.unit, f"--property={','.join(_STATUS_PROPERTIES)}"],
            timeout=_TIMEOUT,
        )
        if not result.ok:
            return ServiceStatus(name=self.unit, error=result.diagnostic or "status query failed")

        props: dict[str, str] = {}
        for line in result.stdout.splitlines():
            key, sep, value = line.strip().partition("=")
            if sep:
                props[key] = value

        return ServiceStatus(
            name=self.unit,
            state=classify(props.get("LoadState", ""), props.get("ActiveState", "")),
            load_state=props.get("LoadState", ""),
            active_state=props.get("ActiveState", ""),
            sub_state=props.get("SubState", ""),
            unit_file_state=props.get("UnitFileState", ""),
            pid=_parse_pid(props.get("MainPID", "")),
        )

    def status_report(self) -> str:
        """Human-readable ``systemctl status`` text (non-fatal)."""
        result = self._runner.run(
            [SYSTEMCTL, "status", self.unit, "--no-pager", "-l"],
            timeout=_TIMEOUT,
        )
        # systemctl status exits 3 for a stopped unit and 4 for an unknown one
        return result.stdout if result.stdout.strip() else result.stderr

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------

    def _systemctl(self, verb: str, *, with_unit: bool = True) -> CommandResult:
        """Run ``systemctl <verb> [unit]``; raise on nonzero exit."""
        cmd = [SYSTEMCTL, verb]
        if with_unit:
            cmd.append(self.unit)
        result = self._runner.run(cmd, timeout=_TIMEOUT)
        if not result.ok:
            raise SupervisorCommandFailed(
                f"systemctl {verb} failed (exit {result.returncode}).",
                diagnostic=result.diagnostic,
            )
        logger.debug("systemctl %s %s: ok", verb, self.unit if with_unit else "")
        return result

    def _query(self, verb: str) -> CommandResult:
        return self._runner.run([SYSTEMCTL, verb, "--quiet", self.unit], timeout=_TIMEOUT)


def _parse_pid(value: str) -> int | None:
    try:
        pid = int(value)
    except ValueError:
        return None
    return pid if pid > 0 else None

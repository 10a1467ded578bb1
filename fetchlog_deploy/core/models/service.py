"""
Service lifecycle models — status snapshots read from systemd.

The orchestrator never stores lifecycle state; every ServiceStatus
is built from a fresh ``systemctl show`` query.
"""

from __future__ import annotations

from enum import Enum

from pydantic import BaseModel


class LifecycleState(str, Enum):
    """Observed state of the managed unit."""

    ABSENT = "absent"
    STOPPED = "installed-stopped"
    RUNNING = "running"
    FAILED = "failed"


# systemd ActiveState → lifecycle state (LoadState is checked first)
_ACTIVE_STATE_MAP: dict[str, LifecycleState] = {
    "active": LifecycleState.RUNNING,
    "reloading": LifecycleState.RUNNING,
    "activating": LifecycleState.RUNNING,
    "failed": LifecycleState.FAILED,
    "inactive": LifecycleState.STOPPED,
    "deactivating": LifecycleState.STOPPED,
}


def classify(load_state: str, active_state: str) -> LifecycleState:
    """Collapse systemd's LoadState/ActiveState pair into a LifecycleState."""
    if not load_state or load_state == "not-found":
        return LifecycleState.ABSENT
    return _ACTIVE_STATE_MAP.get(active_state, LifecycleState.STOPPED)


class ServiceStatus(BaseModel):
    """Status snapshot of the managed unit.

    ``error`` carries the supervisor's diagnostic when the query itself
    failed; the snapshot then reports ``absent``.
    """

    name: str
    state: LifecycleState = LifecycleState.ABSENT
    load_state: str = ""
    active_state: str = ""
    sub_state: str = ""
    unit_file_state: str = ""
    pid: int | None = None
    error: str | None = None

    @property
    def installed(self) -> bool:
        return self.state is not LifecycleState.ABSENT

    @property
    def running(self) -> bool:
        return self.state is LifecycleState.RUNNING

    @property
    def enabled(self) -> bool:
        return self.unit_file_state == "enabled"

    @property
    def summary(self) -> str:
        """One-line human summary, e.g. ``running (active/running, pid 42)``."""
        parts = [self.state.value]
        detail = "/".join(p for p in (self.active_state, self.sub_state) if p)
        if self.pid:
            detail = f"{detail}, pid {self.pid}" if detail else f"pid {self.pid}"
        if detail:
            parts.append(f"({detail})")
        return " ".join(parts)

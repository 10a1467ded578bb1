"""
Lifecycle use cases — start, stop, restart, status.
"""

from __future__ import annotations

import time
from collections.abc import Callable

from fetchlog_deploy.adapters.base import CommandRunner
from fetchlog_deploy.core.models.config import DeployConfig
from fetchlog_deploy.core.models.service import LifecycleState, ServiceStatus
from fetchlog_deploy.core.observability import console
from fetchlog_deploy.core.services.probe import require_privilege
from fetchlog_deploy.core.services.supervisor import ServiceController


def run_start(
    config: DeployConfig,
    runner: CommandRunner,
    *,
    sleep: Callable[[float], None] = time.sleep,
) -> ServiceStatus:
    """Start the service and report one status snapshot."""
    require_privilege("start")
    controller = ServiceController(config, runner, sleep=sleep)

    console.info(f"Starting {config.service_name}...")
    status = controller.start()
    console.raw(controller.status_report())
    console.blank()
    _report_started(config, status)
    return status


def run_restart(
    config: DeployConfig,
    runner: CommandRunner,
    *,
    sleep: Callable[[float], None] = time.sleep,
) -> ServiceStatus:
    """Restart the service and report one status snapshot."""
    require_privilege("restart")
    controller = ServiceController(config, runner, sleep=sleep)

    console.info(f"Restarting {config.service_name}...")
    status = controller.restart()
    _report_started(config, status)
    return status


def run_stop(config: DeployConfig, runner: CommandRunner) -> None:
    """Stop the service."""
    require_privilege("stop")
    controller = ServiceController(config, runner)

    console.info(f"Stopping {config.service_name}...")
    controller.stop()
    console.success("Service stopped.")


def run_status(config: DeployConfig, runner: CommandRunner) -> ServiceStatus:
    """Print the supervisor's view of the service. Never fails."""
    controller = ServiceController(config, runner)

    status = controller.status()
    console.raw(controller.status_report())
    if status.error:
        console.warn(f"Status query failed: {status.error}")
    else:
        console.info(f"{config.service_name}: {status.summary}")
    return status


def _report_started(config: DeployConfig, status: ServiceStatus) -> None:
    if status.state is LifecycleState.RUNNING:
        console.success("FetchLog is running.")
    elif status.error:
        console.warn(f"Could not confirm service state: {status.error}")
    else:
        console.warn(f"FetchLog is {status.state.value} after start; check the logs.")
    console.info(f"Web UI:  http://localhost:{config.web_port}")
    console.info(f"Logs:    journalctl -u {config.service_name} -f")

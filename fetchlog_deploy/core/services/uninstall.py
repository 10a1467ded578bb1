"""
Uninstaller — remove the unit, keep the data.

Each step checks before acting, so a half-finished uninstall can be
re-run. The data directory and the service account are never
touched here; removing them is a manual decision.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass

from fetchlog_deploy.core.errors import DescriptorWriteFailed
from fetchlog_deploy.core.models.config import DeployConfig
from fetchlog_deploy.core.services.supervisor import ServiceController

logger = logging.getLogger(__name__)


@dataclass
class UninstallReport:
    """What an uninstall did (or why it did nothing)."""

    cancelled: bool = False
    stopped: bool = False
    disabled: bool = False
    descriptor_removed: bool = False
    reloaded: bool = False


def uninstall(
    config: DeployConfig,
    controller: ServiceController,
    *,
    confirmed: bool,
) -> UninstallReport:
    """Stop, disable and unregister the service.

    Args:
        config: Resolved deployment configuration.
        controller: Controller bound to the same config.
        confirmed: The operator's explicit yes. Anything else cancels
            before any action is taken.

    Raises:
        SupervisorCommandFailed: If stop/disable/daemon-reload fails.
        DescriptorWriteFailed: If the unit file can't be removed.
    """
    if not confirmed:
        return UninstallReport(cancelled=True)

    report = UninstallReport()

    if controller.is_active():
        controller.stop()
        report.stopped = True

    if controller.is_enabled():
        controller.disable()
        report.disabled = True

    unit_path = config.unit_path
    if unit_path.is_file():
        try:
            unit_path.unlink()
        except OSError as e:
            raise DescriptorWriteFailed(f"Cannot remove {unit_path}: {e}") from e
        report.descriptor_removed = True

    controller.daemon_reload()
    report.reloaded = True

    logger.debug("Uninstall finished: %s", report)
    return report

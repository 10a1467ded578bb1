"""
Uninstall use case — remove the service, preserve data and account.

The interactive prompt is the CLI's job; this use case takes the
answer as ``confirmed``.
"""

from __future__ import annotations

from fetchlog_deploy.adapters.base import CommandRunner
from fetchlog_deploy.core.models.config import DeployConfig
from fetchlog_deploy.core.observability import console
from fetchlog_deploy.core.services.probe import require_privilege
from fetchlog_deploy.core.services.supervisor import ServiceController
from fetchlog_deploy.core.services.uninstall import UninstallReport, uninstall


def announce_uninstall(config: DeployConfig) -> None:
    """Banner and warnings shown before asking for confirmation."""
    console.banner("Uninstall Service")
    console.warn("This removes the systemd service.")
    console.warn(f"Data at {config.data_dir} will NOT be deleted.")
    console.blank()


def run_uninstall(
    config: DeployConfig,
    runner: CommandRunner,
    *,
    confirmed: bool,
) -> UninstallReport:
    """Remove the unit if ``confirmed``; report what was done."""
    require_privilege("uninstall")

    if not confirmed:
        console.info("Uninstall cancelled.")
        return UninstallReport(cancelled=True)

    controller = ServiceController(config, runner)
    report = uninstall(config, controller, confirmed=True)

    if report.stopped:
        console.info("Stopped service.")
    if report.disabled:
        console.info("Disabled service.")
    if report.descriptor_removed:
        console.info(f"Removed {config.unit_path}.")

    console.blank()
    console.success("Service removed.")
    console.info(f"Data preserved at: {config.data_dir}")
    console.info("To fully clean up:")
    console.info(f"  sudo rm -rf {config.data_dir}")
    console.info(f"  sudo userdel {config.service_user}")
    return report

"""
Install use case — account, data directory, unit file, registration.

Order matters: the unit references the account and the data
directory, so both exist before the unit is written, and systemd
is reloaded before the unit is enabled.
"""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path

from fetchlog_deploy.adapters.base import CommandRunner
from fetchlog_deploy.core.models.config import DeployConfig
from fetchlog_deploy.core.models.descriptor import ServiceDescriptor
from fetchlog_deploy.core.observability import console
from fetchlog_deploy.core.services import descriptor as unit_file
from fetchlog_deploy.core.services.dependencies import verify_dependencies
from fetchlog_deploy.core.services.probe import probe
from fetchlog_deploy.core.services.provision import (
    ensure_data_directory,
    ensure_identity,
    grant_read_access,
)
from fetchlog_deploy.core.services.supervisor import ServiceController


@dataclass
class InstallResult:
    """Outcome of ``install``."""

    descriptor: ServiceDescriptor
    unit_path: Path
    user_created: bool = False
    unit_changed: bool = False
    permission_skips: int = 0


def run_install(config: DeployConfig, runner: CommandRunner) -> InstallResult:
    """Provision resources, write the unit and enable it on boot."""
    console.banner("Service Installation")

    env = probe(config, runner, command="install")

    console.info("Verifying installed packages...")
    verify_dependencies(config, env, runner)
    console.success("All packages present.")

    user = config.service_user
    console.info(f"Ensuring system user '{user}'...")
    created = ensure_identity(user, runner)
    if created:
        console.success(f"User '{user}' created.")
    else:
        console.info(f"User '{user}' already exists.")

    console.info(f"Creating data directory {config.data_dir}...")
    ensure_data_directory(config.data_dir, user)
    console.success(f"Data directory ready: {config.data_dir}")

    skipped = grant_read_access(config.install_dir)

    descriptor = unit_file.render(config, python_bin=env.python_bin)
    console.info(f"Writing {config.unit_path}...")
    changed = unit_file.write(descriptor, config.unit_path)
    console.success("Service file written." if changed else "Service file unchanged.")

    controller = ServiceController(config, runner)
    console.info("Reloading systemd daemon...")
    controller.daemon_reload()
    console.info(f"Enabling {config.service_name} to start on boot...")
    controller.enable()

    console.blank()
    console.success("Service installed and enabled.")
    _print_summary(config)
    console.blank()
    console.success("Run 'sudo fetchlog-deploy start' to launch FetchLog.")

    return InstallResult(
        descriptor=descriptor,
        unit_path=config.unit_path,
        user_created=created,
        unit_changed=changed,
        permission_skips=skipped,
    )


def _print_summary(config: DeployConfig) -> None:
    console.info("Configuration baked into service:")
    console.info(f"  UDP syslog port : {config.udp_port}")
    console.info(f"  Web UI port     : {config.web_port}")
    console.info(f"  Bind address    : {config.host}")
    console.info(f"  Database        : {config.db_path}")
    console.info(f"  Running as user : {config.service_user}")
    console.blank()
    console.info(
        "To change these, re-run install with FETCHLOG_* overrides, or edit "
        f"{config.unit_path} then run: sudo systemctl daemon-reload"
    )

"""
Full deployment — setup, install, start in one run.

Each stage is idempotent, so an interrupted deployment is resumed by
running this again; there is no rollback.
"""

from __future__ import annotations

import time
from collections.abc import Callable
from dataclasses import dataclass

from fetchlog_deploy.adapters.base import CommandRunner
from fetchlog_deploy.core.models.config import DeployConfig
from fetchlog_deploy.core.models.service import ServiceStatus
from fetchlog_deploy.core.observability import console
from fetchlog_deploy.core.use_cases.install import InstallResult, run_install
from fetchlog_deploy.core.use_cases.lifecycle import run_start
from fetchlog_deploy.core.use_cases.setup import SetupResult, run_setup


@dataclass
class DeployResult:
    setup: SetupResult
    install: InstallResult
    status: ServiceStatus


def run_all(
    config: DeployConfig,
    runner: CommandRunner,
    *,
    sleep: Callable[[float], None] = time.sleep,
) -> DeployResult:
    """Run setup → install → start, stopping at the first failure."""
    setup = run_setup(config, runner)
    console.blank()
    install = run_install(config, runner)
    console.blank()
    status = run_start(config, runner, sleep=sleep)
    return DeployResult(setup=setup, install=install, status=status)

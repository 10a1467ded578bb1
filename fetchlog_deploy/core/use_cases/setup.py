"""
Setup use case — probe the host and install Python dependencies.
"""

from __future__ import annotations

from dataclasses import dataclass, field

from fetchlog_deploy.adapters.base import CommandRunner
from fetchlog_deploy.core.models.config import DeployConfig
from fetchlog_deploy.core.models.environment import Environment
from fetchlog_deploy.core.observability import console
from fetchlog_deploy.core.services.dependencies import install_dependencies
from fetchlog_deploy.core.services.probe import probe


@dataclass
class SetupResult:
    """Outcome of ``setup``."""

    environment: Environment
    fallbacks_applied: list[str] = field(default_factory=list)


def run_setup(config: DeployConfig, runner: CommandRunner) -> SetupResult:
    """Validate the runtime and install the service's requirements."""
    console.banner("Dependency Setup")

    console.info("Checking Python version...")
    env = probe(config, runner, command="setup")
    console.success(f"Python {env.version_label} at {env.python_bin}")

    console.info(f"Installing dependencies from {config.manifest_path}...")
    outcome = install_dependencies(config, env, runner)
    if outcome.extra_args:
        console.success(f"Dependencies installed with {' '.join(outcome.extra_args)}.")
    else:
        console.success("Dependencies installed.")
    console.success(f"Made {config.entry_path} executable.")

    console.blank()
    console.success("Setup complete. Run 'sudo fetchlog-deploy install' to create the service.")
    return SetupResult(environment=env, fallbacks_applied=outcome.applied)

"""Adapters — command runners that bind the orchestrator to the host.

Public re-exports for convenient access.
"""

from fetchlog_deploy.adapters.base import CommandRunner
from fetchlog_deploy.adapters.mock import MockRunner
from fetchlog_deploy.adapters.shell.command import SubprocessRunner

__all__ = [
    "CommandRunner",
    "MockRunner",
    "SubprocessRunner",
]

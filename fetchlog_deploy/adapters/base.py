"""
Runner base — the contract between services and the host.

Every external program the orchestrator touches (pip, useradd, id,
systemctl) is invoked through a CommandRunner. Services never call
``subprocess`` directly, so a MockRunner can stand in for the host
in tests.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from collections.abc import Sequence

from fetchlog_deploy.core.models.command import CommandResult


class CommandRunner(ABC):
    """Abstract base class for command runners.

    Runners execute an argv and return a CommandResult.
    They NEVER raise for a failing command — the exit code and
    captured output are in the result. Interrupts propagate.
    """

    @property
    @abstractmethod
    def name(self) -> str:
        """The runner identifier (e.g., 'subprocess', 'mock')."""

    @abstractmethod
    def run(
        self,
        argv: Sequence[str],
        *,
        timeout: float | None = None,
    ) -> CommandResult:
        """Execute ``argv`` to completion and capture exit code + output.

        Args:
            argv: Program and arguments. Never passed through a shell.
            timeout: Seconds before the command is abandoned.
                ``None`` uses the runner's default.
        """

    def __repr__(self) -> str:
        return f"<{self.__class__.__name__} name={self.name!r}>"

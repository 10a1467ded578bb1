"""
Command result model — the runner contract.

Runners execute an argv and hand back a CommandResult. Never
exceptions: a missing binary or a timeout is a failed result
with a conventional shell exit code (127 / 124).
"""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, Field


class CommandResult(BaseModel):
    """Outcome of one external command."""

    argv: list[str] = Field(default_factory=list)
    returncode: int = 0
    stdout: str = ""
    stderr: str = ""
    duration_ms: int = 0

    @property
    def ok(self) -> bool:
        """Whether the command exited zero."""
        return self.returncode == 0

    @property
    def failed(self) -> bool:
        return not self.ok

    @property
    def diagnostic(self) -> str:
        """Best text to show an operator: stderr, else stdout."""
        return self.stderr.strip() or self.stdout.strip()

    @property
    def command_line(self) -> str:
        return " ".join(self.argv)

    @classmethod
    def success(
        cls,
        argv: list[str] | None = None,
        stdout: str = "",
        **kwargs: Any,
    ) -> CommandResult:
        """Create a zero-exit result."""
        return cls(argv=list(argv or []), returncode=0, stdout=stdout, **kwargs)

    @classmethod
    def failure(
        cls,
        argv: list[str] | None = None,
        stderr: str = "",
        returncode: int = 1,
        **kwargs: Any,
    ) -> CommandResult:
        """Create a nonzero-exit result."""
        if returncode == 0:
            raise ValueError("a failure result needs a nonzero returncode")
        return cls(argv=list(argv or []), returncode=returncode, stderr=stderr, **kwargs)

"""
Mock runner — universal test double for host commands.

Simulates the host without touching it. By default every command
succeeds with empty output; responses can be scripted per command
prefix, including a sequence of results for retried commands.
"""

from __future__ import annotations

from collections.abc import Sequence

from fetchlog_deploy.adapters.base import CommandRunner
from fetchlog_deploy.core.models.command import CommandResult


class MockRunner(CommandRunner):
    """Universal mock runner for testing.

    Responses are keyed by argv prefix; the longest matching prefix
    wins. When several results are queued for a prefix they are
    returned in order and the last one repeats.
    """

    def __init__(
        self,
        runner_name: str = "mock",
        default_output: str = "",
    ):
        self._name = runner_name
        self._default_output = default_output
        self._responses: dict[tuple[str, ...], list[CommandResult]] = {}
        self._call_log: list[list[str]] = []

    @property
    def name(self) -> str:
        return self._name

    @property
    def call_log(self) -> list[list[str]]:
        """Every argv this mock has received, in order."""
        return self._call_log

    @property
    def call_count(self) -> int:
        """Number of times run has been called."""
        return len(self._call_log)

    def set_response(self, prefix: Sequence[str], *results: CommandResult) -> None:
        """Script the result(s) for commands starting with ``prefix``."""
        if not results:
            raise ValueError("set_response needs at least one result")
        self._responses[tuple(prefix)] = list(results)

    def set_output(self, prefix: Sequence[str], stdout: str) -> None:
        """Configure a successful command with the given stdout."""
        self.set_response(prefix, CommandResult.success(stdout=stdout))

    def set_failure(
        self,
        prefix: Sequence[str],
        stderr: str = "Mock failure",
        returncode: int = 1,
    ) -> None:
        """Configure commands starting with ``prefix`` to fail."""
        self.set_response(
            prefix,
            CommandResult.failure(stderr=stderr, returncode=returncode),
        )

    def calls_matching(self, prefix: Sequence[str]) -> list[list[str]]:
        """All logged calls whose argv starts with ``prefix``."""
        n = len(prefix)
        return [c for c in self._call_log if tuple(c[:n]) == tuple(prefix)]

    def run(
        self,
        argv: Sequence[str],
        *,
        timeout: float | None = None,
    ) -> CommandResult:
        cmd = [str(a) for a in argv]
        self._call_log.append(cmd)

        key = self._match(cmd)
        if key is not None:
            queue = self._responses[key]
            result = queue.pop(0) if len(queue) > 1 else queue[0]
            return result.model_copy(update={"argv": cmd})

        return CommandResult.success(cmd, stdout=self._default_output)

    def reset(self) -> None:
        """Clear call log and scripted responses."""
        self._call_log.clear()
        self._responses.clear()

    def _match(self, cmd: list[str]) -> tuple[str, ...] | None:
        best: tuple[str, ...] | None = None
        for prefix in self._responses:
            if tuple(cmd[: len(prefix)]) == prefix:
                if best is None or len(prefix) > len(best):
                    best = prefix
        return best

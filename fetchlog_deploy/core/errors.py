"""
Error taxonomy — every failure that ends an invocation.

Services raise these; only the CLI turns them into exit codes.
Adapters never raise: they hand back a CommandResult and the
calling service decides which of these it becomes.
"""

from __future__ import annotations


class DeployError(Exception):
    """Base class for all orchestrator failures.

    Attributes:
        message:     One-line summary shown after ``[ERROR]``.
        diagnostic:  Captured output of the failing external command,
                     surfaced to the operator verbatim.
        remediation: Suggested follow-up steps, one per line.
    """

    def __init__(
        self,
        message: str,
        *,
        diagnostic: str = "",
        remediation: list[str] | None = None,
    ):
        super().__init__(message)
        self.message = message
        self.diagnostic = diagnostic
        self.remediation = list(remediation or [])


class ConfigError(DeployError):
    """Raised when the deployment configuration is invalid or unreadable."""


class InsufficientPrivilege(DeployError):
    """A mutating command was run without root."""


class RuntimeMissing(DeployError):
    """The Python interpreter could not be found or queried."""


class RuntimeTooOld(DeployError):
    """The Python interpreter is older than the required minimum."""


class PackageManagerMissing(DeployError):
    """pip is not usable with the discovered interpreter."""


class DependencyInstallFailed(DeployError):
    """pip failed and no fallback policy recovered it."""


class DependenciesMissing(DeployError):
    """Required packages cannot be imported by the target interpreter."""


class ProvisionFailed(DeployError):
    """Creating the service user, data directory or permissions failed."""


class DescriptorWriteFailed(DeployError):
    """The unit file could not be written or removed."""


class SupervisorCommandFailed(DeployError):
    """A systemctl control command exited nonzero."""


class UnknownCommand(DeployError):
    """The requested verb is not recognised."""

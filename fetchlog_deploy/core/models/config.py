"""
Deployment configuration model.

One DeployConfig is resolved per invocation (see core/config/loader.py)
and then threaded through every service. It is frozen: nothing may
change it after resolution.
"""

from __future__ import annotations

import re
from pathlib import Path

from pydantic import BaseModel, ConfigDict, Field, field_validator

from fetchlog_deploy.core.models.descriptor import has_control_chars

# useradd(8) accepts [a-z_][a-z0-9_-]*[$]? up to 32 characters
_USERNAME_RE = re.compile(r"^[a-z_][a-z0-9_-]{0,30}\$?$")

DEFAULT_REQUIRED_MODULES = (
    "fastapi",
    "uvicorn",
    "websockets",
    "jinja2",
    "aiofiles",
    "dateutil",
)


class DeployConfig(BaseModel):
    """Everything the orchestrator needs to know about the deployment.

    Defaults match a stock FetchLog install; the four network/identity
    fields are normally overridden through FETCHLOG_* environment
    variables.
    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    service_name: str = "fetchlog"

    # Network
    udp_port: int = Field(default=5514, ge=1, le=65535)
    web_port: int = Field(default=8080, ge=1, le=65535)
    host: str = "0.0.0.0"

    # Identity
    service_user: str = "fetchlog"

    # Filesystem layout
    install_dir: Path
    data_dir: Path = Path("/var/lib/fetchlog")
    unit_dir: Path = Path("/etc/systemd/system")
    entry_name: str = "app.py"
    manifest_name: str = "requirements.txt"
    db_name: str = "logs.db"

    # Runtime
    python: str = "python3"
    min_python: tuple[int, int] = (3, 10)
    required_modules: tuple[str, ...] = DEFAULT_REQUIRED_MODULES

    # Supervisor behaviour
    restart_sec: int = Field(default=5, ge=0)
    start_settle_seconds: float = Field(default=1.0, ge=0)

    @field_validator("service_user", "service_name")
    @classmethod
    def _valid_account_name(cls, value: str) -> str:
        if not _USERNAME_RE.match(value):
            raise ValueError(f"'{value}' is not a valid system account name")
        return value

    @field_validator("host")
    @classmethod
    def _single_token_host(cls, value: str) -> str:
        value = value.strip()
        if not value:
            raise ValueError("bind address must not be empty")
        if any(ch.isspace() for ch in value) or has_control_chars(value):
            raise ValueError(f"bind address must be a single token: {value!r}")
        return value

    @field_validator("install_dir", "data_dir", "unit_dir")
    @classmethod
    def _absolute(cls, value: Path) -> Path:
        if not value.is_absolute():
            raise ValueError(f"path must be absolute: {value}")
        return value

    @field_validator(
        "install_dir", "data_dir", "unit_dir", "entry_name", "manifest_name", "db_name"
    )
    @classmethod
    def _printable(cls, value: Path | str) -> Path | str:
        if has_control_chars(str(value)):
            raise ValueError(f"control character in path: {str(value)!r}")
        return value

    # ── Derived paths ───────────────────────────────────────────

    @property
    def unit_name(self) -> str:
        return f"{self.service_name}.service"

    @property
    def unit_path(self) -> Path:
        return self.unit_dir / self.unit_name

    @property
    def entry_path(self) -> Path:
        return self.install_dir / self.entry_name

    @property
    def manifest_path(self) -> Path:
        return self.install_dir / self.manifest_name

    @property
    def db_path(self) -> Path:
        return self.data_dir / self.db_name

    @property
    def venv_dir(self) -> Path:
        """Suggested isolated environment location for remediation hints."""
        return Path("/opt") / f"{self.service_name}-venv"

"""
Environment model — what the prober found on the host.
"""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict


class Environment(BaseModel):
    """Validated runtime facts, produced by ``probe()``."""

    model_config = ConfigDict(frozen=True)

    python_bin: str
    version: tuple[int, int]
    pip_version: str = ""

    @property
    def version_label(self) -> str:
        return f"{self.version[0]}.{self.version[1]}"

"""
Configuration loader — resolve the DeployConfig once per invocation.

Sources, lowest to highest precedence:

    1. Model defaults (DeployConfig)
    2. Optional YAML file (--config / FETCHLOG_CONFIG)
    3. FETCHLOG_* environment variables
    4. Explicit CLI arguments (install directory)

Nothing downstream reads the environment again; the returned model
is frozen.
"""

from __future__ import annotations

import logging
import os
from collections.abc import Mapping
from pathlib import Path
from typing import Any

import yaml
from pydantic import ValidationError

from fetchlog_deploy.core.errors import ConfigError
from fetchlog_deploy.core.models.config import DeployConfig

logger = logging.getLogger(__name__)

CONFIG_FILE_ENV = "FETCHLOG_CONFIG"

# Environment variable → DeployConfig field
ENV_OVERRIDES: dict[str, str] = {
    "FETCHLOG_UDP_PORT": "udp_port",
    "FETCHLOG_WEB_PORT": "web_port",
    "FETCHLOG_HOST": "host",
    "FETCHLOG_USER": "service_user",
}


def read_config_file(path: Path) -> dict[str, Any]:
    """Read deployment settings from a YAML file.

    The settings may sit at the top level or under a ``deploy:`` key.

    Raises:
        ConfigError: If the file is missing, unreadable or not a mapping.
    """
    if not path.is_file():
        raise ConfigError(f"Config file not found: {path}")

    logger.debug("Loading deploy config from %s", path)

    try:
        raw = path.read_text(encoding="utf-8")
    except OSError as e:
        raise ConfigError(f"Cannot read {path}: {e}") from e

    try:
        data = yaml.safe_load(raw)
    except yaml.YAMLError as e:
        raise ConfigError(f"Invalid YAML in {path}: {e}") from e

    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ConfigError(f"Expected a YAML mapping in {path}, got {type(data).__name__}")

    section = data.get("deploy", data)
    if not isinstance(section, dict):
        raise ConfigError(f"Expected 'deploy' to be a mapping in {path}")
    return dict(section)


def env_overrides(environ: Mapping[str, str]) -> dict[str, str]:
    """Pick the FETCHLOG_* overrides that are set (and non-empty)."""
    values: dict[str, str] = {}
    for var, field in ENV_OVERRIDES.items():
        value = environ.get(var)
        if value is not None and value != "":
            values[field] = value
    return values


def load_config(
    environ: Mapping[str, str] | None = None,
    config_file: Path | None = None,
    install_dir: Path | None = None,
) -> DeployConfig:
    """Resolve and validate the deployment configuration.

    Args:
        environ: Environment mapping (default: ``os.environ``).
        config_file: Explicit YAML file. Falls back to ``FETCHLOG_CONFIG``.
        install_dir: Application directory; defaults to the file's
            ``install_dir`` key, then the current working directory.

    Returns:
        A frozen DeployConfig.

    Raises:
        ConfigError: On unreadable files or invalid values.
    """
    if environ is None:
        environ = os.environ

    settings: dict[str, Any] = {}

    if config_file is None and environ.get(CONFIG_FILE_ENV):
        config_file = Path(environ[CONFIG_FILE_ENV])
    if config_file is not None:
        settings.update(read_config_file(config_file))

    settings.update(env_overrides(environ))

    if install_dir is not None:
        settings["install_dir"] = install_dir
    settings.setdefault("install_dir", Path.cwd())
    settings["install_dir"] = Path(settings["install_dir"]).expanduser().resolve()

    try:
        config = DeployConfig.model_validate(settings)
    except ValidationError as e:
        raise ConfigError(f"Invalid deploy configuration: {_describe(e)}") from e

    logger.info(
        "Resolved config: udp=%d web=%d host=%s user=%s install_dir=%s",
        config.udp_port,
        config.web_port,
        config.host,
        config.service_user,
        config.install_dir,
    )
    return config


def _describe(error: ValidationError) -> str:
    """Flatten pydantic errors into ``field: message`` pairs."""
    parts = []
    for err in error.errors():
        loc = ".".join(str(p) for p in err.get("loc", ())) or "config"
        parts.append(f"{loc}: {err.get('msg', 'invalid value')}")
    return "; ".join(parts)

"""
Service descriptor generator — render and write the systemd unit.

``render`` is pure: the same config and interpreter always give the
same descriptor, and therefore the same bytes on disk. ``write``
replaces the unit atomically and leaves an identical file untouched.
"""

from __future__ import annotations

import logging
import tempfile
from pathlib import Path

from fetchlog_deploy.core.errors import DescriptorWriteFailed
from fetchlog_deploy.core.models.config import DeployConfig
from fetchlog_deploy.core.models.descriptor import ServiceDescriptor

logger = logging.getLogger(__name__)

UNIT_DESCRIPTION = "FetchLog Universal Syslog Server & Log Viewer"
UNIT_DOCUMENTATION = "https://github.com/ShowSysDan/FetchLog"


def start_command(config: DeployConfig, python_bin: str) -> tuple[str, ...]:
    """Full argv systemd runs: interpreter, entry artifact, explicit flags."""
    return (
        python_bin,
        str(config.entry_path),
        "--udp-port", str(config.udp_port),
        "--web-port", str(config.web_port),
        "--host", config.host,
        "--db", str(config.db_path),
    )


def render(config: DeployConfig, *, python_bin: str) -> ServiceDescriptor:
    """Build the unit descriptor for ``config``."""
    return ServiceDescriptor(
        unit_name=config.unit_name,
        description=UNIT_DESCRIPTION,
        documentation=UNIT_DOCUMENTATION,
        user=config.service_user,
        group=config.service_user,
        working_directory=str(config.install_dir),
        exec_start=start_command(config, python_bin),
        restart_sec=config.restart_sec,
        syslog_identifier=config.service_name,
        read_write_paths=(str(config.data_dir),),
    )


def write(descriptor: ServiceDescriptor, destination: Path) -> bool:
    """Write the unit file via temp-file-then-rename.

    Returns:
        True if the file was written, False if identical content
        was already in place.

    Raises:
        DescriptorWriteFailed: On any filesystem error.
    """
    content = descriptor.to_unit_file()

    try:
        # compared as bytes: an existing unit need not be valid UTF-8
        if destination.is_file() and destination.read_bytes() == content.encode("utf-8"):
            logger.debug("Unit file %s unchanged", destination)
            return False

        destination.parent.mkdir(parents=True, exist_ok=True)
        fd, tmp_path = tempfile.mkstemp(
            dir=destination.parent,
            prefix=f".{destination.name}.",
            suffix=".tmp",
        )
        tmp = Path(tmp_path)
        try:
            with open(fd, "w", encoding="utf-8") as fh:
                fh.write(content)
            tmp.chmod(0o644)
            tmp.replace(destination)
        except BaseException:
            tmp.unlink(missing_ok=True)
            raise
    except OSError as e:
        raise DescriptorWriteFailed(f"Cannot write {destination}: {e}") from e

    logger.debug("Unit file written to %s (%d bytes)", destination, len(content))
    return True

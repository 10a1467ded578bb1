"""
Service descriptor model — a systemd unit as structured data.

``to_unit_file()`` is the only place unit text is produced. Output
depends on field values alone, so equal descriptors always render
to identical bytes.
"""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict, field_validator


def has_control_chars(text: str) -> bool:
    return any(ord(ch) < 0x20 or ord(ch) == 0x7F for ch in text)


def _literal(value: str) -> str:
    """Escape systemd specifiers so ``%`` reaches the service unchanged."""
    return value.replace("%", "%%")


def _quote(arg: str) -> str:
    """Quote an ExecStart argument for systemd if it needs it.

    ``%`` and ``$`` are doubled: ExecStart expands both.
    """
    arg = _literal(arg).replace("$", "$$")
    if arg and not any(ch.isspace() or ch in "\"'\\;" for ch in arg):
        return arg
    escaped = arg.replace("\\", "\\\\").replace('"', '\\"')
    return f'"{escaped}"'


def _flag(value: bool) -> str:
    return "true" if value else "false"


class ServiceDescriptor(BaseModel):
    """Structured form of the fetchlog unit file.

    Attributes:
        unit_name:         File name, e.g. ``fetchlog.service``.
        exec_start:        Full argv: interpreter, entry artifact, flags.
        exec_flags_from:   Index in ``exec_start`` where flags begin;
                           used only to lay the command out one flag
                           per line.
    """

    model_config = ConfigDict(frozen=True)

    unit_name: str
    description: str
    documentation: str = ""
    after: str = "network.target"
    wants: str = "network.target"

    service_type: str = "simple"
    user: str
    group: str
    working_directory: str
    exec_start: tuple[str, ...]
    exec_flags_from: int = 2
    restart: str = "on-failure"
    restart_sec: int = 5
    standard_output: str = "journal"
    standard_error: str = "journal"
    syslog_identifier: str

    # Sandboxing
    no_new_privileges: bool = True
    protect_system: str = "strict"
    read_write_paths: tuple[str, ...] = ()
    private_tmp: bool = True

    wanted_by: str = "multi-user.target"

    @field_validator("*")
    @classmethod
    def _single_line(cls, value: Any) -> Any:
        # a newline in any value would start a new directive
        items = value if isinstance(value, tuple) else (value,)
        for item in items:
            if isinstance(item, str) and has_control_chars(item):
                raise ValueError(f"control character in unit value: {item!r}")
        return value

    def exec_start_lines(self) -> list[str]:
        """ExecStart value split as ``prog entry`` then one flag pair per line."""
        head = " ".join(_quote(a) for a in self.exec_start[: self.exec_flags_from])
        rest = list(self.exec_start[self.exec_flags_from:])
        lines = [head]
        i = 0
        while i < len(rest):
            if rest[i].startswith("--") and i + 1 < len(rest) and not rest[i + 1].startswith("--"):
                lines.append(f"{rest[i]} {_quote(rest[i + 1])}")
                i += 2
            else:
                lines.append(_quote(rest[i]))
                i += 1
        return lines

    def to_unit_file(self) -> str:
        """Render the unit file text."""
        exec_lines = self.exec_start_lines()
        exec_start = " \\\n    ".join(exec_lines)

        unit = [
            "[Unit]",
            f"Description={self.description}",
        ]
        if self.documentation:
            unit.append(f"Documentation={self.documentation}")
        unit += [
            f"After={self.after}",
            f"Wants={self.wants}",
        ]

        service = [
            "[Service]",
            f"Type={self.service_type}",
            f"User={self.user}",
            f"Group={self.group}",
            "",
            "# Static assets and templates are resolved relative to this directory",
            f"WorkingDirectory={_literal(self.working_directory)}",
            "",
            f"ExecStart={exec_start}",
            "",
            f"Restart={self.restart}",
            f"RestartSec={self.restart_sec}",
            f"StandardOutput={self.standard_output}",
            f"StandardError={self.standard_error}",
            f"SyslogIdentifier={self.syslog_identifier}",
            "",
            "# Security hardening",
            f"NoNewPrivileges={_flag(self.no_new_privileges)}",
            f"ProtectSystem={self.protect_system}",
        ]
        if self.read_write_paths:
            paths = " ".join(_literal(p) for p in self.read_write_paths)
            service.append(f"ReadWritePaths={paths}")
        service.append(f"PrivateTmp={_flag(self.private_tmp)}")

        install = [
            "[Install]",
            f"WantedBy={self.wanted_by}",
        ]

        return "\n".join(unit + [""] + service + [""] + install) + "\n"

"""
Console output — the operator-facing progress stream.

Informational and success lines go to stdout; warnings, errors and
verbatim diagnostics go to stderr.  Every line carries a fixed-width
prefix so the output stays greppable when colour is stripped.
"""

from __future__ import annotations

import click

_RULE = "=" * 40


def banner(title: str) -> None:
    """Print a section banner, e.g. ``FetchLog - Service Installation``."""
    click.echo(_RULE)
    click.secho(f"  FetchLog - {title}", bold=True)
    click.echo(_RULE)


def blank() -> None:
    click.echo()


def info(message: str) -> None:
    click.echo(f"[INFO]  {message}")


def success(message: str) -> None:
    click.secho(f"[OK]    {message}", fg="green")


def warn(message: str) -> None:
    click.secho(f"[WARN]  {message}", fg="yellow", err=True)


def error(message: str) -> None:
    click.secho(f"[ERROR] {message}", fg="red", err=True)


def diagnostic(text: str) -> None:
    """Echo captured command output to stderr exactly as received."""
    if text:
        click.echo(text.rstrip("\n"), err=True)


def raw(text: str) -> None:
    """Echo supervisor output (e.g. ``systemctl status``) to stdout unchanged."""
    if text:
        click.echo(text.rstrip("\n"))

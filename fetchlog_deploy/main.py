"""
FetchLog deployment orchestrator — CLI entrypoint.

Usage:
    sudo fetchlog-deploy              # Full install: setup + install + start
    sudo fetchlog-deploy setup        # Install Python dependencies system-wide
    sudo fetchlog-deploy install      # Create and enable the systemd service
    sudo fetchlog-deploy start        # Start the service
    sudo fetchlog-deploy stop         # Stop the service
    sudo fetchlog-deploy restart      # Restart the service
    fetchlog-deploy status            # Show service status
    sudo fetchlog-deploy uninstall    # Remove the service (data is preserved)
"""

from __future__ import annotations

import functools
import os
import sys
import time
from collections.abc import Callable
from pathlib import Path
from typing import Any

import click

from fetchlog_deploy import __version__
from fetchlog_deploy.core.errors import DeployError, UnknownCommand
from fetchlog_deploy.core.observability import console
from fetchlog_deploy.core.observability.logging_config import (
    configure_from_environment,
    resolve_level,
)

_ENV_HELP = """\b
Environment overrides (set before running 'install'):
  FETCHLOG_UDP_PORT   UDP syslog port     (default: 5514)
  FETCHLOG_WEB_PORT   Web UI HTTP port    (default: 8080)
  FETCHLOG_HOST       Bind address        (default: 0.0.0.0)
  FETCHLOG_USER       Service user        (default: fetchlog)
"""


class VerbGroup(click.Group):
    """Group that reports an unknown verb with usage text and exit code 1."""

    def resolve_command(self, ctx: click.Context, args: list[str]) -> Any:
        name = args[0] if args else ""
        if name and not name.startswith("-") and self.get_command(ctx, name) is None:
            raise UnknownCommand(f"Unknown command: {name}")
        return super().resolve_command(ctx, args)

    def invoke(self, ctx: click.Context) -> Any:
        # resolve_command runs before the group callback
        try:
            return super().invoke(ctx)
        except UnknownCommand as e:
            console.warn(e.message)
            click.echo()
            click.echo(ctx.get_help())
            ctx.exit(1)


def _fail(err: DeployError) -> None:
    """Print a DeployError the way operators expect, then exit 1."""
    console.error(err.message)
    if err.diagnostic:
        console.diagnostic(err.diagnostic)
    for line in err.remediation:
        console.warn(line)
    sys.exit(1)


def handles_deploy_errors(fn: Callable[..., Any]) -> Callable[..., Any]:
    """Turn any DeployError raised by a command into exit code 1."""

    @functools.wraps(fn)
    def wrapper(*args: Any, **kwargs: Any) -> Any:
        try:
            return fn(*args, **kwargs)
        except DeployError as e:
            _fail(e)

    return wrapper


@click.group(
    cls=VerbGroup,
    invoke_without_command=True,
    context_settings={"help_option_names": ["-h", "--help"]},
    epilog=_ENV_HELP,
)
@click.version_option(version=__version__, prog_name="fetchlog-deploy")
@click.option("--verbose", "-v", is_flag=True, help="Enable verbose output.")
@click.option("--quiet", "-q", is_flag=True, help="Suppress non-essential log output.")
@click.option("--debug", is_flag=True, help="Enable debug logging (very verbose).")
@click.option(
    "--config",
    "-c",
    "config_path",
    type=click.Path(dir_okay=False, path_type=Path),
    default=None,
    help="YAML file with deployment settings (default: $FETCHLOG_CONFIG).",
)
@click.option(
    "--install-dir",
    type=click.Path(file_okay=False, path_type=Path),
    default=None,
    help="FetchLog application directory (default: current directory).",
)
@click.pass_context
@handles_deploy_errors
def cli(
    ctx: click.Context,
    verbose: bool,
    quiet: bool,
    debug: bool,
    config_path: Path | None,
    install_dir: Path | None,
) -> None:
    """FetchLog deployment — install and manage the fetchlog systemd service.

    With no command, runs the full install: setup + install + start.
    """
    ctx.ensure_object(dict)
    environ = ctx.obj.get("environ", os.environ)

    # ── Logging setup (once, at process start) ──────────────────
    level = resolve_level(debug=debug, verbose=verbose, quiet=quiet, environ=environ)
    configure_from_environment(level, environ)

    if ctx.invoked_subcommand == "help":
        return

    # ── Host bindings (tests inject fakes through ctx.obj) ──────
    if "runner" not in ctx.obj:
        from fetchlog_deploy.adapters.shell.command import SubprocessRunner

        ctx.obj["runner"] = SubprocessRunner()
    ctx.obj.setdefault("sleep", time.sleep)

    from fetchlog_deploy.core.config.loader import load_config

    ctx.obj["config"] = load_config(
        environ=environ,
        config_file=config_path,
        install_dir=install_dir,
    )

    if ctx.invoked_subcommand is None:
        from fetchlog_deploy.core.use_cases.deploy import run_all

        run_all(ctx.obj["config"], ctx.obj["runner"], sleep=ctx.obj["sleep"])


@cli.command()
@click.pass_context
@handles_deploy_errors
def setup(ctx: click.Context) -> None:
    """Install Python dependencies system-wide."""
    from fetchlog_deploy.core.use_cases.setup import run_setup

    run_setup(ctx.obj["config"], ctx.obj["runner"])


@cli.command()
@click.pass_context
@handles_deploy_errors
def install(ctx: click.Context) -> None:
    """Create and enable the systemd service."""
    from fetchlog_deploy.core.use_cases.install import run_install

    run_install(ctx.obj["config"], ctx.obj["runner"])


@cli.command()
@click.pass_context
@handles_deploy_errors
def start(ctx: click.Context) -> None:
    """Start the service."""
    from fetchlog_deploy.core.use_cases.lifecycle import run_start

    run_start(ctx.obj["config"], ctx.obj["runner"], sleep=ctx.obj["sleep"])


@cli.command()
@click.pass_context
@handles_deploy_errors
def stop(ctx: click.Context) -> None:
    """Stop the service."""
    from fetchlog_deploy.core.use_cases.lifecycle import run_stop

    run_stop(ctx.obj["config"], ctx.obj["runner"])


@cli.command()
@click.pass_context
@handles_deploy_errors
def restart(ctx: click.Context) -> None:
    """Restart the service."""
    from fetchlog_deploy.core.use_cases.lifecycle import run_restart

    run_restart(ctx.obj["config"], ctx.obj["runner"], sleep=ctx.obj["sleep"])


@cli.command()
@click.pass_context
@handles_deploy_errors
def status(ctx: click.Context) -> None:
    """Show service status."""
    from fetchlog_deploy.core.use_cases.lifecycle import run_status

    run_status(ctx.obj["config"], ctx.obj["runner"])


@cli.command()
@click.option("--yes", "-y", is_flag=True, help="Do not ask for confirmation.")
@click.pass_context
@handles_deploy_errors
def uninstall(ctx: click.Context, yes: bool) -> None:
    """Remove the service (preserves database)."""
    from fetchlog_deploy.core.services.probe import require_privilege
    from fetchlog_deploy.core.use_cases.uninstall import announce_uninstall, run_uninstall

    config = ctx.obj["config"]
    require_privilege("uninstall")
    announce_uninstall(config)
    confirmed = yes or click.confirm("Continue?", default=False)
    run_uninstall(config, ctx.obj["runner"], confirmed=confirmed)


@cli.command("help")
@click.pass_context
def help_(ctx: click.Context) -> None:
    """Show this message and exit."""
    click.echo(ctx.parent.get_help() if ctx.parent else ctx.get_help())


if __name__ == "__main__":
    cli()

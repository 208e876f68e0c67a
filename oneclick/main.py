"""
oneclick — CLI entrypoint.

Usage:
    oneclick --help
    oneclick go 1.21.5
    oneclick docker
    oneclick node --lts
    python -m oneclick.main status
"""

from __future__ import annotations

import os
from pathlib import Path

import click

from oneclick import __version__
from oneclick.core.observability.logging_config import (
    ENV_LOG_FILE,
    ENV_LOG_FILE_LEVEL,
    resolve_level,
    setup_logging,
)


@click.group(context_settings={"help_option_names": ["-h", "--help"]})
@click.version_option(version=__version__, prog_name="oneclick")
@click.option("--verbose", "-v", is_flag=True, help="Enable verbose output.")
@click.option("--quiet", "-q", is_flag=True, help="Suppress non-essential output.")
@click.option("--debug", is_flag=True, help="Enable debug logging (very verbose).")
@click.option(
    "--config",
    "-c",
    "config_path",
    type=click.Path(exists=False),
    default=None,
    help="Path to a settings YAML (default: ~/.config/oneclick/config.yml).",
)
@click.option(
    "--region",
    type=click.Choice(["auto", "primary", "mirror"]),
    default=None,
    help="Force the endpoint set instead of detecting it.",
)
@click.pass_context
def cli(
    ctx: click.Context,
    verbose: bool,
    quiet: bool,
    debug: bool,
    config_path: str | None,
    region: str | None,
) -> None:
    """oneclick — install Go, Docker and Node.js in one step."""
    ctx.ensure_object(dict)
    ctx.obj["verbose"] = verbose
    ctx.obj["quiet"] = quiet
    ctx.obj["debug"] = debug
    ctx.obj["config_path"] = Path(config_path) if config_path else None
    ctx.obj["region"] = region

    # ── Logging setup (once, at process start) ──────────────────
    setup_logging(
        level=resolve_level(verbose=verbose, quiet=quiet, debug=debug),
        log_file=os.environ.get(ENV_LOG_FILE),
        log_file_level=os.environ.get(ENV_LOG_FILE_LEVEL),
        quiet_third_party=not debug,
    )


# ── Register sub-commands from oneclick/ui/cli/ ───────────────────

from oneclick.ui.cli.docker import docker
from oneclick.ui.cli.go import go
from oneclick.ui.cli.node import node
from oneclick.ui.cli.region import region
from oneclick.ui.cli.status import status

cli.add_command(go)
cli.add_command(docker)
cli.add_command(node)
cli.add_command(region)
cli.add_command(status)


if __name__ == "__main__":
    cli()

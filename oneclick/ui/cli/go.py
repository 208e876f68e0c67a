"""
CLI command for the Go installer.

Thin wrapper over ``oneclick.core.use_cases.install``.
"""

from __future__ import annotations

import click

from oneclick.ui.cli.common import run_install


@click.command("go")
@click.argument("version", required=False)
@click.option(
    "--dir",
    "install_dir",
    default=None,
    help="Installation directory (default: /usr/local, or $GO_INSTALL_DIR).",
)
@click.option("--force", is_flag=True, help="Reinstall even if the version is present.")
@click.option("--json-output", "--json", "as_json", is_flag=True, help="Output as JSON.")
@click.pass_context
def go(ctx: click.Context, version: str | None, install_dir: str | None,
       force: bool, as_json: bool) -> None:
    """Install Go VERSION (default: latest release).

    \b
    Examples:
      oneclick go                  # latest Go
      oneclick go 1.21.5           # specific version
      oneclick go --dir /opt 1.21.5
      oneclick go --force 1.21.5   # reinstall
    """
    run_install(ctx, "go", version, force=force, as_json=as_json, install_dir=install_dir)

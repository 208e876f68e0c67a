"""
CLI command for the Node.js installer.
"""

from __future__ import annotations

import click

from oneclick.ui.cli.common import run_install


@click.command("node")
@click.argument("version", required=False)
@click.option("--lts", is_flag=True, help="Install the latest LTS (ignores VERSION).")
@click.option("--force", is_flag=True, help="Reinstall even if the version is present.")
@click.option("--no-npm-config", is_flag=True, help="Leave ~/.npmrc untouched.")
@click.option("--json-output", "--json", "as_json", is_flag=True, help="Output as JSON.")
@click.pass_context
def node(ctx: click.Context, version: str | None, lts: bool, force: bool,
         no_npm_config: bool, as_json: bool) -> None:
    """Install Node.js VERSION through nvm (default: latest LTS).

    \b
    Examples:
      oneclick node                 # latest LTS
      oneclick node 20.10.0         # specific version
      oneclick node --no-npm-config 18.19.0
    """
    run_install(
        ctx,
        "node",
        version,
        force=force,
        as_json=as_json,
        options={"lts": lts, "no_npm_config": no_npm_config},
    )

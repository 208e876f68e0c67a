"""
CLI command for the Docker installer.
"""

from __future__ import annotations

import click

from oneclick.ui.cli.common import run_install


@click.command("docker")
@click.option("--force", is_flag=True, help="Reinstall even if Docker is present.")
@click.option("--json-output", "--json", "as_json", is_flag=True, help="Output as JSON.")
@click.pass_context
def docker(ctx: click.Context, force: bool, as_json: bool) -> None:
    """Install Docker CE and Docker Compose (Linux only).

    Uses the distribution's package repository when one is supported
    (apt, dnf, yum) and the Docker convenience script otherwise.
    """
    run_install(ctx, "docker", force=force, as_json=as_json)

"""
CLI command listing the host platform and installed tool versions.
"""

from __future__ import annotations

import json

import click

from oneclick.core.services.tool_install.domain.errors import InstallerError
from oneclick.ui.cli.common import load_cli_settings, report_error


@click.command("status")
@click.option("--json-output", "--json", "as_json", is_flag=True, help="Output as JSON.")
@click.pass_context
def status(ctx: click.Context, as_json: bool) -> None:
    """Show the detected platform and installed tools."""
    from oneclick.core.use_cases.status import get_status

    try:
        settings = load_cli_settings(ctx)
    except InstallerError as exc:
        report_error(exc, as_json=as_json)
        return

    result = get_status(settings)

    if as_json:
        click.echo(json.dumps(result.to_dict(), indent=2))
        return

    if result.error:
        click.secho(f"⚠️  {result.error}", fg="yellow")

    if result.platform:
        p = result.platform
        click.secho(f"\n🖥️  {p.os}-{p.arch}", fg="cyan", bold=True)
        distro = p.distro.get("PRETTY_NAME") or p.distro.get("NAME")
        if distro:
            click.echo(f"   {distro}")
        click.echo(f"   Package manager: {p.package_manager or 'none'}")

    click.echo()
    for tool in result.tools:
        if tool["installed"]:
            click.echo(f"   ✅ {tool['tool']:<16} {tool['version']}")
        else:
            click.echo(f"   ❌ {tool['tool']:<16} not installed")

    nvm = result.nvm
    if nvm.get("installed"):
        versions = ", ".join(nvm["available_versions"]) or "no Node.js versions"
        click.echo(f"   ✅ {'nvm':<16} {nvm['nvm_dir']} ({versions})")
    click.echo()

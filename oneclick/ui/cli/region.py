"""
CLI command showing which endpoint set each installer would use.
"""

from __future__ import annotations

import json

import click

from oneclick.core.services.tool_install.data.endpoints import known_tools
from oneclick.core.services.tool_install.domain.errors import InstallerError
from oneclick.ui.cli.common import load_cli_settings, report_error


@click.command("region")
@click.argument("tool", required=False, type=click.Choice(known_tools()))
@click.option("--json-output", "--json", "as_json", is_flag=True, help="Output as JSON.")
@click.pass_context
def region(ctx: click.Context, tool: str | None, as_json: bool) -> None:
    """Show the region decision for TOOL (default: all tools)."""
    from oneclick.core.use_cases.install import build_region_resolver
    from oneclick.core.use_cases.status import describe_region

    tools = [tool] if tool else known_tools()
    try:
        settings = load_cli_settings(ctx)
        reports = [
            describe_region(name, build_region_resolver(name, settings))
            for name in tools
        ]
    except InstallerError as exc:
        report_error(exc, as_json=as_json)
        return

    if as_json:
        click.echo(json.dumps([r.to_dict() for r in reports], indent=2))
        return

    for report in reports:
        color = "yellow" if report.selected == "mirror" else "green"
        click.secho(f"🌐 {report.tool}: ", fg="cyan", bold=True, nl=False)
        click.secho(f"{report.selected} ({report.endpoints['name']})", fg=color, nl=False)
        click.echo(f"  via {report.reason}")
        if report.timezone or report.locale:
            click.echo(f"   timezone={report.timezone or '-'}  locale={report.locale or '-'}")
        click.echo(f"   {report.endpoints['probe_url']}")

"""
Shared plumbing for the install commands: settings, progress, output.
"""

from __future__ import annotations

import json
import sys
from typing import Any

import click

from oneclick.core.config.loader import load_settings
from oneclick.core.models.settings import InstallerSettings
from oneclick.core.services.tool_install.domain.errors import InstallerError

_STATE_ICONS = {
    "CHECK_EXISTING": "🔍",
    "SKIP": "⏭️ ",
    "REMOVE_OLD": "🗑️ ",
    "DOWNLOAD": "⬇️ ",
    "INSTALL": "📦",
    "CONFIGURE": "⚙️ ",
    "VERIFY": "🧪",
}


def load_cli_settings(ctx: click.Context) -> InstallerSettings:
    """Settings from the config file, with ``--region`` applied last."""
    settings = load_settings(ctx.obj.get("config_path"))
    region = ctx.obj.get("region")
    if region:
        settings = settings.model_copy(update={"region": region})
    return settings


def make_progress(*, quiet: bool = False, as_json: bool = False):
    """Build the ``progress(kind, message)`` callback for the terminal."""

    def progress(kind: str, message: str) -> None:
        if as_json:
            return
        if kind == "warning":
            click.secho(f"⚠️  {message}", fg="yellow")
            return
        if quiet:
            return
        if kind == "DONE":
            click.secho(f"✅ {message}", fg="green")
        elif kind == "info":
            click.echo(f"   {message}")
        else:
            click.secho(f"{_STATE_ICONS.get(kind, '▶')} {message}", fg="cyan")

    return progress


def report_error(exc: InstallerError, *, as_json: bool = False) -> None:
    """Print ``exc`` and exit with its code."""
    if as_json:
        click.echo(json.dumps({"ok": False, **exc.to_dict()}, indent=2))
    else:
        click.secho(f"❌ {exc.message}", fg="red")
        if exc.hint:
            click.secho(f"   {exc.hint}", fg="yellow")
    sys.exit(exc.exit_code)


def run_install(
    ctx: click.Context,
    tool: str,
    version: str | None = None,
    *,
    force: bool = False,
    as_json: bool = False,
    install_dir: str | None = None,
    options: dict[str, Any] | None = None,
) -> None:
    """Run the install use case and render its result."""
    from oneclick.core.use_cases.install import install_tool

    quiet = ctx.obj.get("quiet", False)
    try:
        settings = load_cli_settings(ctx)
        result = install_tool(
            tool,
            version,
            settings=settings,
            force=force,
            install_dir=install_dir,
            options=options,
            progress=make_progress(quiet=quiet, as_json=as_json),
        )
    except InstallerError as exc:
        report_error(exc, as_json=as_json)
        return

    if as_json:
        click.echo(json.dumps(result.to_dict(), indent=2))
        return

    if quiet or result.skipped:
        return

    click.echo()
    click.secho(f"🎉 {tool} {result.verification.reported_version} is ready", fg="green", bold=True)
    if result.profiles_updated:
        click.echo(f"   Profiles updated: {', '.join(result.profiles_updated)}")
    if result.hints:
        click.echo()
        for line in result.hints:
            click.echo(f"   {line}" if line else "")
    click.echo()

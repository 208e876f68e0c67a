"""
L4 Execution — Runtime config files and shell export lines.

Default configuration is written only when the user has none; an
existing file is never overwritten.
"""

from __future__ import annotations

import json
import logging
import os
from pathlib import Path

from oneclick.core.services.tool_install.domain.npmrc import (
    missing_npmrc_entries,
    render_npmrc_entries,
)
from oneclick.core.services.tool_install.execution.filesystem import write_file

logger = logging.getLogger(__name__)


def _shell_config_line(
    *,
    path_entry: str | None = None,
    env_var: tuple[str, str] | None = None,
) -> str:
    """Generate a POSIX PATH or env export line.

    Args:
        path_entry: Directory to add to PATH, e.g. ``"$GOROOT/bin"``.
        env_var: Tuple of ``(name, value)`` e.g. ``("GOPATH", "$HOME/go")``.
    """
    if path_entry:
        return f'export PATH="{path_entry}:$PATH"'
    if env_var:
        return f'export {env_var[0]}="{env_var[1]}"'
    return ""


def write_config_if_absent(path: Path, content: str) -> bool:
    """Create ``path`` with ``content`` unless it already exists.

    Returns:
        True if the file was created.
    """
    if path.exists():
        logger.info("%s already exists, leaving it untouched", path)
        return False
    write_file(path, content)
    logger.info("Created %s", path)
    return True


def write_json_config_if_absent(path: Path, data: dict) -> bool:
    return write_config_if_absent(path, json.dumps(data, indent=4) + "\n")


def merge_npmrc(path: Path, desired: dict[str, str]) -> dict[str, str]:
    """Append to ``.npmrc`` the keys from ``desired`` it lacks.

    Returns:
        The entries that were added.
    """
    existing = ""
    if path.is_file():
        existing = path.read_text(encoding="utf-8", errors="surrogateescape")

    added = missing_npmrc_entries(existing, desired)
    if not added:
        return {}

    prefix = "" if not existing or existing.endswith("\n") else "\n"
    path.parent.mkdir(parents=True, exist_ok=True)
    with open(path, "a", encoding="utf-8", errors="surrogateescape") as f:
        f.write(prefix + render_npmrc_entries(added))
    logger.info("Added %s to %s", ", ".join(sorted(added)), path)
    return added


def expand(path: str) -> Path:
    return Path(os.path.expanduser(os.path.expandvars(path)))


def shell_path(path: str) -> str:
    """Render ``path`` for a profile, ``~/x`` becoming ``$HOME/x``."""
    if path == "~":
        return "$HOME"
    if path.startswith("~/"):
        return "$HOME/" + path[2:]
    return path

"""
L3 Detection — Tool version checking.

Read-only probes: runs ``--version`` commands and parses output.
Also provides ``detect_nvm`` and ``check_installed`` (local scan).
"""

from __future__ import annotations

import os
import re
import shutil
import subprocess
from pathlib import Path

from oneclick.core.services.tool_install.domain.version_format import version_key

VERSION_COMMANDS: dict[str, tuple[list[str], str]] = {
    "go":             (["go", "version"],                r"go(\d+\.\d+(?:\.\d+)?(?:rc\d+|beta\d+)?)"),
    "node":           (["node", "--version"],            r"v(\d+\.\d+\.\d+)"),
    "npm":            (["npm", "--version"],             r"(\d+\.\d+\.\d+)"),
    "docker":         (["docker", "--version"],          r"Docker version\s+(\d+\.\d+\.\d+)"),
    "docker-compose": (["docker-compose", "--version"],  r"v?(\d+\.\d+\.\d+)"),
    "compose-plugin": (["docker", "compose", "version"], r"v?(\d+\.\d+\.\d+)"),
}


def _search_path(env: dict[str, str] | None) -> str | None:
    if env and "PATH" in env:
        return os.path.expandvars(env["PATH"])
    return None


def which(cli: str, env: dict[str, str] | None = None) -> str | None:
    """``shutil.which`` honouring a PATH override from ``env``."""
    return shutil.which(cli, path=_search_path(env))


def get_tool_version(
    tool: str,
    *,
    binary: str | None = None,
    env: dict[str, str] | None = None,
) -> str | None:
    """Get the installed version of a tool.

    Args:
        tool: Key into ``VERSION_COMMANDS``.
        binary: Explicit executable path replacing the command's first
            token (e.g. ``/usr/local/go/bin/go``).
        env: Extra environment; its ``PATH`` is used for lookup.

    Returns:
        Version string (e.g. ``"1.21.5"``) or ``None`` if the tool
        is not installed or version can't be determined.
    """
    entry = VERSION_COMMANDS.get(tool)
    if not entry:
        return None

    cmd, pattern = entry
    cmd = list(cmd)
    if binary:
        if not Path(binary).is_file():
            return None
        cmd[0] = binary
    else:
        resolved = which(cmd[0], env)
        if not resolved:
            return None
        cmd[0] = resolved

    run_env = None
    if env:
        run_env = os.environ.copy()
        run_env.update({k: os.path.expandvars(v) for k, v in env.items()})

    try:
        result = subprocess.run(
            cmd, capture_output=True, text=True, timeout=10, env=run_env,
        )
    except (subprocess.TimeoutExpired, OSError):
        return None

    if result.returncode != 0:
        return None
    # Some tools write version to stderr
    output = (result.stdout or "") + (result.stderr or "")
    match = re.search(pattern, output)
    if match:
        return match.group(1)
    return None


# ── nvm ──────────────────────────────────────────────────────


def detect_nvm(nvm_dir: str | None = None) -> dict:
    """Detect nvm (Node Version Manager) installation.

    Returns::

        {
            "installed": True,
            "nvm_dir": "/home/user/.nvm",
            "available_versions": ["20.11.0", "18.19.0"],
        }
    """
    nvm_dir = os.path.expanduser(nvm_dir or os.environ.get("NVM_DIR", "~/.nvm"))
    nvm_sh = os.path.join(nvm_dir, "nvm.sh")

    if not os.path.isfile(nvm_sh) or os.path.getsize(nvm_sh) == 0:
        return {"installed": False, "nvm_dir": nvm_dir, "available_versions": []}

    versions: list[str] = []
    versions_dir = os.path.join(nvm_dir, "versions", "node")
    if os.path.isdir(versions_dir):
        versions = [
            d[1:] for d in os.listdir(versions_dir)
            if d.startswith("v") and os.path.isdir(os.path.join(versions_dir, d))
        ]
        versions.sort(key=version_key, reverse=True)

    return {
        "installed": True,
        "nvm_dir": nvm_dir,
        "available_versions": versions,
    }


def check_installed(tools: list[str] | None = None) -> list[dict]:
    """Report which of the managed tools are on PATH, with versions."""
    if tools is None:
        tools = ["go", "node", "npm", "docker", "docker-compose", "compose-plugin"]

    results = []
    for tool_id in tools:
        version = get_tool_version(tool_id)
        results.append({
            "tool": tool_id,
            "installed": version is not None,
            "version": version,
        })
    return results

"""
L4 Execution — Core subprocess runner.

The SINGLE PLACE where ``subprocess.run`` is called for
install operations. Privilege escalation, environment handling,
logging, and error handling are centralised here.
"""

from __future__ import annotations

import logging
import os
import shutil
import subprocess
import time
from typing import Any

logger = logging.getLogger(__name__)


def is_root() -> bool:
    return hasattr(os, "geteuid") and os.geteuid() == 0


def _run_subprocess(
    cmd: list[str],
    *,
    needs_sudo: bool = False,
    timeout: float = 120,
    env_overrides: dict[str, str] | None = None,
    cwd: str | None = None,
) -> dict[str, Any]:
    """Run a subprocess command with sudo and env support.

    When ``needs_sudo`` is set and the process is not already root the
    command is prefixed with ``sudo``.  sudo talks to the terminal
    directly, so a password prompt still reaches the user even though
    stdout/stderr are captured.

    Args:
        cmd: Command list for ``subprocess.run()``.
        needs_sudo: Whether the command requires root.
        timeout: Seconds before ``TimeoutExpired``.
        env_overrides: Extra env vars (e.g. PATH from ``post_env``).
        cwd: Working directory for the command.

    Returns:
        ``{"ok": True, "stdout": "...", "elapsed_ms": N}`` on success,
        ``{"ok": False, "error": "...", ...}`` on failure.
    """
    if needs_sudo and not is_root():
        if not shutil.which("sudo"):
            return {
                "ok": False,
                "needs_sudo": True,
                "error": "This step requires root and sudo is not available.",
            }
        cmd = ["sudo"] + cmd

    env = os.environ.copy()
    if env_overrides:
        for key, value in env_overrides.items():
            env[key] = os.path.expandvars(value)

    logger.debug("Running: %s", " ".join(cmd))
    start = time.monotonic()
    try:
        result = subprocess.run(
            cmd,
            capture_output=True,
            text=True,
            timeout=timeout,
            env=env,
            cwd=cwd,
        )
    except subprocess.TimeoutExpired:
        return {"ok": False, "error": f"Command timed out ({timeout}s)"}
    except OSError as e:
        logger.debug("Subprocess error: %s", cmd, exc_info=True)
        return {"ok": False, "error": str(e)}

    elapsed_ms = int((time.monotonic() - start) * 1000)
    stdout = result.stdout[-2000:] if result.stdout else ""

    if result.returncode == 0:
        return {"ok": True, "stdout": stdout, "elapsed_ms": elapsed_ms}

    stderr = result.stderr[-2000:] if result.stderr else ""
    return {
        "ok": False,
        "error": f"Command failed (exit {result.returncode})",
        "stderr": stderr,
        "stdout": stdout,
        "elapsed_ms": elapsed_ms,
    }


def describe_failure(result: dict[str, Any]) -> str:
    """One-line summary of a failed ``_run_subprocess`` result."""
    detail = (result.get("stderr") or "").strip().splitlines()
    if detail:
        return f"{result.get('error', 'failed')}: {detail[-1]}"
    return result.get("error", "failed")

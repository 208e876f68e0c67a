"""
L4 Execution — Filesystem operations with privilege fallback.

Each operation is done in-process when the target is writable and
through ``sudo`` otherwise.  Failures raise ``InstallFailed``.
"""

from __future__ import annotations

import logging
import os
import shutil
import tarfile
import tempfile
from pathlib import Path

from oneclick.core.services.tool_install.domain.errors import InstallFailed
from oneclick.core.services.tool_install.execution.subprocess_runner import (
    _run_subprocess,
    describe_failure,
)

logger = logging.getLogger(__name__)


def _writable(path: Path) -> bool:
    """True if ``path`` (or its nearest existing parent) is writable."""
    probe = path
    while not probe.exists():
        if probe.parent == probe:
            return False
        probe = probe.parent
    return os.access(probe, os.W_OK)


def _run_or_raise(cmd: list[str], what: str, *, timeout: float = 300) -> None:
    result = _run_subprocess(cmd, needs_sudo=True, timeout=timeout)
    if not result["ok"]:
        raise InstallFailed(f"{what}: {describe_failure(result)}")


def remove_tree(path: Path) -> None:
    """Delete ``path`` recursively.  No backup is kept."""
    if not path.exists() and not path.is_symlink():
        return
    logger.info("Removing %s", path)
    if _writable(path.parent):
        try:
            if path.is_dir() and not path.is_symlink():
                shutil.rmtree(path)
            else:
                path.unlink()
            return
        except OSError as exc:
            raise InstallFailed(f"Cannot remove {path}: {exc}") from exc
    _run_or_raise(["rm", "-rf", str(path)], f"Cannot remove {path}")


def extract_tarball(archive: Path, dest_dir: Path) -> None:
    """Unpack a ``.tar.gz`` into ``dest_dir``.

    Raises:
        InstallFailed: corrupt archive or extraction error.
    """
    logger.info("Extracting %s into %s", archive.name, dest_dir)
    if _writable(dest_dir):
        try:
            dest_dir.mkdir(parents=True, exist_ok=True)
            with tarfile.open(archive, "r:gz") as tf:
                tf.extractall(dest_dir, filter="data")
            return
        except (tarfile.TarError, OSError, EOFError) as exc:
            raise InstallFailed(f"Extract failed: {exc}") from exc

    _run_or_raise(["mkdir", "-p", str(dest_dir)], f"Cannot create {dest_dir}")
    _run_or_raise(
        ["tar", "-C", str(dest_dir), "-xzf", str(archive)],
        "Extract failed",
        timeout=600,
    )


def install_file(src: Path, dest: Path, *, mode: int = 0o755) -> None:
    """Copy ``src`` to ``dest`` and set its mode."""
    if _writable(dest.parent):
        try:
            dest.parent.mkdir(parents=True, exist_ok=True)
            shutil.copy2(src, dest)
            os.chmod(dest, mode)
            return
        except OSError as exc:
            raise InstallFailed(f"Cannot install {dest}: {exc}") from exc
    _run_or_raise(["install", "-m", oct(mode)[2:], str(src), str(dest)],
                  f"Cannot install {dest}")


def ensure_symlink(target: Path, link: Path) -> bool:
    """Create ``link`` → ``target`` unless ``link`` already exists."""
    if link.exists() or link.is_symlink():
        return False
    if _writable(link.parent):
        try:
            link.symlink_to(target)
            return True
        except OSError as exc:
            raise InstallFailed(f"Cannot link {link}: {exc}") from exc
    _run_or_raise(["ln", "-s", str(target), str(link)], f"Cannot link {link}")
    return True


def write_file(path: Path, content: str) -> None:
    """Write ``content`` to ``path``, creating parents."""
    if _writable(path.parent):
        try:
            path.parent.mkdir(parents=True, exist_ok=True)
            path.write_text(content, encoding="utf-8")
            return
        except OSError as exc:
            raise InstallFailed(f"Cannot write {path}: {exc}") from exc

    # Stage in a temp file and move it into place as root.
    fd, tmp = tempfile.mkstemp(prefix="oneclick-")
    try:
        with os.fdopen(fd, "w", encoding="utf-8") as f:
            f.write(content)
        _run_or_raise(["mkdir", "-p", str(path.parent)], f"Cannot create {path.parent}")
        _run_or_raise(["install", "-m", "644", tmp, str(path)], f"Cannot write {path}")
    finally:
        Path(tmp).unlink(missing_ok=True)

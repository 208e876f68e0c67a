"""
L4 Execution — Shell profile environment writer.

Applies a ``ProfileEditBlock`` to each existing profile file.  Missing
files are skipped; nothing is created.  Each file is rewritten through
a temp file + ``os.replace`` so a crash never leaves half a block, but
there is no locking: two installers editing the same profile at once
can still lose one of the edits.

Symlinked profiles are followed to their target.  Bytes that are not
valid UTF-8 pass through untouched.
"""

from __future__ import annotations

import logging
import os
import shutil
import tempfile
import time
from pathlib import Path
from typing import Iterable

from oneclick.core.models.install import ProfileEditBlock
from oneclick.core.services.tool_install.data.profile_maps import DEFAULT_PROFILE_TARGETS
from oneclick.core.services.tool_install.domain.errors import InstallFailed
from oneclick.core.services.tool_install.domain.profile_block import merge_block

logger = logging.getLogger(__name__)


class ProfileEnvironmentWriter:
    """Idempotently inject a named block into shell profiles."""

    def __init__(self, *, backup: bool = False) -> None:
        self.backup = backup
        self.updated: list[str] = []

    def apply(
        self,
        profile_paths: Iterable[str | Path] | None,
        block: ProfileEditBlock,
    ) -> int:
        """Write ``block`` into every existing profile.

        Returns:
            Number of files updated.
        """
        paths = DEFAULT_PROFILE_TARGETS if profile_paths is None else profile_paths
        count = 0
        for raw in paths:
            path = Path(os.path.expanduser(str(raw)))
            if not path.is_file():
                logger.debug("Profile %s does not exist, skipping", path)
                continue
            self._apply_one(path, block)
            self.updated.append(str(path))
            count += 1
        return count

    def _apply_one(self, path: Path, block: ProfileEditBlock) -> None:
        path = path.resolve()
        try:
            original = path.read_text(encoding="utf-8", errors="surrogateescape")
        except OSError as exc:
            raise InstallFailed(f"Cannot read {path}: {exc}") from exc

        merged = merge_block(original, block)

        if self.backup and merged != original:
            backup = path.with_name(f"{path.name}.backup.{int(time.time())}")
            shutil.copy2(path, backup)

        fd, tmp = tempfile.mkstemp(prefix=f".{path.name}.", dir=path.parent)
        try:
            with os.fdopen(fd, "w", encoding="utf-8", errors="surrogateescape") as f:
                f.write(merged)
            shutil.copymode(path, tmp)
            os.replace(tmp, path)
        except OSError as exc:
            Path(tmp).unlink(missing_ok=True)
            raise InstallFailed(f"Failed to write {path}: {exc}") from exc

        logger.info("Updated %s", path)

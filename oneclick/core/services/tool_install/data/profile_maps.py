"""
L0 Data — Shell profile targets and legacy block layouts.
"""

from __future__ import annotations

# Profiles the installers edit, in order.  Missing files are skipped.
DEFAULT_PROFILE_TARGETS: tuple[str, ...] = ("~/.bashrc", "~/.zshrc", "~/.profile")

# Header comment → lines that followed it in blocks written by the
# older shell installers.  Counts match what those installers actually
# wrote, so removal never reaches into user content.
LEGACY_GO_WINDOWS: dict[str, int] = {
    "# Go environment setup": 3,
}

LEGACY_NODE_WINDOWS: dict[str, int] = {
    "# NVM environment setup": 3,
    "# npm global packages": 1,
    "# NVM China mirrors": 2,
}

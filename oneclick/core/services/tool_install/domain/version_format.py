"""
L1 Domain — Version string validation (pure).

No I/O, no subprocess.
"""

from __future__ import annotations

import json
import re

from oneclick.core.services.tool_install.domain.errors import InvalidVersionFormat

VERSION_PATTERN = re.compile(r"^[0-9]+\.[0-9]+(\.[0-9]+)?(rc[0-9]+|beta[0-9]+)?$")


def is_valid_version(version: str) -> bool:
    return bool(VERSION_PATTERN.match(version))


def validate_version(version: str) -> str:
    """Return ``version`` unchanged, or raise ``InvalidVersionFormat``."""
    if not is_valid_version(version):
        raise InvalidVersionFormat(version)
    return version


def strip_version_prefix(text: str, prefix: str) -> str:
    """Strip a textual tag such as ``go`` or ``v`` from a version."""
    text = text.strip()
    if prefix and text.startswith(prefix):
        return text[len(prefix):]
    return text


# ── Remote pointer parsers ─────────────────────────────────────
#
# Each parser takes the raw response body and returns the version
# string it carries (prefix still attached), or None.


def parse_first_line(body: str) -> str | None:
    """Go's ``VERSION?m=text``: ``go1.22.0\\ntime 2024-...``."""
    for line in body.splitlines():
        if line.strip():
            return line.strip()
    return None


def parse_node_lts_index(body: str) -> str | None:
    """Node's ``dist/index.json``: newest entry whose ``lts`` is set."""
    try:
        releases = json.loads(body)
    except json.JSONDecodeError:
        return None
    if not isinstance(releases, list):
        return None
    for release in releases:
        if isinstance(release, dict) and release.get("lts"):
            return release.get("version")
    return None


def parse_github_release_tag(body: str) -> str | None:
    """GitHub ``releases/latest`` JSON: the ``tag_name`` field."""
    try:
        data = json.loads(body)
    except json.JSONDecodeError:
        return None
    if not isinstance(data, dict):
        return None
    return data.get("tag_name") or None


def version_key(version: str) -> tuple[int, ...]:
    """Numeric sort key for ``X.Y.Z`` (pre-release suffix ignored)."""
    core = re.match(r"^v?(\d+(?:\.\d+)*)", version.strip())
    if not core:
        return ()
    return tuple(int(x) for x in core.group(1).split("."))

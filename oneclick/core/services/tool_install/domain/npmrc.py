"""
L1 Domain — ``.npmrc`` key merge (pure).

npm's user config is an ini-style ``key=value`` file.  The installer
only ever adds keys the user has not set; existing values win.
"""

from __future__ import annotations


def parse_npmrc_keys(text: str) -> set[str]:
    """Keys set in an ``.npmrc`` body (comments and blanks ignored)."""
    keys: set[str] = set()
    for raw in text.splitlines():
        line = raw.strip()
        if not line or line.startswith(("#", ";")):
            continue
        if "=" in line:
            keys.add(line.split("=", 1)[0].strip())
    return keys


def missing_npmrc_entries(existing: str, desired: dict[str, str]) -> dict[str, str]:
    """The subset of ``desired`` whose keys ``existing`` does not set."""
    present = parse_npmrc_keys(existing)
    return {k: v for k, v in desired.items() if k not in present}


def render_npmrc_entries(entries: dict[str, str]) -> str:
    return "".join(f"{k}={v}\n" for k, v in entries.items())

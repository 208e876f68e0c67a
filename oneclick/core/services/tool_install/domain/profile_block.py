"""
L1 Domain — Named-block merge for shell profiles (pure).

A block is bounded by a start/end marker pair::

    # >>> oneclick go >>>
    export GOROOT="/usr/local/go"
    # <<< oneclick go <<<

Merging removes every prior copy of the block and appends the new one at
end of file, so applying the same block twice leaves exactly one copy.

Blocks written by the older shell installers had only a header comment
followed by a fixed number of lines; ``legacy_windows`` removes those
(header line plus N following lines) so upgrading users do not end up
with two competing setups.
"""

from __future__ import annotations

import logging

from oneclick.core.models.install import ProfileEditBlock

logger = logging.getLogger(__name__)


def render_block(block: ProfileEditBlock) -> list[str]:
    """Block lines including both markers, no trailing newlines."""
    return [block.start_marker, *block.lines, block.end_marker]


def strip_block(lines: list[str], block: ProfileEditBlock) -> list[str]:
    """Remove marker-bounded copies of ``block`` from ``lines``.

    A start marker with no matching end marker before the next start
    marker (or EOF) is an orphan: only the marker line itself is
    dropped, never the user content after it.
    """
    out: list[str] = []
    i = 0
    n = len(lines)
    while i < n:
        line = lines[i]
        if line.strip() != block.start_marker:
            out.append(line)
            i += 1
            continue

        end = None
        for j in range(i + 1, n):
            stripped = lines[j].strip()
            if stripped == block.end_marker:
                end = j
                break
            if stripped == block.start_marker:
                break

        if end is None:
            logger.warning("Orphan block marker %r at line %d", block.start_marker, i + 1)
            i += 1
        else:
            i = end + 1
    return out


def strip_legacy_windows(lines: list[str], windows: dict[str, int]) -> list[str]:
    """Remove ``header`` + N following lines for each legacy header."""
    if not windows:
        return lines
    out: list[str] = []
    i = 0
    while i < len(lines):
        count = windows.get(lines[i].strip())
        if count is None:
            out.append(lines[i])
            i += 1
        else:
            i += 1 + count
    return out


def merge_block(text: str, block: ProfileEditBlock) -> str:
    """Return ``text`` with exactly one (new) copy of ``block`` at the end."""
    lines = text.splitlines()
    lines = strip_block(lines, block)
    lines = strip_legacy_windows(lines, block.legacy_windows)

    while lines and not lines[-1].strip():
        lines.pop()

    if lines:
        lines.append("")
    lines.extend(render_block(block))
    return "\n".join(lines) + "\n"

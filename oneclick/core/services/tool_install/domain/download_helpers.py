"""
L1 Domain — Download helpers (pure).

Size formatting and URL templating.
No I/O, no subprocess.
"""

from __future__ import annotations


def _fmt_size(n: int | float) -> str:
    """Format byte count to human-readable string."""
    for unit in ("B", "KB", "MB", "GB"):
        if n < 1024:
            return f"{n:.1f} {unit}"
        n /= 1024
    return f"{n:.1f} TB"


def render_artifact_url(template: str, **fields: str) -> str:
    """Fill ``{base}``, ``{tool}``, ``{version}``, ``{os}``, ``{arch}``...

    Unknown placeholders raise ``KeyError`` so a typo in an endpoint
    override fails loudly instead of producing a bogus URL.
    """
    return template.format(**fields)


def artifact_filename(url: str) -> str:
    """Last path segment of ``url`` without query string."""
    name = url.split("?", 1)[0].rstrip("/").rsplit("/", 1)[-1]
    return name or "download"

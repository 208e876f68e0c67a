"""
L3 Detection — Region signals.

Read-only collectors for the inputs of the region decision: system
timezone, locale, and a reachability probe of the primary endpoint.
Each collector is a plain function so the resolver can swap it out.
"""

from __future__ import annotations

import logging
import os
import urllib.error
import urllib.request
from pathlib import Path
from typing import Mapping

from oneclick.core.services.tool_install.data.constants import _USER_AGENT

logger = logging.getLogger(__name__)


def read_timezone(
    env: Mapping[str, str] | None = None,
    timezone_file: Path = Path("/etc/timezone"),
    localtime: Path = Path("/etc/localtime"),
) -> str | None:
    """Best-effort system timezone identifier (e.g. ``Asia/Shanghai``).

    Checks ``TZ``, then ``/etc/timezone`` (Debian), then the target of
    the ``/etc/localtime`` symlink (Fedora, macOS).
    """
    env = os.environ if env is None else env
    tz = env.get("TZ", "").lstrip(":").strip()
    if tz:
        return tz

    try:
        text = timezone_file.read_text(encoding="utf-8").strip()
        if text:
            return text.splitlines()[0].strip()
    except OSError:
        pass

    try:
        target = os.readlink(localtime)
    except OSError:
        return None
    marker = "zoneinfo/"
    if marker in target:
        return target.split(marker, 1)[1]
    return None


def read_locale(env: Mapping[str, str] | None = None) -> str | None:
    env = os.environ if env is None else env
    return env.get("LC_ALL") or env.get("LANG") or None


def probe_endpoint(url: str, timeout: float = 3.0) -> bool:
    """HEAD ``url``; any HTTP response means reachable.

    A 4xx/5xx still proves the host answered, so only transport errors
    and timeouts count as unreachable.
    """
    req = urllib.request.Request(
        url,
        method="HEAD",
        headers={"User-Agent": _USER_AGENT},
    )
    try:
        with urllib.request.urlopen(req, timeout=timeout):
            return True
    except urllib.error.HTTPError:
        return True
    except (urllib.error.URLError, OSError, ValueError) as exc:
        logger.debug("Probe of %s failed: %s", url, exc)
        return False

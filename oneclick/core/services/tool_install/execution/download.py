"""
L4 Execution — HTTP fetch and artifact download.

``fetch_text`` reads small pointer documents (latest-version files,
release JSON).  ``download_file`` streams an artifact to disk with a
connect timeout and a total transfer deadline.  Neither retries.
"""

from __future__ import annotations

import http.client
import logging
import time
import urllib.error
import urllib.request
from pathlib import Path

from oneclick.core.services.tool_install.data.constants import _USER_AGENT
from oneclick.core.services.tool_install.domain.download_helpers import _fmt_size
from oneclick.core.services.tool_install.domain.errors import (
    DownloadFailed,
    NetworkFailure,
)

logger = logging.getLogger(__name__)

_CHUNK = 8192


def fetch_text(url: str, *, timeout: float = 10.0) -> str:
    """GET ``url`` and return the decoded body.

    Raises:
        NetworkFailure: transport error, timeout or non-2xx status.
    """
    req = urllib.request.Request(url, headers={"User-Agent": _USER_AGENT})
    try:
        with urllib.request.urlopen(req, timeout=timeout) as resp:
            return resp.read().decode("utf-8", errors="replace")
    except urllib.error.HTTPError as exc:
        raise NetworkFailure(f"GET {url} returned HTTP {exc.code}") from exc
    except (urllib.error.URLError, http.client.HTTPException, OSError, ValueError) as exc:
        raise NetworkFailure(f"GET {url} failed: {exc}") from exc


def download_file(
    url: str,
    dest: Path,
    *,
    connect_timeout: float = 30.0,
    total_timeout: float = 600.0,
) -> int:
    """Stream ``url`` into ``dest``.

    Progress is logged every 10%.  On any failure the partial file is
    removed before raising.

    Returns:
        Number of bytes written.

    Raises:
        DownloadFailed: non-2xx status, timeout, transport error, an
            empty body, or fewer bytes than ``Content-Length`` announced.
    """
    dest.parent.mkdir(parents=True, exist_ok=True)
    req = urllib.request.Request(url, headers={"User-Agent": _USER_AGENT})
    deadline = time.monotonic() + total_timeout
    downloaded = 0
    total = 0

    try:
        with urllib.request.urlopen(req, timeout=connect_timeout) as resp:
            total = int(resp.headers.get("Content-Length") or 0)
            with open(dest, "wb") as f:
                last_progress = -10
                while True:
                    if time.monotonic() > deadline:
                        raise DownloadFailed(
                            f"Download of {url} exceeded {int(total_timeout)}s"
                        )
                    chunk = resp.read(_CHUNK)
                    if not chunk:
                        break
                    f.write(chunk)
                    downloaded += len(chunk)

                    if total > 0:
                        pct = int(downloaded * 100 / total)
                        if pct >= last_progress + 10:
                            last_progress = pct
                            logger.info(
                                "Download progress: %d%% (%s / %s)",
                                pct, _fmt_size(downloaded), _fmt_size(total),
                            )
    except DownloadFailed:
        dest.unlink(missing_ok=True)
        raise
    except urllib.error.HTTPError as exc:
        dest.unlink(missing_ok=True)
        raise DownloadFailed(f"Download of {url} returned HTTP {exc.code}") from exc
    except (urllib.error.URLError, http.client.HTTPException, OSError, ValueError) as exc:
        dest.unlink(missing_ok=True)
        raise DownloadFailed(f"Download of {url} failed: {exc}") from exc

    if downloaded == 0:
        dest.unlink(missing_ok=True)
        raise DownloadFailed(f"Download of {url} returned an empty file")

    if total > 0 and downloaded != total:
        dest.unlink(missing_ok=True)
        raise DownloadFailed(
            f"Download of {url} truncated: got {_fmt_size(downloaded)} "
            f"of {_fmt_size(total)}"
        )

    logger.info("Downloaded %s to %s", _fmt_size(downloaded), dest)
    return downloaded

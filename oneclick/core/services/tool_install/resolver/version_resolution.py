"""
L2 Resolver — Version resolution.

An explicit version is validated and returned as-is.  Otherwise the
"latest" pointer is fetched from the selected region, its prefix tag
stripped, and the result validated.  When the fetch fails a tool may
supply a fallback constant: the failure becomes a warning.  No
filesystem access happens here.
"""

from __future__ import annotations

import logging
from typing import Callable

from oneclick.core.services.tool_install.domain.errors import (
    NetworkFailure,
    VersionFetchFailed,
)
from oneclick.core.services.tool_install.domain.version_format import (
    is_valid_version,
    parse_first_line,
    strip_version_prefix,
    validate_version,
)
from oneclick.core.services.tool_install.execution.download import fetch_text

logger = logging.getLogger(__name__)


class VersionResolver:
    """Resolve the version to install.

    Args:
        version_url: Where the "latest" pointer lives.
        parser: Extracts the version from the response body.
        prefix: Textual tag to strip (``go``, ``v``).
        fallback: Version used, with a warning, when fetching fails.
        timeout: Request timeout in seconds.
        fetch: ``fetch(url, timeout=...) -> str``; injectable.
    """

    def __init__(
        self,
        version_url: str,
        *,
        parser: Callable[[str], str | None] = parse_first_line,
        prefix: str = "",
        fallback: str | None = None,
        timeout: float = 10.0,
        fetch: Callable[..., str] = fetch_text,
    ) -> None:
        self.version_url = version_url
        self.parser = parser
        self.prefix = prefix
        self.fallback = fallback
        self.timeout = timeout
        self._fetch = fetch
        self.warnings: list[str] = []

    def resolve(self, explicit_version: str | None = None) -> str:
        """Return the version to install.

        Raises:
            InvalidVersionFormat: explicit version is malformed.
            VersionFetchFailed: no usable remote version and no fallback.
        """
        if explicit_version:
            return validate_version(explicit_version.strip())

        try:
            return self.fetch_latest()
        except VersionFetchFailed as exc:
            if self.fallback is None:
                raise
            message = (
                f"{exc.message}; using fallback version "
                f"{strip_version_prefix(self.fallback, self.prefix)}"
            )
            logger.warning("%s", message)
            self.warnings.append(message)
            return strip_version_prefix(self.fallback, self.prefix)

    def fetch_latest(self) -> str:
        if not self.version_url:
            raise VersionFetchFailed("No version endpoint configured")

        logger.info("Fetching latest version from %s", self.version_url)
        try:
            body = self._fetch(self.version_url, timeout=self.timeout)
        except NetworkFailure as exc:
            raise VersionFetchFailed(f"Failed to fetch latest version: {exc.message}") from exc

        raw = self.parser(body) if body else None
        if not raw:
            raise VersionFetchFailed(
                f"Failed to fetch latest version: empty response from {self.version_url}"
            )

        version = strip_version_prefix(raw, self.prefix)
        if not is_valid_version(version):
            raise VersionFetchFailed(
                f"Failed to fetch latest version: unexpected value {raw!r}"
            )
        logger.info("Latest version: %s", version)
        return version

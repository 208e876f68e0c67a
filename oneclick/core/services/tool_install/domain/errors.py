"""
L1 Domain — Installer error taxonomy.

Every fatal condition an install run can hit is one of these classes.
Each carries a ``category`` (for reports) and the process ``exit_code``
the CLI uses.  Non-fatal problems are never raised: they travel as
warning strings on ``VerificationResult`` / ``InstallResult``.
"""

from __future__ import annotations


class InstallerError(Exception):
    """Base class for every fatal installer failure."""

    category = "InstallerError"
    exit_code = 1

    def __init__(self, message: str, *, hint: str = "") -> None:
        super().__init__(message)
        self.message = message
        self.hint = hint

    def to_dict(self) -> dict:
        result = {"category": self.category, "error": self.message}
        if self.hint:
            result["hint"] = self.hint
        return result


# ── InvalidInput ───────────────────────────────────────────────


class InvalidInput(InstallerError):
    """Bad user input: reported before any side effect."""

    category = "InvalidInput"
    exit_code = 2


class InvalidVersionFormat(InvalidInput):
    """A version string does not match ``MAJOR.MINOR(.PATCH)?(rcN|betaN)?``."""

    def __init__(self, version: str) -> None:
        super().__init__(
            f"Invalid version format: {version}",
            hint="Expected format: X.Y.Z (e.g., 1.21.5, 1.20.10)",
        )
        self.version = version


# ── EnvironmentUnsupported ─────────────────────────────────────


class EnvironmentUnsupported(InstallerError):
    """Unknown OS/architecture or missing package manager."""

    category = "EnvironmentUnsupported"
    exit_code = 3


# ── NetworkFailure ─────────────────────────────────────────────


class NetworkFailure(InstallerError):
    """A required probe, fetch or download failed."""

    category = "NetworkFailure"
    exit_code = 4


class VersionFetchFailed(NetworkFailure):
    """The remote "latest" pointer was empty or unreachable."""


class DownloadFailed(NetworkFailure):
    """Artifact download failed (non-2xx, timeout or zero bytes)."""


# ── InstallFailure ─────────────────────────────────────────────


class InstallFailed(InstallerError):
    """Extraction, package-manager or upstream installer error."""

    category = "InstallFailure"
    exit_code = 5

"""
Install models — the data that flows through one installer run.

InstallTarget is created at invocation start and receives its resolved
version exactly once.  RegionProfile is selected once and frozen.
ProfileEditBlock describes a replaceable named section of a shell
profile.  VerificationResult is the transient outcome of VERIFY.
"""

from __future__ import annotations

from typing import Literal

from pydantic import BaseModel, ConfigDict, Field

Region = Literal["primary", "mirror"]


class EndpointSet(BaseModel):
    """One family of network endpoints (official or mirror)."""

    model_config = ConfigDict(frozen=True)

    name: str
    probe_url: str
    version_url: str = ""
    download_base: str = ""
    extra: dict[str, str] = Field(default_factory=dict)

    def get(self, key: str, default: str = "") -> str:
        """Look up a tool-specific endpoint from ``extra``."""
        return self.extra.get(key, default)


class RegionProfile(BaseModel):
    """Which endpoint set this run uses, and why."""

    model_config = ConfigDict(frozen=True)

    primary: EndpointSet
    mirror: EndpointSet
    selected: Region
    reason: str = ""

    @property
    def endpoints(self) -> EndpointSet:
        return self.mirror if self.selected == "mirror" else self.primary

    @property
    def is_mirror(self) -> bool:
        return self.selected == "mirror"


class InstallTarget(BaseModel):
    """What is being installed, where, and for which platform."""

    tool: str
    requested_version: str | None = None
    resolved_version: str | None = None
    install_dir: str = ""
    os: str = ""
    arch: str = ""

    def set_resolved_version(self, version: str) -> None:
        """Record the resolved version; a run has at most one."""
        if self.resolved_version is not None and self.resolved_version != version:
            raise RuntimeError(
                f"{self.tool}: version already resolved to "
                f"{self.resolved_version}, refusing {version}"
            )
        self.resolved_version = version

    @property
    def version(self) -> str:
        if self.resolved_version is None:
            raise RuntimeError(f"{self.tool}: version not resolved yet")
        return self.resolved_version


class ProfileEditBlock(BaseModel):
    """A marker-bounded block of export statements."""

    model_config = ConfigDict(frozen=True)

    marker: str
    lines: list[str] = Field(default_factory=list)
    # header comment → number of lines that followed it in old installers
    legacy_windows: dict[str, int] = Field(default_factory=dict)

    @property
    def start_marker(self) -> str:
        return f"# >>> {self.marker} >>>"

    @property
    def end_marker(self) -> str:
        return f"# <<< {self.marker} <<<"


class VerificationResult(BaseModel):
    """Outcome of the VERIFY step."""

    found_on_path: bool = False
    reported_version: str = ""
    smoke_test_passed: bool | None = None   # None = smoke test not run
    warnings: list[str] = Field(default_factory=list)


class Artifact(BaseModel):
    """A file the DOWNLOAD step must fetch."""

    name: str
    url: str
    fallback_url: str | None = None

"""
Shared test fixtures and configuration.
"""

from pathlib import Path

import pytest

from oneclick.core.models.install import RegionProfile
from oneclick.core.models.settings import InstallerSettings
from oneclick.core.services.tool_install.data.endpoints import endpoint_sets
from tests.tool_install.simulated_profiles import PROFILES


@pytest.fixture
def project_root() -> Path:
    """Return the project root directory."""
    return Path(__file__).parent.parent


@pytest.fixture
def fake_home(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    """Point HOME at an empty temp directory."""
    home = tmp_path / "home"
    home.mkdir()
    monkeypatch.setenv("HOME", str(home))
    return home


@pytest.fixture
def settings(fake_home: Path) -> InstallerSettings:
    """Default settings with every path inside the fake home."""
    return InstallerSettings(
        profile_targets=[
            str(fake_home / ".bashrc"),
            str(fake_home / ".zshrc"),
            str(fake_home / ".profile"),
        ],
    )


@pytest.fixture
def linux_platform():
    return PROFILES["ubuntu-desktop"]


@pytest.fixture
def region_for():
    """Factory: ``region_for("go", "mirror")`` → RegionProfile."""

    def _make(tool: str, selected: str = "primary") -> RegionProfile:
        primary, mirror = endpoint_sets(tool)
        return RegionProfile(
            primary=primary, mirror=mirror, selected=selected, reason="override",
        )

    return _make

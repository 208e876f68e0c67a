"""
Tool Install — Platform detection tests.
"""

from __future__ import annotations

from pathlib import Path
from unittest.mock import patch

import pytest

from oneclick.core.services.tool_install.detection.platform import (
    detect_family,
    detect_package_manager,
    detect_platform,
    read_os_release,
)
from oneclick.core.services.tool_install.domain.errors import EnvironmentUnsupported
from oneclick.core.services.tool_install.domain.platform_matrix import (
    normalize_arch,
    normalize_os,
    support_matrix,
)

_MOD = "oneclick.core.services.tool_install.detection.platform"


class TestNormalize:
    @pytest.mark.parametrize("machine,arch", [
        ("x86_64", "amd64"),
        ("aarch64", "arm64"),
        ("arm64", "arm64"),
        ("armv7l", "armv6l"),
        ("armv6l", "armv6l"),
        ("i686", "386"),
    ])
    def test_arch(self, machine: str, arch: str):
        assert normalize_arch(machine) == arch

    def test_unknown_arch(self):
        with pytest.raises(EnvironmentUnsupported) as exc_info:
            normalize_arch("riscv64")
        assert exc_info.value.exit_code == 3

    def test_os(self):
        assert normalize_os("Linux") == "linux"
        assert normalize_os("Darwin") == "darwin"

    def test_windows_unsupported(self):
        with pytest.raises(EnvironmentUnsupported):
            normalize_os("Windows")

    def test_matrix_covers_both_systems(self):
        matrix = support_matrix()
        assert ("linux", "amd64") in matrix
        assert ("darwin", "arm64") in matrix


class TestDetection:
    def test_family_debian(self, tmp_path: Path):
        (tmp_path / "etc").mkdir()
        (tmp_path / "etc" / "debian_version").write_text("12.4\n")
        assert detect_family(tmp_path) == "debian"

    def test_family_redhat(self, tmp_path: Path):
        (tmp_path / "etc").mkdir()
        (tmp_path / "etc" / "redhat-release").write_text("Fedora release 39\n")
        assert detect_family(tmp_path) == "redhat"

    def test_family_other(self, tmp_path: Path):
        assert detect_family(tmp_path) == "other"

    def test_os_release(self, tmp_path: Path):
        path = tmp_path / "os-release"
        path.write_text(
            '# comment\nID=ubuntu\nVERSION_CODENAME=jammy\nPRETTY_NAME="Ubuntu 22.04"\n'
        )
        info = read_os_release(path)
        assert info["ID"] == "ubuntu"
        assert info["VERSION_CODENAME"] == "jammy"
        assert info["PRETTY_NAME"] == "Ubuntu 22.04"

    def test_os_release_missing(self, tmp_path: Path):
        assert read_os_release(tmp_path / "nope") == {}

    def test_package_manager_prefers_dnf(self):
        with patch(f"{_MOD}.shutil.which", side_effect=lambda pm: pm in ("dnf", "yum")):
            assert detect_package_manager() == "dnf"

    def test_package_manager_none(self):
        with patch(f"{_MOD}.shutil.which", return_value=None):
            assert detect_package_manager() is None

    def test_detect_platform_darwin(self):
        with patch(f"{_MOD}.platform.system", return_value="Darwin"), \
             patch(f"{_MOD}.platform.machine", return_value="arm64"), \
             patch(f"{_MOD}.shutil.which", return_value=None):
            info = detect_platform()
        assert (info.os, info.arch, info.family) == ("darwin", "arm64", "other")
        assert info.distro == {}

    def test_detect_platform_unsupported(self):
        with patch(f"{_MOD}.platform.system", return_value="Windows"), \
             patch(f"{_MOD}.platform.machine", return_value="AMD64"):
            with pytest.raises(EnvironmentUnsupported):
                detect_platform()

"""
Node.js installer tests — nvm bootstrap, npm config and profile wiring.
"""

from __future__ import annotations

import json
from pathlib import Path
from unittest.mock import patch

import pytest

from oneclick.adapters.base import InstallContext
from oneclick.adapters.languages.node import NVM_SCRIPT, NodeInstaller
from oneclick.core.models.install import InstallTarget
from oneclick.core.services.tool_install.domain.errors import InstallFailed
from oneclick.core.services.tool_install.domain.version_format import parse_node_lts_index
from oneclick.core.services.tool_install.resolver.version_resolution import VersionResolver

_MOD = "oneclick.adapters.languages.node"

_INDEX = json.dumps([
    {"version": "v21.5.0", "lts": False},
    {"version": "v20.10.0", "lts": "Iron"},
])


@pytest.fixture
def node_ctx(settings, linux_platform, region_for):
    def _make(region: str = "primary", **options) -> InstallContext:
        return InstallContext(
            settings=settings,
            platform=linux_platform,
            region=region_for("node", region),
            options=options,
        )

    return _make


def _target(version: str = "20.10.0") -> InstallTarget:
    target = InstallTarget(tool="node", install_dir="~/.nvm", os="linux", arch="amd64")
    target.set_resolved_version(version)
    return target


def _fake_nvm(nvm_dir: Path, versions: tuple[str, ...] = ()) -> None:
    nvm_dir.mkdir(parents=True, exist_ok=True)
    (nvm_dir / "nvm.sh").write_text("# nvm\n")
    for v in versions:
        (nvm_dir / "versions" / "node" / f"v{v}").mkdir(parents=True)


class _NvmShell:
    """Stands in for ``_run_subprocess``; running the nvm script creates nvm.sh."""

    def __init__(self, fail_on: str | None = None):
        self.commands: list[list[str]] = []
        self.envs: list[dict] = []
        self.fail_on = fail_on

    def __call__(self, cmd, *, env_overrides=None, **kwargs):
        self.commands.append(list(cmd))
        self.envs.append(dict(env_overrides or {}))
        if self.fail_on and self.fail_on in " ".join(cmd):
            return {"ok": False, "error": "Command failed (exit 3)", "stderr": "404"}
        if cmd[:1] == ["bash"] and cmd[1].endswith(NVM_SCRIPT):
            _fake_nvm(Path(env_overrides["NVM_DIR"]))
        return {"ok": True, "stdout": ""}


# ── Version ───────────────────────────────────────────────────

class TestVersion:
    def test_resolver_uses_region_index(self, node_ctx):
        resolver = NodeInstaller().version_resolver(node_ctx("mirror"))
        assert resolver.version_url == "https://npmmirror.com/mirrors/node/index.json"
        assert resolver.fallback == "18.19.0"

    def test_lts_discards_explicit(self, node_ctx):
        resolver = VersionResolver(
            "https://nodejs.org/dist/index.json",
            parser=parse_node_lts_index,
            prefix="v",
            fetch=lambda url, timeout: _INDEX,
        )
        with patch.object(NodeInstaller, "version_resolver", return_value=resolver):
            version = NodeInstaller().resolve_version(node_ctx(lts=True), "18.0.0")
        assert version == "20.10.0"

    def test_installed_version(self, node_ctx, fake_home: Path):
        installer = NodeInstaller()
        assert installer.installed_version(_target(), node_ctx()) is None
        _fake_nvm(fake_home / ".nvm", ("18.19.0", "16.20.2"))
        assert installer.installed_version(_target(), node_ctx()) == "18.19.0"
        _fake_nvm(fake_home / ".nvm", ("20.10.0",))
        assert installer.installed_version(_target(), node_ctx()) == "20.10.0"


# ── Install ───────────────────────────────────────────────────

class TestInstall:
    def test_nvm_script_only_when_missing(self, node_ctx, fake_home: Path):
        installer = NodeInstaller()
        [artifact] = installer.artifacts(_target(), node_ctx())
        assert artifact.name == NVM_SCRIPT
        assert artifact.url == "https://raw.githubusercontent.com/nvm-sh/nvm/v0.39.5/install.sh"

        _fake_nvm(fake_home / ".nvm")
        assert installer.artifacts(_target(), node_ctx()) == []

    def test_mirror_nvm_script(self, node_ctx):
        [artifact] = NodeInstaller().artifacts(_target(), node_ctx("mirror"))
        assert artifact.url.startswith("https://gitee.com/mirrors/nvm/")

    def test_bootstraps_nvm_then_node(self, node_ctx, fake_home: Path, tmp_path: Path):
        shell = _NvmShell()
        ctx = node_ctx("mirror")
        with patch(f"{_MOD}._run_subprocess", shell), \
             patch(f"{_MOD}.which", return_value="/usr/bin/git"):
            env = NodeInstaller().install(_target(), {NVM_SCRIPT: tmp_path / NVM_SCRIPT}, ctx)

        nvm_dir = str(fake_home / ".nvm")
        assert shell.commands[0] == ["bash", str(tmp_path / NVM_SCRIPT)]
        assert shell.envs[0] == {"NVM_DIR": nvm_dir, "PROFILE": "/dev/null"}
        assert "nvm install 20.10.0" in shell.commands[1][2]
        assert shell.envs[1]["NVM_NODEJS_ORG_MIRROR"] == "https://npmmirror.com/mirrors/node/"
        assert "nvm alias default 20.10.0" in shell.commands[2][2]
        assert env["NVM_DIR"] == nvm_dir
        assert env["PATH"].startswith(f"{nvm_dir}/versions/node/v20.10.0/bin:")

    def test_nvm_install_failure_on_mirror_hints_primary(self, node_ctx, fake_home: Path):
        _fake_nvm(fake_home / ".nvm")
        shell = _NvmShell(fail_on="nvm install")
        with patch(f"{_MOD}._run_subprocess", shell), \
             patch(f"{_MOD}.which", return_value="/usr/bin/git"):
            with pytest.raises(InstallFailed) as exc_info:
                NodeInstaller().install(_target(), {}, node_ctx("mirror"))
        assert "--region primary" in exc_info.value.hint

    def test_alias_failure_is_warning(self, node_ctx, fake_home: Path):
        _fake_nvm(fake_home / ".nvm")
        ctx = node_ctx()
        with patch(f"{_MOD}._run_subprocess", _NvmShell(fail_on="alias")), \
             patch(f"{_MOD}.which", return_value="/usr/bin/git"):
            NodeInstaller().install(_target(), {}, ctx)
        assert any("default" in w for w in ctx.warnings)

    def test_missing_git_installed_with_package_manager(self, node_ctx, fake_home: Path):
        _fake_nvm(fake_home / ".nvm")
        shell = _NvmShell()
        with patch(f"{_MOD}._run_subprocess", shell), \
             patch(f"{_MOD}.which", return_value=None):
            NodeInstaller().install(_target(), {}, node_ctx())
        assert shell.commands[:2] == [["apt-get", "update"], ["apt-get", "install", "-y", "git"]]


# ── Configure / profile ───────────────────────────────────────

class TestConfigure:
    def test_npmrc_keeps_existing_keys(self, node_ctx, fake_home: Path):
        npmrc = fake_home / ".npmrc"
        npmrc.write_text("registry=https://corp.example/npm/\n")
        NodeInstaller().configure(_target(), node_ctx("mirror"))

        text = npmrc.read_text()
        assert text.count("registry=") == 1
        assert "registry=https://corp.example/npm/" in text
        assert f"prefix={fake_home / '.npm-global'}" in text
        assert (fake_home / ".npm-global").is_dir()

    def test_registry_only_on_mirror(self, node_ctx, fake_home: Path):
        NodeInstaller().configure(_target(), node_ctx("primary"))
        text = (fake_home / ".npmrc").read_text()
        assert "registry=" not in text
        assert "disturl=" not in text
        assert "electron_mirror=" not in text

    def test_mirror_keys_added_on_mirror(self, node_ctx, fake_home: Path):
        NodeInstaller().configure(_target(), node_ctx("mirror"))
        text = (fake_home / ".npmrc").read_text()
        assert "registry=https://registry.npmmirror.com/" in text
        assert "disturl=https://npmmirror.com/mirrors/node/" in text
        assert "electron_mirror=https://npmmirror.com/mirrors/electron/" in text
        assert "sass_binary_site=https://npmmirror.com/mirrors/node-sass/" in text
        assert "phantomjs_cdnurl=https://npmmirror.com/mirrors/phantomjs/" in text

    def test_existing_mirror_key_kept(self, node_ctx, fake_home: Path):
        npmrc = fake_home / ".npmrc"
        npmrc.write_text("electron_mirror=https://corp.example/electron/\n")
        NodeInstaller().configure(_target(), node_ctx("mirror"))
        text = npmrc.read_text()
        assert text.count("electron_mirror=") == 1
        assert "electron_mirror=https://corp.example/electron/" in text
        assert "disturl=https://npmmirror.com/mirrors/node/" in text

    def test_no_npm_config(self, node_ctx, fake_home: Path):
        NodeInstaller().configure(_target(), node_ctx(no_npm_config=True))
        assert not (fake_home / ".npmrc").exists()

    def test_profile_block_primary(self, node_ctx):
        block = NodeInstaller().profile_block(_target(), node_ctx())
        assert block.marker == "oneclick node"
        assert block.lines[0] == 'export NVM_DIR="$HOME/.nvm"'
        assert 'export PATH="$HOME/.npm-global/bin:$PATH"' in block.lines
        assert not any("MIRROR" in line for line in block.lines)

    def test_profile_block_mirror_exports(self, node_ctx):
        block = NodeInstaller().profile_block(_target(), node_ctx("mirror"))
        assert 'export NVM_NODEJS_ORG_MIRROR="https://npmmirror.com/mirrors/node/"' in block.lines
        assert 'export NVM_IOJS_ORG_MIRROR="https://npmmirror.com/mirrors/iojs/"' in block.lines

    def test_profile_block_without_npm_path(self, node_ctx):
        block = NodeInstaller().profile_block(_target(), node_ctx(no_npm_config=True))
        assert not any(".npm-global" in line for line in block.lines)

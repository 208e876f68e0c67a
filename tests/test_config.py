"""
Tests for the settings loader — YAML file, env overrides, errors.
"""

from pathlib import Path

import pytest

from oneclick.core.config.loader import (
    ConfigError,
    find_config_file,
    load_settings,
)
from oneclick.core.services.tool_install.data.endpoints import endpoint_sets


def _write(tmp_path: Path, text: str) -> Path:
    path = tmp_path / "config.yml"
    path.write_text(text)
    return path


class TestDefaults:
    def test_no_file_gives_defaults(self, fake_home):
        settings = load_settings(env={})
        assert settings.region == "auto"
        assert settings.probe_timeout == 3.0
        assert settings.go.install_dir == "/usr/local"
        assert settings.node.nvm_dir == "~/.nvm"
        assert settings.profile_targets == ["~/.bashrc", "~/.zshrc", "~/.profile"]

    def test_empty_file(self, tmp_path):
        settings = load_settings(_write(tmp_path, ""), env={})
        assert settings.region == "auto"

    def test_per_user_default_found(self, fake_home):
        config = fake_home / ".config" / "oneclick" / "config.yml"
        config.parent.mkdir(parents=True)
        config.write_text("region: mirror\n")
        assert find_config_file(env={}) == config
        assert load_settings(env={}).region == "mirror"


class TestYaml:
    def test_values_loaded(self, tmp_path):
        path = _write(tmp_path, (
            "region: primary\n"
            "go:\n"
            "  install_dir: /opt\n"
            "node:\n"
            "  fallback_version: 20.10.0\n"
            "docker:\n"
            "  daemon_config_path: /tmp/daemon.json\n"
        ))
        settings = load_settings(path, env={})
        assert settings.region == "primary"
        assert settings.go.install_dir == "/opt"
        assert settings.go.gopath == "~/go"
        assert settings.node.fallback_version == "20.10.0"
        assert settings.docker.daemon_config_path == "/tmp/daemon.json"

    def test_endpoint_overrides(self, tmp_path):
        path = _write(tmp_path, (
            "endpoints:\n"
            "  go:\n"
            "    mirror:\n"
            "      name: corp\n"
            "      download_base: https://mirror.corp.example/golang\n"
        ))
        settings = load_settings(path, env={})
        primary, mirror = endpoint_sets("go", settings.endpoints)
        assert mirror.name == "corp"
        assert mirror.download_base == "https://mirror.corp.example/golang"
        assert mirror.get("artifact_template")
        assert primary.name == "official"

    def test_env_config_path(self, tmp_path):
        path = _write(tmp_path, "region: mirror\n")
        assert load_settings(env={"ONECLICK_CONFIG": str(path)}).region == "mirror"


class TestEnvOverrides:
    def test_tool_variables(self, tmp_path):
        path = _write(tmp_path, "go:\n  install_dir: /opt\n")
        settings = load_settings(path, env={
            "GO_INSTALL_DIR": "/srv/go",
            "NVM_DIR": "/srv/nvm",
            "ONECLICK_REGION": "mirror",
        })
        assert settings.go.install_dir == "/srv/go"
        assert settings.node.nvm_dir == "/srv/nvm"
        assert settings.region == "mirror"

    def test_bare_section_with_env(self, tmp_path):
        path = _write(tmp_path, "go:\n  # install_dir: /opt\nnode:\n")
        settings = load_settings(path, env={"GO_INSTALL_DIR": "/srv/go", "NVM_DIR": "/srv/nvm"})
        assert settings.go.install_dir == "/srv/go"
        assert settings.go.gopath == "~/go"
        assert settings.node.nvm_dir == "/srv/nvm"

    def test_bare_section_gives_defaults(self, tmp_path):
        settings = load_settings(_write(tmp_path, "docker:\n"), env={})
        assert settings.docker.daemon_config_path == "/etc/docker/daemon.json"

    def test_scalar_section_with_env(self, tmp_path):
        path = _write(tmp_path, "go: /opt\n")
        with pytest.raises(ConfigError, match="mapping for 'go'"):
            load_settings(path, env={"GO_INSTALL_DIR": "/srv/go"})


class TestErrors:
    def test_missing_explicit_file(self, tmp_path):
        with pytest.raises(ConfigError, match="not found"):
            load_settings(tmp_path / "nope.yml", env={})

    def test_invalid_yaml(self, tmp_path):
        with pytest.raises(ConfigError, match="Invalid YAML") as exc_info:
            load_settings(_write(tmp_path, "go: [unclosed\n"), env={})
        assert exc_info.value.exit_code == 2

    def test_not_a_mapping(self, tmp_path):
        with pytest.raises(ConfigError, match="mapping"):
            load_settings(_write(tmp_path, "- a\n- b\n"), env={})

    def test_schema_violation(self, tmp_path):
        with pytest.raises(ConfigError, match="Invalid configuration"):
            load_settings(_write(tmp_path, "region: moon\n"), env={})

    def test_bad_env_region(self, fake_home):
        with pytest.raises(ConfigError):
            load_settings(env={"ONECLICK_REGION": "moon"})

    def test_non_utf8_file(self, tmp_path):
        path = tmp_path / "config.yml"
        path.write_bytes(b"region: caf\xe9\n")
        with pytest.raises(ConfigError, match="Cannot read"):
            load_settings(path, env={})

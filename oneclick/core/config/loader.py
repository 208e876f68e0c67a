"""
Configuration loader — reads the optional settings YAML.

Reads YAML, validates against the Pydantic settings schema, then
applies environment overrides.  Every key has a default, so running
without any config file is the normal case.
"""

from __future__ import annotations

import logging
import os
from pathlib import Path
from typing import Mapping

import yaml
from pydantic import ValidationError

from oneclick.core.models.settings import InstallerSettings
from oneclick.core.services.tool_install.domain.errors import InvalidInput

logger = logging.getLogger(__name__)

ENV_CONFIG = "ONECLICK_CONFIG"
DEFAULT_CONFIG_FILE = Path("~/.config/oneclick/config.yml")

_SECTIONS = ("go", "node", "docker", "endpoints")


class ConfigError(InvalidInput):
    """Raised when the settings file is unreadable or invalid."""


def find_config_file(
    explicit: Path | None = None,
    env: Mapping[str, str] | None = None,
) -> Path | None:
    """Locate the settings file.

    Order: explicit path, ``ONECLICK_CONFIG``, the per-user default.
    An explicit or env path is returned even if missing, so the
    loader can report it; the per-user default only when present.
    """
    env = os.environ if env is None else env
    if explicit is not None:
        return explicit
    if env.get(ENV_CONFIG):
        return Path(os.path.expanduser(env[ENV_CONFIG]))
    default = Path(os.path.expanduser(str(DEFAULT_CONFIG_FILE)))
    if default.is_file():
        return default
    return None


def load_settings(
    path: Path | None = None,
    env: Mapping[str, str] | None = None,
) -> InstallerSettings:
    """Load settings and apply environment overrides.

    Args:
        path: Explicit settings file (``--config``).
        env: Environment mapping (defaults to ``os.environ``).

    Raises:
        ConfigError: If the file is missing, unreadable or invalid.
    """
    env = os.environ if env is None else env
    path = find_config_file(path, env)

    data: dict = {}
    if path is not None:
        data = _read_yaml(path)

    _apply_env_overrides(data, env)

    try:
        settings = InstallerSettings.model_validate(data)
    except ValidationError as e:
        source = path or "environment"
        raise ConfigError(f"Invalid configuration in {source}: {e}") from e

    logger.debug("Settings loaded (region=%s)", settings.region)
    return settings


def _read_yaml(path: Path) -> dict:
    if not path.is_file():
        raise ConfigError(f"Config file not found: {path}")

    logger.debug("Loading settings from %s", path)
    try:
        raw = path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as e:
        raise ConfigError(f"Cannot read {path}: {e}") from e

    try:
        data = yaml.safe_load(raw)
    except yaml.YAMLError as e:
        raise ConfigError(f"Invalid YAML in {path}: {e}") from e

    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ConfigError(f"Expected a YAML mapping in {path}, got {type(data).__name__}")

    # A bare ``go:`` (children commented out) means defaults.
    for key in _SECTIONS:
        if key in data and data[key] is None:
            del data[key]
    return data


def _section(data: dict, key: str) -> dict:
    section = data.get(key)
    if section is None:
        section = data[key] = {}
    if not isinstance(section, dict):
        raise ConfigError(
            f"Expected a mapping for '{key}', got {type(section).__name__}"
        )
    return section


def _apply_env_overrides(data: dict, env: Mapping[str, str]) -> None:
    """Layer the per-tool environment variables over file values."""
    if env.get("GO_INSTALL_DIR"):
        _section(data, "go")["install_dir"] = env["GO_INSTALL_DIR"]
    if env.get("NVM_DIR"):
        _section(data, "node")["nvm_dir"] = env["NVM_DIR"]
    if env.get("ONECLICK_REGION"):
        data["region"] = env["ONECLICK_REGION"]

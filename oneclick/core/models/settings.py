"""
Installer settings — loaded from an optional YAML file.

Every field has a default, so an empty or missing config file yields a
fully usable ``InstallerSettings``.
"""

from __future__ import annotations

from typing import Literal

from pydantic import BaseModel, Field


class GoSettings(BaseModel):
    install_dir: str = "/usr/local"
    gopath: str = "~/go"


class NodeSettings(BaseModel):
    nvm_dir: str = "~/.nvm"
    nvm_version: str = "v0.39.5"
    fallback_version: str = "18.19.0"
    npm_global_dir: str = "~/.npm-global"


class DockerSettings(BaseModel):
    compose_fallback_version: str = "v2.24.5"
    daemon_config_path: str = "/etc/docker/daemon.json"
    compose_install_path: str = "/usr/local/bin/docker-compose"


class InstallerSettings(BaseModel):
    """Root settings object shared by every installer."""

    region: Literal["auto", "primary", "mirror"] = "auto"

    # seconds
    probe_timeout: float = 3.0
    version_timeout: float = 10.0
    connect_timeout: float = 30.0
    transfer_timeout: float = 600.0

    backup_profiles: bool = False
    profile_targets: list[str] = Field(
        default_factory=lambda: ["~/.bashrc", "~/.zshrc", "~/.profile"]
    )

    go: GoSettings = Field(default_factory=GoSettings)
    node: NodeSettings = Field(default_factory=NodeSettings)
    docker: DockerSettings = Field(default_factory=DockerSettings)

    # tool → "primary"/"mirror" → partial EndpointSet fields
    endpoints: dict[str, dict[str, dict]] = Field(default_factory=dict)

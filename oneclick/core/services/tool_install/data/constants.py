"""
L0 Data — Constants shared by the installers.
"""

from __future__ import annotations

_USER_AGENT = "oneclick/0.1"

# Package channel used as the "version" of a repo-managed Docker engine.
DOCKER_CHANNEL = "stable"

DOCKER_PACKAGES: tuple[str, ...] = (
    "docker-ce",
    "docker-ce-cli",
    "containerd.io",
    "docker-buildx-plugin",
    "docker-compose-plugin",
)

# Distro packages that conflict with docker-ce.
DOCKER_CONFLICTS_APT: tuple[str, ...] = (
    "docker", "docker-engine", "docker.io", "containerd", "runc",
)
DOCKER_CONFLICTS_RPM: tuple[str, ...] = (
    "docker", "docker-client", "docker-client-latest", "docker-common",
    "docker-latest", "docker-latest-logrotate", "docker-logrotate",
    "docker-engine",
)

# Prerequisites installed before the Docker repository is added.
DOCKER_PREREQS: dict[str, tuple[str, ...]] = {
    "apt-get": ("apt-transport-https", "ca-certificates", "curl", "gnupg", "lsb-release"),
    "yum": ("yum-utils", "device-mapper-persistent-data", "lvm2"),
    "dnf": ("dnf-plugins-core",),
}

DOCKER_DAEMON_DEFAULTS: dict = {
    "log-driver": "json-file",
    "log-opts": {
        "max-size": "10m",
        "max-file": "3",
    },
    "storage-driver": "overlay2",
    "live-restore": True,
}

DOCKER_KEYRING = "/usr/share/keyrings/docker-archive-keyring.gpg"
DOCKER_APT_SOURCE = "/etc/apt/sources.list.d/docker.list"

GO_HELLO_PROGRAM = """package main

import "fmt"

func main() {
    fmt.Println("Hello, Go!")
}
"""

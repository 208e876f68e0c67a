"""
L0 Data — Official and mirror endpoint tables per tool.

Mirrors are NOT guaranteed to carry the same artifacts as upstream:
they can lag behind a fresh release.  Callers treat the two sets as
potentially different and surface that when a mirror download fails.
"""

from __future__ import annotations

from oneclick.core.models.install import EndpointSet

_ENDPOINTS: dict[str, dict[str, dict]] = {
    "go": {
        "primary": {
            "name": "official",
            "probe_url": "https://golang.org",
            "version_url": "https://golang.org/VERSION?m=text",
            "download_base": "https://golang.org/dl",
            "extra": {
                "artifact_template": "{base}/go{version}.{os}-{arch}.tar.gz",
            },
        },
        "mirror": {
            "name": "aliyun",
            "probe_url": "https://mirrors.aliyun.com/golang",
            "version_url": "https://mirrors.aliyun.com/golang/VERSION?m=text",
            "download_base": "https://mirrors.aliyun.com/golang",
            "extra": {
                "artifact_template": "{base}/go{version}.{os}-{arch}.tar.gz",
            },
        },
    },
    "docker": {
        "primary": {
            "name": "official",
            "probe_url": "https://download.docker.com",
            "download_base": "https://download.docker.com",
            "extra": {
                "install_script": "https://get.docker.com",
                "compose_version_url": "https://api.github.com/repos/docker/compose/releases/latest",
                "compose_download": "https://github.com/docker/compose/releases/download",
            },
        },
        "mirror": {
            "name": "aliyun",
            "probe_url": "https://mirrors.aliyun.com/docker-ce",
            "download_base": "https://mirrors.aliyun.com/docker-ce",
            "extra": {
                "install_script": "https://mirrors.aliyun.com/docker-ce/linux/docker-install.sh",
                "install_script_fallback": "https://get.docker.com",
                "compose_version_url": "https://api.github.com/repos/docker/compose/releases/latest",
                "compose_download": "https://github.com/docker/compose/releases/download",
            },
        },
    },
    "node": {
        "primary": {
            "name": "official",
            "probe_url": "https://nodejs.org",
            "version_url": "https://nodejs.org/dist/index.json",
            "download_base": "https://nodejs.org/dist/",
            "extra": {
                "nvm_install_script": "https://raw.githubusercontent.com/nvm-sh/nvm/{nvm_version}/install.sh",
            },
        },
        "mirror": {
            "name": "npmmirror",
            "probe_url": "https://npmmirror.com",
            "version_url": "https://npmmirror.com/mirrors/node/index.json",
            "download_base": "https://npmmirror.com/mirrors/node/",
            "extra": {
                "nvm_install_script": "https://gitee.com/mirrors/nvm/raw/{nvm_version}/install.sh",
                "iojs_mirror": "https://npmmirror.com/mirrors/iojs/",
                "npm_registry": "https://registry.npmmirror.com/",
                "npm_disturl": "https://npmmirror.com/mirrors/node/",
                "npm_electron_mirror": "https://npmmirror.com/mirrors/electron/",
                "npm_sass_binary_site": "https://npmmirror.com/mirrors/node-sass/",
                "npm_phantomjs_cdnurl": "https://npmmirror.com/mirrors/phantomjs/",
            },
        },
    },
}


def known_tools() -> list[str]:
    return sorted(_ENDPOINTS)


def endpoint_sets(
    tool: str,
    overrides: dict[str, dict[str, dict]] | None = None,
) -> tuple[EndpointSet, EndpointSet]:
    """Return ``(primary, mirror)`` for ``tool``.

    Args:
        tool: Tool key (``go``, ``docker``, ``node``).
        overrides: ``settings.endpoints`` — per tool, per region, a
            partial mapping merged field by field over the defaults
            (``extra`` is merged key by key).
    """
    if tool not in _ENDPOINTS:
        raise KeyError(f"No endpoint table for tool: {tool}")

    tool_overrides = (overrides or {}).get(tool, {})
    result = []
    for region in ("primary", "mirror"):
        base = dict(_ENDPOINTS[tool][region])
        patch = dict(tool_overrides.get(region, {}))
        extra = {**base.get("extra", {}), **patch.pop("extra", {})}
        base.update(patch)
        base["extra"] = extra
        result.append(EndpointSet.model_validate(base))
    return result[0], result[1]

"""
L1 Domain — ``__init__.py`` re-exports all pure domain functions.

These functions have NO subprocess calls, NO filesystem access,
NO network calls. Pure input→output.
"""

from oneclick.core.services.tool_install.domain.download_helpers import (  # noqa: F401
    _fmt_size,
    artifact_filename,
    render_artifact_url,
)
from oneclick.core.services.tool_install.domain.errors import (  # noqa: F401
    DownloadFailed,
    EnvironmentUnsupported,
    InstallerError,
    InstallFailed,
    InvalidInput,
    InvalidVersionFormat,
    NetworkFailure,
    VersionFetchFailed,
)
from oneclick.core.services.tool_install.domain.npmrc import (  # noqa: F401
    missing_npmrc_entries,
)
from oneclick.core.services.tool_install.domain.platform_matrix import (  # noqa: F401
    normalize_arch,
    normalize_os,
)
from oneclick.core.services.tool_install.domain.profile_block import (  # noqa: F401
    merge_block,
    render_block,
)
from oneclick.core.services.tool_install.domain.region_decision import (  # noqa: F401
    MIRROR,
    PRIMARY,
    RegionSignals,
    decide_region,
)
from oneclick.core.services.tool_install.domain.version_format import (  # noqa: F401
    validate_version,
)

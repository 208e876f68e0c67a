"""
Tool installation service — package re-exports.

Each symbol lives in its single-responsibility module inside the
appropriate onion layer (data → domain → resolver → detection →
execution → orchestration).  Orchestration drives the installers in
``oneclick.adapters`` and is imported from its own package::

    from oneclick.core.services.tool_install.orchestration import InstallOrchestrator
"""

# ── L0: Data ──
from oneclick.core.services.tool_install.data.endpoints import (  # noqa: F401
    endpoint_sets,
    known_tools,
)

# ── L1: Domain ──
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

# ── L2: Resolver ──
from oneclick.core.services.tool_install.resolver.region_resolution import (  # noqa: F401
    RegionResolver,
)
from oneclick.core.services.tool_install.resolver.version_resolution import (  # noqa: F401
    VersionResolver,
)

# ── L3: Detection ──
from oneclick.core.services.tool_install.detection.platform import (  # noqa: F401
    PlatformInfo,
    detect_platform,
)
from oneclick.core.services.tool_install.detection.tool_version import (  # noqa: F401
    check_installed,
    get_tool_version,
)

# ── L4: Execution ──
from oneclick.core.services.tool_install.execution.profile_writer import (  # noqa: F401
    ProfileEnvironmentWriter,
)

"""
L3 Detection — ``__init__.py`` re-exports all read-only probes.

Every function here inspects the host and never modifies it.
"""

from oneclick.core.services.tool_install.detection.platform import (  # noqa: F401
    PlatformInfo,
    detect_platform,
)
from oneclick.core.services.tool_install.detection.region_signals import (  # noqa: F401
    probe_endpoint,
    read_locale,
    read_timezone,
)
from oneclick.core.services.tool_install.detection.tool_version import (  # noqa: F401
    check_installed,
    detect_nvm,
    get_tool_version,
)

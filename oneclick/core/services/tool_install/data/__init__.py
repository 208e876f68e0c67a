"""
L0 Data — ``__init__.py`` re-exports all data constants.
"""

from oneclick.core.services.tool_install.data.constants import (  # noqa: F401
    DOCKER_CHANNEL,
    DOCKER_DAEMON_DEFAULTS,
    DOCKER_PACKAGES,
)
from oneclick.core.services.tool_install.data.endpoints import (  # noqa: F401
    endpoint_sets,
    known_tools,
)
from oneclick.core.services.tool_install.data.profile_maps import (  # noqa: F401
    DEFAULT_PROFILE_TARGETS,
)

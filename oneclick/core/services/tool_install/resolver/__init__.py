"""
L2 Resolver — ``__init__.py`` re-exports the resolvers.

Resolvers turn CLI input and host signals into decisions: which
endpoint set to use and which version to install.
"""

from oneclick.core.services.tool_install.resolver.region_resolution import (  # noqa: F401
    RegionResolver,
)
from oneclick.core.services.tool_install.resolver.version_resolution import (  # noqa: F401
    VersionResolver,
)

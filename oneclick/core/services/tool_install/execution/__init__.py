"""
L4 Execution — ``__init__.py`` re-exports everything that acts on
the host: subprocesses, network transfers, files and profiles.
"""

from oneclick.core.services.tool_install.execution.config import (  # noqa: F401
    merge_npmrc,
    write_config_if_absent,
    write_json_config_if_absent,
)
from oneclick.core.services.tool_install.execution.download import (  # noqa: F401
    download_file,
    fetch_text,
)
from oneclick.core.services.tool_install.execution.filesystem import (  # noqa: F401
    extract_tarball,
    remove_tree,
)
from oneclick.core.services.tool_install.execution.profile_writer import (  # noqa: F401
    ProfileEnvironmentWriter,
)
from oneclick.core.services.tool_install.execution.subprocess_runner import (  # noqa: F401
    _run_subprocess,
)

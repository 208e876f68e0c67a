"""
L5 Orchestration — ``__init__.py`` re-exports the install state machine.

This is the entry point that the use cases call.
"""

from oneclick.core.services.tool_install.orchestration.orchestrator import (  # noqa: F401
    InstallOrchestrator,
    InstallResult,
    InstallState,
)

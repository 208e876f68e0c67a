"""
Core data models for oneclick.

All models are Pydantic BaseModels for validation and serialization.
"""

from oneclick.core.models.install import (
    Artifact,
    EndpointSet,
    InstallTarget,
    ProfileEditBlock,
    RegionProfile,
    VerificationResult,
)
from oneclick.core.models.settings import (
    DockerSettings,
    GoSettings,
    InstallerSettings,
    NodeSettings,
)

__all__ = [
    "Artifact",
    "DockerSettings",
    "EndpointSet",
    "GoSettings",
    "InstallTarget",
    "InstallerSettings",
    "NodeSettings",
    "ProfileEditBlock",
    "RegionProfile",
    "VerificationResult",
]

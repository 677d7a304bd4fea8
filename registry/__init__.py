"""Build the ``wcms-modules.json`` registry from lists of plugin and theme repositories."""

from __future__ import annotations

from registry.errors import (
    BranchResolutionError,
    ManifestFormatError,
    ManifestVersionError,
    NetworkError,
    RegistryBuildError,
    UnsupportedRepositoryError,
)
from registry.models import (
    LegacyMetadata,
    ManifestMetadata,
    ModuleCollection,
    ModuleMetadata,
    ModuleRegistry,
    ResolvedRepo,
)

__all__ = [
    "BranchResolutionError",
    "LegacyMetadata",
    "ManifestFormatError",
    "ManifestMetadata",
    "ManifestVersionError",
    "ModuleCollection",
    "ModuleMetadata",
    "ModuleRegistry",
    "NetworkError",
    "RegistryBuildError",
    "ResolvedRepo",
    "UnsupportedRepositoryError",
]

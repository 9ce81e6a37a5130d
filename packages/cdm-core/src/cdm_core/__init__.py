"""cdm-core: Manifest schemas and build-time dependency resolution for cdm.

This package provides:
- Manifest: Pydantic schema for cdm.json
- DependencyResolver: package name → installed artifact → generated binding
- ContractReference: Runtime side of generated bindings
- Exception hierarchy shared by all cdm packages
- JSON Schema export for cdm.json
"""

from __future__ import annotations

__version__ = "0.1.0"

from cdm_core.bindings import AddressLookup, ContractMethod, ContractReference

# Error types
from cdm_core.errors import (
    AmbiguousTargetError,
    ArtifactMissingError,
    CdmError,
    InterfaceMalformedError,
    LatestPointerMalformedError,
    LatestPointerMissingError,
    ManifestMalformedError,
    ManifestNotFoundError,
    PackageNotFoundError,
    RegistryError,
    ResolutionError,
)
from cdm_core.export import export_manifest_schema

# Resolution pipeline
from cdm_core.resolver import (
    ArtifactLocator,
    BindingEmitter,
    ContractBinding,
    ContractCache,
    DependencyResolver,
    ResolvedReference,
    VersionResolver,
    derive_module_name,
    find_manifest,
)

# Schema models
from cdm_core.schemas import (
    LatestVersion,
    Manifest,
    PinnedVersion,
    TargetConfig,
    VersionSpec,
    compute_target_hash,
)

__all__ = [
    "__version__",
    # Resolution
    "DependencyResolver",
    "ResolvedReference",
    "find_manifest",
    "VersionResolver",
    "ArtifactLocator",
    "BindingEmitter",
    "ContractBinding",
    "ContractCache",
    "derive_module_name",
    # Bindings
    "ContractReference",
    "ContractMethod",
    "AddressLookup",
    # Errors
    "CdmError",
    "ResolutionError",
    "ManifestNotFoundError",
    "ManifestMalformedError",
    "PackageNotFoundError",
    "AmbiguousTargetError",
    "LatestPointerMissingError",
    "LatestPointerMalformedError",
    "ArtifactMissingError",
    "InterfaceMalformedError",
    "RegistryError",
    # Schema export
    "export_manifest_schema",
    # Schema models
    "Manifest",
    "TargetConfig",
    "VersionSpec",
    "PinnedVersion",
    "LatestVersion",
    "compute_target_hash",
]

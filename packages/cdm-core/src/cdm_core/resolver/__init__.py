"""Resolver module for cdm.

This module exports the build-time resolution pipeline:
- DependencyResolver: Runs the whole pipeline for one package
- find_manifest: Locate the nearest cdm.json
- VersionResolver: Resolve pinned and "latest" specifiers
- ArtifactLocator: Locate abi.json (and info.json) in the cache
- BindingEmitter: Generate bindings from resolved references
- ContractCache: Cache layout and root configuration
- ResolvedReference: Pipeline output model
"""

from __future__ import annotations

from cdm_core.resolver.artifact_locator import ArtifactLocator
from cdm_core.resolver.binding_emitter import (
    BindingEmitter,
    ContractBinding,
    derive_module_name,
)
from cdm_core.resolver.cache import (
    ABI_FILE_NAME,
    CDM_ROOT_ENV_VAR,
    DEFAULT_CDM_DIR_NAME,
    INFO_FILE_NAME,
    LATEST_POINTER_NAME,
    ContractCache,
    get_cdm_root,
)
from cdm_core.resolver.manifest_locator import MANIFEST_FILE_NAMES, find_manifest
from cdm_core.resolver.models import ResolvedReference
from cdm_core.resolver.resolver import DependencyResolver
from cdm_core.resolver.version_resolver import ResolvedVersion, VersionResolver

__all__: list[str] = [
    # Pipeline
    "DependencyResolver",
    "ResolvedReference",
    # Manifest discovery
    "find_manifest",
    "MANIFEST_FILE_NAMES",
    # Version resolution
    "VersionResolver",
    "ResolvedVersion",
    # Artifacts
    "ArtifactLocator",
    # Bindings
    "BindingEmitter",
    "ContractBinding",
    "derive_module_name",
    # Cache layout
    "ContractCache",
    "get_cdm_root",
    "CDM_ROOT_ENV_VAR",
    "DEFAULT_CDM_DIR_NAME",
    "LATEST_POINTER_NAME",
    "ABI_FILE_NAME",
    "INFO_FILE_NAME",
]

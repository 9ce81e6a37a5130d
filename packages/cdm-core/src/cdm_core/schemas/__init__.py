"""Schema models for cdm.

- Manifest: cdm.json (targets and per-target dependencies)
- TargetConfig: deployment endpoints of one target
- VersionSpec: pinned integer or "latest" marker
- AbiEntry / AbiParam: interface description entries (abi.json)
- ContractInfo: install record (info.json)
"""

from __future__ import annotations

from cdm_core.schemas.artifact import ABI_DOCUMENT, AbiEntry, AbiParam, ContractInfo
from cdm_core.schemas.manifest import (
    MANIFEST_FILE_NAME,
    U64_MAX,
    LatestVersion,
    Manifest,
    PinnedVersion,
    TargetConfig,
    VersionSpec,
    compute_target_hash,
)

__all__: list[str] = [
    # Manifest
    "Manifest",
    "TargetConfig",
    "VersionSpec",
    "PinnedVersion",
    "LatestVersion",
    "compute_target_hash",
    "MANIFEST_FILE_NAME",
    "U64_MAX",
    # Cached artifacts
    "ABI_DOCUMENT",
    "AbiEntry",
    "AbiParam",
    "ContractInfo",
]

"""Resolver output models for cdm.

ResolvedReference is created per resolution and never persisted.
"""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path


@dataclass(frozen=True)
class ResolvedReference:
    """A package reference resolved to one installed artifact.

    Attributes:
        target_id: Target the package is installed under.
        package_name: Package name as written in the manifest.
        version: Concrete version number.
        artifact_path: Path to the version's abi.json.
    """

    target_id: str
    package_name: str
    version: int
    artifact_path: Path

    def to_dict(self) -> dict[str, str | int]:
        return {
            "target_id": self.target_id,
            "package_name": self.package_name,
            "version": self.version,
            "artifact_path": str(self.artifact_path),
        }

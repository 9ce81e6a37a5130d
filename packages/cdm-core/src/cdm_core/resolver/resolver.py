"""Dependency resolver for cdm.

Runs the build-time resolution pipeline for one reference site:

    package name → find_manifest() → Manifest.from_file()
                 → VersionResolver.resolve() → ArtifactLocator.locate()
                 → BindingEmitter.emit()

Every stage only reads from the filesystem and the resolver keeps no state
between calls, so independent reference sites may resolve concurrently as
long as the cache is not being written at the same time.
"""

from __future__ import annotations

import logging
from pathlib import Path

from cdm_core.errors import ManifestNotFoundError
from cdm_core.resolver.artifact_locator import ArtifactLocator
from cdm_core.resolver.binding_emitter import BindingEmitter, ContractBinding
from cdm_core.resolver.cache import ContractCache
from cdm_core.resolver.manifest_locator import find_manifest
from cdm_core.resolver.models import ResolvedReference
from cdm_core.resolver.version_resolver import VersionResolver
from cdm_core.schemas.artifact import ContractInfo
from cdm_core.schemas.manifest import Manifest

logger = logging.getLogger(__name__)


class DependencyResolver:
    """Resolve package references to installed artifacts and bindings.

    Attributes:
        cache: Layout of the local contract cache.

    Example:
        >>> resolver = DependencyResolver()
        >>> reference = resolver.resolve("token", start_dir=Path("contracts/app"))
        >>> reference.artifact_path
        PosixPath('/home/dev/.cdm/ab12cd34ef56ab78/contracts/token/3/abi.json')

        >>> # Resolve against a different cache
        >>> resolver = DependencyResolver(cache_root=Path("/tmp/cdm-cache"))
        >>> binding = resolver.bind("token")
    """

    def __init__(self, cache_root: Path | str | None = None) -> None:
        """Initialize the DependencyResolver.

        Args:
            cache_root: Cache root override. If None, reads CDM_ROOT or
                defaults to ~/.cdm.
        """
        self.cache = ContractCache(Path(cache_root)) if cache_root else ContractCache.default()
        self._versions = VersionResolver(self.cache)
        self._artifacts = ArtifactLocator(self.cache)
        self._emitter = BindingEmitter()

    def load_manifest(
        self,
        start_dir: Path | str = ".",
        manifest_path: Path | str | None = None,
    ) -> tuple[Path, Manifest]:
        """Locate and parse the manifest governing a directory.

        Args:
            start_dir: Directory to search upward from.
            manifest_path: Explicit manifest; skips discovery.

        Returns:
            The manifest path and the parsed Manifest.

        Raises:
            ManifestNotFoundError: If discovery reaches the root or the
                explicit manifest does not exist.
            ManifestMalformedError: If the manifest is invalid.
        """
        if manifest_path is None:
            path = find_manifest(start_dir)
        else:
            path = Path(manifest_path)
            if not path.exists():
                raise ManifestNotFoundError(path)
        return path, Manifest.from_file(path)

    def resolve(
        self,
        package_name: str,
        start_dir: Path | str = ".",
        manifest_path: Path | str | None = None,
    ) -> ResolvedReference:
        """Resolve a package to its installed interface description.

        Args:
            package_name: Package to resolve.
            start_dir: Directory of the reference site.
            manifest_path: Explicit manifest; skips discovery.

        Returns:
            ResolvedReference for the package.

        Raises:
            ResolutionError: Any pipeline failure (see cdm_core.errors).
        """
        path, manifest = self.load_manifest(start_dir, manifest_path)
        resolved = self._versions.resolve(manifest, package_name)
        artifact_path = self._artifacts.locate(
            resolved.target_id,
            resolved.package_name,
            resolved.version,
        )

        logger.info(
            "Resolved %s to version %s of target %s (manifest %s)",
            package_name,
            resolved.version,
            resolved.target_id,
            path,
        )
        return ResolvedReference(
            target_id=resolved.target_id,
            package_name=resolved.package_name,
            version=resolved.version,
            artifact_path=artifact_path,
        )

    def bind(
        self,
        package_name: str,
        start_dir: Path | str = ".",
        manifest_path: Path | str | None = None,
    ) -> ContractBinding:
        """Resolve a package and emit its binding.

        Args:
            package_name: Package to bind.
            start_dir: Directory of the reference site.
            manifest_path: Explicit manifest; skips discovery.

        Returns:
            ContractBinding ready to render or write.

        Raises:
            ResolutionError: Any pipeline failure (see cdm_core.errors).
        """
        reference = self.resolve(package_name, start_dir, manifest_path)
        return self._emitter.emit(reference)

    def write_binding(self, binding: ContractBinding, output_dir: Path | str) -> Path:
        """Write a binding module into a directory."""
        return self._emitter.write(binding, output_dir)

    def read_info(self, reference: ResolvedReference) -> ContractInfo | None:
        """Load the install record of a resolved reference, if it has one.

        Raises:
            InterfaceMalformedError: If info.json exists but is invalid.
        """
        return self._artifacts.read_info(
            reference.target_id,
            reference.package_name,
            reference.version,
        )

"""Version resolution for cdm dependencies.

This module turns a package name plus the manifest into a concrete
(target id, version) pair:
- VersionResolver: Find the package across targets and resolve its specifier
- ResolvedVersion: Result of a successful resolution
- read_pointer_name: Read the name a "latest" pointer record references

Resolution is a pure function of the manifest plus, for "latest"
dependencies, one read of one pointer record. Nothing is cached between
calls, so a reinstall is picked up by the next resolution.
"""

from __future__ import annotations

import logging
import os
import re
from dataclasses import dataclass
from pathlib import Path, PurePath

from cdm_core.errors import (
    AmbiguousTargetError,
    LatestPointerMalformedError,
    LatestPointerMissingError,
    PackageNotFoundError,
)
from cdm_core.resolver.cache import ContractCache
from cdm_core.schemas.manifest import U64_MAX, LatestVersion, Manifest, PinnedVersion

logger = logging.getLogger(__name__)

# Decimal digits only: no sign, no whitespace, no underscores
_VERSION_NAME_PATTERN = re.compile(r"[0-9]+")


@dataclass(frozen=True)
class ResolvedVersion:
    """A package pinned to one target and one concrete version."""

    target_id: str
    package_name: str
    version: int


def read_pointer_name(pointer: Path) -> str | None:
    """Read the name a pointer record references.

    A symlink references the final segment of its link target; a regular
    file references its stripped text content.

    Args:
        pointer: Path of the pointer record.

    Returns:
        The referenced name, or None if there is no pointer record.
    """
    if pointer.is_symlink():
        return PurePath(os.readlink(pointer)).name
    if pointer.is_file():
        return pointer.read_text(encoding="utf-8").strip()
    return None


def parse_version_name(name: str) -> int | None:
    """Parse a referenced name as an unsigned 64-bit version.

    Returns:
        The version, or None if the name is not a decimal u64.
    """
    if not _VERSION_NAME_PATTERN.fullmatch(name):
        return None
    version = int(name)
    if version > U64_MAX:
        return None
    return version


class VersionResolver:
    """Resolves a package's version specifier against the cache.

    Attributes:
        cache: Layout of the local contract cache.

    Example:
        >>> resolver = VersionResolver(ContractCache.default())
        >>> resolved = resolver.resolve(manifest, "token")
        >>> resolved.version
        3
    """

    def __init__(self, cache: ContractCache) -> None:
        """Initialize the VersionResolver.

        Args:
            cache: Cache layout used to locate "latest" pointers.
        """
        self.cache = cache

    def find_target(
        self,
        manifest: Manifest,
        package_name: str,
    ) -> tuple[str, PinnedVersion | LatestVersion]:
        """Find the single target that depends on a package.

        Args:
            manifest: Parsed manifest.
            package_name: Package to look up.

        Returns:
            The target id and the specifier declared there.

        Raises:
            PackageNotFoundError: If no target lists the package.
            AmbiguousTargetError: If more than one target lists it.
        """
        matches = manifest.find_package(package_name)

        if not matches:
            raise PackageNotFoundError(package_name)

        if len(matches) > 1:
            raise AmbiguousTargetError(
                package_name,
                [target_id for target_id, _ in matches],
            )

        return matches[0]

    def resolve(self, manifest: Manifest, package_name: str) -> ResolvedVersion:
        """Resolve a package to a concrete version.

        Pinned specifiers resolve without touching the filesystem; "latest"
        specifiers read the package's pointer record.

        Args:
            manifest: Parsed manifest.
            package_name: Package to resolve.

        Returns:
            ResolvedVersion for the package.

        Raises:
            PackageNotFoundError: If no target lists the package.
            AmbiguousTargetError: If more than one target lists it.
            LatestPointerMissingError: If a "latest" package has no pointer.
            LatestPointerMalformedError: If the pointer does not name a version.
        """
        target_id, spec = self.find_target(manifest, package_name)

        if isinstance(spec, PinnedVersion):
            version = spec.version
        else:
            version = self.read_latest(target_id, package_name)

        logger.debug(
            "Resolved %s@%s in target %s (specifier %s)",
            package_name,
            version,
            target_id,
            spec,
        )
        return ResolvedVersion(
            target_id=target_id,
            package_name=package_name,
            version=version,
        )

    def read_latest(self, target_id: str, package_name: str) -> int:
        """Read the version the "latest" pointer of a package references.

        Args:
            target_id: Target the package is installed under.
            package_name: Package name.

        Returns:
            The referenced version number.

        Raises:
            LatestPointerMissingError: If the pointer record is absent.
            LatestPointerMalformedError: If it does not name a version.
        """
        pointer = self.cache.latest_pointer(target_id, package_name)

        try:
            name = read_pointer_name(pointer)
        except UnicodeDecodeError as e:
            raise LatestPointerMalformedError(
                pointer,
                "<binary content>",
                package_name,
                internal_details=str(e),
            ) from e
        except OSError as e:
            raise LatestPointerMissingError(
                pointer,
                package_name,
                internal_details=str(e),
            ) from e

        if name is None:
            raise LatestPointerMissingError(pointer, package_name)

        version = parse_version_name(name)
        if version is None:
            raise LatestPointerMalformedError(pointer, name, package_name)

        return version

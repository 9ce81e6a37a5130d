"""Custom exception hierarchy for cdm-core.

This module defines the exception classes used throughout cdm:
- CdmError: Base exception for all cdm-related errors
- ResolutionError: Raised by the build-time dependency resolution pipeline
- RegistryError: Raised by the name registry and its contract host

Every resolution error is terminal for the build step that raised it.
Messages are actionable: they name the offending package, path or target
and point at the command that fixes the cache (usually ``cdm install``).
Technical details are logged internally via structlog.
"""

from __future__ import annotations

from pathlib import Path

import structlog

logger = structlog.get_logger(__name__)

# Command suggested to users when the local cache is incomplete
INSTALL_COMMAND = "cdm install"


class CdmError(Exception):
    """Base exception for cdm.

    All cdm exceptions inherit from this class. The user message is what
    the CLI prints; internal details are only logged.

    Args:
        user_message: Message to display to the user.
        internal_details: Optional technical details for logging.

    Example:
        >>> raise CdmError(
        ...     "Resolution failed",
        ...     internal_details="abi.json missing under ~/.cdm/ab12/contracts/token/3",
        ... )
    """

    def __init__(
        self,
        user_message: str,
        *,
        internal_details: str | None = None,
    ) -> None:
        """Initialize CdmError with user message and optional internal details.

        Args:
            user_message: Message to display to the user.
            internal_details: Technical details for internal logging only.
        """
        super().__init__(user_message)
        self.user_message = user_message

        if internal_details:
            logger.error(
                "cdm_error",
                error_type=self.__class__.__name__,
                user_message=user_message,
                internal_details=internal_details,
            )


class ResolutionError(CdmError):
    """Base class for failures of the build-time resolution pipeline."""

    pass


class ManifestNotFoundError(ResolutionError):
    """Raised when no cdm.json exists in the start directory or any ancestor.

    Attributes:
        start_dir: Directory the upward search started from.
    """

    def __init__(self, start_dir: Path | str, *, internal_details: str | None = None) -> None:
        self.start_dir = Path(start_dir)
        super().__init__(
            f"cdm.json not found. Run '{INSTALL_COMMAND}' to create one. "
            f"Searched from: {self.start_dir}",
            internal_details=internal_details,
        )


class ManifestMalformedError(ResolutionError):
    """Raised when the manifest cannot be decoded or fails validation.

    Attributes:
        path: Path of the manifest file.
        reason: Underlying parse or validation error message.
    """

    def __init__(
        self,
        path: Path | str,
        reason: str,
        *,
        internal_details: str | None = None,
    ) -> None:
        self.path = Path(path)
        self.reason = reason
        super().__init__(
            f"Failed to parse {self.path}: {reason}",
            internal_details=internal_details,
        )


class PackageNotFoundError(ResolutionError):
    """Raised when a package is absent from every target's dependency map.

    Attributes:
        package_name: The package that was requested.
    """

    def __init__(self, package_name: str, *, internal_details: str | None = None) -> None:
        self.package_name = package_name
        super().__init__(
            f"Package '{package_name}' not found in cdm.json dependencies. "
            f"Run '{INSTALL_COMMAND} {package_name}' first.",
            internal_details=internal_details,
        )


class AmbiguousTargetError(ResolutionError):
    """Raised when a package appears in the dependencies of several targets.

    Target ids are sorted so the message does not depend on manifest order.

    Attributes:
        package_name: The package that was requested.
        target_ids: Every target id whose dependency map lists the package.

    Example:
        >>> raise AmbiguousTargetError("token", ["b2", "a1"])
        # User sees: "Package 'token' found in multiple targets: [a1, b2]. ..."
    """

    def __init__(
        self,
        package_name: str,
        target_ids: list[str],
        *,
        internal_details: str | None = None,
    ) -> None:
        self.package_name = package_name
        self.target_ids = sorted(target_ids)
        super().__init__(
            f"Package '{package_name}' found in multiple targets: "
            f"[{', '.join(self.target_ids)}]. Target disambiguation is not yet supported.",
            internal_details=internal_details,
        )


class LatestPointerMissingError(ResolutionError):
    """Raised when a "latest" dependency has no pointer record in the cache.

    Attributes:
        pointer_path: Expected location of the pointer record.
        package_name: The package being resolved.
    """

    def __init__(
        self,
        pointer_path: Path | str,
        package_name: str,
        *,
        internal_details: str | None = None,
    ) -> None:
        self.pointer_path = Path(pointer_path)
        self.package_name = package_name
        super().__init__(
            f"Could not read latest pointer at {self.pointer_path}. "
            f"Run '{INSTALL_COMMAND} {package_name}' first.",
            internal_details=internal_details,
        )


class LatestPointerMalformedError(ResolutionError):
    """Raised when the pointer record does not name an integer version.

    Attributes:
        pointer_path: Location of the pointer record.
        referenced: The name the pointer referenced.
        package_name: The package being resolved.
    """

    def __init__(
        self,
        pointer_path: Path | str,
        referenced: str,
        package_name: str,
        *,
        internal_details: str | None = None,
    ) -> None:
        self.pointer_path = Path(pointer_path)
        self.referenced = referenced
        self.package_name = package_name
        super().__init__(
            f"Could not parse version from latest pointer at {self.pointer_path}. "
            f"Target: {referenced!r}. Run '{INSTALL_COMMAND} {package_name}' to reinstall it.",
            internal_details=internal_details,
        )


class ArtifactMissingError(ResolutionError):
    """Raised when the interface description is absent at the resolved path.

    Attributes:
        path: Expected location of abi.json.
        package_name: The package being resolved.
    """

    def __init__(
        self,
        path: Path | str,
        package_name: str,
        *,
        internal_details: str | None = None,
    ) -> None:
        self.path = Path(path)
        self.package_name = package_name
        super().__init__(
            f"ABI file not found at {self.path}. "
            f"Run '{INSTALL_COMMAND} {package_name}' to download it.",
            internal_details=internal_details,
        )


class InterfaceMalformedError(ResolutionError):
    """Raised when abi.json exists but cannot be turned into a binding.

    Attributes:
        path: Location of abi.json.
        reason: Underlying decode or validation error message.
    """

    def __init__(
        self,
        path: Path | str,
        reason: str,
        *,
        internal_details: str | None = None,
    ) -> None:
        self.path = Path(path)
        self.reason = reason
        super().__init__(
            f"Invalid interface description at {self.path}: {reason}",
            internal_details=internal_details,
        )


class RegistryError(CdmError):
    """Base class for name registry and contract host failures."""

    pass

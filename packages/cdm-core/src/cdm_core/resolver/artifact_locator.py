"""Artifact location for resolved cdm dependencies."""

from __future__ import annotations

import json
import logging
from pathlib import Path

from pydantic import ValidationError as PydanticValidationError

from cdm_core.errors import ArtifactMissingError, InterfaceMalformedError
from cdm_core.resolver.cache import ContractCache
from cdm_core.schemas.artifact import ContractInfo

logger = logging.getLogger(__name__)


class ArtifactLocator:
    """Locates installed interface descriptions in the cache.

    The locator checks existence only; the content of abi.json is validated
    by whoever reads it.

    Attributes:
        cache: Layout of the local contract cache.
    """

    def __init__(self, cache: ContractCache) -> None:
        self.cache = cache

    def locate(self, target_id: str, package_name: str, version: int) -> Path:
        """Return the path of a version's abi.json.

        Args:
            target_id: Target the package is installed under.
            package_name: Package name.
            version: Concrete version.

        Returns:
            Path to the interface description.

        Raises:
            ArtifactMissingError: If the file does not exist.
        """
        abi_path = self.cache.abi_path(target_id, package_name, version)
        if not abi_path.is_file():
            raise ArtifactMissingError(abi_path, package_name)

        logger.debug("Located interface for %s@%s at %s", package_name, version, abi_path)
        return abi_path

    def read_info(self, target_id: str, package_name: str, version: int) -> ContractInfo | None:
        """Load the install record stored beside abi.json.

        Args:
            target_id: Target the package is installed under.
            package_name: Package name.
            version: Concrete version.

        Returns:
            ContractInfo, or None if the version has no info.json.

        Raises:
            InterfaceMalformedError: If info.json exists but is invalid.
        """
        info_path = self.cache.info_path(target_id, package_name, version)
        if not info_path.is_file():
            return None

        try:
            data = json.loads(info_path.read_text(encoding="utf-8"))
            return ContractInfo.model_validate(data)
        except (json.JSONDecodeError, PydanticValidationError) as e:
            raise InterfaceMalformedError(info_path, str(e)) from e

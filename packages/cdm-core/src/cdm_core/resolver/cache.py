"""Layout of the local contract cache.

The cache is populated by `cdm install` and is read-only to the resolver:

    <root>/<target_id>/contracts/<package>/<version>/abi.json
    <root>/<target_id>/contracts/<package>/<version>/info.json
    <root>/<target_id>/contracts/<package>/latest  -> <version>

The root defaults to ~/.cdm and can be moved with the CDM_ROOT
environment variable.
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path

# Environment variable overriding the cache root
CDM_ROOT_ENV_VAR = "CDM_ROOT"

# Default cache directory name under the user's home
DEFAULT_CDM_DIR_NAME = ".cdm"

# Per-target subtree holding installed contracts
CONTRACTS_DIR_NAME = "contracts"

# Pointer record naming the newest installed version of a package
LATEST_POINTER_NAME = "latest"

# Interface description file in each version directory
ABI_FILE_NAME = "abi.json"

# Install record in each version directory
INFO_FILE_NAME = "info.json"


def get_cdm_root() -> Path:
    """Get the cache root from the environment.

    Returns:
        $CDM_ROOT if set, otherwise ~/.cdm.
    """
    override = os.environ.get(CDM_ROOT_ENV_VAR)
    if override:
        return Path(override).expanduser()
    return Path.home() / DEFAULT_CDM_DIR_NAME


@dataclass(frozen=True)
class ContractCache:
    """Path arithmetic over a cache root.

    No method touches the filesystem; existence checks belong to the
    resolver stages that consume these paths.

    Attributes:
        root: Cache root directory.

    Example:
        >>> cache = ContractCache(Path("/home/dev/.cdm"))
        >>> cache.abi_path("ab12", "token", 3)
        PosixPath('/home/dev/.cdm/ab12/contracts/token/3/abi.json')
    """

    root: Path

    @classmethod
    def default(cls) -> ContractCache:
        return cls(get_cdm_root())

    def package_dir(self, target_id: str, package_name: str) -> Path:
        # Scoped names ("org/token") nest one directory per segment
        return self.root / target_id / CONTRACTS_DIR_NAME / package_name

    def version_dir(self, target_id: str, package_name: str, version: int) -> Path:
        return self.package_dir(target_id, package_name) / str(version)

    def latest_pointer(self, target_id: str, package_name: str) -> Path:
        return self.package_dir(target_id, package_name) / LATEST_POINTER_NAME

    def abi_path(self, target_id: str, package_name: str, version: int) -> Path:
        return self.version_dir(target_id, package_name, version) / ABI_FILE_NAME

    def info_path(self, target_id: str, package_name: str, version: int) -> Path:
        return self.version_dir(target_id, package_name, version) / INFO_FILE_NAME

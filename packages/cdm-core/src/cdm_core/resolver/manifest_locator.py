"""Manifest discovery for cdm.

Finds the cdm.json governing a directory by walking from that directory
up to the filesystem root, nearest first.
"""

from __future__ import annotations

import logging
from pathlib import Path

from cdm_core.errors import ManifestNotFoundError
from cdm_core.schemas.manifest import MANIFEST_FILE_NAME

logger = logging.getLogger(__name__)

# Names checked in each directory, in order of preference
MANIFEST_FILE_NAMES = (MANIFEST_FILE_NAME, "cdm.yaml")


def find_manifest(start_dir: Path | str) -> Path:
    """Find the nearest manifest at or above a directory.

    Args:
        start_dir: Directory to start from. A relative path is made
            absolute (and normalised) once, before the search.

    Returns:
        Path to the first manifest found.

    Raises:
        ManifestNotFoundError: If no directory up to the root holds one.

    Example:
        >>> find_manifest(Path("project/contracts/token/src"))
        PosixPath('/work/project/cdm.json')
    """
    start = Path(start_dir).resolve()

    for directory in (start, *start.parents):
        for name in MANIFEST_FILE_NAMES:
            candidate = directory / name
            if candidate.is_file():
                logger.debug("Found manifest at %s", candidate)
                return candidate

    raise ManifestNotFoundError(start)

"""Manifest models for cdm.

This module defines the typed view of a project's cdm.json:
- TargetConfig: Deployment endpoints of one target (asset-hub, bulletin, registry)
- PinnedVersion / LatestVersion: The two forms of a version specifier
- VersionSpec: Annotated union that decodes the raw manifest encoding
- Manifest: Root model with targets and per-target dependency maps

Raw encoding of a version specifier:
- a non-negative integer pins that exact version
- any string marks a live "latest" dependency (the text itself is not
  interpreted)
"""

from __future__ import annotations

import hashlib
import json
from pathlib import Path
from typing import Annotated, Any, Literal, Union

import yaml
from pydantic import (
    BaseModel,
    BeforeValidator,
    ConfigDict,
    Field,
    PlainSerializer,
    WithJsonSchema,
    field_validator,
)
from pydantic import ValidationError as PydanticValidationError

from cdm_core.errors import ManifestMalformedError

# Default manifest file name, written by `cdm install`
MANIFEST_FILE_NAME = "cdm.json"

# File suffixes decoded as YAML instead of JSON
YAML_SUFFIXES = frozenset({".yaml", ".yml"})

# Largest version number a specifier may pin
U64_MAX = 2**64 - 1

# Length in bytes of the truncated blake2b digest used as target id
TARGET_HASH_BYTES = 8


def compute_target_hash(asset_hub: str, bulletin: str, registry: str) -> str:
    """Compute the identifier of a deployment target.

    The id is the hex encoding of the first 8 bytes of a 32-byte blake2b
    digest over the three endpoints joined by newlines.

    Args:
        asset_hub: Asset hub RPC endpoint.
        bulletin: Bulletin (IPFS gateway) endpoint.
        registry: Registry contract address.

    Returns:
        16-character lowercase hex string.

    Example:
        >>> compute_target_hash("ws://localhost:9944", "http://localhost:8283", "0x01")
        '...'
    """
    payload = f"{asset_hub}\n{bulletin}\n{registry}".encode()
    digest = hashlib.blake2b(payload, digest_size=32).digest()
    return digest[:TARGET_HASH_BYTES].hex()


class TargetConfig(BaseModel):
    """Endpoints identifying one deployment target.

    The values are opaque to the resolver; only the target id (the key in
    Manifest.targets) takes part in resolution.

    Attributes:
        asset_hub: Asset hub RPC endpoint (``asset-hub`` in the file).
        bulletin: Bulletin chain / IPFS gateway endpoint.
        registry: Address of the name registry contract on this target.
    """

    model_config = ConfigDict(frozen=True, extra="ignore", populate_by_name=True)

    asset_hub: str = Field(..., alias="asset-hub", description="Asset hub endpoint")
    bulletin: str = Field(..., description="Bulletin endpoint")
    registry: str = Field(..., description="Registry contract address")

    def target_hash(self) -> str:
        """Return the target id derived from these endpoints."""
        return compute_target_hash(self.asset_hub, self.bulletin, self.registry)


class PinnedVersion(BaseModel):
    """Version specifier naming an explicit version number."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    kind: Literal["pinned"] = "pinned"
    version: int = Field(..., ge=0, le=U64_MAX, description="Pinned version number")

    @property
    def is_latest(self) -> bool:
        return False

    def __str__(self) -> str:
        return str(self.version)


class LatestVersion(BaseModel):
    """Version specifier that follows the cache's "latest" pointer.

    Attributes:
        marker: The string found in the manifest, kept so the manifest
            round-trips unchanged.
    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    kind: Literal["latest"] = "latest"
    marker: str = Field(default="latest", description="Raw marker string")

    @property
    def is_latest(self) -> bool:
        return True

    def __str__(self) -> str:
        return self.marker


def _decode_version_spec(value: Any) -> Any:
    """Turn the raw manifest encoding into a PinnedVersion or LatestVersion.

    Raises:
        ValueError: If the value is neither a non-negative integer nor a string.
    """
    if isinstance(value, (PinnedVersion, LatestVersion)):
        return value
    # bool is a subclass of int; true/false are not versions
    if isinstance(value, bool):
        raise ValueError("version must be a non-negative integer or a string, got a boolean")
    if isinstance(value, int):
        if value < 0 or value > U64_MAX:
            raise ValueError(f"version {value} is outside the range 0..{U64_MAX}")
        return PinnedVersion(version=value)
    if isinstance(value, str):
        return LatestVersion(marker=value)
    raise ValueError(
        f"version must be a non-negative integer or a string, got {type(value).__name__}"
    )


def _encode_version_spec(spec: PinnedVersion | LatestVersion) -> int | str:
    if isinstance(spec, PinnedVersion):
        return spec.version
    return spec.marker


VersionSpec = Annotated[
    Union[PinnedVersion, LatestVersion],
    BeforeValidator(_decode_version_spec),
    PlainSerializer(_encode_version_spec, return_type=Union[int, str]),
    WithJsonSchema(
        {
            "anyOf": [
                {"type": "integer", "minimum": 0, "maximum": U64_MAX},
                {"type": "string", "description": "Follow the latest installed version"},
            ]
        }
    ),
]
"""Version specifier: pinned integer or "latest" marker string."""


def _is_relative_package_name(name: str) -> bool:
    if not name or name.startswith("/") or "\\" in name:
        return False
    return all(part not in ("", ".", "..") for part in name.split("/"))


class Manifest(BaseModel):
    """Root model for cdm.json.

    Attributes:
        targets: Target id to deployment endpoints.
        dependencies: Target id to (package name to version specifier).

    Example:
        >>> manifest = Manifest.parse('''
        ... {"targets": {"ab12": {"asset-hub": "ws://x", "bulletin": "http://y",
        ...   "registry": "0x01"}},
        ...  "dependencies": {"ab12": {"token": 3, "oracle": "latest"}}}
        ... ''')
        >>> manifest.find_package("token")
        [('ab12', PinnedVersion(kind='pinned', version=3))]
    """

    model_config = ConfigDict(frozen=True, extra="ignore")

    targets: dict[str, TargetConfig] = Field(
        ...,
        description="Deployment targets keyed by target id",
    )
    dependencies: dict[str, dict[str, VersionSpec]] = Field(
        ...,
        description="Per-target mapping of package name to version specifier",
    )

    @field_validator("dependencies")
    @classmethod
    def validate_package_names(
        cls, v: dict[str, dict[str, VersionSpec]]
    ) -> dict[str, dict[str, VersionSpec]]:
        """Validate that package names stay inside the contracts cache."""
        for deps in v.values():
            for name in deps:
                if not _is_relative_package_name(name):
                    raise ValueError(
                        f"Invalid package name '{name}'. "
                        "Names must be relative paths without '.' or '..' segments"
                    )
        return v

    def find_package(self, package_name: str) -> list[tuple[str, PinnedVersion | LatestVersion]]:
        """Find every target whose dependency map lists a package.

        Args:
            package_name: Package to look up.

        Returns:
            (target id, specifier) pairs, sorted by target id.
        """
        return sorted(
            (target_id, deps[package_name])
            for target_id, deps in self.dependencies.items()
            if package_name in deps
        )

    @classmethod
    def parse(cls, content: str, source: Path | str = MANIFEST_FILE_NAME) -> Manifest:
        """Decode and validate manifest content.

        Args:
            content: Raw file content.
            source: File the content came from. Its suffix selects the
                decoder and it is quoted in error messages.

        Returns:
            Validated Manifest.

        Raises:
            ManifestMalformedError: On syntax errors, type mismatches or an
                unparseable version specifier.
        """
        source = Path(source)
        try:
            if source.suffix in YAML_SUFFIXES:
                data = yaml.safe_load(content)
            else:
                data = json.loads(content)
        except (json.JSONDecodeError, yaml.YAMLError, RecursionError) as e:
            raise ManifestMalformedError(source, str(e)) from e

        if not isinstance(data, dict):
            raise ManifestMalformedError(
                source,
                f"expected an object at the top level, got {type(data).__name__}",
            )

        try:
            return cls.model_validate(data)
        except PydanticValidationError as e:
            raise ManifestMalformedError(
                source,
                _summarize_validation_error(e),
                internal_details=str(e),
            ) from e

    @classmethod
    def from_file(cls, path: Path | str) -> Manifest:
        """Load and validate a manifest file.

        Args:
            path: Path to cdm.json (or cdm.yaml).

        Returns:
            Validated Manifest.

        Raises:
            FileNotFoundError: If the file does not exist.
            PermissionError: If the file cannot be read.
            ManifestMalformedError: If the path cannot be read as a file or
                the content is invalid.
        """
        path = Path(path)
        if not path.exists():
            raise FileNotFoundError(f"File not found: {path}")

        try:
            content = path.read_text(encoding="utf-8")
        except UnicodeDecodeError as e:
            raise ManifestMalformedError(path, f"not valid UTF-8: {e}") from e
        except PermissionError:
            raise
        except OSError as e:
            raise ManifestMalformedError(path, str(e)) from e

        return cls.parse(content, source=path)

    def to_json(self) -> str:
        """Serialize to the on-disk cdm.json form."""
        data = self.model_dump(mode="json", by_alias=True)
        return json.dumps(data, indent=2) + "\n"

    def write(self, directory: Path | str) -> Path:
        """Write cdm.json into a directory.

        Args:
            directory: Project directory.

        Returns:
            Path of the written file.
        """
        path = Path(directory) / MANIFEST_FILE_NAME
        path.write_text(self.to_json(), encoding="utf-8")
        return path


def _summarize_validation_error(err: PydanticValidationError) -> str:
    parts = []
    for e in err.errors():
        loc = ".".join(str(x) for x in e["loc"])
        parts.append(f"{loc}: {e['msg']}" if loc else e["msg"])
    return "; ".join(parts)

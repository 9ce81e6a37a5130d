"""Shared pytest fixtures for cdm-core tests.

Provides builders for cdm.json manifests and contract cache trees under
tmp_path.
"""

from __future__ import annotations

import json
import os
import sys
from collections.abc import Callable
from pathlib import Path
from typing import Any

import pytest
import structlog

# Target id used by single-target fixtures
TARGET_ID = "ab12cd34ef56ab78"


@pytest.fixture(autouse=True)
def configure_structlog_for_tests() -> None:
    """Configure structlog to output to stdout for test capture."""
    structlog.configure(
        processors=[
            structlog.stdlib.add_log_level,
            structlog.stdlib.PositionalArgumentsFormatter(),
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.processors.StackInfoRenderer(),
            structlog.processors.format_exc_info,
            structlog.processors.UnicodeDecoder(),
            structlog.dev.ConsoleRenderer(),
        ],
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.PrintLoggerFactory(file=sys.stdout),
        cache_logger_on_first_use=False,  # Important for test isolation
    )


@pytest.fixture(autouse=True)
def isolate_cdm_root(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
    """Point CDM_ROOT away from the real ~/.cdm."""
    monkeypatch.setenv("CDM_ROOT", str(tmp_path / "default-cache"))


@pytest.fixture
def target_id() -> str:
    """Return the target id used by single-target fixtures."""
    return TARGET_ID


@pytest.fixture
def sample_target() -> dict[str, str]:
    """Return the raw endpoints of one deployment target."""
    return {
        "asset-hub": "ws://localhost:9944",
        "bulletin": "http://localhost:8283",
        "registry": "0x0000000000000000000000000000000000000001",
    }


@pytest.fixture
def sample_abi() -> list[dict[str, Any]]:
    """Return a small ERC-20 style abi.json document."""
    return [
        {"type": "constructor", "inputs": [], "stateMutability": "nonpayable"},
        {
            "type": "function",
            "name": "balanceOf",
            "inputs": [{"name": "owner", "type": "address"}],
            "outputs": [{"name": "", "type": "uint256"}],
            "stateMutability": "view",
        },
        {
            "type": "function",
            "name": "transfer",
            "inputs": [
                {"name": "to", "type": "address"},
                {"name": "amount", "type": "uint256"},
            ],
            "outputs": [{"name": "", "type": "bool"}],
            "stateMutability": "nonpayable",
        },
        {
            "type": "event",
            "name": "Transfer",
            "inputs": [
                {"name": "from", "type": "address"},
                {"name": "to", "type": "address"},
                {"name": "value", "type": "uint256"},
            ],
        },
    ]


@pytest.fixture
def cache_root(tmp_path: Path) -> Path:
    """Return an empty contract cache root."""
    root = tmp_path / "cache"
    root.mkdir()
    return root


@pytest.fixture
def project_dir(tmp_path: Path) -> Path:
    """Return an empty project directory."""
    directory = tmp_path / "project"
    directory.mkdir()
    return directory


@pytest.fixture
def write_manifest(
    project_dir: Path,
    sample_target: dict[str, str],
) -> Callable[..., Path]:
    """Factory fixture writing cdm.json files.

    Returns:
        Function taking a target id → {package: specifier} mapping and an
        optional directory (default: project_dir).
    """

    def _write(
        dependencies: dict[str, dict[str, Any]],
        directory: Path | None = None,
    ) -> Path:
        directory = directory or project_dir
        directory.mkdir(parents=True, exist_ok=True)
        content = {
            "targets": {tid: sample_target for tid in dependencies},
            "dependencies": dependencies,
        }
        path = directory / "cdm.json"
        path.write_text(json.dumps(content, indent=2))
        return path

    return _write


@pytest.fixture
def install_package(
    cache_root: Path,
    sample_abi: list[dict[str, Any]],
) -> Callable[..., Path]:
    """Factory fixture installing one package version into the cache.

    Returns:
        Function taking (target_id, package_name, version) and optional
        abi / info documents; returns the version directory.
    """

    def _install(
        target: str,
        package_name: str,
        version: int,
        abi: Any = None,
        info: dict[str, Any] | None = None,
    ) -> Path:
        version_dir = cache_root / target / "contracts" / package_name / str(version)
        version_dir.mkdir(parents=True, exist_ok=True)
        document = sample_abi if abi is None else abi
        (version_dir / "abi.json").write_text(json.dumps(document))
        if info is not None:
            (version_dir / "info.json").write_text(json.dumps(info))
        return version_dir

    return _install


@pytest.fixture
def set_latest(cache_root: Path) -> Callable[..., Path]:
    """Factory fixture writing a package's "latest" pointer.

    Returns:
        Function taking (target_id, package_name, name) and a symlink flag.
        A symlink points at ``name`` relative to the package directory; a
        plain file holds ``name`` as text.
    """

    def _set(target: str, package_name: str, name: str, symlink: bool = True) -> Path:
        package_dir = cache_root / target / "contracts" / package_name
        package_dir.mkdir(parents=True, exist_ok=True)
        pointer = package_dir / "latest"
        if pointer.is_symlink() or pointer.exists():
            pointer.unlink()
        if symlink:
            os.symlink(name, pointer)
        else:
            pointer.write_text(name + "\n")
        return pointer

    return _set

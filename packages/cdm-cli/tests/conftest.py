"""Shared test fixtures for cdm-cli tests.

Provides CliRunner fixtures and a project with a populated contract cache.
"""

from __future__ import annotations

import json
import os
import sys
from dataclasses import dataclass
from pathlib import Path

import pytest
import structlog
from click.testing import CliRunner

from cdm_cli import output

TARGET_ID = "ab12cd34ef56ab78"

SAMPLE_ABI = [
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
]


@dataclass(frozen=True)
class SampleProject:
    """A project directory and the cache its manifest resolves against."""

    root: Path
    cache_root: Path
    target_id: str


@pytest.fixture(autouse=True)
def configure_structlog_for_tests() -> None:
    """Configure structlog to output to stdout for test capture."""
    structlog.configure(
        processors=[
            structlog.stdlib.add_log_level,
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.dev.ConsoleRenderer(),
        ],
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.PrintLoggerFactory(file=sys.stdout),
        cache_logger_on_first_use=False,  # Important for test isolation
    )


@pytest.fixture(autouse=True)
def wide_plain_console(monkeypatch: pytest.MonkeyPatch) -> None:
    """Use a plain, wide console so long paths are not wrapped."""
    monkeypatch.setenv("COLUMNS", "1000")
    monkeypatch.setattr(output, "console", output.create_console(no_color=True))


@pytest.fixture
def cli_runner() -> CliRunner:
    """Create a Click test runner."""
    return CliRunner()


@pytest.fixture
def sample_project(tmp_path: Path) -> SampleProject:
    """Create a project depending on a pinned and a "latest" package.

    - token: pinned to version 3
    - @acme/price-oracle: latest, pointer → 2, with an info.json
    """
    root = tmp_path / "project"
    root.mkdir()
    (root / "cdm.json").write_text(
        json.dumps(
            {
                "targets": {
                    TARGET_ID: {
                        "asset-hub": "ws://localhost:9944",
                        "bulletin": "http://localhost:8283",
                        "registry": "0x01",
                    }
                },
                "dependencies": {
                    TARGET_ID: {"token": 3, "@acme/price-oracle": "latest"},
                },
            }
        )
    )

    cache_root = tmp_path / "cache"
    contracts = cache_root / TARGET_ID / "contracts"
    for package, version in [("token", 3), ("@acme/price-oracle", 2)]:
        version_dir = contracts / package / str(version)
        version_dir.mkdir(parents=True)
        (version_dir / "abi.json").write_text(json.dumps(SAMPLE_ABI))

    oracle_dir = contracts / "@acme/price-oracle"
    os.symlink("2", oracle_dir / "latest")
    (oracle_dir / "2" / "info.json").write_text(
        json.dumps(
            {
                "name": "@acme/price-oracle",
                "chain": TARGET_ID,
                "version": 2,
                "address": "0x00000000000000000000000000000000000000aa",
                "metadataCid": "bafyoracle",
            }
        )
    )

    return SampleProject(root=root, cache_root=cache_root, target_id=TARGET_ID)

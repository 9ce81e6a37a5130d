"""Shared pytest fixtures for cdm-registry tests."""

from __future__ import annotations

import sys

import pytest
import structlog

from cdm_registry import Address, ContractHost, ContractRegistry, InMemoryStore


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


@pytest.fixture
def alice() -> Address:
    """Return the first test account (caller A)."""
    return Address.from_hex("0xa1")


@pytest.fixture
def bob() -> Address:
    """Return the second test account (caller B)."""
    return Address.from_hex("0xb2")


@pytest.fixture
def store() -> InMemoryStore:
    """Return an empty persistent store."""
    return InMemoryStore()


@pytest.fixture
def registry(store: InMemoryStore) -> ContractHost:
    """Return a freshly deployed name registry."""
    return ContractHost(ContractRegistry, store=store)

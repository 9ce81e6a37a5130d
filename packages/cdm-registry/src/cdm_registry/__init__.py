"""cdm-registry: On-chain name registry logic for cdm.

This package provides:
- ContractRegistry: name → owner + append-only published versions
- ContractHost: Local execution environment (serialised, all-or-nothing calls)
- KeyValueStore / InMemoryStore / StagedStore: Storage capability
- Address, NamedContractInfo, PublishedContract: Stored value types
"""

from __future__ import annotations

__version__ = "0.1.0"

from cdm_registry.contract import ContractRegistry
from cdm_registry.errors import ContractAbort, ContractTrapped, UnknownMethodError
from cdm_registry.host import (
    CallContext,
    CallEnvironment,
    ContractHost,
    constructor,
    message,
)
from cdm_registry.storage import (
    InMemoryStore,
    KeyValueStore,
    StagedStore,
    StorageMapping,
    StorageValue,
)
from cdm_registry.types import (
    ADDRESS_LENGTH,
    U32_MAX,
    Address,
    NamedContractInfo,
    PublishedContract,
)

__all__ = [
    "__version__",
    # Contract
    "ContractRegistry",
    # Host
    "ContractHost",
    "CallContext",
    "CallEnvironment",
    "message",
    "constructor",
    # Storage
    "KeyValueStore",
    "InMemoryStore",
    "StagedStore",
    "StorageValue",
    "StorageMapping",
    # Types
    "Address",
    "NamedContractInfo",
    "PublishedContract",
    "ADDRESS_LENGTH",
    "U32_MAX",
    # Errors
    "ContractAbort",
    "ContractTrapped",
    "UnknownMethodError",
]

"""Name registry contract.

Maps a contract name to its owner and an append-only list of published
versions (address + metadata URI per version). This is the authority that
deployed contracts query at run time to find the current address of a
dependency.

Storage layout:
- contract_name_count: number of registered names
- contract_name_at: index → name, in registration order
- info: name → NamedContractInfo
- published_address: (name, version index) → Address
- published_metadata_uri: (name, version index) → metadata URI

Ownership: the first caller to publish under a name owns it. Publishing by
anyone else is ignored without an error.
"""

from __future__ import annotations

import logging
from dataclasses import replace

from cdm_registry.errors import ContractAbort
from cdm_registry.host import CallEnvironment, constructor, message
from cdm_registry.storage import KeyValueStore, StorageMapping, StorageValue
from cdm_registry.types import U32_MAX, Address, NamedContractInfo, PublishedContract

logger = logging.getLogger(__name__)


class ContractRegistry:
    """Registry of named, versioned contracts.

    Built by a ContractHost for every invocation; all state lives in the
    store it is given.

    Example:
        >>> host = ContractHost(ContractRegistry)
        >>> host.call(alice, "publish_latest", "token", Address.from_hex("0x1"), "ipfs://a")
        >>> host.query("get_version_count", "token")
        1
    """

    def __init__(self, store: KeyValueStore, env: CallEnvironment) -> None:
        self._env = env
        self._contract_name_count = StorageValue[int](store, "contract_name_count", default=0)
        self._contract_name_at = StorageMapping[int, str](store, "contract_name_at")
        self._info = StorageMapping[str, NamedContractInfo](store, "info")
        self._published_address = StorageMapping[tuple[str, int], Address](
            store, "published_address"
        )
        self._published_metadata_uri = StorageMapping[tuple[str, int], str](
            store, "published_metadata_uri"
        )

    @constructor
    def new(self) -> None:
        """Deploy with empty state; every read falls back to its default."""

    @message
    def publish_latest(
        self,
        contract_name: str,
        contract_address: Address,
        metadata_uri: str,
    ) -> None:
        """Publish a new latest version of a named contract.

        Registers the name to the caller if it is unregistered. Only the
        owner may publish; calls from anyone else change nothing.

        Args:
            contract_name: Name to publish under.
            contract_address: Address of the deployed contract.
            metadata_uri: Bulletin URI of this version's metadata.

        Raises:
            ContractAbort: If a u32 counter would overflow.
        """
        caller = self._env.caller
        info = self._info.get(contract_name)

        if info is not None and info.owner != caller:
            logger.debug(
                "Ignoring publish of %r from %s: owned by %s",
                contract_name,
                caller,
                info.owner,
            )
            return

        contract_address = Address.parse(contract_address)

        if info is None:
            info = NamedContractInfo(owner=caller, version_count=0)
            count = self._contract_name_count.get()
            if count >= U32_MAX:
                raise ContractAbort("publish_latest: contract_name_count overflow")
            self._contract_name_at.insert(count, contract_name)
            self._contract_name_count.set(count + 1)
            logger.info("Registered contract name %r to %s", contract_name, caller)

        if info.version_count >= U32_MAX:
            raise ContractAbort("publish_latest: version_count overflow")

        info = replace(info, version_count=info.version_count + 1)
        self._info.insert(contract_name, info)

        version_index = info.version_count - 1
        self._published_address.insert((contract_name, version_index), contract_address)
        self._published_metadata_uri.insert((contract_name, version_index), metadata_uri)
        logger.info(
            "Published %r version %d at %s",
            contract_name,
            version_index,
            contract_address,
        )

    @message
    def get_address(self, contract_name: str) -> Address:
        """Get the address of the latest version, or the zero address."""
        info = self._info.get(contract_name)
        if info is None:
            return Address.zero()
        address = self._published_address.get((contract_name, info.latest_index))
        return address if address is not None else Address.zero()

    @message
    def get_metadata_uri(self, contract_name: str) -> str:
        """Get the metadata URI of the latest version, or an empty string."""
        info = self._info.get(contract_name)
        if info is None:
            return ""
        return self._published_metadata_uri.get((contract_name, info.latest_index)) or ""

    @message
    def get_contract_name_at(self, index: int) -> str:
        """Get the name registered at an enumeration index, or an empty string."""
        return self._contract_name_at.get(index) or ""

    @message
    def get_owner(self, contract_name: str) -> Address:
        """Get the owner of a name, or the zero address."""
        info = self._info.get(contract_name)
        return info.owner if info is not None else Address.zero()

    @message
    def get_version_count(self, contract_name: str) -> int:
        """Get the number of published versions of a name, or 0."""
        info = self._info.get(contract_name)
        return info.version_count if info is not None else 0

    @message
    def get_contract_count(self) -> int:
        """Get the number of registered names."""
        return self._contract_name_count.get()

    @message
    def get_published(self, contract_name: str, version_index: int) -> PublishedContract | None:
        """Get a specific published version, or None if it does not exist."""
        address = self._published_address.get((contract_name, version_index))
        if address is None:
            return None
        uri = self._published_metadata_uri.get((contract_name, version_index)) or ""
        return PublishedContract(address=address, metadata_uri=uri)

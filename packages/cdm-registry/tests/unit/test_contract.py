"""Unit tests for the name registry contract."""

from __future__ import annotations

import pytest

from cdm_registry import (
    U32_MAX,
    Address,
    ContractHost,
    ContractRegistry,
    ContractTrapped,
    InMemoryStore,
    NamedContractInfo,
    PublishedContract,
)

ADDRESS_1 = Address.from_hex("0x1001")
ADDRESS_2 = Address.from_hex("0x1002")
ADDRESS_3 = Address.from_hex("0x1003")


class TestEmptyRegistry:
    """Tests for reads against an empty registry."""

    def test_defaults(self, registry: ContractHost) -> None:
        """Unknown names read as defaults, never as errors."""
        assert registry.query("get_contract_count") == 0
        assert registry.query("get_address", "token") == Address.zero()
        assert registry.query("get_metadata_uri", "token") == ""
        assert registry.query("get_owner", "token") == Address.zero()
        assert registry.query("get_version_count", "token") == 0
        assert registry.query("get_contract_name_at", 0) == ""
        assert registry.query("get_published", "token", 0) is None

    def test_surface(self, registry: ContractHost) -> None:
        """Exactly the registry methods are remote-callable."""
        assert registry.methods == [
            "get_address",
            "get_contract_count",
            "get_contract_name_at",
            "get_metadata_uri",
            "get_owner",
            "get_published",
            "get_version_count",
            "publish_latest",
        ]


class TestPublishLatest:
    """Tests for publish_latest."""

    def test_first_publish_registers(self, registry: ContractHost, alice: Address) -> None:
        """The first publish registers the name to the caller."""
        registry.call(alice, "publish_latest", "token", ADDRESS_1, "ipfs://v1")

        assert registry.query("get_owner", "token") == alice
        assert registry.query("get_version_count", "token") == 1
        assert registry.query("get_address", "token") == ADDRESS_1
        assert registry.query("get_metadata_uri", "token") == "ipfs://v1"
        assert registry.query("get_contract_count") == 1
        assert registry.query("get_contract_name_at", 0) == "token"

    def test_owner_publishes_new_version(self, registry: ContractHost, alice: Address) -> None:
        """Later publishes by the owner append a version."""
        registry.call(alice, "publish_latest", "token", ADDRESS_1, "ipfs://v1")
        registry.call(alice, "publish_latest", "token", ADDRESS_2, "ipfs://v2")

        assert registry.query("get_version_count", "token") == 2
        assert registry.query("get_address", "token") == ADDRESS_2
        assert registry.query("get_metadata_uri", "token") == "ipfs://v2"
        assert registry.query("get_contract_count") == 1

    def test_previous_versions_retained(self, registry: ContractHost, alice: Address) -> None:
        """Published versions are never overwritten."""
        registry.call(alice, "publish_latest", "token", ADDRESS_1, "ipfs://v1")
        registry.call(alice, "publish_latest", "token", ADDRESS_2, "ipfs://v2")

        assert registry.query("get_published", "token", 0) == PublishedContract(
            address=ADDRESS_1, metadata_uri="ipfs://v1"
        )
        assert registry.query("get_published", "token", 1) == PublishedContract(
            address=ADDRESS_2, metadata_uri="ipfs://v2"
        )

    def test_non_owner_is_silent_no_op(
        self, registry: ContractHost, store: InMemoryStore, alice: Address, bob: Address
    ) -> None:
        """Publishing someone else's name changes nothing and raises nothing."""
        registry.call(alice, "publish_latest", "token", ADDRESS_1, "ipfs://v1")
        snapshot = store.snapshot()

        assert registry.call(bob, "publish_latest", "token", ADDRESS_2, "ipfs://evil") is None

        assert store.snapshot() == snapshot
        assert registry.query("get_owner", "token") == alice
        assert registry.query("get_address", "token") == ADDRESS_1

    def test_non_owner_bad_address_is_silent_no_op(
        self, registry: ContractHost, store: InMemoryStore, alice: Address, bob: Address
    ) -> None:
        """A non-owner's publish is ignored before its address is decoded."""
        registry.call(alice, "publish_latest", "token", ADDRESS_1, "ipfs://v1")
        snapshot = store.snapshot()

        assert registry.call(bob, "publish_latest", "token", "not-hex", "ipfs://evil") is None

        assert store.snapshot() == snapshot

    def test_owner_bad_address_raises(
        self, registry: ContractHost, store: InMemoryStore, alice: Address
    ) -> None:
        """An owner's undecodable address fails with no state change."""
        snapshot = store.snapshot()

        with pytest.raises(ValueError):
            registry.call(alice, "publish_latest", "token", "not-hex", "ipfs://v1")

        assert store.snapshot() == snapshot
        assert registry.query("get_owner", "token") == Address.zero()

    def test_names_enumerate_in_registration_order(
        self, registry: ContractHost, alice: Address, bob: Address
    ) -> None:
        """Each name is enumerated once, in first-publish order."""
        registry.call(alice, "publish_latest", "token", ADDRESS_1, "ipfs://t")
        registry.call(bob, "publish_latest", "oracle", ADDRESS_2, "ipfs://o")
        registry.call(alice, "publish_latest", "token", ADDRESS_3, "ipfs://t2")

        assert registry.query("get_contract_count") == 2
        assert registry.query("get_contract_name_at", 0) == "token"
        assert registry.query("get_contract_name_at", 1) == "oracle"
        assert registry.query("get_contract_name_at", 2) == ""

    def test_address_accepted_as_hex(self, registry: ContractHost, alice: Address) -> None:
        """Contract addresses may be passed as hex strings."""
        registry.call(alice, "publish_latest", "token", "0x1001", "ipfs://v1")
        assert registry.query("get_address", "token") == ADDRESS_1

    def test_reads_are_idempotent(
        self, registry: ContractHost, store: InMemoryStore, alice: Address
    ) -> None:
        """Reading never changes state or results."""
        registry.call(alice, "publish_latest", "token", ADDRESS_1, "ipfs://v1")
        snapshot = store.snapshot()

        first = [registry.query("get_address", "token") for _ in range(3)]
        assert first == [ADDRESS_1] * 3
        registry.query("get_contract_name_at", 5)
        assert store.snapshot() == snapshot


class TestScenario:
    """End-to-end walk through two callers sharing one registry."""

    def test_two_callers(self, registry: ContractHost, alice: Address, bob: Address) -> None:
        """Caller A owns "token"; caller B cannot take it over."""
        assert registry.query("get_contract_count") == 0

        registry.call(alice, "publish_latest", "token", Address.from_hex("0x1"), "ipfs://a")
        assert registry.query("get_contract_count") == 1
        assert registry.query("get_owner", "token") == alice
        assert registry.query("get_version_count", "token") == 1
        assert registry.query("get_address", "token") == Address.from_hex("0x1")
        assert registry.query("get_metadata_uri", "token") == "ipfs://a"

        registry.call(bob, "publish_latest", "token", Address.from_hex("0x2"), "ipfs://b")
        assert registry.query("get_address", "token") == Address.from_hex("0x1")
        assert registry.query("get_version_count", "token") == 1

        registry.call(alice, "publish_latest", "token", Address.from_hex("0x3"), "ipfs://c")
        assert registry.query("get_version_count", "token") == 2
        assert registry.query("get_address", "token") == Address.from_hex("0x3")
        assert registry.query("get_published", "token", 0) == PublishedContract(
            address=Address.from_hex("0x1"), metadata_uri="ipfs://a"
        )

        assert registry.query("get_contract_name_at", 0) == "token"
        assert registry.query("get_contract_name_at", 1) == ""


class TestOverflow:
    """Tests for u32 counter overflow."""

    def test_version_count_overflow_traps(
        self, registry: ContractHost, store: InMemoryStore, alice: Address
    ) -> None:
        """A full version counter aborts the publish with no state change."""
        store.set(("info", "token"), NamedContractInfo(owner=alice, version_count=U32_MAX))
        snapshot = store.snapshot()

        with pytest.raises(ContractTrapped, match="version_count overflow"):
            registry.call(alice, "publish_latest", "token", ADDRESS_1, "ipfs://v")

        assert store.snapshot() == snapshot
        assert registry.query("get_version_count", "token") == U32_MAX

    def test_contract_count_overflow_traps(
        self, registry: ContractHost, store: InMemoryStore, alice: Address
    ) -> None:
        """A full name counter aborts registration with no state change."""
        store.set(("contract_name_count",), U32_MAX)
        snapshot = store.snapshot()

        with pytest.raises(ContractTrapped, match="contract_name_count overflow"):
            registry.call(alice, "publish_latest", "token", ADDRESS_1, "ipfs://v")

        assert store.snapshot() == snapshot
        assert registry.query("get_owner", "token") == Address.zero()


class TestPersistence:
    """Tests for state outliving a host."""

    def test_state_persists_across_hosts(self, alice: Address) -> None:
        """A new host over the same store sees earlier publishes."""
        store = InMemoryStore()
        ContractHost(ContractRegistry, store=store).call(
            alice, "publish_latest", "token", ADDRESS_1, "ipfs://v1"
        )
        assert ContractHost(ContractRegistry, store=store).query("get_address", "token") == ADDRESS_1

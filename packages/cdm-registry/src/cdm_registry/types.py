"""Value types stored by the name registry.

- Address: 20-byte account / contract address
- NamedContractInfo: owner and version count of a registered name
- PublishedContract: one immutable published version of a name
"""

from __future__ import annotations

from dataclasses import dataclass, field

# Size in bytes of an account or contract address
ADDRESS_LENGTH = 20

# Upper bound of the registry's u32 counters
U32_MAX = 2**32 - 1


@dataclass(frozen=True, order=True)
class Address:
    """A 20-byte account or contract address.

    The zero address is the default and stands for "unknown" in registry
    reads.

    Example:
        >>> Address.from_hex("0x1")
        Address(0x0000000000000000000000000000000000000001)
        >>> Address.parse(1) == Address.from_hex("0x01")
        True
    """

    raw: bytes = field(default=bytes(ADDRESS_LENGTH))

    def __post_init__(self) -> None:
        if not isinstance(self.raw, bytes) or len(self.raw) != ADDRESS_LENGTH:
            raise ValueError(f"Address must be exactly {ADDRESS_LENGTH} bytes")

    @classmethod
    def zero(cls) -> Address:
        return cls()

    @classmethod
    def from_hex(cls, value: str) -> Address:
        """Parse a hex address, left-padding short values with zeros.

        Raises:
            ValueError: If the value is not hex or longer than 20 bytes.
        """
        digits = value[2:] if value[:2].lower() == "0x" else value
        if len(digits) > ADDRESS_LENGTH * 2:
            raise ValueError(f"Address too long: {value}")
        return cls(bytes.fromhex(digits.rjust(ADDRESS_LENGTH * 2, "0")))

    @classmethod
    def from_int(cls, value: int) -> Address:
        """Build an address from its big-endian integer value.

        Raises:
            ValueError: If the value is negative or does not fit in 20 bytes.
        """
        try:
            return cls(value.to_bytes(ADDRESS_LENGTH, "big"))
        except OverflowError as e:
            raise ValueError(f"Address out of range: {value}") from e

    @classmethod
    def parse(cls, value: Address | str | int | bytes) -> Address:
        """Coerce hex strings, integers and raw bytes into an Address."""
        if isinstance(value, Address):
            return value
        if isinstance(value, str):
            return cls.from_hex(value)
        if isinstance(value, bool):
            raise TypeError("Cannot build an Address from a boolean")
        if isinstance(value, int):
            return cls.from_int(value)
        if isinstance(value, (bytes, bytearray)):
            return cls(bytes(value))
        raise TypeError(f"Cannot build an Address from {type(value).__name__}")

    @property
    def is_zero(self) -> bool:
        return not any(self.raw)

    def __str__(self) -> str:
        return f"0x{self.raw.hex()}"

    def __repr__(self) -> str:
        return f"Address({self})"


@dataclass(frozen=True)
class NamedContractInfo:
    """Ownership record of a registered contract name.

    Attributes:
        owner: The only caller allowed to publish new versions.
        version_count: Number of published versions; ``version_count - 1``
            is the index of the latest one.
    """

    owner: Address = field(default_factory=Address.zero)
    version_count: int = 0

    @property
    def latest_index(self) -> int:
        return max(self.version_count - 1, 0)


@dataclass(frozen=True)
class PublishedContract:
    """One published version of a contract name. Never updated once written."""

    address: Address
    metadata_uri: str

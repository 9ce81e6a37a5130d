"""Models for the files cached per installed contract version.

Each version directory under ``<root>/<target>/contracts/<package>/<version>/``
holds:
- abi.json: the interface description (list of AbiEntry)
- info.json: install record (ContractInfo)
- metadata.json: compiler metadata (opaque to cdm)
"""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field, TypeAdapter

# Mutability levels that never change contract state
READ_ONLY_MUTABILITY = frozenset({"view", "pure"})


class AbiParam(BaseModel):
    """A single input or output parameter of an ABI entry."""

    model_config = ConfigDict(frozen=True, extra="ignore")

    name: str = Field(default="", description="Parameter name (may be empty)")
    type: str = Field(..., min_length=1, description="Solidity ABI type")
    components: list[AbiParam] | None = Field(
        default=None,
        description="Tuple members when type is tuple or tuple[]",
    )

    def canonical_type(self) -> str:
        """Return the type as used in a canonical signature.

        Tuple types are expanded into their component types, keeping any
        array suffix (``tuple[]`` becomes ``(uint256,address)[]``).
        """
        if self.type.startswith("tuple") and self.components is not None:
            inner = ",".join(c.canonical_type() for c in self.components)
            return f"({inner}){self.type[len('tuple'):]}"
        return self.type


class AbiEntry(BaseModel):
    """One entry of an abi.json document.

    Attributes:
        type: Entry kind (function, constructor, event, error, ...).
        name: Entry name, absent for constructors and fallbacks.
        inputs: Input parameters.
        outputs: Output parameters (functions only).
        state_mutability: pure, view, nonpayable or payable.
    """

    model_config = ConfigDict(frozen=True, extra="ignore", populate_by_name=True)

    type: str = Field(..., min_length=1)
    name: str | None = Field(default=None)
    inputs: list[AbiParam] = Field(default_factory=list)
    outputs: list[AbiParam] | None = Field(default=None)
    state_mutability: str | None = Field(default=None, alias="stateMutability")

    @property
    def is_function(self) -> bool:
        return self.type == "function" and bool(self.name)

    @property
    def is_read_only(self) -> bool:
        return self.state_mutability in READ_ONLY_MUTABILITY

    def signature(self) -> str:
        """Return the canonical signature, e.g. ``transfer(address,uint256)``."""
        args = ",".join(p.canonical_type() for p in self.inputs)
        return f"{self.name or ''}({args})"


class ContractInfo(BaseModel):
    """Install record written next to abi.json.

    Attributes:
        name: Package name the contract was installed as.
        chain: Target id the contract was installed from.
        version: Registry version index.
        address: Deployed contract address.
        metadata_cid: Bulletin CID of the contract metadata.
    """

    model_config = ConfigDict(frozen=True, extra="ignore", populate_by_name=True)

    name: str
    chain: str
    version: int = Field(..., ge=0)
    address: str
    metadata_cid: str = Field(..., alias="metadataCid")


# Validator for a whole abi.json document
ABI_DOCUMENT = TypeAdapter(list[AbiEntry])

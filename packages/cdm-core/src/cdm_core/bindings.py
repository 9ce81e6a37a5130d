"""Runtime side of generated contract bindings.

A binding module written by `cdm bind` defines one ContractReference
constant. The reference carries everything resolved at build time (package,
target, version, ABI location, callable methods); the contract address is
looked up at run time from the name registry, so republishing a contract
does not require rebuilding its callers.
"""

from __future__ import annotations

import json
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Protocol

from cdm_core.schemas.artifact import ABI_DOCUMENT, AbiEntry


class AddressLookup(Protocol):
    """Anything that maps a published contract name to its latest address."""

    def get_address(self, contract_name: str) -> Any: ...


@dataclass(frozen=True)
class ContractMethod:
    """A callable function of a bound contract."""

    name: str
    signature: str
    read_only: bool = False


@dataclass(frozen=True)
class ContractReference:
    """Reference to a contract resolved at build time.

    Attributes:
        name: Binding identifier derived from the package name.
        package: Originating package name, also the registry lookup key.
        target: Target id the package was resolved in.
        version: Version the binding was generated from.
        abi_path: Location of the interface description used.
        methods: Callable functions in ABI order.

    Example:
        >>> token = ContractReference(
        ...     name="my_token",
        ...     package="org/my-token",
        ...     target="ab12cd34ef56ab78",
        ...     version=3,
        ...     abi_path="/home/dev/.cdm/ab12cd34ef56ab78/contracts/org/my-token/3/abi.json",
        ... )
        >>> token.address(registry)
    """

    name: str
    package: str
    target: str
    version: int
    abi_path: str
    methods: tuple[ContractMethod, ...] = ()

    @property
    def method_names(self) -> list[str]:
        return [m.name for m in self.methods]

    def method(self, name: str) -> ContractMethod:
        """Get a method by name (the first declared one for overloads).

        Raises:
            KeyError: If the contract has no such method.
        """
        for m in self.methods:
            if m.name == name:
                return m
        available = ", ".join(self.method_names) or "none"
        raise KeyError(f"Contract '{self.package}' has no method '{name}'. Available: {available}")

    def load_abi(self) -> list[AbiEntry]:
        """Read and validate the interface description this binding was built from."""
        data = json.loads(Path(self.abi_path).read_text(encoding="utf-8"))
        return ABI_DOCUMENT.validate_python(data)

    def address(self, registry: AddressLookup) -> Any:
        """Look up the latest published address of this contract."""
        return registry.get_address(self.package)

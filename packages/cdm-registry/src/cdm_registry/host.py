"""Local execution host for contract logic.

The host plays the part of the execution environment:
- owns the persistent KeyValueStore
- serialises invocations, one at a time
- exposes the caller of the current invocation to the contract
- dispatches only methods marked with @message
- commits an invocation's writes on success and discards them on abort

Contract classes are constructed per invocation around a StagedStore and
the CallContext, so they hold no state of their own:

    class Counter:
        def __init__(self, store: KeyValueStore, env: CallEnvironment) -> None:
            self._value = StorageValue(store, "value", default=0)

        @message
        def increment(self) -> None:
            self._value.set(self._value.get() + 1)

    host = ContractHost(Counter)
    host.call(alice, "increment")
"""

from __future__ import annotations

import inspect
import logging
import threading
from collections.abc import Callable
from dataclasses import dataclass
from typing import Any, Protocol, TypeVar

from cdm_registry.errors import ContractAbort, ContractTrapped, UnknownMethodError
from cdm_registry.storage import InMemoryStore, KeyValueStore, StagedStore
from cdm_registry.types import Address

logger = logging.getLogger(__name__)

F = TypeVar("F", bound=Callable[..., Any])

_MESSAGE_ATTR = "__cdm_message__"
_CONSTRUCTOR_ATTR = "__cdm_constructor__"


def message(fn: F) -> F:
    """Mark a contract method as remote-callable."""
    setattr(fn, _MESSAGE_ATTR, True)
    return fn


def constructor(fn: F) -> F:
    """Mark the method run once when the contract is deployed."""
    setattr(fn, _CONSTRUCTOR_ATTR, True)
    return fn


class CallEnvironment(Protocol):
    """What contract code may ask the environment about the current call."""

    @property
    def caller(self) -> Address: ...


@dataclass(frozen=True)
class CallContext:
    """Environment of a single invocation."""

    caller: Address


def _marked_methods(contract_cls: type, attr: str) -> list[str]:
    return sorted(
        name
        for name, fn in inspect.getmembers(contract_cls, inspect.isfunction)
        if getattr(fn, attr, False)
    )


class ContractHost:
    """Runs one deployed contract against a persistent store.

    Attributes:
        contract_cls: Contract class, built as ``contract_cls(store, env)``.
        store: Persistent state of the deployed contract.
        deployer: Caller that deployed the contract.

    Example:
        >>> host = ContractHost(ContractRegistry)
        >>> host.call(alice, "publish_latest", "token", Address.from_hex("0x1"), "ipfs://a")
        >>> host.query("get_address", "token")
        Address(0x0000000000000000000000000000000000000001)
    """

    def __init__(
        self,
        contract_cls: type,
        store: KeyValueStore | None = None,
        deployer: Address | None = None,
    ) -> None:
        """Deploy a contract.

        Args:
            contract_cls: Contract class to host.
            store: Persistent store. Defaults to a fresh InMemoryStore.
            deployer: Caller of the constructor. Defaults to the zero address.

        Raises:
            ContractTrapped: If the constructor aborts.
        """
        self.contract_cls = contract_cls
        self.store: KeyValueStore = store if store is not None else InMemoryStore()
        self.deployer = deployer or Address.zero()
        self._lock = threading.Lock()
        self._messages = frozenset(_marked_methods(contract_cls, _MESSAGE_ATTR))

        constructors = _marked_methods(contract_cls, _CONSTRUCTOR_ATTR)
        for name in constructors:
            self._invoke(self.deployer, name, (), {})

        logger.debug(
            "Deployed %s with %d remote-callable methods",
            contract_cls.__name__,
            len(self._messages),
        )

    @property
    def methods(self) -> list[str]:
        return sorted(self._messages)

    def call(self, caller: Address | str | int, method: str, *args: Any, **kwargs: Any) -> Any:
        """Invoke a contract method as a caller.

        Args:
            caller: Address of the account making the call.
            method: Remote-callable method name.
            *args: Positional method arguments.
            **kwargs: Keyword method arguments.

        Returns:
            Whatever the method returns.

        Raises:
            UnknownMethodError: If the method is not remote-callable.
            ContractTrapped: If the contract aborted; no state changed.
        """
        if method not in self._messages:
            raise UnknownMethodError(method, list(self._messages))
        return self._invoke(Address.parse(caller), method, args, kwargs)

    def query(self, method: str, *args: Any, **kwargs: Any) -> Any:
        """Invoke a method from the zero address, for read-only lookups."""
        return self.call(Address.zero(), method, *args, **kwargs)

    def _invoke(
        self,
        caller: Address,
        method: str,
        args: tuple[Any, ...],
        kwargs: dict[str, Any],
    ) -> Any:
        with self._lock:
            staged = StagedStore(self.store)
            contract = self.contract_cls(staged, CallContext(caller=caller))
            try:
                result = getattr(contract, method)(*args, **kwargs)
            except ContractAbort as e:
                staged.discard()
                logger.warning("Call to %s from %s aborted: %s", method, caller, e.reason)
                raise ContractTrapped(method, e.reason) from e

            # Any other exception propagates with the staged writes dropped
            staged.commit()
            return result

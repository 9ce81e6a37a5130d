"""Exceptions raised by registry contract logic and its host.

- ContractAbort: raised inside contract code to abort the whole invocation
- ContractTrapped: what a caller of the host sees after an abort
- UnknownMethodError: the requested method is not remote-callable
"""

from __future__ import annotations

from cdm_core.errors import RegistryError


class ContractAbort(RegistryError):
    """Raised by contract code to abort the current invocation.

    The host discards every write made during the invocation.

    Attributes:
        reason: Short machine-readable abort reason.
    """

    def __init__(self, reason: str) -> None:
        self.reason = reason
        super().__init__(f"Contract aborted: {reason}")


class ContractTrapped(RegistryError):
    """Raised by the host when an invocation aborted.

    Attributes:
        method: Method that was invoked.
        reason: Abort reason reported by the contract.
    """

    def __init__(self, method: str, reason: str) -> None:
        self.method = method
        self.reason = reason
        super().__init__(
            f"Call to '{method}' trapped: {reason}. No state was changed.",
            internal_details=f"method={method} reason={reason}",
        )


class UnknownMethodError(RegistryError):
    """Raised when a method name is not part of the contract's surface.

    Attributes:
        method: Requested method name.
        available: Remote-callable method names.
    """

    def __init__(self, method: str, available: list[str]) -> None:
        self.method = method
        self.available = sorted(available)
        super().__init__(
            f"Unknown contract method '{method}'. Available: {', '.join(self.available)}"
        )

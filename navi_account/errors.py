"""Error taxonomy for account actions."""
from __future__ import annotations


class NaviError(Exception):
    """Base class for all errors raised by this package."""


class InsufficientBalance(NaviError):
    """Requested amount exceeds what the owned coins of an asset can cover."""

    def __init__(self, coin_type: str, requested: int, available: int) -> None:
        super().__init__(
            f"Insufficient balance for {coin_type}: "
            f"requested {requested}, available {available}"
        )
        self.coin_type = coin_type
        self.requested = requested
        self.available = available


class ArityMismatch(NaviError, ValueError):
    """Paired input sequences differ in length."""

    def __init__(self, left: str, right: str, left_len: int, right_len: int) -> None:
        super().__init__(
            f"{left} and {right} must have the same length "
            f"({left_len} != {right_len})"
        )


class UnknownPool(NaviError, KeyError):
    """No pool is registered for the given symbol."""

    def __init__(self, symbol: str) -> None:
        super().__init__(symbol)
        self.symbol = symbol

    def __str__(self) -> str:
        return f"Pool does not exist: {self.symbol}"


class LedgerLookupError(NaviError, LookupError):
    """A read against the ledger failed or returned a malformed response."""


class SubmissionFailure(NaviError):
    """The ledger rejected a signed transaction. Nothing was applied."""

    def __init__(self, message: str, digest: str = "") -> None:
        super().__init__(message)
        self.digest = digest


class SimulationError(NaviError):
    """A read-only simulation failed or returned an undecodable result."""


class DraftSealedError(NaviError, RuntimeError):
    """A sealed transaction draft was mutated."""

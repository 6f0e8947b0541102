"""Data models — all frozen (immutable)."""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any


@dataclass(frozen=True)
class CoinObject:
    """Single owned coin object of one asset type."""

    object_id: str
    coin_type: str
    balance: int
    version: int = 0
    digest: str = ""


@dataclass(frozen=True)
class ObjectRef:
    """Fully resolved reference to an owned object version."""

    object_id: str
    version: int
    digest: str


@dataclass(frozen=True)
class TransactionResult:
    """Outcome of an executed transaction."""

    digest: str
    status: str
    error: str = ""
    effects: dict[str, Any] = field(default_factory=dict, compare=False)

    @property
    def succeeded(self) -> bool:
        return self.status == "success"


@dataclass(frozen=True)
class ReserveBalance:
    """Borrow and supply balance of an address in one pool, decimal-scaled."""

    borrow_balance: float
    supply_balance: float

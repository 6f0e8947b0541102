"""Ledger client protocol — blockchain RPC abstraction."""
from typing import Any, Protocol

from ..models import CoinObject


class LedgerClient(Protocol):
    """Abstract interface for ledger reads, simulation and dispatch."""

    async def get_coins(self, owner: str, coin_type: str) -> list[CoinObject]: ...

    async def get_all_coins(self, owner: str) -> list[CoinObject]: ...

    async def get_balance(self, owner: str, coin_type: str) -> int: ...

    async def get_coin_metadata(self, coin_type: str) -> dict[str, Any]: ...

    async def multi_get_objects(self, object_ids: list[str]) -> list[dict[str, Any]]: ...

    async def get_dynamic_fields(self, parent_id: str) -> list[dict[str, Any]]: ...

    async def get_dynamic_field_object(
        self, parent_id: str, key_type: str, key_value: Any
    ) -> dict[str, Any]: ...

    async def get_reference_gas_price(self) -> int: ...

    async def dev_inspect(self, sender: str, tx_kind_b64: str) -> dict[str, Any]: ...

    async def execute_transaction(
        self, tx_bytes_b64: str, signatures: list[str]
    ) -> dict[str, Any]: ...

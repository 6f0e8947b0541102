"""Balance reader — decimals, coin listings and totals. Read-only."""
from __future__ import annotations

import logging
from collections.abc import Mapping

from ..assets import Asset, find_pool_by_type, resolve_asset
from ..config import SUI_COIN_TYPE, PoolConfig
from ..errors import LedgerLookupError
from ..interfaces.chain import LedgerClient
from ..models import CoinObject

logger = logging.getLogger(__name__)


class BalanceReader:
    """Resolve how much of an asset an address owns and at what precision."""

    def __init__(self, ledger: LedgerClient, pools: Mapping[str, PoolConfig]) -> None:
        self._ledger = ledger
        self._pools = pools

    async def resolve_decimals(self, asset: Asset) -> int:
        """Registered assets answer from the registry; others from coin metadata."""
        if isinstance(asset, PoolConfig):
            return asset.decimals

        coin_type = resolve_asset(asset, self._pools)
        pool = find_pool_by_type(coin_type, self._pools)
        if pool is not None:
            return pool.decimals

        metadata = await self._ledger.get_coin_metadata(coin_type)
        try:
            return int(metadata["decimals"])
        except (KeyError, TypeError, ValueError) as e:
            raise LedgerLookupError(f"No decimals in metadata for {coin_type}") from e

    async def list_coins(self, address: str, asset: Asset) -> list[CoinObject]:
        """Coin objects in ledger order; the order may differ between calls."""
        coin_type = resolve_asset(asset, self._pools)
        coins = await self._ledger.get_coins(address, coin_type)
        logger.debug("%s owns %d coin objects of %s", address, len(coins), coin_type)
        return coins

    async def total_balance(self, address: str, asset: Asset) -> int:
        return sum(c.balance for c in await self.list_coins(address, asset))

    async def native_balance(self, address: str) -> int:
        """Total gas-asset balance without listing coin objects."""
        return await self._ledger.get_balance(address, SUI_COIN_TYPE)

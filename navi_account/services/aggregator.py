"""Coin aggregator — funnels fragmented coin objects into one spendable handle."""
from __future__ import annotations

import logging

from ..assets import is_native
from ..chains.sui.draft import Input, NestedResult, TransactionDraft
from ..errors import InsufficientBalance
from ..models import CoinObject

logger = logging.getLogger(__name__)


class CoinAggregator:
    """Decide between a gas split and merge-then-split for one asset.

    Non-native coins are folded in list order: the first listed coin is the
    merge target, every other coin is merged into it, then the requested
    amounts are split off the merged coin. Nothing is appended to the draft
    unless the listed coins cover the requested total.
    """

    def split(
        self,
        draft: TransactionDraft,
        coin_type: str,
        amounts: list[int],
        coins: list[CoinObject] | None = None,
    ) -> list[NestedResult]:
        """Append the commands producing one fragment per requested amount."""
        if not amounts:
            raise ValueError("At least one amount is required")
        for amount in amounts:
            if amount <= 0:
                raise ValueError(f"Amounts must be positive: {amount}")

        if is_native(coin_type):
            return draft.split_coins(draft.gas, amounts)

        coins = coins or []
        requested = sum(amounts)
        available = sum(c.balance for c in coins)
        if not coins or available < requested:
            raise InsufficientBalance(coin_type, requested, available)

        merged = self.merge(draft, coins)
        return draft.split_coins(merged, amounts)

    def merge(self, draft: TransactionDraft, coins: list[CoinObject]) -> Input:
        """Fold ``coins[1:]`` into ``coins[0]``; returns the target handle."""
        if not coins:
            raise ValueError("No coins to merge")

        target = draft.object(coins[0].object_id)
        for coin in coins[1:]:
            draft.merge_coins(target, [draft.object(coin.object_id)])

        if len(coins) > 1:
            logger.debug(
                "Merged %d coin objects into %s", len(coins) - 1, coins[0].object_id
            )
        return target

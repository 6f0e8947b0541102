"""Operation sequencer — builds one transaction draft per account action.

Builders only read from the ledger; nothing is submitted here. Every
precondition (paired lengths, registered pool, sufficient balance) is checked
before the first command is appended.
"""
from __future__ import annotations

import logging

from ..assets import Asset, is_native, resolve_asset, resolve_pool
from ..chains.sui.draft import NestedResult, TransactionDraft
from ..config import AppConfig
from ..errors import ArityMismatch, InsufficientBalance
from ..protocols.navi import calls
from .aggregator import CoinAggregator
from .balance import BalanceReader

logger = logging.getLogger(__name__)


def _require_positive(amount: int) -> None:
    if amount <= 0:
        raise ValueError(f"Amount must be positive: {amount}")


class TransactionBuilder:
    """Assemble merge → split → protocol call → transfer sequences."""

    def __init__(
        self,
        reader: BalanceReader,
        config: AppConfig,
        aggregator: CoinAggregator | None = None,
    ) -> None:
        self._reader = reader
        self._config = config
        self._protocol = config.protocol
        self._pools = config.pools
        self._aggregator = aggregator or CoinAggregator()

    # ------------------------------------------------------------------
    # Transfers
    # ------------------------------------------------------------------

    async def send_coin_to_many(
        self,
        sender: str,
        coin_type: Asset,
        recipients: list[str],
        amounts: list[int],
    ) -> TransactionDraft:
        """Split one fragment per recipient and transfer fragment i to recipient i."""
        if len(recipients) != len(amounts):
            raise ArityMismatch("recipients", "amounts", len(recipients), len(amounts))

        coin_type = resolve_asset(coin_type, self._pools)
        requested = sum(amounts)

        if is_native(coin_type):
            # The gas coin pays for the sends and the fee.
            available = await self._reader.native_balance(sender)
            needed = requested + self._config.transaction.gas_budget
            if available <= 0 or available < needed:
                raise InsufficientBalance(coin_type, needed, available)
            coins = None
        else:
            coins = await self._reader.list_coins(sender, coin_type)
            available = sum(c.balance for c in coins)
            if available <= 0 or available < requested:
                raise InsufficientBalance(coin_type, requested, available)

        draft = TransactionDraft(sender)
        fragments = self._aggregator.split(draft, coin_type, amounts, coins)
        for fragment, recipient in zip(fragments, recipients):
            draft.transfer_objects([fragment], recipient)

        logger.debug("Built send of %s to %d recipients", coin_type, len(recipients))
        return draft

    async def send_coin(
        self, sender: str, coin_type: Asset, recipient: str, amount: int
    ) -> TransactionDraft:
        return await self.send_coin_to_many(sender, coin_type, [recipient], [amount])

    def transfer_objects_to_many(
        self, sender: str, objects: list[str], recipients: list[str]
    ) -> TransactionDraft:
        """Whole-object transfers, object i to recipient i."""
        if len(objects) != len(recipients):
            raise ArityMismatch("objects", "recipients", len(objects), len(recipients))

        draft = TransactionDraft(sender)
        for object_id, recipient in zip(objects, recipients):
            draft.transfer_objects([draft.object(object_id)], recipient)
        return draft

    def transfer_object(
        self, sender: str, object_id: str, recipient: str
    ) -> TransactionDraft:
        return self.transfer_objects_to_many(sender, [object_id], [recipient])

    # ------------------------------------------------------------------
    # Supply side
    # ------------------------------------------------------------------

    async def _spendable(
        self, draft: TransactionDraft, sender: str, coin_type: str, amount: int
    ) -> NestedResult:
        """Single spendable fragment of ``amount``; native splits off gas."""
        if is_native(coin_type):
            coins = None
        else:
            coins = await self._reader.list_coins(sender, coin_type)
            if not coins:
                raise InsufficientBalance(coin_type, amount, 0)
        [fragment] = self._aggregator.split(draft, coin_type, [amount], coins)
        return fragment

    async def deposit(
        self, sender: str, coin_type: Asset, amount: int
    ) -> TransactionDraft:
        pool = resolve_pool(coin_type, self._pools)
        draft = TransactionDraft(sender)
        coin = await self._spendable(draft, sender, pool.coin_type, amount)
        calls.deposit_coin(draft, self._protocol, pool, coin, amount)
        logger.debug("Built deposit of %d %s", amount, pool.symbol)
        return draft

    async def deposit_with_account_cap(
        self, sender: str, coin_type: Asset, amount: int, account_cap: str
    ) -> TransactionDraft:
        pool = resolve_pool(coin_type, self._pools)
        draft = TransactionDraft(sender)
        coin = await self._spendable(draft, sender, pool.coin_type, amount)
        calls.deposit_coin_with_account_cap(draft, self._protocol, pool, coin, account_cap)
        logger.debug("Built deposit of %d %s with account cap", amount, pool.symbol)
        return draft

    async def repay(
        self, sender: str, coin_type: Asset, amount: int
    ) -> TransactionDraft:
        pool = resolve_pool(coin_type, self._pools)
        draft = TransactionDraft(sender)
        coin = await self._spendable(draft, sender, pool.coin_type, amount)
        calls.repay_debt(draft, self._protocol, pool, coin, amount)
        logger.debug("Built repay of %d %s", amount, pool.symbol)
        return draft

    # ------------------------------------------------------------------
    # Borrow side
    # ------------------------------------------------------------------

    def withdraw(self, sender: str, coin_type: Asset, amount: int) -> TransactionDraft:
        pool = resolve_pool(coin_type, self._pools)
        _require_positive(amount)
        draft = TransactionDraft(sender)
        calls.withdraw_coin(draft, self._protocol, pool, amount, draft.sender)
        return draft

    def withdraw_with_account_cap(
        self, sender: str, coin_type: Asset, amount: int, account_cap: str
    ) -> TransactionDraft:
        pool = resolve_pool(coin_type, self._pools)
        _require_positive(amount)
        draft = TransactionDraft(sender)
        calls.withdraw_coin_with_account_cap(
            draft, self._protocol, pool, account_cap, amount, draft.sender
        )
        return draft

    def borrow(self, sender: str, coin_type: Asset, amount: int) -> TransactionDraft:
        pool = resolve_pool(coin_type, self._pools)
        _require_positive(amount)
        draft = TransactionDraft(sender)
        calls.borrow_coin(draft, self._protocol, pool, amount, draft.sender)
        return draft

    def create_account_cap(self, sender: str) -> TransactionDraft:
        draft = TransactionDraft(sender)
        cap = calls.create_account(draft, self._protocol)
        draft.transfer_objects([cap], draft.sender)
        return draft

"""Account manager — one derived account wired to reader, builder and pipeline."""
from __future__ import annotations

import asyncio
import logging
from collections import defaultdict
from collections.abc import Mapping
from types import MappingProxyType
from typing import Any

from ..assets import Asset
from ..chains.sui import Ed25519Keypair, SuiClient
from ..chains.sui.draft import TransactionDraft
from ..config import AppConfig, PoolConfig
from ..interfaces.chain import LedgerClient
from ..interfaces.signer import Signer
from ..models import CoinObject, ReserveBalance, TransactionResult
from ..protocols.navi import parser
from .balance import BalanceReader
from .builder import TransactionBuilder
from .health import HealthFactorEvaluator
from .submission import Submitter

logger = logging.getLogger(__name__)


class AccountManager:
    """Balances, lending actions and health queries for one account.

    Concurrent reads (wallet balance, portfolio) fail fast: the first failed
    lookup propagates and the combined result is not returned.
    """

    def __init__(
        self,
        config: AppConfig,
        signer: Signer | None = None,
        ledger: LedgerClient | None = None,
    ) -> None:
        self._config = config
        self._signer = signer or Ed25519Keypair.from_mnemonic(
            config.account.mnemonic, config.account.account_index
        )
        self._ledger = ledger or SuiClient(config.chain)

        self.reader = BalanceReader(self._ledger, config.pools)
        self.builder = TransactionBuilder(self.reader, config)
        self.submitter = Submitter(
            self._ledger, self._signer, config.transaction.gas_budget
        )
        self.health = HealthFactorEvaluator(
            self._ledger, config.protocol, config.pools, self._signer.address
        )

    @property
    def address(self) -> str:
        return self._signer.address

    async def submit(self, draft: TransactionDraft) -> TransactionResult:
        return await self.submitter.submit(draft)

    # ------------------------------------------------------------------
    # Balances
    # ------------------------------------------------------------------

    async def get_all_coins(self) -> list[CoinObject]:
        return await self._ledger.get_all_coins(self.address)

    async def get_coins(self, coin_type: Asset) -> list[CoinObject]:
        return await self.reader.list_coins(self.address, coin_type)

    async def get_coin_decimal(self, coin_type: Asset) -> int:
        return await self.reader.resolve_decimals(coin_type)

    async def get_wallet_balance(self) -> Mapping[str, float]:
        """Coin type → decimal-scaled balance over every owned coin."""
        totals: dict[str, int] = defaultdict(int)
        for coin in await self.get_all_coins():
            totals[coin.coin_type] += coin.balance

        async def scaled(coin_type: str, raw: int) -> tuple[str, float]:
            decimals = await self.reader.resolve_decimals(coin_type)
            return coin_type, parser.scale_amount(raw, decimals)

        pairs = await asyncio.gather(
            *(scaled(coin_type, raw) for coin_type, raw in totals.items())
        )
        return MappingProxyType(dict(pairs))

    # ------------------------------------------------------------------
    # Transfers
    # ------------------------------------------------------------------

    async def send_coin_to_many(
        self, coin_type: Asset, recipients: list[str], amounts: list[int]
    ) -> TransactionResult:
        draft = await self.builder.send_coin_to_many(
            self.address, coin_type, recipients, amounts
        )
        return await self.submit(draft)

    async def send_coin(
        self, coin_type: Asset, recipient: str, amount: int
    ) -> TransactionResult:
        return await self.send_coin_to_many(coin_type, [recipient], [amount])

    async def transfer_objs_to_many(
        self, objects: list[str], recipients: list[str]
    ) -> TransactionResult:
        draft = self.builder.transfer_objects_to_many(self.address, objects, recipients)
        return await self.submit(draft)

    async def transfer_obj(self, object_id: str, recipient: str) -> TransactionResult:
        return await self.transfer_objs_to_many([object_id], [recipient])

    # ------------------------------------------------------------------
    # Lending
    # ------------------------------------------------------------------

    async def create_account_cap(self) -> TransactionResult:
        return await self.submit(self.builder.create_account_cap(self.address))

    async def deposit(self, coin_type: Asset, amount: int) -> TransactionResult:
        draft = await self.builder.deposit(self.address, coin_type, amount)
        return await self.submit(draft)

    async def deposit_with_account_cap(
        self, coin_type: Asset, amount: int, account_cap: str
    ) -> TransactionResult:
        draft = await self.builder.deposit_with_account_cap(
            self.address, coin_type, amount, account_cap
        )
        return await self.submit(draft)

    async def withdraw(self, coin_type: Asset, amount: int) -> TransactionResult:
        return await self.submit(self.builder.withdraw(self.address, coin_type, amount))

    async def withdraw_with_account_cap(
        self, coin_type: Asset, amount: int, account_cap: str
    ) -> TransactionResult:
        draft = self.builder.withdraw_with_account_cap(
            self.address, coin_type, amount, account_cap
        )
        return await self.submit(draft)

    async def borrow(self, coin_type: Asset, amount: int) -> TransactionResult:
        return await self.submit(self.builder.borrow(self.address, coin_type, amount))

    async def repay(self, coin_type: Asset, amount: int) -> TransactionResult:
        draft = await self.builder.repay(self.address, coin_type, amount)
        return await self.submit(draft)

    # ------------------------------------------------------------------
    # Protocol state
    # ------------------------------------------------------------------

    async def get_health_factor(self, address: str | None = None) -> float:
        return await self.health.evaluate(address or self.address)

    async def get_dynamic_health_factor(
        self,
        pool_symbol: str,
        estimate_supply: int = 0,
        estimate_borrow: int = 0,
        is_increase: bool = True,
        address: str | None = None,
    ) -> float:
        return await self.health.evaluate_dynamic(
            address or self.address,
            pool_symbol,
            estimate_supply,
            estimate_borrow,
            is_increase,
        )

    async def get_reserves(self) -> list[dict[str, Any]]:
        return await self._ledger.get_dynamic_fields(self._config.protocol.reserve_parent_id)

    async def get_reserve_detail(self, asset_id: int) -> dict[str, Any]:
        return await self._ledger.get_dynamic_field_object(
            self._config.protocol.reserve_parent_id, "u8", asset_id
        )

    async def _balance_field(self, parent_id: str, address: str) -> int:
        field_object = await self._ledger.get_dynamic_field_object(
            parent_id, "address", address
        )
        value = parser.parse_dynamic_field_value(field_object)
        return value if value is not None else 0

    async def _reserve_balance(
        self, pool: PoolConfig, address: str
    ) -> tuple[str, ReserveBalance]:
        for name in ("borrow_balance_parent_id", "supply_balance_parent_id"):
            if not getattr(pool, name):
                raise ValueError(f"Pool '{pool.symbol}' has no {name} configured")
        borrow_raw, supply_raw = await asyncio.gather(
            self._balance_field(pool.borrow_balance_parent_id, address),
            self._balance_field(pool.supply_balance_parent_id, address),
        )
        return pool.symbol, ReserveBalance(
            borrow_balance=parser.scale_amount(borrow_raw, pool.decimals),
            supply_balance=parser.scale_amount(supply_raw, pool.decimals),
        )

    async def get_portfolio(
        self, address: str | None = None
    ) -> Mapping[str, ReserveBalance]:
        """Pool symbol → borrow/supply balance for every registered pool."""
        address = address or self.address
        pairs = await asyncio.gather(
            *(self._reserve_balance(pool, address) for pool in self._config.pools.values())
        )
        return MappingProxyType(dict(pairs))

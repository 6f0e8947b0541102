"""Health-factor evaluator — read-only simulation of the protocol's risk ratio."""
from __future__ import annotations

import base64
import logging
from collections.abc import Mapping

from ..assets import resolve_pool
from ..chains.sui.draft import TransactionDraft
from ..chains.sui.resolver import build_transaction_kind
from ..config import PoolConfig, ProtocolConfig
from ..interfaces.chain import LedgerClient
from ..protocols.navi import calls, parser

logger = logging.getLogger(__name__)


class HealthFactorEvaluator:
    """Evaluate current or projected health factors. Nothing is cached."""

    def __init__(
        self,
        ledger: LedgerClient,
        protocol: ProtocolConfig,
        pools: Mapping[str, PoolConfig],
        caller: str,
    ) -> None:
        self._ledger = ledger
        self._protocol = protocol
        self._pools = pools
        self._caller = caller

    async def _simulate(self, draft: TransactionDraft) -> int:
        draft.seal()
        kind = await build_transaction_kind(self._ledger, draft)
        result = await self._ledger.dev_inspect(
            self._caller, base64.b64encode(kind).decode()
        )
        return parser.first_return_value(result)

    async def evaluate(self, address: str) -> float:
        draft = TransactionDraft(self._caller)
        calls.user_health_factor(draft, self._protocol, address)
        health_factor = parser.decode_health_factor(await self._simulate(draft))
        logger.debug("Health factor of %s: %s", address, health_factor)
        return health_factor

    async def evaluate_dynamic(
        self,
        address: str,
        pool_symbol: str,
        estimate_supply: int = 0,
        estimate_borrow: int = 0,
        is_increase: bool = True,
    ) -> float:
        """Health factor after a hypothetical supply or borrow change."""
        pool = resolve_pool(pool_symbol, self._pools)
        draft = TransactionDraft(self._caller)
        calls.dynamic_health_factor(
            draft,
            self._protocol,
            pool,
            address,
            estimate_supply,
            estimate_borrow,
            is_increase,
        )
        health_factor = parser.decode_health_factor(await self._simulate(draft))

        if estimate_supply > 0:
            logger.info(
                "With estimated supply change %d, %s health factor is %s",
                estimate_supply, address, health_factor,
            )
        elif estimate_borrow > 0:
            logger.info(
                "With estimated borrow change %d, %s health factor is %s",
                estimate_borrow, address, health_factor,
            )
        return health_factor

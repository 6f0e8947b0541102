"""Submission pipeline — sign a finished draft and dispatch it atomically."""
from __future__ import annotations

import base64
import logging
from typing import Any

from ..chains.sui.draft import TransactionDraft
from ..chains.sui.resolver import build_transaction_data
from ..errors import SubmissionFailure
from ..interfaces.chain import LedgerClient
from ..interfaces.signer import Signer
from ..models import TransactionResult

logger = logging.getLogger(__name__)


def parse_execution(response: dict[str, Any]) -> TransactionResult:
    """Build a TransactionResult from a ``sui_executeTransactionBlock`` reply."""
    effects = response.get("effects") or {}
    status = effects.get("status") or {}
    return TransactionResult(
        digest=response.get("digest", ""),
        status=status.get("status", "unknown"),
        error=status.get("error", ""),
        effects=effects,
    )


class Submitter:
    """Sets the sender, signs, and executes one draft. No retries."""

    def __init__(self, ledger: LedgerClient, signer: Signer, gas_budget: int) -> None:
        self._ledger = ledger
        self._signer = signer
        self._gas_budget = gas_budget

    async def submit(self, draft: TransactionDraft) -> TransactionResult:
        """Submit ``draft``; the draft is sealed and must not be reused.

        Raises:
            SubmissionFailure: the ledger rejected the transaction, or it ran
                and failed. Either way no state changed.
        """
        draft.set_sender_if_not_set(self._signer.address)
        draft.seal()

        tx_bytes = await build_transaction_data(self._ledger, draft, self._gas_budget)
        signature = self._signer.sign_transaction(tx_bytes)

        response = await self._ledger.execute_transaction(
            base64.b64encode(tx_bytes).decode(), [signature]
        )
        result = parse_execution(response)

        if not result.succeeded:
            logger.error("Transaction %s failed: %s", result.digest, result.error)
            raise SubmissionFailure(
                result.error or f"Transaction status: {result.status}",
                digest=result.digest,
            )

        logger.info("Transaction %s executed", result.digest)
        return result

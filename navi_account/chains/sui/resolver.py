"""Resolve draft inputs against the ledger and serialize the transaction."""
from __future__ import annotations

import logging
from typing import Any

from ...assets import normalize_address
from ...config import SUI_COIN_TYPE
from ...errors import InsufficientBalance, LedgerLookupError
from ...interfaces.chain import LedgerClient
from ...models import ObjectRef
from .bcs import (
    OwnedObjectArg,
    ResolvedInput,
    SharedObjectArg,
    encode_transaction_data,
    encode_transaction_kind,
)
from .draft import ObjectInput, PureInput, TransactionDraft

logger = logging.getLogger(__name__)

MAX_GAS_OBJECTS = 255


def _object_arg(data: dict[str, Any], value: ObjectInput) -> ResolvedInput:
    owner = data.get("owner")
    if isinstance(owner, dict) and "Shared" in owner:
        return SharedObjectArg(
            object_id=value.object_id,
            initial_shared_version=int(owner["Shared"]["initial_shared_version"]),
            mutable=value.mutable,
        )
    return OwnedObjectArg(
        ObjectRef(
            object_id=value.object_id,
            version=int(data["version"]),
            digest=data["digest"],
        )
    )


async def resolve_inputs(
    ledger: LedgerClient, draft: TransactionDraft
) -> list[ResolvedInput]:
    """Turn object ids into shared or owned object arguments."""
    object_ids = list(dict.fromkeys(draft.object_ids()))
    by_id: dict[str, dict[str, Any]] = {}

    if object_ids:
        for obj in await ledger.multi_get_objects(object_ids):
            data = obj.get("data")
            if not data:
                raise LedgerLookupError(f"Object lookup failed: {obj.get('error', obj)}")
            by_id[normalize_address(data["objectId"])] = data

    resolved: list[ResolvedInput] = []
    for value in draft.inputs:
        if isinstance(value, PureInput):
            resolved.append(value)
            continue
        data = by_id.get(value.object_id)
        if data is None:
            raise LedgerLookupError(f"Object not found: {value.object_id}")
        try:
            resolved.append(_object_arg(data, value))
        except (KeyError, TypeError, ValueError) as e:
            raise LedgerLookupError(
                f"Malformed object {value.object_id}: {e}"
            ) from e
    return resolved


async def select_gas_payment(
    ledger: LedgerClient, draft: TransactionDraft, gas_budget: int
) -> list[ObjectRef]:
    """Pick SUI coins of the sender that the draft does not use as inputs."""
    in_use = set(draft.object_ids())
    coins = [
        c
        for c in await ledger.get_coins(draft.sender, SUI_COIN_TYPE)
        if normalize_address(c.object_id) not in in_use
    ][:MAX_GAS_OBJECTS]

    total = sum(c.balance for c in coins)
    if total < gas_budget:
        raise InsufficientBalance(SUI_COIN_TYPE, gas_budget, total)

    return [ObjectRef(c.object_id, c.version, c.digest) for c in coins]


async def build_transaction_kind(
    ledger: LedgerClient, draft: TransactionDraft
) -> bytes:
    inputs = await resolve_inputs(ledger, draft)
    return encode_transaction_kind(inputs, draft.commands)


async def build_transaction_data(
    ledger: LedgerClient, draft: TransactionDraft, gas_budget: int
) -> bytes:
    """Serialize a complete ``TransactionData`` for signing."""
    if draft.sender is None:
        raise ValueError("Transaction draft has no sender")

    kind = await build_transaction_kind(ledger, draft)
    gas_payment = await select_gas_payment(ledger, draft, gas_budget)
    gas_price = await ledger.get_reference_gas_price()

    logger.debug(
        "Transaction: %d commands, %d gas objects, price %d, budget %d",
        len(draft.commands), len(gas_payment), gas_price, gas_budget,
    )
    return encode_transaction_data(kind, draft.sender, gas_payment, gas_price, gas_budget)

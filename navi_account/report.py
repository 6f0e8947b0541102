"""Plain-text rendering of account data for the CLI."""
from __future__ import annotations

from collections.abc import Mapping

from .assets import find_pool_by_type
from .chains.sui.draft import TransactionDraft
from .config import PoolConfig
from .models import CoinObject, ReserveBalance, TransactionResult


def format_coins(coins: list[CoinObject]) -> str:
    if not coins:
        return "No coins found."
    return "\n".join(
        f"Coin Type: {c.coin_type} | Obj id: {c.object_id} | Balance: {c.balance}"
        for c in coins
    )


def format_wallet_balance(
    balances: Mapping[str, float], pools: Mapping[str, PoolConfig]
) -> str:
    lines: list[str] = []
    for coin_type, balance in sorted(balances.items()):
        pool = find_pool_by_type(coin_type, pools)
        if pool is not None:
            lines.append(f"Coin Type: {pool.symbol} | Balance: {balance}")
        else:
            lines.append(f"Unknown Coin Type: {coin_type} | Balance: {balance}")
    return "\n".join(lines) if lines else "No coins found."


def format_portfolio(portfolio: Mapping[str, ReserveBalance]) -> str:
    lines = [
        "| Reserve Name | Borrow Balance | Supply Balance |",
        "|--------------|----------------|----------------|",
    ]
    for name, balance in sorted(portfolio.items()):
        lines.append(
            f"| {name} | {balance.borrow_balance} | {balance.supply_balance} |"
        )
    return "\n".join(lines)


def format_health_factor(
    address: str,
    health_factor: float,
    estimate_supply: int = 0,
    estimate_borrow: int = 0,
) -> str:
    if estimate_supply > 0:
        prefix = f"With estimated supply change {estimate_supply}, "
    elif estimate_borrow > 0:
        prefix = f"With estimated borrow change {estimate_borrow}, "
    else:
        prefix = ""
    return f"{prefix}address {address} health factor is {health_factor}"


def format_draft(draft: TransactionDraft) -> str:
    lines = [f"Sender: {draft.sender}", "Inputs:"]
    lines += [f"  [{i}] {value}" for i, value in enumerate(draft.inputs)]
    lines.append("Commands:")
    lines += [f"  [{i}] {command}" for i, command in enumerate(draft.commands)]
    return "\n".join(lines)


def format_result(result: TransactionResult) -> str:
    return f"Transaction {result.digest}: {result.status}"

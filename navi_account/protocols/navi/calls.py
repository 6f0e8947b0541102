"""NAVI protocol call builders — append Move calls to a draft, no I/O.

Supply-side builders take a coin argument; borrow-side builders produce a
coin that is transferred back to the recipient.
"""
from __future__ import annotations

from ...chains.sui.draft import Argument, Result, TransactionDraft
from ...config import PoolConfig, ProtocolConfig

COIN_FROM_BALANCE = "0x2::coin::from_balance"


def _target(protocol: ProtocolConfig, module: str, function: str) -> str:
    return f"{protocol.package_id}::{module}::{function}"


def _clock(draft: TransactionDraft, protocol: ProtocolConfig) -> Argument:
    return draft.object(protocol.clock_id, mutable=False)


def deposit_coin(
    draft: TransactionDraft,
    protocol: ProtocolConfig,
    pool: PoolConfig,
    coin: Argument,
    amount: int,
) -> None:
    draft.move_call(
        _target(protocol, "incentive_v2", "entry_deposit"),
        [
            _clock(draft, protocol),
            draft.object(protocol.storage_id),
            draft.object(pool.pool_id),
            draft.pure_u8(pool.asset_id),
            coin,
            draft.pure_u64(amount),
            draft.object(protocol.incentive_v1_id),
            draft.object(protocol.incentive_v2_id),
        ],
        [pool.coin_type],
    )


def deposit_coin_with_account_cap(
    draft: TransactionDraft,
    protocol: ProtocolConfig,
    pool: PoolConfig,
    coin: Argument,
    account_cap: str,
) -> None:
    draft.move_call(
        _target(protocol, "incentive_v2", "deposit_with_account_cap"),
        [
            _clock(draft, protocol),
            draft.object(protocol.storage_id),
            draft.object(pool.pool_id),
            draft.pure_u8(pool.asset_id),
            coin,
            draft.object(protocol.incentive_v1_id),
            draft.object(protocol.incentive_v2_id),
            draft.object(account_cap),
        ],
        [pool.coin_type],
    )


def _balance_to_recipient(
    draft: TransactionDraft, pool: PoolConfig, balance: Result, recipient: str
) -> None:
    coin = draft.move_call(COIN_FROM_BALANCE, [balance], [pool.coin_type])
    draft.transfer_objects([coin], recipient)


def withdraw_coin(
    draft: TransactionDraft,
    protocol: ProtocolConfig,
    pool: PoolConfig,
    amount: int,
    recipient: str,
) -> None:
    balance = draft.move_call(
        _target(protocol, "incentive_v2", "withdraw"),
        [
            _clock(draft, protocol),
            draft.object(protocol.price_oracle_id),
            draft.object(protocol.storage_id),
            draft.object(pool.pool_id),
            draft.pure_u8(pool.asset_id),
            draft.pure_u64(amount),
            draft.object(protocol.incentive_v1_id),
            draft.object(protocol.incentive_v2_id),
        ],
        [pool.coin_type],
    )
    _balance_to_recipient(draft, pool, balance, recipient)


def withdraw_coin_with_account_cap(
    draft: TransactionDraft,
    protocol: ProtocolConfig,
    pool: PoolConfig,
    account_cap: str,
    amount: int,
    recipient: str,
) -> None:
    balance = draft.move_call(
        _target(protocol, "incentive_v2", "withdraw_with_account_cap"),
        [
            _clock(draft, protocol),
            draft.object(protocol.price_oracle_id),
            draft.object(protocol.storage_id),
            draft.object(pool.pool_id),
            draft.pure_u8(pool.asset_id),
            draft.pure_u64(amount),
            draft.object(protocol.incentive_v1_id),
            draft.object(protocol.incentive_v2_id),
            draft.object(account_cap),
        ],
        [pool.coin_type],
    )
    _balance_to_recipient(draft, pool, balance, recipient)


def borrow_coin(
    draft: TransactionDraft,
    protocol: ProtocolConfig,
    pool: PoolConfig,
    amount: int,
    recipient: str,
) -> None:
    balance = draft.move_call(
        _target(protocol, "incentive_v2", "borrow"),
        [
            _clock(draft, protocol),
            draft.object(protocol.price_oracle_id),
            draft.object(protocol.storage_id),
            draft.object(pool.pool_id),
            draft.pure_u8(pool.asset_id),
            draft.pure_u64(amount),
            draft.object(protocol.incentive_v2_id),
        ],
        [pool.coin_type],
    )
    _balance_to_recipient(draft, pool, balance, recipient)


def repay_debt(
    draft: TransactionDraft,
    protocol: ProtocolConfig,
    pool: PoolConfig,
    coin: Argument,
    amount: int,
) -> None:
    draft.move_call(
        _target(protocol, "incentive_v2", "entry_repay"),
        [
            _clock(draft, protocol),
            draft.object(protocol.price_oracle_id),
            draft.object(protocol.storage_id),
            draft.object(pool.pool_id),
            draft.pure_u8(pool.asset_id),
            coin,
            draft.pure_u64(amount),
            draft.object(protocol.incentive_v2_id),
        ],
        [pool.coin_type],
    )


def create_account(draft: TransactionDraft, protocol: ProtocolConfig) -> Result:
    return draft.move_call(_target(protocol, "lending", "create_account"))


def user_health_factor(
    draft: TransactionDraft, protocol: ProtocolConfig, address: str
) -> Result:
    return draft.move_call(
        _target(protocol, "logic", "user_health_factor"),
        [
            _clock(draft, protocol),
            draft.object(protocol.storage_id),
            draft.object(protocol.price_oracle_id),
            draft.pure_address(address),
        ],
    )


def dynamic_health_factor(
    draft: TransactionDraft,
    protocol: ProtocolConfig,
    pool: PoolConfig,
    address: str,
    estimate_supply: int,
    estimate_borrow: int,
    is_increase: bool,
) -> Result:
    return draft.move_call(
        _target(protocol, "dynamic_calculator", "dynamic_health_factor"),
        [
            _clock(draft, protocol),
            draft.object(protocol.storage_id),
            draft.object(protocol.price_oracle_id),
            draft.object(pool.pool_id),
            draft.pure_address(address),
            draft.pure_u8(pool.asset_id),
            draft.pure_u64(estimate_supply),
            draft.pure_u64(estimate_borrow),
            draft.pure_bool(is_increase),
        ],
        [pool.coin_type],
    )

"""Configuration loader — reads config.yaml, interpolates env vars, validates."""
from __future__ import annotations

import logging
import os
import re
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

import yaml
from dotenv import load_dotenv

logger = logging.getLogger(__name__)

SUI_COIN_TYPE = "0x2::sui::SUI"
CLOCK_OBJECT_ID = "0x6"

# ---------------------------------------------------------------------------
# Frozen config dataclasses
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class ChainConfig:
    rpc_endpoints: tuple[str, ...] = ()
    rpc_timeout: int = 30


@dataclass(frozen=True)
class AccountConfig:
    mnemonic: str = ""
    account_index: int = 0


@dataclass(frozen=True)
class ProtocolConfig:
    """On-chain object ids of the lending protocol."""

    package_id: str = ""
    storage_id: str = ""
    price_oracle_id: str = ""
    incentive_v1_id: str = ""
    incentive_v2_id: str = ""
    reserve_parent_id: str = ""
    clock_id: str = CLOCK_OBJECT_ID


@dataclass(frozen=True)
class TransactionConfig:
    gas_budget: int = 50_000_000


@dataclass(frozen=True)
class PoolConfig:
    """Registry entry for one lending pool."""

    symbol: str
    coin_type: str
    decimals: int
    pool_id: str
    asset_id: int
    borrow_balance_parent_id: str = ""
    supply_balance_parent_id: str = ""


@dataclass(frozen=True)
class AppConfig:
    chain: ChainConfig = field(default_factory=ChainConfig)
    account: AccountConfig = field(default_factory=AccountConfig)
    protocol: ProtocolConfig = field(default_factory=ProtocolConfig)
    transaction: TransactionConfig = field(default_factory=TransactionConfig)
    pools: dict[str, PoolConfig] = field(default_factory=dict)


# ---------------------------------------------------------------------------
# Env interpolation
# ---------------------------------------------------------------------------

_ENV_VAR_RE = re.compile(r"\$\{([^}]+)}")


def _interpolate_env(value: Any) -> Any:
    """Recursively replace ${VAR} references with environment variable values."""
    if isinstance(value, str):
        return _ENV_VAR_RE.sub(lambda m: os.environ.get(m.group(1), ""), value)
    if isinstance(value, dict):
        return {k: _interpolate_env(v) for k, v in value.items()}
    if isinstance(value, list):
        return [_interpolate_env(item) for item in value]
    return value


# ---------------------------------------------------------------------------
# YAML → dataclass builders
# ---------------------------------------------------------------------------


def _build_chain(raw: dict[str, Any]) -> ChainConfig:
    return ChainConfig(
        rpc_endpoints=tuple(raw.get("rpc_endpoints", [])),
        rpc_timeout=int(raw.get("rpc_timeout", 30)),
    )


def _build_account(raw: dict[str, Any]) -> AccountConfig:
    return AccountConfig(
        mnemonic=str(raw.get("mnemonic", "")).strip(),
        account_index=int(raw.get("account_index", 0) or 0),
    )


def _build_protocol(raw: dict[str, Any]) -> ProtocolConfig:
    return ProtocolConfig(
        package_id=raw.get("package_id", ""),
        storage_id=raw.get("storage_id", ""),
        price_oracle_id=raw.get("price_oracle_id", ""),
        incentive_v1_id=raw.get("incentive_v1_id", ""),
        incentive_v2_id=raw.get("incentive_v2_id", ""),
        reserve_parent_id=raw.get("reserve_parent_id", ""),
        clock_id=raw.get("clock_id", CLOCK_OBJECT_ID),
    )


def _build_transaction(raw: dict[str, Any]) -> TransactionConfig:
    return TransactionConfig(gas_budget=int(raw.get("gas_budget", 50_000_000)))


def _build_pools(raw: dict[str, Any]) -> dict[str, PoolConfig]:
    pools: dict[str, PoolConfig] = {}
    for symbol, cfg in raw.items():
        pools[symbol] = PoolConfig(
            symbol=symbol,
            coin_type=cfg.get("coin_type", ""),
            decimals=int(cfg.get("decimals", 9)),
            pool_id=cfg.get("pool_id", ""),
            asset_id=int(cfg.get("asset_id", 0)),
            borrow_balance_parent_id=cfg.get("borrow_balance_parent_id", ""),
            supply_balance_parent_id=cfg.get("supply_balance_parent_id", ""),
        )
    return pools


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------


def load_config(config_path: str | Path | None = None) -> AppConfig:
    """Load and validate application configuration from YAML + .env.

    Args:
        config_path: Path to config.yaml. Defaults to ``config.yaml`` in the
            project root (two levels up from this file).
    """
    load_dotenv()

    if config_path is None:
        config_path = Path(__file__).resolve().parent.parent / "config.yaml"
    config_path = Path(config_path)

    if not config_path.exists():
        raise FileNotFoundError(f"Config file not found: {config_path}")

    with open(config_path) as f:
        raw = yaml.safe_load(f) or {}

    raw = _interpolate_env(raw)

    cfg = AppConfig(
        chain=_build_chain(raw.get("chain", {})),
        account=_build_account(raw.get("account", {})),
        protocol=_build_protocol(raw.get("protocol", {})),
        transaction=_build_transaction(raw.get("transaction", {})),
        pools=_build_pools(raw.get("pools", {})),
    )

    _validate(cfg)
    logger.info("Configuration loaded from %s", config_path)
    return cfg


def _validate(cfg: AppConfig) -> None:
    """Raise on invalid configuration."""
    if not cfg.chain.rpc_endpoints:
        raise ValueError("At least one RPC endpoint must be configured")

    if not cfg.protocol.package_id:
        raise ValueError("Protocol package_id is not configured")

    if cfg.account.account_index < 0:
        raise ValueError("account_index must be non-negative")

    if cfg.transaction.gas_budget <= 0:
        raise ValueError("gas_budget must be positive")

    for symbol, pool in cfg.pools.items():
        if not pool.pool_id:
            raise ValueError(f"Pool '{symbol}' has no pool_id")
        if not pool.coin_type:
            raise ValueError(f"Pool '{symbol}' has no coin_type")

"""Asset resolution — turns a symbol, pool or type tag into one canonical type tag."""
from __future__ import annotations

from collections.abc import Mapping

from .config import SUI_COIN_TYPE, PoolConfig
from .errors import UnknownPool

Asset = str | PoolConfig


def normalize_address(address: str) -> str:
    """Return ``0x`` + 64 lowercase hex chars.

    Examples:
        "0x2" → "0x0000…0002"
    """
    hex_part = address.lower()
    if hex_part.startswith("0x"):
        hex_part = hex_part[2:]
    if not hex_part or len(hex_part) > 64:
        raise ValueError(f"Invalid address: {address!r}")
    int(hex_part, 16)
    return "0x" + hex_part.rjust(64, "0")


def normalize_type_tag(coin_type: str) -> str:
    """Pad the leading address of a ``addr::module::Name`` type tag."""
    address, sep, rest = coin_type.partition("::")
    if not sep:
        raise ValueError(f"Not a type tag: {coin_type!r}")
    return f"{normalize_address(address)}::{rest}"


def is_type_tag(value: str) -> bool:
    return "::" in value


_NATIVE_TYPE = normalize_type_tag(SUI_COIN_TYPE)


def is_native(coin_type: str) -> bool:
    """True for the gas asset, whatever the address padding."""
    return normalize_type_tag(coin_type) == _NATIVE_TYPE


def resolve_pool(asset: Asset, pools: Mapping[str, PoolConfig]) -> PoolConfig:
    """Resolve a symbol, a type tag or a pool to the registered pool."""
    if isinstance(asset, PoolConfig):
        return asset
    if is_type_tag(asset):
        pool = find_pool_by_type(asset, pools)
    else:
        pool = pools.get(asset)
    if pool is None:
        raise UnknownPool(asset)
    return pool


def resolve_asset(asset: Asset, pools: Mapping[str, PoolConfig]) -> str:
    """Normalize any accepted asset shape to a canonical type tag.

    Accepted shapes:
        PoolConfig            → its coin type
        "0x…::module::Name"   → the type tag itself
        "SUI" (a pool symbol) → the registered pool's coin type
    """
    if isinstance(asset, PoolConfig):
        return normalize_type_tag(asset.coin_type)
    if is_type_tag(asset):
        return normalize_type_tag(asset)
    return normalize_type_tag(resolve_pool(asset, pools).coin_type)


def find_pool_by_type(
    coin_type: str, pools: Mapping[str, PoolConfig]
) -> PoolConfig | None:
    wanted = normalize_type_tag(coin_type)
    for pool in pools.values():
        if normalize_type_tag(pool.coin_type) == wanted:
            return pool
    return None

"""Pure parsing functions for NAVI responses — no I/O."""
from __future__ import annotations

from typing import Any

from ...chains.sui.bcs import decode_uint_le
from ...errors import SimulationError

HEALTH_FACTOR_DECIMALS = 27


def get_token_symbol(coin_type: str) -> str:
    """Extract token symbol from a SUI coin type string.

    Examples:
        "0x2::sui::SUI" → "SUI"
        "0xabc::coin::COIN" → "COIN"
    """
    if "::" in coin_type:
        return coin_type.split("::")[-1].upper()
    return coin_type.upper()


def scale_amount(raw_amount: int, decimals: int) -> float:
    """Convert a smallest-unit integer to a decimal amount."""
    return raw_amount / (10**decimals)


def decode_health_factor(raw: int) -> float:
    """health_factor = raw / 10^27"""
    return raw / (10**HEALTH_FACTOR_DECIMALS)


def first_return_value(inspect_result: dict[str, Any]) -> int:
    """Decode the first return value of the first command of a devInspect run.

    Raises:
        SimulationError: the run failed or the result has an unexpected shape.
    """
    if inspect_result.get("error"):
        raise SimulationError(f"Simulation failed: {inspect_result['error']}")

    status = inspect_result.get("effects", {}).get("status", {})
    if status and status.get("status") != "success":
        raise SimulationError(f"Simulation failed: {status.get('error', status)}")

    try:
        value_bytes, _value_type = inspect_result["results"][0]["returnValues"][0]
        return decode_uint_le(value_bytes)
    except (KeyError, IndexError, TypeError, ValueError) as e:
        raise SimulationError(f"Undecodable simulation result: {e}") from e


def parse_dynamic_field_value(field_object: dict[str, Any]) -> int | None:
    """Read ``content.fields.value`` of a dynamic field object, if present."""
    value = field_object.get("content", {}).get("fields", {}).get("value")
    if value is None:
        return None
    return int(value)

"""BCS encoding of Sui programmable transactions — pure functions, no I/O.

Layouts follow the Sui ``TransactionData::V1`` wire format:

    TransactionData  = V1 { kind, sender, gas_data, expiration }
    TransactionKind  = ProgrammableTransaction { inputs, commands }
    CallArg          = Pure(bytes) | Object(ObjectArg)
    ObjectArg        = ImmOrOwned(ObjectRef) | Shared { id, version, mutable }
"""
from __future__ import annotations

import struct
from dataclasses import dataclass

import base58

from ...assets import normalize_address
from ...models import ObjectRef
from .draft import (
    Argument,
    Command,
    GasCoin,
    Input,
    MergeCoins,
    MoveCall,
    NestedResult,
    PureInput,
    Result,
    SplitCoins,
    TransferObjects,
)

INTENT_TRANSACTION = b"\x00\x00\x00"


@dataclass(frozen=True)
class OwnedObjectArg:
    ref: ObjectRef


@dataclass(frozen=True)
class SharedObjectArg:
    object_id: str
    initial_shared_version: int
    mutable: bool


ResolvedInput = PureInput | OwnedObjectArg | SharedObjectArg


class BcsWriter:
    """Append-only BCS byte buffer."""

    def __init__(self) -> None:
        self._buf = bytearray()

    def getvalue(self) -> bytes:
        return bytes(self._buf)

    def raw(self, data: bytes) -> BcsWriter:
        self._buf += data
        return self

    def uleb128(self, value: int) -> BcsWriter:
        if value < 0:
            raise ValueError("uleb128 value must be non-negative")
        while True:
            byte = value & 0x7F
            value >>= 7
            if value:
                self._buf.append(byte | 0x80)
            else:
                self._buf.append(byte)
                return self

    def u8(self, value: int) -> BcsWriter:
        return self.raw(struct.pack("<B", value))

    def u16(self, value: int) -> BcsWriter:
        return self.raw(struct.pack("<H", value))

    def u64(self, value: int) -> BcsWriter:
        return self.raw(struct.pack("<Q", value))

    def boolean(self, value: bool) -> BcsWriter:
        return self.u8(1 if value else 0)

    def byte_vector(self, data: bytes) -> BcsWriter:
        """Length-prefixed byte vector."""
        return self.uleb128(len(data)).raw(data)

    def string(self, value: str) -> BcsWriter:
        return self.byte_vector(value.encode("utf-8"))

    def address(self, address: str) -> BcsWriter:
        return self.raw(bytes.fromhex(normalize_address(address)[2:]))


# ---------------------------------------------------------------------------
# Type tags
# ---------------------------------------------------------------------------

_PRIMITIVE_TAGS = {
    "bool": 0,
    "u8": 1,
    "u64": 2,
    "u128": 3,
    "address": 4,
    "signer": 5,
    "u16": 8,
    "u32": 9,
    "u256": 10,
}
_VECTOR_TAG = 6
_STRUCT_TAG = 7


def _split_type_params(params: str) -> list[str]:
    """Split ``A, B<C, D>`` at top-level commas."""
    parts: list[str] = []
    depth = 0
    current = ""
    for ch in params:
        if ch == "<":
            depth += 1
        elif ch == ">":
            depth -= 1
        if ch == "," and depth == 0:
            parts.append(current.strip())
            current = ""
        else:
            current += ch
    if current.strip():
        parts.append(current.strip())
    return parts


def write_type_tag(writer: BcsWriter, type_tag: str) -> None:
    """Encode a Move type tag such as ``0x2::coin::Coin<0x2::sui::SUI>``."""
    tag = type_tag.strip()
    if tag in _PRIMITIVE_TAGS:
        writer.u8(_PRIMITIVE_TAGS[tag])
        return
    if tag.startswith("vector<") and tag.endswith(">"):
        writer.u8(_VECTOR_TAG)
        write_type_tag(writer, tag[len("vector<"):-1])
        return

    params: list[str] = []
    if "<" in tag:
        if not tag.endswith(">"):
            raise ValueError(f"Malformed type tag: {type_tag!r}")
        head, _, inner = tag.partition("<")
        params = _split_type_params(inner[:-1])
    else:
        head = tag

    parts = head.split("::")
    if len(parts) != 3:
        raise ValueError(f"Malformed type tag: {type_tag!r}")
    address, module, name = parts

    writer.u8(_STRUCT_TAG)
    writer.address(address).string(module).string(name)
    writer.uleb128(len(params))
    for param in params:
        write_type_tag(writer, param)


# ---------------------------------------------------------------------------
# Arguments, inputs and commands
# ---------------------------------------------------------------------------


def write_argument(writer: BcsWriter, arg: Argument) -> None:
    if isinstance(arg, GasCoin):
        writer.u8(0)
    elif isinstance(arg, Input):
        writer.u8(1).u16(arg.index)
    elif isinstance(arg, Result):
        writer.u8(2).u16(arg.index)
    elif isinstance(arg, NestedResult):
        writer.u8(3).u16(arg.index).u16(arg.result_index)
    else:
        raise TypeError(f"Unsupported argument: {arg!r}")


def write_object_ref(writer: BcsWriter, ref: ObjectRef) -> None:
    digest = base58.b58decode(ref.digest)
    writer.address(ref.object_id).u64(ref.version).byte_vector(digest)


def write_call_arg(writer: BcsWriter, value: ResolvedInput) -> None:
    if isinstance(value, PureInput):
        writer.u8(0).byte_vector(value.value)
    elif isinstance(value, OwnedObjectArg):
        writer.u8(1).u8(0)
        write_object_ref(writer, value.ref)
    elif isinstance(value, SharedObjectArg):
        writer.u8(1).u8(1)
        writer.address(value.object_id).u64(value.initial_shared_version)
        writer.boolean(value.mutable)
    else:
        raise TypeError(f"Unresolved input: {value!r}")


def _write_arguments(writer: BcsWriter, args: tuple[Argument, ...]) -> None:
    writer.uleb128(len(args))
    for arg in args:
        write_argument(writer, arg)


def write_command(writer: BcsWriter, command: Command) -> None:
    if isinstance(command, MoveCall):
        writer.u8(0)
        writer.address(command.package).string(command.module).string(command.function)
        writer.uleb128(len(command.type_arguments))
        for type_arg in command.type_arguments:
            write_type_tag(writer, type_arg)
        _write_arguments(writer, command.arguments)
    elif isinstance(command, TransferObjects):
        writer.u8(1)
        _write_arguments(writer, command.objects)
        write_argument(writer, command.recipient)
    elif isinstance(command, SplitCoins):
        writer.u8(2)
        write_argument(writer, command.coin)
        _write_arguments(writer, command.amounts)
    elif isinstance(command, MergeCoins):
        writer.u8(3)
        write_argument(writer, command.destination)
        _write_arguments(writer, command.sources)
    else:
        raise TypeError(f"Unsupported command: {command!r}")


# ---------------------------------------------------------------------------
# Transaction kind / data
# ---------------------------------------------------------------------------


def encode_transaction_kind(
    inputs: list[ResolvedInput], commands: tuple[Command, ...]
) -> bytes:
    """Encode a ``TransactionKind::ProgrammableTransaction``."""
    writer = BcsWriter()
    writer.u8(0)
    writer.uleb128(len(inputs))
    for value in inputs:
        write_call_arg(writer, value)
    writer.uleb128(len(commands))
    for command in commands:
        write_command(writer, command)
    return writer.getvalue()


def encode_transaction_data(
    kind: bytes,
    sender: str,
    gas_payment: list[ObjectRef],
    gas_price: int,
    gas_budget: int,
) -> bytes:
    """Encode ``TransactionData::V1`` with no expiration."""
    writer = BcsWriter()
    writer.u8(0)
    writer.raw(kind)
    writer.address(sender)
    writer.uleb128(len(gas_payment))
    for ref in gas_payment:
        write_object_ref(writer, ref)
    writer.address(sender)
    writer.u64(gas_price)
    writer.u64(gas_budget)
    writer.u8(0)
    return writer.getvalue()


def decode_uint_le(data: bytes | list[int]) -> int:
    """Decode a little-endian unsigned integer (u8 … u256) return value."""
    return int.from_bytes(bytes(data), "little")

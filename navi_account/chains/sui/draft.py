"""Programmable transaction draft — an append-only list of inputs and commands."""
from __future__ import annotations

import logging
import struct
from dataclasses import dataclass

from ...assets import normalize_address
from ...errors import DraftSealedError

logger = logging.getLogger(__name__)

# ---------------------------------------------------------------------------
# Arguments
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class GasCoin:
    pass


@dataclass(frozen=True)
class Input:
    index: int


@dataclass(frozen=True)
class Result:
    index: int


@dataclass(frozen=True)
class NestedResult:
    index: int
    result_index: int


Argument = GasCoin | Input | Result | NestedResult

# ---------------------------------------------------------------------------
# Inputs
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class ObjectInput:
    """Object referenced by id; version and ownership are resolved on submit."""

    object_id: str
    mutable: bool = True


@dataclass(frozen=True)
class PureInput:
    """BCS-encoded plain value."""

    value: bytes


CallInput = ObjectInput | PureInput

# ---------------------------------------------------------------------------
# Commands
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class MoveCall:
    package: str
    module: str
    function: str
    type_arguments: tuple[str, ...]
    arguments: tuple[Argument, ...]

    @property
    def target(self) -> str:
        return f"{self.package}::{self.module}::{self.function}"


@dataclass(frozen=True)
class TransferObjects:
    objects: tuple[Argument, ...]
    recipient: Argument


@dataclass(frozen=True)
class SplitCoins:
    coin: Argument
    amounts: tuple[Argument, ...]


@dataclass(frozen=True)
class MergeCoins:
    destination: Argument
    sources: tuple[Argument, ...]


Command = MoveCall | TransferObjects | SplitCoins | MergeCoins


class TransactionDraft:
    """Ordered, mutable sequence of ledger operations plus a sender.

    Every argument handed to a command is the gas coin, an input created by
    this draft, or the result of a command already appended to it. Once
    sealed, the draft rejects further mutation.
    """

    def __init__(self, sender: str | None = None) -> None:
        self._inputs: list[CallInput] = []
        self._commands: list[Command] = []
        self._object_index: dict[str, int] = {}
        self._sealed = False
        self.sender = normalize_address(sender) if sender else None

    @property
    def inputs(self) -> tuple[CallInput, ...]:
        return tuple(self._inputs)

    @property
    def commands(self) -> tuple[Command, ...]:
        return tuple(self._commands)

    @property
    def sealed(self) -> bool:
        return self._sealed

    @property
    def gas(self) -> GasCoin:
        return GasCoin()

    def seal(self) -> None:
        self._sealed = True

    def _check_mutable(self) -> None:
        if self._sealed:
            raise DraftSealedError("Transaction draft is sealed")

    def set_sender(self, sender: str) -> None:
        self._check_mutable()
        self.sender = normalize_address(sender)

    def set_sender_if_not_set(self, sender: str) -> None:
        if self.sender is None:
            self.set_sender(sender)

    # ------------------------------------------------------------------
    # Inputs
    # ------------------------------------------------------------------

    def _add_input(self, value: CallInput) -> Input:
        self._check_mutable()
        self._inputs.append(value)
        return Input(len(self._inputs) - 1)

    def object(self, object_id: str, mutable: bool = True) -> Input:
        """Reference an on-chain object; repeated ids share one input."""
        object_id = normalize_address(object_id)
        index = self._object_index.get(object_id)
        if index is not None:
            existing = self._inputs[index]
            if mutable and isinstance(existing, ObjectInput) and not existing.mutable:
                self._check_mutable()
                self._inputs[index] = ObjectInput(object_id, mutable=True)
            return Input(index)
        arg = self._add_input(ObjectInput(object_id, mutable=mutable))
        self._object_index[object_id] = arg.index
        return arg

    def pure_u8(self, value: int) -> Input:
        return self._add_input(PureInput(struct.pack("<B", value)))

    def pure_u64(self, value: int) -> Input:
        if value < 0:
            raise ValueError(f"u64 must be non-negative: {value}")
        return self._add_input(PureInput(struct.pack("<Q", value)))

    def pure_bool(self, value: bool) -> Input:
        return self._add_input(PureInput(b"\x01" if value else b"\x00"))

    def pure_address(self, address: str) -> Input:
        return self._add_input(
            PureInput(bytes.fromhex(normalize_address(address)[2:]))
        )

    # ------------------------------------------------------------------
    # Commands
    # ------------------------------------------------------------------

    def _check_argument(self, arg: Argument) -> None:
        if isinstance(arg, Input) and not 0 <= arg.index < len(self._inputs):
            raise ValueError(f"Input {arg.index} does not exist in this draft")
        if isinstance(arg, (Result, NestedResult)) and not (
            0 <= arg.index < len(self._commands)
        ):
            raise ValueError(f"Result {arg.index} refers to a later command")

    def _add_command(self, command: Command, *args: Argument) -> int:
        self._check_mutable()
        for arg in args:
            self._check_argument(arg)
        self._commands.append(command)
        logger.debug("Draft command %d: %s", len(self._commands) - 1, command)
        return len(self._commands) - 1

    def split_coins(self, coin: Argument, amounts: list[int]) -> list[NestedResult]:
        """Split ``amounts`` off ``coin``; one fragment per amount, in order."""
        if not amounts:
            raise ValueError("split_coins needs at least one amount")
        self._check_argument(coin)
        amount_args = tuple(self.pure_u64(a) for a in amounts)
        index = self._add_command(SplitCoins(coin, amount_args), coin, *amount_args)
        return [NestedResult(index, i) for i in range(len(amounts))]

    def merge_coins(self, destination: Argument, sources: list[Argument]) -> None:
        self._add_command(
            MergeCoins(destination, tuple(sources)), destination, *sources
        )

    def transfer_objects(self, objects: list[Argument], recipient: str) -> None:
        for arg in objects:
            self._check_argument(arg)
        recipient_arg = self.pure_address(recipient)
        self._add_command(
            TransferObjects(tuple(objects), recipient_arg), *objects, recipient_arg
        )

    def move_call(
        self,
        target: str,
        arguments: list[Argument] | None = None,
        type_arguments: list[str] | None = None,
    ) -> Result:
        package, module, function = target.split("::")
        args = tuple(arguments or ())
        command = MoveCall(
            package=normalize_address(package),
            module=module,
            function=function,
            type_arguments=tuple(type_arguments or ()),
            arguments=args,
        )
        return Result(self._add_command(command, *args))

    def object_ids(self) -> list[str]:
        return [i.object_id for i in self._inputs if isinstance(i, ObjectInput)]

"""Unit tests for the transaction draft."""
from __future__ import annotations

import pytest

from navi_account.assets import normalize_address
from navi_account.chains.sui.draft import (
    GasCoin,
    Input,
    MergeCoins,
    MoveCall,
    NestedResult,
    ObjectInput,
    PureInput,
    Result,
    SplitCoins,
    TransactionDraft,
    TransferObjects,
)
from navi_account.errors import DraftSealedError


class TestInputs:
    def test_same_object_shares_input(self) -> None:
        draft = TransactionDraft()
        assert draft.object("0x5") == draft.object("0x05") == Input(0)
        assert len(draft.inputs) == 1

    def test_mutable_use_upgrades_input(self) -> None:
        draft = TransactionDraft()
        draft.object("0x6", mutable=False)
        draft.object("0x6")
        assert draft.inputs[0] == ObjectInput(normalize_address("0x6"), mutable=True)

    def test_immutable_use_keeps_mutable(self) -> None:
        draft = TransactionDraft()
        draft.object("0x6")
        draft.object("0x6", mutable=False)
        assert draft.inputs[0].mutable is True

    def test_pure_values(self) -> None:
        draft = TransactionDraft()
        draft.pure_u64(1)
        draft.pure_u8(7)
        draft.pure_bool(True)
        assert draft.inputs == (
            PureInput(b"\x01" + b"\x00" * 7),
            PureInput(b"\x07"),
            PureInput(b"\x01"),
        )

    def test_negative_u64_rejected(self) -> None:
        with pytest.raises(ValueError):
            TransactionDraft().pure_u64(-1)


class TestCommands:
    def test_split_returns_nested_results(self) -> None:
        draft = TransactionDraft()
        fragments = draft.split_coins(draft.gas, [10, 20])
        assert fragments == [NestedResult(0, 0), NestedResult(0, 1)]
        assert draft.commands == (SplitCoins(GasCoin(), (Input(0), Input(1))),)

    def test_merge_then_transfer(self) -> None:
        draft = TransactionDraft()
        target = draft.object("0xc1")
        draft.merge_coins(target, [draft.object("0xc2")])
        draft.transfer_objects([target], "0xb2")
        assert draft.commands == (
            MergeCoins(Input(0), (Input(1),)),
            TransferObjects((Input(0),), Input(2)),
        )

    def test_move_call_target(self) -> None:
        draft = TransactionDraft()
        result = draft.move_call("0xd1::lending::create_account")
        assert result == Result(0)
        command = draft.commands[0]
        assert isinstance(command, MoveCall)
        assert command.target == f"{normalize_address('0xd1')}::lending::create_account"

    def test_forward_reference_rejected(self) -> None:
        draft = TransactionDraft()
        with pytest.raises(ValueError, match="later command"):
            draft.transfer_objects([Result(0)], "0xb2")
        assert draft.commands == ()

    def test_unknown_input_rejected(self) -> None:
        draft = TransactionDraft()
        with pytest.raises(ValueError):
            draft.merge_coins(Input(5), [Input(6)])


class TestSealing:
    def test_sealed_draft_rejects_commands(self) -> None:
        draft = TransactionDraft("0xa1")
        draft.seal()
        with pytest.raises(DraftSealedError):
            draft.split_coins(draft.gas, [1])
        with pytest.raises(DraftSealedError):
            draft.object("0x1")
        with pytest.raises(DraftSealedError):
            draft.set_sender("0xa2")

    def test_set_sender_if_not_set(self) -> None:
        draft = TransactionDraft("0xa1")
        draft.set_sender_if_not_set("0xa2")
        assert draft.sender == normalize_address("0xa1")

        empty = TransactionDraft()
        empty.set_sender_if_not_set("0xa2")
        assert empty.sender == normalize_address("0xa2")

"""Integration tests for the transaction builder against a mocked ledger."""
from __future__ import annotations

from unittest.mock import AsyncMock

import pytest

from navi_account.assets import normalize_address
from navi_account.chains.sui.draft import (
    GasCoin,
    Input,
    MergeCoins,
    MoveCall,
    NestedResult,
    ObjectInput,
    Result,
    SplitCoins,
    TransferObjects,
)
from navi_account.config import AppConfig
from navi_account.errors import ArityMismatch, InsufficientBalance, UnknownPool
from navi_account.services.balance import BalanceReader
from navi_account.services.builder import TransactionBuilder

from conftest import OTHER_RECIPIENT, RECIPIENT, SENDER, USDC_TYPE, make_coins


@pytest.fixture()
def builder(mock_ledger: AsyncMock, sample_app_config: AppConfig) -> TransactionBuilder:
    return TransactionBuilder(BalanceReader(mock_ledger, sample_app_config.pools), sample_app_config)


class TestSendCoin:
    @pytest.mark.asyncio
    async def test_merge_then_split_then_transfer(
        self, builder: TransactionBuilder, mock_ledger: AsyncMock
    ) -> None:
        mock_ledger.get_coins.return_value = make_coins(USDC_TYPE, [40, 25, 10])

        draft = await builder.send_coin(SENDER, "USDC", RECIPIENT, 50)

        assert draft.commands == (
            MergeCoins(Input(0), (Input(1),)),
            MergeCoins(Input(0), (Input(2),)),
            SplitCoins(Input(0), (Input(3),)),
            TransferObjects((NestedResult(2, 0),), Input(4)),
        )
        assert draft.sender == SENDER

    @pytest.mark.asyncio
    async def test_fragment_i_goes_to_recipient_i(
        self, builder: TransactionBuilder, mock_ledger: AsyncMock
    ) -> None:
        mock_ledger.get_coins.return_value = make_coins(USDC_TYPE, [100])

        draft = await builder.send_coin_to_many(
            SENDER, USDC_TYPE, [RECIPIENT, OTHER_RECIPIENT], [30, 20]
        )

        transfers = [c for c in draft.commands if isinstance(c, TransferObjects)]
        assert [t.objects for t in transfers] == [
            (NestedResult(0, 0),),
            (NestedResult(0, 1),),
        ]
        recipients = [draft.inputs[t.recipient.index].value.hex() for t in transfers]
        assert recipients == [RECIPIENT[2:], OTHER_RECIPIENT[2:]]

    @pytest.mark.asyncio
    async def test_arity_checked_before_reads(
        self, builder: TransactionBuilder, mock_ledger: AsyncMock
    ) -> None:
        with pytest.raises(ArityMismatch):
            await builder.send_coin_to_many(SENDER, "USDC", [RECIPIENT], [1, 2])
        mock_ledger.get_coins.assert_not_called()

    @pytest.mark.asyncio
    async def test_insufficient_balance(
        self, builder: TransactionBuilder, mock_ledger: AsyncMock
    ) -> None:
        mock_ledger.get_coins.return_value = make_coins(USDC_TYPE, [40, 25])
        with pytest.raises(InsufficientBalance):
            await builder.send_coin(SENDER, "USDC", RECIPIENT, 80)

    @pytest.mark.asyncio
    async def test_no_coins(self, builder: TransactionBuilder, mock_ledger: AsyncMock) -> None:
        mock_ledger.get_coins.return_value = []
        with pytest.raises(InsufficientBalance):
            await builder.send_coin(SENDER, "USDC", RECIPIENT, 1)

    @pytest.mark.asyncio
    async def test_native_send_splits_gas(
        self, builder: TransactionBuilder, mock_ledger: AsyncMock
    ) -> None:
        mock_ledger.get_balance.return_value = 10**9

        draft = await builder.send_coin(SENDER, "Sui", RECIPIENT, 5)

        assert draft.commands[0] == SplitCoins(GasCoin(), (Input(0),))
        mock_ledger.get_coins.assert_not_called()

    @pytest.mark.asyncio
    async def test_native_send_reserves_gas_budget(
        self, builder: TransactionBuilder, mock_ledger: AsyncMock
    ) -> None:
        # Enough for the send itself but not for the send plus gas budget.
        mock_ledger.get_balance.return_value = 10_000_005
        with pytest.raises(InsufficientBalance):
            await builder.send_coin(SENDER, "0x2::sui::SUI", RECIPIENT, 10)

    @pytest.mark.asyncio
    async def test_deterministic_for_same_ledger_state(
        self, builder: TransactionBuilder, mock_ledger: AsyncMock
    ) -> None:
        mock_ledger.get_coins.return_value = make_coins(USDC_TYPE, [40, 25, 10])
        first = await builder.send_coin(SENDER, "USDC", RECIPIENT, 50)
        second = await builder.send_coin(SENDER, "USDC", RECIPIENT, 50)
        assert first.inputs == second.inputs
        assert first.commands == second.commands


class TestTransferObjects:
    def test_object_i_to_recipient_i(self, builder: TransactionBuilder) -> None:
        draft = builder.transfer_objects_to_many(
            SENDER, ["0x71", "0x72"], [RECIPIENT, OTHER_RECIPIENT]
        )
        assert draft.commands == (
            TransferObjects((Input(0),), Input(1)),
            TransferObjects((Input(2),), Input(3)),
        )

    def test_arity(self, builder: TransactionBuilder) -> None:
        with pytest.raises(ArityMismatch):
            builder.transfer_objects_to_many(SENDER, ["0x71"], [])


class TestDeposit:
    @pytest.mark.asyncio
    async def test_native_deposit_needs_no_coin_lookup(
        self, builder: TransactionBuilder, mock_ledger: AsyncMock
    ) -> None:
        draft = await builder.deposit(SENDER, "Sui", 1_000_000_000)

        mock_ledger.get_coins.assert_not_called()
        split, call = draft.commands
        assert split == SplitCoins(GasCoin(), (Input(0),))
        assert isinstance(call, MoveCall)
        assert call.module == "incentive_v2"
        assert call.function == "entry_deposit"
        assert call.type_arguments == ("0x2::sui::SUI",)
        assert call.arguments[4] == NestedResult(0, 0)
        assert draft.inputs[call.arguments[0].index] == ObjectInput(
            normalize_address("0x6"), mutable=False
        )

    @pytest.mark.asyncio
    async def test_non_native_deposit_merges(
        self, builder: TransactionBuilder, mock_ledger: AsyncMock
    ) -> None:
        mock_ledger.get_coins.return_value = make_coins(USDC_TYPE, [3, 4])

        draft = await builder.deposit(SENDER, "USDC", 5)

        assert isinstance(draft.commands[0], MergeCoins)
        assert isinstance(draft.commands[1], SplitCoins)
        assert draft.commands[2].function == "entry_deposit"

    @pytest.mark.asyncio
    async def test_deposit_with_account_cap(
        self, builder: TransactionBuilder, mock_ledger: AsyncMock
    ) -> None:
        draft = await builder.deposit_with_account_cap(SENDER, "Sui", 7, "0xcab")
        call = draft.commands[-1]
        assert call.function == "deposit_with_account_cap"
        assert draft.inputs[call.arguments[-1].index] == ObjectInput(normalize_address("0xcab"))

    @pytest.mark.asyncio
    async def test_deposit_by_type_tag(
        self, builder: TransactionBuilder, mock_ledger: AsyncMock
    ) -> None:
        draft = await builder.deposit(SENDER, "0x2::sui::SUI", 1_000_000_000)
        assert draft.commands[-1].function == "entry_deposit"
        assert draft.commands[0] == SplitCoins(GasCoin(), (Input(0),))
        mock_ledger.get_coins.assert_not_called()

    @pytest.mark.asyncio
    async def test_unknown_pool(self, builder: TransactionBuilder) -> None:
        with pytest.raises(UnknownPool):
            await builder.deposit(SENDER, "DOGE", 1)


class TestBorrowSide:
    def test_withdraw_transfers_coin_to_sender(self, builder: TransactionBuilder) -> None:
        draft = builder.withdraw(SENDER, "USDC", 5)

        withdraw, from_balance, transfer = draft.commands
        assert withdraw.function == "withdraw"
        assert from_balance.target == f"{normalize_address('0x2')}::coin::from_balance"
        assert from_balance.arguments == (Result(0),)
        assert transfer.objects == (Result(1),)
        assert draft.inputs[transfer.recipient.index].value.hex() == SENDER[2:]

    def test_withdraw_by_type_tag(self, builder: TransactionBuilder) -> None:
        draft = builder.withdraw(SENDER, USDC_TYPE, 5)
        assert draft.commands[0].function == "withdraw"
        assert draft.commands[0].type_arguments == (USDC_TYPE,)

    def test_withdraw_unknown_pool(self, builder: TransactionBuilder) -> None:
        with pytest.raises(UnknownPool, match="DOGE"):
            builder.withdraw(SENDER, "DOGE", 5)

    def test_withdraw_with_account_cap(self, builder: TransactionBuilder) -> None:
        draft = builder.withdraw_with_account_cap(SENDER, "Sui", 5, "0xcab")
        assert draft.commands[0].function == "withdraw_with_account_cap"
        assert len(draft.commands[0].arguments) == 9

    def test_borrow(self, builder: TransactionBuilder) -> None:
        draft = builder.borrow(SENDER, "USDC", 5)
        call = draft.commands[0]
        assert call.function == "borrow"
        assert call.type_arguments == (USDC_TYPE,)

    @pytest.mark.parametrize("amount", [0, -3])
    def test_non_positive_amount(self, builder: TransactionBuilder, amount: int) -> None:
        with pytest.raises(ValueError):
            builder.borrow(SENDER, "USDC", amount)


class TestRepayAndAccountCap:
    @pytest.mark.asyncio
    async def test_repay(self, builder: TransactionBuilder, mock_ledger: AsyncMock) -> None:
        mock_ledger.get_coins.return_value = make_coins(USDC_TYPE, [10])
        draft = await builder.repay(SENDER, "USDC", 10)
        assert draft.commands[-1].function == "entry_repay"
        assert draft.commands[-1].arguments[5] == NestedResult(0, 0)

    def test_create_account_cap(self, builder: TransactionBuilder) -> None:
        draft = builder.create_account_cap(SENDER)
        create, transfer = draft.commands
        assert create.module == "lending"
        assert create.function == "create_account"
        assert transfer.objects == (Result(0),)

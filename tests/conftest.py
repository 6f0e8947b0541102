"""Shared test fixtures and sample data."""
from __future__ import annotations

import textwrap
from pathlib import Path
from unittest.mock import AsyncMock

import pytest

from navi_account.config import (
    AccountConfig,
    AppConfig,
    ChainConfig,
    PoolConfig,
    ProtocolConfig,
    TransactionConfig,
)
from navi_account.models import CoinObject

SENDER = "0x" + "a1" * 32
RECIPIENT = "0x" + "b2" * 32
OTHER_RECIPIENT = "0x" + "b3" * 32
USDC_TYPE = "0x5d4b::coin::COIN"

# Real-looking base58 object digest (32 bytes).
SAMPLE_DIGEST = "4vJ9JU1bJJE96FWSJKvHsmmFADCg4gpZQff4P3bkLKi"


# ---------------------------------------------------------------------------
# Config fixtures
# ---------------------------------------------------------------------------


@pytest.fixture()
def sample_chain_config() -> ChainConfig:
    return ChainConfig(
        rpc_endpoints=("https://rpc1.example.com", "https://rpc2.example.com"),
        rpc_timeout=10,
    )


@pytest.fixture()
def sample_protocol_config() -> ProtocolConfig:
    return ProtocolConfig(
        package_id="0xd1",
        storage_id="0xd2",
        price_oracle_id="0xd3",
        incentive_v1_id="0xd4",
        incentive_v2_id="0xd5",
        reserve_parent_id="0xd6",
    )


@pytest.fixture()
def sui_pool() -> PoolConfig:
    return PoolConfig(
        symbol="Sui",
        coin_type="0x2::sui::SUI",
        decimals=9,
        pool_id="0xe1",
        asset_id=0,
        borrow_balance_parent_id="0xf1",
        supply_balance_parent_id="0xf2",
    )


@pytest.fixture()
def usdc_pool() -> PoolConfig:
    return PoolConfig(
        symbol="USDC",
        coin_type=USDC_TYPE,
        decimals=6,
        pool_id="0xe2",
        asset_id=1,
        borrow_balance_parent_id="0xf3",
        supply_balance_parent_id="0xf4",
    )


@pytest.fixture()
def sample_pools(sui_pool: PoolConfig, usdc_pool: PoolConfig) -> dict[str, PoolConfig]:
    return {"Sui": sui_pool, "USDC": usdc_pool}


@pytest.fixture()
def sample_app_config(
    sample_chain_config: ChainConfig,
    sample_protocol_config: ProtocolConfig,
    sample_pools: dict[str, PoolConfig],
) -> AppConfig:
    return AppConfig(
        chain=sample_chain_config,
        account=AccountConfig(mnemonic="", account_index=0),
        protocol=sample_protocol_config,
        transaction=TransactionConfig(gas_budget=10_000_000),
        pools=sample_pools,
    )


# ---------------------------------------------------------------------------
# Ledger / signer fixtures
# ---------------------------------------------------------------------------


def make_coins(coin_type: str, balances: list[int], prefix: str = "c") -> list[CoinObject]:
    """Coin objects with ids 0xc1, 0xc2, … in the given order."""
    return [
        CoinObject(
            object_id=f"0x{prefix}{i + 1}",
            coin_type=coin_type,
            balance=balance,
            version=i + 1,
            digest=SAMPLE_DIGEST,
        )
        for i, balance in enumerate(balances)
    ]


@pytest.fixture()
def mock_ledger() -> AsyncMock:
    return AsyncMock()


class FakeSigner:
    """Deterministic signer for pipeline tests."""

    def __init__(self, address: str = SENDER) -> None:
        self.address = address
        self.signed: list[bytes] = []

    def sign_transaction(self, tx_bytes: bytes) -> str:
        self.signed.append(tx_bytes)
        return "c2lnbmF0dXJl"


@pytest.fixture()
def fake_signer() -> FakeSigner:
    return FakeSigner()


# ---------------------------------------------------------------------------
# Config YAML fixture
# ---------------------------------------------------------------------------

SAMPLE_YAML = textwrap.dedent("""\
    chain:
      rpc_endpoints: ["https://rpc.example.com"]
      rpc_timeout: 10
    account:
      mnemonic: "${TEST_MNEMONIC}"
      account_index: 2
    protocol:
      package_id: "0xd1"
      storage_id: "0xd2"
      price_oracle_id: "0xd3"
      incentive_v1_id: "0xd4"
      incentive_v2_id: "0xd5"
      reserve_parent_id: "0xd6"
    transaction:
      gas_budget: 20000000
    pools:
      Sui:
        coin_type: "0x2::sui::SUI"
        decimals: 9
        pool_id: "0xe1"
        asset_id: 0
        borrow_balance_parent_id: "0xf1"
        supply_balance_parent_id: "0xf2"
      USDC:
        coin_type: "0x5d4b::coin::COIN"
        decimals: 6
        pool_id: "0xe2"
        asset_id: 1
""")


@pytest.fixture()
def sample_yaml_path(tmp_path: Path) -> Path:
    cfg_file = tmp_path / "config.yaml"
    cfg_file.write_text(SAMPLE_YAML)
    return cfg_file

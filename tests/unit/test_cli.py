"""Unit tests for CLI argument parsing."""
from __future__ import annotations

import pytest

from navi_account.cli import build_parser


class TestBuildParser:
    def test_address_command(self) -> None:
        args = build_parser().parse_args(["address"])
        assert args.command == "address"

    def test_coins_optional_symbol(self) -> None:
        parser = build_parser()
        assert parser.parse_args(["coins"]).coin is None
        assert parser.parse_args(["coins", "USDC"]).coin == "USDC"

    def test_send_multiple_recipients(self) -> None:
        args = build_parser().parse_args(
            ["send", "USDC", "--to", "0x1", "--amount", "5", "--to", "0x2", "--amount", "7"]
        )
        assert args.recipients == ["0x1", "0x2"]
        assert args.amounts == [5, 7]
        assert args.dry_run is False

    def test_deposit_with_account_cap(self) -> None:
        args = build_parser().parse_args(
            ["deposit", "Sui", "1000", "--account-cap", "0xcap", "--dry-run"]
        )
        assert args.pool == "Sui"
        assert args.amount == 1000
        assert args.account_cap == "0xcap"
        assert args.dry_run is True

    def test_borrow_has_no_account_cap(self) -> None:
        with pytest.raises(SystemExit):
            build_parser().parse_args(["borrow", "Sui", "1", "--account-cap", "0xcap"])

    def test_health_projection_flags(self) -> None:
        args = build_parser().parse_args(
            ["health", "--pool", "USDC", "--borrow", "100", "--decrease"]
        )
        assert args.pool == "USDC"
        assert args.borrow == 100
        assert args.supply == 0
        assert args.decrease is True

    def test_config_and_index_flags(self) -> None:
        args = build_parser().parse_args(
            ["--config", "/tmp/c.yaml", "--account-index", "3", "address"]
        )
        assert args.config == "/tmp/c.yaml"
        assert args.account_index == 3

    def test_log_level_flag(self) -> None:
        args = build_parser().parse_args(["--log-level", "DEBUG", "portfolio"])
        assert args.log_level == "DEBUG"

    def test_no_command(self) -> None:
        args = build_parser().parse_args([])
        assert args.command is None

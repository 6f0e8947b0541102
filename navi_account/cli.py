"""Command-line interface for the NAVI account client."""
from __future__ import annotations

import argparse
import asyncio
import dataclasses
import sys

from .config import AppConfig, load_config
from .logging_setup import configure_logging
from .report import (
    format_coins,
    format_draft,
    format_health_factor,
    format_portfolio,
    format_result,
    format_wallet_balance,
)
from .services import AccountManager


def build_parser() -> argparse.ArgumentParser:
    """Build the argparse CLI parser."""
    parser = argparse.ArgumentParser(
        prog="navi-account",
        description="Account client for the NAVI lending protocol on Sui",
    )
    parser.add_argument(
        "--config",
        default=None,
        help="Path to config.yaml (default: config.yaml in project root)",
    )
    parser.add_argument(
        "--log-level",
        default="INFO",
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        help="Logging level (default: INFO)",
    )
    parser.add_argument(
        "--account-index",
        type=int,
        default=None,
        help="Derivation index of the account (overrides config)",
    )

    sub = parser.add_subparsers(dest="command")

    sub.add_parser("address", help="Print the account address")

    coins_parser = sub.add_parser("coins", help="List owned coin objects")
    coins_parser.add_argument("coin", nargs="?", default=None, help="Symbol or coin type")

    sub.add_parser("balance", help="Wallet balance per coin type")
    sub.add_parser("portfolio", help="Borrow and supply balance per pool")

    health_parser = sub.add_parser("health", help="Health factor")
    health_parser.add_argument("--address", default=None)
    health_parser.add_argument("--pool", default=None, help="Pool for a projection")
    health_parser.add_argument("--supply", type=int, default=0)
    health_parser.add_argument("--borrow", type=int, default=0)
    health_parser.add_argument("--decrease", action="store_true")

    send_parser = sub.add_parser("send", help="Send coins to one or more recipients")
    send_parser.add_argument("coin", help="Symbol or coin type")
    send_parser.add_argument("--to", dest="recipients", action="append", required=True)
    send_parser.add_argument("--amount", dest="amounts", action="append", type=int, required=True)

    transfer_parser = sub.add_parser("transfer", help="Transfer whole objects")
    transfer_parser.add_argument("--object", dest="objects", action="append", required=True)
    transfer_parser.add_argument("--to", dest="recipients", action="append", required=True)

    for name, help_text in (
        ("deposit", "Deposit into a pool"),
        ("withdraw", "Withdraw from a pool"),
        ("borrow", "Borrow from a pool"),
        ("repay", "Repay a pool debt"),
    ):
        action_parser = sub.add_parser(name, help=help_text)
        action_parser.add_argument("pool", help="Pool symbol")
        action_parser.add_argument("amount", type=int, help="Amount in smallest units")
        if name in ("deposit", "withdraw"):
            action_parser.add_argument("--account-cap", default=None)

    sub.add_parser("create-account-cap", help="Create an account capability")

    for action in ("send", "transfer", "deposit", "withdraw", "borrow", "repay", "create-account-cap"):
        sub.choices[action].add_argument(
            "--dry-run", action="store_true", help="Print the built transaction only"
        )

    return parser


async def _build(manager: AccountManager, args: argparse.Namespace):
    """Build the draft for a mutating command."""
    builder = manager.builder
    sender = manager.address

    if args.command == "send":
        return await builder.send_coin_to_many(sender, args.coin, args.recipients, args.amounts)
    if args.command == "transfer":
        return builder.transfer_objects_to_many(sender, args.objects, args.recipients)
    if args.command == "deposit":
        if args.account_cap:
            return await builder.deposit_with_account_cap(
                sender, args.pool, args.amount, args.account_cap
            )
        return await builder.deposit(sender, args.pool, args.amount)
    if args.command == "withdraw":
        if args.account_cap:
            return builder.withdraw_with_account_cap(
                sender, args.pool, args.amount, args.account_cap
            )
        return builder.withdraw(sender, args.pool, args.amount)
    if args.command == "borrow":
        return builder.borrow(sender, args.pool, args.amount)
    if args.command == "repay":
        return await builder.repay(sender, args.pool, args.amount)
    return builder.create_account_cap(sender)


async def _run(args: argparse.Namespace, config: AppConfig) -> None:
    """Execute the selected command."""
    manager = AccountManager(config)

    if args.command == "address":
        print(manager.address)
    elif args.command == "coins":
        coins = await (manager.get_coins(args.coin) if args.coin else manager.get_all_coins())
        print(format_coins(coins))
    elif args.command == "balance":
        print(format_wallet_balance(await manager.get_wallet_balance(), config.pools))
    elif args.command == "portfolio":
        print(format_portfolio(await manager.get_portfolio()))
    elif args.command == "health":
        address = args.address or manager.address
        if args.pool:
            health_factor = await manager.get_dynamic_health_factor(
                args.pool, args.supply, args.borrow, not args.decrease, address
            )
        else:
            health_factor = await manager.get_health_factor(address)
        print(format_health_factor(address, health_factor, args.supply, args.borrow))
    else:
        draft = await _build(manager, args)
        if args.dry_run:
            print(format_draft(draft))
            return
        print(format_result(await manager.submit(draft)))


def main() -> None:
    """Entry point."""
    parser = build_parser()
    args = parser.parse_args()

    if not args.command:
        parser.print_help()
        sys.exit(1)

    configure_logging(args.log_level)
    config = load_config(args.config)
    if args.account_index is not None:
        config = dataclasses.replace(
            config,
            account=dataclasses.replace(config.account, account_index=args.account_index),
        )

    asyncio.run(_run(args, config))

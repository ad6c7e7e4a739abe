"""Command-line interface for read-only price queries."""
from __future__ import annotations

import argparse
import asyncio
import sys
from decimal import Decimal, InvalidOperation

from .config import AppConfig, load_config
from .errors import EngineError
from .fixed_point import PRECISION
from .logging_setup import configure_logging
from .models import Asset
from .oracles import PriceOracleAdapter, PythPriceService
from .registry import AssetRegistry


def _decimal(value: str) -> Decimal:
    try:
        parsed = Decimal(value)
    except InvalidOperation:
        raise argparse.ArgumentTypeError(f"not a number: {value!r}") from None
    if parsed <= 0:
        raise argparse.ArgumentTypeError(f"must be positive: {value!r}")
    return parsed


def build_parser() -> argparse.ArgumentParser:
    """Build the argparse CLI parser."""
    parser = argparse.ArgumentParser(
        prog="synth-engine",
        description="Collateral price queries for the synthetic asset engine",
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

    sub = parser.add_subparsers(dest="command")

    sub.add_parser("prices", help="Fetch and print every configured quote")

    value_parser = sub.add_parser("value", help="USD value of a collateral amount")
    value_parser.add_argument("symbol", help="Collateral symbol, e.g. ETH")
    value_parser.add_argument("amount", type=_decimal, help="Amount in whole units")

    inverse_parser = sub.add_parser(
        "amount-for-usd", help="Collateral amount worth a USD sum"
    )
    inverse_parser.add_argument("symbol", help="Collateral symbol, e.g. ETH")
    inverse_parser.add_argument("usd", type=_decimal, help="USD amount")

    return parser


def _format_units(raw: int, decimals: int) -> str:
    return f"{Decimal(raw) / Decimal(10**decimals):,.{min(decimals, 8)}f}"


async def _run(args: argparse.Namespace) -> None:
    """Execute the selected command."""
    configure_logging(args.log_level)
    config = load_config(args.config)

    service = PythPriceService(config.price_oracle.pyth)
    await service.refresh([asset.feed for asset in config.assets])
    oracle = _build_oracle(config, service)

    if args.command == "prices":
        for asset in config.assets:
            usd = oracle.usd_value(asset.address, 10**asset.decimals)
            print(f"{asset.symbol}: ${_format_units(usd, 18)}")
    elif args.command == "value":
        asset = config.asset(args.symbol)
        amount = int(args.amount * 10**asset.decimals)
        usd = oracle.usd_value(asset.address, amount)
        print(f"{args.amount} {asset.symbol} = ${_format_units(usd, 18)}")
    elif args.command == "amount-for-usd":
        asset = config.asset(args.symbol)
        usd = int(args.usd * PRECISION)
        amount = oracle.token_amount_for_usd(asset.address, usd)
        print(f"${args.usd} = {_format_units(amount, asset.decimals)} {asset.symbol}")


def _build_oracle(config: AppConfig, service: PythPriceService) -> PriceOracleAdapter:
    registry = AssetRegistry.from_assets(
        Asset(address=a.address, decimals=a.decimals, price_feed=service.feed(a.feed))
        for a in config.assets
    )
    return PriceOracleAdapter(registry)


def main() -> None:
    """Entry point."""
    parser = build_parser()
    args = parser.parse_args()

    if not args.command:
        parser.print_help()
        sys.exit(1)

    try:
        asyncio.run(_run(args))
    except (EngineError, KeyError) as e:
        print(f"error: {e}", file=sys.stderr)
        sys.exit(2)

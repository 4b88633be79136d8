"""Command-line interface for the collateralised-debt engine."""
from __future__ import annotations

import argparse
import asyncio
import sys
from decimal import Decimal, InvalidOperation

from .config import AppConfig, load_config
from .fixed_point import PRECISION
from .logging_setup import configure_logging
from .models import PositionQuote
from .oracles import PriceOracleAdapter, PythPriceFeed, StaticPriceFeed
from .services.health import calculate_health_factor


def _decimal_amount(value: str) -> int:
    """Parse a human amount like ``1.5`` into an 18-decimal integer."""
    try:
        amount = Decimal(value)
    except InvalidOperation:
        raise argparse.ArgumentTypeError(f"not a number: {value!r}")
    if not amount.is_finite():
        raise argparse.ArgumentTypeError(f"not a finite number: {value!r}")
    if amount < 0:
        raise argparse.ArgumentTypeError(f"must not be negative: {value!r}")
    return int(amount * PRECISION)


def build_parser() -> argparse.ArgumentParser:
    """Build the argparse CLI parser."""
    parser = argparse.ArgumentParser(
        prog="dsc-engine",
        description="Over-collateralised stablecoin engine tools",
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

    sub.add_parser("price", help="Print the current collateral price")

    quote_parser = sub.add_parser("quote", help="Evaluate a hypothetical position")
    quote_parser.add_argument(
        "--collateral", type=_decimal_amount, required=True,
        help="Collateral amount in whole tokens",
    )
    quote_parser.add_argument(
        "--debt", type=_decimal_amount, required=True,
        help="Synthetic debt in whole units",
    )
    quote_parser.add_argument(
        "--price", type=_decimal_amount, default=None,
        help="USD price per collateral token (overrides the configured feed)",
    )

    return parser


async def _read_price(config: AppConfig) -> int:
    oracle_cfg = config.price_oracle
    if oracle_cfg.provider == "pyth":
        feed = PythPriceFeed(oracle_cfg.pyth)
        await feed.refresh()
        return PriceOracleAdapter(feed).latest_price()
    feed = StaticPriceFeed(oracle_cfg.static_price, oracle_cfg.feed_decimals)
    return PriceOracleAdapter(feed).latest_price()


def quote_position(config: AppConfig, collateral: int, debt: int, price: int) -> PositionQuote:
    params = config.engine.parameters
    adapter = PriceOracleAdapter(StaticPriceFeed(price))
    collateral_value = adapter.usd_value(collateral)
    health_factor = calculate_health_factor(debt, collateral_value, params)
    return PositionQuote(
        collateral=collateral,
        debt=debt,
        price=price,
        collateral_value_usd=collateral_value,
        health_factor=health_factor,
        can_open=health_factor >= params.min_health_factor,
        liquidatable=debt > 0 and health_factor < params.min_health_factor,
    )


def _format(amount: int) -> str:
    return f"{Decimal(amount) / PRECISION:,.4f}"


async def _run(args: argparse.Namespace) -> None:
    """Execute the selected command."""
    configure_logging(args.log_level)
    config = load_config(args.config)

    if args.command == "price":
        price = await _read_price(config)
        print(f"{config.collateral.symbol}/USD: {_format(price)} (raw {price})")
    elif args.command == "quote":
        price = args.price if args.price is not None else await _read_price(config)
        quote = quote_position(config, args.collateral, args.debt, price)
        print(f"Price:            ${_format(quote.price)}")
        print(f"Collateral value: ${_format(quote.collateral_value_usd)}")
        print(f"Debt:             {_format(quote.debt)}")
        print(f"Health factor:    {_format(quote.health_factor)}")
        print(f"Can open:         {'yes' if quote.can_open else 'no'}")
        print(f"Liquidatable:     {'YES' if quote.liquidatable else 'no'}")
    else:
        build_parser().print_help()
        sys.exit(1)


def main() -> None:
    """Entry point."""
    parser = build_parser()
    args = parser.parse_args()

    if not args.command:
        parser.print_help()
        sys.exit(1)

    asyncio.run(_run(args))

"""Unit tests for CLI argument parsing and position quotes."""
from __future__ import annotations

import argparse

import pytest

from dsc_engine.cli import _decimal_amount, build_parser, quote_position
from dsc_engine.config import AppConfig
from dsc_engine.fixed_point import PRECISION


class TestBuildParser:
    def test_price_command(self) -> None:
        args = build_parser().parse_args(["price"])
        assert args.command == "price"

    def test_quote_command(self) -> None:
        args = build_parser().parse_args(
            ["quote", "--collateral", "1.5", "--debt", "1000", "--price", "2000"]
        )
        assert args.command == "quote"
        assert args.collateral == 15 * 10**17
        assert args.debt == 1000 * PRECISION
        assert args.price == 2000 * PRECISION

    def test_quote_price_optional(self) -> None:
        args = build_parser().parse_args(["quote", "--collateral", "1", "--debt", "0"])
        assert args.price is None

    def test_quote_requires_amounts(self) -> None:
        with pytest.raises(SystemExit):
            build_parser().parse_args(["quote", "--debt", "1"])

    def test_non_finite_amount_is_usage_error(self) -> None:
        with pytest.raises(SystemExit):
            build_parser().parse_args(["quote", "--collateral", "nan", "--debt", "1"])

    def test_config_flag(self) -> None:
        args = build_parser().parse_args(["--config", "/tmp/c.yaml", "price"])
        assert args.config == "/tmp/c.yaml"

    def test_log_level_flag(self) -> None:
        args = build_parser().parse_args(["--log-level", "DEBUG", "price"])
        assert args.log_level == "DEBUG"

    def test_no_command(self) -> None:
        args = build_parser().parse_args([])
        assert args.command is None


class TestDecimalAmount:
    def test_fraction(self) -> None:
        assert _decimal_amount("0.000000000000000001") == 1

    @pytest.mark.parametrize("value", ["abc", "-1", "nan", "inf", "-Infinity", "sNaN"])
    def test_rejects(self, value: str) -> None:
        with pytest.raises(argparse.ArgumentTypeError):
            _decimal_amount(value)


class TestQuotePosition:
    def test_boundary_position_can_open(self) -> None:
        quote = quote_position(AppConfig(), PRECISION, 1000 * PRECISION, 2000 * PRECISION)
        assert quote.collateral_value_usd == 2000 * PRECISION
        assert quote.health_factor == PRECISION
        assert quote.can_open
        assert not quote.liquidatable

    def test_underwater_position(self) -> None:
        quote = quote_position(AppConfig(), PRECISION, 1000 * PRECISION, 1500 * PRECISION)
        assert not quote.can_open
        assert quote.liquidatable

    def test_no_debt(self) -> None:
        quote = quote_position(AppConfig(), 0, 0, 2000 * PRECISION)
        assert quote.health_factor == 100 * PRECISION
        assert quote.can_open
        assert not quote.liquidatable

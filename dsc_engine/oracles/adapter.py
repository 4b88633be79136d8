"""Reads the collateral price and converts between asset and USD amounts."""
from __future__ import annotations

from ..fixed_point import PRECISION, mul_div, to_fixed
from ..interfaces.price_oracle import PriceSource


class PriceOracleAdapter:
    """18-decimal view over a ``PriceSource`` of any precision.

    Conversions never divide by a non-positive price: both return ``0`` when
    the price is zero or negative.
    """

    def __init__(self, source: PriceSource) -> None:
        self._source = source

    def latest_price(self) -> int:
        return to_fixed(self._source.latest_price(), self._source.decimals)

    def usd_value(self, amount: int, price: int | None = None) -> int:
        """USD value (18 decimals) of *amount* collateral units."""
        if price is None:
            price = self.latest_price()
        if price <= 0:
            return 0
        return mul_div(amount, price, PRECISION)

    def asset_amount_for_usd(self, usd_amount: int, price: int | None = None) -> int:
        """Collateral units worth *usd_amount*, rounded down."""
        if price is None:
            price = self.latest_price()
        if price <= 0:
            return 0
        return mul_div(usd_amount, PRECISION, price)

"""Price source protocol, a single-value price feed abstraction."""
from typing import Protocol


class PriceSource(Protocol):
    """Abstract interface for reading the collateral price.

    ``latest_price`` returns the most recent observation as an integer with
    ``decimals`` decimals. Zero and negative answers are valid return values.
    """

    decimals: int

    def latest_price(self) -> int: ...

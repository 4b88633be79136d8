"""Fixed price feed, updated by hand."""
import logging

logger = logging.getLogger(__name__)


class StaticPriceFeed:
    """Price source that reports whatever was last set with ``update``."""

    def __init__(self, price: int, decimals: int = 18) -> None:
        self.decimals = decimals
        self._price = price

    def latest_price(self) -> int:
        return self._price

    def update(self, price: int) -> None:
        logger.debug("Static price updated %s -> %s", self._price, price)
        self._price = price

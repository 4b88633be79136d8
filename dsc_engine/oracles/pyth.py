"""Pyth Network price feed."""
import logging
import ssl

import aiohttp
import certifi

from ..config import PythConfig
from ..fixed_point import to_fixed

logger = logging.getLogger(__name__)


class PythPriceFeed:
    """Collateral price from a single Pyth Hermes feed, cached between refreshes.

    ``latest_price`` is synchronous and never fails: it returns the last
    successfully fetched price (18 decimals), or ``0`` before the first one.
    """

    decimals = 18

    def __init__(self, config: PythConfig) -> None:
        self.hermes_url = config.hermes_url
        self.feed_id = config.feed_id
        self._price = 0

    def latest_price(self) -> int:
        return self._price

    async def refresh(self) -> int:
        """Fetch the current price from Pyth and cache it.

        Returns the cached price, which is unchanged when the fetch fails.
        """
        if not self.feed_id:
            logger.warning("Pyth feed id not configured")
            return self._price

        url = f"{self.hermes_url}?ids[]={self.feed_id}"

        ssl_context = ssl.create_default_context(cafile=certifi.where())
        connector = aiohttp.TCPConnector(ssl=ssl_context)

        try:
            async with aiohttp.ClientSession(connector=connector) as session:
                async with session.get(url) as response:
                    if response.status != 200:
                        logger.error(
                            "Error fetching price from Pyth: HTTP %s", response.status
                        )
                        return self._price

                    data = await response.json()

                    for item in data.get("parsed", []):
                        if item.get("id") != self.feed_id:
                            continue
                        price_data = item.get("price", {})
                        price_raw = int(price_data.get("price", 0))
                        expo = int(price_data.get("expo", 0))

                        # price_raw * 10**expo, expressed with 18 decimals
                        self._price = to_fixed(price_raw, -expo)
                        logger.info("Fetched Pyth price for %s: %s", self.feed_id, self._price)
                        break
                    else:
                        logger.error("Feed %s missing from Pyth response", self.feed_id)

        except Exception as e:
            logger.error("Error fetching price from Pyth: %s", e)

        return self._price

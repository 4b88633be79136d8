"""Price feeds and the adapter the engine reads them through."""
from .adapter import PriceOracleAdapter
from .pyth import PythPriceFeed
from .static import StaticPriceFeed

__all__ = ["PriceOracleAdapter", "PythPriceFeed", "StaticPriceFeed"]

"""Protocol interfaces for the engine's external collaborators."""
from .price_oracle import PriceSource
from .token import CollateralToken, SyntheticToken

__all__ = ["CollateralToken", "PriceSource", "SyntheticToken"]

"""Price oracles."""
from .adapter import PriceOracleAdapter
from .pyth import PythPriceFeed, PythPriceService

__all__ = ["PriceOracleAdapter", "PythPriceFeed", "PythPriceService"]

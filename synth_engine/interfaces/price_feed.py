"""Price feed protocol — latest USD quote for one asset."""
from typing import Protocol

from ..models import PriceQuote


class PriceFeed(Protocol):
    """Abstract interface for a single asset's price source.

    Raises ``PriceUnavailable`` when no quote can be produced.
    """

    def latest_quote(self) -> PriceQuote: ...

"""Price oracle adapter — fixed-point USD valuation of collateral amounts."""
from __future__ import annotations

import logging

from ..errors import PriceUnavailable
from ..fixed_point import checked_div, checked_mul, feed_scale
from ..models import Asset
from ..registry import AssetRegistry

logger = logging.getLogger(__name__)

_MAX_FEED_DECIMALS = 18


class PriceOracleAdapter:
    """Normalizes live feed quotes to the engine's precision.

    Every call re-queries the bound feed; nothing is cached here. USD
    amounts are PRECISION-scaled, token amounts are in the asset's own
    native precision (``10**asset.decimals`` per whole unit).
    """

    def __init__(self, registry: AssetRegistry) -> None:
        self._registry = registry

    def scaled_price(self, asset: Asset) -> int:
        """Latest USD price of one whole unit of ``asset``, PRECISION-scaled."""
        quote = asset.price_feed.latest_quote()
        if quote.price <= 0:
            raise PriceUnavailable(asset.address, f"non-positive price {quote.price}")
        if not 0 <= quote.decimals <= _MAX_FEED_DECIMALS:
            raise PriceUnavailable(
                asset.address, f"unsupported decimals {quote.decimals}"
            )
        return checked_mul(quote.price, feed_scale(quote.decimals))

    def usd_value(self, asset: str, amount: int) -> int:
        """USD value of ``amount`` native units of ``asset``."""
        registered = self._registry.get(asset)
        scaled = self.scaled_price(registered)
        return checked_div(checked_mul(scaled, amount), 10**registered.decimals)

    def token_amount_for_usd(self, asset: str, usd_amount: int) -> int:
        """Native units of ``asset`` worth ``usd_amount``."""
        registered = self._registry.get(asset)
        scaled = self.scaled_price(registered)
        return checked_div(checked_mul(usd_amount, 10**registered.decimals), scaled)

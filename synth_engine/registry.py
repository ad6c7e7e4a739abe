"""Asset registry — accepted collateral assets and their price sources."""
from __future__ import annotations

import logging
from collections.abc import Iterable, Sequence

from .errors import AssetNotAllowed, ConfigurationError
from .interfaces import CollateralToken, PriceFeed
from .models import Asset

logger = logging.getLogger(__name__)


class AssetRegistry:
    """Fixed set of collateral assets, enumerable in registration order."""

    def __init__(
        self, tokens: Sequence[CollateralToken], price_feeds: Sequence[PriceFeed]
    ) -> None:
        if len(tokens) != len(price_feeds):
            raise ConfigurationError(
                f"Token and price feed lists differ in length "
                f"({len(tokens)} != {len(price_feeds)})"
            )

        self._assets: dict[str, Asset] = {}
        for token, feed in zip(tokens, price_feeds):
            self._add(
                Asset(
                    address=token.address,
                    decimals=token.decimals,
                    price_feed=feed,
                    token=token,
                )
            )

        logger.debug("Registered %d collateral assets", len(self._assets))

    @classmethod
    def from_assets(cls, assets: Iterable[Asset]) -> AssetRegistry:
        """Registry over prebuilt assets, e.g. priced-only entries without a token."""
        registry = cls([], [])
        for asset in assets:
            registry._add(asset)
        return registry

    def _add(self, asset: Asset) -> None:
        if asset.address in self._assets:
            raise ConfigurationError(f"Asset '{asset.address}' registered twice")
        self._assets[asset.address] = asset

    def is_accepted(self, asset: str) -> bool:
        return asset in self._assets

    def get(self, asset: str) -> Asset:
        """Return the registered asset or raise ``AssetNotAllowed``."""
        try:
            return self._assets[asset]
        except KeyError:
            raise AssetNotAllowed(asset) from None

    def list_assets(self) -> tuple[Asset, ...]:
        return tuple(self._assets.values())

    def __len__(self) -> int:
        return len(self._assets)

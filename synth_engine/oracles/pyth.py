"""Pyth Network price feeds backed by the Hermes HTTP API."""
from __future__ import annotations

import logging
import ssl

import aiohttp
import certifi

from ..config import PythConfig
from ..errors import PriceUnavailable
from ..models import PriceQuote

logger = logging.getLogger(__name__)


def parse_quote(price_data: dict) -> PriceQuote:
    """Convert a Hermes ``price`` object into an integer quote."""
    price_raw = int(price_data.get("price", 0))
    expo = int(price_data.get("expo", 0))
    if expo > 0:
        return PriceQuote(price=price_raw * 10**expo, decimals=0)
    return PriceQuote(price=price_raw, decimals=-expo)


class PythPriceService:
    """Fetch quotes from Pyth Network and serve them as per-symbol feeds."""

    def __init__(self, config: PythConfig) -> None:
        self.hermes_url = config.hermes_url
        self.price_feeds = dict(config.feeds)
        self._quotes: dict[str, PriceQuote] = {}

    async def refresh(self, symbols: list[str] | None = None) -> dict[str, PriceQuote]:
        """Fetch current quotes from Pyth Network.

        Args:
            symbols: Optional list of symbols to fetch. If None, fetches all
                     configured feeds.

        Returns the quotes fetched by this call. Symbols that could not be
        fetched keep their previous quote.
        """
        fetched: dict[str, PriceQuote] = {}

        feeds = self.price_feeds
        if symbols is not None:
            feeds = {k: v for k, v in self.price_feeds.items() if k in symbols}

        feed_ids = list(set(feeds.values()))
        if not feed_ids:
            return fetched

        query_params = "&".join([f"ids[]={fid}" for fid in feed_ids])
        url = f"{self.hermes_url}?{query_params}"

        ssl_context = ssl.create_default_context(cafile=certifi.where())
        connector = aiohttp.TCPConnector(ssl=ssl_context)

        try:
            async with aiohttp.ClientSession(connector=connector) as session:
                async with session.get(url) as response:
                    if response.status != 200:
                        logger.error(
                            "Error fetching prices from Pyth: HTTP %s", response.status
                        )
                        return fetched

                    data = await response.json()
                    parsed = data.get("parsed", [])

                    # Reverse mapping from feed ID to symbols
                    id_to_symbols: dict[str, list[str]] = {}
                    for symbol, feed_id in feeds.items():
                        id_to_symbols.setdefault(_normalize_id(feed_id), []).append(symbol)

                    for item in parsed:
                        feed_id = _normalize_id(item.get("id", ""))
                        if feed_id not in id_to_symbols:
                            continue
                        quote = parse_quote(item.get("price", {}))
                        for symbol in id_to_symbols[feed_id]:
                            fetched[symbol] = quote

        except (aiohttp.ClientError, OSError, ValueError) as e:
            logger.error("Error fetching prices from Pyth: %s", e)
            return fetched

        self._quotes.update(fetched)
        logger.info("Fetched %d quotes from Pyth Network", len(fetched))
        for symbol, quote in sorted(fetched.items()):
            logger.debug("  %s: %d (decimals %d)", symbol, quote.price, quote.decimals)
        return fetched

    def quote(self, symbol: str) -> PriceQuote:
        try:
            return self._quotes[symbol]
        except KeyError:
            raise PriceUnavailable(f"pyth:{symbol}", "no quote fetched") from None

    def feed(self, symbol: str) -> PythPriceFeed:
        if symbol not in self.price_feeds:
            raise KeyError(f"No Pyth feed configured for '{symbol}'")
        return PythPriceFeed(self, symbol)


class PythPriceFeed:
    """Single-symbol view over a :class:`PythPriceService`."""

    def __init__(self, service: PythPriceService, symbol: str) -> None:
        self._service = service
        self.symbol = symbol

    def latest_quote(self) -> PriceQuote:
        return self._service.quote(self.symbol)


def _normalize_id(feed_id: str) -> str:
    return feed_id.lower().removeprefix("0x")

"""Best-effort spot price lookup (CoinGecko ``simple/price``)."""

from __future__ import annotations

from decimal import Decimal, InvalidOperation

import requests

from gasdeposit.config import RunnerConfig
from gasdeposit.core.models import PriceQuote
from gasdeposit.core.utils import get_logger

LOGGER = get_logger("gasdeposit.prices")

DEFAULT_PRICE_FEED_URL = "https://api.coingecko.com/api/v3/simple/price"


class PriceUnavailable(Exception):
    """Internal signal that the feed did not yield a usable price."""


class PriceOracleClient:
    """Fetches ``asset``/``fiat`` rates; failures degrade to a zero price."""

    def __init__(self, *, base_url: str = DEFAULT_PRICE_FEED_URL, timeout: int = 10) -> None:
        self.base_url = base_url
        self.timeout = timeout

    @classmethod
    def from_config(cls, config: RunnerConfig) -> "PriceOracleClient":
        return cls(base_url=config.api_urls.price_feed, timeout=config.defaults.api_timeout)

    def fetch_price(self, asset: str, fiat_currency: str) -> PriceQuote:
        """Return the current price, or the zero sentinel when it cannot be fetched."""
        LOGGER.info("Fetching %s/%s price", asset.upper(), fiat_currency.upper())
        try:
            price = self._request_price(asset, fiat_currency)
        except (requests.RequestException, PriceUnavailable) as exc:
            LOGGER.warning("Could not fetch %s price: %s", asset, exc)
            return PriceQuote.unavailable(asset, fiat_currency)

        LOGGER.info("%s/%s: %.2f", asset.upper(), fiat_currency.upper(), price)
        return PriceQuote(asset=asset, fiat_currency=fiat_currency, unit_price=price)

    def _request_price(self, asset: str, fiat_currency: str) -> Decimal:
        response = requests.get(
            self.base_url,
            params={"ids": asset, "vs_currencies": fiat_currency},
            timeout=self.timeout,
        )
        if not response.ok:
            raise PriceUnavailable(f"price feed returned status {response.status_code}")

        try:
            payload = response.json()
        except ValueError as exc:
            raise PriceUnavailable(f"price feed returned invalid JSON: {exc}") from exc

        entry = payload.get(asset) if isinstance(payload, dict) else None
        raw_price = entry.get(fiat_currency) if isinstance(entry, dict) else None
        if isinstance(raw_price, bool) or not isinstance(raw_price, (int, float, str)):
            raise PriceUnavailable(f"{asset} price not found in response")

        try:
            price = Decimal(str(raw_price))
        except InvalidOperation as exc:
            raise PriceUnavailable(f"{asset} price is not numeric: {raw_price!r}") from exc
        if not price.is_finite() or price <= 0:
            raise PriceUnavailable(f"{asset} price not found in response")
        return price


__all__ = ["DEFAULT_PRICE_FEED_URL", "PriceOracleClient", "PriceUnavailable"]

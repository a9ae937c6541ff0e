"""CoinGecko simple/price client for BTC and ETH with 24h change."""

from typing import Dict

from briefing.core.http import DEFAULT_TIMEOUT, fetch_json
from briefing.core.logger import logger
from briefing.models.datatypes import ProviderResult, Quote
from briefing.providers.base import DataProvider
from briefing.providers.quotes import to_float

_COINGECKO_URL = "https://api.coingecko.com/api/v3/simple/price"

# CoinGecko id → ticker symbol used in the Digital Assets segment
COINS = {"bitcoin": "BTC/USD", "ethereum": "ETH/USD"}


class CoinGeckoProvider(DataProvider):
    """Keyless single request; both coins must price or the result is unavailable."""

    name = "coingecko"

    def __init__(self, timeout: float = DEFAULT_TIMEOUT) -> None:
        super().__init__()
        self.timeout = timeout

    def fetch(self) -> ProviderResult:
        params = {
            "ids": ",".join(COINS),
            "vs_currencies": "usd",
            "include_24hr_change": "true",
        }
        data = fetch_json(_COINGECKO_URL, params=params, timeout=self.timeout)
        if not isinstance(data, dict):
            return ProviderResult.unavailable(self.name, "non-object response")

        quotes: Dict[str, Quote] = {}
        for coin_id, symbol in COINS.items():
            entry = data.get(coin_id) or {}
            price = to_float(entry.get("usd"))
            if not price:
                return ProviderResult.unavailable(self.name, f"missing usd price for {coin_id}")
            change = to_float(entry.get("usd_24h_change"))
            quotes[symbol] = Quote(symbol=symbol, price=price, change_pct=change or 0.0)

        logger.info(
            f"{self.name}: "
            + ", ".join(f"{s} {q.price:,.2f} ({q.change_pct:+.2f}%)" for s, q in quotes.items())
        )
        return ProviderResult.full(self.name, quotes)

"""Commodity quotes (gold, silver, copper) via Yahoo Finance."""

from typing import Dict, NamedTuple, Optional

from briefing.core.logger import logger
from briefing.models.datatypes import ProviderResult, Quote
from briefing.providers.base import DataProvider
from briefing.providers.quotes import YahooQuoteClient


class CommoditySymbol(NamedTuple):
    yahoo_symbol: str
    symbol: str
    name: str


COMMODITY_SYMBOLS = [
    CommoditySymbol("GLD", "GLD", "Gold"),
    CommoditySymbol("SLV", "SLV", "Silver"),
    CommoditySymbol("HG=F", "HG", "Copper"),
]


class YahooCommodityProvider(DataProvider):
    """Returns a ``{display symbol: Quote}`` map in COMMODITY_SYMBOLS order."""

    name = "yahoo_commodities"

    def __init__(self, client: Optional[YahooQuoteClient] = None) -> None:
        super().__init__()
        self.client = client or YahooQuoteClient()

    def fetch(self) -> ProviderResult:
        raw = self.client.quotes([c.yahoo_symbol for c in COMMODITY_SYMBOLS])
        quotes: Dict[str, Quote] = {}
        for c in COMMODITY_SYMBOLS:
            q = raw.get(c.yahoo_symbol)
            if q:
                quotes[c.symbol] = Quote(symbol=c.symbol, price=q.price, change_pct=q.change_pct)

        logger.info(f"{self.name}: {len(quotes)}/{len(COMMODITY_SYMBOLS)} commodities priced")
        return ProviderResult.from_counts(self.name, quotes, len(quotes), len(COMMODITY_SYMBOLS))

"""Segment snapshot providers — ETF proxies that set a segment's base tone.

Priority within the snapshot category:
  1. AlphaVantageProvider — GLOBAL_QUOTE per proxy (requires ALPHA_VANTAGE_KEY).
     The free tier allows 5 requests/minute, so lookups are serialised with a
     fixed delay between them.
  2. YahooEtfProvider     — the same proxies through yfinance.
  3. HeadlineSynthesisProvider (see ``briefing.pipeline.synthesis``).

Proxy → segment:
    SPY    → Global Markets
    EURUSD → Currencies (tone is the dollar's, so EUR/USD rising reads down)
    XOM    → Energy & Materials
    QQQ    → U.S. Growth & Tech
"""

import time
from typing import Dict, List, Optional

from briefing.core.http import DEFAULT_TIMEOUT, fetch_json
from briefing.core.logger import logger
from briefing.models.datatypes import ProviderResult, Quote, SegmentUpdate, Tone
from briefing.pipeline.tone import classify, signed_pct
from briefing.providers.base import DataProvider
from briefing.providers.quotes import YahooQuoteClient, to_float

_ALPHA_VANTAGE_URL = "https://www.alphavantage.co/query"

PROXIES = ["SPY", "EURUSD", "XOM", "QQQ"]
_YAHOO_SYMBOLS = {"SPY": "SPY", "EURUSD": "EURUSD=X", "XOM": "XOM", "QQQ": "QQQ"}


def updates_from_quotes(quotes: Dict[str, Quote], source_label: str) -> List[SegmentUpdate]:
    """Translate resolved proxy quotes into per-segment tone/description updates."""
    updates: List[SegmentUpdate] = []

    spy = quotes.get("SPY")
    if spy:
        updates.append(SegmentUpdate(
            name="Global Markets",
            direction=classify(spy.change_pct),
            description=f"Session tone and regional risk. Data via {source_label}.",
        ))

    eurusd = quotes.get("EURUSD")
    if eurusd:
        dollar = classify(-eurusd.change_pct)
        description = {
            Tone.UP: "Dollar strengthening vs euro.",
            Tone.DOWN: "Dollar weakening vs euro.",
        }.get(dollar, "Dollar range-bound.")
        updates.append(SegmentUpdate(name="Currencies", direction=dollar, description=description))

    xom = quotes.get("XOM")
    if xom:
        tone = classify(xom.change_pct)
        tail = {Tone.UP: "Commodities firmer.", Tone.DOWN: "Oil pressure."}.get(tone, "Flat.")
        updates.append(SegmentUpdate(
            name="Energy & Materials",
            direction=tone,
            description=f"Energy (XOM) {signed_pct(xom.change_pct)}. {tail}",
        ))

    qqq = quotes.get("QQQ")
    if qqq:
        tone = classify(qqq.change_pct)
        tail = {Tone.UP: "Tech leading.", Tone.DOWN: "Growth under pressure."}.get(tone, "Mixed.")
        updates.append(SegmentUpdate(
            name="U.S. Growth & Tech",
            direction=tone,
            description=f"Nasdaq (QQQ) {signed_pct(qqq.change_pct)}. {tail}",
        ))

    return updates


class AlphaVantageProvider(DataProvider):
    """Alpha Vantage GLOBAL_QUOTE, one symbol per request, paced by ``request_delay``."""

    name = "alpha_vantage"
    requires_key = True

    def __init__(self, api_key: Optional[str] = None, request_delay: float = 12.5,
                 timeout: float = DEFAULT_TIMEOUT) -> None:
        super().__init__(api_key)
        self.request_delay = request_delay
        self.timeout = timeout

    def fetch(self) -> ProviderResult:
        quotes: Dict[str, Quote] = {}
        for i, symbol in enumerate(PROXIES):
            if i and self.request_delay:
                time.sleep(self.request_delay)
            quote = self._global_quote(symbol)
            if quote:
                quotes[symbol] = quote

        updates = updates_from_quotes(quotes, "Alpha Vantage")
        return ProviderResult.from_counts(self.name, updates, len(quotes), len(PROXIES))

    def _global_quote(self, symbol: str) -> Optional[Quote]:
        params = {"function": "GLOBAL_QUOTE", "symbol": symbol, "apikey": self.api_key}
        data = fetch_json(_ALPHA_VANTAGE_URL, params=params, timeout=self.timeout)
        if not isinstance(data, dict):
            return None
        if "Note" in data or "Information" in data:
            logger.warning(f"{self.name}: rate limited on {symbol}: {data.get('Note') or data.get('Information')}")
            return None

        q = data.get("Global Quote") or {}
        change_pct = to_float(q.get("10. change percent"))
        if change_pct is None:
            return None
        return Quote(symbol=symbol, price=to_float(q.get("05. price")), change_pct=change_pct)


class YahooEtfProvider(DataProvider):
    """The same proxies through yfinance; keyless."""

    name = "yahoo_etf"

    def __init__(self, client: Optional[YahooQuoteClient] = None) -> None:
        super().__init__()
        self.client = client or YahooQuoteClient()

    def fetch(self) -> ProviderResult:
        raw = self.client.quotes([_YAHOO_SYMBOLS[p] for p in PROXIES])
        quotes = {
            proxy: raw[yahoo_symbol]
            for proxy, yahoo_symbol in _YAHOO_SYMBOLS.items()
            if yahoo_symbol in raw
        }
        updates = updates_from_quotes(quotes, "Yahoo Finance")
        return ProviderResult.from_counts(self.name, updates, len(quotes), len(PROXIES))

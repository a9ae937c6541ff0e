"""Index quote providers for the Global Markets segment.

Priority within the global_markets category:
  1. FmpProvider         — FMP stable batch-quote (requires FMP_API_KEY)
  2. StooqProvider       — free daily CSV per symbol, paced sequential requests
  3. YahooIndexProvider  — yfinance batch download, per-symbol history fallback

All three resolve the same 8 indices + VIX and emit one :class:`Region` per
symbol, in a fixed order; unresolved symbols become placeholders.
"""

import io
import time
from typing import Dict, List, NamedTuple, Optional, Sequence

import pandas as pd
import yfinance as yf

from briefing.core.http import BROWSER_USER_AGENT, DEFAULT_TIMEOUT, fetch_json, fetch_text
from briefing.core.logger import logger
from briefing.models.datatypes import GlobalMarketsData, ProviderResult, Quote
from briefing.pipeline.tone import build_region, mean_tone
from briefing.providers.base import DataProvider


class IndexSymbol(NamedTuple):
    symbol: str
    label: str
    volatility_style: bool = False


# Yahoo-style symbols (FMP uses the same)
GLOBAL_INDEX_SYMBOLS: List[IndexSymbol] = [
    IndexSymbol("^GSPC", "S&P 500"),
    IndexSymbol("^DJI", "Dow Jones"),
    IndexSymbol("^IXIC", "Nasdaq"),
    IndexSymbol("^STOXX50E", "Euro Stoxx 50"),
    IndexSymbol("^GDAXI", "DAX"),
    IndexSymbol("^N225", "Nikkei 225"),
    IndexSymbol("^HSI", "Hang Seng"),
    IndexSymbol("^SSEC", "Shanghai Composite"),
    IndexSymbol("^VIX", "VIX", volatility_style=True),
]

# Stooq names the S&P 500 ^SPX
STOOQ_INDEX_SYMBOLS: List[IndexSymbol] = [
    IndexSymbol("^SPX", "S&P 500"),
    *GLOBAL_INDEX_SYMBOLS[1:],
]

_FMP_BATCH_URL = "https://financialmodelingprep.com/stable/batch-quote"
_STOOQ_CSV_URL = "https://stooq.com/q/d/l/"


# ── helpers ───────────────────────────────────────────────────────────────────

def to_float(value) -> Optional[float]:
    """Coerce provider numbers (often strings like ``"1.23%"``) to float."""
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, str):
        value = value.strip().rstrip("%")
    try:
        number = float(value)
    except (TypeError, ValueError):
        return None
    return None if pd.isna(number) else number


def quote_from_closes(symbol: str, closes: Optional[pd.Series]) -> Optional[Quote]:
    """Compute % change of the last close vs the previous close.

    Returns None when fewer than two closes exist or the previous close is not
    positive.
    """
    if closes is None:
        return None
    closes = pd.to_numeric(closes, errors="coerce").dropna()
    if len(closes) < 2:
        return None
    prev_close = float(closes.iloc[-2])
    last_close = float(closes.iloc[-1])
    if prev_close <= 0:
        return None
    pct = (last_close - prev_close) / prev_close * 100.0
    return Quote(symbol=symbol, price=last_close, change_pct=pct)


def build_global_markets(
    provider: str,
    symbols: Sequence[IndexSymbol],
    pct_by_symbol: Dict[str, float],
    source_label: str,
) -> ProviderResult:
    """Turn resolved per-symbol changes into a graded Global Markets payload."""
    regions = [
        build_region(s.label, pct_by_symbol.get(s.symbol), s.volatility_style)
        for s in symbols
    ]
    live = [r for r in regions if not r.is_placeholder]
    direction = mean_tone(r.change_pct for r in live if not r.is_volatility_style)
    payload = GlobalMarketsData(
        regions=regions,
        direction=direction,
        description=f"Session tone and regional risk. Data via {source_label}.",
    )
    logger.info(f"{provider}: {len(live)}/{len(regions)} regions live, tone={direction.value}")
    return ProviderResult.from_counts(provider, payload, len(live), len(regions))


class YahooQuoteClient:
    """Yahoo Finance quotes via yfinance: one batch download, then per-symbol.

    The per-symbol pass only runs when the batch resolves nothing, and sleeps
    ``symbol_delay`` seconds between lookups.
    """

    def __init__(self, symbol_delay: float = 0.3) -> None:
        self.symbol_delay = symbol_delay

    def quotes(self, symbols: Sequence[str]) -> Dict[str, Quote]:
        resolved = self._batch(symbols)
        if resolved:
            return resolved
        logger.warning(f"yahoo: batch resolved nothing for {len(symbols)} symbols, trying one-by-one")
        return self._per_symbol(symbols)

    def _batch(self, symbols: Sequence[str]) -> Dict[str, Quote]:
        try:
            frame = yf.download(
                tickers=list(symbols), period="5d", interval="1d",
                group_by="ticker", progress=False, threads=False, auto_adjust=False,
            )
        except Exception as exc:
            logger.warning(f"yahoo: batch download failed: {exc}")
            return {}
        if frame is None or frame.empty:
            return {}

        resolved: Dict[str, Quote] = {}
        for symbol in symbols:
            quote = quote_from_closes(symbol, _close_column(frame, symbol))
            if quote:
                resolved[symbol] = quote
        return resolved

    def _per_symbol(self, symbols: Sequence[str]) -> Dict[str, Quote]:
        resolved: Dict[str, Quote] = {}
        for i, symbol in enumerate(symbols):
            if i and self.symbol_delay:
                time.sleep(self.symbol_delay)
            try:
                hist = yf.Ticker(symbol).history(period="5d")
            except Exception as exc:
                logger.warning(f"yahoo: history failed for {symbol}: {exc}")
                continue
            if hist is None or hist.empty or "Close" not in hist.columns:
                continue
            quote = quote_from_closes(symbol, hist["Close"])
            if quote:
                resolved[symbol] = quote
        return resolved


def _close_column(frame: pd.DataFrame, symbol: str) -> Optional[pd.Series]:
    """Pick ``symbol``'s Close column from a (possibly multi-ticker) download."""
    if isinstance(frame.columns, pd.MultiIndex):
        if symbol not in frame.columns.get_level_values(0):
            return None
        sub = frame[symbol]
    else:
        sub = frame
    if "Close" not in sub.columns:
        return None
    return sub["Close"]


# ── providers ─────────────────────────────────────────────────────────────────

class FmpProvider(DataProvider):
    """Financial Modeling Prep batch quote for the 9 index symbols."""

    name = "fmp"
    requires_key = True

    def __init__(self, api_key: Optional[str] = None, timeout: float = DEFAULT_TIMEOUT) -> None:
        super().__init__(api_key)
        self.timeout = timeout

    def fetch(self) -> ProviderResult:
        params = {
            "symbols": ",".join(s.symbol for s in GLOBAL_INDEX_SYMBOLS),
            "apikey": self.api_key,
        }
        data = fetch_json(_FMP_BATCH_URL, params=params, timeout=self.timeout)
        if not isinstance(data, list) or not data:
            return ProviderResult.unavailable(self.name, "empty or non-list batch response")

        pct_by_symbol: Dict[str, float] = {}
        for row in data:
            if not isinstance(row, dict) or not row.get("symbol"):
                continue
            pct = _fmp_change_pct(row)
            if pct is not None:
                pct_by_symbol[row["symbol"]] = pct

        return build_global_markets(self.name, GLOBAL_INDEX_SYMBOLS, pct_by_symbol, "FMP")


def _fmp_change_pct(row: dict) -> Optional[float]:
    """FMP has shipped both ``changesPercentage`` and ``changePercent``."""
    for key in ("changesPercentage", "changePercent"):
        pct = to_float(row.get(key))
        if pct is not None:
            return pct
    change = to_float(row.get("change"))
    price = to_float(row.get("price"))
    if change and price and price != change:
        return change / (price - change) * 100.0
    return None


class StooqProvider(DataProvider):
    """Stooq daily CSV, one request per symbol with a fixed inter-request delay."""

    name = "stooq"

    def __init__(self, request_delay: float = 0.2, timeout: float = 15) -> None:
        super().__init__()
        self.request_delay = request_delay
        self.timeout = timeout

    def fetch(self) -> ProviderResult:
        headers = {"User-Agent": BROWSER_USER_AGENT}
        pct_by_symbol: Dict[str, float] = {}

        for i, index in enumerate(STOOQ_INDEX_SYMBOLS):
            if i and self.request_delay:
                time.sleep(self.request_delay)
            body = fetch_text(
                _STOOQ_CSV_URL, params={"s": index.symbol, "i": "d"},
                timeout=self.timeout, headers=headers,
            )
            quote = _parse_stooq_csv(index.symbol, body)
            if quote:
                pct_by_symbol[index.symbol] = quote.change_pct
            else:
                logger.debug(f"{self.name}: no usable rows for {index.symbol}")

        return build_global_markets(self.name, STOOQ_INDEX_SYMBOLS, pct_by_symbol, "Stooq")


def _parse_stooq_csv(symbol: str, body: Optional[str]) -> Optional[Quote]:
    """Parse Stooq's ``Date,Open,High,Low,Close,Volume`` CSV into a Quote."""
    if not body or not body.strip():
        return None
    try:
        frame = pd.read_csv(io.StringIO(body.strip()))
    except (ValueError, pd.errors.ParserError) as exc:
        logger.warning(f"stooq: unparseable CSV for {symbol}: {exc}")
        return None
    if "Close" not in frame.columns:
        return None
    return quote_from_closes(symbol, frame["Close"])


class YahooIndexProvider(DataProvider):
    """Yahoo Finance via yfinance — last resort for index quotes."""

    name = "yahoo_index"

    def __init__(self, client: Optional[YahooQuoteClient] = None) -> None:
        super().__init__()
        self.client = client or YahooQuoteClient()

    def fetch(self) -> ProviderResult:
        quotes = self.client.quotes([s.symbol for s in GLOBAL_INDEX_SYMBOLS])
        pct_by_symbol = {sym: q.change_pct for sym, q in quotes.items()}
        return build_global_markets(self.name, GLOBAL_INDEX_SYMBOLS, pct_by_symbol, "Yahoo Finance")

"""Segment merger — folds provider results into the fixed segment list.

Every merge is pure: it takes the current segment list and returns a new one
in which only the segment named by the binding is replaced. Collections are
always replaced, never appended, so applying a merge twice equals applying it
once.

Each segment has exactly one populating source (SEGMENT_BINDINGS):

    Global Markets        ← global_markets  (regions; index outline on failure)
    Digital Assets        ← crypto          (tickers)
    Commodities           ← commodities     (tickers; name-only outline on failure)
    every other segment   ← outline         (static name-only tickers)

The snapshot category runs first as a base layer and only touches direction
and description.
"""

from dataclasses import dataclass, replace
from typing import Callable, Dict, List, Optional, Sequence

from briefing.models.datatypes import (
    GlobalMarketsData, ProviderResult, Segment, SegmentUpdate, Ticker, Tone,
)
from briefing.pipeline.tone import classify, mean_tone, placeholder_region, signed_pct
from briefing.providers.commodities import COMMODITY_SYMBOLS
from briefing.providers.quotes import GLOBAL_INDEX_SYMBOLS

# ── static outlines (name only; no price means no live data) ─────────────────

def _outline(*pairs: str) -> List[Ticker]:
    return [Ticker(symbol=pairs[i], name=pairs[i + 1]) for i in range(0, len(pairs), 2)]


OUTLINES: Dict[str, List[Ticker]] = {
    "Currencies": _outline(
        "DXY", "U.S. Dollar", "EUR/USD", "EUR/USD", "USD/JPY", "USD/JPY",
        "GBP/USD", "GBP/USD", "CNY/USD", "CNY/USD", "AUD/USD", "AUD/USD",
        "USD/CAD", "USD/CAD", "USD/CHF", "USD/CHF",
    ),
    "Bonds & Rates": _outline(
        "US10Y", "U.S. 10Y Treasury", "US2Y", "U.S. 2Y Treasury",
        "DE10Y", "German 10Y Bund", "DE2Y", "German 2Y Schatz",
        "JP10Y", "Japan 10Y Bond", "JP2Y", "Japan 2Y Bond",
        "CN10Y", "China 10Y Bond", "CN2Y", "China 2Y Bond",
        "TIP", "US TIPS", "TLT", "Long Duration Treasuries",
        "LQD", "Investment Grade Credit", "HYG", "High Yield Credit",
    ),
    "Energy & Materials": _outline(
        "BRENT", "U.K. Oil", "WTI", "U.S. Oil", "NG", "U.S. Natural Gas",
        "TTF", "EU Natural Gas", "COAL", "Coal", "KRBN", "Carbon ETF",
    ),
    "U.S. Growth & Tech": _outline(
        "AAPL", "Apple", "MSFT", "Microsoft", "TSLA", "Tesla", "AMZN", "Amazon",
        "GOOGL", "Google", "META", "Meta", "SMH", "VanEck Semiconductor ETF",
        "SOXX", "Semiconductors",
    ),
    "Sector Performance": _outline(
        "XLK", "Technology", "XLF", "Financials", "XLE", "Energy",
        "XLV", "Health Care", "XLY", "Consumer Discretionary", "XLP", "Consumer Staples",
        "XLI", "Industrials", "XLB", "Materials", "XLU", "Utilities",
    ),
    "Real Estate": _outline(
        "VNQ", "U.S. REITs", "REET", "Global Real Estate", "IYR", "Dow Jones REIT",
    ),
    "Top Movers": _outline("▲", "Leading", "▼", "Lagging"),
}

COMMODITY_OUTLINE = _outline(
    "GOLD", "Gold", "XAG", "Silver", "COPPER", "Copper", "WHEAT", "Wheat",
    "CORN", "Corn", "SOY", "Soybeans", "COFFEE", "Coffee", "BCOM", "Bloomberg Commodity",
)

DIGITAL_ASSETS_ADDITIONAL = _outline(
    "DOGE", "Dogecoin", "SOL", "Solana", "XRP", "XRP", "ADA", "Cardano", "AVAX", "Avalanche",
)

GLOBAL_MARKETS_OUTLINE = [
    placeholder_region(s.label, s.volatility_style) for s in GLOBAL_INDEX_SYMBOLS
]

GLOBAL_MARKETS_OUTLINE_DESCRIPTION = "Session tone and regional risk across major indices."
COMMODITIES_OUTLINE_DESCRIPTION = "Precious metals, grains, and industrial commodities."
CRYPTO_SENTIMENT_NOTE = "Fear & Greed for sentiment."


# ── per-segment merge strategies ──────────────────────────────────────────────

def merge_global_markets(segment: Segment, result: Optional[ProviderResult]) -> Segment:
    data: Optional[GlobalMarketsData] = result.data if result and result.usable else None
    if data and any(not r.is_placeholder for r in data.regions):
        return replace(
            segment, regions=list(data.regions), tickers=None,
            direction=data.direction, description=data.description,
        )
    # keep whatever tone the snapshot layer gave the segment
    return replace(
        segment, regions=list(GLOBAL_MARKETS_OUTLINE), tickers=None,
        description=GLOBAL_MARKETS_OUTLINE_DESCRIPTION,
    )


def merge_crypto(segment: Segment, result: Optional[ProviderResult]) -> Segment:
    quotes = result.data if result and result.usable else None
    btc = quotes.get("BTC/USD") if quotes else None
    eth = quotes.get("ETH/USD") if quotes else None
    if not (btc and eth):
        return replace(
            segment, direction=Tone.FLAT, description=CRYPTO_SENTIMENT_NOTE,
            tickers=list(DIGITAL_ASSETS_ADDITIONAL), regions=None,
        )

    live = [
        Ticker(symbol="BTC/USD", name="Bitcoin", price=btc.price, change_pct=btc.change_pct),
        Ticker(symbol="ETH/USD", name="Ethereum", price=eth.price, change_pct=eth.change_pct),
    ]
    return replace(
        segment,
        direction=classify((btc.change_pct + eth.change_pct) / 2),
        description=(
            f"BTC {signed_pct(btc.change_pct)}, ETH {signed_pct(eth.change_pct)}. "
            f"{CRYPTO_SENTIMENT_NOTE}"
        ),
        tickers=live + list(DIGITAL_ASSETS_ADDITIONAL),
        regions=None,
    )


def merge_commodities(segment: Segment, result: Optional[ProviderResult]) -> Segment:
    quotes = result.data if result and result.usable else {}
    tickers = [
        Ticker(symbol=c.symbol, name=c.name, price=quotes[c.symbol].price,
               change_pct=quotes[c.symbol].change_pct)
        for c in COMMODITY_SYMBOLS
        if c.symbol in quotes
    ]
    if not tickers:
        return replace(
            segment, direction=Tone.FLAT, description=COMMODITIES_OUTLINE_DESCRIPTION,
            tickers=list(COMMODITY_OUTLINE), regions=None,
        )
    return replace(
        segment,
        direction=mean_tone(t.change_pct for t in tickers),
        description=", ".join(f"{t.name} {signed_pct(t.change_pct)}" for t in tickers) + ".",
        tickers=tickers,
        regions=None,
    )


def merge_outline(segment: Segment, result: Optional[ProviderResult]) -> Segment:
    return replace(segment, tickers=list(OUTLINES[segment.name]), regions=None)


@dataclass(frozen=True)
class SegmentBinding:
    """Which source category populates a segment, and how."""
    segment: str
    source: str
    merge: Callable[[Segment, Optional[ProviderResult]], Segment]


OUTLINE_SOURCE = "outline"

SEGMENT_BINDINGS: Dict[str, SegmentBinding] = {
    b.segment: b for b in [
        SegmentBinding("Global Markets", "global_markets", merge_global_markets),
        SegmentBinding("Currencies", OUTLINE_SOURCE, merge_outline),
        SegmentBinding("Bonds & Rates", OUTLINE_SOURCE, merge_outline),
        SegmentBinding("Digital Assets", "crypto", merge_crypto),
        SegmentBinding("Commodities", "commodities", merge_commodities),
        SegmentBinding("Energy & Materials", OUTLINE_SOURCE, merge_outline),
        SegmentBinding("U.S. Growth & Tech", OUTLINE_SOURCE, merge_outline),
        SegmentBinding("Sector Performance", OUTLINE_SOURCE, merge_outline),
        SegmentBinding("Real Estate", OUTLINE_SOURCE, merge_outline),
        SegmentBinding("Top Movers", OUTLINE_SOURCE, merge_outline),
    ]
}


# ── fold ──────────────────────────────────────────────────────────────────────

def merge(segments: Sequence[Segment], binding: SegmentBinding,
          result: Optional[ProviderResult]) -> List[Segment]:
    """Return a new list with ``binding.segment`` merged; others pass through."""
    return [binding.merge(s, result) if s.name == binding.segment else s for s in segments]


def apply_snapshot(segments: Sequence[Segment], updates: Sequence[SegmentUpdate]) -> List[Segment]:
    """Overlay base tone/description updates by segment name."""
    by_name = {u.name: u for u in updates}
    merged = []
    for s in segments:
        u = by_name.get(s.name)
        merged.append(replace(s, direction=u.direction, description=u.description) if u else s)
    return merged


def merge_all(segments: Sequence[Segment], results: Dict[str, ProviderResult]) -> List[Segment]:
    """Fold every binding over ``segments`` in segment order."""
    merged = list(segments)
    for binding in SEGMENT_BINDINGS.values():
        merged = merge(merged, binding, results.get(binding.source))
    return merged

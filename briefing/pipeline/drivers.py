"""Market drivers — short labeled summaries picked from merged segments.

Up to four segment drivers, in this order:
    Rates           ← Bonds & Rates
    Tech / Crypto   ← U.S. Growth & Tech, else Digital Assets
    Macro           ← Global Markets
    FX              ← Currencies
followed by a Volatility driver derived from the sentiment index.

A segment description is skipped when it is too long to read as a one-liner
or still carries placeholder phrasing. The static text written for segments
without live data never becomes a driver either.
"""

from typing import List, Optional, Sequence, Tuple

from briefing.models.datatypes import MarketDriver, Segment, SentimentReading
from briefing.pipeline.baseline import _BASELINE_DESCRIPTIONS
from briefing.pipeline.merger import (
    COMMODITIES_OUTLINE_DESCRIPTION, CRYPTO_SENTIMENT_NOTE, GLOBAL_MARKETS_OUTLINE_DESCRIPTION,
)

MAX_SUMMARY_CHARS = 90
MAX_SEGMENT_DRIVERS = 4

PLACEHOLDER_PHRASES = (
    "temporarily unavailable",
    "add api key",
    "no live prices",
    "see readme",
    "outline",
)

# Descriptions written when a segment has no live data
STATIC_DESCRIPTIONS = frozenset({
    *_BASELINE_DESCRIPTIONS.values(),
    GLOBAL_MARKETS_OUTLINE_DESCRIPTION,
    COMMODITIES_OUTLINE_DESCRIPTION,
    CRYPTO_SENTIMENT_NOTE,
})

# (label, candidate segment names in preference order)
DRIVER_SOURCES: List[Tuple[str, Tuple[str, ...]]] = [
    ("Rates", ("Bonds & Rates",)),
    ("Tech / Crypto", ("U.S. Growth & Tech", "Digital Assets")),
    ("Macro", ("Global Markets",)),
    ("FX", ("Currencies",)),
]


def is_informative(description: Optional[str]) -> bool:
    """True when ``description`` reads as a live one-line summary."""
    if not description or not description.strip():
        return False
    if description.strip() in STATIC_DESCRIPTIONS:
        return False
    if len(description) > MAX_SUMMARY_CHARS:
        return False
    lowered = description.lower()
    return not any(phrase in lowered for phrase in PLACEHOLDER_PHRASES)


def volatility_summary(sentiment: SentimentReading) -> str:
    return f"Fear & Greed at {sentiment.value} ({sentiment.label})."


def derive_drivers(segments: Sequence[Segment], sentiment: SentimentReading) -> List[MarketDriver]:
    by_name = {s.name: s for s in segments}
    drivers: List[MarketDriver] = []

    for label, candidates in DRIVER_SOURCES:
        if len(drivers) >= MAX_SEGMENT_DRIVERS:
            break
        for name in candidates:
            segment = by_name.get(name)
            if segment and is_informative(segment.description):
                drivers.append(MarketDriver(label=label, summary=segment.description))
                break

    drivers.append(MarketDriver(label="Volatility", summary=volatility_summary(sentiment)))
    return drivers

"""Baseline record — what the briefing says when every live provider fails.

The baseline alone must satisfy every record invariant once the merger has
added the static outlines, so a run with no network still renders a complete
page. Optionally the narrative fields of the previously written
``briefing.json`` can seed the baseline instead of the canned text.
"""

import json
from pathlib import Path
from typing import List, Optional

from briefing.core.logger import logger
from briefing.models.datatypes import (
    BriefingRecord, Headline, MarketMood, Segment, SentimentReading, Tone,
)

SEGMENT_ORDER: List[str] = [
    "Global Markets",
    "Currencies",
    "Bonds & Rates",
    "Digital Assets",
    "Commodities",
    "Energy & Materials",
    "U.S. Growth & Tech",
    "Sector Performance",
    "Real Estate",
    "Top Movers",
]

_BASELINE_DESCRIPTIONS = {
    "Global Markets": "Market data temporarily unavailable.",
    "Currencies": "Add API keys for live data.",
    "Bonds & Rates": "Government bonds and credit.",
    "Digital Assets": "Add API keys for live data.",
    "Commodities": "Gold, silver, copper data temporarily unavailable.",
    "Energy & Materials": "Add API keys for live data.",
    "U.S. Growth & Tech": "Add API keys for live data.",
    "Sector Performance": "S&P 500 sector ETFs.",
    "Real Estate": "REITs and property.",
    "Top Movers": "Biggest gainers and losers.",
}


def baseline_record() -> BriefingRecord:
    """Return a fresh copy of the hardcoded baseline record."""
    return BriefingRecord(
        big_picture=(
            "Markets are consolidating. Add NEWS_API_KEY for live headlines. "
            "See README for setup."
        ),
        market_mood=MarketMood.NEUTRAL,
        sentiment_index=SentimentReading(value=50, label="Neutral"),
        headline_digest=[
            "Markets await key economic data",
            "Fed policy in focus",
            "Add API keys for live headlines",
        ],
        top_headlines=[
            Headline(source="Reuters", title="Markets digest Fed decision"),
            Headline(source="Bloomberg", title="Add NEWS_API_KEY for live data"),
        ],
        segments=[
            Segment(name=name, direction=Tone.FLAT, description=_BASELINE_DESCRIPTIONS[name])
            for name in SEGMENT_ORDER
        ],
    )


def load_baseline(previous_path: Optional[str | Path] = None) -> BriefingRecord:
    """Baseline record, with narrative fields seeded from ``previous_path`` if readable.

    Segments are never seeded: yesterday's quotes would masquerade as live data.
    """
    record = baseline_record()
    if not previous_path:
        return record

    path = Path(previous_path)
    if not path.exists():
        logger.info(f"baseline: no previous snapshot at {path} — using hardcoded baseline")
        return record

    try:
        with open(path, "r", encoding="utf-8") as f:
            previous = json.load(f)
    except (OSError, ValueError) as exc:
        logger.warning(f"baseline: could not read previous snapshot {path}: {exc}")
        return record

    if not isinstance(previous, dict):
        logger.warning(f"baseline: previous snapshot {path} is not an object — ignoring")
        return record

    _seed_narrative(record, previous)
    logger.info(f"baseline: seeded narrative fields from {path}")
    return record


def _seed_narrative(record: BriefingRecord, previous: dict) -> None:
    """Copy each well-formed narrative field of ``previous`` onto ``record``."""
    big_picture = previous.get("bigPicture")
    if isinstance(big_picture, str) and big_picture.strip():
        record.big_picture = big_picture

    mood = previous.get("marketMood")
    if mood in {m.value for m in MarketMood}:
        record.market_mood = MarketMood(mood)

    sentiment = previous.get("sentimentIndex")
    if not isinstance(sentiment, dict):
        sentiment = {}
    value, label = sentiment.get("value"), sentiment.get("label")
    if isinstance(value, int) and not isinstance(value, bool) and 0 <= value <= 100 and isinstance(label, str):
        record.sentiment_index = SentimentReading(value=value, label=label)

    digest = previous.get("headlineDigest")
    if isinstance(digest, list) and digest and all(isinstance(d, str) for d in digest):
        record.headline_digest = list(digest)

    headlines = [
        Headline(source=h["source"], title=h["title"])
        for h in previous.get("topHeadlines") or []
        if isinstance(h, dict) and isinstance(h.get("source"), str) and isinstance(h.get("title"), str)
    ]
    if headlines:
        record.top_headlines = headlines

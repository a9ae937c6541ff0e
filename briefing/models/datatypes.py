"""Data structures for the market briefing pipeline.

Python attributes are snake_case; ``to_dict`` emits the camelCase keys the
HTML template and the written ``briefing.json`` use.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Optional


class Tone(str, Enum):
    """Closed direction vocabulary for segments, regions and tickers."""
    UP = "up"
    DOWN = "down"
    FLAT = "flat"
    # volatility-style instruments (VIX): rising value means more fear
    ELEVATED = "elevated"
    SUBDUED = "subdued"
    STEADY = "steady"


STANDARD_TONES = frozenset({Tone.UP, Tone.DOWN, Tone.FLAT})
VOLATILITY_TONES = frozenset({Tone.ELEVATED, Tone.SUBDUED, Tone.STEADY})


class MarketMood(str, Enum):
    RISK_ON = "Risk-on"
    RISK_OFF = "Risk-off"
    NEUTRAL = "Neutral"


class ResultStatus(str, Enum):
    """Outcome of one provider call."""
    UNAVAILABLE = "unavailable"
    PARTIAL = "partial"
    FULL = "full"


@dataclass(frozen=True)
class Region:
    """One index/benchmark inside the Global Markets segment.

    ``is_placeholder`` is True exactly when ``change_pct`` is None.
    """
    label: str
    direction: Tone
    change_pct: Optional[float] = None
    is_placeholder: bool = True
    is_volatility_style: bool = False

    def to_dict(self) -> Dict[str, Any]:
        return {
            "label": self.label,
            "direction": self.direction.value,
            "changePct": self.change_pct,
            "isPlaceholder": self.is_placeholder,
            "isVolatilityStyle": self.is_volatility_style,
        }


@dataclass(frozen=True)
class Ticker:
    """One priced instrument. A missing price means it is shown by name only."""
    symbol: str
    name: str
    price: Optional[float] = None
    change_pct: Optional[float] = None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "symbol": self.symbol,
            "name": self.name,
            "price": self.price,
            "changePct": self.change_pct,
        }


@dataclass(frozen=True)
class Segment:
    """One market category; ``name`` is the merge key."""
    name: str
    direction: Tone
    description: str
    regions: Optional[List[Region]] = None
    tickers: Optional[List[Ticker]] = None

    def to_dict(self) -> Dict[str, Any]:
        out: Dict[str, Any] = {
            "name": self.name,
            "direction": self.direction.value,
            "description": self.description,
        }
        if self.regions is not None:
            out["regions"] = [r.to_dict() for r in self.regions]
        if self.tickers is not None:
            out["tickers"] = [t.to_dict() for t in self.tickers]
        return out


@dataclass(frozen=True)
class SentimentReading:
    value: int
    label: str

    def to_dict(self) -> Dict[str, Any]:
        return {"value": self.value, "label": self.label}


@dataclass(frozen=True)
class Headline:
    source: str
    title: str

    def to_dict(self) -> Dict[str, str]:
        return {"source": self.source, "title": self.title}


@dataclass(frozen=True)
class MarketDriver:
    label: str
    summary: str

    def to_dict(self) -> Dict[str, str]:
        return {"label": self.label, "summary": self.summary}


@dataclass
class BriefingRecord:
    """The root artifact, produced exactly once per run."""
    big_picture: str
    market_mood: MarketMood
    sentiment_index: SentimentReading
    headline_digest: List[str]
    top_headlines: List[Headline]
    segments: List[Segment]
    market_drivers: List[MarketDriver] = field(default_factory=list)
    generated_at: str = ""
    date: str = ""

    def segment(self, name: str) -> Optional[Segment]:
        """Return the segment called ``name``, if present."""
        return next((s for s in self.segments if s.name == name), None)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "bigPicture": self.big_picture,
            "marketMood": self.market_mood.value,
            "sentimentIndex": self.sentiment_index.to_dict(),
            "headlineDigest": list(self.headline_digest),
            "topHeadlines": [h.to_dict() for h in self.top_headlines],
            "segments": [s.to_dict() for s in self.segments],
            "marketDrivers": [d.to_dict() for d in self.market_drivers],
            "generatedAt": self.generated_at,
            "date": self.date,
        }


# ── provider payloads ─────────────────────────────────────────────────────────

@dataclass(frozen=True)
class Quote:
    """A normalized quote: last price and percent change vs previous close."""
    symbol: str
    price: Optional[float]
    change_pct: float


@dataclass(frozen=True)
class GlobalMarketsData:
    regions: List[Region]
    direction: Tone
    description: str


@dataclass(frozen=True)
class SegmentUpdate:
    """Direction/description override for one named segment."""
    name: str
    direction: Tone
    description: str


@dataclass(frozen=True)
class ProviderResult:
    """Tagged outcome of a provider call: UNAVAILABLE, PARTIAL or FULL.

    Attributes:
        provider: Provider id (e.g. ``"stooq"``) or category name for a
            category-level failure.
        status: :class:`ResultStatus`.
        data: Provider-specific payload; None when unavailable.
        reason: Why the result is unavailable or partial; empty otherwise.
    """
    provider: str
    status: ResultStatus
    data: Any = None
    reason: str = ""

    @property
    def usable(self) -> bool:
        return self.status is not ResultStatus.UNAVAILABLE

    @classmethod
    def unavailable(cls, provider: str, reason: str) -> "ProviderResult":
        return cls(provider=provider, status=ResultStatus.UNAVAILABLE, reason=reason)

    @classmethod
    def full(cls, provider: str, data: Any) -> "ProviderResult":
        return cls(provider=provider, status=ResultStatus.FULL, data=data)

    @classmethod
    def from_counts(cls, provider: str, data: Any, resolved: int, expected: int) -> "ProviderResult":
        """Grade a multi-symbol payload by how many symbols resolved."""
        if resolved <= 0:
            return cls.unavailable(provider, f"0/{expected} symbols resolved")
        if resolved < expected:
            return cls(
                provider=provider, status=ResultStatus.PARTIAL, data=data,
                reason=f"{resolved}/{expected} symbols resolved",
            )
        return cls.full(provider, data)

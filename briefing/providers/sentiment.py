"""Crypto Fear & Greed index (alternative.me) → sentiment reading and market mood.

Mood mapping:
    value >= 55 → Risk-on
    value <= 45 → Risk-off
    otherwise   → Neutral
"""

from briefing.core.http import DEFAULT_TIMEOUT, fetch_json
from briefing.core.logger import logger
from briefing.models.datatypes import MarketMood, ProviderResult, SentimentReading
from briefing.providers.base import DataProvider

_FNG_URL = "https://api.alternative.me/fng/"

RISK_ON_MIN = 55
RISK_OFF_MAX = 45


def mood_from_value(value: int) -> MarketMood:
    """Derive the overall market mood from a 0-100 sentiment value."""
    if value >= RISK_ON_MIN:
        return MarketMood.RISK_ON
    if value <= RISK_OFF_MAX:
        return MarketMood.RISK_OFF
    return MarketMood.NEUTRAL


class FearGreedProvider(DataProvider):
    """Keyless single-request client for the Fear & Greed index."""

    name = "fear_greed"

    def __init__(self, timeout: float = DEFAULT_TIMEOUT) -> None:
        super().__init__()
        self.timeout = timeout

    def fetch(self) -> ProviderResult:
        data = fetch_json(_FNG_URL, params={"limit": 1}, timeout=self.timeout)
        entries = data.get("data") if isinstance(data, dict) else None
        if not entries or not isinstance(entries[0], dict):
            return ProviderResult.unavailable(self.name, "response missing data[0]")

        entry = entries[0]
        try:
            value = int(entry["value"])
        except (KeyError, TypeError, ValueError):
            return ProviderResult.unavailable(self.name, f"bad value {entry.get('value')!r}")
        if not 0 <= value <= 100:
            return ProviderResult.unavailable(self.name, f"value {value} out of range")

        label = entry.get("value_classification") or "Neutral"
        logger.info(f"{self.name}: value={value} label={label!r}")
        return ProviderResult.full(self.name, SentimentReading(value=value, label=label))

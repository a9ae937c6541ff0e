"""Headline-driven narrative and keyword heuristics.

The big-picture sentence and the short headline digest always come from the
headlines category when it produced data. The keyword heuristic that derives
coarse segment tones is the lowest-priority snapshot provider and only runs
when no ETF-proxy provider succeeded.
"""

from dataclasses import dataclass
from typing import Callable, List, Optional, Sequence, Tuple

from briefing.core.logger import logger
from briefing.models.datatypes import Headline, ProviderResult, SegmentUpdate, Tone
from briefing.providers.base import DataProvider


def clean_title(title: str, source: Optional[str] = None) -> str:
    """Strip a trailing `` - {source}`` attribution and terminal punctuation.

    Dashes elsewhere in the title are left alone.
    """
    title = title.strip()
    if source and title.endswith(f" - {source}"):
        title = title[: -len(f" - {source}")]
    return title.strip().rstrip(".!?;:").strip()


def summarize_headlines(headlines: Sequence[Headline]) -> Optional[str]:
    """Build the big-picture sentence from the first two headlines."""
    parts = [clean_title(h.title, h.source) for h in headlines[:2]]
    parts = [p for p in parts if p]
    if not parts:
        return None
    return f"Today's focus: {'. '.join(parts)}. Markets reacting to headlines."


def headline_digest(headlines: Sequence[Headline], size: int = 3) -> List[str]:
    """Short-form titles, de-duplicated, in feed order."""
    digest: List[str] = []
    for h in headlines:
        title = clean_title(h.title, h.source)
        if title and title not in digest:
            digest.append(title)
        if len(digest) >= size:
            break
    return digest


@dataclass(frozen=True)
class KeywordRule:
    """Keyword heuristic for one segment.

    ``topic`` words mark the segment as in the news; then ``negative`` words
    turn it down, otherwise it reads up. Without topic words it stays flat.
    """
    segment: str
    topic: Tuple[str, ...]
    negative: Tuple[str, ...]
    described_by: Tuple[str, ...]
    in_focus: str
    quiet: str
    directional: bool = True


KEYWORD_RULES = [
    KeywordRule(
        segment="Global Markets",
        topic=("market", "stock", "s&p"), negative=(),
        described_by=("market", "stock", "s&p"),
        in_focus="Headlines drive session.", quiet="Markets digesting news.",
        directional=False,
    ),
    KeywordRule(
        segment="Currencies",
        topic=("dollar", "currency"), negative=("hurt", "fall"),
        described_by=("dollar",),
        in_focus="Dollar in focus per headlines.", quiet="FX quiet.",
    ),
    KeywordRule(
        segment="Energy & Materials",
        topic=("oil", "commodit"), negative=("retreat", "fall"),
        described_by=("oil", "critical minerals"),
        in_focus="Energy and commodities in headlines.", quiet="Materials mixed.",
    ),
    KeywordRule(
        segment="U.S. Growth & Tech",
        topic=("tesla", "tech"), negative=("slash", "fall"),
        described_by=("tesla", "tech"),
        in_focus="Tech names in focus.", quiet="Growth stocks digesting news.",
    ),
]


def _mentions(text: str, words: Sequence[str]) -> bool:
    return any(w in text for w in words)


def synthesize_segments(headlines: Sequence[Headline]) -> List[SegmentUpdate]:
    """Apply KEYWORD_RULES to the combined, lower-cased headline text."""
    text = " ".join(h.title for h in headlines).lower()
    updates = []
    for rule in KEYWORD_RULES:
        direction = Tone.FLAT
        if rule.directional and _mentions(text, rule.topic):
            direction = Tone.DOWN if _mentions(text, rule.negative) else Tone.UP
        description = rule.in_focus if _mentions(text, rule.described_by) else rule.quiet
        updates.append(SegmentUpdate(name=rule.segment, direction=direction, description=description))
    return updates


class HeadlineSynthesisProvider(DataProvider):
    """Keyword heuristic over the headlines category's result.

    Args:
        headline_source: Callable returning the headlines ``ProviderResult``;
            it may block until the headlines chain has resolved.
    """

    name = "headline_synthesis"

    def __init__(self, headline_source: Callable[[], ProviderResult]) -> None:
        super().__init__()
        self.headline_source = headline_source

    def fetch(self) -> ProviderResult:
        headlines = self.headline_source()
        if not headlines.usable or not headlines.data:
            return ProviderResult.unavailable(self.name, "no headlines to synthesize from")
        updates = synthesize_segments(headlines.data)
        logger.info(
            f"{self.name}: "
            + ", ".join(f"{u.name}={u.direction.value}" for u in updates)
        )
        return ProviderResult.full(self.name, updates)

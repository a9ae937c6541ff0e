"""Briefing engine — orchestrates providers, selection and merging into one record.

Flow per run:
  1. Baseline — hardcoded record (optionally seeded from the last briefing.json)
  2. Fetch    — every category chain runs concurrently on its own worker; the
                snapshot chain's headline-synthesis candidate waits on the
                headlines chain, the only cross-category dependency
  3. Join     — all futures resolved before anything is merged
  4. Overlay  — sentiment → mood/index, headlines → narrative, snapshot → base tones
  5. Merge    — pure fold of SEGMENT_BINDINGS over the segment list
  6. Drivers  — market drivers from merged segments + sentiment
  7. Stamp    — generatedAt / date, then write output/briefing.json

Every provider failure degrades to baseline values; only failing to write the
record is fatal.
"""

import json
import os
from concurrent.futures import Future, ThreadPoolExecutor
from datetime import datetime
from typing import Callable, Dict, List

from briefing.core.config import get_api_key, setting
from briefing.core.logger import logger
from briefing.models.datatypes import BriefingRecord, ProviderResult
from briefing.pipeline.baseline import load_baseline
from briefing.pipeline.drivers import derive_drivers
from briefing.pipeline.merger import apply_snapshot, merge_all
from briefing.pipeline.selector import CategoryChain, select
from briefing.pipeline.synthesis import (
    HeadlineSynthesisProvider, headline_digest, summarize_headlines,
)
from briefing.providers.commodities import YahooCommodityProvider
from briefing.providers.crypto import CoinGeckoProvider
from briefing.providers.news import GoogleNewsProvider, NewsApiProvider
from briefing.providers.quotes import (
    FmpProvider, StooqProvider, YahooIndexProvider, YahooQuoteClient,
)
from briefing.providers.sentiment import FearGreedProvider, mood_from_value
from briefing.providers.snapshot import AlphaVantageProvider, YahooEtfProvider

BRIEFING_FILENAME = "briefing.json"

CATEGORIES = ["sentiment", "headlines", "global_markets", "snapshot", "crypto", "commodities"]


class BriefingEngine:
    """Assembles the daily market briefing.

    Args:
        config: Parsed config.yaml dict (passed in; not re-loaded internally).
        output_dir: Directory where ``briefing.json`` is written.
    """

    def __init__(self, config: dict, output_dir: str = "output") -> None:
        self.config = config
        self.output_dir = output_dir

        timeout = setting(config, "http", "timeout_seconds", 10)
        csv_timeout = setting(config, "http", "csv_timeout_seconds", 15)
        page_size = setting(config, "headlines", "page_size", 8)
        self.digest_size = setting(config, "headlines", "digest_size", 3)
        self.use_previous_snapshot = setting(config, "baseline", "use_previous_snapshot", False)

        yahoo = YahooQuoteClient(
            symbol_delay=setting(config, "pacing", "yahoo_symbol_delay_seconds", 0.3)
        )

        self.fear_greed = FearGreedProvider(timeout=timeout)
        self.newsapi = NewsApiProvider(get_api_key("newsapi"), page_size=page_size, timeout=timeout)
        self.google_news = GoogleNewsProvider(page_size=page_size, timeout=timeout)
        self.fmp = FmpProvider(get_api_key("fmp"), timeout=timeout)
        self.stooq = StooqProvider(
            request_delay=setting(config, "pacing", "stooq_delay_seconds", 0.2),
            timeout=csv_timeout,
        )
        self.yahoo_index = YahooIndexProvider(client=yahoo)
        self.alpha_vantage = AlphaVantageProvider(
            get_api_key("alpha_vantage"),
            request_delay=setting(config, "pacing", "alpha_vantage_delay_seconds", 12.5),
            timeout=timeout,
        )
        self.yahoo_etf = YahooEtfProvider(client=yahoo)
        self.coingecko = CoinGeckoProvider(timeout=timeout)
        self.yahoo_commodities = YahooCommodityProvider(client=yahoo)

    # ── public ────────────────────────────────────────────────────────────────

    def run(self) -> BriefingRecord:
        """Build the record and write it to ``<output_dir>/briefing.json``.

        Raises:
            OSError: If the record cannot be written.
        """
        record = self.build()
        path = self.write_json(record)
        logger.info(f"BriefingEngine: wrote {len(record.segments)} segments to {path}")
        return record

    def build(self) -> BriefingRecord:
        """Fetch, select and merge; never raises on provider failure."""
        previous = self.briefing_path if self.use_previous_snapshot else None
        record = load_baseline(previous)

        results = self.fetch_all()
        self._log_sources(results)

        sentiment = results["sentiment"]
        if sentiment.usable:
            record.sentiment_index = sentiment.data
            record.market_mood = mood_from_value(sentiment.data.value)

        headlines = results["headlines"]
        if headlines.usable:
            record.top_headlines = list(headlines.data)
            digest = headline_digest(headlines.data, self.digest_size)
            if digest:
                record.headline_digest = digest
            big_picture = summarize_headlines(headlines.data)
            if big_picture:
                record.big_picture = big_picture

        segments = record.segments
        snapshot = results["snapshot"]
        if snapshot.usable:
            segments = apply_snapshot(segments, snapshot.data)
        record.segments = merge_all(segments, results)
        record.market_drivers = derive_drivers(record.segments, record.sentiment_index)

        now = datetime.now().astimezone()
        record.generated_at = now.isoformat(timespec="seconds")
        record.date = now.strftime("%Y-%m-%d")
        return record

    def fetch_all(self) -> Dict[str, ProviderResult]:
        """Run every category chain concurrently and join on all of them."""
        futures: Dict[str, Future] = {}
        with ThreadPoolExecutor(max_workers=len(CATEGORIES)) as executor:
            for chain in self.independent_chains():
                futures[chain.category] = executor.submit(select, chain)

            headline_future = futures["headlines"]
            snapshot = self.snapshot_chain(lambda: _resolve("headlines", headline_future))
            futures[snapshot.category] = executor.submit(select, snapshot)

            return {category: _resolve(category, f) for category, f in futures.items()}

    def independent_chains(self) -> List[CategoryChain]:
        return [
            CategoryChain("sentiment", [self.fear_greed]),
            CategoryChain("headlines", [self.newsapi, self.google_news]),
            CategoryChain("global_markets", [self.fmp, self.stooq, self.yahoo_index]),
            CategoryChain("crypto", [self.coingecko]),
            CategoryChain("commodities", [self.yahoo_commodities]),
        ]

    def snapshot_chain(self, headline_source: Callable[[], ProviderResult]) -> CategoryChain:
        return CategoryChain(
            "snapshot",
            [self.alpha_vantage, self.yahoo_etf, HeadlineSynthesisProvider(headline_source)],
        )

    @property
    def briefing_path(self) -> str:
        return os.path.join(self.output_dir, BRIEFING_FILENAME)

    def write_json(self, record: BriefingRecord) -> str:
        """Write ``record`` as indented camelCase JSON (overwrites each run)."""
        os.makedirs(self.output_dir, exist_ok=True)
        path = self.briefing_path
        with open(path, "w", encoding="utf-8") as f:
            json.dump(record.to_dict(), f, indent=2, ensure_ascii=False)
        return path

    # ── internal ──────────────────────────────────────────────────────────────

    @staticmethod
    def _log_sources(results: Dict[str, ProviderResult]) -> None:
        parts = [
            f"{category}={results[category].provider if results[category].usable else 'baseline'}"
            for category in CATEGORIES
        ]
        logger.info(f"BriefingEngine: sources | {' | '.join(parts)}")


def _resolve(category: str, future: Future) -> ProviderResult:
    """Join one chain; a crash inside the chain degrades to UNAVAILABLE."""
    try:
        return future.result()
    except Exception as exc:
        logger.error(f"BriefingEngine: [{category}] chain crashed: {exc}", exc_info=True)
        return ProviderResult.unavailable(category, f"chain crashed: {exc}")

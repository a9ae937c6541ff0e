"""Tests for BriefingEngine end-to-end, with all network access faked."""

import json
from unittest.mock import patch

import pytest

from briefing.models.datatypes import MarketMood, Tone
from briefing.pipeline.baseline import SEGMENT_ORDER
from briefing.pipeline.engine import BriefingEngine
from briefing.pipeline.merger import DIGITAL_ASSETS_ADDITIONAL
from briefing.pipeline.selector import select as real_select
from briefing.pipeline.validator import validate_record

FNG_URL = "https://api.alternative.me/fng/"
STOOQ_URL = "https://stooq.com/q/d/l/"
COINGECKO_URL = "https://api.coingecko.com/api/v3/simple/price"
GOOGLE_URL = "https://news.google.com/rss/headlines/section/topic/BUSINESS"

STOOQ_SPX = (
    "Date,Open,High,Low,Close,Volume\n"
    "2026-10-15,99,101,98,100,1000\n"
    "2026-10-16,100,102,99,101,1200\n"
)

RSS = """<?xml version="1.0" encoding="UTF-8"?>
<rss version="2.0"><channel><title>Business</title>
<item><title>Oil climbs on supply worries - CNBC</title><source url="https://cnbc.com">CNBC</source></item>
<item><title>Fed holds rates steady - Reuters</title><source url="https://reuters.com">Reuters</source></item>
</channel></rss>
"""


@pytest.fixture
def engine(tmp_path, no_api_keys, offline_yahoo):
    config = {
        "output_dir": str(tmp_path),
        "pacing": {
            "stooq_delay_seconds": 0,
            "yahoo_symbol_delay_seconds": 0,
            "alpha_vantage_delay_seconds": 0,
        },
    }
    return BriefingEngine(config=config, output_dir=str(tmp_path))


class TestZeroNetwork:
    """Every provider fails: the baseline alone must still be a valid record."""

    def test_record_is_complete_and_valid(self, engine, http_routes) -> None:
        record = engine.build()
        data = record.to_dict()

        passed, messages = validate_record(data)

        assert passed, messages
        assert [s["name"] for s in data["segments"]] == SEGMENT_ORDER
        assert record.market_mood is MarketMood.NEUTRAL
        assert record.sentiment_index.value == 50
        assert all(r.is_placeholder for r in record.segment("Global Markets").regions)
        assert record.market_drivers[-1].label == "Volatility"

    def test_all_categories_fall_back(self, engine, http_routes) -> None:
        results = engine.fetch_all()

        assert set(results) == {
            "sentiment", "headlines", "global_markets", "snapshot", "crypto", "commodities",
        }
        assert not any(r.usable for r in results.values())

    def test_keyed_providers_are_never_called(self, engine, http_routes) -> None:
        engine.build()

        urls = http_routes.urls()
        assert not any("newsapi.org" in u for u in urls)
        assert not any("financialmodelingprep" in u for u in urls)
        assert not any("alphavantage" in u for u in urls)

    def test_crashing_chain_degrades_to_baseline(self, engine, http_routes) -> None:
        def crash_crypto(chain):
            if chain.category == "crypto":
                raise RuntimeError("boom")
            return real_select(chain)

        with patch("briefing.pipeline.engine.select", side_effect=crash_crypto):
            results = engine.fetch_all()

        assert results["crypto"].usable is False
        assert results["crypto"].reason.startswith("chain crashed")


class TestLiveScenarios:
    """Partial live data flows through to the right segments."""

    def test_sentiment_sets_mood_and_keeps_label(self, engine, http_routes, fake_response) -> None:
        http_routes.add(FNG_URL, fake_response(
            {"data": [{"value": "72", "value_classification": "Greed"}]}
        ))

        record = engine.build()

        assert record.market_mood is MarketMood.RISK_ON
        assert record.sentiment_index.value == 72
        assert record.sentiment_index.label == "Greed"
        assert record.market_drivers[-1].summary == "Fear & Greed at 72 (Greed)."

    def test_stooq_fallback_without_fmp_key(self, engine, http_routes, fake_response) -> None:
        http_routes.add(
            STOOQ_URL,
            lambda params: fake_response(text=STOOQ_SPX) if params.get("s") == "^SPX" else None,
        )

        record = engine.build()
        spx = record.segment("Global Markets").regions[0]

        assert spx.label == "S&P 500"
        assert spx.change_pct == pytest.approx(1.0)
        assert spx.direction is Tone.UP
        assert spx.is_placeholder is False
        assert record.segment("Global Markets").description.endswith("Data via Stooq.")
        assert validate_record(record.to_dict())[0]

    def test_crypto_tone_and_description(self, engine, http_routes, fake_response) -> None:
        http_routes.add(COINGECKO_URL, fake_response({
            "bitcoin": {"usd": 65000, "usd_24h_change": 2.0},
            "ethereum": {"usd": 3200, "usd_24h_change": -1.0},
        }))

        digital = engine.build().segment("Digital Assets")

        assert digital.direction is Tone.UP
        assert "+2.00%" in digital.description
        assert "-1.00%" in digital.description
        assert digital.tickers[2:] == DIGITAL_ASSETS_ADDITIONAL

    def test_headlines_drive_narrative_and_snapshot(self, engine, http_routes, fake_response) -> None:
        http_routes.add(GOOGLE_URL, fake_response(text=RSS))

        record = engine.build()

        assert record.top_headlines[0].source == "CNBC"
        assert record.big_picture.startswith("Today's focus: Oil climbs on supply worries.")
        assert record.headline_digest == ["Oil climbs on supply worries", "Fed holds rates steady"]
        energy = record.segment("Energy & Materials")
        assert energy.direction is Tone.UP
        assert energy.description == "Energy and commodities in headlines."
        assert energy.tickers  # outline still applied on top of the snapshot
        assert validate_record(record.to_dict())[0]


class TestOutput:
    """Tests for run() / write_json()."""

    def test_run_writes_camelcase_json(self, engine, http_routes, tmp_path) -> None:
        engine.run()

        data = json.loads((tmp_path / "briefing.json").read_text(encoding="utf-8"))
        assert list(data)[:3] == ["bigPicture", "marketMood", "sentimentIndex"]
        assert data["segments"][0]["regions"][0]["isPlaceholder"] is True
        assert validate_record(data)[0]

    def test_unwritable_output_raises(self, tmp_path, no_api_keys, offline_yahoo, http_routes) -> None:
        blocker = tmp_path / "not_a_dir"
        blocker.write_text("x", encoding="utf-8")
        engine = BriefingEngine(
            config={"pacing": {"stooq_delay_seconds": 0, "yahoo_symbol_delay_seconds": 0}},
            output_dir=str(blocker),
        )

        with pytest.raises(OSError):
            engine.run()

"""Tests for index quote providers and the shared Yahoo client."""

from unittest.mock import MagicMock, patch

import pandas as pd
import pytest

from briefing.models.datatypes import ResultStatus, Tone
from briefing.providers.quotes import (
    GLOBAL_INDEX_SYMBOLS, FmpProvider, StooqProvider, YahooIndexProvider, YahooQuoteClient,
    quote_from_closes, to_float,
)

FMP_URL = "https://financialmodelingprep.com/stable/batch-quote"
STOOQ_URL = "https://stooq.com/q/d/l/"

STOOQ_CSV = (
    "Date,Open,High,Low,Close,Volume\n"
    "2026-10-15,99,101,98,100,1000\n"
    "2026-10-16,100,102,99,101,1200\n"
)


def _history(closes):
    return pd.DataFrame({"Open": closes, "Close": closes})


def _batch_frame(closes_by_symbol):
    return pd.concat({sym: _history(c) for sym, c in closes_by_symbol.items()}, axis=1)


class TestHelpers:
    """Tests for to_float() / quote_from_closes()."""

    @pytest.mark.parametrize("raw,expected", [
        ("1.23%", 1.23), (" -0.5% ", -0.5), (2, 2.0), ("abc", None),
        (None, None), (True, None), (float("nan"), None),
    ])
    def test_to_float(self, raw, expected) -> None:
        assert to_float(raw) == expected

    def test_close_to_close_change(self) -> None:
        quote = quote_from_closes("^SPX", pd.Series([100.0, 101.0]))

        assert quote.price == 101.0
        assert quote.change_pct == pytest.approx(1.0)

    def test_needs_two_closes_and_positive_previous(self) -> None:
        assert quote_from_closes("X", pd.Series([100.0])) is None
        assert quote_from_closes("X", pd.Series([0.0, 5.0])) is None
        assert quote_from_closes("X", pd.Series([float("nan"), 5.0])) is None
        assert quote_from_closes("X", None) is None


class TestFmpProvider:
    """Tests for FmpProvider."""

    def test_without_key_makes_no_request(self, http_routes) -> None:
        assert FmpProvider(api_key=None).run().reason == "missing credential"
        assert http_routes.calls == []

    def test_full_batch(self, http_routes, fake_response) -> None:
        rows = [{"symbol": s.symbol, "changesPercentage": 0.5} for s in GLOBAL_INDEX_SYMBOLS]
        http_routes.add(FMP_URL, fake_response(rows))

        result = FmpProvider(api_key="k").run()

        assert result.status is ResultStatus.FULL
        assert all(not r.is_placeholder for r in result.data.regions)
        assert result.data.regions[-1].direction is Tone.ELEVATED  # VIX
        assert result.data.direction is Tone.UP

    def test_alternate_change_fields(self, http_routes, fake_response) -> None:
        http_routes.add(FMP_URL, fake_response([
            {"symbol": "^GSPC", "changePercent": "-1.5"},
            {"symbol": "^DJI", "change": 1.0, "price": 101.0},
        ]))

        result = FmpProvider(api_key="k").run()
        by_label = {r.label: r for r in result.data.regions}

        assert result.status is ResultStatus.PARTIAL
        assert by_label["S&P 500"].change_pct == -1.5
        assert by_label["Dow Jones"].change_pct == pytest.approx(1.0)
        assert by_label["Nasdaq"].is_placeholder

    def test_error_object_is_unavailable(self, http_routes, fake_response) -> None:
        http_routes.add(FMP_URL, fake_response({"Error Message": "Invalid API KEY."}))

        assert FmpProvider(api_key="k").run().usable is False


class TestStooqProvider:
    """Tests for StooqProvider."""

    def test_single_symbol_is_partial(self, http_routes, fake_response) -> None:
        http_routes.add(
            STOOQ_URL,
            lambda params: fake_response(text=STOOQ_CSV) if params.get("s") == "^SPX" else None,
        )

        result = StooqProvider(request_delay=0).run()
        spx = result.data.regions[0]

        assert result.status is ResultStatus.PARTIAL
        assert spx.label == "S&P 500"
        assert spx.change_pct == pytest.approx(1.0)
        assert spx.direction is Tone.UP
        assert spx.is_placeholder is False
        assert all(r.is_placeholder for r in result.data.regions[1:])

    def test_no_data_page_is_unavailable(self, http_routes, fake_response) -> None:
        http_routes.add(STOOQ_URL, fake_response(text="No data"))

        assert StooqProvider(request_delay=0).run().usable is False

    def test_paces_requests(self, http_routes) -> None:
        with patch("briefing.providers.quotes.time.sleep") as sleep:
            StooqProvider(request_delay=0.2).run()

        assert sleep.call_count == len(GLOBAL_INDEX_SYMBOLS) - 1


class TestYahooQuoteClient:
    """Tests for YahooQuoteClient."""

    def test_batch_download(self) -> None:
        frame = _batch_frame({"GLD": [200.0, 202.0], "SLV": [25.0, 24.5]})

        with patch("briefing.providers.quotes.yf.download", return_value=frame) as download, \
                patch("briefing.providers.quotes.yf.Ticker") as ticker:
            quotes = YahooQuoteClient(symbol_delay=0).quotes(["GLD", "SLV", "HG=F"])

        assert quotes["GLD"].change_pct == pytest.approx(1.0)
        assert quotes["SLV"].change_pct == pytest.approx(-2.0)
        assert "HG=F" not in quotes
        download.assert_called_once()
        ticker.assert_not_called()

    def test_per_symbol_fallback_when_batch_empty(self) -> None:
        mock_ticker = MagicMock()
        mock_ticker.history.return_value = _history([50.0, 51.0])

        with patch("briefing.providers.quotes.yf.download", return_value=pd.DataFrame()), \
                patch("briefing.providers.quotes.yf.Ticker", return_value=mock_ticker):
            quotes = YahooQuoteClient(symbol_delay=0).quotes(["SPY", "QQQ"])

        assert set(quotes) == {"SPY", "QQQ"}
        assert quotes["SPY"].change_pct == pytest.approx(2.0)

    def test_everything_failing_resolves_nothing(self, offline_yahoo) -> None:
        assert YahooQuoteClient(symbol_delay=0).quotes(["SPY"]) == {}


class TestYahooIndexProvider:
    """Tests for YahooIndexProvider."""

    def test_offline_is_unavailable(self, offline_yahoo) -> None:
        provider = YahooIndexProvider(client=YahooQuoteClient(symbol_delay=0))

        assert provider.run().status is ResultStatus.UNAVAILABLE

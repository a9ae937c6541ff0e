"""Tests for tone classification."""

import math

import pytest

from briefing.models.datatypes import Tone
from briefing.pipeline.tone import (
    build_region, classify, mean_tone, placeholder_region, signed_pct,
)


class TestClassify:
    """Tests for classify()."""

    @pytest.mark.parametrize("pct", [0.31, 0.5, 1.0, 12.0, 1e6])
    def test_above_threshold_is_up(self, pct) -> None:
        assert classify(pct) is Tone.UP

    @pytest.mark.parametrize("pct", [-0.31, -0.5, -3.2, -1e6])
    def test_below_threshold_is_down(self, pct) -> None:
        assert classify(pct) is Tone.DOWN

    @pytest.mark.parametrize("pct", [-0.3, -0.1, 0, 0.0, 0.2999, 0.3])
    def test_band_and_boundaries_are_flat(self, pct) -> None:
        """Exactly ±0.3 is flat."""
        assert classify(pct) is Tone.FLAT

    def test_volatility_style_vocabulary(self) -> None:
        assert classify(0.5, volatility_style=True) is Tone.ELEVATED
        assert classify(-0.5, volatility_style=True) is Tone.SUBDUED
        assert classify(0.3, volatility_style=True) is Tone.STEADY

    @pytest.mark.parametrize("pct", [None, float("nan"), math.inf, "1.2", True, [1.0]])
    def test_unusable_input_is_neutral(self, pct) -> None:
        assert classify(pct) is Tone.FLAT
        assert classify(pct, volatility_style=True) is Tone.STEADY


class TestMeanTone:
    """Tests for mean_tone()."""

    def test_empty_is_flat(self) -> None:
        assert mean_tone([]) is Tone.FLAT

    def test_mean_of_values(self) -> None:
        assert mean_tone([2.0, -1.0]) is Tone.UP
        assert mean_tone([0.5, -0.5]) is Tone.FLAT

    def test_ignores_non_numeric(self) -> None:
        assert mean_tone([None, -1.0, float("nan")]) is Tone.DOWN


class TestRegions:
    """Tests for build_region() / placeholder_region()."""

    def test_live_region(self) -> None:
        region = build_region("S&P 500", 1.0)

        assert region.change_pct == 1.0
        assert region.is_placeholder is False
        assert region.direction is Tone.UP

    def test_missing_value_is_placeholder(self) -> None:
        region = build_region("DAX", None)

        assert region.change_pct is None
        assert region.is_placeholder is True
        assert region.direction is Tone.FLAT

    def test_volatility_placeholder_uses_volatility_vocabulary(self) -> None:
        region = placeholder_region("VIX", volatility_style=True)

        assert region.direction is Tone.STEADY
        assert region.is_volatility_style is True

    def test_vix_rise_reads_elevated(self) -> None:
        assert build_region("VIX", 4.2, volatility_style=True).direction is Tone.ELEVATED


class TestSignedPct:
    """Tests for signed_pct()."""

    def test_formats_sign_and_two_decimals(self) -> None:
        assert signed_pct(2) == "+2.00%"
        assert signed_pct(-1) == "-1.00%"
        assert signed_pct(0.0) == "+0.00%"

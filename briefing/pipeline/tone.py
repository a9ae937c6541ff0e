"""Tone classification — maps a percent change onto the closed Tone vocabulary.

Standard instruments:
    pct >  +0.3  → up
    pct <  -0.3  → down
    otherwise    → flat   (±0.3 exactly is flat)

Volatility-style instruments (VIX) read the same thresholds with the risk sense
inverted: a rising value is ``elevated`` fear, a falling one ``subdued``, and
anything in between ``steady``.

Missing, NaN, boolean or otherwise non-numeric input classifies as the neutral
tone of its vocabulary.
"""

import math
from typing import Any, Iterable, Optional

from briefing.models.datatypes import Region, Tone

THRESHOLD_PCT = 0.3


def _as_number(pct: Any) -> Optional[float]:
    """Return ``pct`` as a finite float, or None when it is not usable."""
    if isinstance(pct, bool) or not isinstance(pct, (int, float)):
        return None
    value = float(pct)
    if math.isnan(value) or math.isinf(value):
        return None
    return value


def classify(pct: Any, volatility_style: bool = False) -> Tone:
    """Classify a percent change.

    Args:
        pct: Percent change (``1.0`` means +1%). Anything non-numeric is neutral.
        volatility_style: Use the elevated/subdued/steady vocabulary.

    Returns:
        Tone: One of up/down/flat, or elevated/subdued/steady.
    """
    value = _as_number(pct)
    if value is None:
        return Tone.STEADY if volatility_style else Tone.FLAT
    if value > THRESHOLD_PCT:
        return Tone.ELEVATED if volatility_style else Tone.UP
    if value < -THRESHOLD_PCT:
        return Tone.SUBDUED if volatility_style else Tone.DOWN
    return Tone.STEADY if volatility_style else Tone.FLAT


def mean_tone(values: Iterable[Any]) -> Tone:
    """Tone of the mean of the numeric ``values``; flat when there are none."""
    numbers = [v for v in (_as_number(x) for x in values) if v is not None]
    if not numbers:
        return Tone.FLAT
    return classify(sum(numbers) / len(numbers))


def build_region(label: str, pct: Any, volatility_style: bool = False) -> Region:
    """Build a live Region from ``pct``, or a placeholder when it is unusable."""
    value = _as_number(pct)
    if value is None:
        return placeholder_region(label, volatility_style)
    return Region(
        label=label,
        direction=classify(value, volatility_style),
        change_pct=value,
        is_placeholder=False,
        is_volatility_style=volatility_style,
    )


def placeholder_region(label: str, volatility_style: bool = False) -> Region:
    return Region(
        label=label,
        direction=Tone.STEADY if volatility_style else Tone.FLAT,
        change_pct=None,
        is_placeholder=True,
        is_volatility_style=volatility_style,
    )


def signed_pct(pct: float) -> str:
    """Format ``pct`` as ``+1.23%`` / ``-0.45%``."""
    return f"{'+' if pct >= 0 else ''}{pct:.2f}%"

"""Output validator — enforces the briefing record invariants on briefing.json.

Checks:
  1. Every top-level field is present with the right type
  2. marketMood / sentimentIndex are in range
  3. Segments are exactly the fixed category set, in order, with unique names
  4. Each segment carries exactly one of regions / tickers, tones in vocabulary
  5. Regions: isPlaceholder iff changePct is null; VIX-style tone vocabulary
  6. generatedAt is ISO-8601 and date is YYYY-MM-DD

Usage:
    python -m briefing.pipeline.validator output/briefing.json
"""

import json
import sys
from datetime import datetime
from typing import Any, Dict, List, Tuple

from briefing.models.datatypes import MarketMood, STANDARD_TONES, VOLATILITY_TONES
from briefing.pipeline.baseline import SEGMENT_ORDER

_REQUIRED_FIELDS = {
    "bigPicture": str,
    "marketMood": str,
    "sentimentIndex": dict,
    "headlineDigest": list,
    "topHeadlines": list,
    "segments": list,
    "marketDrivers": list,
    "generatedAt": str,
    "date": str,
}

_STANDARD = {t.value for t in STANDARD_TONES}
_VOLATILITY = {t.value for t in VOLATILITY_TONES}


def validate_record(data: Dict[str, Any]) -> Tuple[bool, List[str]]:
    """Run all checks against a serialized record (``BriefingRecord.to_dict()``).

    Returns:
        Tuple of ``(passed: bool, messages: list[str])`` with PASS/FAIL lines.
    """
    messages: List[str] = []

    # ── check 1: fields ───────────────────────────────────────────────────────
    bad = [k for k, typ in _REQUIRED_FIELDS.items() if not isinstance(data.get(k), typ)]
    if bad:
        return False, [f"FAIL  missing or mistyped fields: {bad}"]
    messages.append("PASS  all top-level fields present")

    failures: List[str] = []

    # ── check 2: mood + sentiment ─────────────────────────────────────────────
    if data["marketMood"] not in {m.value for m in MarketMood}:
        failures.append(f"marketMood {data['marketMood']!r} not in vocabulary")
    value = data["sentimentIndex"].get("value")
    if isinstance(value, bool) or not isinstance(value, int) or not 0 <= value <= 100:
        failures.append(f"sentimentIndex.value {value!r} not an integer in [0, 100]")
    if not isinstance(data["sentimentIndex"].get("label"), str):
        failures.append("sentimentIndex.label missing")
    for h in data["topHeadlines"]:
        if not isinstance(h, dict) or not h.get("source") or not h.get("title"):
            failures.append(f"topHeadlines entry malformed: {h!r}")

    # ── check 3: segment set ──────────────────────────────────────────────────
    names = [s.get("name") for s in data["segments"] if isinstance(s, dict)]
    if names != SEGMENT_ORDER:
        failures.append(f"segments {names} != fixed order {SEGMENT_ORDER}")

    # ── checks 4-5: per segment ───────────────────────────────────────────────
    for segment in data["segments"]:
        if isinstance(segment, dict):
            failures.extend(_check_segment(segment))

    # ── check 6: timestamps ───────────────────────────────────────────────────
    try:
        datetime.fromisoformat(data["generatedAt"])
    except ValueError:
        failures.append(f"generatedAt {data['generatedAt']!r} is not ISO-8601")
    try:
        datetime.strptime(data["date"], "%Y-%m-%d")
    except ValueError:
        failures.append(f"date {data['date']!r} is not YYYY-MM-DD")

    if failures:
        messages.extend(f"FAIL  {f}" for f in failures)
        return False, messages
    messages.append(f"PASS  {len(names)} segments satisfy all invariants")
    return True, messages


def _check_segment(segment: Dict[str, Any]) -> List[str]:
    name = segment.get("name")
    failures: List[str] = []

    if segment.get("direction") not in _STANDARD:
        failures.append(f"{name}: direction {segment.get('direction')!r} not in {sorted(_STANDARD)}")
    if not isinstance(segment.get("description"), str):
        failures.append(f"{name}: description missing")

    has_regions = bool(segment.get("regions"))
    has_tickers = bool(segment.get("tickers"))
    if has_regions == has_tickers:
        failures.append(f"{name}: must carry exactly one of regions/tickers")

    for region in segment.get("regions") or []:
        label = region.get("label")
        if (region.get("changePct") is None) != bool(region.get("isPlaceholder")):
            failures.append(f"{name}/{label}: isPlaceholder disagrees with changePct")
        vocab = _VOLATILITY if region.get("isVolatilityStyle") else _STANDARD
        if region.get("direction") not in vocab:
            failures.append(f"{name}/{label}: direction {region.get('direction')!r} not in {sorted(vocab)}")

    for ticker in segment.get("tickers") or []:
        if not ticker.get("symbol") or not ticker.get("name"):
            failures.append(f"{name}: ticker missing symbol/name: {ticker!r}")

    return failures


def validate(json_path: str) -> Tuple[bool, List[str]]:
    """Load ``json_path`` and run :func:`validate_record` on it."""
    try:
        with open(json_path, encoding="utf-8") as f:
            data = json.load(f)
    except FileNotFoundError:
        return False, [f"FAIL  file not found: {json_path}"]
    except ValueError as exc:
        return False, [f"FAIL  could not parse JSON: {exc}"]
    if not isinstance(data, dict):
        return False, ["FAIL  top level is not an object"]
    return validate_record(data)


def main() -> int:
    if len(sys.argv) < 2:
        print("Usage: python -m briefing.pipeline.validator <path_to_briefing.json>")
        return 1
    passed, messages = validate(sys.argv[1])
    for msg in messages:
        print(msg)
    if passed:
        print("\nVALIDATION PASSED ✓")
        return 0
    print("\nVALIDATION FAILED ✗")
    return 1


if __name__ == "__main__":
    sys.exit(main())

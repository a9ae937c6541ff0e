"""
Source check — runs every category chain once and prints which provider won,
its status, and why the others were rejected. Nothing is written to output/.

Run with:
    PYTHONPATH=. python scripts/check_sources.py
"""

import logging
from dotenv import load_dotenv

load_dotenv()

# Console output for third-party loggers; the briefing logger has its own handlers
logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s | %(levelname)-8s | %(message)s",
    datefmt="%H:%M:%S",
)

from briefing.core.config import load_config  # noqa: E402
from briefing.pipeline.engine import CATEGORIES, BriefingEngine  # noqa: E402

DIVIDER = "=" * 70


def main():
    config = load_config()
    engine = BriefingEngine(config=config, output_dir=config.get("output_dir", "output"))

    print(f"\n{DIVIDER}")
    print("  Source check")
    print(DIVIDER)

    results = engine.fetch_all()
    for category in CATEGORIES:
        result = results[category]
        source = result.provider if result.usable else "baseline"
        reason = f"  ({result.reason})" if result.reason else ""
        print(f"  {category:<16} {source:<20} {result.status.value:<12}{reason}")

    usable = sum(1 for r in results.values() if r.usable)
    print(DIVIDER)
    print(f"  {usable}/{len(CATEGORIES)} categories live")
    print(DIVIDER)


if __name__ == "__main__":
    main()

"""Daily market briefing entry point.

Usage:
    python run_briefing.py

Loads config.yaml, runs BriefingEngine, validates the record, writes
output/briefing.json and renders output/index.html.
"""

import sys
from dotenv import load_dotenv

load_dotenv()  # must precede briefing imports so env vars are available at module load

from briefing.core.config import load_config  # noqa: E402
from briefing.core.logger import logger  # noqa: E402
from briefing.pipeline.engine import BriefingEngine  # noqa: E402
from briefing.pipeline.render import write_html  # noqa: E402
from briefing.pipeline.validator import validate_record  # noqa: E402

DEFAULT_TEMPLATE = "templates/index.template.html"


def main(config_path: str = "config.yaml") -> int:
    """Run the briefing. Returns 0 on success, 1 on failure."""
    try:
        config = load_config(config_path)
    except (FileNotFoundError, ValueError) as exc:
        logger.error(f"run_briefing: failed to load config: {exc}")
        print(f"ERROR: {exc}", file=sys.stderr)
        return 1

    output_dir = config.get("output_dir", "output")
    template_path = config.get("template_path", DEFAULT_TEMPLATE)

    engine = BriefingEngine(config=config, output_dir=output_dir)
    try:
        record = engine.run()
    except OSError as exc:
        logger.error(f"run_briefing: could not write briefing record: {exc}", exc_info=True)
        print(f"ERROR: could not write briefing record — {exc}", file=sys.stderr)
        return 1

    data = record.to_dict()
    passed, messages = validate_record(data)
    for msg in messages:
        if passed:
            logger.info(f"run_briefing: {msg}")
        else:
            logger.warning(f"run_briefing: {msg}")

    try:
        html_path = write_html(data, template_path, output_dir)
    except OSError as exc:
        logger.error(f"run_briefing: failed to render page: {exc}", exc_info=True)
        print(f"ERROR: failed to render page — {exc}", file=sys.stderr)
        return 1

    print(f"SUCCESS: {len(record.segments)} segments written to {engine.briefing_path}, page at {html_path}")
    logger.info(f"run_briefing: completed — mood={record.market_mood.value} → {html_path}")
    return 0


if __name__ == "__main__":
    sys.exit(main())

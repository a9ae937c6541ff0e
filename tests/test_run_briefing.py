"""Tests for the run_briefing entry point."""

from pathlib import Path

import yaml

import run_briefing

TEMPLATE_PATH = Path(__file__).resolve().parents[1] / "templates" / "index.template.html"


def _write_config(tmp_path, template_path=TEMPLATE_PATH) -> Path:
    path = tmp_path / "config.yaml"
    path.write_text(yaml.safe_dump({
        "output_dir": str(tmp_path / "output"),
        "template_path": str(template_path),
        "pacing": {
            "stooq_delay_seconds": 0,
            "yahoo_symbol_delay_seconds": 0,
            "alpha_vantage_delay_seconds": 0,
        },
    }), encoding="utf-8")
    return path


class TestMain:
    """Tests for main()."""

    def test_offline_run_succeeds(self, tmp_path, http_routes, no_api_keys, offline_yahoo) -> None:
        code = run_briefing.main(str(_write_config(tmp_path)))

        assert code == 0
        assert (tmp_path / "output" / "briefing.json").exists()
        assert (tmp_path / "output" / "index.html").exists()

    def test_missing_config_exits_1(self, tmp_path) -> None:
        assert run_briefing.main(str(tmp_path / "missing.yaml")) == 1

    def test_render_failure_exits_1(self, tmp_path, http_routes, no_api_keys, offline_yahoo) -> None:
        config = _write_config(tmp_path, template_path=tmp_path / "missing.html")

        assert run_briefing.main(str(config)) == 1
        # the record is still written before rendering fails
        assert (tmp_path / "output" / "briefing.json").exists()

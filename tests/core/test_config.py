"""Tests for configuration loading and credential lookup."""

from pathlib import Path

import pytest

from briefing.core.config import get_api_key, load_config, setting

REPO_ROOT = Path(__file__).resolve().parents[2]


class TestLoadConfig:
    """Tests for load_config()."""

    def test_loads_yaml(self, tmp_path) -> None:
        path = tmp_path / "config.yaml"
        path.write_text("output_dir: out\nhttp:\n  timeout_seconds: 5\n", encoding="utf-8")

        config = load_config(path)

        assert config["output_dir"] == "out"
        assert config["http"]["timeout_seconds"] == 5

    def test_missing_file_raises(self, tmp_path) -> None:
        with pytest.raises(FileNotFoundError):
            load_config(tmp_path / "missing.yaml")

    def test_empty_file_raises(self, tmp_path) -> None:
        path = tmp_path / "config.yaml"
        path.write_text("", encoding="utf-8")

        with pytest.raises(ValueError):
            load_config(path)

    def test_repository_config_loads(self) -> None:
        config = load_config(REPO_ROOT / "config.yaml")

        assert config["template_path"] == "templates/index.template.html"
        assert config["pacing"]["alpha_vantage_delay_seconds"] >= 12


class TestGetApiKey:
    """Tests for get_api_key()."""

    def test_unset_is_none(self, no_api_keys) -> None:
        assert get_api_key("newsapi") is None
        assert get_api_key("unknown_provider") is None

    def test_blank_is_none(self, no_api_keys, monkeypatch) -> None:
        monkeypatch.setenv("NEWS_API_KEY", "   ")

        assert get_api_key("newsapi") is None

    def test_alternate_variable_name(self, no_api_keys, monkeypatch) -> None:
        monkeypatch.setenv("ALPHAVANTAGE_API_KEY", "av-key")

        assert get_api_key("alpha_vantage") == "av-key"


class TestSetting:
    """Tests for setting()."""

    def test_reads_nested_value_or_default(self) -> None:
        config = {"pacing": {"stooq_delay_seconds": 0.5}, "http": None}

        assert setting(config, "pacing", "stooq_delay_seconds", 0.2) == 0.5
        assert setting(config, "pacing", "missing", 1) == 1
        assert setting(config, "http", "timeout_seconds", 10) == 10
        assert setting(config, "absent", "x", "d") == "d"

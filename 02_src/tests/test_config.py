"""Tests for configuration."""

from pathlib import Path

import pytest

from panel_export.config import DEFAULT_LAYOUT_PATH, PROJECT_ROOT, Settings, resolve_path

ENV_VARS = [
    "GRAFANA_USER",
    "GRAFANA_PASSWORD",
    "DASHBOARD_TITLE",
    "RENDER_WIDTH",
    "RENDER_TIMEZONE",
    "CONNECT_TIMEOUT",
    "MAX_CONCURRENCY",
    "STRICT_EXPORT",
    "PANEL_LAYOUT_PATH",
    "GRAFANA_URL",
    "JFR_DATASOURCE_URL",
]


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    for name in ENV_VARS:
        monkeypatch.delenv(name, raising=False)


class TestSettingsFromEnv:
    """Tests for Settings.from_env()."""

    def test_defaults(self):
        """Test the defaults of an empty environment."""
        settings = Settings.from_env()

        assert settings.auth == ("admin", "admin")
        assert settings.dashboard_title == "JFR Events"
        assert settings.render_width == 1000
        assert settings.render_height == 500
        assert settings.render_timezone == "Europe/Rome"
        assert settings.connect_timeout == 20.0
        assert settings.strict_export is True
        assert settings.panel_layout_path == DEFAULT_LAYOUT_PATH
        assert settings.grafana_url is None

    def test_overrides(self, monkeypatch):
        """Test that environment variables override defaults."""
        monkeypatch.setenv("GRAFANA_USER", "viewer")
        monkeypatch.setenv("DASHBOARD_TITLE", "Camel JFR")
        monkeypatch.setenv("RENDER_WIDTH", "1920")
        monkeypatch.setenv("CONNECT_TIMEOUT", "2.5")
        monkeypatch.setenv("MAX_CONCURRENCY", "2")
        monkeypatch.setenv("GRAFANA_URL", "http://grafana:3000")

        settings = Settings.from_env()

        assert settings.grafana_user == "viewer"
        assert settings.dashboard_title == "Camel JFR"
        assert settings.render_width == 1920
        assert settings.connect_timeout == 2.5
        assert settings.max_concurrency == 2
        assert settings.grafana_url == "http://grafana:3000"

    @pytest.mark.parametrize(
        ("raw", "expected"),
        [("true", True), ("1", True), ("Yes", True), ("false", False), ("off", False)],
    )
    def test_boolean_values(self, monkeypatch, raw, expected):
        """Test accepted boolean spellings."""
        monkeypatch.setenv("STRICT_EXPORT", raw)
        assert Settings.from_env().strict_export is expected

    @pytest.mark.parametrize(
        ("name", "raw"),
        [("RENDER_WIDTH", "wide"), ("CONNECT_TIMEOUT", "soon"), ("STRICT_EXPORT", "maybe")],
    )
    def test_invalid_values_name_the_variable(self, monkeypatch, name, raw):
        """Test that invalid values raise ValueError naming the variable."""
        monkeypatch.setenv(name, raw)
        with pytest.raises(ValueError, match=name):
            Settings.from_env()

    def test_relative_layout_path(self, monkeypatch):
        """Test that a relative layout path is resolved from the project root."""
        monkeypatch.setenv("PANEL_LAYOUT_PATH", "dashboards/custom.json")
        assert Settings.from_env().panel_layout_path == PROJECT_ROOT / "dashboards/custom.json"


class TestResolvePath:
    """Tests for resolve_path()."""

    def test_empty_uses_default(self):
        assert resolve_path(None, Path("/default")) == Path("/default")
        assert resolve_path("", Path("/default")) == Path("/default")

    def test_absolute_is_kept(self, tmp_path):
        assert resolve_path(str(tmp_path), Path("/default")) == tmp_path

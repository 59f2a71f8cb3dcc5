"""Tests for the command line entry point."""

from unittest.mock import AsyncMock, patch

import pytest

import main
from panel_export.config import PROJECT_ROOT


class TestArguments:
    """Tests for argument parsing."""

    def test_trace_is_required(self):
        """Test that a missing trace path is a usage error."""
        with pytest.raises(SystemExit) as exc:
            main.build_parser().parse_args([])
        assert exc.value.code == 2

    def test_output_defaults_to_reports(self):
        """Test the default output directory."""
        args = main.build_parser().parse_args(["recording.jfr"])
        assert args.trace == "recording.jfr"
        assert args.output == "reports"
        assert not args.lenient

    def test_all_arguments(self):
        """Test explicit output, layout and flags."""
        args = main.build_parser().parse_args(
            ["recording.jfr", "out", "--layout", "layout.json", "--lenient", "--log-level", "DEBUG"]
        )
        assert args.output == "out"
        assert str(args.layout) == "layout.json"
        assert args.lenient
        assert args.log_level == "DEBUG"


class TestMain:
    """Tests for main()."""

    @pytest.mark.parametrize("exit_code", [0, 1])
    def test_returns_pipeline_exit_code(self, exit_code, tmp_path):
        """Test that main returns what the pipeline run returns."""
        with patch.object(main, "setup_logging"), patch.object(main, "Pipeline") as pipeline_cls:
            pipeline_cls.return_value.run = AsyncMock(return_value=exit_code)

            assert main.main(["recording.jfr", str(tmp_path)]) == exit_code

        pipeline_cls.return_value.run.assert_awaited_once_with("recording.jfr", str(tmp_path))

    def test_flags_override_settings(self, tmp_path):
        """Test that --layout and --lenient reach the pipeline settings."""
        layout = tmp_path / "layout.json"
        with patch.object(main, "setup_logging"), patch.object(main, "Pipeline") as pipeline_cls:
            pipeline_cls.return_value.run = AsyncMock(return_value=0)

            main.main(["recording.jfr", "--layout", str(layout), "--lenient"])

        settings = pipeline_cls.call_args.kwargs["settings"]
        assert settings.panel_layout_path == layout
        assert settings.strict_export is False

    def test_relative_layout_is_taken_from_project_root(self):
        """Test that --layout resolves like PANEL_LAYOUT_PATH does."""
        with patch.object(main, "setup_logging"), patch.object(main, "Pipeline") as pipeline_cls:
            pipeline_cls.return_value.run = AsyncMock(return_value=0)

            main.main(["recording.jfr", "--layout", "layouts/custom.json"])

        settings = pipeline_cls.call_args.kwargs["settings"]
        assert settings.panel_layout_path == PROJECT_ROOT / "layouts" / "custom.json"

    def test_invalid_environment_is_logged_and_fails(self, monkeypatch):
        """Test that a malformed setting exits with 1 before the pipeline is built."""
        monkeypatch.setenv("RENDER_WIDTH", "wide")
        with (
            patch.object(main, "setup_logging"),
            patch.object(main, "load_dotenv"),
            patch.object(main, "logger") as logger,
            patch.object(main, "Pipeline") as pipeline_cls,
        ):
            assert main.main(["recording.jfr"]) == 1

        pipeline_cls.assert_not_called()
        logger.error.assert_called_once()
        assert "RENDER_WIDTH" in str(logger.error.call_args.args[1])

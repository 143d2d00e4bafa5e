"""
Unit Tests for run.py Entry Script.

Tests individual functions with mocked dependencies.
"""

import sys
from pathlib import Path
from unittest.mock import patch

import pytest
from click.testing import CliRunner

# run.py lives at the project root, outside the installed package
sys.path.insert(0, str(Path(__file__).parent.parent.parent))

from run import main, validate_project_root  # noqa: E402


@pytest.fixture
def runner():
    """Create Click test runner."""
    return CliRunner()


class TestValidateProjectRoot:
    """Tests for validate_project_root function."""

    def test_succeeds_when_marker_exists(self, tmp_path):
        """Should return path when .project_root exists."""
        (tmp_path / ".project_root").touch()

        with patch("run.PROJECT_ROOT", tmp_path):
            assert validate_project_root() == tmp_path

    def test_exits_when_marker_missing(self, tmp_path):
        """Should exit with error when .project_root is missing."""
        with patch("run.PROJECT_ROOT", tmp_path):
            with pytest.raises(SystemExit) as exc_info:
                validate_project_root()
            assert exc_info.value.code == 1


class TestMainCLI:
    """Tests for main CLI entry point."""

    def test_help_displays_usage(self, runner):
        """Should display help text with --help."""
        result = runner.invoke(main, ["--help"])

        assert result.exit_code == 0
        assert "NotesHub Entry Point" in result.output
        for option in ("--action", "--host", "--port", "--reload", "--test-type", "--coverage"):
            assert option in result.output

    def test_info_action_displays_app_info(self, runner):
        """Should display application info with --action info."""
        result = runner.invoke(main, ["--action", "info"])

        assert result.exit_code == 0
        assert "NotesHub" in result.output
        assert "API:      http://127.0.0.1:8080/api" in result.output
        assert "Browser:  http://127.0.0.1:8080/" in result.output
        assert "--action initdb" in result.output

    @pytest.mark.parametrize(("flag", "level"), [("--verbose", "INFO"), ("-d", "DEBUG"), (None, "WARNING")])
    def test_flags_set_logging_level(self, runner, flag, level):
        """Should map verbosity flags to a log level."""
        args = ["--action", "info"] + ([flag] if flag else [])

        with patch("run.setup_logging") as mock_setup:
            runner.invoke(main, args)

        mock_setup.assert_called_once_with(level=level, format_type="console")

    def test_config_shows_every_yaml_section(self, runner):
        """Should print each section with the file it came from."""
        result = runner.invoke(main, ["--action", "config"])

        assert result.exit_code == 0
        for header in (
            "[application] config/settings/application.yaml",
            "[database] config/settings/database.yaml",
            "[logging] config/settings/logging.yaml",
            "[features] config/settings/features.yaml",
            "[observability] config/settings/observability.yaml",
        ):
            assert header in result.output
        assert "max_limit: 100" in result.output

    def test_invalid_action_shows_error(self, runner):
        """Should show error for invalid action value."""
        result = runner.invoke(main, ["--action", "invalid"])

        assert result.exit_code != 0
        assert "Invalid value" in result.output


class TestActionDispatch:
    """Tests for actions that start external work."""

    def test_server_uses_configured_address(self, runner):
        """Should launch uvicorn on the configured host with the given port."""
        with patch("run.subprocess.run") as mock_run:
            result = runner.invoke(main, ["--action", "server", "--port", "9000", "--reload"])

        assert result.exit_code == 0
        cmd = mock_run.call_args.args[0]
        assert "noteshub.backend.main:app" in cmd
        assert cmd[cmd.index("--port") + 1] == "9000"
        assert "--reload" in cmd

    def test_initdb_creates_tables(self, runner):
        """Should create tables and report success."""
        with (
            patch("noteshub.backend.core.database.init_models") as init_models,
            patch("noteshub.backend.core.database.dispose_engine") as dispose,
        ):
            result = runner.invoke(main, ["--action", "initdb"])

        assert result.exit_code == 0
        assert "Database tables created." in result.output
        init_models.assert_awaited_once()
        dispose.assert_awaited_once()

    def test_initdb_failure_exits(self, runner):
        """Should exit non-zero when the tables cannot be created."""
        with (
            patch("noteshub.backend.core.database.init_models", side_effect=RuntimeError("locked")),
            patch("noteshub.backend.core.database.dispose_engine"),
        ):
            result = runner.invoke(main, ["--action", "initdb"])

        assert result.exit_code == 1
        assert "Could not create tables: locked" in result.output

    def test_test_action_targets_suite(self, runner):
        """Should run pytest on the chosen suite."""
        with patch("run.subprocess.run") as mock_run:
            mock_run.return_value.returncode = 0
            result = runner.invoke(main, ["--action", "test", "--test-type", "unit"])

        assert result.exit_code == 0
        assert "tests/unit" in mock_run.call_args.args[0]


class TestHealthAction:
    """Tests for --action health."""

    def test_all_checks_pass(self, runner):
        """Should report each check and exit 0."""
        checks = [("Catalog models", lambda: "notes"), ("Database reachable", lambda: "3 ms")]

        with patch("run.HEALTH_CHECKS", checks):
            result = runner.invoke(main, ["--action", "health"])

        assert result.exit_code == 0
        assert "Catalog models: notes" in result.output
        assert "Database reachable: 3 ms" in result.output
        assert "All checks passed." in result.output

    def test_failed_check_exits_non_zero(self, runner):
        """Should keep going after a failure and exit 1 at the end."""

        def unreachable():
            raise RuntimeError("connection refused")

        checks = [("Database reachable", unreachable), ("Catalog models", lambda: "notes")]

        with patch("run.HEALTH_CHECKS", checks):
            result = runner.invoke(main, ["--action", "health"])

        assert result.exit_code == 1
        assert "Database reachable: connection refused" in result.output
        assert "Catalog models: notes" in result.output
        assert "1 of 2 checks failed." in result.output

    def test_models_check_lists_catalog_tables(self):
        """Should find every catalog table on the model metadata."""
        from run import _check_models

        assert _check_models() == "note_tags, notes, programs, semesters"

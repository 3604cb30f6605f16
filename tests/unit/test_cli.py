"""Unit tests for the CLI."""

from datetime import date, datetime, time, timezone
from unittest.mock import patch

import pytest
from click.testing import CliRunner

from commit_backfill.cli import cli
from commit_backfill.errors import CommitObjectError, RepositoryOpenError


@pytest.mark.unit
class TestCLI:
    """Test the commit-backfill command."""

    @pytest.fixture
    def runner(self):
        """Create a CLI runner."""
        return CliRunner()

    @pytest.fixture
    def mock_scheduler(self):
        """Patch the scheduler class used by the CLI."""
        with patch("commit_backfill.cli.CommitScheduler") as mock_class:
            scheduler = mock_class.from_options.return_value
            scheduler.days_to_commit = 37
            scheduler.start_datetime = datetime(2023, 12, 9, 9, 0, tzinfo=timezone.utc)
            scheduler.run.return_value = "f" * 40
            yield mock_class, scheduler

    def test_run(self, runner, mock_scheduler):
        mock_class, scheduler = mock_scheduler

        result = runner.invoke(cli, ["--repo-path", "/fake/repo", "--years-ago", "0.1"])

        assert result.exit_code == 0, result.output
        assert "Backfilling 37 days in /fake/repo from 2023-12-09" in result.output
        assert f"✓ HEAD reset to {'f' * 40}" in result.output
        scheduler.run.assert_called_once()
        assert mock_class.from_options.call_args.kwargs == {"write_tree": True}

    def test_options_passed_to_scheduler(self, runner, mock_scheduler):
        mock_class, _ = mock_scheduler

        result = runner.invoke(
            cli,
            [
                "--repo-path", "/fake/repo",
                "--years-ago", "1.5",
                "--message", "Update",
                "--start", "08:30",
                "--end", "18:15",
                "--author", "Jane Roe <jane@example.com>",
                "--include-weekends",
                "--exclude-date", "2024-12-25",
                "--exclude-date", "2025-01-01",
                "--seed", "42",
            ],
        )

        assert result.exit_code == 0, result.output
        options = mock_class.from_options.call_args.args[0]
        assert str(options.repo_path) == "/fake/repo"
        assert options.years_ago == 1.5
        assert options.message == "Update"
        assert options.window.start == time(8, 30)
        assert options.window.end == time(18, 15)
        assert options.author == "Jane Roe <jane@example.com>"
        assert options.skip_weekends is False
        assert options.excluded_dates == frozenset({date(2024, 12, 25), date(2025, 1, 1)})
        assert options.seed == 42

    def test_defaults(self, runner, mock_scheduler):
        mock_class, _ = mock_scheduler

        result = runner.invoke(cli, ["--years-ago", "1"])

        assert result.exit_code == 0, result.output
        options = mock_class.from_options.call_args.args[0]
        assert options.window.start == time(9, 0)
        assert options.window.end == time(17, 0)
        assert options.skip_weekends is True
        assert options.author is None
        assert options.message == "Backfill"

    def test_years_ago_required(self, runner, mock_scheduler):
        result = runner.invoke(cli, [])
        assert result.exit_code == 2
        assert "--years-ago" in result.output

    @pytest.mark.parametrize("value", ["0", "-1"])
    def test_years_ago_must_be_positive(self, runner, mock_scheduler, value):
        result = runner.invoke(cli, ["--years-ago", value])
        assert result.exit_code == 2

    def test_window_must_be_ordered(self, runner, mock_scheduler):
        mock_class, _ = mock_scheduler

        result = runner.invoke(cli, ["--years-ago", "1", "--start", "17:00", "--end", "09:00"])

        assert result.exit_code == 2
        assert "must be before" in result.output
        mock_class.from_options.assert_not_called()

    def test_invalid_time(self, runner, mock_scheduler):
        result = runner.invoke(cli, ["--years-ago", "1", "--start", "lunchtime"])
        assert result.exit_code == 2

    def test_invalid_exclude_date(self, runner, mock_scheduler):
        result = runner.invoke(cli, ["--years-ago", "1", "--exclude-date", "someday"])
        assert result.exit_code == 2

    def test_dry_run(self, runner, mock_scheduler):
        _, scheduler = mock_scheduler
        scheduler.plan.return_value = [
            datetime(2023, 12, 9, 9, 0, tzinfo=timezone.utc),
            datetime(2023, 12, 11, 9, 0, tzinfo=timezone.utc),
            datetime(2023, 12, 11, 13, 0, tzinfo=timezone.utc),
        ]

        result = runner.invoke(cli, ["--years-ago", "0.1", "--dry-run"])

        assert result.exit_code == 0, result.output
        assert "Would write 3 commits over 2 active days (37 days in range)" in result.output
        assert "First: 2023-12-09T09:00:00+00:00" in result.output
        assert "Last:  2023-12-11T13:00:00+00:00" in result.output
        scheduler.run.assert_not_called()
        assert mock_scheduler[0].from_options.call_args.kwargs == {"write_tree": False}

    def test_repository_error(self, runner, mock_scheduler):
        mock_class, _ = mock_scheduler
        mock_class.from_options.side_effect = RepositoryOpenError("Invalid git repository: /nope")

        result = runner.invoke(cli, ["--repo-path", "/nope", "--years-ago", "1"])

        assert result.exit_code == 1
        assert "✗ Error backfilling commits: Invalid git repository: /nope" in result.output

    def test_commit_error(self, runner, mock_scheduler):
        _, scheduler = mock_scheduler
        scheduler.run.side_effect = CommitObjectError("Could not write commit object")

        result = runner.invoke(cli, ["--years-ago", "1"])

        assert result.exit_code == 1
        assert "Could not write commit object" in result.output

    def test_repo_path_from_environment(self, runner, mock_scheduler):
        mock_class, _ = mock_scheduler

        result = runner.invoke(cli, ["--years-ago", "1"], env={"BACKFILL_REPO_PATH": "/env/repo"})

        assert result.exit_code == 0, result.output
        assert str(mock_class.from_options.call_args.args[0].repo_path) == "/env/repo"

    def test_log_level_defaults_to_info(self, runner, mock_scheduler):
        with patch("commit_backfill.cli.setup_logging") as setup:
            result = runner.invoke(cli, ["--years-ago", "1"])

        assert result.exit_code == 0, result.output
        setup.assert_called_once_with(level="INFO", log_file=None)

    def test_log_level_from_environment(self, runner, mock_scheduler):
        with patch("commit_backfill.cli.setup_logging") as setup:
            result = runner.invoke(
                cli, ["--years-ago", "1"], env={"BACKFILL_LOG_LEVEL": "DEBUG"}
            )

        assert result.exit_code == 0, result.output
        setup.assert_called_once_with(level="DEBUG", log_file=None)

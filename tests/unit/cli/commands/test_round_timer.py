"""Unit tests for round-timer command."""

import pytest
from click.testing import CliRunner

from src.cli.commands.round_timer import round_timer


class TestRoundTimerCommand:
    """Test suite for round-timer command."""

    @pytest.fixture
    def runner(self, mock_env):
        """Create a Click CLI test runner with test settings."""
        return CliRunner()

    def test_short_timer(self, runner):
        """Test a timer that fits inside one quarter."""
        result = runner.invoke(
            round_timer,
            ["--start", "2025-11-12T19:03", "--end", "2025-11-12T19:14"],
        )

        assert result.exit_code == 0
        assert "Rounding timer in Europe/Berlin" in result.output
        assert "19:00:00" in result.output
        assert "19:15:00" in result.output
        assert "Billable entry: 0.25h (15 minutes)" in result.output

    def test_utc_input_uses_civil_timezone(self, runner):
        """Test that offset timestamps are shown on the Berlin clock."""
        result = runner.invoke(
            round_timer,
            ["--start", "2025-11-12T18:03Z", "--end", "2025-11-12T18:47Z"],
        )

        assert result.exit_code == 0
        assert "| 2025-11-12 | 19:00:00 | 20:00:00 | 1.00  |" in result.output

    def test_timezone_option(self, runner):
        """Test that --timezone overrides the configured timezone."""
        result = runner.invoke(
            round_timer,
            [
                "--start",
                "2025-11-12T18:03Z",
                "--end",
                "2025-11-12T18:47Z",
                "--timezone",
                "UTC",
            ],
        )

        assert result.exit_code == 0
        assert "Rounding timer in UTC" in result.output
        assert "18:00:00" in result.output
        assert "19:00:00" in result.output

    def test_table_shows_civil_date_and_times(self, runner):
        """Test that the table row is rendered on the selected wall clock."""
        result = runner.invoke(
            round_timer,
            [
                "--start",
                "2025-11-12T22:50Z",
                "--end",
                "2025-11-12T23:20Z",
                "--timezone",
                "Asia/Tokyo",
            ],
        )

        assert result.exit_code == 0
        row = next(line for line in result.output.splitlines() if "07:45:00" in line)
        assert "2025-11-13" in row
        assert "08:30:00" in row
        assert "0.75" in row
        assert "2025-11-12" not in result.output

    def test_end_before_start(self, runner):
        """Test that a reversed timer exits with a validation error."""
        result = runner.invoke(
            round_timer,
            ["--start", "2025-11-12T19:14", "--end", "2025-11-12T19:03"],
        )

        assert result.exit_code == 3
        assert "Data Validation Error" in result.output
        assert "raw_end" in result.output

    def test_malformed_timestamp(self, runner):
        """Test that a malformed timestamp exits with a validation error."""
        result = runner.invoke(
            round_timer, ["--start", "yesterday", "--end", "2025-11-12T19:03"]
        )

        assert result.exit_code == 3
        assert "--start is not an ISO 8601 timestamp" in result.output

    def test_unknown_timezone(self, runner):
        """Test that an unknown --timezone exits with a validation error."""
        result = runner.invoke(
            round_timer,
            [
                "--start",
                "2025-11-12T19:03",
                "--end",
                "2025-11-12T19:14",
                "--timezone",
                "Europe/Atlantis",
            ],
        )

        assert result.exit_code == 3
        assert "Unknown timezone: Europe/Atlantis" in result.output

    def test_invalid_settings(self, runner, monkeypatch):
        """Test that broken settings exit with a configuration error."""
        monkeypatch.setenv("APP_TIMEZONE", "Europe/Atlantis")

        result = runner.invoke(
            round_timer, ["--start", "2025-11-12T19:03", "--end", "2025-11-12T19:14"]
        )

        assert result.exit_code == 1
        assert "Configuration Error" in result.output

    def test_missing_end(self, runner):
        """Test that --end is required."""
        result = runner.invoke(round_timer, ["--start", "2025-11-12T19:03"])

        assert result.exit_code == 2
        assert "--end" in result.output

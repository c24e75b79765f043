from __future__ import annotations

import json
import os
import tempfile

from typer.testing import CliRunner

from vacsplit.cli import app

runner = CliRunner()

PLAIN_2024 = ["--country", "none", "--start", "2024-01-01", "--end", "2024-12-31"]


def _write_config(data: dict[str, object]) -> str:
    """Write a JSON config to a temp file and return its path."""
    fd, path = tempfile.mkstemp(suffix=".json")
    with os.fdopen(fd, "w") as f:
        json.dump(data, f)
    return path


class TestPlanCommand:
    def test_plan_text(self) -> None:
        result = runner.invoke(app, ["plan", *PLAIN_2024])
        assert result.exit_code == 0
        assert "VACATION SPLITTER" in result.output
        assert "PLAN: 30 vacation days in 3 periods" in result.output
        assert "Calendar View" in result.output

    def test_plan_no_calendar(self) -> None:
        result = runner.invoke(app, ["plan", *PLAIN_2024, "--no-calendar"])
        assert result.exit_code == 0
        assert "Calendar View" not in result.output

    def test_plan_json(self) -> None:
        result = runner.invoke(app, ["plan", *PLAIN_2024, "--json"])
        assert result.exit_code == 0
        data = json.loads(result.output)
        assert data["vacation_days"] == 30
        assert data["period_count"] == 3
        assert [p["worked_day_count"] for p in data["periods"]] == [16, 7, 7]
        assert data["periods"][0]["worked_start"] == "2024-01-01"
        assert data["periods"][0]["extended_start"] == "2023-12-30"
        assert data["summary"]["vacation_days_used"] == 30

    def test_custom_holiday_range(self) -> None:
        result = runner.invoke(
            app, ["plan", *PLAIN_2024, "--holiday", "2024-03-11..2024-03-14", "--no-calendar"]
        )
        assert result.exit_code == 0
        assert "Holidays:      none (4 days)" in result.output

    def test_bad_holiday_value(self) -> None:
        result = runner.invoke(app, ["plan", *PLAIN_2024, "--holiday", "tomorrow"])
        assert result.exit_code == 1
        assert "Invalid date 'tomorrow'" in result.output

    def test_bad_start_date_is_input_error(self) -> None:
        result = runner.invoke(app, ["plan", "--country", "none", "--start", "2025-13-01"])
        assert result.exit_code == 1
        assert "Invalid date '2025-13-01'" in result.output

    def test_end_help_explains_window(self) -> None:
        result = runner.invoke(app, ["plan", "--help"])
        assert result.exit_code == 0
        assert "widen" in result.output

    def test_lowercase_region(self) -> None:
        result = runner.invoke(
            app,
            ["plan", "-c", "br", "-r", "sp", "--start", "2025-01-01", "--end", "2025-12-31",
             "--periods", "2", "--json"],
        )
        assert result.exit_code == 0
        data = json.loads(result.output)
        assert len(data["periods"]) == 2

    def test_infeasible_without_adjust(self) -> None:
        result = runner.invoke(
            app,
            ["plan", *PLAIN_2024, "--days", "35", "--main-min", "20", "--other-min", "10"],
        )
        assert result.exit_code == 2
        assert "--periods 2" in result.output

    def test_infeasible_with_adjust(self) -> None:
        result = runner.invoke(
            app,
            [
                "plan",
                *PLAIN_2024,
                "--days",
                "35",
                "--main-min",
                "20",
                "--other-min",
                "10",
                "--adjust",
                "--json",
            ],
        )
        assert result.exit_code == 0
        data = json.loads(result.output)
        assert data["period_count"] == 2
        assert len(data["periods"]) == 2
        assert "adjusted from 3 to 2" in data["notes"][0]

    def test_invalid_window(self) -> None:
        result = runner.invoke(
            app, ["plan", "--country", "none", "--start", "2024-06-01", "--end", "2024-01-01"]
        )
        assert result.exit_code == 1
        assert "End date must be after start date" in result.output

    def test_no_placement(self) -> None:
        result = runner.invoke(
            app,
            [
                "plan",
                "--country",
                "none",
                "--start",
                "2024-01-01",
                "--end",
                "2024-01-10",
                "--days",
                "10",
                "--periods",
                "2",
                "--main-min",
                "5",
                "--other-min",
                "5",
            ],
        )
        assert result.exit_code == 1
        assert "Cannot schedule period 2" in result.output
        assert "try a later --end" in result.output

    def test_unknown_country(self) -> None:
        result = runner.invoke(app, ["plan", "--country", "ZZ", "--start", "2024-01-01"])
        assert result.exit_code == 1
        assert "Unknown country" in result.output

    def test_with_country_holidays(self) -> None:
        result = runner.invoke(
            app,
            ["plan", "--country", "BR", "--region", "SP", "--start", "2025-01-01",
             "--end", "2025-12-31", "--periods", "2", "--json"],
        )
        assert result.exit_code == 0
        data = json.loads(result.output)
        assert data["region"] == "SP"
        assert sum(p["worked_day_count"] for p in data["periods"]) == 30


class TestConfigFile:
    def _basic_config(self) -> dict[str, object]:
        return {
            "country": "none",
            "days": 20,
            "periods": 2,
            "start": "2024-01-01",
            "end": "2024-12-31",
            "holidays": ["2024-02-12"],
        }

    def test_config_values_used(self) -> None:
        path = _write_config(self._basic_config())
        try:
            result = runner.invoke(app, ["plan", "--config", path, "--json"])
            assert result.exit_code == 0
            data = json.loads(result.output)
            assert data["vacation_days"] == 20
            assert data["period_count"] == 2
            assert data["start_date"] == "2024-01-01"
        finally:
            os.unlink(path)

    def test_command_line_overrides_config(self) -> None:
        path = _write_config(self._basic_config())
        try:
            result = runner.invoke(app, ["plan", "--config", path, "--days", "24", "--json"])
            assert result.exit_code == 0
            data = json.loads(result.output)
            assert data["vacation_days"] == 24
            assert data["summary"]["vacation_days_used"] == 24
        finally:
            os.unlink(path)

    def test_config_file_not_found(self) -> None:
        result = runner.invoke(app, ["plan", "--config", "/nonexistent/config.json"])
        assert result.exit_code == 1
        assert "Config file not found" in result.output

    def test_config_invalid_json(self) -> None:
        fd, path = tempfile.mkstemp(suffix=".json")
        with os.fdopen(fd, "w") as f:
            f.write("not json{{{")
        try:
            result = runner.invoke(app, ["plan", "--config", path])
            assert result.exit_code == 1
            assert "Invalid JSON" in result.output
        finally:
            os.unlink(path)

    def test_config_non_numeric_value(self) -> None:
        path = _write_config({"country": "none", "days": "abc"})
        try:
            result = runner.invoke(app, ["plan", "--config", path])
            assert result.exit_code == 1
            assert "Invalid value for 'days': 'abc'" in result.output
        finally:
            os.unlink(path)

    def test_config_null_value(self) -> None:
        path = _write_config({"country": "none", "periods": None})
        try:
            result = runner.invoke(app, ["plan", "--config", path])
            assert result.exit_code == 1
            assert "Invalid value for 'periods'" in result.output
        finally:
            os.unlink(path)

    def test_config_bad_date(self) -> None:
        path = _write_config({"country": "none", "start": "2025-13-01"})
        try:
            result = runner.invoke(app, ["plan", "--config", path])
            assert result.exit_code == 1
            assert "Invalid date" in result.output
        finally:
            os.unlink(path)

    def test_config_unknown_key(self) -> None:
        path = _write_config({"budget": 10})
        try:
            result = runner.invoke(app, ["plan", "--config", path])
            assert result.exit_code == 1
            assert "Unknown config keys: budget" in result.output
        finally:
            os.unlink(path)


class TestHolidaysCommand:
    def test_holidays_listing(self) -> None:
        result = runner.invoke(
            app, ["holidays", "--country", "US", "--start", "2025-01-01", "--end", "2025-12-31"]
        )
        assert result.exit_code == 0
        assert "US holidays 2025-01-01 -> 2025-12-31" in result.output
        assert "Independence Day" in result.output

    def test_holidays_window_filter(self) -> None:
        result = runner.invoke(
            app, ["holidays", "--country", "US", "--start", "2025-07-01", "--end", "2025-07-31"]
        )
        assert result.exit_code == 0
        assert "Independence Day" in result.output
        assert "Christmas" not in result.output

    def test_holidays_bad_date(self) -> None:
        result = runner.invoke(app, ["holidays", "--start", "2025-02-30"])
        assert result.exit_code == 1
        assert "Invalid date" in result.output

    def test_holidays_unknown_country(self) -> None:
        result = runner.invoke(app, ["holidays", "--country", "ZZ"])
        assert result.exit_code == 1
        assert "Unknown country" in result.output

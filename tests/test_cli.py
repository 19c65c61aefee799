"""Tests for CLI commands."""

import json
from pathlib import Path

import pytest
from typer.testing import CliRunner

from sitelogic.cli import app
from sitelogic.loader import load_schedule

runner = CliRunner()

CONFLICTED_SCHEDULE = """\
events:
  - id: found
    type: foundation
    title: Pour foundation
    start: 2025-03-03T08:00:00
    end: 2025-03-04T08:00:00
    inspection_completed: true
    project_id: lot-7
  - id: frame
    type: framing
    title: Frame walls
    start: 2025-03-05T08:00:00
    end: 2025-03-06T08:00:00
    project_id: lot-7
  - id: other
    type: demolition
    start: 2025-03-05T08:00:00
    end: 2025-03-06T08:00:00
    project_id: lot-9
"""


@pytest.fixture
def schedule_file(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    monkeypatch.chdir(tmp_path)
    path = tmp_path / "schedule.yaml"
    path.write_text(CONFLICTED_SCHEDULE)
    return path


class TestAnalyzeCommand:
    """Test the analyze command."""

    def test_text_report(self, schedule_file: Path) -> None:
        result = runner.invoke(app, ["analyze", str(schedule_file), "--project", "lot-7"])

        assert result.exit_code == 0
        assert "Schedule Analysis" in result.stdout
        assert "Score: 85/100 (Excellent)" in result.stdout
        assert "[HIGH] Insufficient Curing/Drying Time" in result.stdout
        assert "found-frame-curing_time" in result.stdout

    def test_json_report(self, schedule_file: Path) -> None:
        result = runner.invoke(
            app, ["analyze", str(schedule_file), "--project", "lot-7", "--json"]
        )

        assert result.exit_code == 0
        data = json.loads(result.stdout)
        assert data["score"] == 85
        assert data["rating"] == "Excellent"
        assert data["severity_counts"]["high"] == 1
        assert [c["id"] for c in data["conflicts"]] == ["found-frame-curing_time"]

    def test_ignore(self, schedule_file: Path) -> None:
        result = runner.invoke(
            app,
            [
                "analyze",
                str(schedule_file),
                "--project",
                "lot-7",
                "--ignore",
                "found-frame-curing_time",
                "--json",
            ],
        )

        assert result.exit_code == 0
        data = json.loads(result.stdout)
        assert data["conflicts"] == []
        assert data["score"] == 100

    def test_whole_schedule_includes_other_projects(self, schedule_file: Path) -> None:
        result = runner.invoke(app, ["analyze", str(schedule_file), "--json"])

        assert result.exit_code == 0
        data = json.loads(result.stdout)
        rules = {c["rule"] for c in data["conflicts"]}
        assert "safety_violation" in rules

    def test_flexible_perspective(self, schedule_file: Path) -> None:
        result = runner.invoke(
            app,
            ["analyze", str(schedule_file), "--project", "lot-7", "--perspective", "flexible"],
        )

        assert result.exit_code == 0
        assert "Score: 100/100" in result.stdout

    def test_output_file(self, schedule_file: Path, tmp_path: Path) -> None:
        output = tmp_path / "report.json"
        result = runner.invoke(
            app, ["analyze", str(schedule_file), "--json", "--output", str(output)]
        )

        assert result.exit_code == 0
        assert f"Analysis written to {output}" in result.stdout
        assert json.loads(output.read_text())["conflicts"]

    def test_config_from_global_option(self, schedule_file: Path, tmp_path: Path) -> None:
        config = tmp_path / "custom.yaml"
        config.write_text("detection:\n  disabled_rule_types: [sequence]\n")

        result = runner.invoke(
            app,
            ["-c", str(config), "analyze", str(schedule_file), "--project", "lot-7", "--json"],
        )

        assert result.exit_code == 0
        assert json.loads(result.stdout)["conflicts"] == []

    def test_missing_file(self, tmp_path: Path) -> None:
        result = runner.invoke(app, ["analyze", str(tmp_path / "nope.yaml")])
        assert result.exit_code == 1
        assert "File not found" in result.output

    def test_verbose_logs_checks(self, schedule_file: Path) -> None:
        result = runner.invoke(
            app, ["-v", "2", "analyze", str(schedule_file), "--project", "lot-7"]
        )
        assert result.exit_code == 0
        assert "curing_time: found vs frame" in result.output


class TestSuggestCommand:
    """Test the suggest command."""

    def test_suggestions_printed(self, schedule_file: Path) -> None:
        result = runner.invoke(
            app,
            [
                "suggest",
                str(schedule_file),
                "--project",
                "lot-7",
                "--current-time",
                "2025-03-01T08:00",
            ],
        )

        assert result.exit_code == 0
        assert "Suggested Schedule Changes" in result.stdout
        assert "Frame walls (frame)" in result.stdout
        assert "2025-03-11T08:00:00" in result.stdout

    def test_apply_writes_file(self, schedule_file: Path) -> None:
        result = runner.invoke(
            app,
            [
                "suggest",
                str(schedule_file),
                "--project",
                "lot-7",
                "--current-time",
                "2025-03-01T08:00",
                "--apply",
            ],
        )

        assert result.exit_code == 0
        assert "Updated" in result.stdout
        events = {e.id: e for e in load_schedule(schedule_file).events}
        assert events["frame"].start_time.day == 11

    def test_work_days(self, schedule_file: Path) -> None:
        """March 11 is a Tuesday; without Tuesday the start moves to Wednesday."""
        result = runner.invoke(
            app,
            [
                "suggest",
                str(schedule_file),
                "--project",
                "lot-7",
                "--current-time",
                "2025-03-01T08:00",
                "--work-days",
                "3,4,5",
            ],
        )

        assert result.exit_code == 0
        assert "2025-03-12T08:00:00" in result.stdout

    def test_invalid_work_days(self, schedule_file: Path) -> None:
        result = runner.invoke(app, ["suggest", str(schedule_file), "--work-days", "9"])
        assert result.exit_code == 1
        assert "Invalid calendar constraints" in result.output

    def test_invalid_current_time(self, schedule_file: Path) -> None:
        result = runner.invoke(app, ["suggest", str(schedule_file), "--current-time", "soon"])
        assert result.exit_code == 1
        assert "Invalid datetime" in result.output


class TestPrinciplesCommands:
    """Test the principles sub-commands."""

    def test_list(self) -> None:
        result = runner.invoke(app, ["principles", "list"])
        assert result.exit_code == 0
        assert "seq_001 [sequencing] Foundation Before Framing" in result.stdout
        assert "env_002" in result.stdout

    def test_list_category(self) -> None:
        result = runner.invoke(app, ["principles", "list", "--category", "safety"])
        assert result.exit_code == 0
        assert "saf_001" in result.stdout
        assert "seq_001" not in result.stdout

    def test_recommend(self) -> None:
        result = runner.invoke(app, ["principles", "recommend", "hvac"])
        assert result.exit_code == 0
        assert result.stdout.index("seq_002") < result.stdout.index("qua_004")

    def test_check(self, schedule_file: Path) -> None:
        result = runner.invoke(app, ["principles", "check", str(schedule_file)])
        assert result.exit_code == 0
        assert "Principle Violations" in result.stdout
        assert "qua_003 (found -> frame" in result.stdout

    def test_check_with_learned(self, schedule_file: Path, tmp_path: Path) -> None:
        learned = tmp_path / "learned.json"
        learned.write_text(
            json.dumps(
                [
                    {
                        "id": "learned_x__y",
                        "category": "sequencing",
                        "name": "Learned: x and y compatibility",
                        "description": "User preference",
                        "importance": 5,
                        "confidence": 0.6,
                        "learned": True,
                        "event_types": ["x", "y"],
                    }
                ]
            )
        )

        result = runner.invoke(
            app, ["principles", "check", str(schedule_file), "--learned", str(learned)]
        )

        assert result.exit_code == 0
        assert "Imported 1 learned principles" in result.stdout

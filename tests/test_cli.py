"""Tests for CLI commands."""

from pathlib import Path

import pytest
import yaml
from typer.testing import CliRunner

from timelane import context
from timelane.cli import app

runner = CliRunner()

TRACKERS_YAML = """
trackers:
  - id: A
    title: Schema migration
    start_date: 2025-01-01
    end_date: 2025-01-05
  - id: B
    title: Search index
    start_date: 2025-01-03
    end_date: 2025-01-08
  - id: C
    title: Release notes
    start_date: 2025-01-10
    end_date: 2025-01-12
"""


@pytest.fixture
def trackers_file(tmp_path: Path) -> Path:
    path = tmp_path / "trackers.yaml"
    path.write_text(TRACKERS_YAML)
    return path


@pytest.fixture(autouse=True)
def _clear_context():
    yield
    context.reset()


class TestAssignCommand:
    """Test the assign CLI command."""

    def test_text_output(self, trackers_file: Path) -> None:
        result = runner.invoke(app, ["assign", str(trackers_file), "--no-optimize"])

        assert result.exit_code == 0
        lines = result.stdout.splitlines()
        assert lines[0] == "Lane 0"
        assert "A  Schema migration" in lines[1]
        assert "C  Release notes" in lines[2]
        assert lines[3] == "Lane 1"
        assert "2025-01-03 - 2025-01-08  B" in lines[4]

    def test_yaml_output(self, trackers_file: Path) -> None:
        result = runner.invoke(app, ["assign", str(trackers_file), "--format", "yaml"])

        assert result.exit_code == 0
        data = yaml.safe_load(result.stdout)
        lanes = {a["tracker_id"]: a["lane_index"] for a in data["assignments"]}
        assert lanes == {"A": 0, "B": 1, "C": 0}
        assert data["assignments"][0]["start_date"] == "2025-01-01"

    def test_output_file(self, trackers_file: Path, tmp_path: Path) -> None:
        output = tmp_path / "lanes.yaml"
        result = runner.invoke(
            app, ["assign", str(trackers_file), "--format", "yaml", "--output", str(output)]
        )

        assert result.exit_code == 0
        assert f"Lane assignments written to {output}" in result.stdout
        data = yaml.safe_load(output.read_text())
        assert len(data["assignments"]) == 3

    def test_invalid_format(self, trackers_file: Path) -> None:
        result = runner.invoke(app, ["assign", str(trackers_file), "--format", "json"])
        assert result.exit_code == 1
        assert "Invalid format 'json'" in result.output

    def test_missing_file(self, tmp_path: Path) -> None:
        result = runner.invoke(app, ["assign", str(tmp_path / "missing.yaml")])
        assert result.exit_code == 1
        assert "File not found" in result.output

    def test_invalid_trackers(self, tmp_path: Path) -> None:
        path = tmp_path / "bad.yaml"
        path.write_text(
            "trackers:\n  - id: x\n    title: X\n"
            "    start_date: 2025-02-01\n    end_date: 2025-01-01\n"
        )
        result = runner.invoke(app, ["assign", str(path)])
        assert result.exit_code == 1
        assert "Error:" in result.output

    def test_malformed_config(self, trackers_file: Path, tmp_path: Path) -> None:
        (tmp_path / "timelane_config.yaml").write_text("view_mode: [unclosed\n")
        result = runner.invoke(app, ["assign", str(trackers_file)])
        assert result.exit_code == 1
        assert "Error: Invalid YAML in config" in result.output

    def test_verbose_shows_optimizer_passes(self, trackers_file: Path) -> None:
        result = runner.invoke(app, ["-v", "1", "assign", str(trackers_file)])
        assert result.exit_code == 0
        assert "Pass 0: compaction" in result.output


class TestMetricsCommand:
    """Test the metrics CLI command."""

    def test_metrics_with_optimization(self, trackers_file: Path) -> None:
        result = runner.invoke(app, ["metrics", str(trackers_file)])

        assert result.exit_code == 0
        assert "Lanes:              2" in result.stdout
        assert "Packing efficiency: 58.3%" in result.stdout
        assert "Improvements:" in result.stdout

    def test_metrics_without_optimization(self, trackers_file: Path) -> None:
        result = runner.invoke(app, ["metrics", str(trackers_file), "--no-optimize"])

        assert result.exit_code == 0
        assert "Balance score:      0.67" in result.stdout
        assert "Improvements:" not in result.stdout


class TestResizeCommand:
    """Test the resize CLI command."""

    def test_valid_resize(self, trackers_file: Path) -> None:
        result = runner.invoke(
            app,
            [
                "resize",
                str(trackers_file),
                "A",
                "--edge",
                "end",
                "--date",
                "2025-01-09",
                "--today",
                "2025-01-01",
            ],
        )

        assert result.exit_code == 0
        assert "A: 2025-01-01 - 2025-01-09" in result.stdout
        assert "Duration: 1 week, 2 days" in result.stdout
        assert "Valid" in result.stdout

    def test_corrected_resize(self, trackers_file: Path) -> None:
        result = runner.invoke(
            app,
            [
                "resize",
                str(trackers_file),
                "A",
                "--edge",
                "end",
                "--date",
                "2024-12-01",
                "--today",
                "2025-01-01",
            ],
        )

        assert result.exit_code == 0
        assert "A: 2025-01-01 - 2025-01-01" in result.stdout
        assert "Corrected:" in result.stdout
        assert "End date cannot be before start date" in result.stdout

    def test_config_view_mode_sets_snap(self, trackers_file: Path, tmp_path: Path) -> None:
        config = tmp_path / "custom.yaml"
        config.write_text("view_mode: quarterly\n")

        result = runner.invoke(
            app,
            [
                "--config",
                str(config),
                "resize",
                str(trackers_file),
                "C",
                "--edge",
                "end",
                "--date",
                "2025-01-18",
            ],
        )

        assert result.exit_code == 0
        # Quarterly snaps to the Monday of the week
        assert "C: 2025-01-10 - 2025-01-13" in result.stdout

    def test_unknown_tracker(self, trackers_file: Path) -> None:
        result = runner.invoke(
            app, ["resize", str(trackers_file), "Z", "--edge", "start", "--date", "2025-01-02"]
        )
        assert result.exit_code == 1
        assert "Unknown tracker 'Z'" in result.output

    def test_invalid_date(self, trackers_file: Path) -> None:
        result = runner.invoke(
            app, ["resize", str(trackers_file), "A", "--edge", "start", "--date", "01/02/2025"]
        )
        assert result.exit_code == 1
        assert "Invalid date '01/02/2025'" in result.output


class TestViewportCommand:
    """Test the viewport CLI command."""

    def test_weekly_window(self) -> None:
        result = runner.invoke(app, ["viewport", "2025-01-15"])

        assert result.exit_code == 0
        assert "Window:         2025-01-13 - 2025-01-19" in result.stdout
        assert "Pixels per day: 120" in result.stdout
        assert "Width:          840px" in result.stdout

    def test_navigate_next(self) -> None:
        result = runner.invoke(
            app, ["viewport", "2025-01-15", "--view-mode", "monthly", "--navigate", "next"]
        )

        assert result.exit_code == 0
        assert "Window:         2025-02-01 - 2025-03-02" in result.stdout
        assert "Snap unit:      day" in result.stdout

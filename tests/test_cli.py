"""Tests for the symbol-engine command line."""

import json

import pytest
from typer.testing import CliRunner

from symbol_engine.cli import app

runner = CliRunner()

TRIANGLE = [[100, 50], [70, 120], [130, 120], [100, 50]]


class TestTemplatesCommand:
    def test_lists_defaults(self):
        result = runner.invoke(app, ["templates"])
        assert result.exit_code == 0
        assert "circle" in result.output
        assert "X" in result.output

    def test_from_file(self, tmp_path):
        path = tmp_path / "templates.json"
        path.write_text(json.dumps({
            "recognitionThreshold": 0.3,
            "templates": [
                {"name": "line", "points": [[0, 0], [100, 0]]},
                {"name": "line", "points": [[100, 0], [0, 0]]},
            ],
        }))
        result = runner.invoke(app, ["templates", "--file", str(path)])
        assert result.exit_code == 0
        assert "2 templates (1 symbols)" in result.output
        assert "0.3" in result.output

    def test_bad_file(self, tmp_path):
        result = runner.invoke(app, ["templates", "--file", str(tmp_path / "missing.json")])
        assert result.exit_code == 1


class TestRecognizeCommand:
    def test_recognizes_triangle(self, tmp_path):
        path = tmp_path / "points.json"
        path.write_text(json.dumps({"points": TRIANGLE}))
        result = runner.invoke(app, ["recognize", str(path)])
        assert result.exit_code == 0
        assert "triangle" in result.output

    def test_below_threshold_exits_nonzero(self, tmp_path):
        path = tmp_path / "points.json"
        path.write_text(json.dumps([[0, 0], [40, 80], [80, 0], [120, 80], [160, 0]]))
        result = runner.invoke(app, ["recognize", str(path), "--threshold", "1.0"])
        assert result.exit_code == 1
        assert "No match" in result.output

    def test_missing_file(self, tmp_path):
        result = runner.invoke(app, ["recognize", str(tmp_path / "nope.json")])
        assert result.exit_code == 1

    def test_empty_points(self, tmp_path):
        path = tmp_path / "points.json"
        path.write_text(json.dumps([]))
        result = runner.invoke(app, ["recognize", str(path)])
        assert result.exit_code == 1


class TestReplayCommand:
    def test_tap_and_attempt(self, tmp_path):
        path = tmp_path / "session.json"
        path.write_text(json.dumps([
            {"type": "down", "x": 10, "y": 10, "t": 0.0},
            {"type": "up", "x": 10, "y": 10, "t": 0.1},
            {"type": "down", "x": 100, "y": 50, "t": 0.5},
            {"type": "move", "x": 70, "y": 120, "t": 0.6},
            {"type": "move", "x": 130, "y": 120, "t": 0.7},
            {"type": "move", "x": 104, "y": 62, "t": 0.8},
            {"type": "up", "t": 0.9},
        ]))
        result = runner.invoke(app, ["replay", str(path)])
        assert result.exit_code == 0
        assert "Tap at (10.0, 10.0)" in result.output
        assert "Attempt" in result.output
        assert "7 events, 1 attempts" in result.output

    def test_with_config(self, tmp_path):
        config = tmp_path / "engine.yml"
        config.write_text("recognition_threshold: 0.2\n")
        path = tmp_path / "session.json"
        path.write_text(json.dumps([]))
        result = runner.invoke(app, ["replay", str(path), "--config", str(config)])
        assert result.exit_code == 0

    def test_bad_config(self, tmp_path):
        config = tmp_path / "engine.yml"
        config.write_text("recognition_threshold: 5\n")
        path = tmp_path / "session.json"
        path.write_text(json.dumps([]))
        result = runner.invoke(app, ["replay", str(path), "--config", str(config)])
        assert result.exit_code == 1

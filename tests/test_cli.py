"""Tests for the command line interface."""

import json
import tempfile
from pathlib import Path

from click.testing import CliRunner

from careermap.cli import cli


def test_demo():
    result = CliRunner().invoke(cli, ["demo"])
    assert result.exit_code == 0, result.output
    assert "Career Map" in result.output
    assert "node(s)" in result.output


def test_analyze_writes_json():
    runner = CliRunner()
    with tempfile.TemporaryDirectory() as tmp:
        resume = Path(tmp) / "resume.txt"
        resume.write_text("Software Engineer at TechCorp (2022-2024)\nPython | SQL | Docker\n")
        out = Path(tmp) / "map.json"

        result = runner.invoke(cli, ["analyze", str(resume), "--json", str(out)])
        assert result.exit_code == 0, result.output

        data = json.loads(out.read_text())

    types = sorted(n["type"] for n in data["nodes"])
    assert types == ["role", "skill", "skill", "skill"]
    assert data["timeline"]["startDate"] == "2022"


def test_analyze_with_nothing_to_extract():
    with tempfile.TemporaryDirectory() as tmp:
        notes = Path(tmp) / "notes.txt"
        notes.write_text("lorem ipsum dolor sit amet\n")
        result = CliRunner().invoke(cli, ["analyze", str(notes)])
    assert result.exit_code == 0
    assert "No career insights could be extracted" in result.output


def test_analyze_missing_path():
    result = CliRunner().invoke(cli, ["analyze", "/nonexistent/careermap/resume.txt"])
    assert result.exit_code != 0
    assert "No such file or directory" in result.output


def test_unknown_analyzer_is_rejected():
    result = CliRunner().invoke(cli, ["demo", "--analyzer", "turbo"])
    assert result.exit_code != 0


def test_bad_config_file():
    result = CliRunner().invoke(cli, ["--config", "/nonexistent/config.yaml", "demo"])
    assert result.exit_code != 0
    assert "Config file not found" in result.output


def test_timeline():
    with tempfile.TemporaryDirectory() as tmp:
        resume = Path(tmp) / "resume.txt"
        resume.write_text("Data Analyst at Acme (2019-2021)\nSoftware Engineer at TechCorp (2022 - Present)\n")
        result = CliRunner().invoke(cli, ["timeline", str(resume)])
    assert result.exit_code == 0, result.output
    assert "Timeline" in result.output
    assert "2019" in result.output
    assert "2022" in result.output


def test_init_writes_config():
    with tempfile.TemporaryDirectory() as tmp:
        result = CliRunner().invoke(cli, ["init", "--path", tmp])
        assert result.exit_code == 0, result.output
        config_file = Path(tmp) / "config.yaml"
        assert config_file.exists()
        assert "analyzer: standard" in config_file.read_text()

        again = CliRunner().invoke(cli, ["init", "--path", tmp])
        assert "already exists" in again.output

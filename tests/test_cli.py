"""
Tests for the click CLI, run against the sample game-data bundle.
"""
import json

import pytest
from click.testing import CliRunner

from apps.cli.main import cli


@pytest.fixture
def run(sample_data_path):
    runner = CliRunner()

    def _run(*args):
        return runner.invoke(cli, ["--data", str(sample_data_path), *args])

    return _run


class TestOptimizeCommand:
    def test_optimize(self, run):
        result = run("optimize", "Longsword", "--bound", "str=10:40", "--bound", "dex=10:40", "--budget", "20",
                     "--no-worker")
        assert result.exit_code == 0, result.output
        assert "Optimization Complete" in result.output
        assert "exact-2d" in result.output

    def test_optimize_with_worker_and_mode(self, run):
        result = run("optimize", "Meteorite Staff", "--level", "5", "--mode", "sp",
                     "--bound", "int=10:60", "--budget", "30")
        assert result.exit_code == 0, result.output
        assert "SP" in result.output

    def test_skill_mode(self, run):
        result = run("optimize", "Longsword", "--mode", "SKILL", "--skill", "Square Off",
                     "--bound", "str=10:30", "--bound", "dex=10:30", "--bound", "int=10:30", "--no-worker")
        assert result.exit_code == 0, result.output
        assert "SKILL (Square Off)" in result.output

    @pytest.mark.parametrize("bound", ["str=abc", "luck=10:20", "str=50:40"])
    def test_bad_bound(self, run, bound):
        result = run("optimize", "Longsword", "--bound", bound, "--no-worker")
        assert result.exit_code == 2

    def test_negative_budget(self, run):
        result = run("optimize", "Longsword", "--bound", "str=10:40", "--budget", "-5", "--no-worker")
        assert result.exit_code == 1

    def test_bad_lookahead(self, run):
        result = run("optimize", "Longsword", "--bound", "str=10:40", "--lookahead", "0", "--no-worker")
        assert result.exit_code == 2

    def test_unknown_mode(self, run):
        result = run("optimize", "Longsword", "--mode", "DPS")
        assert result.exit_code == 2


class TestOtherCommands:
    def test_evaluate(self, run):
        result = run("evaluate", "Longsword", "--stat", "str=20", "--stat", "dex=20")
        assert result.exit_code == 0, result.output
        assert "Build Evaluation" in result.output
        assert "Attack rating" in result.output

    def test_evaluate_unmet_requirements(self, run):
        result = run("evaluate", "Claymore", "--stat", "str=10")
        assert result.exit_code == 0, result.output
        assert "Requirements not met" in result.output

    def test_evaluate_bad_stat(self, run):
        assert run("evaluate", "Longsword", "--stat", "str=120").exit_code == 2

    def test_path(self, run):
        result = run("path", "Claymore", "--bound", "str=10:30", "--bound", "dex=10:30", "--max-budget", "8")
        assert result.exit_code == 0, result.output
        assert "Investment Path" in result.output
        assert "+8" in result.output

    def test_path_ignore_requirements(self, run):
        result = run("path", "Claymore", "--bound", "str=10:30", "--max-budget", "4", "--ignore-requirements")
        assert result.exit_code == 0, result.output
        assert "+4" in result.output

    def test_verify(self, run):
        result = run("verify", "Longsword", "--bound", "str=10:20", "--bound", "dex=10:20", "--budget", "6")
        assert result.exit_code == 0, result.output
        assert "matches the optimum" in result.output

    def test_settings_file(self, run, tmp_path):
        settings = tmp_path / "settings.json"
        settings.write_text(json.dumps({"lookahead": 3}))
        result = run("--settings", str(settings), "optimize", "Longsword", "--bound", "str=10:20", "--no-worker")
        assert result.exit_code == 0, result.output
        assert "Optimization Complete" in result.output

    def test_requires_data(self):
        result = CliRunner().invoke(cli, ["optimize", "Longsword"])
        assert result.exit_code == 2

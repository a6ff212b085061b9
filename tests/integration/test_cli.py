"""Integration tests for the CLI interface (textplanner/cli.py)."""

import json
import subprocess
import sys
import tempfile
from pathlib import Path

import pytest

from textplanner.cli import main


@pytest.mark.integration
class TestCLI:
    """Tests for configuration validation from the command line."""

    def test_prints_defaults_without_config(self, capsys):
        """Without a config file the defaults are printed."""
        main([])
        data = json.loads(capsys.readouterr().out)
        assert data["num_subgraphs"] == 10
        assert data["similarity"] is None

    def test_prints_parsed_config(self, temp_config_file, capsys):
        """Values from the config file are printed."""
        main(["--config", temp_config_file])
        data = json.loads(capsys.readouterr().out)
        assert data["start_policy"] == "argmax"
        assert data["num_subgraphs"] == 3
        assert data["similarity"]["name"] == "label"

    def test_check_instantiates_planner(self, temp_config_file, capsys):
        """--check builds a planner before printing."""
        main(["--config", temp_config_file, "--check", "--log-level", "WARNING"])
        assert json.loads(capsys.readouterr().out)["seed"] == 7

    def test_invalid_config_raises(self):
        """Invalid values in the config file raise ValueError."""
        with tempfile.NamedTemporaryFile(mode="w", suffix=".json", delete=False) as f:
            json.dump({"start_policy": "greedy"}, f)
            path = f.name
        try:
            with pytest.raises(ValueError):
                main(["--config", path])
        finally:
            Path(path).unlink()

    def test_invalid_log_level_exits(self):
        """Unknown log levels are rejected by argparse."""
        with pytest.raises(SystemExit):
            main(["--log-level", "LOUD"])

    def test_module_entry_point(self, temp_config_file):
        """The CLI runs as a module."""
        result = subprocess.run(
            [sys.executable, "-m", "textplanner.cli", "--config", temp_config_file],
            capture_output=True,
            text=True,
            cwd=Path(__file__).parent.parent.parent,
        )
        assert result.returncode == 0, f"CLI failed: {result.stderr}"
        assert json.loads(result.stdout)["expand_policy"] == "argmax"

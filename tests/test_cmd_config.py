"""Tests for config commands."""

import json
from pathlib import Path

import pytest
from cli_test_helpers import invoke, runner

from ticket.cli import app
from ticket.config import load_config


class TestConfigSetGet:
    """Test config set, get and list."""

    def test_set_and_get(self, tickets_dir: Path) -> None:
        """Test a value round-trips through the config file."""
        result = invoke(tickets_dir, "config", "set", "prefix", "web")
        assert result.exit_code == 0
        assert "Set prefix = web" in result.stdout
        assert load_config(tickets_dir) == {"prefix": "web"}

        result = invoke(tickets_dir, "config", "get", "prefix")
        assert result.stdout.strip() == "web"

    def test_numeric_values_are_coerced(self, tickets_dir: Path) -> None:
        """Test numeric keys are stored as integers."""
        invoke(tickets_dir, "config", "set", "prune_days", "14")
        invoke(tickets_dir, "config", "set", "default_priority", "P1")
        assert load_config(tickets_dir) == {"prune_days": 14, "default_priority": 1}

    @pytest.mark.parametrize(
        ("key", "value"),
        [
            ("prune_days", "0"),
            ("prune_days", "soon"),
            ("default_priority", "9"),
            ("default_type", "saga"),
        ],
    )
    def test_invalid_values(self, tickets_dir: Path, key: str, value: str) -> None:
        """Test invalid values are rejected and nothing is written."""
        result = invoke(tickets_dir, "config", "set", key, value)
        assert result.exit_code == 1
        assert load_config(tickets_dir) == {}

    def test_get_missing_key(self, tickets_dir: Path) -> None:
        """Test reading an unset key exits 1."""
        result = invoke(tickets_dir, "config", "get", "prefix")
        assert result.exit_code == 1
        assert "not found" in result.output

    def test_get_json(self, tickets_dir: Path) -> None:
        """Test reading a key as JSON."""
        invoke(tickets_dir, "config", "set", "prune_days", "7")
        result = invoke(tickets_dir, "config", "get", "prune_days", "--json")
        assert json.loads(result.stdout) == {"prune_days": 7}

    def test_list(self, tickets_dir: Path) -> None:
        """Test listing values, sorted by key."""
        assert "No configuration values set." in invoke(
            tickets_dir,
            "config",
            "list",
        ).stdout
        invoke(tickets_dir, "config", "set", "prune_days", "7")
        invoke(tickets_dir, "config", "set", "default_type", "bug")
        result = invoke(tickets_dir, "config", "list")
        assert result.stdout.splitlines() == ["default_type = bug", "prune_days = 7"]


class TestConfigKeys:
    """Test config keys."""

    def test_table(self) -> None:
        """Test every known key is shown."""
        result = runner.invoke(app, ["config", "keys"])
        assert result.exit_code == 0
        for key in ("prefix", "default_type", "default_priority", "prune_days"):
            assert key in result.stdout

    def test_json(self) -> None:
        """Test keys as JSON."""
        result = runner.invoke(app, ["config", "keys", "--json"])
        data = json.loads(result.stdout)
        assert data["prune_days"]["type"] == "int"

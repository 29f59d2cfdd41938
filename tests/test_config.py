"""Tests for configuration and tickets directory discovery."""

from pathlib import Path

import pytest

from ticket.config import (
    find_tickets_dir,
    get_config_path,
    get_prefix,
    get_setting,
    load_config,
    save_config,
)


class TestFindTicketsDir:
    """Test tickets directory discovery."""

    def test_env_var_wins(
        self,
        tmp_path: Path,
        monkeypatch: pytest.MonkeyPatch,
    ) -> None:
        """Test TICKETS_DIR overrides the directory search."""
        (tmp_path / ".tickets").mkdir()
        monkeypatch.setenv("TICKETS_DIR", str(tmp_path / "elsewhere"))
        assert find_tickets_dir(tmp_path) == tmp_path / "elsewhere"

    def test_walks_up(self, tmp_path: Path) -> None:
        """Test the nearest .tickets directory above the start is found."""
        (tmp_path / ".tickets").mkdir()
        nested = tmp_path / "src" / "pkg"
        nested.mkdir(parents=True)
        assert find_tickets_dir(nested) == tmp_path / ".tickets"

    def test_falls_back_to_start(self, tmp_path: Path) -> None:
        """Test a missing directory resolves to .tickets under the start."""
        start = tmp_path / "fresh"
        start.mkdir()
        found = find_tickets_dir(start)
        # Nothing above tmp_path should have a .tickets dir either
        if found != start.resolve() / ".tickets":
            pytest.skip(f"a .tickets directory exists above {tmp_path}")
        assert found == start.resolve() / ".tickets"


class TestConfigFile:
    """Test reading and writing config.toml."""

    def test_missing_config_is_empty(self, tickets_dir: Path) -> None:
        """Test no config file reads as an empty dict."""
        assert load_config(tickets_dir) == {}

    def test_save_and_load(self, tickets_dir: Path) -> None:
        """Test values survive a save/load cycle."""
        save_config(tickets_dir, {"prefix": "web", "prune_days": 14})
        assert load_config(tickets_dir) == {"prefix": "web", "prune_days": 14}

    def test_malformed_config_is_empty(self, tickets_dir: Path) -> None:
        """Test a broken TOML file reads as empty instead of failing."""
        get_config_path(tickets_dir).write_text("prefix = [unclosed")
        assert load_config(tickets_dir) == {}

    def test_get_setting_defaults(self, tickets_dir: Path) -> None:
        """Test built-in defaults apply when a key is unset."""
        assert get_setting(tickets_dir, "prune_days") == 30
        assert get_setting(tickets_dir, "default_type") == "task"
        assert get_setting(tickets_dir, "default_priority") == 2
        assert get_setting(tickets_dir, "default_assignee") is None

    def test_get_setting_configured(self, tickets_dir: Path) -> None:
        """Test configured values override defaults."""
        save_config(tickets_dir, {"prune_days": 7})
        assert get_setting(tickets_dir, "prune_days") == 7


class TestGetPrefix:
    """Test ID prefix selection."""

    def test_derived_from_project_dir(self, tmp_path: Path) -> None:
        """Test the prefix comes from the directory holding .tickets."""
        tickets = tmp_path / "my-web-app" / ".tickets"
        tickets.mkdir(parents=True)
        assert get_prefix(tickets) == "mwa"

    def test_config_override(self, tickets_dir: Path) -> None:
        """Test a configured prefix wins."""
        save_config(tickets_dir, {"prefix": "ops"})
        assert get_prefix(tickets_dir) == "ops"

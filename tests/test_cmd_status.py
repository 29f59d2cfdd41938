"""Tests for status, start, close and reopen commands."""

import json
from collections.abc import Callable
from pathlib import Path

from cli_test_helpers import create_ticket, invoke

from ticket.storage import TicketStore


class TestStatus:
    """Test the status command."""

    def test_set_status(self, tickets_dir: Path) -> None:
        """Test setting each recognized status."""
        ticket_id = create_ticket(tickets_dir, "Work", "-a", "sam")
        for status in ("in_progress", "closed", "open"):
            result = invoke(tickets_dir, "status", ticket_id, status)
            assert result.exit_code == 0, result.output
            assert f"-> {status}" in result.stdout
            assert TicketStore(tickets_dir).get(ticket_id).status == status

    def test_partial_id(self, tickets_dir: Path) -> None:
        """Test a partial ID is resolved."""
        ticket_id = create_ticket(tickets_dir, "Work", "-a", "sam")
        result = invoke(tickets_dir, "status", ticket_id.split("-")[1], "closed")
        assert result.exit_code == 0

    def test_invalid_status(self, tickets_dir: Path) -> None:
        """Test an unrecognized status exits 1."""
        ticket_id = create_ticket(tickets_dir, "Work", "-a", "sam")
        result = invoke(tickets_dir, "status", ticket_id, "finished")
        assert result.exit_code == 1
        assert "Invalid status" in result.output

    def test_not_found(self, tickets_dir: Path) -> None:
        """Test an unknown ticket exits 1."""
        result = invoke(tickets_dir, "status", "zzzz", "closed")
        assert result.exit_code == 1
        assert "Error:" in result.output

    def test_ambiguous(
        self,
        tickets_dir: Path,
        make_ticket: Callable[..., Path],
    ) -> None:
        """Test an ambiguous reference exits 1 and lists candidates."""
        make_ticket("p-aaa1")
        make_ticket("p-aab2")
        result = invoke(tickets_dir, "status", "p-aa", "closed")
        assert result.exit_code == 1
        assert "p-aaa1" in result.output
        assert "p-aab2" in result.output

    def test_json_error(self, tickets_dir: Path) -> None:
        """Test errors are JSON objects in JSON mode."""
        result = invoke(tickets_dir, "status", "zzzz", "closed", "--json")
        assert result.exit_code == 1
        assert '"error"' in result.output


class TestCloseReopen:
    """Test close, reopen and start."""

    def test_close_and_reopen(self, tickets_dir: Path) -> None:
        """Test closing records closed_at and reopening clears it."""
        ticket_id = create_ticket(tickets_dir, "Work", "-a", "sam")
        result = invoke(tickets_dir, "close", ticket_id)
        assert result.exit_code == 0
        assert f"Closed {ticket_id}" in result.stdout
        assert TicketStore(tickets_dir).get(ticket_id).closed_at is not None

        result = invoke(tickets_dir, "reopen", ticket_id)
        assert result.exit_code == 0
        ticket = TicketStore(tickets_dir).get(ticket_id)
        assert ticket.status == "open"
        assert ticket.closed_at is None

    def test_close_twice_keeps_timestamp(self, tickets_dir: Path) -> None:
        """Test repeated closes do not move closed_at."""
        ticket_id = create_ticket(tickets_dir, "Work", "-a", "sam")
        invoke(tickets_dir, "close", ticket_id)
        path = tickets_dir / f"{ticket_id}.md"
        store = TicketStore(tickets_dir)
        store.set_field(ticket_id, "closed_at", "2024-01-01T00:00:00Z")
        invoke(tickets_dir, "close", ticket_id)
        assert "closed_at: 2024-01-01T00:00:00Z" in path.read_text()

    def test_close_many_with_failure(self, tickets_dir: Path) -> None:
        """Test every valid ID is closed and a bad one makes the exit 1."""
        first = create_ticket(tickets_dir, "One", "-a", "sam")
        second = create_ticket(tickets_dir, "Two", "-a", "sam")
        result = invoke(tickets_dir, "close", first, "nope", second)
        assert result.exit_code == 1
        store = TicketStore(tickets_dir)
        assert store.get(first).status == "closed"
        assert store.get(second).status == "closed"

    def test_start(self, tickets_dir: Path) -> None:
        """Test start marks a ticket in progress."""
        ticket_id = create_ticket(tickets_dir, "Work", "-a", "sam")
        result = invoke(tickets_dir, "start", ticket_id, "--json")
        assert result.exit_code == 0
        assert json.loads(result.stdout)["status"] == "in_progress"

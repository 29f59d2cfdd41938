"""Shared test helpers for CLI test modules."""

from __future__ import annotations

from typing import TYPE_CHECKING

from typer.testing import CliRunner

from ticket.cli import app

if TYPE_CHECKING:
    from pathlib import Path

    from typer.testing import Result

runner = CliRunner()


def invoke(tickets_dir: Path, *args: str, stdin: str | None = None) -> Result:
    """Run a tk command against a specific tickets directory."""
    return runner.invoke(
        app,
        [*args, "--tickets-dir", str(tickets_dir)],
        input=stdin,
    )


def create_ticket(tickets_dir: Path, title: str, *flags: str) -> str:
    """Create a ticket through the CLI and return its ID."""
    result = invoke(tickets_dir, "create", title, *flags)
    assert result.exit_code == 0, result.output
    return result.stdout.strip()

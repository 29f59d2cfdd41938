"""Workflow listing commands for the tk CLI: ready, blocked, closed."""

from __future__ import annotations

import typer

from ticket.constants import DEFAULT_CLOSED_LIMIT
from ticket.errors import ValidationError
from ticket.listing import get_blocked_tickets, get_closed_tickets, get_ready_work
from ticket.models import ticket_to_dict

from ._formatting import format_blocked, format_closed, format_ticket_brief
from ._helpers import get_store
from ._json_state import echo_error, echo_json, is_json_output


def _parse_limit(value: str) -> int:
    text = value.strip()
    if not (text.isascii() and text.isdigit()) or int(text) <= 0:
        msg = f"Invalid limit '{value}'. Must be a positive integer."
        raise ValidationError(msg)
    return int(text)


def register(app: typer.Typer) -> None:
    """Register workflow commands."""

    @app.command()
    def ready(
        json_output: bool = typer.Option(False, "--json", help="Output as JSON"),
        tickets_dir: str | None = typer.Option(
            None,
            "--tickets-dir",
            help="Path to the tickets directory",
        ),
    ) -> None:
        """Show open tickets whose dependencies are all closed."""
        tickets = get_ready_work(get_store(tickets_dir))

        if is_json_output(json_output):
            echo_json([ticket_to_dict(t) for t in tickets])
            return
        for ticket in tickets:
            typer.echo(format_ticket_brief(ticket))

    @app.command()
    def blocked(
        json_output: bool = typer.Option(False, "--json", help="Output as JSON"),
        tickets_dir: str | None = typer.Option(
            None,
            "--tickets-dir",
            help="Path to the tickets directory",
        ),
    ) -> None:
        """Show open tickets waiting on unclosed dependencies."""
        blocked_tickets = get_blocked_tickets(get_store(tickets_dir))

        if is_json_output(json_output):
            output = [
                {**ticket_to_dict(bt.ticket), "unmet_deps": bt.unmet_deps}
                for bt in blocked_tickets
            ]
            echo_json(output)
            return
        for bt in blocked_tickets:
            typer.echo(format_blocked(bt.ticket, bt.unmet_deps))

    @app.command()
    def closed(
        limit: str = typer.Option(
            str(DEFAULT_CLOSED_LIMIT),
            "--limit",
            "-n",
            help="Number of tickets to show",
        ),
        json_output: bool = typer.Option(False, "--json", help="Output as JSON"),
        tickets_dir: str | None = typer.Option(
            None,
            "--tickets-dir",
            help="Path to the tickets directory",
        ),
    ) -> None:
        """Show closed tickets, most recently closed first."""
        is_json_output(json_output)
        try:
            count = _parse_limit(limit)
        except ValidationError as e:
            echo_error(str(e))
            raise typer.Exit(1)

        tickets = get_closed_tickets(get_store(tickets_dir), limit=count)

        if is_json_output(json_output):
            echo_json([ticket_to_dict(t) for t in tickets])
            return
        for ticket in tickets:
            typer.echo(format_closed(ticket))

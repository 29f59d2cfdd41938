"""Note command for the tk CLI."""

from __future__ import annotations

import sys

import typer

from ticket.errors import TicketError
from ticket.models import ticket_to_dict

from ._completions import complete_ticket_ids
from ._helpers import get_store
from ._json_state import echo_error, echo_json, is_json_output


def register(app: typer.Typer) -> None:
    """Register add-note command."""

    @app.command("add-note")
    def add_note(
        ticket_id: str = typer.Argument(
            ...,
            help="Ticket ID",
            autocompletion=complete_ticket_ids,
        ),
        text: list[str] | None = typer.Argument(  # noqa: B008
            None,
            help="Note text (read from stdin when omitted)",
        ),
        json_output: bool = typer.Option(False, "--json", help="Output as JSON"),
        tickets_dir: str | None = typer.Option(
            None,
            "--tickets-dir",
            help="Path to the tickets directory",
        ),
    ) -> None:
        """Append a timestamped note to a ticket."""
        is_json_output(json_output)
        note = " ".join(text) if text else sys.stdin.read()
        try:
            ticket = get_store(tickets_dir).add_note(ticket_id, note.strip())
        except TicketError as e:
            echo_error(str(e))
            raise typer.Exit(1)

        if is_json_output(json_output):
            echo_json(ticket_to_dict(ticket))
        else:
            typer.echo(f"✓ Added note to {ticket.id}")

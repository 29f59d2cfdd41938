"""Status commands for the tk CLI: status, start, close, reopen."""

from __future__ import annotations

from typing import TYPE_CHECKING

import typer

from ticket.errors import TicketError
from ticket.lifecycle import close as close_ticket
from ticket.lifecycle import reopen as reopen_ticket
from ticket.lifecycle import set_status, start as start_ticket
from ticket.models import ticket_to_dict

from ._completions import complete_statuses, complete_ticket_ids
from ._helpers import get_store
from ._json_state import echo_error, echo_json, is_json_output

if TYPE_CHECKING:
    from collections.abc import Callable

    from ticket.models import Ticket
    from ticket.storage import TicketStore


def _apply_each(
    ticket_ids: list[str],
    tickets_dir: str | None,
    action: Callable[[TicketStore, str], Ticket],
    verb: str,
    json_output: bool,
) -> None:
    """Run a status change on each ticket; exit 1 if any of them failed."""
    store = get_store(tickets_dir)
    has_errors = False
    for ticket_id in ticket_ids:
        try:
            ticket = action(store, ticket_id)
        except TicketError as e:
            echo_error(f"{ticket_id}: {e}")
            has_errors = True
            continue
        if is_json_output(json_output):
            echo_json(ticket_to_dict(ticket))
        else:
            typer.echo(f"✓ {verb} {ticket.id}: {ticket.title}")

    if has_errors:
        raise typer.Exit(1)


def register(app: typer.Typer) -> None:
    """Register status, start, close and reopen commands."""

    @app.command()
    def status(
        ticket_id: str = typer.Argument(
            ...,
            help="Ticket ID",
            autocompletion=complete_ticket_ids,
        ),
        new_status: str = typer.Argument(
            ...,
            help="open, in_progress, or closed",
            autocompletion=complete_statuses,
        ),
        json_output: bool = typer.Option(False, "--json", help="Output as JSON"),
        tickets_dir: str | None = typer.Option(
            None,
            "--tickets-dir",
            help="Path to the tickets directory",
        ),
    ) -> None:
        """Set a ticket's status."""
        is_json_output(json_output)
        try:
            ticket = set_status(get_store(tickets_dir), ticket_id, new_status)
        except TicketError as e:
            echo_error(str(e))
            raise typer.Exit(1)

        if is_json_output(json_output):
            echo_json(ticket_to_dict(ticket))
        else:
            typer.echo(f"✓ Updated {ticket.id} -> {ticket.status}")

    @app.command()
    def start(
        ticket_ids: list[str] = typer.Argument(  # noqa: B008
            ...,
            help="Ticket ID(s) to start",
            autocompletion=complete_ticket_ids,
        ),
        json_output: bool = typer.Option(False, "--json", help="Output as JSON"),
        tickets_dir: str | None = typer.Option(
            None,
            "--tickets-dir",
            help="Path to the tickets directory",
        ),
    ) -> None:
        """Mark one or more tickets as in progress."""
        _apply_each(ticket_ids, tickets_dir, start_ticket, "Started", json_output)

    @app.command()
    def close(
        ticket_ids: list[str] = typer.Argument(  # noqa: B008
            ...,
            help="Ticket ID(s) to close",
            autocompletion=complete_ticket_ids,
        ),
        json_output: bool = typer.Option(False, "--json", help="Output as JSON"),
        tickets_dir: str | None = typer.Option(
            None,
            "--tickets-dir",
            help="Path to the tickets directory",
        ),
    ) -> None:
        """Close one or more tickets."""
        _apply_each(ticket_ids, tickets_dir, close_ticket, "Closed", json_output)

    @app.command()
    def reopen(
        ticket_ids: list[str] = typer.Argument(  # noqa: B008
            ...,
            help="Ticket ID(s) to reopen",
            autocompletion=complete_ticket_ids,
        ),
        json_output: bool = typer.Option(False, "--json", help="Output as JSON"),
        tickets_dir: str | None = typer.Option(
            None,
            "--tickets-dir",
            help="Path to the tickets directory",
        ),
    ) -> None:
        """Reopen one or more tickets."""
        _apply_each(ticket_ids, tickets_dir, reopen_ticket, "Reopened", json_output)

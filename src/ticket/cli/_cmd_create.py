"""Create command for the tk CLI."""

from __future__ import annotations

import typer

from ticket.config import get_setting
from ticket.constants import parse_tags
from ticket.errors import TicketError
from ticket.models import ticket_to_dict

from ._completions import complete_ticket_ids, complete_types
from ._helpers import get_default_assignee, get_store
from ._json_state import echo_error, echo_json, is_json_output


def register(app: typer.Typer) -> None:
    """Register create command."""

    @app.command()
    def create(
        title: list[str] | None = typer.Argument(  # noqa: B008
            None,
            help="Ticket title",
        ),
        description: str | None = typer.Option(
            None,
            "--description",
            "-d",
            help="Description text",
        ),
        design: str | None = typer.Option(None, "--design", help="Design notes"),
        acceptance: str | None = typer.Option(
            None,
            "--acceptance",
            help="Acceptance criteria",
        ),
        ticket_type: str | None = typer.Option(
            None,
            "--type",
            "-t",
            help="Type: bug, feature, task, epic, chore",
            autocompletion=complete_types,
        ),
        priority: str | None = typer.Option(
            None,
            "--priority",
            "-p",
            help="Priority 0-4 (0 = highest)",
        ),
        assignee: str | None = typer.Option(
            None,
            "--assignee",
            "-a",
            help="Assignee (default: git user.name)",
        ),
        external_ref: str | None = typer.Option(
            None,
            "--external-ref",
            help="External reference (e.g. gh-123)",
        ),
        parent: str | None = typer.Option(
            None,
            "--parent",
            help="Parent ticket ID",
            autocompletion=complete_ticket_ids,
        ),
        tags: str | None = typer.Option(
            None,
            "--tags",
            help="Comma-separated tags",
        ),
        json_output: bool = typer.Option(False, "--json", help="Output as JSON"),
        tickets_dir: str | None = typer.Option(
            None,
            "--tickets-dir",
            help="Path to the tickets directory",
        ),
    ) -> None:
        """Create a ticket and print its ID."""
        is_json_output(json_output)  # sync local flag for echo_error
        try:
            store = get_store(tickets_dir)
            ticket = store.create(
                " ".join(title or []),
                description=description,
                design=design,
                acceptance=acceptance,
                ticket_type=ticket_type
                or get_setting(store.tickets_dir, "default_type"),
                priority=priority
                if priority is not None
                else get_setting(store.tickets_dir, "default_priority"),
                assignee=assignee or get_default_assignee(store),
                external_ref=external_ref,
                parent=parent,
                tags=parse_tags(tags) if tags else None,
            )
        except TicketError as e:
            echo_error(str(e))
            raise typer.Exit(1)

        if is_json_output(json_output):
            echo_json(ticket_to_dict(ticket))
        else:
            typer.echo(ticket.id)

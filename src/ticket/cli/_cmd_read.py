"""Read/display commands for the tk CLI: show, ls, query."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

import typer

from ticket.deps import DependencyGraph
from ticket.errors import TicketError
from ticket.listing import list_tickets
from ticket.models import document_to_ticket, ticket_to_dict

from ._completions import complete_statuses, complete_ticket_ids
from ._formatting import format_ticket_line
from ._helpers import get_store
from ._json_state import echo_error, echo_json, is_json_output

if TYPE_CHECKING:
    from ticket.models import Ticket


def _related_sections(graph: DependencyGraph, ticket: Ticket) -> dict[str, list[str]]:
    """Derived relationship lines for ``show``, keyed by section heading."""

    def _line(other_id: str) -> str:
        other = graph.get(other_id)
        if other is None:
            return f"- {other_id} [missing]"
        return f"- {other.id} [{other.status}] {other.title}"

    return {
        "Blockers": [_line(d) for d in graph.unmet_deps(ticket)],
        "Blocking": [
            _line(t.id) for t in graph.dependents(ticket.id) if t.is_active()
        ],
        "Children": [_line(t.id) for t in graph.children(ticket.id)],
        "Linked": [_line(lnk) for lnk in graph.linked(ticket.id)],
    }


def register(app: typer.Typer) -> None:
    """Register show, ls and query commands."""

    @app.command()
    def show(
        ticket_id: str = typer.Argument(
            ...,
            help="Ticket ID",
            autocompletion=complete_ticket_ids,
        ),
        json_output: bool = typer.Option(False, "--json", help="Output as JSON"),
        tickets_dir: str | None = typer.Option(
            None,
            "--tickets-dir",
            help="Path to the tickets directory",
        ),
    ) -> None:
        """Show a ticket with its blockers, dependents, children and links."""
        is_json_output(json_output)
        try:
            store = get_store(tickets_dir)
            path = store.resolve(ticket_id)
            doc = store.read_document(path)
            ticket = document_to_ticket(doc, path)
        except TicketError as e:
            echo_error(str(e))
            raise typer.Exit(1)

        graph = DependencyGraph.from_store(store)
        sections = _related_sections(graph, ticket)

        if is_json_output(json_output):
            output: dict[str, Any] = ticket_to_dict(ticket)
            output["blockers"] = graph.unmet_deps(ticket)
            output["blocking"] = [
                t.id for t in graph.dependents(ticket.id) if t.is_active()
            ]
            output["children"] = [t.id for t in graph.children(ticket.id)]
            echo_json(output)
            return

        typer.echo(doc.serialize().rstrip("\n"))
        for heading, lines in sections.items():
            if not lines:
                continue
            typer.echo(f"\n## {heading}\n")
            for line in lines:
                typer.echo(line)

    def ls(
        status: str | None = typer.Option(
            None,
            "--status",
            "-s",
            help="Only tickets with this status",
            autocompletion=complete_statuses,
        ),
        assignee: str | None = typer.Option(
            None,
            "--assignee",
            "-a",
            help="Only tickets assigned to this person",
        ),
        tag: str | None = typer.Option(
            None,
            "--tag",
            "-T",
            help="Only tickets with this tag",
        ),
        json_output: bool = typer.Option(False, "--json", help="Output as JSON"),
        tickets_dir: str | None = typer.Option(
            None,
            "--tickets-dir",
            help="Path to the tickets directory",
        ),
    ) -> None:
        """List tickets by priority, then age."""
        store = get_store(tickets_dir)
        tickets = list_tickets(store, status=status, assignee=assignee, tag=tag)

        if is_json_output(json_output):
            echo_json([ticket_to_dict(t) for t in tickets])
            return
        for ticket in tickets:
            typer.echo(format_ticket_line(ticket))

    app.command("ls")(ls)
    app.command("list", hidden=True)(ls)

    @app.command()
    def query(
        status: str | None = typer.Option(
            None,
            "--status",
            "-s",
            help="Only tickets with this status",
            autocompletion=complete_statuses,
        ),
        tickets_dir: str | None = typer.Option(
            None,
            "--tickets-dir",
            help="Path to the tickets directory",
        ),
    ) -> None:
        """Print every ticket's metadata as one JSON object per line."""
        store = get_store(tickets_dir)
        for ticket in sorted(store.load_all(), key=lambda t: t.id):
            if status is not None and ticket.status != status:
                continue
            record = ticket_to_dict(ticket)
            del record["body"]
            echo_json(record)


"""Dependency and link commands for the tk CLI."""

from __future__ import annotations

from typing import TYPE_CHECKING

import typer

from ticket.deps import DependencyGraph
from ticket.errors import TicketError

from ._completions import complete_ticket_ids
from ._formatting import render_tree
from ._helpers import get_store
from ._json_state import echo_error, echo_json, is_json_output

if TYPE_CHECKING:
    from ticket.deps import TreeNode

_TREE = "tree"
_CYCLE = "cycle"


def _tree_to_dict(node: TreeNode) -> dict[str, object]:
    return {
        "id": node.ticket_id,
        "title": node.ticket.title if node.ticket else None,
        "status": node.ticket.status if node.ticket else None,
        "cycle": node.cycle,
        "elided": node.elided,
        "deps": [_tree_to_dict(child) for child in node.children],
    }


def register(app: typer.Typer) -> None:
    """Register dep, undep, link and unlink commands."""

    @app.command("dep")
    def dependency(
        ticket_id: str = typer.Argument(
            ...,
            help="Ticket ID, or 'tree' / 'cycle'",
            autocompletion=complete_ticket_ids,
        ),
        dep_id: str | None = typer.Argument(
            None,
            help="Ticket it depends on (for 'tree': the root ticket)",
            autocompletion=complete_ticket_ids,
        ),
        full: bool = typer.Option(
            False,
            "--full",
            help="With 'tree': expand repeated subtrees",
        ),
        json_output: bool = typer.Option(False, "--json", help="Output as JSON"),
        tickets_dir: str | None = typer.Option(
            None,
            "--tickets-dir",
            help="Path to the tickets directory",
        ),
    ) -> None:
        """Add a dependency, or show a dependency tree or cycles.

        \b
        tk dep <id> <dep-id>      <id> is blocked until <dep-id> closes
        tk dep tree [--full] <id> show the dependency tree of <id>
        tk dep cycle              list dependency cycles among open tickets
        """
        is_json_output(json_output)
        try:
            store = get_store(tickets_dir)

            if ticket_id == _CYCLE and dep_id is None:
                cycles = DependencyGraph.from_store(store).find_cycles()
                if is_json_output(json_output):
                    echo_json(cycles)
                    return
                for cycle in cycles:
                    typer.echo(" -> ".join(cycle))
                return

            if dep_id is None:
                echo_error("Missing ticket ID. Usage: tk dep <id> <dep-id>")
                raise typer.Exit(1)

            if ticket_id == _TREE:
                root_id = store.resolve_id(dep_id)
                tree = DependencyGraph.from_store(store).dependency_tree(
                    root_id,
                    full=full,
                )
                if is_json_output(json_output):
                    echo_json(_tree_to_dict(tree))
                    return
                for line in render_tree(tree):
                    typer.echo(line)
                return

            added = store.resolve_id(dep_id)
            ticket = store.add_dep(ticket_id, added)
        except TicketError as e:
            echo_error(str(e))
            raise typer.Exit(1)

        if is_json_output(json_output):
            echo_json({"id": ticket.id, "deps": ticket.deps})
        else:
            typer.echo(f"✓ Added dependency: {ticket.id} -> {added}")

    @app.command("undep")
    def remove_dependency(
        ticket_id: str = typer.Argument(
            ...,
            help="Ticket ID",
            autocompletion=complete_ticket_ids,
        ),
        dep_id: str = typer.Argument(
            ...,
            help="Dependency to remove",
            autocompletion=complete_ticket_ids,
        ),
        json_output: bool = typer.Option(False, "--json", help="Output as JSON"),
        tickets_dir: str | None = typer.Option(
            None,
            "--tickets-dir",
            help="Path to the tickets directory",
        ),
    ) -> None:
        """Remove a dependency."""
        is_json_output(json_output)
        try:
            ticket = get_store(tickets_dir).remove_dep(ticket_id, dep_id)
        except TicketError as e:
            echo_error(str(e))
            raise typer.Exit(1)

        if is_json_output(json_output):
            echo_json({"id": ticket.id, "deps": ticket.deps})
        else:
            typer.echo(f"✓ Removed dependency: {ticket.id} -> {dep_id}")

    @app.command("link")
    def link(
        ticket_ids: list[str] = typer.Argument(  # noqa: B008
            ...,
            help="Two or more ticket IDs to link together",
            autocompletion=complete_ticket_ids,
        ),
        json_output: bool = typer.Option(False, "--json", help="Output as JSON"),
        tickets_dir: str | None = typer.Option(
            None,
            "--tickets-dir",
            help="Path to the tickets directory",
        ),
    ) -> None:
        """Link tickets to each other (symmetric, non-blocking)."""
        is_json_output(json_output)
        try:
            tickets = get_store(tickets_dir).add_links(ticket_ids)
        except TicketError as e:
            echo_error(str(e))
            raise typer.Exit(1)

        if is_json_output(json_output):
            echo_json([{"id": t.id, "links": t.links} for t in tickets])
        else:
            ids = ", ".join(t.id for t in tickets)
            typer.echo(f"✓ Linked {len(tickets)} tickets: {ids}")

    @app.command("unlink")
    def unlink(
        ticket_id: str = typer.Argument(
            ...,
            help="Ticket ID",
            autocompletion=complete_ticket_ids,
        ),
        other_id: str = typer.Argument(
            ...,
            help="Linked ticket ID",
            autocompletion=complete_ticket_ids,
        ),
        json_output: bool = typer.Option(False, "--json", help="Output as JSON"),
        tickets_dir: str | None = typer.Option(
            None,
            "--tickets-dir",
            help="Path to the tickets directory",
        ),
    ) -> None:
        """Remove the link between two tickets."""
        is_json_output(json_output)
        try:
            first, second = get_store(tickets_dir).remove_link(ticket_id, other_id)
        except TicketError as e:
            echo_error(str(e))
            raise typer.Exit(1)

        if is_json_output(json_output):
            echo_json([{"id": t.id, "links": t.links} for t in (first, second)])
        else:
            typer.echo(f"✓ Unlinked {first.id} <-> {second.id}")

"""Maintenance commands for the tk CLI."""

from __future__ import annotations

import typer

from ticket.config import get_setting
from ticket.errors import TicketError
from ticket.prune import prune as prune_tickets

from ._formatting import format_prune_line
from ._helpers import get_store
from ._json_state import echo_error, echo_json, is_json_output


def register(app: typer.Typer) -> None:
    """Register maintenance commands."""

    @app.command()
    def prune(
        days: str | None = typer.Option(
            None,
            "--days",
            help="Minimum days since closing (default: prune_days config, 30)",
        ),
        prune_all: bool = typer.Option(
            False,
            "--all",
            help="Prune every eligible closed ticket regardless of age",
        ),
        dry_run: bool = typer.Option(
            False,
            "--dry-run",
            "-n",
            help="Show what would be pruned without deleting anything",
        ),
        json_output: bool = typer.Option(False, "--json", help="Output as JSON"),
        tickets_dir: str | None = typer.Option(
            None,
            "--tickets-dir",
            help="Path to the tickets directory",
        ),
    ) -> None:
        """Permanently delete old closed tickets.

        A closed ticket is kept while any open or in-progress ticket depends
        on it, directly or through other closed tickets.  Tickets without a
        valid closed_at timestamp are never pruned.

        \b
        Examples:
            tk prune                 # closed 30+ days ago
            tk prune --days 7        # closed 7+ days ago
            tk prune --all --dry-run # preview pruning regardless of age
        """
        is_json_output(json_output)
        try:
            store = get_store(tickets_dir)
            threshold = days if days is not None else get_setting(
                store.tickets_dir,
                "prune_days",
            )
            result = prune_tickets(
                store,
                threshold_days=threshold,
                prune_all=prune_all,
                dry_run=dry_run,
            )
        except TicketError as e:
            echo_error(str(e))
            raise typer.Exit(1)

        if is_json_output(json_output):
            echo_json(
                {
                    "dry_run": result.dry_run,
                    "count": result.count,
                    "pruned": [
                        {"id": t.id, "title": t.title, "closed_at": t.closed_at}
                        for t in result.pruned
                    ],
                    "failed": [
                        {"id": f.ticket.id, "error": f.error} for f in result.failed
                    ],
                },
            )
        else:
            for ticket in result.pruned:
                typer.echo(format_prune_line(ticket))
            if result.pruned:
                verb = "Would prune" if result.dry_run else "Pruned"
                typer.echo(f"{verb} {result.count} ticket(s)")

        if result.failed:
            if not is_json_output(json_output):
                for failure in result.failed:
                    echo_error(
                        f"failed to delete {failure.ticket.id}: {failure.error}",
                    )
            raise typer.Exit(1)

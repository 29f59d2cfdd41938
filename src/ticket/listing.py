"""Sorted bulk views over the dependency graph: ready, blocked, closed."""

from __future__ import annotations

from datetime import datetime, timezone
from typing import TYPE_CHECKING

from ticket.constants import DEFAULT_CLOSED_LIMIT
from ticket.deps import BlockedTicket, DependencyGraph

if TYPE_CHECKING:
    from ticket.models import Ticket
    from ticket.storage import TicketStore

_EPOCH = datetime.min.replace(tzinfo=timezone.utc)


def work_order(ticket: Ticket) -> tuple[int, datetime, str]:
    """Sort key: priority, then creation time, then ID.

    Tickets with a missing or malformed ``created`` sort before dated ones
    of the same priority.
    """
    return (ticket.priority, ticket.created_time or _EPOCH, ticket.id)


def _graph(source: TicketStore | DependencyGraph) -> DependencyGraph:
    if isinstance(source, DependencyGraph):
        return source
    return DependencyGraph.from_store(source)


def get_ready_work(source: TicketStore | DependencyGraph) -> list[Ticket]:
    """Get tickets ready to work on, sorted by priority then age.

    Args:
        source: A store (scanned once) or an already built graph
    """
    return sorted(_graph(source).ready(), key=work_order)


def get_blocked_tickets(source: TicketStore | DependencyGraph) -> list[BlockedTicket]:
    """Get blocked tickets with their unmet deps, sorted like ready work."""
    return sorted(_graph(source).blocked(), key=lambda b: work_order(b.ticket))


def get_closed_tickets(
    source: TicketStore | DependencyGraph,
    limit: int | None = DEFAULT_CLOSED_LIMIT,
) -> list[Ticket]:
    """Get closed tickets, most recently closed first.

    Tickets without a usable ``closed_at`` come last; ties break on ID.

    Args:
        source: A store (scanned once) or an already built graph
        limit: Maximum number of tickets to return (None for all)
    """
    closed = [t for t in _graph(source) if t.is_closed()]
    closed.sort(key=lambda t: t.id)
    closed.sort(key=lambda t: t.closed_at_time or _EPOCH, reverse=True)
    return closed if limit is None else closed[:limit]


def list_tickets(
    source: TicketStore | DependencyGraph,
    status: str | None = None,
    assignee: str | None = None,
    tag: str | None = None,
) -> list[Ticket]:
    """List tickets with optional filters, sorted by priority then age."""
    tickets = list(_graph(source))
    if status is not None:
        tickets = [t for t in tickets if t.status == status]
    if assignee is not None:
        tickets = [t for t in tickets if t.assignee == assignee]
    if tag is not None:
        tickets = [t for t in tickets if tag in t.tags]
    return sorted(tickets, key=work_order)

"""Status transitions and the ``closed_at`` timestamp they maintain."""

from __future__ import annotations

from typing import TYPE_CHECKING

from ticket.models import Status, validate_status
from ticket.utils import now_timestamp

if TYPE_CHECKING:
    from ticket.codec import TicketDocument
    from ticket.models import Ticket
    from ticket.storage import TicketStore


def apply_status(doc: TicketDocument, status: Status, stamp: str) -> None:
    """Write a status into a document and keep ``closed_at`` consistent.

    Closing sets ``closed_at`` only when it is not already present, so the
    first close of an episode wins and repeated closes are no-ops.  Any
    other status clears it.
    """
    doc.set("status", status.value)
    if status is Status.CLOSED:
        if not doc.get("closed_at"):
            doc.set("closed_at", stamp)
    else:
        doc.unset("closed_at")


def set_status(
    store: TicketStore,
    reference: str,
    status: Status | str,
    now: str | None = None,
) -> Ticket:
    """Move a ticket to a new status.

    Every transition between open, in_progress and closed is allowed.

    Args:
        store: The ticket store
        reference: Full or partial ticket ID
        status: Target status
        now: Timestamp to record on close (default: current time)

    Returns:
        The updated ticket

    Raises:
        ValidationError: If the status is not recognized
    """
    target = validate_status(status)
    stamp = now or now_timestamp()
    return store.update(reference, lambda doc: apply_status(doc, target, stamp))


def close(store: TicketStore, reference: str, now: str | None = None) -> Ticket:
    """Close a ticket."""
    return set_status(store, reference, Status.CLOSED, now)


def reopen(store: TicketStore, reference: str) -> Ticket:
    """Reopen a ticket."""
    return set_status(store, reference, Status.OPEN)


def start(store: TicketStore, reference: str) -> Ticket:
    """Mark a ticket as in progress."""
    return set_status(store, reference, Status.IN_PROGRESS)

"""Data models for tk tickets using dataclasses."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import TYPE_CHECKING, Any

from ticket.codec import TicketDocument
from ticket.constants import (
    ACTIVE_STATUSES,
    CLOSED_STATUSES,
    DEFAULT_PRIORITY,
    DEFAULT_TYPE,
    PRIORITY_RANGE,
)
from ticket.errors import ValidationError
from ticket.utils import try_parse_timestamp

if TYPE_CHECKING:
    from pathlib import Path


class Status(str, Enum):
    """Statuses the lifecycle state machine can move a ticket into."""

    OPEN = "open"
    IN_PROGRESS = "in_progress"
    CLOSED = "closed"


@dataclass
class Ticket:
    """A ticket as read from disk.

    ``status`` is kept as the raw string so that values outside
    :class:`Status` (such as ``done``) round-trip.  Timestamps are kept in
    their stored form; use :attr:`closed_at_time` and :attr:`created_time`
    for comparable values.
    """

    id: str
    title: str
    status: str = Status.OPEN.value
    created: str | None = None
    closed_at: str | None = None
    deps: list[str] = field(default_factory=list[str])
    links: list[str] = field(default_factory=list[str])
    parent: str | None = None
    ticket_type: str = DEFAULT_TYPE
    priority: int = DEFAULT_PRIORITY
    assignee: str | None = None
    external_ref: str | None = None
    tags: list[str] = field(default_factory=list[str])
    body: str = ""
    path: Path | None = None
    extra: dict[str, str] = field(default_factory=dict[str, str])

    def is_active(self) -> bool:
        """Check if the ticket is open or in progress."""
        return self.status in ACTIVE_STATUSES

    def is_closed(self) -> bool:
        """Check if the ticket is closed (``done`` counts as closed)."""
        return self.status in CLOSED_STATUSES

    @property
    def closed_at_time(self) -> datetime | None:
        """Parsed ``closed_at``; None when absent or malformed."""
        return try_parse_timestamp(self.closed_at)

    @property
    def created_time(self) -> datetime | None:
        """Parsed ``created``; None when absent or malformed."""
        return try_parse_timestamp(self.created)


_KNOWN_FIELDS = frozenset(
    {
        "id",
        "status",
        "created",
        "closed_at",
        "deps",
        "links",
        "parent",
        "type",
        "priority",
        "assignee",
        "external-ref",
        "tags",
    },
)


def validate_status(status: Any) -> Status:
    """Validate a status value and return it as a :class:`Status`."""
    if isinstance(status, Status):
        return status
    try:
        return Status(str(status).strip())
    except ValueError:
        valid = ", ".join(s.value for s in Status)
        msg = f"Invalid status '{status}'. Valid statuses: {valid}"
        raise ValidationError(msg) from None


def validate_priority(priority: Any) -> int:
    """Validate that priority is an integer in the 0-4 range."""
    try:
        value = int(str(priority).strip().removeprefix("p").removeprefix("P"))
    except ValueError:
        msg = f"Invalid priority '{priority}'. Use 0-4."
        raise ValidationError(msg) from None
    if value not in PRIORITY_RANGE:
        msg = f"Invalid priority '{priority}'. Must be 0-4."
        raise ValidationError(msg)
    return value


def _parse_priority(raw: str | None) -> int:
    if raw is None:
        return DEFAULT_PRIORITY
    try:
        return int(raw)
    except ValueError:
        return DEFAULT_PRIORITY


def document_to_ticket(
    doc: TicketDocument,
    path: Path | None = None,
) -> Ticket:
    """Build a Ticket from a parsed document.

    The ID comes from the header, falling back to the file name for
    hand-made files that lack one.
    """
    fields = doc.fields()
    ticket_id = fields.get("id") or (path.stem if path is not None else "")
    return Ticket(
        id=ticket_id,
        title=doc.title,
        status=fields.get("status") or Status.OPEN.value,
        created=fields.get("created"),
        closed_at=fields.get("closed_at") or None,
        deps=doc.get_list("deps"),
        links=doc.get_list("links"),
        parent=fields.get("parent") or None,
        ticket_type=fields.get("type") or DEFAULT_TYPE,
        priority=_parse_priority(fields.get("priority")),
        assignee=fields.get("assignee") or None,
        external_ref=fields.get("external-ref") or None,
        tags=doc.get_list("tags"),
        body=doc.body,
        path=path,
        extra={k: v for k, v in fields.items() if k not in _KNOWN_FIELDS},
    )


def ticket_to_dict(ticket: Ticket) -> dict[str, Any]:
    """Convert a Ticket to a JSON-serializable dictionary."""
    return {
        **ticket.extra,
        "id": ticket.id,
        "title": ticket.title,
        "status": ticket.status,
        "created": ticket.created,
        "closed_at": ticket.closed_at,
        "deps": ticket.deps,
        "links": ticket.links,
        "parent": ticket.parent,
        "type": ticket.ticket_type,
        "priority": ticket.priority,
        "assignee": ticket.assignee,
        "external_ref": ticket.external_ref,
        "tags": ticket.tags,
        "body": ticket.body,
    }

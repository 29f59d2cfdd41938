"""Permanent deletion of old closed tickets.

A ticket is prunable when it is closed (or done), has a parseable
``closed_at``, is old enough (or ``prune_all`` is set), and is not
reachable through ``deps`` from any open or in-progress ticket.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from datetime import datetime, timedelta, timezone
from typing import TYPE_CHECKING, Any

from ticket.constants import CLOSED_STATUSES, DEFAULT_PRUNE_DAYS
from ticket.deps import DependencyGraph
from ticket.errors import NotFoundError, StoreIOError, ValidationError

if TYPE_CHECKING:
    from ticket.models import Ticket
    from ticket.storage import TicketStore

logger = logging.getLogger(__name__)


@dataclass
class PruneFailure:
    """A ticket whose deletion failed."""

    ticket: Ticket
    error: str


@dataclass
class PruneResult:
    """Outcome of a prune run.

    ``pruned`` holds the tickets deleted (or, for a dry run, the tickets
    that would be).  Tickets whose status changed between the scan and
    the delete are listed in ``skipped`` and are not counted.
    """

    pruned: list[Ticket] = field(default_factory=list)
    failed: list[PruneFailure] = field(default_factory=list)
    skipped: list[str] = field(default_factory=list)
    dry_run: bool = False

    @property
    def count(self) -> int:
        """Number of tickets pruned (or that would be pruned)."""
        return len(self.pruned)


def validate_days(value: Any) -> int:
    """Validate an age threshold: a positive whole number of days."""
    text = str(value).strip()
    if not (text.isascii() and text.isdigit()) or int(text) <= 0:
        msg = f"Invalid number of days '{value}'. Must be a positive integer."
        raise ValidationError(msg)
    return int(text)


def is_prunable(
    ticket: Ticket,
    protected: set[str],
    threshold_days: int,
    prune_all: bool,
    now: datetime,
) -> bool:
    """Check a ticket against the prune eligibility rules."""
    if ticket.status not in CLOSED_STATUSES:
        return False
    closed_at = ticket.closed_at_time
    if closed_at is None:
        if ticket.closed_at:
            logger.debug(
                "Not pruning %s: unparseable closed_at %r",
                ticket.id,
                ticket.closed_at,
            )
        return False
    if not prune_all and now - closed_at < timedelta(days=threshold_days):
        return False
    return ticket.id not in protected


def find_prunable(
    graph: DependencyGraph,
    threshold_days: int = DEFAULT_PRUNE_DAYS,
    prune_all: bool = False,
    now: datetime | None = None,
) -> list[Ticket]:
    """Select prunable tickets from a snapshot, oldest close first."""
    moment = now or datetime.now(timezone.utc)
    protected = graph.protected_ids()
    eligible = [
        t
        for t in graph
        if is_prunable(t, protected, threshold_days, prune_all, moment)
    ]
    eligible.sort(key=lambda t: (t.closed_at_time, t.id))
    return eligible


def prune(
    store: TicketStore,
    threshold_days: int | str = DEFAULT_PRUNE_DAYS,
    prune_all: bool = False,
    dry_run: bool = False,
    now: datetime | None = None,
) -> PruneResult:
    """Delete (or preview deleting) prunable tickets.

    Each ticket's status is re-read from disk right before it is deleted;
    one that has been reopened since the scan is left alone.  Deletions
    are independent: a failure is recorded and the run carries on.

    Args:
        store: The ticket store
        threshold_days: Minimum age in days since closing (ignored with
            ``prune_all``)
        prune_all: Prune regardless of age
        dry_run: Report what would be pruned without deleting anything
        now: Reference time for age checks (default: current time)

    Raises:
        ValidationError: If threshold_days is not a positive integer and
            prune_all is not set
    """
    days = 0 if prune_all else validate_days(threshold_days)
    candidates = find_prunable(DependencyGraph.from_store(store), days, prune_all, now)

    result = PruneResult(dry_run=dry_run)
    if dry_run:
        result.pruned = candidates
        return result

    for ticket in candidates:
        # The file name, not the header id, locates the ticket on disk
        target = ticket.path or ticket.id
        current = store.read_status(target)
        if current not in CLOSED_STATUSES:
            logger.debug(
                "Not pruning %s: status changed to %r since scan",
                ticket.id,
                current,
            )
            result.skipped.append(ticket.id)
            continue
        try:
            store.delete(target)
        except NotFoundError:
            logger.debug("Not pruning %s: removed since scan", ticket.id)
            result.skipped.append(ticket.id)
            continue
        except StoreIOError as e:
            logger.warning("Failed to prune %s: %s", ticket.id, e)
            result.failed.append(PruneFailure(ticket=ticket, error=str(e)))
            continue
        result.pruned.append(ticket)
    return result

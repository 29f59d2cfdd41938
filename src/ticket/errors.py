"""Exception types raised by the ticket core.

Every error derives from :class:`TicketError` so the CLI can turn any of
them into an error message and exit status 1.  Each class also inherits
the closest builtin so callers that only care about ``ValueError`` or
``LookupError`` keep working.
"""

from __future__ import annotations


class TicketError(Exception):
    """Base class for ticket errors."""


class NotFoundError(TicketError, LookupError):
    """No ticket matches a reference."""


class AmbiguousError(TicketError, LookupError):
    """A partial reference matches more than one ticket."""

    def __init__(self, reference: str, candidates: list[str]) -> None:
        self.reference = reference
        self.candidates = sorted(candidates)
        msg = (
            f"Ambiguous ID '{reference}' matches {len(self.candidates)} tickets: "
            f"{', '.join(self.candidates)}"
        )
        super().__init__(msg)


class ValidationError(TicketError, ValueError):
    """Invalid user input: unknown status, bad number, bad option."""


class TicketParseError(TicketError, ValueError):
    """A ticket file is not in the expected format."""


class TimestampParseError(TicketError, ValueError):
    """A stored timestamp could not be parsed."""


class StoreIOError(TicketError, OSError):
    """Creating, writing, or deleting a ticket file failed."""

"""Front matter codec for ticket files.

A ticket file is a header block of ``key: value`` lines between two
``---`` marker lines, followed by free-form markdown.  The codec keeps the
header as its raw lines so that field order, unknown fields and anything
it does not understand survive a read/modify/write cycle untouched.  Edits
only ever touch the header lines; the body is carried through verbatim.
"""

from __future__ import annotations

import re
from dataclasses import dataclass, field

from ticket.constants import DEFAULT_TITLE, HEADER_MARKER
from ticket.errors import TicketParseError

_FIELD_RE = re.compile(r"^([A-Za-z0-9_][A-Za-z0-9_-]*):(?:[ \t]*)(.*?)\s*$")
_TITLE_RE = re.compile(r"^#\s+(.+?)\s*$")


def parse_list(value: str | None) -> list[str]:
    """Parse a ``[a, b, c]`` header value into its items.

    A bare value without brackets is read as a comma separated list, so
    hand-edited ``deps: a-1, a-2`` still works.  Duplicates are dropped
    keeping the first occurrence.
    """
    if value is None:
        return []
    text = value.strip()
    if text.startswith("[") and text.endswith("]"):
        text = text[1:-1]
    items: list[str] = []
    for raw in text.split(","):
        item = raw.strip().strip("'\"")
        if item and item not in items:
            items.append(item)
    return items


def format_list(items: list[str]) -> str:
    """Format items as a ``[a, b, c]`` header value."""
    return "[" + ", ".join(items) + "]"


def _is_marker(line: str) -> bool:
    return line.rstrip("\r") == HEADER_MARKER


@dataclass
class TicketDocument:
    """A parsed ticket file: raw header lines plus the untouched body."""

    header: list[str] = field(default_factory=list[str])
    body: str = ""

    @classmethod
    def parse(cls, text: str) -> TicketDocument:
        """Split file text into header lines and body.

        Raises:
            TicketParseError: If the text has no complete header block.
        """
        lines = text.split("\n")
        if not lines or not _is_marker(lines[0]):
            msg = f"Missing '{HEADER_MARKER}' header marker on first line"
            raise TicketParseError(msg)
        for idx in range(1, len(lines)):
            if _is_marker(lines[idx]):
                return cls(header=lines[1:idx], body="\n".join(lines[idx + 1 :]))
        msg = f"Unterminated header block (no closing '{HEADER_MARKER}')"
        raise TicketParseError(msg)

    def serialize(self) -> str:
        """Render the document back into file text."""
        header = "\n".join([HEADER_MARKER, *self.header, HEADER_MARKER])
        return header + "\n" + self.body

    def _find(self, name: str) -> int | None:
        for idx, line in enumerate(self.header):
            match = _FIELD_RE.match(line)
            if match and match.group(1) == name:
                return idx
        return None

    def fields(self) -> dict[str, str]:
        """Return all header fields in file order (first occurrence wins)."""
        result: dict[str, str] = {}
        for line in self.header:
            match = _FIELD_RE.match(line)
            if match and match.group(1) not in result:
                result[match.group(1)] = match.group(2)
        return result

    def get(self, name: str) -> str | None:
        """Get a header field's raw value, or None if the field is absent."""
        idx = self._find(name)
        if idx is None:
            return None
        match = _FIELD_RE.match(self.header[idx])
        return match.group(2) if match else None

    def get_list(self, name: str) -> list[str]:
        """Get a list-valued header field; absent fields read as empty."""
        return parse_list(self.get(name))

    def set(self, name: str, value: str | list[str]) -> None:
        """Replace a header field in place, or append it if absent."""
        rendered = format_list(value) if isinstance(value, list) else str(value)
        line = f"{name}: {rendered}"
        idx = self._find(name)
        if idx is None:
            self.header.append(line)
        else:
            self.header[idx] = line

    def unset(self, name: str) -> bool:
        """Remove a header field. Returns True if the field was present."""
        idx = self._find(name)
        if idx is None:
            return False
        del self.header[idx]
        return True

    @property
    def title(self) -> str:
        """The first ``# `` heading of the body."""
        for line in self.body.split("\n"):
            match = _TITLE_RE.match(line)
            if match:
                return match.group(1)
        return DEFAULT_TITLE

"""Tests for the ticket file codec."""

import pytest

from ticket.codec import TicketDocument, format_list, parse_list
from ticket.errors import TicketParseError

SAMPLE = """---
id: tk-a1b2
status: open
deps: [tk-c3d4, tk-e5f6]
links: []
created: 2024-01-01T00:00:00Z
x-custom: keep me
---
# Fix the parser

Some text.

status: this line is body text, not a field
closed_at: neither is this
"""


class TestParseList:
    """Test list value parsing."""

    def test_bracketed(self) -> None:
        """Test the canonical bracketed form."""
        assert parse_list("[a-1, b-2]") == ["a-1", "b-2"]

    def test_empty(self) -> None:
        """Test empty and missing lists."""
        assert parse_list("[]") == []
        assert parse_list("") == []
        assert parse_list(None) == []

    def test_bare_comma_list(self) -> None:
        """Test a hand-edited list without brackets."""
        assert parse_list("a-1, b-2") == ["a-1", "b-2"]

    def test_quotes_and_duplicates(self) -> None:
        """Test quoted items are unquoted and duplicates dropped."""
        assert parse_list("['a-1', \"b-2\", a-1]") == ["a-1", "b-2"]

    def test_format_list(self) -> None:
        """Test formatting back to the on-disk form."""
        assert format_list(["a-1", "b-2"]) == "[a-1, b-2]"
        assert format_list([]) == "[]"


class TestTicketDocument:
    """Test header parsing and editing."""

    def test_parse_fields_and_body(self) -> None:
        """Test fields and body are split at the closing marker."""
        doc = TicketDocument.parse(SAMPLE)
        assert doc.get("id") == "tk-a1b2"
        assert doc.get_list("deps") == ["tk-c3d4", "tk-e5f6"]
        assert doc.get("x-custom") == "keep me"
        assert doc.body.startswith("# Fix the parser")

    def test_round_trip_is_lossless(self) -> None:
        """Test an unmodified document serializes to the same text."""
        assert TicketDocument.parse(SAMPLE).serialize() == SAMPLE

    def test_title(self) -> None:
        """Test the title comes from the first heading."""
        assert TicketDocument.parse(SAMPLE).title == "Fix the parser"

    def test_title_default(self) -> None:
        """Test a body without heading gets a placeholder title."""
        doc = TicketDocument.parse("---\nid: x\n---\nno heading\n")
        assert doc.title == "Untitled"

    def test_missing_marker(self) -> None:
        """Test text without a header block is rejected."""
        with pytest.raises(TicketParseError):
            TicketDocument.parse("# Just markdown\n")

    def test_unterminated_header(self) -> None:
        """Test a header block without closing marker is rejected."""
        with pytest.raises(TicketParseError):
            TicketDocument.parse("---\nid: x\nstatus: open\n")

    def test_get_absent_field(self) -> None:
        """Test absent fields read as None."""
        assert TicketDocument.parse(SAMPLE).get("closed_at") is None

    def test_set_replaces_in_place(self) -> None:
        """Test replacing a field keeps its position."""
        doc = TicketDocument.parse(SAMPLE)
        doc.set("status", "closed")
        assert doc.header[1] == "status: closed"
        assert doc.header[0] == "id: tk-a1b2"

    def test_set_appends_new_field(self) -> None:
        """Test a new field is appended to the header, not the body."""
        doc = TicketDocument.parse(SAMPLE)
        doc.set("closed_at", "2024-02-01T00:00:00Z")
        assert doc.header[-1] == "closed_at: 2024-02-01T00:00:00Z"
        assert doc.body == TicketDocument.parse(SAMPLE).body

    def test_set_list_value(self) -> None:
        """Test list values are written in bracket form."""
        doc = TicketDocument.parse(SAMPLE)
        doc.set("links", ["tk-9999"])
        assert doc.get("links") == "[tk-9999]"

    def test_edits_never_touch_body(self) -> None:
        """Test body lines that look like fields are left alone."""
        doc = TicketDocument.parse(SAMPLE)
        doc.set("status", "in_progress")
        assert doc.unset("closed_at") is False
        text = doc.serialize()
        assert "status: this line is body text, not a field" in text
        assert "closed_at: neither is this" in text

    def test_unset(self) -> None:
        """Test removing a field from the header."""
        doc = TicketDocument.parse(SAMPLE)
        assert doc.unset("x-custom") is True
        assert doc.get("x-custom") is None
        assert "x-custom" not in doc.serialize()

    def test_unknown_fields_survive_edits(self) -> None:
        """Test fields the codec does not know round-trip through edits."""
        doc = TicketDocument.parse(SAMPLE)
        doc.set("status", "closed")
        reparsed = TicketDocument.parse(doc.serialize())
        assert reparsed.get("x-custom") == "keep me"
        assert list(reparsed.fields()) == [
            "id",
            "status",
            "deps",
            "links",
            "created",
            "x-custom",
        ]

"""One-file-per-ticket storage with atomic writes."""

from __future__ import annotations

import logging
import os
import tempfile
from pathlib import Path
from typing import TYPE_CHECKING

from ticket.codec import TicketDocument
from ticket.config import get_prefix
from ticket.constants import (
    DEFAULT_PRIORITY,
    DEFAULT_TITLE,
    DEFAULT_TYPE,
    FIELD_ORDER,
    NOTES_HEADING,
    TICKET_SUFFIX,
    TICKET_TYPES,
)
from ticket.errors import (
    AmbiguousError,
    NotFoundError,
    StoreIOError,
    TicketParseError,
    ValidationError,
)
from ticket.idgen import IDGenerator
from ticket.models import Status, Ticket, document_to_ticket, validate_priority
from ticket.utils import now_timestamp

if TYPE_CHECKING:
    from collections.abc import Callable

logger = logging.getLogger(__name__)


def _render_body(
    title: str,
    description: str | None,
    design: str | None,
    acceptance: str | None,
) -> str:
    parts = [f"# {title}"]
    if description:
        parts.append(description.strip())
    if design:
        parts.append(f"## Design\n\n{design.strip()}")
    if acceptance:
        parts.append(f"## Acceptance Criteria\n\n{acceptance.strip()}")
    return "\n\n".join(parts) + "\n"


def _append_note(body: str, text: str, stamp: str) -> str:
    """Append a timestamped entry to the body's Notes section."""
    entry = f"**{stamp}**\n\n{text.strip()}\n"
    has_notes = any(line.rstrip() == NOTES_HEADING for line in body.split("\n"))
    base = body.rstrip("\n")
    if not has_notes:
        return f"{base}\n\n{NOTES_HEADING}\n\n{entry}"
    return f"{base}\n\n{entry}"


class TicketStore:
    """Manages a directory of ``<id>.md`` ticket files.

    The store is the context object every other component receives: it
    knows where tickets live and how to read, write and find them.  It
    keeps no in-memory cache, so every call observes the directory as it
    is now.
    """

    def __init__(
        self,
        tickets_dir: str | Path = ".tickets",
        create_dir: bool = False,
    ) -> None:
        """Initialize storage.

        Args:
            tickets_dir: Directory holding ticket files
            create_dir: If True, create the directory now rather than on
                the first ``create()``.
        """
        self.tickets_dir = Path(tickets_dir)
        if create_dir:
            self._ensure_dir()

    def _ensure_dir(self) -> None:
        try:
            self.tickets_dir.mkdir(parents=True, exist_ok=True)
        except OSError as e:
            msg = f"Failed to create tickets directory {self.tickets_dir}: {e}"
            raise StoreIOError(msg) from e

    # -- Paths and lookup ------------------------------------------------

    def ticket_paths(self) -> list[Path]:
        """List every ticket file in the store, sorted by name."""
        if not self.tickets_dir.is_dir():
            return []
        return sorted(
            p for p in self.tickets_dir.glob(f"*{TICKET_SUFFIX}") if p.is_file()
        )

    def ticket_ids(self) -> list[str]:
        """List every ticket ID in the store."""
        return [p.stem for p in self.ticket_paths()]

    def path_for(self, ticket_id: str) -> Path:
        """Get the file path a ticket ID maps to."""
        return self.tickets_dir / f"{ticket_id}{TICKET_SUFFIX}"

    def exists(self, ticket_id: str) -> bool:
        """Check whether a ticket with exactly this ID exists."""
        return self.path_for(ticket_id).is_file()

    def resolve(self, reference: str) -> Path:
        """Resolve a full or partial ticket ID to its file path.

        An exact ID match wins immediately.  Otherwise every ID containing
        the reference is a candidate, so a unique prefix or suffix works.

        Raises:
            NotFoundError: If nothing matches
            AmbiguousError: If more than one ticket matches
        """
        ref = reference.strip()
        if not ref:
            msg = "Empty ticket ID"
            raise NotFoundError(msg)

        if Path(ref).name == ref and self.exists(ref):
            return self.path_for(ref)

        matches = [p for p in self.ticket_paths() if ref in p.stem]
        if not matches:
            msg = f"Ticket '{ref}' not found"
            raise NotFoundError(msg)
        if len(matches) > 1:
            raise AmbiguousError(ref, [p.stem for p in matches])
        return matches[0]

    def resolve_id(self, reference: str) -> str:
        """Resolve a full or partial ticket ID to the full ID."""
        return self.resolve(reference).stem

    # -- Reading and writing ---------------------------------------------

    def read_document(self, path: Path) -> TicketDocument:
        """Read and parse one ticket file."""
        try:
            text = path.read_text(encoding="utf-8")
        except FileNotFoundError:
            msg = f"Ticket '{path.stem}' not found"
            raise NotFoundError(msg) from None
        except UnicodeDecodeError as e:
            msg = f"{path} is not valid UTF-8: {e}"
            raise TicketParseError(msg) from e
        except OSError as e:
            msg = f"Failed to read {path}: {e}"
            raise StoreIOError(msg) from e
        return TicketDocument.parse(text)

    def write_document(self, path: Path, doc: TicketDocument) -> None:
        """Write a ticket file atomically (temp file + rename)."""
        self._ensure_dir()
        with tempfile.NamedTemporaryFile(
            mode="w",
            encoding="utf-8",
            dir=self.tickets_dir,
            delete=False,
            prefix=".",
            suffix=".tmp",
        ) as tmp_file:
            tmp_path = Path(tmp_file.name)
            try:
                tmp_file.write(doc.serialize())
                tmp_file.flush()
                os.fsync(tmp_file.fileno())
            except OSError as e:
                tmp_path.unlink(missing_ok=True)
                msg = f"Failed to write temporary file: {e}"
                raise StoreIOError(msg) from e

        try:
            tmp_path.replace(path)
        except OSError as e:
            tmp_path.unlink(missing_ok=True)
            msg = f"Failed to write {path}: {e}"
            raise StoreIOError(msg) from e

    def get(self, reference: str) -> Ticket:
        """Get a ticket by full or partial ID."""
        path = self.resolve(reference)
        return document_to_ticket(self.read_document(path), path)

    def load_all(self) -> list[Ticket]:
        """Read every ticket in one pass over the directory.

        Files that cannot be read or parsed are logged and skipped so one
        broken file never hides the rest of the store.
        """
        tickets: list[Ticket] = []
        for path in self.ticket_paths():
            try:
                doc = self.read_document(path)
            except (TicketParseError, NotFoundError, StoreIOError) as e:
                logger.warning("Skipping unreadable ticket file %s: %s", path, e)
                continue
            tickets.append(document_to_ticket(doc, path))
        return tickets

    def _target_path(self, target: str | Path) -> Path:
        return target if isinstance(target, Path) else self.path_for(target)

    def read_status(self, target: str | Path) -> str | None:
        """Read a ticket's current status straight from disk.

        ``target`` is a full ticket ID or the path of the ticket file.
        Returns None if the ticket no longer exists or cannot be parsed.
        """
        try:
            doc = self.read_document(self._target_path(target))
        except (TicketParseError, NotFoundError, StoreIOError):
            return None
        return doc.get("status")

    def update(
        self,
        reference: str,
        mutate: Callable[[TicketDocument], None],
    ) -> Ticket:
        """Apply an in-place edit to one ticket and write it back."""
        path = self.resolve(reference)
        doc = self.read_document(path)
        mutate(doc)
        self.write_document(path, doc)
        return document_to_ticket(doc, path)

    def set_field(self, reference: str, name: str, value: str | list[str]) -> Ticket:
        """Set one header field of a ticket."""
        return self.update(reference, lambda doc: doc.set(name, value))

    def unset_field(self, reference: str, name: str) -> Ticket:
        """Remove one header field of a ticket."""
        return self.update(reference, lambda doc: doc.unset(name))

    # -- Creation and deletion -------------------------------------------

    def create(
        self,
        title: str,
        *,
        prefix: str | None = None,
        description: str | None = None,
        design: str | None = None,
        acceptance: str | None = None,
        ticket_type: str = DEFAULT_TYPE,
        priority: int | str = DEFAULT_PRIORITY,
        assignee: str | None = None,
        external_ref: str | None = None,
        parent: str | None = None,
        tags: list[str] | None = None,
        created: str | None = None,
    ) -> Ticket:
        """Create a new ticket file.

        Args:
            title: One-line title (a placeholder is used when blank)
            prefix: ID prefix; defaults to the configured/derived prefix
            description: Body text under the title
            design: Text for the Design section
            acceptance: Text for the Acceptance Criteria section
            ticket_type: One of bug, feature, task, epic, chore
            priority: 0 (highest) to 4
            assignee: Who owns the ticket
            external_ref: Reference to an outside system (e.g. gh-123)
            parent: Parent ticket reference (resolved to a full ID)
            tags: Free-form tags
            created: Creation timestamp (default: now)

        Returns:
            The created ticket

        Raises:
            ValidationError: If type or priority is invalid
            NotFoundError / AmbiguousError: If parent does not resolve
        """
        if ticket_type not in TICKET_TYPES:
            valid = ", ".join(TICKET_TYPES)
            msg = f"Invalid type '{ticket_type}'. Valid types: {valid}"
            raise ValidationError(msg)
        priority_value = validate_priority(priority)
        parent_id = self.resolve_id(parent) if parent else None
        title = " ".join(title.split()) or DEFAULT_TITLE

        values: dict[str, str | list[str] | None] = {
            "status": Status.OPEN.value,
            "deps": [],
            "links": [],
            "created": created or now_timestamp(),
            "type": ticket_type,
            "priority": str(priority_value),
            "assignee": assignee,
            "external-ref": external_ref,
            "parent": parent_id,
            "tags": tags or None,
        }
        body = _render_body(title, description, design, acceptance)

        self._ensure_dir()
        generator = IDGenerator(prefix or get_prefix(self.tickets_dir), self.exists)
        while True:
            ticket_id = generator.generate()
            doc = TicketDocument(header=[], body=body)
            for name in FIELD_ORDER:
                value = ticket_id if name == "id" else values.get(name)
                if value is not None:
                    doc.set(name, value)
            path = self.path_for(ticket_id)
            try:
                # Exclusive create: a concurrent writer grabbing the same ID
                # sends us back round the loop instead of clobbering it.
                with path.open("x", encoding="utf-8") as f:
                    f.write(doc.serialize())
            except FileExistsError:
                logger.debug("ID collision on %s, retrying", ticket_id)
                continue
            except OSError as e:
                msg = f"Failed to create {path}: {e}"
                raise StoreIOError(msg) from e
            return document_to_ticket(doc, path)

    def delete(self, target: str | Path) -> None:
        """Permanently remove a ticket file.

        ``target`` is a full ticket ID or the path of the ticket file.

        Raises:
            NotFoundError: If the ticket does not exist
            StoreIOError: If the file cannot be removed
        """
        path = self._target_path(target)
        try:
            path.unlink()
        except FileNotFoundError:
            msg = f"Ticket '{path.stem}' not found"
            raise NotFoundError(msg) from None
        except OSError as e:
            msg = f"Failed to delete {path}: {e}"
            raise StoreIOError(msg) from e

    # -- Relationships ---------------------------------------------------

    def add_dep(self, reference: str, dep_reference: str) -> Ticket:
        """Make one ticket depend on (be blocked by) another."""
        ticket_id = self.resolve_id(reference)
        dep_id = self.resolve_id(dep_reference)
        if ticket_id == dep_id:
            msg = f"Ticket {ticket_id} cannot depend on itself"
            raise ValidationError(msg)

        def _add(doc: TicketDocument) -> None:
            deps = doc.get_list("deps")
            if dep_id not in deps:
                doc.set("deps", [*deps, dep_id])

        return self.update(ticket_id, _add)

    def remove_dep(self, reference: str, dep_reference: str) -> Ticket:
        """Remove a dependency.

        The dependency may point at a ticket that no longer exists, in
        which case it is matched literally.
        """
        ticket_id = self.resolve_id(reference)
        current = self.get(ticket_id).deps
        dep_id = dep_reference.strip()
        if dep_id not in current:
            try:
                dep_id = self.resolve_id(dep_reference)
            except NotFoundError:
                pass
        if dep_id not in current:
            msg = f"{ticket_id} does not depend on {dep_reference}"
            raise NotFoundError(msg)

        def _remove(doc: TicketDocument) -> None:
            doc.set("deps", [d for d in doc.get_list("deps") if d != dep_id])

        return self.update(ticket_id, _remove)

    def add_links(self, references: list[str]) -> list[Ticket]:
        """Link every given ticket to every other one (symmetric)."""
        ids = list(dict.fromkeys(self.resolve_id(r) for r in references))
        if len(ids) < 2:
            msg = "Linking needs at least two distinct tickets"
            raise ValidationError(msg)

        updated: list[Ticket] = []
        for ticket_id in ids:
            others = [other for other in ids if other != ticket_id]

            def _link(doc: TicketDocument, others: list[str] = others) -> None:
                links = doc.get_list("links")
                merged = links + [o for o in others if o not in links]
                if merged != links:
                    doc.set("links", merged)

            updated.append(self.update(ticket_id, _link))
        return updated

    def remove_link(self, reference: str, other_reference: str) -> list[Ticket]:
        """Remove the link between two tickets, in both directions."""
        first = self.resolve_id(reference)
        second = self.resolve_id(other_reference)
        if (
            second not in self.get(first).links
            and first not in self.get(second).links
        ):
            msg = f"{first} is not linked to {second}"
            raise NotFoundError(msg)

        def _unlink(target: str) -> Callable[[TicketDocument], None]:
            def _apply(doc: TicketDocument) -> None:
                links = doc.get_list("links")
                if target in links:
                    doc.set("links", [lnk for lnk in links if lnk != target])

            return _apply

        return [
            self.update(first, _unlink(second)),
            self.update(second, _unlink(first)),
        ]

    def add_note(self, reference: str, text: str, stamp: str | None = None) -> Ticket:
        """Append a timestamped note to a ticket's body."""
        if not text.strip():
            msg = "Note text is empty"
            raise ValidationError(msg)
        when = stamp or now_timestamp()

        def _note(doc: TicketDocument) -> None:
            doc.body = _append_note(doc.body, text, when)

        return self.update(reference, _note)

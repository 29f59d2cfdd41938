"""Pytest configuration and shared fixtures."""

from __future__ import annotations

from pathlib import Path
from typing import TYPE_CHECKING, Any

import pytest

from ticket.constants import TICKETS_DIR_ENV
from ticket.storage import TicketStore

if TYPE_CHECKING:
    from collections.abc import Callable


@pytest.fixture(autouse=True)
def _isolate_tickets_env(monkeypatch: pytest.MonkeyPatch) -> None:
    """Keep a developer's TICKETS_DIR from leaking into tests."""
    monkeypatch.delenv(TICKETS_DIR_ENV, raising=False)


@pytest.fixture
def tickets_dir(tmp_path: Path) -> Path:
    """Create a temporary .tickets directory for testing."""
    path = tmp_path / "project" / ".tickets"
    path.mkdir(parents=True)
    return path


@pytest.fixture
def store(tickets_dir: Path) -> TicketStore:
    """A store over the temporary tickets directory."""
    return TicketStore(tickets_dir)


def write_ticket_file(
    tickets_dir: Path,
    ticket_id: str,
    *,
    status: str = "open",
    deps: list[str] | None = None,
    links: list[str] | None = None,
    created: str = "2024-01-01T00:00:00Z",
    closed_at: str | None = None,
    priority: int = 2,
    parent: str | None = None,
    title: str | None = None,
    extra: list[str] | None = None,
    body: str | None = None,
) -> Path:
    """Write a ticket file by hand, the way a user or another tool would."""
    header = [
        f"id: {ticket_id}",
        f"status: {status}",
        f"deps: [{', '.join(deps or [])}]",
        f"links: [{', '.join(links or [])}]",
        f"created: {created}",
        "type: task",
        f"priority: {priority}",
    ]
    if closed_at is not None:
        header.append(f"closed_at: {closed_at}")
    if parent is not None:
        header.append(f"parent: {parent}")
    header.extend(extra or [])
    text = "---\n" + "\n".join(header) + "\n---\n"
    text += body if body is not None else f"# {title or ticket_id.upper()}\n"
    path = tickets_dir / f"{ticket_id}.md"
    path.write_text(text, encoding="utf-8")
    return path


@pytest.fixture
def make_ticket(tickets_dir: Path) -> Callable[..., Path]:
    """Factory writing hand-made ticket files into the tickets directory."""

    def _make(ticket_id: str, **kwargs: object) -> Path:
        kwargs_any: dict[str, Any] = dict(kwargs)
        return write_ticket_file(tickets_dir, ticket_id, **kwargs_any)

    return _make

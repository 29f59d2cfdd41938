"""Shell completion callbacks for the tk CLI."""

from __future__ import annotations

from typing import Any

from ticket.constants import TICKET_TYPES
from ticket.models import Status

from ._helpers import get_store

# Return (value, help_text) tuples so Typer generates "value":"description"
# pairs in the zsh completion output.


def complete_ticket_ids(
    ctx: Any,
    args: list[str],  # noqa: ARG001 (always [] from Typer, kept for signature compat)
    incomplete: str,
) -> list[tuple[str, str]]:
    """Complete ticket IDs from the store."""
    params: dict[str, object] = getattr(ctx, "params", None) or {}
    tickets_dir = params.get("tickets_dir")
    try:
        store = get_store(tickets_dir if isinstance(tickets_dir, str) else None)
        return sorted(
            (t.id, t.title) for t in store.load_all() if incomplete in t.id
        )
    except Exception:
        return []


def complete_statuses(incomplete: str) -> list[tuple[str, str]]:
    """Complete status values the state machine accepts."""
    return [(s.value, "") for s in Status if s.value.startswith(incomplete)]


def complete_types(incomplete: str) -> list[tuple[str, str]]:
    """Complete ticket types."""
    return [(t, "") for t in TICKET_TYPES if t.startswith(incomplete)]

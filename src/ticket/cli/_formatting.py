"""Display and formatting functions for the tk CLI."""

from __future__ import annotations

from typing import TYPE_CHECKING

import typer

from ticket.constants import PRIORITY_COLORS, STATUS_COLORS

if TYPE_CHECKING:
    from ticket.deps import TreeNode
    from ticket.models import Ticket


def _status_str(status: str) -> str:
    return typer.style(f"[{status}]", fg=STATUS_COLORS.get(status, "white"))


def format_ticket_brief(ticket: Ticket) -> str:
    """Format a ticket as ``<id> [P<n>][<status>] - <title>``."""
    priority_color = PRIORITY_COLORS.get(ticket.priority, "white")
    priority_str = typer.style(f"[P{ticket.priority}]", fg=priority_color, bold=True)
    return f"{ticket.id} {priority_str}{_status_str(ticket.status)} - {ticket.title}"


def format_ticket_line(ticket: Ticket) -> str:
    """Brief format plus the ticket's deps, as used by ``ls``."""
    line = format_ticket_brief(ticket)
    if ticket.deps:
        line += typer.style(f" <- [{', '.join(ticket.deps)}]", fg="bright_black")
    return line


def format_blocked(ticket: Ticket, unmet_deps: list[str]) -> str:
    """Brief format plus the deps still blocking the ticket."""
    blockers = typer.style(f" <- [{', '.join(unmet_deps)}]", fg="red")
    return f"{format_ticket_brief(ticket)}{blockers}"


def closed_date(ticket: Ticket) -> str:
    """Date part of ``closed_at``, or the raw value when it cannot be parsed."""
    parsed = ticket.closed_at_time
    if parsed is not None:
        return parsed.strftime("%Y-%m-%d")
    return ticket.closed_at or "unknown"


def format_closed(ticket: Ticket) -> str:
    """Format a closed ticket with its close date."""
    when = typer.style(f" (closed {closed_date(ticket)})", fg="bright_black")
    return f"{ticket.id} {_status_str(ticket.status)} - {ticket.title}{when}"


def format_prune_line(ticket: Ticket) -> str:
    """Format one pruned ticket as ``<id>: <title> (closed <date>)``."""
    return f"{ticket.id}: {ticket.title} (closed {closed_date(ticket)})"


def _tree_label(node: TreeNode) -> str:
    if node.ticket is None:
        label = f"{node.ticket_id} " + typer.style("[missing]", fg="bright_black")
    else:
        ticket = node.ticket
        label = f"{ticket.id} {_status_str(ticket.status)} {ticket.title}"
    if node.cycle:
        label += typer.style(" (cycle)", fg="red")
    elif node.elided:
        label += typer.style(" (...)", fg="bright_black")
    return label


def render_tree(root: TreeNode) -> list[str]:
    """Render a dependency tree with box-drawing connectors."""
    lines = [_tree_label(root)]
    stack: list[tuple[TreeNode, str, bool]] = [
        (child, "", idx == len(root.children) - 1)
        for idx, child in reversed(list(enumerate(root.children)))
    ]
    while stack:
        node, indent, last = stack.pop()
        connector = "└── " if last else "├── "
        lines.append(f"{indent}{connector}{_tree_label(node)}")
        child_indent = indent + ("    " if last else "│   ")
        stack.extend(
            (child, child_indent, idx == len(node.children) - 1)
            for idx, child in reversed(list(enumerate(node.children)))
        )
    return lines

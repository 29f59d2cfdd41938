"""Dependency graph over a snapshot of all tickets."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from collections.abc import Iterable, Iterator

    from ticket.models import Ticket
    from ticket.storage import TicketStore


@dataclass
class BlockedTicket:
    """An active ticket with at least one unmet dependency."""

    ticket: Ticket
    unmet_deps: list[str]

    @property
    def ticket_id(self) -> str:
        """ID of the blocked ticket."""
        return self.ticket.id


@dataclass
class TreeNode:
    """One node of a dependency tree.

    ``cycle`` marks a dependency that points back at one of its own
    ancestors; ``elided`` marks a subtree already shown elsewhere in the
    tree.  Neither kind of node has children.
    """

    ticket_id: str
    ticket: Ticket | None = None
    children: list[TreeNode] = field(default_factory=list["TreeNode"])
    cycle: bool = False
    elided: bool = False


class DependencyGraph:
    """Graph built from the ``deps``, ``links`` and ``parent`` fields.

    Built once from a single :meth:`TicketStore.load_all` snapshot; every
    query afterwards is in-memory.  References to tickets that are not in
    the snapshot are allowed and treated as already satisfied.
    """

    def __init__(self, tickets: Iterable[Ticket]) -> None:
        self.tickets: dict[str, Ticket] = {}
        self._dependents: dict[str, list[str]] = {}
        self._children: dict[str, list[str]] = {}
        self._linked: dict[str, list[str]] = {}

        for ticket in tickets:
            self.tickets[ticket.id] = ticket
        for ticket in self.tickets.values():
            for dep_id in ticket.deps:
                self._dependents.setdefault(dep_id, []).append(ticket.id)
            if ticket.parent:
                self._children.setdefault(ticket.parent, []).append(ticket.id)
            for other in ticket.links:
                self._add_link(ticket.id, other)
                self._add_link(other, ticket.id)

    def _add_link(self, source: str, target: str) -> None:
        linked = self._linked.setdefault(source, [])
        if target not in linked:
            linked.append(target)

    @classmethod
    def from_store(cls, store: TicketStore) -> DependencyGraph:
        """Build a graph from one bulk scan of the store."""
        return cls(store.load_all())

    def __len__(self) -> int:
        return len(self.tickets)

    def __iter__(self) -> Iterator[Ticket]:
        return iter(self.tickets.values())

    def get(self, ticket_id: str) -> Ticket | None:
        """Get a ticket from the snapshot."""
        return self.tickets.get(ticket_id)

    # -- Readiness -------------------------------------------------------

    def is_met(self, dep_id: str) -> bool:
        """A dependency is met when it is closed or no longer exists."""
        dep = self.tickets.get(dep_id)
        return dep is None or dep.is_closed()

    def unmet_deps(self, ticket: Ticket) -> list[str]:
        """Dependencies of a ticket that still block it, in deps order."""
        return [dep_id for dep_id in ticket.deps if not self.is_met(dep_id)]

    def is_ready(self, ticket: Ticket) -> bool:
        """Active with nothing blocking it."""
        return ticket.is_active() and not self.unmet_deps(ticket)

    def ready(self) -> list[Ticket]:
        """All ready tickets, in snapshot order."""
        return [t for t in self.tickets.values() if self.is_ready(t)]

    def blocked(self) -> list[BlockedTicket]:
        """All active tickets with unmet dependencies, in snapshot order."""
        result: list[BlockedTicket] = []
        for ticket in self.tickets.values():
            if not ticket.is_active():
                continue
            unmet = self.unmet_deps(ticket)
            if unmet:
                result.append(BlockedTicket(ticket=ticket, unmet_deps=unmet))
        return result

    # -- Reachability ----------------------------------------------------

    def protected_ids(self) -> set[str]:
        """IDs reachable through ``deps`` from any active ticket.

        Active tickets themselves are included.  The walk uses an explicit
        stack and a visited set, so cyclic deps terminate and long chains
        never hit the recursion limit.  ``parent`` references are not
        followed.
        """
        stack = [t.id for t in self.tickets.values() if t.is_active()]
        visited: set[str] = set()
        while stack:
            node = stack.pop()
            if node in visited:
                continue
            visited.add(node)
            ticket = self.tickets.get(node)
            if ticket is not None:
                stack.extend(d for d in ticket.deps if d not in visited)
        return visited

    def dependents(self, ticket_id: str) -> list[Ticket]:
        """Tickets that list this one in their deps."""
        return [self.tickets[i] for i in self._dependents.get(ticket_id, [])]

    def children(self, ticket_id: str) -> list[Ticket]:
        """Tickets whose parent is this one."""
        return [self.tickets[i] for i in self._children.get(ticket_id, [])]

    def linked(self, ticket_id: str) -> list[str]:
        """IDs linked to this ticket from either side."""
        return list(self._linked.get(ticket_id, []))

    def find_cycles(self, active_only: bool = True) -> list[list[str]]:
        """Find dependency cycles using an iterative DFS.

        Args:
            active_only: Only walk open/in-progress tickets

        Returns:
            Cycles as ID lists that start and end with the same ID, each
            reported once and rotated so its smallest ID comes first
        """

        def _walkable(ticket_id: str) -> bool:
            ticket = self.tickets.get(ticket_id)
            return ticket is not None and (not active_only or ticket.is_active())

        on_path: set[str] = set()
        done: set[str] = set()
        seen: set[tuple[str, ...]] = set()
        cycles: list[list[str]] = []

        for root in sorted(self.tickets):
            if root in done or not _walkable(root):
                continue
            path = [root]
            on_path.add(root)
            stack = [iter(self.tickets[root].deps)]
            while stack:
                nxt = next(stack[-1], None)
                if nxt is None:
                    stack.pop()
                    finished = path.pop()
                    on_path.discard(finished)
                    done.add(finished)
                    continue
                if not _walkable(nxt) or nxt in done:
                    continue
                if nxt in on_path:
                    cycle = path[path.index(nxt) :]
                    start = cycle.index(min(cycle))
                    rotated = cycle[start:] + cycle[:start]
                    key = tuple(rotated)
                    if key not in seen:
                        seen.add(key)
                        cycles.append([*rotated, rotated[0]])
                    continue
                path.append(nxt)
                on_path.add(nxt)
                stack.append(iter(self.tickets[nxt].deps))

        return cycles

    def dependency_tree(self, root_id: str, full: bool = False) -> TreeNode:
        """Build the dependency tree rooted at a ticket.

        Nodes are expanded in display order (depth-first, deps in file
        order), so the first occurrence of a subtree is the one shown.

        Args:
            root_id: ID of the root ticket
            full: Expand every occurrence of a subtree instead of only the
                first one

        Returns:
            The root node
        """
        root = TreeNode(ticket_id=root_id, ticket=self.tickets.get(root_id))
        expanded: set[str] = set()
        stack: list[tuple[TreeNode, frozenset[str]]] = [(root, frozenset())]
        while stack:
            node, ancestors = stack.pop()
            if node.ticket is None:
                continue
            if node.ticket_id in ancestors:
                node.cycle = True
                continue
            if not full and node.ticket_id in expanded:
                node.elided = bool(node.ticket.deps)
                continue
            expanded.add(node.ticket_id)
            node.children = [
                TreeNode(ticket_id=dep_id, ticket=self.tickets.get(dep_id))
                for dep_id in node.ticket.deps
            ]
            path = ancestors | {node.ticket_id}
            stack.extend((child, path) for child in reversed(node.children))
        return root

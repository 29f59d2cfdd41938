"""Tests for dep, undep, link and unlink commands."""

import json
from collections.abc import Callable
from pathlib import Path

from cli_test_helpers import invoke

from ticket.storage import TicketStore


class TestDep:
    """Test dependency commands."""

    def test_add_dep(
        self,
        tickets_dir: Path,
        make_ticket: Callable[..., Path],
    ) -> None:
        """Test adding a dependency with partial IDs."""
        make_ticket("p-aaa1")
        make_ticket("p-bbb2")
        result = invoke(tickets_dir, "dep", "aaa1", "bbb2")
        assert result.exit_code == 0
        assert "p-aaa1 -> p-bbb2" in result.stdout
        assert TicketStore(tickets_dir).get("p-aaa1").deps == ["p-bbb2"]

    def test_add_dep_unknown(
        self,
        tickets_dir: Path,
        make_ticket: Callable[..., Path],
    ) -> None:
        """Test a missing dependency target exits 1."""
        make_ticket("p-aaa1")
        result = invoke(tickets_dir, "dep", "p-aaa1", "p-zzz9")
        assert result.exit_code == 1
        assert "not found" in result.output

    def test_missing_argument(
        self,
        tickets_dir: Path,
        make_ticket: Callable[..., Path],
    ) -> None:
        """Test dep with a single ticket ID exits 1."""
        make_ticket("p-aaa1")
        assert invoke(tickets_dir, "dep", "p-aaa1").exit_code == 1

    def test_undep(
        self,
        tickets_dir: Path,
        make_ticket: Callable[..., Path],
    ) -> None:
        """Test removing a dependency."""
        make_ticket("p-aaa1", deps=["p-bbb2"])
        make_ticket("p-bbb2")
        result = invoke(tickets_dir, "undep", "p-aaa1", "p-bbb2")
        assert result.exit_code == 0
        assert TicketStore(tickets_dir).get("p-aaa1").deps == []

    def test_undep_absent(
        self,
        tickets_dir: Path,
        make_ticket: Callable[..., Path],
    ) -> None:
        """Test removing a dependency that is not there exits 1."""
        make_ticket("p-aaa1")
        make_ticket("p-bbb2")
        assert invoke(tickets_dir, "undep", "p-aaa1", "p-bbb2").exit_code == 1

    def test_tree(
        self,
        tickets_dir: Path,
        make_ticket: Callable[..., Path],
    ) -> None:
        """Test the dependency tree rendering."""
        make_ticket("p-a", deps=["p-b", "p-c"], title="Root")
        make_ticket("p-b", deps=["p-d"], title="Bee")
        make_ticket("p-c", status="closed", title="Sea")
        make_ticket("p-d", title="Dee")
        result = invoke(tickets_dir, "dep", "tree", "p-a")
        assert result.exit_code == 0
        assert result.stdout.splitlines() == [
            "p-a [open] Root",
            "├── p-b [open] Bee",
            "│   └── p-d [open] Dee",
            "└── p-c [closed] Sea",
        ]

    def test_tree_json(
        self,
        tickets_dir: Path,
        make_ticket: Callable[..., Path],
    ) -> None:
        """Test the tree as nested JSON."""
        make_ticket("p-a", deps=["p-b"])
        make_ticket("p-b", deps=["p-a"])
        result = invoke(tickets_dir, "dep", "tree", "p-a", "--json")
        data = json.loads(result.stdout)
        assert data["id"] == "p-a"
        assert data["deps"][0]["id"] == "p-b"
        assert data["deps"][0]["deps"][0]["cycle"] is True

    def test_tree_unknown(self, tickets_dir: Path) -> None:
        """Test a tree for an unknown ticket exits 1."""
        assert invoke(tickets_dir, "dep", "tree", "nope").exit_code == 1

    def test_cycle(
        self,
        tickets_dir: Path,
        make_ticket: Callable[..., Path],
    ) -> None:
        """Test cycle reporting."""
        make_ticket("p-a", deps=["p-b"])
        make_ticket("p-b", deps=["p-a"])
        make_ticket("p-c")
        result = invoke(tickets_dir, "dep", "cycle")
        assert result.exit_code == 0
        assert result.stdout.splitlines() == ["p-a -> p-b -> p-a"]

    def test_no_cycles(
        self,
        tickets_dir: Path,
        make_ticket: Callable[..., Path],
    ) -> None:
        """Test no cycles means no output."""
        make_ticket("p-a")
        result = invoke(tickets_dir, "dep", "cycle")
        assert result.exit_code == 0
        assert result.output == ""


class TestLink:
    """Test link commands."""

    def test_link_and_unlink(
        self,
        tickets_dir: Path,
        make_ticket: Callable[..., Path],
    ) -> None:
        """Test linking is symmetric and unlinking removes both sides."""
        make_ticket("p-aaa1")
        make_ticket("p-bbb2")
        result = invoke(tickets_dir, "link", "p-aaa1", "p-bbb2")
        assert result.exit_code == 0
        store = TicketStore(tickets_dir)
        assert store.get("p-aaa1").links == ["p-bbb2"]
        assert store.get("p-bbb2").links == ["p-aaa1"]

        result = invoke(tickets_dir, "unlink", "p-bbb2", "p-aaa1")
        assert result.exit_code == 0
        assert store.get("p-aaa1").links == []
        assert store.get("p-bbb2").links == []

    def test_link_single(
        self,
        tickets_dir: Path,
        make_ticket: Callable[..., Path],
    ) -> None:
        """Test linking needs two tickets."""
        make_ticket("p-aaa1")
        assert invoke(tickets_dir, "link", "p-aaa1").exit_code == 1

    def test_unlink_not_linked(
        self,
        tickets_dir: Path,
        make_ticket: Callable[..., Path],
    ) -> None:
        """Test unlinking unrelated tickets exits 1."""
        make_ticket("p-aaa1")
        make_ticket("p-bbb2")
        assert invoke(tickets_dir, "unlink", "p-aaa1", "p-bbb2").exit_code == 1

"""Shared infrastructure for tk CLI commands."""

from __future__ import annotations

import functools
import getpass
import subprocess
from pathlib import Path
from typing import TYPE_CHECKING

import typer
from typer.core import TyperGroup

from ticket.config import find_tickets_dir, get_setting
from ticket.plugins import ExternalCommand, find_command, run_command
from ticket.storage import TicketStore

if TYPE_CHECKING:
    from typer.core import TyperCommand

# Typer runs on click or on its own bundled copy of it, depending on the
# release; BadParameter always comes from whichever one is in use.
_UsageError: type[Exception] = typer.BadParameter.__bases__[0]


def _external_command(external: ExternalCommand) -> TyperCommand:
    """Wrap an external ``tk-<name>`` executable as a command."""
    wrapper = typer.Typer(add_completion=False)

    @wrapper.command(
        name=external.name,
        help=f"External command ({external.path})",
        add_help_option=False,
        context_settings={"ignore_unknown_options": True, "allow_extra_args": True},
    )
    def _run(ctx: typer.Context) -> None:
        code = run_command(external, list(ctx.args), find_tickets_dir())
        raise typer.Exit(code)

    return typer.main.get_command(wrapper)  # type: ignore[return-value]


class TicketGroup(TyperGroup):
    """Typer group that sorts commands and falls back to external commands."""

    def list_commands(self, ctx: typer.Context) -> list[str]:
        """Return commands sorted alphabetically."""
        return sorted(super().list_commands(ctx))

    def get_command(self, ctx: typer.Context, cmd_name: str) -> TyperCommand | None:
        """Return a built-in command, else a ``tk-<name>`` on PATH, else None."""
        command = super().get_command(ctx, cmd_name)
        if command is not None:
            return command  # type: ignore[return-value]
        external = find_command(cmd_name)
        if external is None:
            return None
        return _external_command(external)

    def invoke(self, ctx: typer.Context) -> object:
        """Invoke the subcommand, exiting 1 (not 2) on its usage errors."""
        try:
            return super().invoke(ctx)
        except _UsageError as e:
            e.exit_code = 1  # type: ignore[attr-defined]
            raise


class SortedGroup(TyperGroup):
    """Typer group that lists commands in alphabetical order."""

    def list_commands(self, ctx: typer.Context) -> list[str]:
        """Return commands sorted alphabetically."""
        return sorted(super().list_commands(ctx))


def get_store(tickets_dir: str | None = None) -> TicketStore:
    """Get the store for an explicit directory, or the discovered one.

    Args:
        tickets_dir: Explicit tickets directory; when None, ``TICKETS_DIR``
            and an upward search for ``.tickets`` decide.
    """
    if tickets_dir:
        return TicketStore(Path(tickets_dir))
    return TicketStore(find_tickets_dir())


@functools.lru_cache(maxsize=1)
def _git_user_name() -> str:
    try:
        result = subprocess.run(
            ["git", "config", "user.name"],
            capture_output=True,
            text=True,
            check=False,
        )
        if result.returncode == 0 and result.stdout.strip():
            return result.stdout.strip()
    except (FileNotFoundError, OSError):
        # git not installed or other OS error
        pass

    return getpass.getuser()


def get_default_assignee(store: TicketStore) -> str:
    """Get the assignee for new tickets.

    Uses ``default_assignee`` from config, then git's user.name, then the
    machine username.
    """
    configured = get_setting(store.tickets_dir, "default_assignee")
    if configured:
        return str(configured)
    return _git_user_name()


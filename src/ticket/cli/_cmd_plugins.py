"""External command listing and version for the tk CLI."""

from __future__ import annotations

import typer

from ticket.plugins import discover_commands

from ._json_state import echo_json, is_json_output


def register(app: typer.Typer) -> None:
    """Register plugins and version commands."""

    @app.command()
    def version() -> None:
        """Show the tk version."""
        from ticket._version import version as v

        typer.echo(v)

    @app.command()
    def plugins(
        json_output: bool = typer.Option(False, "--json", help="Output as JSON"),
    ) -> None:
        """List external tk-<name> commands found on PATH."""
        commands = discover_commands()
        builtins = _builtin_names(app)

        if is_json_output(json_output):
            echo_json(
                [
                    {
                        "name": c.name,
                        "path": str(c.path),
                        "shadowed": c.name in builtins,
                    }
                    for _, c in sorted(commands.items())
                ],
            )
            return

        for name, command in sorted(commands.items()):
            note = typer.style(" (shadowed by built-in)", fg="yellow")
            typer.echo(f"{name}\t{command.path}{note if name in builtins else ''}")


def _builtin_names(app: typer.Typer) -> set[str]:
    names = {
        c.name or (c.callback.__name__.replace("_", "-") if c.callback else "")
        for c in app.registered_commands
    }
    names.update(g.name for g in app.registered_groups if g.name)
    return names

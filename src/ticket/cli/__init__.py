"""tk CLI commands for plain-text ticket tracking."""

from __future__ import annotations

import typer

from ._helpers import TicketGroup

app = typer.Typer(
    help="tk - minimal ticket tracking in plain-text files, "
    "with dependencies kept next to your code",
    no_args_is_help=True,
    cls=TicketGroup,
)


@app.callback(invoke_without_command=True)
def _global_options(
    ctx: typer.Context,
    json_output: bool = typer.Option(
        False,
        "--json",
        help="Output as JSON for all commands",
    ),
) -> None:
    from ._json_state import set_json_flag

    set_json_flag(json_output)
    if ctx.invoked_subcommand is None:
        typer.echo(ctx.get_help())
        raise typer.Exit(0)


from . import (  # noqa: E402
    _cmd_config,
    _cmd_create,
    _cmd_dep,
    _cmd_maintenance,
    _cmd_note,
    _cmd_plugins,
    _cmd_read,
    _cmd_status,
    _cmd_workflow,
)

for _mod in (
    _cmd_config,
    _cmd_create,
    _cmd_dep,
    _cmd_maintenance,
    _cmd_note,
    _cmd_plugins,
    _cmd_read,
    _cmd_status,
    _cmd_workflow,
):
    _mod.register(app)


def main() -> None:
    """Run the tk CLI application."""
    app()

"""Configuration management commands for the tk CLI."""

from __future__ import annotations

from typing import Any

import typer

from ticket.config import KNOWN_KEYS, load_config, save_config
from ticket.constants import TICKET_TYPES
from ticket.errors import ValidationError
from ticket.models import validate_priority
from ticket.prune import validate_days

from ._helpers import SortedGroup, get_store
from ._json_state import echo_error, echo_json, is_json_output

# Sub-app for 'tk config' subcommands
config_app = typer.Typer(
    help="Manage tk configuration.",
    no_args_is_help=True,
    cls=SortedGroup,
)


def _complete_config_keys(incomplete: str) -> list[tuple[str, str]]:
    return [
        (key, info["description"])
        for key, info in KNOWN_KEYS.items()
        if key.startswith(incomplete)
    ]


def _coerce_value(key: str, value: str) -> Any:
    """Coerce a string value to the appropriate type for a known key."""
    if key == "default_priority":
        return validate_priority(value)
    if key == "prune_days":
        return validate_days(value)
    if key == "default_type" and value not in TICKET_TYPES:
        msg = f"Invalid type '{value}'. Must be one of: {', '.join(TICKET_TYPES)}"
        raise ValidationError(msg)
    return value


def register(app: typer.Typer) -> None:
    """Register config commands."""
    app.add_typer(config_app, name="config")

    @config_app.command("set")
    def config_set(
        key: str = typer.Argument(
            ...,
            help="Configuration key to set",
            autocompletion=_complete_config_keys,
        ),
        value: str = typer.Argument(..., help="Value to set"),
        tickets_dir: str | None = typer.Option(
            None,
            "--tickets-dir",
            help="Path to the tickets directory",
        ),
    ) -> None:
        """Set a configuration value."""
        try:
            coerced = _coerce_value(key, value)
        except ValidationError as e:
            echo_error(str(e))
            raise typer.Exit(1)

        store = get_store(tickets_dir)
        config = load_config(store.tickets_dir)
        config[key] = coerced
        save_config(store.tickets_dir, config)
        typer.echo(f"Set {key} = {coerced}")

    @config_app.command("get")
    def config_get(
        key: str = typer.Argument(
            ...,
            help="Configuration key to read",
            autocompletion=_complete_config_keys,
        ),
        json_output: bool = typer.Option(False, "--json", help="Output as JSON"),
        tickets_dir: str | None = typer.Option(
            None,
            "--tickets-dir",
            help="Path to the tickets directory",
        ),
    ) -> None:
        """Get a configuration value."""
        is_json_output(json_output)  # sync local flag for echo_error
        config = load_config(get_store(tickets_dir).tickets_dir)
        if key not in config:
            echo_error(f"Key '{key}' not found in config")
            raise typer.Exit(1)
        val = config[key]
        if is_json_output(json_output):
            echo_json({key: val})
        else:
            typer.echo(val)

    @config_app.command("list")
    def config_list(
        json_output: bool = typer.Option(False, "--json", help="Output as JSON"),
        tickets_dir: str | None = typer.Option(
            None,
            "--tickets-dir",
            help="Path to the tickets directory",
        ),
    ) -> None:
        """List all configuration values."""
        config = load_config(get_store(tickets_dir).tickets_dir)
        if is_json_output(json_output):
            echo_json(config)
        elif not config:
            typer.echo("No configuration values set.")
        else:
            for k, v in sorted(config.items()):
                typer.echo(f"{k} = {v}")

    @config_app.command("keys")
    def config_keys(
        json_output: bool = typer.Option(False, "--json", help="Output as JSON"),
    ) -> None:
        """List all available configuration keys and their descriptions."""
        if is_json_output(json_output):
            echo_json(KNOWN_KEYS)
            return

        from rich import box
        from rich.console import Console
        from rich.table import Table

        table = Table(
            show_header=True,
            header_style="bold",
            box=box.ROUNDED,
            pad_edge=False,
            show_edge=False,
        )
        table.add_column("Key", no_wrap=True)
        table.add_column("Type", no_wrap=True)
        table.add_column("Default", no_wrap=True)
        table.add_column("Description", overflow="fold")

        for key, info in KNOWN_KEYS.items():
            table.add_row(key, info["type"], str(info["default"]), info["description"])

        Console().print(table)

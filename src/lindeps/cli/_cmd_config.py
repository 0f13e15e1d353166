"""Configuration management commands for lindeps CLI."""

from __future__ import annotations

from typing import Any

import typer

from lindeps.config import (
    KNOWN_KEYS,
    get_config_path,
    load_config,
    mask_secret,
    save_config,
)

from ._helpers import SortedGroup
from ._json_state import echo_error, echo_json, is_json_output

# Sub-app for 'lindeps config' subcommands
config_app = typer.Typer(
    help="Manage lindeps configuration.",
    no_args_is_help=True,
    cls=SortedGroup,
)

# Keys whose values are never printed in full
_SECRET_KEYS = frozenset({"api_key"})


def _display_value(key: str, value: Any) -> Any:
    if key in _SECRET_KEYS and isinstance(value, str):
        return mask_secret(value)
    return value


def register(app: typer.Typer) -> None:
    """Register config commands."""
    app.add_typer(config_app, name="config")

    @config_app.command("set")
    def config_set(
        key: str = typer.Argument(..., help="Configuration key to set"),
        value: str = typer.Argument(..., help="Value to set"),
    ) -> None:
        """Set a configuration value."""
        if key not in KNOWN_KEYS:
            echo_error(
                f"Unknown config key '{key}'. "
                f"Known keys: {', '.join(sorted(KNOWN_KEYS))}",
            )
            raise typer.Exit(1)

        config = load_config()
        config[key] = value
        save_config(config)
        typer.echo(f"Set {key} = {_display_value(key, value)}")

    @config_app.command("get")
    def config_get(
        key: str = typer.Argument(..., help="Configuration key to read"),
        json_output: bool = typer.Option(False, "--json", help="Output as JSON"),
    ) -> None:
        """Get a configuration value."""
        is_json_output(json_output)  # sync local flag for echo_error
        config = load_config()
        if key not in config:
            echo_error(f"Key '{key}' not found in config")
            raise typer.Exit(1)
        val = _display_value(key, config[key])
        if is_json_output(json_output):
            echo_json({key: val})
        else:
            typer.echo(val)

    @config_app.command("list")
    def config_list(
        json_output: bool = typer.Option(False, "--json", help="Output as JSON"),
    ) -> None:
        """List all configuration values."""
        config = {k: _display_value(k, v) for k, v in load_config().items()}
        if is_json_output(json_output):
            echo_json(config, indent=True)
        elif not config:
            typer.echo(f"No configuration values set ({get_config_path()}).")
        else:
            for k, v in sorted(config.items()):
                typer.echo(f"{k} = {v}")

    @config_app.command("keys")
    def config_keys(
        json_output: bool = typer.Option(False, "--json", help="Output as JSON"),
    ) -> None:
        """List all available configuration keys and their descriptions."""
        if is_json_output(json_output):
            echo_json(KNOWN_KEYS, indent=True)
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
        table.add_column("Description", overflow="fold")

        for key, description in KNOWN_KEYS.items():
            table.add_row(key, description)

        Console().print(table)

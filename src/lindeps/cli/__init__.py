"""lindeps CLI commands for Linear issue dependencies."""

from __future__ import annotations

import logging

import typer

from ._helpers import SortedGroup

app = typer.Typer(
    help="lindeps - visualize Linear issue dependencies and find cycles",
    no_args_is_help=True,
    cls=SortedGroup,
)


@app.callback(invoke_without_command=True)
def _global_options(
    ctx: typer.Context,
    json_output: bool = typer.Option(
        False,
        "--json",
        help="Output as JSON for all commands",
    ),
    verbose: bool = typer.Option(
        False,
        "--verbose",
        "-v",
        help="Log API requests to stderr",
    ),
) -> None:
    from ._json_state import set_json_flag

    set_json_flag(json_output)
    if verbose:
        logging.basicConfig(
            level=logging.DEBUG,
            format="%(levelname)s %(name)s: %(message)s",
        )
    if ctx.invoked_subcommand is None:
        typer.echo(ctx.get_help())
        raise typer.Exit(0)


from . import _cmd_config, _cmd_deps  # noqa: E402

for _mod in (_cmd_config, _cmd_deps):
    _mod.register(app)


def main() -> None:
    """Run the lindeps CLI application."""
    app()

"""JSON output mode and stderr messaging shared by lindeps commands."""

from __future__ import annotations

import sys
from typing import Any

import orjson
import typer

_json_mode: bool = False


def set_json_flag(value: bool) -> None:
    """Set JSON mode from the global ``--json`` option."""
    global _json_mode  # noqa: PLW0603
    _json_mode = value


def is_json_output(local_flag: bool = False) -> bool:
    """Return whether this invocation prints JSON.

    A per-command ``--json`` switches JSON mode on for the rest of the run,
    so later errors and warnings come out as JSON too.
    """
    if local_flag:
        set_json_flag(True)
    return _json_mode


def echo_json(payload: Any, *, indent: bool = False) -> None:
    """Write *payload* to stdout as one JSON document."""
    option = orjson.OPT_INDENT_2 if indent else 0
    typer.echo(orjson.dumps(payload, option=option).decode())


def _echo_stderr(kind: str, message: str) -> None:
    if _json_mode:
        sys.stderr.write(orjson.dumps({kind: message}).decode() + "\n")
    else:
        typer.echo(f"{kind.capitalize()}: {message}", err=True)


def echo_error(message: str) -> None:
    """Report an error: ``Error: ...`` or ``{"error": ...}`` on stderr."""
    _echo_stderr("error", message)


def echo_warning(message: str) -> None:
    """Report a non-fatal problem: ``Warning: ...`` or ``{"warning": ...}``."""
    _echo_stderr("warning", message)

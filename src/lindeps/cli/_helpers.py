"""Shared infrastructure for lindeps CLI commands."""

from __future__ import annotations

from typing import TYPE_CHECKING

from typer.core import TyperGroup

from lindeps.client import LinearClient
from lindeps.config import API_KEY_ENV, get_api_key, get_api_url

if TYPE_CHECKING:
    import click


class SortedGroup(TyperGroup):
    """Typer group that lists commands in alphabetical order."""

    def list_commands(self, ctx: click.Context) -> list[str]:
        """Return commands sorted alphabetically."""
        return sorted(super().list_commands(ctx))


def get_client() -> LinearClient:
    """Create a Linear client from the environment and config file.

    Raises:
        ValueError: If no API key is configured
    """
    api_key = get_api_key()
    if not api_key:
        msg = (
            f"no Linear API key configured; set {API_KEY_ENV} "
            "or run 'lindeps config set api_key <key>'"
        )
        raise ValueError(msg)
    return LinearClient(api_key, base_url=get_api_url())

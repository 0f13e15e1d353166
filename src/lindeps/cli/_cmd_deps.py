"""Dependency graph visualization command for lindeps CLI."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any

import typer

from lindeps.config import get_default_team
from lindeps.graph import TEAM_ISSUE_LIMIT, build_issue_graph, build_team_graph
from lindeps.render import (
    CYCLE_WARNING,
    graph_to_dict,
    render_issue_graph,
    render_team_graph,
)

from ._helpers import get_client
from ._json_state import echo_error, echo_json, echo_warning, is_json_output

if TYPE_CHECKING:
    from lindeps.client import LinearClient

logger = logging.getLogger(__name__)

USAGE_ERROR = "provide an issue ID or use --team to show team dependencies"
IGNORED_SCOPE_WARNING = "--team/--project ignored when an issue ID is given"


def _echo_graph(text: str) -> None:
    """Print rendered graph text, highlighting the cycle warning."""
    styled = typer.style(CYCLE_WARNING, fg="yellow", bold=True)
    typer.echo(text.replace(CYCLE_WARNING, styled))


def _show_issue_deps(client: LinearClient, issue_id: str, json_output: bool) -> None:
    """Render the dependencies of a single issue."""
    try:
        issue = client.get_issue_with_relations(issue_id)
    except Exception as e:
        echo_error(f"failed to get issue: {e}")
        raise typer.Exit(1) from e

    graph = build_issue_graph(issue)

    if is_json_output(json_output):
        echo_json(graph_to_dict(graph, issue.identifier))
        return

    _echo_graph(render_issue_graph(graph, issue.identifier))


def _show_team_deps(
    client: LinearClient,
    team: str,
    project: str | None,
    json_output: bool,
) -> None:
    """Render every dependency tree of a team, optionally for one project."""
    try:
        team_id = client.resolve_team(team)
    except Exception as e:
        echo_error(f"failed to resolve team '{team}': {e}")
        raise typer.Exit(1) from e

    try:
        issues = client.get_team_issues_with_relations(team_id, TEAM_ISSUE_LIMIT)
    except Exception as e:
        echo_error(f"failed to get team issues: {e}")
        raise typer.Exit(1) from e

    project_id: str | None = None
    if project:
        try:
            project_id = client.resolve_project(project, team_id)
        except Exception as e:
            echo_error(f"failed to resolve project '{project}': {e}")
            raise typer.Exit(1) from e
        logger.debug("Resolved project %r to %s", project, project_id)

    graph = build_team_graph(issues, project_id)

    scope: dict[str, Any] = {"team": team}
    if project:
        scope["project"] = project

    if not graph.edges:
        message = f"No dependencies found for team {team}"
        if is_json_output(json_output):
            echo_json({**scope, "message": message})
        else:
            typer.echo(message)
        return

    if is_json_output(json_output):
        echo_json({**graph_to_dict(graph), **scope})
        return

    _echo_graph(render_team_graph(graph, team, project))


def register(app: typer.Typer) -> None:
    """Register the deps command."""

    @app.command()
    def deps(
        issue_id: str | None = typer.Argument(
            None,
            help="Issue ID to show dependencies for (e.g. ENG-100)",
        ),
        team: str | None = typer.Option(
            None,
            "--team",
            "-t",
            help="Team key or name (defaults to 'default_team' from config)",
        ),
        project: str | None = typer.Option(
            None,
            "--project",
            "-P",
            help="Filter by project (name or UUID); requires a team",
        ),
        json_output: bool = typer.Option(False, "--json", help="Output as JSON"),
    ) -> None:
        """Show issue dependencies as an ASCII tree.

        Each issue shows what it blocks (→) and what blocks it (←).
        Circular dependencies are detected and reported.
        """
        is_json_output(json_output)  # sync local flag for echo_error
        if issue_id and (team or project):
            echo_warning(IGNORED_SCOPE_WARNING)
        elif not issue_id:
            team = team or get_default_team()
            if not team:
                echo_error(USAGE_ERROR)
                raise typer.Exit(1)

        try:
            with get_client() as client:
                if issue_id:
                    _show_issue_deps(client, issue_id, json_output)
                elif team:
                    _show_team_deps(client, team, project, json_output)
        except typer.Exit:
            raise
        except Exception as e:
            echo_error(str(e))
            raise typer.Exit(1)

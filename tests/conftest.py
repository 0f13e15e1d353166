"""Pytest configuration and shared fixtures."""

from __future__ import annotations

from pathlib import Path

import pytest

from lindeps.cli._json_state import set_json_flag
from lindeps.graph import DepGraph
from lindeps.models import (
    DepNode,
    IssueRef,
    IssueRelation,
    IssueWithRelations,
    RelationType,
)


def ref(identifier: str, title: str = "", state: str = "Todo") -> IssueRef:
    """Create a minimal issue reference with a derived UUID-ish id."""
    return IssueRef(
        id=f"id-{identifier}",
        identifier=identifier,
        title=title or f"Title of {identifier}",
        state=state,
    )


def blocks(
    target: IssueRef,
    rel_type: RelationType | None = RelationType.BLOCKS,
) -> IssueRelation:
    """Outgoing relation: the owning issue blocks *target*."""
    return IssueRelation(
        id=f"rel-{target.identifier}",
        type=rel_type,
        related_issue=target,
    )


def blocked_by(
    blocker: IssueRef,
    rel_type: RelationType | None = RelationType.BLOCKS,
) -> IssueRelation:
    """Incoming relation: *blocker* blocks the owning issue."""
    return IssueRelation(
        id=f"inv-{blocker.identifier}",
        type=rel_type,
        issue=blocker,
    )


def make_issue(
    identifier: str,
    *,
    title: str = "",
    state: str = "Todo",
    project_id: str | None = None,
    relations: list[IssueRelation] | None = None,
    inverse_relations: list[IssueRelation] | None = None,
) -> IssueWithRelations:
    """Create an issue with relations for graph building tests."""
    return IssueWithRelations(
        id=f"id-{identifier}",
        identifier=identifier,
        title=title or f"Title of {identifier}",
        state=state,
        project_id=project_id,
        relations=relations or [],
        inverse_relations=inverse_relations or [],
    )


def node(identifier: str, state: str = "Todo") -> DepNode:
    """Create a graph node with a derived id and title."""
    return DepNode(
        id=f"id-{identifier}",
        identifier=identifier,
        title=f"Title of {identifier}",
        state=state,
    )


def graph_from_edges(
    edges: list[tuple[str, str]],
    isolated: list[str] | None = None,
) -> DepGraph:
    """Build a frozen graph from (blocker, blocked) pairs."""
    graph = DepGraph()
    for identifier in isolated or []:
        graph.add_node(node(identifier))
    for source, target in edges:
        graph.add_node(node(source))
        graph.add_node(node(target))
        graph.add_edge(source, target)
    return graph.freeze()


@pytest.fixture(autouse=True)
def isolated_config(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    """Point the config directory at a temp dir and clear the API key."""
    config_dir = tmp_path / "config"
    monkeypatch.setenv("LINDEPS_CONFIG_DIR", str(config_dir))
    monkeypatch.delenv("LINEAR_API_KEY", raising=False)
    return config_dir


@pytest.fixture(autouse=True)
def reset_json_flag() -> None:
    """Reset the global --json flag between tests."""
    set_json_flag(False)

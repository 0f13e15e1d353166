"""Dependency graph construction from Linear relation records."""

from __future__ import annotations

import logging
from collections.abc import Iterable, Mapping
from dataclasses import replace
from types import MappingProxyType
from typing import TYPE_CHECKING

from lindeps.models import DepEdge, DepNode

if TYPE_CHECKING:
    from lindeps.models import IssueRef, IssueWithRelations

logger = logging.getLogger(__name__)

# Maximum number of issues fetched for a team-wide graph
TEAM_ISSUE_LIMIT = 250


class DepGraph:
    """Directed "blocks" graph keyed by issue identifier.

    Built incrementally with :meth:`add_node` / :meth:`add_edge`, then frozen.
    After :meth:`freeze` the graph rejects further changes, ``nodes`` is a
    read-only mapping of frozen nodes and ``edges`` a tuple. Nodes and edges keep their
    insertion order, which makes every downstream algorithm deterministic.
    """

    def __init__(self) -> None:
        self._nodes: dict[str, DepNode] = {}
        self._edges: list[DepEdge] = []
        self._edge_keys: set[tuple[str, str]] = set()
        self._frozen = False

    @property
    def nodes(self) -> Mapping[str, DepNode]:
        return MappingProxyType(self._nodes)

    @property
    def edges(self) -> tuple[DepEdge, ...]:
        return tuple(self._edges)

    @property
    def frozen(self) -> bool:
        return self._frozen

    def __contains__(self, identifier: object) -> bool:
        return identifier in self._nodes

    def __len__(self) -> int:
        return len(self._nodes)

    def _check_mutable(self) -> None:
        if self._frozen:
            msg = "Dependency graph is frozen"
            raise RuntimeError(msg)

    def add_node(self, node: DepNode) -> DepNode:
        """Insert a node, keeping the first-seen record.

        If the identifier is already present the stored values win and only
        empty fields are filled in from *node*. Nodes are immutable, so a
        filled-in node replaces the stored one.

        Returns:
            The node stored in the graph
        """
        self._check_mutable()
        existing = self._nodes.get(node.identifier)
        if existing is None:
            self._nodes[node.identifier] = node
            return node

        merged = replace(
            existing,
            id=existing.id or node.id,
            title=existing.title or node.title,
            state=existing.state or node.state,
        )
        if merged != existing:
            self._nodes[node.identifier] = merged
        return self._nodes[node.identifier]

    def add_edge(self, source: str, target: str) -> None:
        """Record that *source* blocks *target*; duplicates are kept once."""
        self._check_mutable()
        key = (source, target)
        if key in self._edge_keys:
            return
        self._edge_keys.add(key)
        self._edges.append(DepEdge(source=source, target=target))

    def freeze(self) -> DepGraph:
        """Drop dangling edges and make the graph read-only.

        Returns:
            The graph itself, for chaining
        """
        kept: list[DepEdge] = []
        for edge in self._edges:
            if edge.source in self._nodes and edge.target in self._nodes:
                kept.append(edge)
            else:
                logger.debug(
                    "Dropping edge %s -> %s with missing endpoint",
                    edge.source,
                    edge.target,
                )
        self._edges = kept
        self._edge_keys = {(e.source, e.target) for e in kept}
        self._frozen = True
        return self

    def outgoing(self, identifier: str) -> list[str]:
        """Return identifiers blocked by *identifier*, in edge order."""
        return [e.target for e in self._edges if e.source == identifier]

    def incoming(self, identifier: str) -> list[str]:
        """Return identifiers blocking *identifier*, in edge order."""
        return [e.source for e in self._edges if e.target == identifier]

    def adjacency(self) -> dict[str, list[str]]:
        """Return blocker -> blocked adjacency lists in edge order."""
        adj: dict[str, list[str]] = {}
        for edge in self._edges:
            adj.setdefault(edge.source, []).append(edge.target)
        return adj


def _add_ref(graph: DepGraph, ref: IssueRef) -> None:
    graph.add_node(ref.to_node())


def build_issue_graph(issue: IssueWithRelations) -> DepGraph:
    """Build the graph of one issue and its direct "blocks" relations.

    Args:
        issue: The root issue with outgoing and incoming relations

    Returns:
        Frozen graph holding the root, every directly related issue, and one
        edge per relation oriented blocker -> blocked
    """
    graph = DepGraph()
    graph.add_node(issue.to_ref().to_node())

    # What this issue blocks
    for rel in issue.relations:
        if not rel.is_blocking or rel.related_issue is None:
            continue
        _add_ref(graph, rel.related_issue)
        graph.add_edge(issue.identifier, rel.related_issue.identifier)

    # What blocks this issue
    for rel in issue.inverse_relations:
        if not rel.is_blocking or rel.issue is None:
            continue
        _add_ref(graph, rel.issue)
        graph.add_edge(rel.issue.identifier, issue.identifier)

    return graph.freeze()


def in_scope(issue: IssueWithRelations, project_id: str | None) -> bool:
    """Check if an issue passes the optional project filter."""
    if project_id is None:
        return True
    return issue.project_id == project_id


def build_team_graph(
    issues: Iterable[IssueWithRelations],
    project_id: str | None = None,
) -> DepGraph:
    """Build the graph of a team's issues and the issues they block.

    Issues outside the project filter contribute no edges, but still appear
    as nodes when an in-scope issue blocks them.

    Args:
        issues: Team issues, each carrying its outgoing relations
        project_id: Optional resolved project UUID to restrict the scope

    Returns:
        Frozen dependency graph
    """
    graph = DepGraph()
    seen = 0
    for issue in issues:
        seen += 1
        if not in_scope(issue, project_id):
            continue

        graph.add_node(issue.to_ref().to_node())

        for rel in issue.relations:
            if not rel.is_blocking or rel.related_issue is None:
                continue
            _add_ref(graph, rel.related_issue)
            graph.add_edge(issue.identifier, rel.related_issue.identifier)

    logger.debug(
        "Built team graph from %d issues: %d nodes, %d edges",
        seen,
        len(graph),
        len(graph.edges),
    )
    return graph.freeze()

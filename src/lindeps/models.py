"""Data models for Linear issues and dependency graphs using dataclasses."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any


class RelationType(str, Enum):
    """Issue relation type enumeration."""

    BLOCKS = "blocks"
    DUPLICATE = "duplicate"
    RELATED = "related"
    SIMILAR = "similar"

    @classmethod
    def parse(cls, value: str | None) -> RelationType | None:
        """Return the matching relation type, or None for unknown values."""
        try:
            return cls(value)
        except ValueError:
            return None


@dataclass(frozen=True)
class DepNode:
    """An issue inside a dependency graph."""

    id: str  # Service-assigned UUID
    identifier: str  # Team-prefixed key (e.g., "ENG-100"), the graph key
    title: str = ""
    state: str = ""


@dataclass(frozen=True)
class DepEdge:
    """A directed "blocks" relation: *source* blocks *target*."""

    source: str
    target: str
    kind: RelationType = RelationType.BLOCKS


@dataclass
class IssueRef:
    """Minimal issue payload carried on both ends of a relation."""

    id: str
    identifier: str
    title: str = ""
    state: str = ""

    def to_node(self) -> DepNode:
        """Convert to a graph node."""
        return DepNode(
            id=self.id,
            identifier=self.identifier,
            title=self.title,
            state=self.state,
        )


@dataclass
class IssueRelation:
    """A relation between two issues as returned by the API.

    ``issue`` is the owning side and ``related_issue`` the other end. For a
    ``blocks`` relation, ``issue`` blocks ``related_issue``. Either end may be
    missing when the API returns a stub pointing outside the fetched scope.
    """

    id: str
    type: RelationType | None
    issue: IssueRef | None = None
    related_issue: IssueRef | None = None

    @property
    def is_blocking(self) -> bool:
        """Check if this relation is a "blocks" relation."""
        return self.type == RelationType.BLOCKS


@dataclass
class IssueWithRelations:
    """An issue together with its outgoing and incoming relations."""

    id: str
    identifier: str
    title: str = ""
    state: str = ""
    project_id: str | None = None
    project_name: str | None = None
    relations: list[IssueRelation] = field(default_factory=list[IssueRelation])
    inverse_relations: list[IssueRelation] = field(
        default_factory=list[IssueRelation],
    )

    def to_ref(self) -> IssueRef:
        """Return the minimal reference for this issue."""
        return IssueRef(
            id=self.id,
            identifier=self.identifier,
            title=self.title,
            state=self.state,
        )


@dataclass
class Team:
    """A Linear team."""

    id: str
    key: str
    name: str


@dataclass
class Project:
    """A Linear project."""

    id: str
    name: str


def _state_name(data: dict[str, Any]) -> str:
    state = data.get("state") or {}
    return str(state.get("name") or "")


def issue_ref_from_dict(data: dict[str, Any] | None) -> IssueRef | None:
    """Decode a minimal issue payload, or None if the payload is absent."""
    if not data or not data.get("identifier"):
        return None
    return IssueRef(
        id=str(data.get("id") or ""),
        identifier=str(data["identifier"]),
        title=str(data.get("title") or ""),
        state=_state_name(data),
    )


def relation_from_dict(data: dict[str, Any]) -> IssueRelation:
    """Decode one relation node from a GraphQL response."""
    return IssueRelation(
        id=str(data.get("id") or ""),
        type=RelationType.parse(data.get("type")),
        issue=issue_ref_from_dict(data.get("issue")),
        related_issue=issue_ref_from_dict(data.get("relatedIssue")),
    )


def issue_from_dict(data: dict[str, Any]) -> IssueWithRelations:
    """Decode an issue with relations from a GraphQL response.

    Args:
        data: The ``issue`` (or issue list node) JSON object

    Returns:
        IssueWithRelations instance
    """
    project = data.get("project") or {}
    relations = (data.get("relations") or {}).get("nodes") or []
    inverse = (data.get("inverseRelations") or {}).get("nodes") or []
    return IssueWithRelations(
        id=str(data.get("id") or ""),
        identifier=str(data["identifier"]),
        title=str(data.get("title") or ""),
        state=_state_name(data),
        project_id=project.get("id"),
        project_name=project.get("name"),
        relations=[relation_from_dict(r) for r in relations],
        inverse_relations=[relation_from_dict(r) for r in inverse],
    )


def node_to_dict(node: DepNode) -> dict[str, Any]:
    """Convert a graph node to a dictionary for JSON output."""
    return {
        "id": node.id,
        "identifier": node.identifier,
        "title": node.title,
        "state": node.state,
    }


def edge_to_dict(edge: DepEdge) -> dict[str, Any]:
    """Convert a graph edge to a dictionary for JSON output."""
    return {"from": edge.source, "to": edge.target, "type": edge.kind.value}

"""ASCII tree rendering of dependency graphs."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any

from lindeps.deps import detect_cycles
from lindeps.models import edge_to_dict, node_to_dict

if TYPE_CHECKING:
    from lindeps.graph import DepGraph

# Recursion ceiling for team trees, independent of the rendered set
MAX_DEPTH = 10

# Roots picked when every blocker is itself blocked (cycle-only scopes)
MAX_FALLBACK_ROOTS = 5

RULE_WIDTH = 50
ROOT_TITLE_WIDTH = 40
RELATION_TITLE_WIDTH = 30
TREE_TITLE_WIDTH = 35

BRANCH = "├─"
LAST_BRANCH = "└─"
PIPE_INDENT = "│  "
BLANK_INDENT = "   "
BLOCKS_ARROW = "→"
BLOCKED_BY_ARROW = "←"
CYCLE_WARNING = "⚠ Circular dependencies detected:"


class RootNotFoundError(ValueError):
    """Raised when the root issue is missing from the graph."""

    def __init__(self, root_id: str) -> None:
        self.root_id = root_id
        super().__init__(f"root issue not found: {root_id}")


@dataclass
class RenderContext:
    """Traversal state for one render call.

    Passed explicitly through the recursive walk so that rendering keeps no
    state between calls.
    """

    graph: DepGraph
    adjacency: dict[str, list[str]]
    rendered: set[str] = field(default_factory=set[str])
    lines: list[str] = field(default_factory=list[str])


def truncate_title(title: str, max_len: int) -> str:
    """Shorten a title to at most *max_len* characters.

    Longer titles end in ``...``; when *max_len* is 3 or less there is no room
    for the marker and the title is simply cut.
    """
    if len(title) <= max_len:
        return title
    if max_len <= 3:
        return title[:max(max_len, 0)]
    return title[: max_len - 3] + "..."


def _header(title: str) -> list[str]:
    return [f"DEPENDENCY GRAPH: {title}", "═" * RULE_WIDTH]


def _summary(summary: str, cycles: list[list[str]]) -> list[str]:
    lines = ["─" * RULE_WIDTH, summary]
    if cycles:
        lines.extend(["", CYCLE_WARNING])
        lines.extend(f"  {format_cycle(cycle)}" for cycle in cycles)
    return lines


def format_cycle(cycle: list[str]) -> str:
    """Join a cycle's identifiers with arrows."""
    return f" {BLOCKS_ARROW} ".join(cycle)


def render_issue_graph(graph: DepGraph, root_id: str) -> str:
    """Render a single issue with what it blocks and what blocks it.

    Args:
        graph: Graph built by :func:`lindeps.graph.build_issue_graph`
        root_id: Identifier of the issue to center on

    Returns:
        Multi-line text block

    Raises:
        RootNotFoundError: If *root_id* is not a node of *graph*
    """
    root = graph.nodes.get(root_id)
    if root is None:
        raise RootNotFoundError(root_id)

    lines = _header(root_id)
    lines.append(f"{root.identifier} {truncate_title(root.title, ROOT_TITLE_WIDTH)}")

    relations = [(BLOCKS_ARROW, target) for target in graph.outgoing(root_id)]
    relations.extend(
        (BLOCKED_BY_ARROW, source) for source in graph.incoming(root_id)
    )

    if not relations:
        lines.append(f"No dependencies found for {root_id}")

    for idx, (arrow, other_id) in enumerate(relations):
        connector = LAST_BRANCH if idx == len(relations) - 1 else BRANCH
        node = graph.nodes[other_id]
        title = truncate_title(node.title, RELATION_TITLE_WIDTH)
        lines.append(f"{connector} {arrow} {node.identifier} [{node.state}] {title}")

    lines.extend(
        _summary(
            f"{len(graph)} issues, {len(graph.edges)} dependencies",
            detect_cycles(graph),
        ),
    )
    return "\n".join(lines)


def find_roots(graph: DepGraph) -> list[str]:
    """Pick the starting points for a team tree.

    Roots are pure blockers: issues that block something and are not
    blocked themselves. A scope made only of cycles has none, in which case
    the first few blockers are used instead.
    """
    blockers = list(dict.fromkeys(e.source for e in graph.edges))
    blocked = {e.target for e in graph.edges}

    roots = [b for b in blockers if b not in blocked]
    if not roots:
        roots = blockers[:MAX_FALLBACK_ROOTS]
    return roots


def _walk(
    ctx: RenderContext,
    node_id: str,
    prefix: str,
    is_last: bool,
    depth: int,
) -> None:
    """DFS walk emitting one line per visited node."""
    if depth > MAX_DEPTH:
        return

    node = ctx.graph.nodes.get(node_id)
    if node is None:
        return

    connector = ""
    if depth > 0:
        connector = (LAST_BRANCH if is_last else BRANCH) + " "

    if node_id in ctx.rendered:
        ctx.lines.append(
            f"{prefix}{connector}{node.identifier} [{node.state}] (see above)",
        )
        return
    ctx.rendered.add(node_id)

    title = truncate_title(node.title, TREE_TITLE_WIDTH)
    ctx.lines.append(f"{prefix}{connector}{node.identifier} [{node.state}] {title}")

    child_prefix = prefix
    if depth > 0:
        child_prefix += BLANK_INDENT if is_last else PIPE_INDENT

    children = ctx.adjacency.get(node_id, [])
    for idx, child_id in enumerate(children):
        _walk(ctx, child_id, child_prefix, idx == len(children) - 1, depth + 1)


def render_team_graph(
    graph: DepGraph,
    team: str,
    project: str | None = None,
) -> str:
    """Render every dependency tree of a team scope.

    Args:
        graph: Graph built by :func:`lindeps.graph.build_team_graph`
        team: Team key or name shown in the header
        project: Optional project name shown in the header

    Returns:
        Multi-line text block
    """
    title = f"Team {team}"
    if project:
        title += f" / Project {project}"

    ctx = RenderContext(graph=graph, adjacency=graph.adjacency())
    ctx.lines.extend(_header(title))

    for root_id in find_roots(graph):
        if root_id in ctx.rendered:
            continue
        _walk(ctx, root_id, "", True, 0)

    ctx.lines.extend(
        _summary(
            f"{len(graph)} issues with dependencies, "
            f"{len(graph.edges)} blocking relationships",
            detect_cycles(graph),
        ),
    )
    return "\n".join(ctx.lines)


def graph_to_dict(graph: DepGraph, root_id: str | None = None) -> dict[str, Any]:
    """Convert a graph and its cycles to a dictionary for JSON output."""
    data: dict[str, Any] = {
        "nodes": [node_to_dict(n) for n in graph.nodes.values()],
        "edges": [edge_to_dict(e) for e in graph.edges],
        "cycles": detect_cycles(graph),
    }
    if root_id is not None:
        data["root"] = root_id
    return data

"""Circular dependency detection over a dependency graph."""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from collections.abc import Iterable

    from lindeps.graph import DepGraph
    from lindeps.models import DepEdge


def strongly_connected_components(
    vertices: Iterable[str],
    edges: Iterable[DepEdge],
) -> list[list[str]]:
    """Compute strongly connected components with Tarjan's algorithm.

    The traversal is iterative, so deep chains do not hit the interpreter's
    recursion limit. Vertices are visited in the given order and successors
    in edge order, which makes the result deterministic.

    Args:
        vertices: Vertex identifiers
        edges: Directed edges; endpoints not in *vertices* are ignored

    Returns:
        Components in the order Tarjan completes them, each listing its
        members in discovery order
    """
    order = list(dict.fromkeys(vertices))
    known = set(order)
    adj: dict[str, list[str]] = {v: [] for v in order}
    for edge in edges:
        if edge.source in known and edge.target in known:
            adj[edge.source].append(edge.target)

    index: dict[str, int] = {}
    lowlink: dict[str, int] = {}
    stack: list[str] = []
    on_stack: set[str] = set()
    components: list[list[str]] = []
    counter = 0

    for start in order:
        if start in index:
            continue

        # Each frame is (vertex, position of the next successor to visit)
        work: list[tuple[str, int]] = [(start, 0)]
        while work:
            node, pos = work[-1]
            if pos == 0:
                index[node] = lowlink[node] = counter
                counter += 1
                stack.append(node)
                on_stack.add(node)

            successors = adj[node]
            if pos < len(successors):
                work[-1] = (node, pos + 1)
                succ = successors[pos]
                if succ not in index:
                    work.append((succ, 0))
                elif succ in on_stack:
                    lowlink[node] = min(lowlink[node], index[succ])
                continue

            work.pop()
            if work:
                parent = work[-1][0]
                lowlink[parent] = min(lowlink[parent], lowlink[node])

            if lowlink[node] == index[node]:
                component: list[str] = []
                while True:
                    member = stack.pop()
                    on_stack.discard(member)
                    component.append(member)
                    if member == node:
                        break
                component.sort(key=index.__getitem__)
                components.append(component)

    return components


def detect_cycles(graph: DepGraph) -> list[list[str]]:
    """Detect circular dependencies in a graph.

    Args:
        graph: The dependency graph

    Returns:
        List of cycles, each a list of identifiers that ends with its first
        entry repeated (``[x, x]`` for a self-loop)
    """
    edges = graph.edges
    self_loops = {e.source for e in edges if e.source == e.target}

    cycles: list[list[str]] = []
    for component in strongly_connected_components(graph.nodes, edges):
        if len(component) > 1:
            cycles.append([*component, component[0]])
        elif component[0] in self_loops:
            cycles.append([component[0], component[0]])

    return cycles

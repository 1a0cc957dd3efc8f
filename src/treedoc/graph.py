"""Graph helpers over a document's implicit node/edge relation.

All helpers are pure and deterministic: iteration follows document order and
no input is mutated.
"""

from __future__ import annotations

from collections import deque
from collections.abc import Iterable, Mapping
from dataclasses import dataclass

from treedoc.types import Edge


@dataclass(frozen=True, slots=True)
class TrunkWalk:
    """Result of following trunk edges from a start node."""

    path: tuple[str, ...]
    cycle: tuple[str, ...]

    @property
    def length(self) -> int:
        """Number of trunk edges traversed."""
        if self.cycle:
            return len(self.path)
        return len(self.path) - 1


def trunk_successors(edges: Iterable[Edge]) -> dict[str, str]:
    """Map source -> target over ``isTrunk: true`` edges.

    When a source has several trunk edges the last one in document order wins.
    """
    successors: dict[str, str] = {}
    for edge in edges:
        if edge.on_trunk:
            successors[edge.source] = edge.target
    return successors


def walk_trunk(start: str, successors: Mapping[str, str]) -> TrunkWalk:
    """Follow trunk successors from ``start`` until a dead end or a revisit.

    ``path`` lists the distinct nodes visited in order. When the walk comes
    back to an already visited node, ``cycle`` holds the suffix of ``path``
    starting at that node.
    """
    path: list[str] = []
    position: dict[str, int] = {}
    current = start
    while True:
        if current in position:
            return TrunkWalk(path=tuple(path), cycle=tuple(path[position[current]:]))
        position[current] = len(path)
        path.append(current)
        nxt = successors.get(current)
        if nxt is None:
            return TrunkWalk(path=tuple(path), cycle=())
        current = nxt


def adjacency(node_ids: Iterable[str], edges: Iterable[Edge]) -> dict[str, list[str]]:
    """Outgoing adjacency restricted to edges with both endpoints in ``node_ids``.

    Vertices keep first-occurrence order; parallel edges are kept.
    """
    graph: dict[str, list[str]] = {}
    for node_id in node_ids:
        graph.setdefault(node_id, [])
    for edge in edges:
        if edge.source in graph and edge.target in graph:
            graph[edge.source].append(edge.target)
    return graph


def strongly_connected_components(graph: Mapping[str, list[str]]) -> list[list[str]]:
    """Tarjan's algorithm, iterative so deep chains do not hit the recursion limit.

    Components are emitted in completion order (reverse topological order of
    the condensation); members are in stack-pop order.
    """
    index = 0
    indices: dict[str, int] = {}
    lowlinks: dict[str, int] = {}
    stack: list[str] = []
    on_stack: set[str] = set()
    components: list[list[str]] = []

    for root in graph:
        if root in indices:
            continue
        indices[root] = lowlinks[root] = index
        index += 1
        stack.append(root)
        on_stack.add(root)
        work: list[tuple[str, int]] = [(root, 0)]

        while work:
            node, child_pos = work[-1]
            neighbors = graph.get(node, [])
            if child_pos < len(neighbors):
                work[-1] = (node, child_pos + 1)
                neighbor = neighbors[child_pos]
                if neighbor not in indices:
                    indices[neighbor] = lowlinks[neighbor] = index
                    index += 1
                    stack.append(neighbor)
                    on_stack.add(neighbor)
                    work.append((neighbor, 0))
                elif neighbor in on_stack:
                    lowlinks[node] = min(lowlinks[node], indices[neighbor])
                continue

            work.pop()
            if work:
                parent = work[-1][0]
                lowlinks[parent] = min(lowlinks[parent], lowlinks[node])
            if lowlinks[node] == indices[node]:
                component: list[str] = []
                while True:
                    popped = stack.pop()
                    on_stack.discard(popped)
                    component.append(popped)
                    if popped == node:
                        break
                components.append(component)

    return components


def reachable_from(start: str, edges: Iterable[Edge]) -> set[str]:
    """Breadth-first reachability over source -> target, ignoring trunk flags."""
    outgoing: dict[str, list[str]] = {}
    for edge in edges:
        outgoing.setdefault(edge.source, []).append(edge.target)

    visited = {start}
    queue = deque([start])
    while queue:
        current = queue.popleft()
        for neighbor in outgoing.get(current, ()):
            if neighbor not in visited:
                visited.add(neighbor)
                queue.append(neighbor)
    return visited

"""Trunk view: the trunk path linearized into display steps.

Callers are expected to validate first; the builder does not run the
semantic rules and fails fast on a missing or dangling root.
"""

from __future__ import annotations

from dataclasses import dataclass

from treedoc.errors import DanglingRootError, NoRootError
from treedoc.graph import trunk_successors, walk_trunk
from treedoc.parse import parse
from treedoc.types import Node, TreeDocument

DEFAULT_TITLE = "Untitled Document"


@dataclass(frozen=True, slots=True)
class TrunkStep:
    """One node on the trunk plus its outgoing branches."""

    node_id: str
    content: str
    branch_count: int
    branch_labels: tuple[str, ...]
    is_terminal: bool
    trunk_target: str | None

    def __post_init__(self) -> None:
        if self.branch_count < 0:
            raise ValueError("branch_count must be >= 0")
        if len(self.branch_labels) > self.branch_count:
            raise ValueError("branch_labels cannot outnumber branches")
        if self.is_terminal != (self.trunk_target is None):
            raise ValueError("a step is terminal exactly when it has no trunk target")


@dataclass(frozen=True, slots=True)
class TrunkView:
    title: str
    stats: str
    steps: tuple[TrunkStep, ...]


def _branches_by_source(doc: TreeDocument) -> dict[str, list[tuple[str, str | None]]]:
    branches: dict[str, list[tuple[str, str | None]]] = {}
    for edge in doc.edges:
        if not edge.on_trunk:
            branches.setdefault(edge.source, []).append((edge.target, edge.label))
    return branches


def build_trunk_view(doc: TreeDocument) -> TrunkView:
    """Walk the trunk from the root and describe each visited node.

    Raises NoRootError without a ``rootNodeId`` and DanglingRootError when the
    walk reaches an id that has no node.
    """
    root_id = doc.root_node_id
    if root_id is None:
        raise NoRootError("Document has no rootNodeId")

    # Later duplicates win, as in any id -> node lookup.
    node_map: dict[str, Node] = {node.id: node for node in doc.nodes}
    successors = trunk_successors(doc.edges)
    branches = _branches_by_source(doc)

    steps: list[TrunkStep] = []
    for node_id in walk_trunk(root_id, successors).path:
        node = node_map.get(node_id)
        if node is None:
            raise DanglingRootError(node_id, is_root=node_id == root_id)
        node_branches = branches.get(node_id, [])
        target = successors.get(node_id)
        steps.append(
            TrunkStep(
                node_id=node_id,
                content=node.content,
                branch_count=len(node_branches),
                branch_labels=tuple(label for _, label in node_branches if label is not None),
                is_terminal=target is None,
                trunk_target=target,
            ),
        )

    return TrunkView(
        title=doc.title if doc.title is not None else DEFAULT_TITLE,
        stats=f"{len(doc.nodes)} nodes, {len(doc.edges)} edges",
        steps=tuple(steps),
    )


def build_trunk_view_from_text(text: str | bytes) -> TrunkView:
    return build_trunk_view(parse(text))


def trunk_view_to_dict(view: TrunkView) -> dict[str, object]:
    """Serialize a view to the camelCase shape consumed by presentation layers."""

    return {
        "title": view.title,
        "stats": view.stats,
        "steps": [
            {
                "nodeId": step.node_id,
                "content": step.content,
                "branchCount": step.branch_count,
                "branchLabels": list(step.branch_labels),
                "isTerminal": step.is_terminal,
                "trunkTarget": step.trunk_target,
            }
            for step in view.steps
        ],
    }

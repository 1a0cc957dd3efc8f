"""Validation pipeline: parse -> schema -> semantic rules -> stats.

Semantic rules:
  1. duplicate-node-id  (error)    later occurrences of an already-seen id
  2. dangling-edge      (error)    edge endpoint that is not a node id
  3. trunk-cycle        (error)    trunk walk from the root revisits a node
  4. general-cycle      (warning)  strongly connected component of size > 1
  5. orphan-node        (advisory) node unreachable from the root

Rules are independent and additive. Rules 3 and 5 are silent when the root id
is missing or not a known node.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable
from typing import Any

from treedoc.diagnostics import (
    Diagnostic,
    DocumentStats,
    EdgeLocation,
    NodeLocation,
    PathLocation,
    ValidationResult,
)
from treedoc.errors import DocumentShapeError, InternalConsistencyError
from treedoc.graph import (
    adjacency,
    reachable_from,
    strongly_connected_components,
    trunk_successors,
    walk_trunk,
)
from treedoc.parse import parse_value
from treedoc.schema import detect_tier, validate_schema
from treedoc.types import Edge, TreeDocument

log = logging.getLogger(__name__)


def validate_document(text: str | bytes, *, strict_tier: bool = False) -> ValidationResult:
    """Run the full validation pipeline over JSON text.

    Raises ParseError on malformed JSON and InternalConsistencyError when the
    typed model rejects a document the schema accepted. Every rule violation
    is returned as a diagnostic instead.
    """
    return validate_value(parse_value(text), strict_tier=strict_tier)


def validate_value(value: Any, *, strict_tier: bool = False) -> ValidationResult:
    """Validate an already decoded JSON value."""
    schema_diags = validate_schema(value, strict_tier=strict_tier)

    try:
        doc = TreeDocument.from_dict(value)
    except DocumentShapeError as exc:
        if schema_diags:
            # The schema diagnostics already explain the shape problem.
            log.debug("typed mapping failed after schema errors: %s", exc)
            return ValidationResult.from_diagnostics(schema_diags, DocumentStats())
        raise InternalConsistencyError(
            f"document passed schema validation but could not be mapped: {exc}",
        ) from exc

    diagnostics = [*schema_diags, *validate_semantics(doc)]
    stats = compute_stats(doc, tier=detect_tier(value))
    result = ValidationResult.from_diagnostics(diagnostics, stats)
    log.debug(
        "validated document: %d error(s), %d warning(s), %d advisory(ies)",
        len(result.errors),
        len(result.warnings),
        len(result.advisories),
    )
    return result


def validate_semantics(doc: TreeDocument) -> list[Diagnostic]:
    """Run all five graph-consistency rules on a parsed document."""
    node_ids = {node.id for node in doc.nodes}
    diagnostics: list[Diagnostic] = []
    diagnostics.extend(check_duplicate_ids(doc))
    diagnostics.extend(check_dangling_edges(doc, node_ids))
    diagnostics.extend(check_trunk_cycle(doc, node_ids))
    diagnostics.extend(check_general_cycles(doc))
    diagnostics.extend(check_orphan_nodes(doc, node_ids))
    return diagnostics


def _known_root(doc: TreeDocument, node_ids: set[str]) -> str | None:
    root_id = doc.root_node_id
    if root_id is None or root_id not in node_ids:
        return None
    return root_id


def check_duplicate_ids(doc: TreeDocument) -> list[Diagnostic]:
    seen: set[str] = set()
    out: list[Diagnostic] = []
    for node in doc.nodes:
        if node.id in seen:
            out.append(
                Diagnostic(
                    rule="duplicate-node-id",
                    message=f"Duplicate node ID '{node.id}'",
                    location=NodeLocation(node.id),
                    severity="error",
                ),
            )
        seen.add(node.id)
    return out


def check_dangling_edges(doc: TreeDocument, node_ids: set[str]) -> list[Diagnostic]:
    out: list[Diagnostic] = []
    for edge in doc.edges:
        location = EdgeLocation(edge.source, edge.target)
        if edge.source not in node_ids:
            out.append(
                Diagnostic(
                    rule="dangling-edge",
                    message=(
                        f"Edge references nonexistent node '{edge.source}' as source "
                        f"(target: '{edge.target}')"
                    ),
                    location=location,
                    severity="error",
                ),
            )
        if edge.target not in node_ids:
            out.append(
                Diagnostic(
                    rule="dangling-edge",
                    message=(
                        f"Edge references nonexistent node '{edge.target}' as target "
                        f"(source: '{edge.source}')"
                    ),
                    location=location,
                    severity="error",
                ),
            )
    return out


def check_trunk_cycle(doc: TreeDocument, node_ids: set[str]) -> list[Diagnostic]:
    root_id = _known_root(doc, node_ids)
    if root_id is None:
        return []
    walk = walk_trunk(root_id, trunk_successors(doc.edges))
    if not walk.cycle:
        return []
    return [
        Diagnostic(
            rule="trunk-cycle",
            message=f"Trunk path contains a cycle: {' -> '.join(walk.cycle)}",
            location=PathLocation(walk.cycle),
            severity="error",
        ),
    ]


def check_general_cycles(doc: TreeDocument) -> list[Diagnostic]:
    # dict.fromkeys keeps the first occurrence of duplicated ids.
    order = {node_id: i for i, node_id in enumerate(dict.fromkeys(node.id for node in doc.nodes))}
    graph = adjacency(order, doc.edges)

    components = [
        sorted(component, key=order.__getitem__)
        for component in strongly_connected_components(graph)
        if len(component) > 1
    ]
    components.sort(key=lambda members: order[members[0]])

    return [
        Diagnostic(
            rule="general-cycle",
            message=f"Cycle detected among {len(members)} nodes: {', '.join(members)}",
            location=PathLocation(tuple(members)),
            severity="warning",
        )
        for members in components
    ]


def check_orphan_nodes(doc: TreeDocument, node_ids: set[str]) -> list[Diagnostic]:
    root_id = _known_root(doc, node_ids)
    if root_id is None:
        return []
    visited = reachable_from(root_id, doc.edges)
    return [
        Diagnostic(
            rule="orphan-node",
            message=f"Node '{node.id}' is not reachable from root node '{root_id}'",
            location=NodeLocation(node.id),
            severity="advisory",
        )
        for node in doc.nodes
        if node.id not in visited
    ]


# ---------------------------------------------------------------------------
# Stats
# ---------------------------------------------------------------------------


def compute_trunk_length(doc: TreeDocument) -> int:
    """Trunk edges followed from the root before a dead end or a revisit."""
    if doc.root_node_id is None:
        return 0
    return walk_trunk(doc.root_node_id, trunk_successors(doc.edges)).length


def count_branches(edges: Iterable[Edge]) -> int:
    return sum(1 for edge in edges if not edge.on_trunk)


def compute_stats(doc: TreeDocument, *, tier: int = 0) -> DocumentStats:
    return DocumentStats(
        node_count=len(doc.nodes),
        edge_count=len(doc.edges),
        trunk_length=compute_trunk_length(doc),
        branch_count=count_branches(doc.edges),
        tier=tier,
    )

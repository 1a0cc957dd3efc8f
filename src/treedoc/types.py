"""Typed model for the tree document format (tiers 0-2).

Wire field names are camelCase; attributes are snake_case. Deserialization is
lenient: unknown fields are ignored and every field except ``formatVersion``,
``nodes`` and ``edges`` (plus the identifying fields of nested records) may be
absent or ``null``.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, cast

from treedoc.errors import DocumentShapeError


# ---------------------------------------------------------------------------
# Field readers
# ---------------------------------------------------------------------------


def _require_object(value: Any, where: str) -> dict[str, Any]:
    if not isinstance(value, dict):
        raise DocumentShapeError(f"{where}: expected an object, got {_json_type(value)}")
    return cast(dict[str, Any], value)


def _required_str(obj: dict[str, Any], key: str, where: str) -> str:
    if key not in obj or obj[key] is None:
        raise DocumentShapeError(f"{where}: missing field '{key}'")
    value = obj[key]
    if not isinstance(value, str):
        raise DocumentShapeError(f"{where}.{key}: expected a string, got {_json_type(value)}")
    return value


def _optional_str(obj: dict[str, Any], key: str, where: str) -> str | None:
    value = obj.get(key)
    if value is None:
        return None
    if not isinstance(value, str):
        raise DocumentShapeError(f"{where}.{key}: expected a string, got {_json_type(value)}")
    return value


def _optional_bool(obj: dict[str, Any], key: str, where: str) -> bool | None:
    value = obj.get(key)
    if value is None:
        return None
    if not isinstance(value, bool):
        raise DocumentShapeError(f"{where}.{key}: expected a boolean, got {_json_type(value)}")
    return value


def _optional_str_tuple(obj: dict[str, Any], key: str, where: str) -> tuple[str, ...] | None:
    value = obj.get(key)
    if value is None:
        return None
    if not isinstance(value, list):
        raise DocumentShapeError(f"{where}.{key}: expected an array, got {_json_type(value)}")
    items: list[str] = []
    for i, item in enumerate(cast(list[Any], value)):
        if not isinstance(item, str):
            raise DocumentShapeError(
                f"{where}.{key}[{i}]: expected a string, got {_json_type(item)}",
            )
        items.append(item)
    return tuple(items)


def _required_list(obj: dict[str, Any], key: str, where: str) -> list[Any]:
    if key not in obj or obj[key] is None:
        raise DocumentShapeError(f"{where}: missing field '{key}'")
    value = obj[key]
    if not isinstance(value, list):
        raise DocumentShapeError(f"{where}.{key}: expected an array, got {_json_type(value)}")
    return cast(list[Any], value)


def _json_type(value: Any) -> str:
    if value is None:
        return "null"
    if isinstance(value, bool):
        return "boolean"
    if isinstance(value, (int, float)):
        return "number"
    if isinstance(value, str):
        return "string"
    if isinstance(value, list):
        return "array"
    if isinstance(value, dict):
        return "object"
    return type(value).__name__


def _put(out: dict[str, Any], key: str, value: Any) -> None:
    if value is not None:
        out[key] = value


# ---------------------------------------------------------------------------
# Records
# ---------------------------------------------------------------------------


@dataclass(frozen=True, slots=True)
class Node:
    """A document node: identifier plus display text."""

    id: str
    content: str
    metadata: Any | None = None
    status: str | None = None
    tree_ids: tuple[str, ...] | None = None

    @classmethod
    def from_dict(cls, raw: Any, *, where: str = "node") -> Node:
        obj = _require_object(raw, where)
        return cls(
            id=_required_str(obj, "id", where),
            content=_required_str(obj, "content", where),
            metadata=obj.get("metadata"),
            status=_optional_str(obj, "status", where),
            tree_ids=_optional_str_tuple(obj, "treeIds", where),
        )

    def to_dict(self) -> dict[str, Any]:
        out: dict[str, Any] = {"id": self.id, "content": self.content}
        _put(out, "metadata", self.metadata)
        _put(out, "status", self.status)
        _put(out, "treeIds", list(self.tree_ids) if self.tree_ids is not None else None)
        return out


@dataclass(frozen=True, slots=True)
class Edge:
    """Directed edge between two node ids (endpoints are not checked here)."""

    source: str
    target: str
    is_trunk: bool | None = None
    label: str | None = None
    edge_type: str | None = None
    status: str | None = None
    description: str | None = None
    tree_id: str | None = None
    link_type: str | None = None

    @property
    def on_trunk(self) -> bool:
        """True only for an explicit ``isTrunk: true``; absence means branch."""
        return self.is_trunk is True

    @classmethod
    def from_dict(cls, raw: Any, *, where: str = "edge") -> Edge:
        obj = _require_object(raw, where)
        return cls(
            source=_required_str(obj, "source", where),
            target=_required_str(obj, "target", where),
            is_trunk=_optional_bool(obj, "isTrunk", where),
            label=_optional_str(obj, "label", where),
            edge_type=_optional_str(obj, "type", where),
            status=_optional_str(obj, "status", where),
            description=_optional_str(obj, "description", where),
            tree_id=_optional_str(obj, "treeId", where),
            link_type=_optional_str(obj, "linkType", where),
        )

    def to_dict(self) -> dict[str, Any]:
        out: dict[str, Any] = {"source": self.source, "target": self.target}
        _put(out, "isTrunk", self.is_trunk)
        _put(out, "label", self.label)
        _put(out, "type", self.edge_type)
        _put(out, "status", self.status)
        _put(out, "description", self.description)
        _put(out, "treeId", self.tree_id)
        _put(out, "linkType", self.link_type)
        return out


@dataclass(frozen=True, slots=True)
class TreeDescriptor:
    """One named sub-tree of a tier-2 document."""

    root_node_id: str
    label: str | None = None
    description: str | None = None

    @classmethod
    def from_dict(cls, raw: Any, *, where: str = "tree") -> TreeDescriptor:
        obj = _require_object(raw, where)
        return cls(
            root_node_id=_required_str(obj, "rootNodeId", where),
            label=_optional_str(obj, "label", where),
            description=_optional_str(obj, "description", where),
        )

    def to_dict(self) -> dict[str, Any]:
        out: dict[str, Any] = {"rootNodeId": self.root_node_id}
        _put(out, "label", self.label)
        _put(out, "description", self.description)
        return out


@dataclass(frozen=True, slots=True)
class EmbeddingRef:
    """Pointer to an external embedding store. Never resolved by this package."""

    format: str
    path: str | None = None

    @classmethod
    def from_dict(cls, raw: Any, *, where: str = "embeddingRef") -> EmbeddingRef:
        obj = _require_object(raw, where)
        return cls(
            format=_required_str(obj, "format", where),
            path=_optional_str(obj, "path", where),
        )

    def to_dict(self) -> dict[str, Any]:
        out: dict[str, Any] = {"format": self.format}
        _put(out, "path", self.path)
        return out


@dataclass(frozen=True, slots=True)
class TreeDocument:
    """A parsed tree document."""

    format_version: str
    nodes: tuple[Node, ...]
    edges: tuple[Edge, ...]
    root_node_id: str | None = None
    # Tier 1
    min_reader_version: str | None = None
    features: tuple[str, ...] | None = None
    metadata: Any | None = None
    # Tier 2
    trees: dict[str, TreeDescriptor] | None = None
    embedding_ref: EmbeddingRef | None = None

    @classmethod
    def from_dict(cls, raw: Any) -> TreeDocument:
        """Map a decoded JSON value onto the model.

        Raises DocumentShapeError when required fields are missing or any
        modeled field has the wrong JSON type.
        """
        obj = _require_object(raw, "document")
        nodes = tuple(
            Node.from_dict(item, where=f"nodes[{i}]")
            for i, item in enumerate(_required_list(obj, "nodes", "document"))
        )
        edges = tuple(
            Edge.from_dict(item, where=f"edges[{i}]")
            for i, item in enumerate(_required_list(obj, "edges", "document"))
        )

        trees: dict[str, TreeDescriptor] | None = None
        raw_trees = obj.get("trees")
        if raw_trees is not None:
            tree_map = _require_object(raw_trees, "document.trees")
            trees = {
                tree_id: TreeDescriptor.from_dict(desc, where=f"trees.{tree_id}")
                for tree_id, desc in tree_map.items()
            }

        raw_embedding = obj.get("embeddingRef")
        return cls(
            format_version=_required_str(obj, "formatVersion", "document"),
            nodes=nodes,
            edges=edges,
            root_node_id=_optional_str(obj, "rootNodeId", "document"),
            min_reader_version=_optional_str(obj, "minReaderVersion", "document"),
            features=_optional_str_tuple(obj, "features", "document"),
            metadata=obj.get("metadata"),
            trees=trees,
            embedding_ref=EmbeddingRef.from_dict(raw_embedding) if raw_embedding is not None else None,
        )

    def to_dict(self) -> dict[str, Any]:
        """Serialize to the camelCase wire form, omitting unset optionals."""
        out: dict[str, Any] = {"formatVersion": self.format_version}
        _put(out, "rootNodeId", self.root_node_id)
        out["nodes"] = [node.to_dict() for node in self.nodes]
        out["edges"] = [edge.to_dict() for edge in self.edges]
        _put(out, "minReaderVersion", self.min_reader_version)
        _put(out, "features", list(self.features) if self.features is not None else None)
        _put(out, "metadata", self.metadata)
        if self.trees is not None:
            out["trees"] = {tree_id: desc.to_dict() for tree_id, desc in self.trees.items()}
        if self.embedding_ref is not None:
            out["embeddingRef"] = self.embedding_ref.to_dict()
        return out

    @property
    def title(self) -> str | None:
        """``metadata.title`` when it is a string."""
        if isinstance(self.metadata, dict):
            value = cast(dict[str, Any], self.metadata).get("title")
            if isinstance(value, str):
                return value
        return None

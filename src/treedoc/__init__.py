"""Tree document validation and trunk-view rendering."""

from treedoc.diagnostics import (
    Diagnostic,
    DocumentStats,
    EdgeLocation,
    Location,
    NodeLocation,
    PathLocation,
    RootLocation,
    Rule,
    Severity,
    ValidationResult,
    info_to_dict,
    partition_diagnostics,
    validation_result_to_dict,
)
from treedoc.errors import (
    DanglingRootError,
    DocumentShapeError,
    InternalConsistencyError,
    NoRootError,
    ParseError,
    TreeDocError,
    ViewError,
)
from treedoc.parse import document_to_dict, dump_document, parse, parse_value
from treedoc.schema import detect_tier, validate_schema
from treedoc.types import Edge, EmbeddingRef, Node, TreeDescriptor, TreeDocument
from treedoc.validate import (
    compute_stats,
    compute_trunk_length,
    validate_document,
    validate_semantics,
    validate_value,
)
from treedoc.viewer import (
    TrunkStep,
    TrunkView,
    build_trunk_view,
    build_trunk_view_from_text,
    trunk_view_to_dict,
)

__all__ = [
    "DanglingRootError",
    "Diagnostic",
    "DocumentShapeError",
    "DocumentStats",
    "Edge",
    "EdgeLocation",
    "EmbeddingRef",
    "InternalConsistencyError",
    "Location",
    "NoRootError",
    "Node",
    "NodeLocation",
    "ParseError",
    "PathLocation",
    "RootLocation",
    "Rule",
    "Severity",
    "TreeDescriptor",
    "TreeDocError",
    "TreeDocument",
    "TrunkStep",
    "TrunkView",
    "ValidationResult",
    "ViewError",
    "build_trunk_view",
    "build_trunk_view_from_text",
    "compute_stats",
    "compute_trunk_length",
    "detect_tier",
    "document_to_dict",
    "dump_document",
    "info_to_dict",
    "parse",
    "parse_value",
    "partition_diagnostics",
    "trunk_view_to_dict",
    "validate_document",
    "validate_schema",
    "validate_semantics",
    "validate_value",
]

"""Hard-failure taxonomy.

Rule violations are never raised; they are collected as diagnostics. The
exceptions here abort a validation or view call.
"""

from __future__ import annotations


class TreeDocError(Exception):
    """Base class for all hard failures raised by treedoc."""


class ParseError(TreeDocError, ValueError):
    """Raised when input text is not well-formed JSON."""


class DocumentShapeError(ParseError):
    """Raised when a decoded JSON value cannot be mapped onto the typed model."""


class InternalConsistencyError(TreeDocError, RuntimeError):
    """Raised when the typed model rejects a document the schema accepted."""


class ViewError(TreeDocError):
    """Raised when a trunk view cannot be built for a document."""


class NoRootError(ViewError):
    """Raised when a document has no ``rootNodeId``."""


class DanglingRootError(ViewError):
    """Raised when the trunk walk reaches an id with no matching node."""

    def __init__(self, node_id: str, *, is_root: bool = True) -> None:
        self.node_id = node_id
        self.is_root = is_root
        if is_root:
            message = f"Root node '{node_id}' not found in nodes array"
        else:
            message = f"Trunk target '{node_id}' not found in nodes array"
        super().__init__(message)

"""JSON text to generic value and typed document."""

from __future__ import annotations

from typing import Any

import orjson

from treedoc.errors import ParseError
from treedoc.types import TreeDocument


def parse_value(text: str | bytes) -> Any:
    """Decode JSON text into plain Python values.

    Raises ParseError when the text is not well-formed JSON.
    """
    try:
        return orjson.loads(text)
    except orjson.JSONDecodeError as exc:
        raise ParseError(f"invalid JSON: {exc}") from exc


def parse(text: str | bytes) -> TreeDocument:
    """Decode JSON text into a TreeDocument.

    Raises ParseError on malformed text and its subclass DocumentShapeError
    when the value does not fit the model.
    """
    return TreeDocument.from_dict(parse_value(text))


def document_to_dict(doc: TreeDocument) -> dict[str, Any]:
    return doc.to_dict()


def dump_document(doc: TreeDocument, *, pretty: bool = False) -> str:
    """Serialize a document back to camelCase JSON text."""
    option = orjson.OPT_INDENT_2 if pretty else 0
    return orjson.dumps(doc.to_dict(), option=option).decode("utf-8")

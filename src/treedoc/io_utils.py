"""File and stdout helpers for the command-line layer.

The validation core never touches the filesystem; these helpers sit between
the CLI and the core.
"""
from __future__ import annotations

import sys
from pathlib import Path
from typing import Any

import orjson


def read_document_text(path: Path) -> bytes:
    """Read a ``.tree.json`` file as raw bytes (decoded by orjson as UTF-8)."""
    return path.read_bytes()


def dump_json(obj: Any, *, pretty: bool = True) -> None:
    """Write an object to stdout as JSON."""
    opts = orjson.OPT_INDENT_2 if pretty else 0
    sys.stdout.buffer.write(orjson.dumps(obj, option=opts))
    sys.stdout.buffer.write(b"\n")
    sys.stdout.buffer.flush()


def save_json(obj: Any, path: Path, *, pretty: bool = True) -> None:
    """Save an object as JSON, creating parent directories."""
    path.parent.mkdir(parents=True, exist_ok=True)
    opts = orjson.OPT_INDENT_2 | orjson.OPT_SORT_KEYS if pretty else orjson.OPT_SORT_KEYS
    path.write_bytes(orjson.dumps(obj, option=opts))

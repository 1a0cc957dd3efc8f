"""Tests for terminal rendering."""
from __future__ import annotations

import io
from pathlib import Path

from rich.console import Console

from treedoc.diagnostics import Diagnostic, DocumentStats, NodeLocation, ValidationResult
from treedoc.output import print_info, print_trunk_view, print_validation_result, summary_line
from treedoc.validate import validate_document
from treedoc.viewer import build_trunk_view_from_text

FIXTURES = Path(__file__).resolve().parent / "fixtures"


def _console() -> tuple[Console, io.StringIO]:
    buf = io.StringIO()
    return Console(file=buf, color_system=None, width=200, highlight=False), buf


def test_summary_line_pluralizes() -> None:
    diags = [
        Diagnostic(rule="dangling-edge", message="m", location=NodeLocation("a"), severity="error"),
        Diagnostic(rule="general-cycle", message="m", location=NodeLocation("a"), severity="warning"),
        Diagnostic(rule="general-cycle", message="m", location=NodeLocation("a"), severity="warning"),
        Diagnostic(rule="orphan-node", message="m", location=NodeLocation("a"), severity="advisory"),
    ]
    result = ValidationResult.from_diagnostics(diags, DocumentStats())
    assert summary_line(result) == "1 error, 2 warnings, 1 advisory"
    assert summary_line(ValidationResult.from_diagnostics([], DocumentStats())) == ""


def test_valid_result_output() -> None:
    console, buf = _console()
    path = FIXTURES / "minimal.tree.json"
    print_validation_result(validate_document(path.read_bytes()), path, console=console)
    out = buf.getvalue()
    assert "is valid (3 nodes, 2 edges, tier 0)" in out
    assert "error" not in out


def test_invalid_result_output() -> None:
    console, buf = _console()
    path = FIXTURES / "invalid" / "dangling-edge.tree.json"
    print_validation_result(validate_document(path.read_bytes()), path, console=console)
    out = buf.getvalue()
    assert "has validation errors" in out
    assert "[dangling-edge]" in out
    assert "Edge references nonexistent node 'n3' as source" in out
    assert "at edge 'n3' -> 'n99'" in out
    assert "2 errors" in out


def test_trunk_view_output() -> None:
    console, buf = _console()
    view = build_trunk_view_from_text((FIXTURES / "minimal.tree.json").read_bytes())
    print_trunk_view(view, console=console)
    out = buf.getvalue()
    assert "Untitled Document" in out
    assert "3 nodes, 2 edges" in out
    assert "[n1] The beginning" in out
    assert "[trunk] -> n2" in out
    assert "+1 branch" in out
    assert "Try something else" in out
    assert "(end of trunk)" in out


def test_info_output() -> None:
    console, buf = _console()
    path = FIXTURES / "story.tree.json"
    print_info(validate_document(path.read_bytes()), path, console=console)
    out = buf.getvalue()
    assert "Tier:" in out
    assert "Trunk length:" in out
    assert "yes" in out

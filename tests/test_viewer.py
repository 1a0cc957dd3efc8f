"""Tests for trunk-view construction."""
from __future__ import annotations

from pathlib import Path

import orjson
import pytest

from treedoc.errors import DanglingRootError, NoRootError, ViewError
from treedoc.parse import parse
from treedoc.viewer import (
    DEFAULT_TITLE,
    TrunkStep,
    build_trunk_view,
    build_trunk_view_from_text,
    trunk_view_to_dict,
)

FIXTURES = Path(__file__).resolve().parent / "fixtures"


def _fixture(name: str) -> bytes:
    return (FIXTURES / name).read_bytes()


def _doc(nodes: list[str], edges: list[dict[str, object]], root: str | None = "n1", **extra: object) -> str:
    payload: dict[str, object] = {
        "formatVersion": "1.0",
        "nodes": [{"id": node_id, "content": f"content of {node_id}"} for node_id in nodes],
        "edges": edges,
        **extra,
    }
    if root is not None:
        payload["rootNodeId"] = root
    return orjson.dumps(payload).decode()


def test_minimal_view() -> None:
    view = build_trunk_view_from_text(_fixture("minimal.tree.json"))
    assert view.title == DEFAULT_TITLE
    assert view.stats == "3 nodes, 2 edges"
    assert [step.node_id for step in view.steps] == ["n1", "n2"]

    first, last = view.steps
    assert first.content == "The beginning"
    assert first.trunk_target == "n2"
    assert not first.is_terminal
    assert first.branch_count == 1
    assert first.branch_labels == ("Try something else",)
    assert last.is_terminal
    assert last.trunk_target is None
    assert last.branch_count == 0


def test_story_view_follows_trunk_only() -> None:
    view = build_trunk_view(parse(_fixture("story.tree.json")))
    assert view.title == "The Enchanted Garden"
    assert view.stats == "7 nodes, 7 edges"
    assert [step.node_id for step in view.steps] == ["start", "enter", "fountain", "wish", "ending"]
    by_id = {step.node_id: step for step in view.steps}
    assert by_id["start"].branch_labels == ("Climb the wall",)
    assert by_id["fountain"].branch_labels == ("Drink from the fountain",)
    assert by_id["enter"].branch_count == 0
    assert by_id["ending"].is_terminal
    assert sum(1 for step in view.steps if step.is_terminal) == 1


def test_single_node_view() -> None:
    view = build_trunk_view_from_text(_fixture("empty-document.tree.json"))
    assert len(view.steps) == 1
    assert view.steps[0].content == ""
    assert view.steps[0].is_terminal
    assert view.steps[0].branch_count == 0
    assert view.steps[0].branch_labels == ()
    assert view.stats == "1 nodes, 0 edges"


def test_linear_view() -> None:
    text = _doc(
        ["n1", "n2", "n3"],
        [
            {"source": "n1", "target": "n2", "isTrunk": True},
            {"source": "n2", "target": "n3", "isTrunk": True},
        ],
    )
    view = build_trunk_view_from_text(text)
    assert [step.node_id for step in view.steps] == ["n1", "n2", "n3"]
    assert all(step.branch_count == 0 for step in view.steps)
    assert [step.is_terminal for step in view.steps] == [False, False, True]


def test_no_trunk_edges_gives_root_only() -> None:
    text = _doc(["n1", "n2"], [{"source": "n1", "target": "n2"}])
    view = build_trunk_view_from_text(text)
    assert len(view.steps) == 1
    assert view.steps[0].is_terminal
    assert view.steps[0].branch_count == 1
    assert view.steps[0].branch_labels == ()


def test_unlabeled_branches_are_counted_but_not_listed() -> None:
    text = _doc(
        ["n1", "n2", "n3", "n4"],
        [
            {"source": "n1", "target": "n2", "isTrunk": True},
            {"source": "n1", "target": "n3", "label": "Left"},
            {"source": "n1", "target": "n4"},
        ],
    )
    step = build_trunk_view_from_text(text).steps[0]
    assert step.branch_count == 2
    assert step.branch_labels == ("Left",)


def test_empty_title_is_kept() -> None:
    text = _doc(["n1"], [], metadata={"title": ""})
    assert build_trunk_view_from_text(text).title == ""


def test_non_string_title_falls_back() -> None:
    text = _doc(["n1"], [], metadata={"title": 7})
    assert build_trunk_view_from_text(text).title == DEFAULT_TITLE


def test_missing_root_raises() -> None:
    with pytest.raises(NoRootError):
        build_trunk_view_from_text(_doc(["n1"], [], root=None))


def test_unknown_root_raises() -> None:
    with pytest.raises(DanglingRootError) as excinfo:
        build_trunk_view_from_text(_doc(["n1"], [], root="ghost"))
    assert excinfo.value.node_id == "ghost"
    assert "Root node 'ghost' not found" in str(excinfo.value)
    assert isinstance(excinfo.value, ViewError)


def test_dangling_trunk_target_raises() -> None:
    text = _doc(["n1"], [{"source": "n1", "target": "n9", "isTrunk": True}])
    with pytest.raises(DanglingRootError) as excinfo:
        build_trunk_view_from_text(text)
    assert "Trunk target 'n9'" in str(excinfo.value)


def test_last_trunk_edge_wins() -> None:
    text = _doc(
        ["n1", "n2", "n3"],
        [
            {"source": "n1", "target": "n2", "isTrunk": True},
            {"source": "n1", "target": "n3", "isTrunk": True},
        ],
    )
    view = build_trunk_view_from_text(text)
    assert [step.node_id for step in view.steps] == ["n1", "n3"]
    assert view.steps[0].branch_count == 0


def test_trunk_cycle_terminates() -> None:
    text = _doc(
        ["n1", "n2"],
        [
            {"source": "n1", "target": "n2", "isTrunk": True},
            {"source": "n2", "target": "n1", "isTrunk": True},
        ],
    )
    view = build_trunk_view_from_text(text)
    assert [step.node_id for step in view.steps] == ["n1", "n2"]
    # The last step still points back along the trunk.
    assert view.steps[-1].trunk_target == "n1"


def test_later_duplicate_node_wins() -> None:
    text = orjson.dumps(
        {
            "formatVersion": "1.0",
            "rootNodeId": "n1",
            "nodes": [{"id": "n1", "content": "first"}, {"id": "n1", "content": "second"}],
            "edges": [],
        },
    )
    assert build_trunk_view_from_text(text).steps[0].content == "second"


def test_trunk_step_invariants() -> None:
    with pytest.raises(ValueError):
        TrunkStep("n1", "x", branch_count=0, branch_labels=(), is_terminal=True, trunk_target="n2")
    with pytest.raises(ValueError):
        TrunkStep("n1", "x", branch_count=0, branch_labels=("a",), is_terminal=True, trunk_target=None)
    with pytest.raises(ValueError):
        TrunkStep("n1", "x", branch_count=-1, branch_labels=(), is_terminal=True, trunk_target=None)


def test_view_serialization_shape() -> None:
    payload = trunk_view_to_dict(build_trunk_view_from_text(_fixture("minimal.tree.json")))
    assert payload["title"] == DEFAULT_TITLE
    assert payload["steps"][0] == {
        "nodeId": "n1",
        "content": "The beginning",
        "branchCount": 1,
        "branchLabels": ["Try something else"],
        "isTerminal": False,
        "trunkTarget": "n2",
    }
    assert payload["steps"][1]["trunkTarget"] is None

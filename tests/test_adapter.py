"""Tests for kinship/relations/adapter.py: layout invocation and failure translation."""
import pytest

from kinship.graph import build_relations
from kinship.models import Gender, LayoutResult
from kinship.relations.adapter import TreeLayoutError, compute_layout, find_suspect_couples, to_layout_input


class RecordingLayout:
    """Layout stand-in that records its calls and returns a fixed result."""

    def __init__(self, result=None, error=None):
        self.calls = []
        self.result = result or {
            "canvas": {"width": 2, "height": 2},
            "nodes": [{"id": "10", "left": 0, "top": 0, "hasSubTree": True}],
            "connectors": [[1, 1, 1, 2]],
        }
        self.error = error

    def __call__(self, nodes, options):
        self.calls.append((nodes, options))
        if self.error:
            raise self.error
        return self.result


class TestComputeLayout:
    def test_returns_layout_result(self, family):
        view = build_relations(family)
        result = compute_layout(view.nodes, view.root_id)
        assert isinstance(result, LayoutResult)
        assert result.root_id == "10"
        assert len(result.nodes) == len(family.persons)

    def test_calls_layout_once_with_wire_shape(self, family):
        view = build_relations(family)
        layout = RecordingLayout()
        result = compute_layout(view.nodes, view.root_id, layout_fn=layout, placeholders=False)
        assert len(layout.calls) == 1
        nodes, options = layout.calls[0]
        assert options == {"rootId": "10", "placeholders": False}
        assert all(isinstance(n["id"], str) for n in nodes)
        assert {n["gender"] for n in nodes} == {"male", "female"}
        assert result.nodes[0].has_sub_tree is True
        assert result.connectors[0].x2 == 1

    def test_root_orientation_applied_to_input_only(self, family):
        view = build_relations(family, root_id=11)
        layout = RecordingLayout()
        compute_layout(view.nodes, 11, root_orientation=Gender.MALE, layout_fn=layout)
        sent = {n["id"]: n for n in layout.calls[0][0]}
        assert sent["11"]["gender"] == "male"
        assert {n.id: n for n in view.nodes}[11].gender == Gender.FEMALE
        assert family.find_person(11).gender == Gender.FEMALE

    def test_relation_order_preserved(self, family):
        view = build_relations(family, root_id=11)
        layout = RecordingLayout()
        compute_layout(view.nodes, 11, layout_fn=layout)
        sent = {n["id"]: n for n in layout.calls[0][0]}
        assert [r["id"] for r in sent["3"]["children"]] == ["11", "10"]


class TestLayoutFailure:
    def test_crash_configuration_raises_typed_error(self, crash_family):
        view = build_relations(crash_family)
        with pytest.raises(TreeLayoutError) as exc:
            compute_layout(view.nodes, view.root_id)
        err = exc.value
        assert err.root_id == "3"
        assert isinstance(err.cause, ValueError)
        assert {n["id"] for n in err.nodes} == {"1", "2", "3", "4", "5"}

    def test_crash_suspects(self, crash_family):
        view = build_relations(crash_family)
        with pytest.raises(TreeLayoutError) as exc:
            compute_layout(view.nodes, view.root_id)
        assert "same gender spouses: 3 + 4 (female)" in exc.value.suspects

    def test_suspects_use_real_root_gender(self, crash_family):
        view = build_relations(crash_family)
        with pytest.raises(TreeLayoutError) as exc:
            compute_layout(view.nodes, view.root_id, root_orientation=Gender.MALE)
        sent = {n["id"]: n for n in exc.value.nodes}
        assert sent["3"]["gender"] == "male"
        assert "same gender spouses: 3 + 4 (female)" in exc.value.suspects

    def test_spoofed_root_is_not_a_suspect(self, family):
        view = build_relations(family, root_id=9)
        layout = RecordingLayout(error=RuntimeError("boom"))
        with pytest.raises(TreeLayoutError) as exc:
            compute_layout(view.nodes, 9, root_orientation=Gender.MALE, layout_fn=layout)
        sent = {n["id"]: n for n in layout.calls[0][0]}
        assert (sent["9"]["gender"], sent["3"]["gender"]) == ("male", "male")
        assert exc.value.suspects == []

    def test_foreign_exception_wrapped(self, family):
        view = build_relations(family)
        layout = RecordingLayout(error=RuntimeError("boom"))
        with pytest.raises(TreeLayoutError, match="boom") as exc:
            compute_layout(view.nodes, view.root_id, layout_fn=layout)
        assert exc.value.__cause__ is exc.value.cause
        assert len(layout.calls) == 1

    def test_malformed_result(self, family):
        view = build_relations(family)
        layout = RecordingLayout(result={"nodes": []})
        with pytest.raises(TreeLayoutError, match="malformed"):
            compute_layout(view.nodes, view.root_id, layout_fn=layout)

    def test_error_payload(self, crash_family):
        view = build_relations(crash_family)
        with pytest.raises(TreeLayoutError) as exc:
            compute_layout(view.nodes, view.root_id)
        payload = exc.value.to_dict()
        assert set(payload) == {"message", "rootId", "suspects", "nodes"}
        assert payload["message"].startswith("tree layout failed")


class TestFindSuspectCouples:
    def test_clean_family(self, family):
        view = build_relations(family)
        assert find_suspect_couples(to_layout_input(view.nodes)) == []

    def test_same_gender_parents(self):
        nodes = [
            {"id": "1", "gender": "male", "parents": [], "children": [], "siblings": [], "spouses": []},
            {"id": "2", "gender": "male", "parents": [], "children": [], "siblings": [], "spouses": []},
            {"id": "3", "gender": "female", "parents": [{"id": "1", "type": "blood"}, {"id": "2", "type": "blood"}],
             "children": [], "siblings": [], "spouses": []},
        ]
        assert find_suspect_couples(nodes) == ["same gender parents: 3 -> 1 + 2 (male)"]

    def test_pair_reported_once(self):
        nodes = [
            {"id": "1", "gender": "female", "parents": [], "children": [], "siblings": [],
             "spouses": [{"id": "2", "type": "married"}]},
            {"id": "2", "gender": "female", "parents": [], "children": [], "siblings": [],
             "spouses": [{"id": "1", "type": "married"}]},
        ]
        assert find_suspect_couples(nodes) == ["same gender spouses: 1 + 2 (female)"]

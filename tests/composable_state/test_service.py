"""Tests for the update service."""

import pytest
from pydantic import ValidationError

from composable_state import (
    Transform,
    apply,
    apply_update,
    apply_updates,
    compile_action,
    parse_action_document,
)
from composable_state.models import (
    RangeDocument,
    ReplaceDocument,
    SelectDocument,
)


@pytest.fixture
def intersection():
    return {
        "volume": 800,
        "lane_groups": [
            {"num_lanes": 2, "movement_type": "through"}
        ],
        "signal_timing": {
            "cycle_length": 90,
            "effective_green": 40
        }
    }


class TestParseActionDocument:
    """Tests for document validation."""

    def test_nested_document(self):
        """Nested documents are parsed into their models."""
        document = parse_action_document({
            "op": "select",
            "path": "a.b",
            "action": {"op": "replace", "value": 1},
        })
        assert isinstance(document, SelectDocument)
        assert isinstance(document.action, ReplaceDocument)

    def test_unknown_op_rejected(self):
        with pytest.raises(ValidationError):
            parse_action_document({"op": "explode"})

    def test_negative_range_rejected(self):
        with pytest.raises(ValidationError):
            parse_action_document({
                "op": "range",
                "start": -1,
                "length": 1,
                "action": {"op": "replace", "value": []},
            })

    def test_merge_requires_object(self):
        with pytest.raises(ValidationError):
            parse_action_document({"op": "merge", "value": [1]})


class TestCompileAction:
    """Tests for compiling documents into actions."""

    def test_compile_model(self):
        action = compile_action(RangeDocument(
            start=2,
            length=2,
            action=ReplaceDocument(value=[]),
        ))
        assert isinstance(action, Transform)
        assert apply([1, 2, 99, 100, 3, 4], action) == [1, 2, 3, 4]

    def test_compile_raw_data(self):
        action = compile_action({
            "op": "select",
            "path": "value",
            "action": {"op": "collect", "actions": [
                {"op": "replace", "value": 5},
                {"op": "replace", "value": 7},
            ]},
        })
        assert apply({"value": 1}, action) == {"value": 7}

    @pytest.mark.parametrize("document, state, expected", [
        ({"op": "merge", "value": {"b": 2}}, {"a": 1}, {"a": 1, "b": 2}),
        ({"op": "concat", "value": [3]}, [1, 2], [1, 2, 3]),
        (
            {"op": "set_in", "key": 1, "action": {"op": "replace", "value": 9}},
            [1, 2],
            [1, 9],
        ),
        (
            {"op": "select_array", "path": ["a", 0], "action": {"op": "replace", "value": "x"}},
            {"a": ["y"]},
            {"a": ["x"]},
        ),
        (
            {"op": "select_all", "entries": [
                {"path": "a", "action": {"op": "replace", "value": 1}},
                {"path": "b[c.d]", "action": {"op": "replace", "value": 2}},
            ]},
            {},
            {"a": 1, "b": {"c.d": 2}},
        ),
        (
            {"op": "map", "action": {"op": "merge", "value": {"seen": True}}},
            [{"id": 1}, {"id": 2}],
            [{"id": 1, "seen": True}, {"id": 2, "seen": True}],
        ),
        (
            {"op": "select", "path": "a.b", "syntax": "dot",
             "action": {"op": "replace", "value": 0}},
            {"a": {"b": 1}},
            {"a": {"b": 0}},
        ),
    ])
    def test_each_op(self, document, state, expected):
        assert apply(state, compile_action(document)) == expected


class TestApplyUpdate:
    """Tests for apply_update."""

    def test_successful_update(self, intersection):
        result = apply_update(intersection, {
            "op": "select",
            "path": "signal_timing.cycle_length",
            "action": {"op": "replace", "value": 120},
        })
        assert result.success is True
        assert result.updates_applied == 1
        assert result.state["signal_timing"]["cycle_length"] == 120
        assert result.errors == []

    def test_original_unchanged(self, intersection):
        apply_update(intersection, {"op": "merge", "value": {"volume": 1}})
        assert intersection["volume"] == 800

    def test_shape_error_reported(self, intersection):
        """Engine errors are captured in the result."""
        result = apply_update(intersection, {
            "op": "select",
            "path": "lane_groups",
            "action": {"op": "merge", "value": {"a": 1}},
        })
        assert result.success is False
        assert result.state is None
        assert len(result.errors) == 1
        assert result.errors[0].error == "ShapeMismatchError"
        assert "merge()" in result.errors[0].message

    def test_malformed_path_reported(self, intersection):
        result = apply_update(intersection, {
            "op": "select",
            "path": "",
            "action": {"op": "replace", "value": 1},
        })
        assert result.success is False
        assert result.errors[0].error == "PathSyntaxError"

    def test_invalid_document_raises(self, intersection):
        """Documents that fail validation are not engine errors."""
        with pytest.raises(ValidationError):
            apply_update(intersection, {"op": "range", "start": 0})


class TestApplyUpdates:
    """Tests for batch updates."""

    def test_all_applied(self, intersection):
        result = apply_updates(intersection, [
            {"op": "merge", "value": {"volume": 1000}},
            {"op": "select", "path": "lane_groups", "action": {
                "op": "concat", "value": [{"num_lanes": 1, "movement_type": "left"}]
            }},
        ])
        assert result.success is True
        assert result.updates_applied == 2
        assert result.state["volume"] == 1000
        assert len(result.state["lane_groups"]) == 2

    def test_failure_is_atomic(self, intersection):
        """A failing document stops the batch and returns no state."""
        result = apply_updates(intersection, [
            {"op": "merge", "value": {"volume": 1000}},
            {"op": "select", "path": "volume", "action": {"op": "concat", "value": [1]}},
            {"op": "merge", "value": {"volume": 5}},
        ])
        assert result.success is False
        assert result.updates_applied == 1
        assert result.state is None
        assert result.errors[0].index == 1
        assert intersection["volume"] == 800

    def test_empty_batch(self, intersection):
        result = apply_updates(intersection, [])
        assert result.success is True
        assert result.updates_applied == 0
        assert result.state == intersection

    def test_invalid_document_reported_with_index(self, intersection):
        """An invalid document is reported in the result, not raised."""
        result = apply_updates(intersection, [
            {"op": "replace", "value": 2},
            {"op": "nope"},
        ])
        assert result.success is False
        assert result.updates_applied == 0
        assert result.state is None
        assert len(result.errors) == 1
        assert result.errors[0].error == "ValidationError"
        assert result.errors[0].index == 1

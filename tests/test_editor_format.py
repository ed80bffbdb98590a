"""Tests for the canvas JSON format."""
from workflow_canvas.converter.editor_format import from_editor_dict, to_editor_dict
from workflow_canvas.converter.format_converter import FormatConverter
from workflow_canvas.expressions.condition import EmbeddedCondition
from workflow_canvas.models.results import GraphErrorKind
from workflow_canvas.models.workflow_elements import NodeRole, Position


class TestEditorFormat:
    """Test suite for to_editor_dict / from_editor_dict."""

    def test_export_shape(self, three_node_document):
        graph = FormatConverter().from_execution_document(three_node_document).unwrap()

        data = to_editor_dict(graph)

        assert [node["type"] for node in data["nodes"]] == ["trigger", "controller", "activity"]
        assert data["nodes"][2]["params"] == {"email": "$edge2.email_id"}
        assert data["nodes"][0]["position"] == {"x": 50, "y": 100}
        assert data["edges"][0] == {"id": "edge1", "source": "A", "target": "B", "label": "edge1"}

    def test_execution_fields_travel_in_data(self, demo_document):
        graph = FormatConverter().from_execution_document(demo_document).unwrap()

        data = to_editor_dict(graph)
        parsing = next(n for n in data["nodes"] if n["id"] == "payment-advice-parsing-node")

        assert parsing["data"] == {
            "activityName": "payment_advice_parsing_activity",
            "startToCloseTimeoutInMinutes": 10.0,
        }

    def test_round_trip_through_canvas_json(self, demo_document):
        graph = FormatConverter().from_execution_document(demo_document).unwrap()

        restored = from_editor_dict(to_editor_dict(graph)).unwrap()

        assert restored.snapshot() == graph.snapshot()
        condition = restored.get_node("is-payment-advice-shared-controller").parameters["condition"]
        assert isinstance(condition, EmbeddedCondition)

    def test_import_fills_missing_ids_positions_and_edge_names(self):
        data = {
            "nodes": [
                {"type": "trigger", "name": "Start"},
                {"id": "work", "type": "activity", "position": {"x": 7, "y": 8}},
            ],
            "edges": [{"source": "node-0", "target": "work"}],
        }

        graph = from_editor_dict(data).unwrap()

        assert graph.get_node("node-0").role == NodeRole.TRIGGER
        assert graph.get_node("node-0").position == Position(x=100, y=100)
        assert graph.get_node("work").position == Position(x=7, y=8)
        assert [edge.name for edge in graph.edges] == ["edge1"]

    def test_unknown_type_becomes_activity(self):
        graph = from_editor_dict({"nodes": [{"id": "n", "type": "webhook"}]}).unwrap()

        assert graph.get_node("n").role == NodeRole.ACTIVITY

    def test_import_applies_connection_rules(self):
        data = {
            "nodes": [{"id": "t", "type": "trigger"}, {"id": "a", "type": "activity"}],
            "edges": [{"id": "e1", "source": "a", "target": "t"}],
        }

        result = from_editor_dict(data)

        assert result.kind == GraphErrorKind.INVALID_DOCUMENT
        assert result.error.causes[0].kind == GraphErrorKind.INVALID_CONNECTION

    def test_import_rejects_invalid_json_shape(self):
        result = from_editor_dict({"nodes": "not a list"})

        assert result.kind == GraphErrorKind.INVALID_DOCUMENT

    def test_unnamed_edge_does_not_take_a_later_explicit_name(self):
        data = {
            "nodes": [
                {"id": "t", "type": "trigger"},
                {"id": "a", "type": "activity"},
                {"id": "b", "type": "activity"},
            ],
            "edges": [
                {"source": "t", "target": "a"},
                {"id": "edge1", "source": "a", "target": "b"},
            ],
        }

        graph = from_editor_dict(data).unwrap()

        assert graph.get_edge("edge1").source == "a"
        assert graph.get_edge("edge2").source == "t"

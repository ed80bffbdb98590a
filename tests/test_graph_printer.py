"""Tests for the text rendering of graphs."""
from workflow_canvas.converter.format_converter import FormatConverter
from workflow_canvas.graph.workflow_graph import WorkflowGraph
from workflow_canvas.utils.graph_printer import print_graph, print_graph_compact


class TestGraphPrinter:
    """Test suite for print_graph."""

    def test_renders_nodes_and_named_edges(self, three_node_document):
        graph = FormatConverter().from_execution_document(three_node_document).unwrap()

        text = print_graph(graph, workflow_id="wf-three")

        assert "WORKFLOW: wf-three" in text
        assert "⚡ [1] Start" in text
        assert "[edge2]→" in text
        assert "Parameters:" not in text

    def test_include_params(self, three_node_document):
        graph = FormatConverter().from_execution_document(three_node_document).unwrap()

        text = print_graph(graph, include_params=True)

        assert '• email: "$edge2.email_id"' in text

    def test_empty_graph(self):
        text = print_graph(WorkflowGraph())

        assert "(No connections defined)" in text

    def test_compact(self, three_node_document):
        graph = FormatConverter().from_execution_document(three_node_document).unwrap()

        assert print_graph_compact(graph) == "A -[edge1]-> B | B -[edge2]-> C"

"""Tests for the in-memory workflow graph and its connection rules."""
import pytest
from pydantic import ValidationError

from workflow_canvas.graph.palette import NODE_TEMPLATES, generate_node_id
from workflow_canvas.graph.validator import can_connect, connection_problem
from workflow_canvas.graph.workflow_graph import WorkflowGraph
from workflow_canvas.models.results import GraphErrorKind, WorkflowGraphException
from workflow_canvas.models.workflow_elements import Node, NodeRole, Position


def _node(node_id, role, **fields):
    return Node(id=node_id, role=role, **fields)


class TestWorkflowGraph:
    """Test suite for WorkflowGraph mutations."""

    @pytest.fixture
    def graph(self):
        """Trigger A -> Controller B -> Activity C."""
        graph = WorkflowGraph()
        graph.add_node(_node("A", NodeRole.TRIGGER, name="Start"))
        graph.add_node(_node("B", NodeRole.CONTROLLER, name="Check"))
        graph.add_node(_node("C", NodeRole.ACTIVITY, name="Parse"))
        graph.connect("A", "B", "edge1")
        graph.connect("B", "C", "edge2")
        return graph

    # =========================================================================
    # Nodes
    # =========================================================================

    def test_add_node_rejects_duplicate_id(self, graph):
        before = graph.snapshot()

        result = graph.add_node(_node("A", NodeRole.ACTIVITY))

        assert not result.ok
        assert result.kind == GraphErrorKind.DUPLICATE_ID
        assert graph.snapshot() == before

    def test_remove_node_cascades_incident_edges_only(self, graph):
        graph.add_node(_node("D", NodeRole.ACTIVITY))
        graph.connect("A", "D", "edge3")

        result = graph.remove_node("B")

        assert result.ok
        assert sorted(edge.name for edge in result.value) == ["edge1", "edge2"]
        assert "B" not in graph
        assert [edge.name for edge in graph.edges] == ["edge3"]
        assert graph.check_invariants() == []

    def test_remove_unknown_node(self, graph):
        result = graph.remove_node("missing")

        assert result.kind == GraphErrorKind.UNKNOWN_NODE
        assert len(graph) == 3

    def test_rename_and_set_parameters(self, graph):
        params = {"emailId": "$edge2.email_id"}

        assert graph.rename("C", "Parse advice").ok
        assert graph.set_parameters("C", params).ok
        params["emailId"] = "changed"

        node = graph.get_node("C")
        assert node.name == "Parse advice"
        assert node.parameters == {"emailId": "$edge2.email_id"}

    def test_field_edits_on_unknown_node_fail(self, graph):
        assert graph.rename("X", "name").kind == GraphErrorKind.UNKNOWN_NODE
        assert graph.move_node("X", 1, 2).kind == GraphErrorKind.UNKNOWN_NODE

    def test_move_node_and_description(self, graph):
        graph.move_node("A", 10, 20)
        graph.set_description("A", "fires on mail")

        node = graph.get_node("A")
        assert node.position == Position(x=10, y=20)
        assert node.description == "fires on mail"

    def test_add_from_palette(self, graph):
        result = graph.add_from_palette(NodeRole.ACTIVITY, Position(x=5, y=5))

        assert result.ok
        assert result.value.id.startswith("activity-")
        assert result.value.name == "New Activity Node"
        assert result.value.parameters == {}
        assert result.value.id in graph

    # =========================================================================
    # Edges
    # =========================================================================

    def test_connect_into_trigger_is_rejected(self, graph):
        before = graph.snapshot()

        result = graph.connect("C", "A", "bad")

        assert not result.ok
        assert result.kind == GraphErrorKind.INVALID_CONNECTION
        assert graph.snapshot() == before

    def test_connect_self_loop_is_rejected(self, graph):
        assert graph.connect("C", "C").kind == GraphErrorKind.INVALID_CONNECTION

    def test_connect_missing_endpoint_is_rejected(self, graph):
        assert graph.connect("A", "nope").kind == GraphErrorKind.INVALID_CONNECTION
        assert graph.connect("nope", "C").kind == GraphErrorKind.INVALID_CONNECTION

    def test_connect_duplicate_edge_name(self, graph):
        result = graph.connect("A", "C", "edge1")

        assert result.kind == GraphErrorKind.DUPLICATE_EDGE_NAME
        assert len(graph.edges) == 2

    def test_connect_generates_next_edge_name(self, graph):
        result = graph.connect("A", "C")

        assert result.ok
        assert result.value.name == "edge3"
        assert graph.next_edge_name() == "edge4"

    def test_cycles_between_distinct_nodes_are_allowed(self, graph):
        assert graph.connect("C", "B", "loop").ok

    def test_disconnect_removes_exactly_one_edge(self, graph):
        result = graph.disconnect("edge1")

        assert result.ok
        assert [edge.name for edge in graph.edges] == ["edge2"]
        assert len(graph) == 3

    def test_disconnect_unknown_edge(self, graph):
        assert graph.disconnect("edge9").kind == GraphErrorKind.UNKNOWN_EDGE

    # =========================================================================
    # Checks
    # =========================================================================

    def test_reference_to_incoming_edge_has_no_warning(self, graph):
        graph.set_parameters("C", {"email": "$edge2.email_id"})

        assert graph.reference_warnings() == []

    def test_reference_to_non_incoming_edge_warns(self, graph):
        graph.set_parameters("C", {"email": "$edge1.email_id", "other": "$edge7.x"})

        warnings = graph.reference_warnings()

        assert [(w.node_id, w.edge_name) for w in warnings] == [("C", "edge1"), ("C", "edge7")]
        assert all(w.category == "unresolved_reference" for w in warnings)

    def test_copy_is_independent(self, graph):
        clone = graph.copy()
        clone.rename("A", "Other")
        clone.remove_node("C")

        assert graph.get_node("A").name == "Start"
        assert "C" in graph

    def test_connect_into_trigger_rejected_from_every_node(self, graph):
        graph.add_node(_node("T2", NodeRole.TRIGGER))
        before = graph.snapshot()

        for node in graph.nodes:
            result = graph.connect(node.id, "A", f"into-a-from-{node.id}")

            assert result.kind == GraphErrorKind.INVALID_CONNECTION
        assert graph.snapshot() == before

    # =========================================================================
    # Encapsulation
    # =========================================================================

    def test_node_identity_is_frozen(self, graph):
        node = graph.get_node("B")

        with pytest.raises(ValidationError):
            node.role = NodeRole.TRIGGER
        with pytest.raises(ValidationError):
            node.id = "Z"
        assert graph.check_invariants() == []

    def test_edges_are_frozen(self, graph):
        edge = graph.get_edge("edge1")

        with pytest.raises(ValidationError):
            edge.target = "A"
        assert graph.check_invariants() == []

    def test_add_node_stores_a_copy(self, graph):
        node = _node("D", NodeRole.ACTIVITY, parameters={"k": "v"})

        stored = graph.add_node(node).unwrap()
        node.name = "changed outside"
        node.parameters["k"] = "changed outside"

        assert stored is not node
        assert graph.get_node("D").name == ""
        assert graph.get_node("D").parameters == {"k": "v"}

    def test_unwrap_raises_on_failure(self, graph):
        with pytest.raises(WorkflowGraphException) as exc_info:
            graph.connect("C", "A").unwrap()

        assert exc_info.value.kind == GraphErrorKind.INVALID_CONNECTION


class TestConnectionValidator:
    """Test suite for the pure connection predicate."""

    @pytest.fixture
    def graph(self):
        graph = WorkflowGraph()
        graph.add_node(_node("t", NodeRole.TRIGGER))
        graph.add_node(_node("a", NodeRole.ACTIVITY))
        return graph

    def test_accepts_trigger_to_activity(self, graph):
        assert can_connect(graph, "t", "a")

    def test_rejects_trigger_target(self, graph):
        assert not can_connect(graph, "a", "t")
        assert "Trigger" in connection_problem(graph, "a", "t")

    def test_rejects_self_loop(self, graph):
        assert not can_connect(graph, "a", "a")

    def test_rejects_absent_endpoint(self, graph):
        assert not can_connect(graph, "a", "z")


class TestPalette:
    """Test suite for palette templates."""

    def test_templates_cover_every_role(self):
        assert set(NODE_TEMPLATES) == set(NodeRole)
        assert NODE_TEMPLATES[NodeRole.TRIGGER].description == "Starting point of workflow"

    def test_generated_id_avoids_collisions(self):
        existing = {"trigger-1000", "trigger-1000-1"}

        assert generate_node_id(NodeRole.TRIGGER, existing, now_ms=1000) == "trigger-1000-2"
        assert generate_node_id(NodeRole.CONTROLLER, existing, now_ms=1000) == "controller-1000"


# Each step is (operation, args). Steps that the graph rejects are part of
# the sequence too: a rejected step must leave the graph as it was.
MUTATION_SEQUENCES = [
    [
        ("connect", ("t1", "c1", "edge1")),
        ("connect", ("c1", "a1", "edge2")),
        ("connect", ("a1", "t1", "bad")),
        ("connect", ("a1", "c1", None)),
        ("remove_node", ("c1",)),
        ("connect", ("t1", "a1", "edge1")),
        ("disconnect", ("edge1",)),
    ],
    [
        ("connect", ("t1", "a1", None)),
        ("connect", ("t1", "a1", None)),
        ("connect", ("a1", "a1", "self")),
        ("connect", ("t1", "ghost", "edge9")),
        ("remove_node", ("t1",)),
        ("remove_node", ("t1",)),
        ("connect", ("c1", "a1", "edge1")),
        ("disconnect", ("edge7",)),
        ("connect", ("a1", "c1", "edge1")),
    ],
    [
        ("connect", ("c1", "a1", "x")),
        ("connect", ("a1", "c1", "y")),
        ("remove_node", ("a1",)),
        ("connect", ("c1", "t1", "z")),
        ("disconnect", ("x",)),
        ("connect", ("t1", "c1", "x")),
    ],
]


class TestInvariantsUnderMutation:
    """Hard invariants hold after every step of a mutation sequence."""

    @pytest.fixture
    def graph(self):
        graph = WorkflowGraph()
        graph.add_node(_node("t1", NodeRole.TRIGGER))
        graph.add_node(_node("c1", NodeRole.CONTROLLER))
        graph.add_node(_node("a1", NodeRole.ACTIVITY))
        return graph

    @pytest.mark.parametrize("steps", MUTATION_SEQUENCES)
    def test_sequence_preserves_invariants(self, graph, steps):
        for operation, args in steps:
            before = graph.snapshot()

            result = getattr(graph, operation)(*args)

            if not result.ok:
                assert graph.snapshot() == before
            assert graph.check_invariants() == []
            edge_names = [edge.name for edge in graph.edges]
            node_ids = [node.id for node in graph.nodes]
            assert len(edge_names) == len(set(edge_names))
            assert len(node_ids) == len(set(node_ids))
            for edge in graph.edges:
                assert edge.source in graph
                assert edge.target in graph
                assert graph.get_node(edge.target).role != NodeRole.TRIGGER

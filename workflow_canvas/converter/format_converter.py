"""Converter between the editor graph and the execution document.

The two formats do not carry the same information:

- editor only: node position, node description
- execution only: mapping keys, edge names as value references,
  ``activityName``, ``startToCloseTimeoutInMinutes``, ``nodeInputs``

Fields missing on one side are derived when converting towards it:

- ``activityName`` defaults to ``<role>_activity``
- ``startToCloseTimeoutInMinutes`` defaults to the configured timeout
- mapping keys come from ``derive_key`` and are regenerated on every export
- description reads ``<activityName> (<nodeType>)``
- positions follow a column per role (see ``layout_position``)

Derived values are not stored on the imported node, so exporting an imported
document reproduces them and a graph survives a round trip unchanged.
"""
from typing import Optional, Union

import structlog
from pydantic import ValidationError

from workflow_canvas.config import get_settings
from workflow_canvas.converter.execution_document import (
    ExecutionDocument,
    WireEdge,
    WireNode,
    WireNodeParams,
    WorkflowDefinition,
)
from workflow_canvas.converter.identifier import build_key_map
from workflow_canvas.expressions.condition import (
    decode_parameter_map,
    encode_parameters,
)
from workflow_canvas.graph.workflow_graph import WorkflowGraph
from workflow_canvas.models.results import (
    ConversionResult,
    GraphError,
    GraphErrorKind,
    GraphResult,
)
from workflow_canvas.models.workflow_elements import Node, NodeRole, Position
from workflow_canvas.utils.graph_printer import print_graph

logger = structlog.get_logger()

# Column x and (first row y, row spacing) per role
LAYOUT_COLUMNS: dict[NodeRole, tuple[float, float, float]] = {
    NodeRole.TRIGGER: (50, 100, 150),
    NodeRole.CONTROLLER: (350, 150, 100),
    NodeRole.ACTIVITY: (650, 100, 120),
}


class FormatConverter:
    """Translates ``WorkflowGraph`` <-> ``ExecutionDocument``."""

    def __init__(self, default_timeout_minutes: Optional[float] = None):
        settings = get_settings()
        self.default_timeout_minutes = (
            default_timeout_minutes
            if default_timeout_minutes is not None
            else settings.default_timeout_minutes
        )

    # =========================================================================
    # Derived fields
    # =========================================================================

    @staticmethod
    def synthesize_activity_name(role: NodeRole) -> str:
        """Placeholder activity for a node without an explicit binding."""
        return f"{role.editor_type}_activity"

    @staticmethod
    def describe(activity_name: str, node_type: str) -> str:
        return f"{activity_name} ({node_type})"

    @staticmethod
    def layout_position(role: NodeRole, index: int) -> Position:
        """Placeholder position for the ``index``-th node of a role."""
        x, first_y, spacing = LAYOUT_COLUMNS[role]
        return Position(x=x, y=first_y + index * spacing)

    # =========================================================================
    # Graph -> execution document
    # =========================================================================

    def to_execution_document(
        self,
        graph: WorkflowGraph,
        workflow_id: str = "",
    ) -> ConversionResult[ExecutionDocument]:
        """Serialize a graph for the backend.

        Fails with ``DuplicateKey`` when two node ids derive the same mapping
        key, or ``DanglingEdge`` when an edge endpoint is missing. Reference
        tokens that do not resolve to an incoming edge are reported as
        warnings.
        """
        keys = build_key_map(node.id for node in graph.nodes)
        if not keys.ok:
            logger.warning("export_failed", kind=keys.kind.value, error=keys.error.message)
            return GraphResult.from_error(keys.error)

        for edge in graph.edges:
            for endpoint in (edge.source, edge.target):
                if endpoint not in graph:
                    logger.warning("export_failed", kind="DanglingEdge", edge_name=edge.name)
                    return GraphResult.failure(
                        GraphErrorKind.DANGLING_EDGE,
                        f"Edge '{edge.name}' references missing node '{endpoint}'",
                        node_id=endpoint,
                        edge_name=edge.name,
                    )

        nodes = {
            keys.value[node.id]: self._node_to_wire(node)
            for node in graph.nodes
        }
        edges = [
            WireEdge(
                from_node_id=edge.source,
                to_node_id=edge.target,
                edge_name=edge.name,
            )
            for edge in graph.edges
        ]
        document = ExecutionDocument(
            workflow_id=workflow_id,
            definition=WorkflowDefinition(nodes=nodes, edges=edges),
        )

        warnings = graph.reference_warnings()
        logger.info(
            "export_complete",
            workflow_id=workflow_id,
            node_count=len(nodes),
            edge_count=len(edges),
            warning_count=len(warnings),
        )
        return GraphResult.success(document, warnings=warnings)

    def _node_to_wire(self, node: Node) -> WireNode:
        return WireNode(
            node_name=node.name,
            node_id=node.id,
            node_params=WireNodeParams(params=encode_parameters(node.parameters)),
            node_inputs=encode_parameters(node.inputs),
            node_type=node.role.value,
            activity_name=node.activity_name or self.synthesize_activity_name(node.role),
            start_to_close_timeout_in_minutes=(
                node.timeout_minutes
                if node.timeout_minutes is not None
                else self.default_timeout_minutes
            ),
        )

    # =========================================================================
    # Execution document -> graph
    # =========================================================================

    def from_execution_document(
        self,
        document: Union[dict, ExecutionDocument],
    ) -> ConversionResult[WorkflowGraph]:
        """Build a graph from a backend document.

        Every problem found (duplicate id, malformed condition, rejected
        edge) is collected; if there is any, the import
        fails as a whole with ``InvalidDocument`` listing them as causes.
        """
        if isinstance(document, ExecutionDocument):
            parsed = document
        else:
            try:
                parsed = ExecutionDocument.model_validate(document)
            except ValidationError as e:
                logger.warning("import_failed", reason="schema", error_count=e.error_count())
                return GraphResult.failure(
                    GraphErrorKind.INVALID_DOCUMENT,
                    f"Document does not match the execution schema: {_summarize(e)}",
                )

        graph = WorkflowGraph()
        causes: list[GraphError] = []
        bucket_sizes = {role: 0 for role in NodeRole}

        for wire_node in parsed.definition.nodes.values():
            role = NodeRole.from_wire(wire_node.node_type)
            decoded = decode_parameter_map(wire_node.node_params.params, wire_node.node_id)
            if not decoded.ok:
                causes.append(decoded.error)
                continue

            node = self._node_from_wire(wire_node, role, decoded.value, bucket_sizes[role])
            added = graph.add_node(node)
            if not added.ok:
                causes.append(added.error)
                continue
            bucket_sizes[role] += 1

        # Explicit names first, so generated ones cannot take them
        edges = sorted(parsed.definition.edges, key=lambda edge: not edge.edge_name)
        for wire_edge in edges:
            connected = graph.connect(
                wire_edge.from_node_id,
                wire_edge.to_node_id,
                wire_edge.edge_name,
            )
            if not connected.ok:
                causes.append(connected.error)

        if causes:
            logger.warning(
                "import_failed",
                workflow_id=parsed.workflow_id,
                problems=[cause.kind.value for cause in causes],
            )
            return GraphResult.failure(
                GraphErrorKind.INVALID_DOCUMENT,
                f"Document has {len(causes)} problem(s): {causes[0].message}",
                causes=causes,
            )

        warnings = graph.reference_warnings()
        for warning in warnings:
            logger.warning(
                "unresolved_reference",
                node_id=warning.node_id,
                edge_name=warning.edge_name,
            )
        logger.info(
            "import_complete",
            workflow_id=parsed.workflow_id,
            node_count=len(graph.nodes),
            edge_count=len(graph.edges),
        )
        logger.debug(
            "import_graph",
            workflow_id=parsed.workflow_id,
            rendered=print_graph(graph, workflow_id=parsed.workflow_id),
        )
        return GraphResult.success(graph, warnings=warnings)

    def _node_from_wire(
        self,
        wire_node: WireNode,
        role: NodeRole,
        parameters: dict,
        bucket_index: int,
    ) -> Node:
        synthesized = self.synthesize_activity_name(role)
        activity_name = wire_node.activity_name or synthesized
        timeout = wire_node.start_to_close_timeout_in_minutes

        return Node(
            id=wire_node.node_id,
            role=role,
            name=wire_node.node_name,
            description=self.describe(activity_name, wire_node.node_type or role.value),
            parameters=parameters,
            position=self.layout_position(role, bucket_index),
            activity_name=None if activity_name == synthesized else activity_name,
            timeout_minutes=None if timeout == self.default_timeout_minutes else timeout,
            inputs=dict(wire_node.node_inputs),
        )


def _summarize(error: ValidationError) -> str:
    first = error.errors()[0]
    location = ".".join(str(part) for part in first["loc"])
    return f"{location}: {first['msg']}"

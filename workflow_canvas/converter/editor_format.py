"""The canvas' own JSON format.

This is what the editor exports to ``workflow.json`` and what the HTTP API
exchanges with the browser::

    {
        "nodes": [
            {"id": "trigger-1", "type": "trigger", "name": "...",
             "description": "...", "params": {...},
             "position": {"x": 50, "y": 100},
             "data": {"activityName": "...", ...}}
        ],
        "edges": [{"id": "edge1", "source": "trigger-1", "target": "..."}]
    }

``data`` holds the execution-only fields of a node so they survive a trip
through the browser. Condition trees are written in their envelope form.
"""
from typing import Any, Optional, Union

import structlog
from pydantic import BaseModel, Field, ValidationError

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

logger = structlog.get_logger()


class EditorNodeData(BaseModel):
    """Execution-only fields kept alongside a canvas node."""

    activityName: Optional[str] = None
    startToCloseTimeoutInMinutes: Optional[float] = None
    nodeInputs: dict[str, Any] = Field(default_factory=dict)


class EditorNode(BaseModel):
    id: Optional[str] = None
    type: str = NodeRole.ACTIVITY.editor_type
    name: str = ""
    description: str = ""
    params: dict[str, Any] = Field(default_factory=dict)
    position: Optional[Position] = None
    data: EditorNodeData = Field(default_factory=EditorNodeData)


class EditorEdge(BaseModel):
    id: Optional[str] = None
    source: str
    target: str
    label: Optional[str] = None


class EditorDocument(BaseModel):
    """A whole canvas."""

    nodes: list[EditorNode] = Field(default_factory=list)
    edges: list[EditorEdge] = Field(default_factory=list)


def to_editor_dict(graph: WorkflowGraph) -> dict:
    """Serialize a graph to the canvas JSON format."""
    nodes = []
    for node in graph.nodes:
        data = {}
        if node.activity_name is not None:
            data["activityName"] = node.activity_name
        if node.timeout_minutes is not None:
            data["startToCloseTimeoutInMinutes"] = node.timeout_minutes
        if node.inputs:
            data["nodeInputs"] = encode_parameters(node.inputs)
        nodes.append({
            "id": node.id,
            "type": node.role.editor_type,
            "name": node.name,
            "description": node.description,
            "params": encode_parameters(node.parameters),
            "position": {"x": node.position.x, "y": node.position.y},
            "data": data,
        })

    edges = [
        {"id": edge.name, "source": edge.source, "target": edge.target, "label": edge.name}
        for edge in graph.edges
    ]
    return {"nodes": nodes, "edges": edges}


def from_editor_dict(
    data: Union[dict, EditorDocument],
) -> ConversionResult[WorkflowGraph]:
    """Build a graph from canvas JSON.

    Nodes without an id get ``node-<index>``, nodes without a position are
    laid out in a row, edges without an id get the next ``edgeN`` name.
    Edges go through the same connection rules as interactive edits; any
    rejection fails the import with ``InvalidDocument``.
    """
    if isinstance(data, EditorDocument):
        document = data
    else:
        try:
            document = EditorDocument.model_validate(data)
        except ValidationError as e:
            return GraphResult.failure(
                GraphErrorKind.INVALID_DOCUMENT,
                f"Canvas JSON is invalid: {e.error_count()} error(s)",
            )

    graph = WorkflowGraph()
    causes: list[GraphError] = []

    for index, editor_node in enumerate(document.nodes):
        node_id = editor_node.id or f"node-{index}"
        params = decode_parameter_map(editor_node.params, node_id)
        inputs = decode_parameter_map(editor_node.data.nodeInputs, node_id)
        if not params.ok or not inputs.ok:
            causes.append(params.error or inputs.error)
            continue

        added = graph.add_node(Node(
            id=node_id,
            role=NodeRole.from_editor_type(editor_node.type),
            name=editor_node.name,
            description=editor_node.description,
            parameters=params.value,
            position=editor_node.position or Position(x=100 + index * 200, y=100),
            activity_name=editor_node.data.activityName,
            timeout_minutes=editor_node.data.startToCloseTimeoutInMinutes,
            inputs=inputs.value,
        ))
        if not added.ok:
            causes.append(added.error)

    # Explicit names first, so generated ones cannot take them
    for editor_edge in sorted(document.edges, key=lambda edge: not edge.id):
        connected = graph.connect(editor_edge.source, editor_edge.target, editor_edge.id)
        if not connected.ok:
            causes.append(connected.error)

    if causes:
        logger.warning(
            "editor_import_failed",
            problems=[cause.kind.value for cause in causes],
        )
        return GraphResult.failure(
            GraphErrorKind.INVALID_DOCUMENT,
            f"Canvas has {len(causes)} problem(s): {causes[0].message}",
            causes=causes,
        )

    return GraphResult.success(graph, warnings=graph.reference_warnings())

"""In-memory workflow graph edited on the canvas.

The graph is owned by one editing session and mutated only through the
methods below. Every mutation either succeeds or leaves the graph exactly as
it was, and reports the outcome as a ``GraphResult``.

Hard invariants kept after every mutation:
- every edge endpoint is a node of the graph
- no edge targets a Trigger node
- edge names are unique
- node ids are unique
"""
import copy
import re
from typing import Any, Iterator, Optional

import structlog

from workflow_canvas.expressions.references import extract_references
from workflow_canvas.graph.palette import create_node
from workflow_canvas.graph.validator import connection_problem
from workflow_canvas.models.results import (
    GraphError,
    GraphErrorKind,
    GraphResult,
    ValidationIssue,
)
from workflow_canvas.models.workflow_elements import (
    Edge,
    Node,
    NodeRole,
    Position,
)

logger = structlog.get_logger()

_EDGE_NAME_PATTERN = re.compile(r"^edge(\d+)$")


class WorkflowGraph:
    """Nodes and named edges of one workflow."""

    def __init__(self):
        self._nodes: dict[str, Node] = {}
        self._edges: dict[str, Edge] = {}

    # =========================================================================
    # Queries
    # =========================================================================

    @property
    def nodes(self) -> list[Node]:
        """Nodes in insertion order."""
        return list(self._nodes.values())

    @property
    def edges(self) -> list[Edge]:
        """Edges in insertion order."""
        return list(self._edges.values())

    def __contains__(self, node_id: object) -> bool:
        return node_id in self._nodes

    def __len__(self) -> int:
        return len(self._nodes)

    def __iter__(self) -> Iterator[Node]:
        return iter(self.nodes)

    def get_node(self, node_id: str) -> Optional[Node]:
        return self._nodes.get(node_id)

    def get_edge(self, name: str) -> Optional[Edge]:
        return self._edges.get(name)

    def incoming_edges(self, node_id: str) -> list[Edge]:
        return [edge for edge in self._edges.values() if edge.target == node_id]

    def outgoing_edges(self, node_id: str) -> list[Edge]:
        return [edge for edge in self._edges.values() if edge.source == node_id]

    def next_edge_name(self) -> str:
        """First ``edgeN`` name above every existing ``edgeN``."""
        highest = 0
        for name in self._edges:
            match = _EDGE_NAME_PATTERN.match(name)
            if match:
                highest = max(highest, int(match.group(1)))
        return f"edge{highest + 1}"

    # =========================================================================
    # Node mutations
    # =========================================================================

    def add_node(self, node: Node) -> GraphResult[Node]:
        """Add a copy of a node. Fails with ``DuplicateId`` if the id is taken.

        The stored copy is returned; the caller's instance stays detached.
        """
        if node.id in self._nodes:
            return GraphResult.failure(
                GraphErrorKind.DUPLICATE_ID,
                f"Node '{node.id}' already exists",
                node_id=node.id,
            )
        node = node.model_copy(deep=True)
        self._nodes[node.id] = node
        logger.debug("node_added", node_id=node.id, role=node.role.value)
        return GraphResult.success(node)

    def add_from_palette(
        self,
        role: NodeRole,
        position: Optional[Position] = None,
        name: Optional[str] = None,
    ) -> GraphResult[Node]:
        """Drop a new node of ``role`` onto the graph."""
        node = create_node(role, position=position, name=name, existing_ids=self._nodes)
        return self.add_node(node)

    def remove_node(self, node_id: str) -> GraphResult[list[Edge]]:
        """Remove a node and every edge touching it.

        The removed edges are returned as the result value.
        """
        if node_id not in self._nodes:
            return self._unknown_node(node_id)

        removed = [
            edge for edge in self._edges.values()
            if edge.source == node_id or edge.target == node_id
        ]
        for edge in removed:
            del self._edges[edge.name]
        del self._nodes[node_id]

        logger.debug(
            "node_removed",
            node_id=node_id,
            removed_edges=[edge.name for edge in removed],
        )
        return GraphResult.success(removed)

    def rename(self, node_id: str, new_name: str) -> GraphResult[Node]:
        return self._update_node(node_id, name=new_name)

    def set_description(self, node_id: str, description: str) -> GraphResult[Node]:
        return self._update_node(node_id, description=description)

    def set_parameters(self, node_id: str, params: dict[str, Any]) -> GraphResult[Node]:
        """Replace the parameter mapping of a node with a copy of ``params``."""
        return self._update_node(node_id, parameters=copy.deepcopy(dict(params)))

    def move_node(self, node_id: str, x: float, y: float) -> GraphResult[Node]:
        return self._update_node(node_id, position=Position(x=x, y=y))

    def _update_node(self, node_id: str, **fields: Any) -> GraphResult[Node]:
        node = self._nodes.get(node_id)
        if node is None:
            return self._unknown_node(node_id)
        for key, value in fields.items():
            setattr(node, key, value)
        return GraphResult.success(node)

    # =========================================================================
    # Edge mutations
    # =========================================================================

    def connect(
        self,
        source: str,
        target: str,
        name: Optional[str] = None,
    ) -> GraphResult[Edge]:
        """Add the edge ``source -> target``.

        Args:
            source: Source node id
            target: Target node id
            name: Edge name; the next free ``edgeN`` when omitted

        Returns:
            The new edge, or a failure with ``InvalidConnection`` or
            ``DuplicateEdgeName``.
        """
        problem = connection_problem(self, source, target)
        if problem:
            logger.info(
                "connection_rejected",
                source=source,
                target=target,
                reason=problem,
            )
            return GraphResult.failure(
                GraphErrorKind.INVALID_CONNECTION,
                problem,
                node_id=target,
                edge_name=name,
            )

        edge_name = name or self.next_edge_name()
        if edge_name in self._edges:
            return GraphResult.failure(
                GraphErrorKind.DUPLICATE_EDGE_NAME,
                f"Edge '{edge_name}' already exists",
                edge_name=edge_name,
            )

        edge = Edge(name=edge_name, source=source, target=target)
        self._edges[edge_name] = edge
        logger.debug("edge_added", edge_name=edge_name, source=source, target=target)
        return GraphResult.success(edge)

    def disconnect(self, edge_name: str) -> GraphResult[Edge]:
        """Remove one edge. Nodes are left untouched."""
        edge = self._edges.pop(edge_name, None)
        if edge is None:
            return GraphResult.failure(
                GraphErrorKind.UNKNOWN_EDGE,
                f"Edge '{edge_name}' not found",
                edge_name=edge_name,
            )
        logger.debug("edge_removed", edge_name=edge_name)
        return GraphResult.success(edge)

    # =========================================================================
    # Checks
    # =========================================================================

    def check_invariants(self) -> list[GraphError]:
        """Hard invariant violations. Empty for any graph built via this API."""
        errors = []
        for edge in self._edges.values():
            for endpoint in (edge.source, edge.target):
                if endpoint not in self._nodes:
                    errors.append(GraphError(
                        kind=GraphErrorKind.DANGLING_EDGE,
                        message=f"Edge '{edge.name}' references missing node '{endpoint}'",
                        node_id=endpoint,
                        edge_name=edge.name,
                    ))
            target = self._nodes.get(edge.target)
            if target is not None and target.role == NodeRole.TRIGGER:
                errors.append(GraphError(
                    kind=GraphErrorKind.INVALID_CONNECTION,
                    message=f"Edge '{edge.name}' targets trigger node '{edge.target}'",
                    node_id=edge.target,
                    edge_name=edge.name,
                ))
        return errors

    def reference_warnings(self) -> list[ValidationIssue]:
        """Reference tokens that do not name an incoming edge of their node."""
        warnings = []
        for node in self._nodes.values():
            incoming = {edge.name for edge in self.incoming_edges(node.id)}
            for edge_name in sorted(extract_references(node.parameters)):
                if edge_name in incoming:
                    continue
                if edge_name in self._edges:
                    message = (
                        f"Node '{node.id}' references edge '{edge_name}' "
                        f"which does not feed it"
                    )
                else:
                    message = f"Node '{node.id}' references unknown edge '{edge_name}'"
                warnings.append(ValidationIssue(
                    category="unresolved_reference",
                    message=message,
                    node_id=node.id,
                    edge_name=edge_name,
                ))
        return warnings

    def snapshot(self) -> dict:
        """Semantic content of the graph, without layout.

        Two graphs with equal snapshots describe the same workflow.
        """
        return {
            "nodes": {
                node.id: {
                    "role": node.role.value,
                    "name": node.name,
                    "parameters": node.parameters,
                    "activity_name": node.activity_name,
                    "timeout_minutes": node.timeout_minutes,
                    "inputs": node.inputs,
                }
                for node in self._nodes.values()
            },
            "edges": sorted(
                (edge.name, edge.source, edge.target)
                for edge in self._edges.values()
            ),
        }

    def copy(self) -> "WorkflowGraph":
        """Independent deep copy."""
        clone = WorkflowGraph()
        clone._nodes = {key: node.model_copy(deep=True) for key, node in self._nodes.items()}
        clone._edges = {key: edge.model_copy() for key, edge in self._edges.items()}
        return clone

    def _unknown_node(self, node_id: str) -> GraphResult:
        return GraphResult.failure(
            GraphErrorKind.UNKNOWN_NODE,
            f"Node '{node_id}' not found",
            node_id=node_id,
        )

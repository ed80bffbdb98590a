"""Connection rules consulted before any edge is added.

Triggers are graph roots: they may feed any number of nodes but never
receive an edge. Self loops have no meaning for the execution engine.
Cycles between distinct nodes are allowed, since branches may re-converge.
"""
from typing import TYPE_CHECKING, Optional

from workflow_canvas.models.workflow_elements import NodeRole

if TYPE_CHECKING:
    from workflow_canvas.graph.workflow_graph import WorkflowGraph


def connection_problem(
    graph: "WorkflowGraph",
    source: str,
    target: str,
) -> Optional[str]:
    """Explain why ``source -> target`` is not allowed, or None if it is."""
    if source not in graph:
        return f"Source node '{source}' not found"
    if target not in graph:
        return f"Target node '{target}' not found"
    if source == target:
        return f"Node '{source}' cannot connect to itself"
    if graph.get_node(target).role == NodeRole.TRIGGER:
        return f"Trigger node '{target}' cannot have incoming connections"
    return None


def can_connect(graph: "WorkflowGraph", source: str, target: str) -> bool:
    """Pure predicate: may an edge ``source -> target`` be added?"""
    return connection_problem(graph, source, target) is None

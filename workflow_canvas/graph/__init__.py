"""Workflow graph model and connection rules."""
from workflow_canvas.graph.workflow_graph import WorkflowGraph
from workflow_canvas.graph.validator import can_connect, connection_problem
from workflow_canvas.graph.palette import NODE_TEMPLATES, create_node

__all__ = [
    "WorkflowGraph",
    "can_connect",
    "connection_problem",
    "NODE_TEMPLATES",
    "create_node",
]

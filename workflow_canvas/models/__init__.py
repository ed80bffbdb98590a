"""Pydantic models and result types for the workflow graph."""
from workflow_canvas.models.results import (
    ConversionResult,
    GraphError,
    GraphErrorKind,
    GraphResult,
    ValidationIssue,
    WorkflowGraphException,
)
from workflow_canvas.models.workflow_elements import (
    Edge,
    Node,
    NodeRole,
    Position,
)

__all__ = [
    "ConversionResult",
    "GraphError",
    "GraphErrorKind",
    "GraphResult",
    "ValidationIssue",
    "WorkflowGraphException",
    "Edge",
    "Node",
    "NodeRole",
    "Position",
]

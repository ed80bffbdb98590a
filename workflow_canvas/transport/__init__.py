"""Workflow backend integration."""
from workflow_canvas.transport.client import (
    BadFormatError,
    WorkflowAPIClient,
    WorkflowAPIError,
    WorkflowNetworkError,
    WorkflowNotFoundError,
)

__all__ = [
    "BadFormatError",
    "WorkflowAPIClient",
    "WorkflowAPIError",
    "WorkflowNetworkError",
    "WorkflowNotFoundError",
]

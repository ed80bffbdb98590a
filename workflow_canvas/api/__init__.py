"""API route modules."""
from workflow_canvas.api import convert, workflows

__all__ = ["convert", "workflows"]

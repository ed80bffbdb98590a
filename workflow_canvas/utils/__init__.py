"""Text rendering helpers."""
from workflow_canvas.utils.graph_printer import print_graph, print_graph_compact

__all__ = ["print_graph", "print_graph_compact"]

"""Utility to print workflow graphs in clean text representation."""

from typing import Optional

from workflow_canvas.graph.workflow_graph import WorkflowGraph
from workflow_canvas.models.workflow_elements import NodeRole


def print_graph(
    graph: WorkflowGraph,
    include_params: bool = False,
    workflow_id: Optional[str] = None,
) -> str:
    """
    Convert a workflow graph to a clean text representation.

    Args:
        graph: Graph to render
        include_params: Include node parameters in output (default: False)
        workflow_id: Shown in the header when given

    Returns:
        Formatted string representation of the graph
    """
    lines = []

    lines.append("=" * 60)
    lines.append(f"  WORKFLOW: {workflow_id or 'Unsaved Workflow'}")
    lines.append("=" * 60)
    lines.append(f"  Nodes: {len(graph.nodes)}  Edges: {len(graph.edges)}")
    lines.append("")

    lines.append("  NODES:")
    lines.append("  " + "-" * 56)

    for i, node in enumerate(graph.nodes, 1):
        icon = _get_role_icon(node.role)
        lines.append(f"  {icon} [{i}] {node.name or node.id}")
        lines.append(f"       Id: {node.id}")
        lines.append(f"       Role: {node.role.value}")
        lines.append(f"       Position: ({node.position.x:g}, {node.position.y:g})")

        if node.activity_name:
            lines.append(f"       Activity: {node.activity_name}")

        if include_params and node.parameters:
            lines.append("       Parameters:")
            for key, value in node.parameters.items():
                lines.append(f"         • {key}: {_format_param_value(value)}")

        lines.append("")

    lines.append("  FLOW:")
    lines.append("  " + "-" * 56)

    if graph.edges:
        for line in _build_flow_diagram(graph):
            lines.append(f"  {line}")
    else:
        lines.append("  (No connections defined)")

    lines.append("")
    lines.append("=" * 60)

    return "\n".join(lines)


def print_graph_compact(graph: WorkflowGraph) -> str:
    """One line listing every edge as ``source -[name]-> target``."""
    if not graph.edges:
        return " | ".join(
            f"{_get_role_icon(node.role)} {node.name or node.id}" for node in graph.nodes
        )

    parts = []
    for edge in graph.edges:
        parts.append(f"{edge.source} -[{edge.name}]-> {edge.target}")
    return " | ".join(parts)


def _get_role_icon(role: NodeRole) -> str:
    """Get an icon for a node role."""
    icons = {
        NodeRole.TRIGGER: "⚡",
        NodeRole.CONTROLLER: "🔀",
        NodeRole.ACTIVITY: "⚙️",
    }
    return icons.get(role, "•")


def _format_param_value(value, max_len: int = 50) -> str:
    """Format a parameter value for display."""
    if isinstance(value, str):
        if len(value) > max_len:
            return f'"{value[:max_len]}..."'
        return f'"{value}"'
    elif isinstance(value, dict):
        return f"{{...}} ({len(value)} keys)"
    elif isinstance(value, list):
        return f"[...] ({len(value)} items)"
    else:
        return str(value)


def _build_flow_diagram(graph: WorkflowGraph) -> list:
    """Build a simple text flow diagram starting from nodes without incoming edges."""
    lines = []
    visited = set()

    def traverse(node_id, depth=0):
        if node_id in visited:
            return
        visited.add(node_id)

        node = graph.get_node(node_id)
        indent = "  " * depth
        lines.append(f"{indent}{_get_role_icon(node.role)} {node.name or node.id}")

        outgoing = graph.outgoing_edges(node_id)
        for i, edge in enumerate(outgoing):
            connector = "└─" if i == len(outgoing) - 1 else "├─"
            lines.append(f"{indent}  {connector}[{edge.name}]→")
            traverse(edge.target, depth + 1)

    start_nodes = [node.id for node in graph.nodes if not graph.incoming_edges(node.id)]
    for start in start_nodes:
        traverse(start)

    # Cycles with no entry point
    for node in graph.nodes:
        traverse(node.id)

    return lines if lines else ["(No flow connections)"]

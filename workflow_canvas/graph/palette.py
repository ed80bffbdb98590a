"""Node templates offered by the canvas palette.

Dropping a template on the canvas creates a node with a fresh id of the form
``<role>-<milliseconds>``, a default name and empty parameters.
"""
import time
from typing import Container, Optional

from pydantic import BaseModel

from workflow_canvas.models.workflow_elements import Node, NodeRole, Position


class NodeTemplate(BaseModel):
    """Definition of a palette entry."""

    role: NodeRole
    label: str
    description: str

    @property
    def default_name(self) -> str:
        return f"New {self.label}"


NODE_TEMPLATES: dict[NodeRole, NodeTemplate] = {
    NodeRole.TRIGGER: NodeTemplate(
        role=NodeRole.TRIGGER,
        label="Trigger Node",
        description="Starting point of workflow",
    ),
    NodeRole.CONTROLLER: NodeTemplate(
        role=NodeRole.CONTROLLER,
        label="Controller Node",
        description="Conditional routing logic",
    ),
    NodeRole.ACTIVITY: NodeTemplate(
        role=NodeRole.ACTIVITY,
        label="Activity Node",
        description="Performs tasks and actions",
    ),
}


def get_template(role: NodeRole) -> NodeTemplate:
    """Get the palette template for a role."""
    return NODE_TEMPLATES[role]


def generate_node_id(
    role: NodeRole,
    existing_ids: Container[str] = (),
    now_ms: Optional[int] = None,
) -> str:
    """Generate ``<role>-<timestamp>``, suffixed when it is already taken."""
    stamp = now_ms if now_ms is not None else int(time.time() * 1000)
    base = f"{role.editor_type}-{stamp}"
    candidate = base
    suffix = 1
    while candidate in existing_ids:
        candidate = f"{base}-{suffix}"
        suffix += 1
    return candidate


def create_node(
    role: NodeRole,
    position: Optional[Position] = None,
    name: Optional[str] = None,
    existing_ids: Container[str] = (),
) -> Node:
    """Create a new node from the palette template for ``role``."""
    template = get_template(role)
    return Node(
        id=generate_node_id(role, existing_ids),
        role=role,
        name=name or template.default_name,
        description=template.description,
        parameters={},
        position=position or Position(),
    )

"""Editor-side elements of a workflow graph.

Nodes and edges as the canvas sees them: positioned nodes with a fixed role
and simple ``source -> target`` edges. Execution-only fields (activity
binding, timeout, node inputs) are carried along so that a document imported
from the backend can be written back without losing them.
"""
from enum import Enum
from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field


class NodeRole(str, Enum):
    """Fixed category of a node. Values match the wire ``nodeType``."""
    TRIGGER = "Trigger"
    CONTROLLER = "Controller"
    ACTIVITY = "Activity"

    @property
    def editor_type(self) -> str:
        """Lowercase type name used by the canvas (``trigger``, ...)."""
        return self.value.lower()

    @classmethod
    def from_wire(cls, value: Optional[str]) -> "NodeRole":
        """Map a wire ``nodeType``; unknown values fall back to Activity."""
        for role in cls:
            if value == role.value:
                return role
        return cls.ACTIVITY

    @classmethod
    def from_editor_type(cls, value: Optional[str]) -> "NodeRole":
        """Map a canvas type name; unknown values fall back to Activity."""
        for role in cls:
            if value == role.editor_type:
                return role
        return cls.ACTIVITY


class Position(BaseModel):
    """2D position for node layout."""

    x: float = Field(0, description="X coordinate")
    y: float = Field(0, description="Y coordinate")


class Node(BaseModel):
    """A node on the canvas."""

    id: str = Field(..., min_length=1, frozen=True, description="Unique node identifier")
    role: NodeRole = Field(..., frozen=True, description="Trigger, Controller or Activity")
    name: str = Field("", description="Display name, not required unique")
    description: str = Field("", description="Free text")
    parameters: dict[str, Any] = Field(
        default_factory=dict,
        description="Literal values, reference tokens or condition trees",
    )
    position: Position = Field(
        default_factory=Position,
        description="Presentation only",
    )

    # Execution-only fields
    activity_name: Optional[str] = Field(
        None,
        description="Explicit activity binding",
    )
    timeout_minutes: Optional[float] = Field(
        None,
        description="startToCloseTimeoutInMinutes",
    )
    inputs: dict[str, Any] = Field(
        default_factory=dict,
        description="nodeInputs mapping, carried verbatim",
    )


class Edge(BaseModel):
    """A named connection between two nodes.

    The name doubles as the edge id. In the execution document it is the
    token other nodes use to reference the value produced along this edge.
    """

    model_config = ConfigDict(frozen=True)

    name: str = Field(..., min_length=1, description="Unique edge name")
    source: str = Field(..., description="Source node id")
    target: str = Field(..., description="Target node id")

    @property
    def id(self) -> str:
        return self.name

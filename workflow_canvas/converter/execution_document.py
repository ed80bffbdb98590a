"""Wire models for the execution document exchanged with the backend.

Field names on the wire are camelCase and case-sensitive::

    {
        "workflowId": "twflow_b210db0a85",
        "definition": {
            "nodes": {
                "<key>": {
                    "nodeName": str,
                    "nodeId": str,
                    "nodeParams": {"params": {...}},
                    "nodeInputs": {...},
                    "nodeType": "Trigger" | "Controller" | "Activity",
                    "activityName": str,
                    "startToCloseTimeoutInMinutes": float
                }
            },
            "edges": [{"fromNodeId": str, "toNodeId": str, "edgeName": str}]
        }
    }

Incoming documents are read leniently (missing params, inputs, type or
activity are tolerated); outgoing documents always carry every field.
"""
from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator


class WireNodeParams(BaseModel):
    """The ``nodeParams`` envelope."""

    params: dict[str, Any] = Field(default_factory=dict)

    @field_validator("params", mode="before")
    @classmethod
    def default_params(cls, v):
        return {} if v is None else v


class WireNode(BaseModel):
    """A node definition as stored by the backend."""

    model_config = ConfigDict(populate_by_name=True)

    node_name: str = Field("", alias="nodeName")
    node_id: str = Field(..., alias="nodeId", min_length=1)
    node_params: WireNodeParams = Field(
        default_factory=WireNodeParams,
        alias="nodeParams",
    )
    node_inputs: dict[str, Any] = Field(default_factory=dict, alias="nodeInputs")
    node_type: Optional[str] = Field(None, alias="nodeType")
    activity_name: Optional[str] = Field(None, alias="activityName")
    start_to_close_timeout_in_minutes: Optional[float] = Field(
        None,
        alias="startToCloseTimeoutInMinutes",
    )

    @field_validator("node_params", mode="before")
    @classmethod
    def default_node_params(cls, v):
        return {} if v is None else v

    @field_validator("node_inputs", mode="before")
    @classmethod
    def default_node_inputs(cls, v):
        return {} if v is None else v

    @field_validator("node_name", mode="before")
    @classmethod
    def default_node_name(cls, v):
        return "" if v is None else v

    @field_validator("node_type", mode="before")
    @classmethod
    def stringify_node_type(cls, v):
        # Unrecognized types, strings or not, are mapped to a role later
        return v if v is None or isinstance(v, str) else str(v)


class WireEdge(BaseModel):
    """An edge as stored by the backend."""

    model_config = ConfigDict(populate_by_name=True)

    from_node_id: str = Field(..., alias="fromNodeId")
    to_node_id: str = Field(..., alias="toNodeId")
    edge_name: Optional[str] = Field(None, alias="edgeName")


class WorkflowDefinition(BaseModel):
    """The ``definition`` block: keyed nodes plus an edge list."""

    nodes: dict[str, WireNode] = Field(default_factory=dict)
    edges: list[WireEdge] = Field(default_factory=list)

    @field_validator("nodes", "edges", mode="before")
    @classmethod
    def default_collections(cls, v, info):
        if v is None:
            return {} if info.field_name == "nodes" else []
        return v


class ExecutionDocument(BaseModel):
    """Root of the execution representation."""

    model_config = ConfigDict(populate_by_name=True)

    workflow_id: str = Field("", alias="workflowId")
    definition: WorkflowDefinition

    def to_wire(self) -> dict:
        """Plain JSON-compatible dict with wire field names."""
        return self.model_dump(by_alias=True, mode="json")

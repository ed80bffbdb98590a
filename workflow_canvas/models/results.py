"""Tagged results and error values for graph and conversion operations.

Graph mutations and format conversions never raise past their own boundary.
They return a ``GraphResult`` that is either a success carrying a value (and
possibly warnings) or a failure carrying one ``GraphError``. Callers that
prefer exceptions can call ``unwrap()``.
"""
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Generic, Optional, TypeVar

T = TypeVar("T")


class GraphErrorKind(str, Enum):
    """Kinds of failures produced by the graph model and the converter."""
    DUPLICATE_ID = "DuplicateId"
    DUPLICATE_EDGE_NAME = "DuplicateEdgeName"
    DUPLICATE_KEY = "DuplicateKey"
    INVALID_CONNECTION = "InvalidConnection"
    DANGLING_EDGE = "DanglingEdge"
    INVALID_DOCUMENT = "InvalidDocument"
    MALFORMED_EXPRESSION = "MalformedExpression"
    UNKNOWN_NODE = "UnknownNode"
    UNKNOWN_EDGE = "UnknownEdge"


@dataclass
class GraphError:
    """A single failure, with the node or edge it concerns."""

    kind: GraphErrorKind
    message: str
    node_id: Optional[str] = None
    edge_name: Optional[str] = None
    causes: list["GraphError"] = field(default_factory=list)

    def to_dict(self) -> dict:
        data = {
            "kind": self.kind.value,
            "message": self.message,
            "node_id": self.node_id,
            "edge_name": self.edge_name,
        }
        if self.causes:
            data["causes"] = [cause.to_dict() for cause in self.causes]
        return data


@dataclass
class ValidationIssue:
    """A non-fatal finding, such as an unresolvable reference token."""

    category: str
    message: str
    node_id: Optional[str] = None
    edge_name: Optional[str] = None
    severity: str = "warning"

    def to_dict(self) -> dict:
        return {
            "category": self.category,
            "message": self.message,
            "node_id": self.node_id,
            "edge_name": self.edge_name,
            "severity": self.severity,
        }


class WorkflowGraphException(Exception):
    """Raised by ``GraphResult.unwrap()`` on a failed result."""

    def __init__(self, error: GraphError):
        super().__init__(error.message)
        self.error = error

    @property
    def kind(self) -> GraphErrorKind:
        return self.error.kind


@dataclass
class GraphResult(Generic[T]):
    """Outcome of a graph mutation or a conversion."""

    ok: bool
    value: Optional[T] = None
    error: Optional[GraphError] = None
    warnings: list[ValidationIssue] = field(default_factory=list)

    @classmethod
    def success(
        cls,
        value: Optional[T] = None,
        warnings: Optional[list[ValidationIssue]] = None,
    ) -> "GraphResult[T]":
        return cls(ok=True, value=value, warnings=list(warnings or []))

    @classmethod
    def failure(
        cls,
        kind: GraphErrorKind,
        message: str,
        node_id: Optional[str] = None,
        edge_name: Optional[str] = None,
        causes: Optional[list[GraphError]] = None,
    ) -> "GraphResult[T]":
        return cls(
            ok=False,
            error=GraphError(
                kind=kind,
                message=message,
                node_id=node_id,
                edge_name=edge_name,
                causes=list(causes or []),
            ),
        )

    @classmethod
    def from_error(cls, error: GraphError) -> "GraphResult[T]":
        return cls(ok=False, error=error)

    @property
    def kind(self) -> Optional[GraphErrorKind]:
        """Error kind of a failed result, None on success."""
        return self.error.kind if self.error else None

    def unwrap(self) -> T:
        """Return the value or raise ``WorkflowGraphException``."""
        if not self.ok:
            raise WorkflowGraphException(self.error)
        return self.value

    def to_dict(self) -> dict[str, Any]:
        return {
            "ok": self.ok,
            "error": self.error.to_dict() if self.error else None,
            "warnings": [warning.to_dict() for warning in self.warnings],
        }


# Conversions share the same result shape as graph mutations
ConversionResult = GraphResult

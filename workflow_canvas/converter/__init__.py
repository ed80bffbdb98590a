"""Conversion between the editor graph and the execution document."""
from workflow_canvas.converter.identifier import build_key_map, derive_key
from workflow_canvas.converter.execution_document import (
    ExecutionDocument,
    WireEdge,
    WireNode,
    WorkflowDefinition,
)
from workflow_canvas.converter.format_converter import FormatConverter
from workflow_canvas.converter.editor_format import (
    EditorDocument,
    from_editor_dict,
    to_editor_dict,
)

__all__ = [
    "build_key_map",
    "derive_key",
    "ExecutionDocument",
    "WireEdge",
    "WireNode",
    "WorkflowDefinition",
    "FormatConverter",
    "EditorDocument",
    "from_editor_dict",
    "to_editor_dict",
]

"""Conversion endpoints used by the canvas."""
from typing import Any, Optional

import structlog
from fastapi import APIRouter, HTTPException
from pydantic import BaseModel, Field

from workflow_canvas.converter.editor_format import (
    EditorDocument,
    from_editor_dict,
    to_editor_dict,
)
from workflow_canvas.converter.format_converter import FormatConverter
from workflow_canvas.graph.palette import NODE_TEMPLATES
from workflow_canvas.graph.validator import connection_problem
from workflow_canvas.models.results import GraphResult

logger = structlog.get_logger()

router = APIRouter()


class ImportResponse(BaseModel):
    """A backend document converted for the canvas."""

    workflow_id: str
    graph: dict
    warnings: list[dict] = Field(default_factory=list)


class ExportRequest(BaseModel):
    """Canvas JSON to convert for the backend."""

    workflow_id: str = Field("", description="workflowId of the produced document")
    graph: EditorDocument


class ExportResponse(BaseModel):
    document: dict
    warnings: list[dict] = Field(default_factory=list)


class ConnectionCheckRequest(BaseModel):
    """Would ``source -> target`` be accepted on this canvas?"""

    graph: EditorDocument
    source: str
    target: str


class ConnectionCheckResponse(BaseModel):
    valid: bool
    reason: Optional[str] = None


def raise_for_result(result: GraphResult) -> None:
    """Turn a failed core result into a 422 carrying the error kind."""
    if not result.ok:
        raise HTTPException(status_code=422, detail=result.error.to_dict())


@router.post("/convert/import", response_model=ImportResponse)
async def import_document(document: dict[str, Any]) -> ImportResponse:
    """Convert an execution document into canvas JSON."""
    result = FormatConverter().from_execution_document(document)
    raise_for_result(result)

    return ImportResponse(
        workflow_id=str(document.get("workflowId", "")),
        graph=to_editor_dict(result.value),
        warnings=[warning.to_dict() for warning in result.warnings],
    )


@router.post("/convert/export", response_model=ExportResponse)
async def export_document(request: ExportRequest) -> ExportResponse:
    """Convert canvas JSON into an execution document."""
    graph = from_editor_dict(request.graph)
    raise_for_result(graph)

    exported = FormatConverter().to_execution_document(graph.value, request.workflow_id)
    raise_for_result(exported)

    return ExportResponse(
        document=exported.value.to_wire(),
        warnings=[warning.to_dict() for warning in exported.warnings],
    )


@router.post("/connections/validate", response_model=ConnectionCheckResponse)
async def validate_connection(request: ConnectionCheckRequest) -> ConnectionCheckResponse:
    """Check a prospective edge before the canvas draws it."""
    graph = from_editor_dict(request.graph)
    raise_for_result(graph)

    reason = connection_problem(graph.value, request.source, request.target)
    if reason:
        logger.debug("connection_check_rejected", source=request.source, target=request.target)
    return ConnectionCheckResponse(valid=reason is None, reason=reason)


@router.get("/palette")
async def get_palette() -> list[dict]:
    """Node templates offered by the palette."""
    return [
        {
            "type": template.role.editor_type,
            "label": template.label,
            "description": template.description,
        }
        for template in NODE_TEMPLATES.values()
    ]

"""Workflow endpoints: load from and save to the backend."""
import structlog
from fastapi import APIRouter, Depends, HTTPException
from pydantic import BaseModel, Field

from workflow_canvas.api.convert import raise_for_result
from workflow_canvas.converter.editor_format import (
    EditorDocument,
    from_editor_dict,
    to_editor_dict,
)
from workflow_canvas.converter.format_converter import FormatConverter
from workflow_canvas.transport.client import (
    BadFormatError,
    WorkflowAPIClient,
    WorkflowAPIError,
    WorkflowNotFoundError,
)

logger = structlog.get_logger()

router = APIRouter()


class WorkflowResponse(BaseModel):
    """A backend workflow as canvas JSON."""

    workflow_id: str
    graph: dict
    warnings: list[dict] = Field(default_factory=list)


class SaveWorkflowResponse(BaseModel):
    success: bool
    workflow_id: str
    document: dict
    warnings: list[dict] = Field(default_factory=list)
    message: str


def get_workflow_client() -> WorkflowAPIClient:
    """Backend client dependency."""
    return WorkflowAPIClient()


def _raise_for_api_error(e: WorkflowAPIError, workflow_id: str) -> None:
    error_detail = str(e)
    if e.response_body:
        error_detail = f"{e}: {e.response_body}"
    logger.error(
        "workflow_backend_error",
        workflow_id=workflow_id,
        kind=e.kind,
        status_code=e.status_code,
    )

    if isinstance(e, WorkflowNotFoundError):
        status_code = 404
    elif isinstance(e, BadFormatError):
        status_code = 400
    else:
        status_code = 502
    raise HTTPException(
        status_code=status_code,
        detail={"kind": e.kind, "message": error_detail},
    )


@router.get("/workflows/{workflow_id}", response_model=WorkflowResponse)
async def get_workflow(
    workflow_id: str,
    client: WorkflowAPIClient = Depends(get_workflow_client),
) -> WorkflowResponse:
    """Fetch a workflow from the backend and return it as canvas JSON."""
    try:
        document = await client.get_workflow(workflow_id)
    except WorkflowAPIError as e:
        _raise_for_api_error(e, workflow_id)

    result = FormatConverter().from_execution_document(document)
    raise_for_result(result)

    return WorkflowResponse(
        workflow_id=workflow_id,
        graph=to_editor_dict(result.value),
        warnings=[warning.to_dict() for warning in result.warnings],
    )


@router.put("/workflows/{workflow_id}", response_model=SaveWorkflowResponse)
async def save_workflow(
    workflow_id: str,
    request: EditorDocument,
    client: WorkflowAPIClient = Depends(get_workflow_client),
) -> SaveWorkflowResponse:
    """
    Save canvas JSON to the backend.

    The canvas is validated with the same connection rules as interactive
    edits, converted to an execution document and submitted once.
    """
    graph = from_editor_dict(request)
    raise_for_result(graph)

    exported = FormatConverter().to_execution_document(graph.value, workflow_id)
    raise_for_result(exported)
    document = exported.value.to_wire()

    try:
        await client.update_workflow(workflow_id, document)
    except WorkflowAPIError as e:
        _raise_for_api_error(e, workflow_id)

    logger.info("workflow_saved_via_api", workflow_id=workflow_id)
    return SaveWorkflowResponse(
        success=True,
        workflow_id=workflow_id,
        document=document,
        warnings=[warning.to_dict() for warning in exported.warnings],
        message="Workflow saved to server successfully",
    )

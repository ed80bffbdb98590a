"""Workflow backend REST client.

Handles:
- Fetching a workflow's execution document
- Submitting an updated execution document
- Listing the node catalogue offered by the backend
- Creating new workflows

Each call is a single request. Nothing is retried here; a failed save is
retried, if at all, by whoever triggered it.
"""
from typing import Optional

import httpx
import structlog

from workflow_canvas.config import get_settings

logger = structlog.get_logger()


class WorkflowAPIError(Exception):
    """Exception for workflow backend errors."""

    kind = "APIError"

    def __init__(self, message: str, status_code: Optional[int] = None, response_body: Optional[dict] = None):
        super().__init__(message)
        self.status_code = status_code
        self.response_body = response_body


class WorkflowNotFoundError(WorkflowAPIError):
    """The backend does not know the workflow (404)."""

    kind = "NotFound"


class BadFormatError(WorkflowAPIError):
    """The backend rejected the submitted document (400)."""

    kind = "BadFormat"


class WorkflowNetworkError(WorkflowAPIError):
    """The backend could not be reached."""

    kind = "NetworkError"


_STATUS_ERRORS: dict[int, type[WorkflowAPIError]] = {
    400: BadFormatError,
    404: WorkflowNotFoundError,
}


class WorkflowAPIClient:
    """Client for the workflow execution backend."""

    def __init__(
        self,
        base_url: Optional[str] = None,
        api_key: Optional[str] = None,
        timeout: Optional[float] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        settings = get_settings()
        self.base_url = (base_url or settings.workflow_api_base_url).rstrip("/")
        self.api_key = api_key if api_key is not None else settings.workflow_api_key
        self.timeout = timeout or settings.workflow_api_timeout
        self.transport = transport

        self.headers = {"Content-Type": "application/json"}
        if self.api_key:
            self.headers["Authorization"] = f"Bearer {self.api_key}"

    async def _request(
        self,
        method: str,
        endpoint: str,
        json: Optional[dict] = None,
        params: Optional[dict] = None,
    ) -> dict:
        """Make an HTTP request to the workflow backend."""

        url = f"{self.base_url}{endpoint}"

        async with httpx.AsyncClient(transport=self.transport) as client:
            try:
                response = await client.request(
                    method=method,
                    url=url,
                    headers=self.headers,
                    json=json,
                    params=params,
                    timeout=self.timeout,
                )
            except httpx.HTTPError as e:
                logger.error("workflow_api_network_error", endpoint=endpoint, error=str(e))
                raise WorkflowNetworkError(f"HTTP error: {str(e)}")

        logger.debug(
            "workflow_api_request",
            method=method,
            endpoint=endpoint,
            status_code=response.status_code,
        )

        if response.status_code >= 400:
            error_body = _json_or_none(response)
            error_class = _STATUS_ERRORS.get(response.status_code, WorkflowAPIError)
            logger.error(
                "workflow_api_error",
                endpoint=endpoint,
                status_code=response.status_code,
                response_body=error_body,
            )
            raise error_class(
                f"Workflow API error: {response.status_code}",
                status_code=response.status_code,
                response_body=error_body,
            )

        return _json_or_none(response) or {}

    async def get_workflow(self, workflow_id: str) -> dict:
        """Fetch a workflow's execution document.

        Args:
            workflow_id: The backend workflow ID

        Returns:
            The document: ``{"workflowId": ..., "definition": {...}}``
        """
        logger.info("get_workflow", workflow_id=workflow_id)

        return await self._request(
            method="GET",
            endpoint=f"/workflows/{workflow_id}",
        )

    async def update_workflow(self, workflow_id: str, document: dict) -> dict:
        """Submit an updated execution document.

        Args:
            workflow_id: The backend workflow ID
            document: The execution document in wire form

        Returns:
            The backend's response body
        """
        logger.info(
            "update_workflow",
            workflow_id=workflow_id,
            node_count=len(document.get("definition", {}).get("nodes", {})),
        )

        result = await self._request(
            method="PUT",
            endpoint=f"/workflow/update/{workflow_id}",
            json=document,
        )

        logger.info("workflow_updated", workflow_id=workflow_id)

        return result

    async def get_nodes(self) -> dict:
        """Get the node catalogue offered by the backend."""
        logger.debug("get_nodes")

        return await self._request(method="GET", endpoint="/nodes")

    async def create_workflow(self, document: dict) -> dict:
        """Create a new workflow.

        Args:
            document: The execution document in wire form

        Returns:
            The created workflow data
        """
        logger.info("create_workflow", workflow_id=document.get("workflowId"))

        return await self._request(
            method="POST",
            endpoint="/workflows",
            json=document,
        )


def _json_or_none(response: httpx.Response) -> Optional[dict]:
    if not response.content:
        return None
    try:
        return response.json()
    except ValueError:
        return {"raw": response.text}

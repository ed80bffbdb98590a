"""Editing session: owns one workflow graph between load and save.

The session is the only owner of its ``WorkflowGraph``; the canvas mutates
it through the graph's own methods and asks the session to load or save.

Load falls back when the backend cannot provide a usable document:
1. keep the last graph that was loaded or saved successfully, if any
2. otherwise show the bundled demo workflow (demo mode), if enabled
3. otherwise start from an empty graph

Save converts the graph and submits it once. In demo mode the document is
only kept locally. A failed save never touches the graph.
"""
from dataclasses import dataclass, field
from typing import Optional

import structlog

from workflow_canvas.config import get_settings
from workflow_canvas.converter.format_converter import FormatConverter
from workflow_canvas.data.sample_workflows import get_demo_document
from workflow_canvas.graph.workflow_graph import WorkflowGraph
from workflow_canvas.models.results import ValidationIssue
from workflow_canvas.transport.client import WorkflowAPIClient, WorkflowAPIError

logger = structlog.get_logger()


@dataclass
class SessionOutcome:
    """Result of a load or save."""

    ok: bool
    error_kind: Optional[str] = None
    message: str = ""
    warnings: list[ValidationIssue] = field(default_factory=list)
    saved_locally: bool = False

    def to_dict(self) -> dict:
        return {
            "ok": self.ok,
            "error_kind": self.error_kind,
            "message": self.message,
            "warnings": [warning.to_dict() for warning in self.warnings],
            "saved_locally": self.saved_locally,
        }


class EditorSession:
    """One workflow being edited."""

    def __init__(
        self,
        workflow_id: Optional[str] = None,
        client: Optional[WorkflowAPIClient] = None,
        converter: Optional[FormatConverter] = None,
        demo_fallback: Optional[bool] = None,
    ):
        settings = get_settings()
        self.workflow_id = workflow_id or settings.default_workflow_id
        self.client = client or WorkflowAPIClient()
        self.converter = converter or FormatConverter()
        self.demo_fallback = (
            demo_fallback if demo_fallback is not None else settings.demo_fallback_enabled
        )

        self.graph = WorkflowGraph()
        self.is_demo = False
        self.last_error: Optional[SessionOutcome] = None
        self.last_saved_document: Optional[dict] = None
        self._known_good: Optional[WorkflowGraph] = None

    async def load(self, workflow_id: Optional[str] = None) -> SessionOutcome:
        """Fetch the workflow from the backend and make it the current graph."""
        if workflow_id:
            self.workflow_id = workflow_id

        logger.info("workflow_load_start", workflow_id=self.workflow_id)
        try:
            document = await self.client.get_workflow(self.workflow_id)
        except WorkflowAPIError as e:
            logger.warning(
                "workflow_load_failed",
                workflow_id=self.workflow_id,
                kind=e.kind,
                status_code=e.status_code,
            )
            return self._fall_back(SessionOutcome(ok=False, error_kind=e.kind, message=str(e)))

        outcome = self.load_document(document)
        if not outcome.ok:
            return self._fall_back(outcome)
        return outcome

    def load_document(self, document: dict) -> SessionOutcome:
        """Import an already fetched execution document.

        On failure the current graph is left as it was.
        """
        result = self.converter.from_execution_document(document)
        if not result.ok:
            outcome = SessionOutcome(
                ok=False,
                error_kind=result.kind.value,
                message=result.error.message,
            )
            self.last_error = outcome
            return outcome

        self.graph = result.value
        self.is_demo = False
        self.last_error = None
        self._known_good = self.graph.copy()
        return SessionOutcome(ok=True, warnings=result.warnings)

    def load_demo(self) -> SessionOutcome:
        """Show the bundled demo workflow. Saves stay local."""
        result = self.converter.from_execution_document(get_demo_document())
        self.graph = result.unwrap()
        self.is_demo = True
        logger.info("demo_workflow_loaded", node_count=len(self.graph))
        return SessionOutcome(ok=True, warnings=result.warnings)

    def _fall_back(self, failure: SessionOutcome) -> SessionOutcome:
        self.last_error = failure
        if self._known_good is not None:
            self.graph = self._known_good.copy()
            fallback = "known_good"
        elif self.demo_fallback:
            self.load_demo()
            fallback = "demo"
        else:
            self.graph = WorkflowGraph()
            fallback = "empty"
        logger.info("workflow_load_fallback", fallback=fallback, kind=failure.error_kind)
        return failure

    async def save(self) -> SessionOutcome:
        """Convert the current graph and submit it once."""
        exported = self.converter.to_execution_document(self.graph, self.workflow_id)
        if not exported.ok:
            outcome = SessionOutcome(
                ok=False,
                error_kind=exported.kind.value,
                message=exported.error.message,
            )
            self.last_error = outcome
            return outcome

        document = exported.value.to_wire()

        if self.is_demo:
            self.last_saved_document = document
            logger.info("workflow_saved_locally", workflow_id=self.workflow_id)
            return SessionOutcome(ok=True, warnings=exported.warnings, saved_locally=True)

        try:
            await self.client.update_workflow(self.workflow_id, document)
        except WorkflowAPIError as e:
            logger.error(
                "workflow_save_failed",
                workflow_id=self.workflow_id,
                kind=e.kind,
                status_code=e.status_code,
            )
            outcome = SessionOutcome(ok=False, error_kind=e.kind, message=str(e))
            self.last_error = outcome
            return outcome

        self.last_saved_document = document
        self.last_error = None
        self._known_good = self.graph.copy()
        logger.info("workflow_saved", workflow_id=self.workflow_id)
        return SessionOutcome(ok=True, warnings=exported.warnings)

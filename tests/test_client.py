"""Tests for the workflow backend client, using httpx.MockTransport."""
import asyncio
import json

import httpx
import pytest

from workflow_canvas.transport.client import (
    BadFormatError,
    WorkflowAPIClient,
    WorkflowAPIError,
    WorkflowNetworkError,
    WorkflowNotFoundError,
)


def _client(handler, api_key="secret"):
    return WorkflowAPIClient(
        base_url="http://backend.test/",
        api_key=api_key,
        timeout=5.0,
        transport=httpx.MockTransport(handler),
    )


class TestWorkflowAPIClient:
    """Test suite for WorkflowAPIClient."""

    @pytest.fixture
    def requests(self):
        """Requests seen by the mock backend."""
        return []

    def test_get_workflow(self, requests, demo_document):
        def handler(request):
            requests.append(request)
            return httpx.Response(200, json=demo_document)

        document = asyncio.run(_client(handler).get_workflow("twflow_b210db0a85"))

        assert document == demo_document
        assert requests[0].method == "GET"
        assert requests[0].url == "http://backend.test/workflows/twflow_b210db0a85"
        assert requests[0].headers["Authorization"] == "Bearer secret"

    def test_update_workflow_puts_document(self, requests, demo_document):
        def handler(request):
            requests.append(request)
            return httpx.Response(200, json={"success": True})

        result = asyncio.run(_client(handler).update_workflow("wf-1", demo_document))

        assert result == {"success": True}
        assert requests[0].method == "PUT"
        assert requests[0].url.path == "/workflow/update/wf-1"
        assert json.loads(requests[0].content) == demo_document

    def test_get_nodes_and_create(self, requests):
        def handler(request):
            requests.append(request)
            if request.method == "POST":
                return httpx.Response(201, json={"workflowId": "new"})
            return httpx.Response(200, json={"nodes": []})

        client = _client(handler, api_key="")

        assert asyncio.run(client.get_nodes()) == {"nodes": []}
        assert asyncio.run(client.create_workflow({"workflowId": "new"})) == {"workflowId": "new"}
        assert [r.url.path for r in requests] == ["/nodes", "/workflows"]
        assert "Authorization" not in requests[0].headers

    def test_empty_body_is_empty_dict(self):
        client = _client(lambda request: httpx.Response(204))

        assert asyncio.run(client.update_workflow("wf-1", {})) == {}

    # =========================================================================
    # Errors
    # =========================================================================

    def test_404_is_not_found(self):
        client = _client(lambda request: httpx.Response(404, json={"detail": "missing"}))

        with pytest.raises(WorkflowNotFoundError) as exc_info:
            asyncio.run(client.get_workflow("nope"))

        assert exc_info.value.kind == "NotFound"
        assert exc_info.value.status_code == 404
        assert exc_info.value.response_body == {"detail": "missing"}

    def test_400_is_bad_format(self):
        client = _client(lambda request: httpx.Response(400, text="bad edges"))

        with pytest.raises(BadFormatError) as exc_info:
            asyncio.run(client.update_workflow("wf-1", {}))

        assert exc_info.value.kind == "BadFormat"
        assert exc_info.value.response_body == {"raw": "bad edges"}

    def test_other_status_is_api_error(self):
        client = _client(lambda request: httpx.Response(503))

        with pytest.raises(WorkflowAPIError) as exc_info:
            asyncio.run(client.get_workflow("wf-1"))

        assert type(exc_info.value) is WorkflowAPIError
        assert exc_info.value.status_code == 503

    def test_connection_failure_is_network_error(self):
        def handler(request):
            raise httpx.ConnectError("connection refused", request=request)

        with pytest.raises(WorkflowNetworkError) as exc_info:
            asyncio.run(_client(handler).get_workflow("wf-1"))

        assert exc_info.value.kind == "NetworkError"
        assert exc_info.value.status_code is None

"""Shared fixtures: execution documents as the backend sends them."""
import pytest

from workflow_canvas.data.sample_workflows import get_demo_document


def _wire_node(node_id, node_type, name="", params=None, **extra):
    node = {
        "nodeName": name or node_id,
        "nodeId": node_id,
        "nodeParams": {"params": params if params is not None else {}},
        "nodeInputs": {},
        "nodeType": node_type,
    }
    node.update(extra)
    return node


@pytest.fixture
def wire_node():
    """Factory for a node entry of the execution document."""
    return _wire_node


@pytest.fixture
def three_node_document():
    """A Trigger -> B Controller -> C Activity, with C reading edge2."""
    return {
        "workflowId": "wf-three",
        "definition": {
            "nodes": {
                "aNode": _wire_node("A", "Trigger", name="Start"),
                "bNode": _wire_node("B", "Controller", name="Check"),
                "cNode": _wire_node(
                    "C",
                    "Activity",
                    name="Parse",
                    params={"email": "$edge2.email_id"},
                ),
            },
            "edges": [
                {"fromNodeId": "A", "toNodeId": "B", "edgeName": "edge1"},
                {"fromNodeId": "B", "toNodeId": "C", "edgeName": "edge2"},
            ],
        },
    }


@pytest.fixture
def demo_document():
    """The bundled payment advice workflow."""
    return get_demo_document()

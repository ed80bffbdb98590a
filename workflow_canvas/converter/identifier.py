"""Mapping keys for nodes in the execution document.

The backend stores nodes in a mapping keyed by a name derived from the node
id (``email-create-trigger`` becomes ``emailcreatetriggerNode``). The key is
only a slot: edges always reference ``nodeId``, and the id is stored next to
the key, so the derivation never needs to be reversed.
"""
import re
from typing import Iterable

from workflow_canvas.models.results import GraphErrorKind, GraphResult

KEY_SUFFIX = "Node"

_SEPARATORS = re.compile(r"[-_\s]+")


def derive_key(node_id: str) -> str:
    """Derive the mapping key for a node id.

    Separators are stripped, the first letter is lowercased, every other
    letter keeps its casing, and ``Node`` is appended.
    """
    compact = _SEPARATORS.sub("", node_id)
    return compact[:1].lower() + compact[1:] + KEY_SUFFIX


def build_key_map(node_ids: Iterable[str]) -> GraphResult[dict[str, str]]:
    """Derive keys for all ids, failing with ``DuplicateKey`` on a collision.

    Returns:
        A mapping of node id -> key, in input order.
    """
    keys: dict[str, str] = {}
    owners: dict[str, str] = {}
    for node_id in node_ids:
        key = derive_key(node_id)
        owner = owners.get(key)
        if owner is not None and owner != node_id:
            return GraphResult.failure(
                GraphErrorKind.DUPLICATE_KEY,
                f"Nodes '{owner}' and '{node_id}' both derive key '{key}'",
                node_id=node_id,
            )
        owners[key] = node_id
        keys[node_id] = key
    return GraphResult.success(keys)

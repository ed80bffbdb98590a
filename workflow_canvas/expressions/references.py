"""Grammar for cross-edge value references.

A reference token names the edge a value travels along, followed by an
optional field path into that value::

    $edge3.email_id
    $edge2.categorization.categories[0]

Grammar::

    token   := "$" edgeName ("." segment)*
    segment := identifier ("[" digits "]")*

Tokens may stand alone or be embedded in a longer string. This module only
parses them; resolving a token to a value is the execution engine's job.
"""
import re
from typing import Any, Optional

from pydantic import BaseModel, Field

_IDENTIFIER = r"[A-Za-z_][A-Za-z0-9_]*"
_SEGMENT = rf"{_IDENTIFIER}(?:\[\d+\])*"

REFERENCE_PATTERN = re.compile(
    rf"\$(?P<edge>{_IDENTIFIER})(?P<path>(?:\.{_SEGMENT})*)"
)
_FULL_REFERENCE = re.compile(rf"^{REFERENCE_PATTERN.pattern}$")
_INDEX = re.compile(r"\[(\d+)\]")


class ReferenceToken(BaseModel):
    """A parsed ``$edgeName.path`` token."""

    edge_name: str = Field(..., description="Edge the value travels along")
    path: list[str] = Field(
        default_factory=list,
        description="Field path segments, index selectors kept inline",
    )

    def __str__(self) -> str:
        return "$" + ".".join([self.edge_name, *self.path])

    def path_steps(self) -> list[Any]:
        """Flatten the path into keys and integer indexes.

        ``categories[0]`` becomes ``["categories", 0]``.
        """
        steps: list[Any] = []
        for segment in self.path:
            key = segment.split("[", 1)[0]
            steps.append(key)
            steps.extend(int(index) for index in _INDEX.findall(segment))
        return steps


def parse_reference(text: str) -> Optional[ReferenceToken]:
    """Parse a string that is exactly one reference token.

    Returns None when the string is not a well-formed token.
    """
    if not isinstance(text, str):
        return None
    match = _FULL_REFERENCE.match(text.strip())
    if not match:
        return None
    path = match.group("path")
    return ReferenceToken(
        edge_name=match.group("edge"),
        path=path[1:].split(".") if path else [],
    )


def is_reference(value: Any) -> bool:
    """True when the value is a single, well-formed reference token."""
    return parse_reference(value) is not None


def find_references(text: str) -> list[ReferenceToken]:
    """All tokens embedded in a string, in order of appearance."""
    tokens = []
    for match in REFERENCE_PATTERN.finditer(text):
        path = match.group("path")
        tokens.append(
            ReferenceToken(
                edge_name=match.group("edge"),
                path=path[1:].split(".") if path else [],
            )
        )
    return tokens


def extract_references(value: Any) -> set[str]:
    """Edge names referenced anywhere inside a parameter value.

    Walks nested mappings and sequences, scans every string, and looks
    inside decoded condition trees.
    """
    # Local import: the condition codec itself depends on this module
    from workflow_canvas.expressions.condition import (
        ConditionExpression,
        EmbeddedCondition,
    )

    if isinstance(value, EmbeddedCondition):
        return value.expression.references()
    if isinstance(value, ConditionExpression):
        return value.references()
    if isinstance(value, str):
        return {token.edge_name for token in find_references(value)}
    if isinstance(value, dict):
        names: set[str] = set()
        for item in value.values():
            names |= extract_references(item)
        return names
    if isinstance(value, (list, tuple, set)):
        names = set()
        for item in value:
            names |= extract_references(item)
        return names
    return set()

"""Codec for the conditional expressions carried by controller nodes.

Controllers hold their branching condition as a binary statement tree. The
backend ships it serialized twice: the tree is JSON-encoded into a string
and wrapped in an envelope inside the node parameters::

    "condition": {
        "dataclassDict": "{\\"_type\\": \\"STATEMENT_TYPE\\", \\"lhs\\": {...},
                           \\"rhs\\": {...}, \\"operator\\": \\"CONTAINS\\"}"
    }

Each operand is a statement that is exactly one of:
- a nested comparison (``left_statement``, ``right_statement``, ``operator``)
- a reference token (``value_placeholder``, e.g. ``$edge2.categories[0]``)
- a literal (``value``)

Envelopes are decoded into ``EmbeddedCondition`` on import and encoded back
on export. Fields this codec does not interpret are kept on the models and
written back unchanged.
"""
import json
from enum import Enum
from typing import Any, Optional

import structlog
from pydantic import BaseModel, ConfigDict, Field, PrivateAttr, ValidationError

from workflow_canvas.expressions.references import (
    find_references,
    parse_reference,
)
from workflow_canvas.models.results import GraphErrorKind, GraphResult

logger = structlog.get_logger()

ENVELOPE_KEY = "dataclassDict"
STATEMENT_TYPE = "STATEMENT_TYPE"


class Operator(str, Enum):
    """Operators accepted in a condition tree."""
    EQUALS = "EQUALS"
    NOT_EQUALS = "NOT_EQUALS"
    CONTAINS = "CONTAINS"
    NOT_CONTAINS = "NOT_CONTAINS"
    GREATER_THAN = "GREATER_THAN"
    GREATER_THAN_OR_EQUALS = "GREATER_THAN_OR_EQUALS"
    LESS_THAN = "LESS_THAN"
    LESS_THAN_OR_EQUALS = "LESS_THAN_OR_EQUALS"
    # Combine two nested statements
    AND = "AND"
    OR = "OR"


LOGICAL_OPERATORS = frozenset({Operator.AND.value, Operator.OR.value})
OPERATOR_VALUES = frozenset(op.value for op in Operator)


class Statement(BaseModel):
    """One operand of a condition, possibly a nested comparison."""

    model_config = ConfigDict(extra="allow")

    left_statement: Optional["Statement"] = None
    right_statement: Optional["Statement"] = None
    operator: Optional[str] = None
    value_placeholder: Optional[str] = None
    value: Any = None

    @property
    def kind(self) -> str:
        """``binary``, ``reference``, ``literal`` or ``empty``."""
        if (
            self.left_statement is not None
            or self.right_statement is not None
            or self.operator is not None
        ):
            return "binary"
        if self.value_placeholder is not None:
            return "reference"
        # An explicit null is still a literal
        if "value" in self.model_fields_set:
            return "literal"
        return "empty"

    @classmethod
    def literal(cls, value: Any) -> "Statement":
        return cls(value=value)

    @classmethod
    def reference(cls, token: str) -> "Statement":
        return cls(value_placeholder=token)

    @classmethod
    def compare(
        cls,
        left: "Statement",
        operator: Operator,
        right: "Statement",
    ) -> "Statement":
        return cls(
            left_statement=left,
            right_statement=right,
            operator=operator.value,
        )

    def references(self) -> set[str]:
        names: set[str] = set()
        if self.value_placeholder:
            names.update(
                token.edge_name for token in find_references(self.value_placeholder)
            )
        for child in (self.left_statement, self.right_statement):
            if child is not None:
                names |= child.references()
        return names


class ConditionExpression(BaseModel):
    """Root of a condition tree: ``lhs <operator> rhs``.

    A tree decoded from a string remembers that string; it is written back
    unchanged as long as the tree is not edited.
    """

    model_config = ConfigDict(extra="allow", populate_by_name=True)

    type_tag: str = Field(STATEMENT_TYPE, alias="_type")
    lhs: Statement
    rhs: Statement
    operator: str

    _encoded: Optional[str] = PrivateAttr(None)
    _encoded_dump: Optional[dict] = PrivateAttr(None)

    @property
    def left_operand(self) -> Statement:
        return self.lhs

    @property
    def right_operand(self) -> Statement:
        return self.rhs

    def references(self) -> set[str]:
        """Edge names referenced by any operand in the tree."""
        return self.lhs.references() | self.rhs.references()


class EmbeddedCondition(BaseModel):
    """A decoded ``{"dataclassDict": "..."}`` envelope.

    Sibling keys of the envelope are kept verbatim in ``siblings``.
    """

    expression: ConditionExpression
    siblings: dict[str, Any] = Field(default_factory=dict)

    def to_wire(self) -> dict:
        wire = dict(self.siblings)
        wire[ENVELOPE_KEY] = encode_condition(self.expression)
        return wire


def _check_operator(
    operator: Optional[str],
    left: Statement,
    right: Statement,
    path: str,
) -> Optional[str]:
    if operator not in OPERATOR_VALUES:
        return f"{path}: unknown operator {operator!r}"
    if operator in LOGICAL_OPERATORS and (
        left.kind != "binary" or right.kind != "binary"
    ):
        return f"{path}: {operator} joins two nested statements"
    return None


def _validate_statement(statement: Statement, path: str) -> Optional[str]:
    """Return a problem description, or None when the statement is sound."""
    kind = statement.kind
    if kind == "binary":
        if statement.left_statement is None or statement.right_statement is None:
            return f"{path}: nested statement needs both sides"
        return (
            _check_operator(
                statement.operator,
                statement.left_statement,
                statement.right_statement,
                path,
            )
            or _validate_statement(statement.left_statement, f"{path}.left_statement")
            or _validate_statement(statement.right_statement, f"{path}.right_statement")
        )
    if kind == "reference":
        if parse_reference(statement.value_placeholder) is None:
            return f"{path}: invalid reference token {statement.value_placeholder!r}"
        if statement.value is not None:
            return f"{path}: operand has both a reference and a literal"
        return None
    if kind == "empty":
        return f"{path}: operand has no value"
    return None


def validate_condition(tree: ConditionExpression) -> GraphResult[None]:
    """Check a decoded tree. Fails with ``MalformedExpression``."""
    problem = (
        _check_operator(tree.operator, tree.lhs, tree.rhs, "root")
        or _validate_statement(tree.lhs, "lhs")
        or _validate_statement(tree.rhs, "rhs")
    )
    if problem:
        return GraphResult.failure(
            GraphErrorKind.MALFORMED_EXPRESSION,
            f"Malformed condition: {problem}",
        )
    return GraphResult.success()


def decode_condition(encoded: str) -> GraphResult[ConditionExpression]:
    """Decode a string-encoded tree and validate it."""
    try:
        raw = json.loads(encoded)
    except (TypeError, ValueError) as e:
        return GraphResult.failure(
            GraphErrorKind.MALFORMED_EXPRESSION,
            f"Condition is not valid JSON: {e}",
        )
    if not isinstance(raw, dict):
        return GraphResult.failure(
            GraphErrorKind.MALFORMED_EXPRESSION,
            "Condition must decode to an object",
        )
    try:
        tree = ConditionExpression.model_validate(raw)
    except ValidationError as e:
        return GraphResult.failure(
            GraphErrorKind.MALFORMED_EXPRESSION,
            f"Condition does not match the statement schema: {e.error_count()} error(s)",
        )

    checked = validate_condition(tree)
    if not checked.ok:
        return GraphResult.from_error(checked.error)

    tree._encoded = encoded
    tree._encoded_dump = _canonical_dump(tree)
    return GraphResult.success(tree)


def _canonical_dump(tree: ConditionExpression) -> dict:
    return tree.model_dump(by_alias=True, mode="json")


def encode_condition(tree: ConditionExpression) -> str:
    """Encode a tree back to its embedded string form.

    An unedited decoded tree yields its original string byte for byte.
    Other trees are written with every statement field spelled out.
    """
    dump = _canonical_dump(tree)
    if tree._encoded is not None and dump == tree._encoded_dump:
        return tree._encoded
    return json.dumps(dump)


def decode_parameters(params: Any, node_id: Optional[str] = None) -> GraphResult[Any]:
    """Replace every condition envelope in a parameter value with its tree.

    Returns a new structure; the input is left untouched.
    """
    if isinstance(params, dict):
        envelope = params.get(ENVELOPE_KEY)
        if isinstance(envelope, str):
            decoded = decode_condition(envelope)
            if not decoded.ok:
                decoded.error.node_id = node_id
                logger.warning(
                    "condition_decode_failed",
                    node_id=node_id,
                    error=decoded.error.message,
                )
                return GraphResult.from_error(decoded.error)
            extras = {k: v for k, v in params.items() if k != ENVELOPE_KEY}
            return GraphResult.success(
                EmbeddedCondition(expression=decoded.value, siblings=extras)
            )

        result = {}
        for key, value in params.items():
            decoded = decode_parameters(value, node_id)
            if not decoded.ok:
                return decoded
            result[key] = decoded.value
        return GraphResult.success(result)

    if isinstance(params, list):
        items = []
        for value in params:
            decoded = decode_parameters(value, node_id)
            if not decoded.ok:
                return decoded
            items.append(decoded.value)
        return GraphResult.success(items)

    return GraphResult.success(params)


def encode_parameters(params: Any) -> Any:
    """Inverse of ``decode_parameters``: trees go back into envelopes."""
    if isinstance(params, EmbeddedCondition):
        return params.to_wire()
    if isinstance(params, ConditionExpression):
        return {ENVELOPE_KEY: encode_condition(params)}
    if isinstance(params, dict):
        return {key: encode_parameters(value) for key, value in params.items()}
    if isinstance(params, (list, tuple)):
        return [encode_parameters(value) for value in params]
    return params


def decode_parameter_map(
    params: dict[str, Any],
    node_id: Optional[str] = None,
) -> GraphResult[dict[str, Any]]:
    """Decode a node's parameter mapping value by value.

    Unlike ``decode_parameters`` the result is always a mapping, even when
    the mapping itself looks like an envelope.
    """
    result = {}
    for key, value in params.items():
        decoded = decode_parameters(value, node_id)
        if not decoded.ok:
            return decoded
        result[key] = decoded.value
    return GraphResult.success(result)

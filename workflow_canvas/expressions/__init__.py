"""Reference token grammar and the condition expression codec."""
from workflow_canvas.expressions.references import (
    ReferenceToken,
    extract_references,
    find_references,
    parse_reference,
)
from workflow_canvas.expressions.condition import (
    ConditionExpression,
    EmbeddedCondition,
    Operator,
    Statement,
    decode_condition,
    decode_parameter_map,
    decode_parameters,
    encode_condition,
    encode_parameters,
    validate_condition,
)

__all__ = [
    "ReferenceToken",
    "extract_references",
    "find_references",
    "parse_reference",
    "ConditionExpression",
    "EmbeddedCondition",
    "Operator",
    "Statement",
    "decode_condition",
    "decode_parameter_map",
    "decode_parameters",
    "encode_condition",
    "encode_parameters",
    "validate_condition",
]

"""
Schema validation and discovery documents for tool arguments.

This module interprets SchemaNode trees in two ways:

- validate()/validate_arguments() check a candidate value and collect every
  violation, so a tool call is either fully valid or rejected as a whole.
- to_json_schema() renders a JSON Schema (draft-07) document for the MCP
  tool catalog.

Validation rules:
- Missing required fields and undeclared fields are violations.
- Type is checked before constraints; bool is never a number.
- multipleOf uses exact decimal arithmetic (10 is not a multiple of 4,
  0.3 is a multiple of 0.1).
- Enums are exact, case-sensitive matches.
- format "uuid" is the 8-4-4-4-12 hexadecimal textual form.
"""

import re
from decimal import Decimal, InvalidOperation
from typing import Any

from clickhouse_mcp.core.exceptions import ToolValidationError, Violation
from clickhouse_mcp.models.domain import SchemaNode

JSON_SCHEMA_DRAFT = "http://json-schema.org/draft-07/schema#"

UUID_PATTERN = re.compile(
    r"^[0-9a-fA-F]{8}-[0-9a-fA-F]{4}-[0-9a-fA-F]{4}-[0-9a-fA-F]{4}-[0-9a-fA-F]{12}$"
)

_TYPE_CHECKS = {
    "string": lambda v: isinstance(v, str),
    "number": lambda v: isinstance(v, (int, float)) and not isinstance(v, bool),
    "integer": lambda v: (isinstance(v, int) and not isinstance(v, bool))
    or (isinstance(v, float) and v.is_integer()),
    "boolean": lambda v: isinstance(v, bool),
    "object": lambda v: isinstance(v, dict),
    "array": lambda v: isinstance(v, list),
}


# =============================================================================
# Validation
# =============================================================================


def validate(node: SchemaNode, value: Any, path: str = "") -> list[Violation]:
    """
    Check a value against a schema node.

    Args:
        node: The schema to check against.
        value: The candidate value.
        path: Dotted field path of the value, used in violation messages.

    Returns:
        Every violation found; an empty list means the value is valid.
    """
    if not _TYPE_CHECKS[node.type](value):
        return [
            Violation(
                path,
                "type",
                f"Expected {node.type}, received {_json_type_name(value)}",
            )
        ]

    if node.type == "object":
        return _validate_object(node, value, path)
    if node.type == "array":
        return _validate_array(node, value, path)
    if node.type == "string":
        return _validate_string(node, value, path)
    if node.type in ("number", "integer"):
        return _validate_number(node, value, path)
    return []


def validate_arguments(node: SchemaNode, arguments: Any) -> dict[str, Any]:
    """
    Validate tool arguments as a whole.

    Missing arguments (None) are treated as an empty object.

    Args:
        node: The tool's object input schema.
        arguments: Raw arguments from the tool invocation.

    Returns:
        The validated arguments.

    Raises:
        ToolValidationError: If any rule is violated, listing all of them.
    """
    if arguments is None:
        arguments = {}
    violations = validate(node, arguments)
    if violations:
        raise ToolValidationError(violations)
    return dict(arguments)


def _validate_object(node: SchemaNode, value: dict[str, Any], path: str) -> list[Violation]:
    violations: list[Violation] = []

    for name in node.required:
        if name not in value:
            violations.append(Violation(_join(path, name), "required", "Required"))

    for name, child in value.items():
        field = _join(path, name)
        schema = node.properties.get(name)
        if schema is None:
            violations.append(Violation(field, "unrecognized", "Unrecognized field"))
            continue
        violations.extend(validate(schema, child, field))

    return violations


def _validate_array(node: SchemaNode, value: list[Any], path: str) -> list[Violation]:
    if node.items is None:
        return []
    violations: list[Violation] = []
    for index, item in enumerate(value):
        violations.extend(validate(node.items, item, f"{path}[{index}]"))
    return violations


def _validate_string(node: SchemaNode, value: str, path: str) -> list[Violation]:
    if node.enum is not None and value not in node.enum:
        options = " | ".join(f"'{option}'" for option in node.enum)
        return [Violation(path, "enum", f"Expected {options}, received '{value}'")]
    if node.format == "uuid" and not UUID_PATTERN.match(value):
        return [Violation(path, "format", "Invalid uuid")]
    return []


def _validate_number(node: SchemaNode, value: float, path: str) -> list[Violation]:
    violations: list[Violation] = []
    if node.minimum is not None and value < node.minimum:
        violations.append(
            Violation(path, "minimum", f"Number must be greater than or equal to {node.minimum}")
        )
    if node.maximum is not None and value > node.maximum:
        violations.append(
            Violation(path, "maximum", f"Number must be less than or equal to {node.maximum}")
        )
    if node.multiple_of is not None and not _is_multiple(value, node.multiple_of):
        violations.append(
            Violation(path, "multipleOf", f"Number must be a multiple of {node.multiple_of}")
        )
    return violations


def _is_multiple(value: float, step: float) -> bool:
    try:
        return Decimal(str(value)) % Decimal(str(step)) == 0
    except InvalidOperation:
        return False


def _join(path: str, name: str) -> str:
    return f"{path}.{name}" if path else name


def _json_type_name(value: Any) -> str:
    if value is None:
        return "null"
    if isinstance(value, bool):
        return "boolean"
    if isinstance(value, (int, float)):
        return "number"
    if isinstance(value, str):
        return "string"
    if isinstance(value, list):
        return "array"
    if isinstance(value, dict):
        return "object"
    return type(value).__name__


# =============================================================================
# Discovery documents
# =============================================================================


def to_json_schema(node: SchemaNode, root: bool = True) -> dict[str, Any]:
    """
    Render a schema node as a JSON Schema document.

    Args:
        node: The schema to render.
        root: Whether to add the ``$schema`` draft marker.

    Returns:
        A JSON-serializable JSON Schema dict.
    """
    document: dict[str, Any] = {"type": node.type}

    if node.enum is not None:
        document["enum"] = list(node.enum)
    if node.format is not None:
        document["format"] = node.format
    if node.minimum is not None:
        document["minimum"] = node.minimum
    if node.maximum is not None:
        document["maximum"] = node.maximum
    if node.multiple_of is not None:
        document["multipleOf"] = node.multiple_of

    if node.type == "object":
        document["properties"] = {
            name: to_json_schema(child, root=False) for name, child in node.properties.items()
        }
        if node.required:
            document["required"] = list(node.required)
        document["additionalProperties"] = False

    if node.type == "array" and node.items is not None:
        document["items"] = to_json_schema(node.items, root=False)

    if node.description:
        document["description"] = node.description

    if root:
        document["$schema"] = JSON_SCHEMA_DRAFT
    return document

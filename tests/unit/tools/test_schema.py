"""
Tests for schema validation and JSON Schema rendering.

Covers:
- Required fields, type checks, undeclared fields
- Numeric constraints including exact multipleOf
- Enumerations and uuid format
- All-or-nothing validation with every violation reported
- Discovery documents
"""

import pytest

from clickhouse_mcp.core.exceptions import ToolValidationError
from clickhouse_mcp.models.domain import SchemaNode
from clickhouse_mcp.tools.schema import (
    JSON_SCHEMA_DRAFT,
    to_json_schema,
    validate,
    validate_arguments,
)


@pytest.fixture
def memory_node() -> SchemaNode:
    return SchemaNode(type="number", minimum=8, multiple_of=4)


@pytest.fixture
def object_node() -> SchemaNode:
    return SchemaNode(
        type="object",
        properties={
            "organizationId": SchemaNode(type="string", format="uuid"),
            "provider": SchemaNode(type="string", enum=("aws", "gcp", "azure")),
            "numReplicas": SchemaNode(type="number", minimum=1, maximum=20),
            "tags": SchemaNode(type="array", items=SchemaNode(type="string")),
        },
        required=("organizationId", "provider"),
    )


# =============================================================================
# Primitive checks
# =============================================================================


class TestTypeChecks:
    """Type is checked before any constraint."""

    def test_string_rejects_number(self) -> None:
        violations = validate(SchemaNode(type="string"), 42, "name")

        assert len(violations) == 1
        assert violations[0].field == "name"
        assert violations[0].rule == "type"
        assert "Expected string" in violations[0].message

    def test_number_rejects_string(self, memory_node: SchemaNode) -> None:
        violations = validate(memory_node, "12", "minReplicaMemoryGb")

        assert [v.rule for v in violations] == ["type"]

    def test_number_rejects_boolean(self) -> None:
        violations = validate(SchemaNode(type="number"), True, "flag")

        assert [v.rule for v in violations] == ["type"]

    def test_boolean_rejects_integer(self) -> None:
        violations = validate(SchemaNode(type="boolean"), 1, "flag")

        assert [v.rule for v in violations] == ["type"]

    def test_integer_accepts_whole_float(self) -> None:
        assert validate(SchemaNode(type="integer"), 3.0) == []
        assert [v.rule for v in validate(SchemaNode(type="integer"), 3.5)] == ["type"]

    def test_null_is_reported_as_null(self) -> None:
        violations = validate(SchemaNode(type="string"), None, "name")

        assert "received null" in violations[0].message


class TestNumericConstraints:
    """minimum, maximum and exact multipleOf."""

    @pytest.mark.parametrize("value", [8, 12, 16, 64, 12.0])
    def test_multiples_of_four_pass(self, memory_node: SchemaNode, value: float) -> None:
        assert validate(memory_node, value) == []

    def test_ten_is_not_a_multiple_of_four(self, memory_node: SchemaNode) -> None:
        violations = validate(memory_node, 10, "minReplicaMemoryGb")

        assert [v.rule for v in violations] == ["multipleOf"]
        assert violations[0].field == "minReplicaMemoryGb"

    def test_below_minimum(self, memory_node: SchemaNode) -> None:
        violations = validate(memory_node, 4)

        assert [v.rule for v in violations] == ["minimum"]

    def test_below_minimum_and_not_multiple_reports_both(self, memory_node: SchemaNode) -> None:
        violations = validate(memory_node, 6)

        assert {v.rule for v in violations} == {"minimum", "multipleOf"}

    def test_decimal_step_has_no_float_drift(self) -> None:
        node = SchemaNode(type="number", multiple_of=0.1)

        assert validate(node, 0.3) == []

    def test_maximum(self) -> None:
        node = SchemaNode(type="number", minimum=1, maximum=20)

        assert validate(node, 20) == []
        assert [v.rule for v in validate(node, 21)] == ["maximum"]


class TestStringConstraints:
    """Enumerations and uuid format."""

    def test_enum_exact_match(self) -> None:
        node = SchemaNode(type="string", enum=("start", "stop"))

        assert validate(node, "start") == []

    def test_enum_is_case_sensitive(self) -> None:
        node = SchemaNode(type="string", enum=("start", "stop"))

        violations = validate(node, "Start", "command")

        assert [v.rule for v in violations] == ["enum"]
        assert "'start' | 'stop'" in violations[0].message

    @pytest.mark.parametrize(
        "value",
        [
            "8b3b2c1e-4f5a-4d6b-9c7d-0e1f2a3b4c5d",
            "8B3B2C1E-4F5A-4D6B-9C7D-0E1F2A3B4C5D",
            "00000000-0000-0000-0000-000000000000",
        ],
    )
    def test_valid_uuid(self, value: str) -> None:
        assert validate(SchemaNode(type="string", format="uuid"), value) == []

    @pytest.mark.parametrize(
        "value",
        [
            "not-a-uuid",
            "8b3b2c1e4f5a4d6b9c7d0e1f2a3b4c5d",
            "8b3b2c1e-4f5a-4d6b-9c7d-0e1f2a3b4c5",
            "8b3b2c1e-4f5a-4d6b-9c7d-0e1f2a3b4c5z",
            " 8b3b2c1e-4f5a-4d6b-9c7d-0e1f2a3b4c5d",
        ],
    )
    def test_invalid_uuid(self, value: str) -> None:
        violations = validate(SchemaNode(type="string", format="uuid"), value, "organizationId")

        assert [v.rule for v in violations] == ["format"]
        assert violations[0].message == "Invalid uuid"


# =============================================================================
# Objects and arrays
# =============================================================================


class TestObjectValidation:
    """Required, undeclared and nested fields."""

    def test_valid_object(self, object_node: SchemaNode) -> None:
        value = {
            "organizationId": "8b3b2c1e-4f5a-4d6b-9c7d-0e1f2a3b4c5d",
            "provider": "aws",
            "numReplicas": 3,
            "tags": ["a", "b"],
        }

        assert validate(object_node, value) == []

    def test_optional_fields_may_be_absent(self, object_node: SchemaNode) -> None:
        value = {"organizationId": "8b3b2c1e-4f5a-4d6b-9c7d-0e1f2a3b4c5d", "provider": "gcp"}

        assert validate(object_node, value) == []

    def test_missing_required_field_is_named(self, object_node: SchemaNode) -> None:
        violations = validate(object_node, {"provider": "aws"})

        assert [(v.field, v.rule) for v in violations] == [("organizationId", "required")]

    def test_undeclared_field_is_rejected(self, object_node: SchemaNode) -> None:
        value = {
            "organizationId": "8b3b2c1e-4f5a-4d6b-9c7d-0e1f2a3b4c5d",
            "provider": "aws",
            "unexpected": 1,
        }

        violations = validate(object_node, value)

        assert [(v.field, v.rule) for v in violations] == [("unexpected", "unrecognized")]

    def test_nested_paths_are_dotted(self) -> None:
        node = SchemaNode(
            type="object",
            properties={
                "body": SchemaNode(
                    type="object",
                    properties={"command": SchemaNode(type="string", enum=("start", "stop"))},
                    required=("command",),
                )
            },
            required=("body",),
        )

        violations = validate(node, {"body": {"command": "restart"}})

        assert [v.field for v in violations] == ["body.command"]

    def test_array_items_are_indexed(self, object_node: SchemaNode) -> None:
        value = {
            "organizationId": "8b3b2c1e-4f5a-4d6b-9c7d-0e1f2a3b4c5d",
            "provider": "aws",
            "tags": ["ok", 5],
        }

        violations = validate(object_node, value)

        assert [v.field for v in violations] == ["tags[1]"]

    def test_every_violation_is_reported(self, object_node: SchemaNode) -> None:
        value = {"organizationId": "nope", "provider": "ibm", "numReplicas": 0}

        violations = validate(object_node, value)

        assert {(v.field, v.rule) for v in violations} == {
            ("organizationId", "format"),
            ("provider", "enum"),
            ("numReplicas", "minimum"),
        }


class TestValidateArguments:
    """All-or-nothing validation of tool arguments."""

    def test_returns_arguments_when_valid(self, object_node: SchemaNode) -> None:
        arguments = {"organizationId": "8b3b2c1e-4f5a-4d6b-9c7d-0e1f2a3b4c5d", "provider": "aws"}

        assert validate_arguments(object_node, arguments) == arguments

    def test_none_is_treated_as_empty_object(self) -> None:
        assert validate_arguments(SchemaNode(type="object"), None) == {}

    def test_raises_with_all_violations(self, object_node: SchemaNode) -> None:
        with pytest.raises(ToolValidationError) as exc_info:
            validate_arguments(object_node, {"provider": "ibm"})

        error = exc_info.value
        assert set(error.fields) == {"organizationId", "provider"}
        assert error.message.startswith("Invalid arguments: ")
        assert "organizationId: Required" in error.message

    def test_non_object_arguments(self, object_node: SchemaNode) -> None:
        with pytest.raises(ToolValidationError) as exc_info:
            validate_arguments(object_node, ["not", "an", "object"])

        assert exc_info.value.violations[0].rule == "type"


# =============================================================================
# Discovery documents
# =============================================================================


class TestToJsonSchema:
    """JSON Schema rendering."""

    def test_root_document(self, object_node: SchemaNode) -> None:
        document = to_json_schema(object_node)

        assert document["$schema"] == JSON_SCHEMA_DRAFT
        assert document["type"] == "object"
        assert document["required"] == ["organizationId", "provider"]
        assert document["additionalProperties"] is False
        assert list(document["properties"]) == ["organizationId", "provider", "numReplicas", "tags"]

    def test_constraints_are_rendered(self) -> None:
        node = SchemaNode(
            type="number", minimum=8, multiple_of=4, description="Min memory/replica."
        )

        document = to_json_schema(node, root=False)

        assert document == {
            "type": "number",
            "minimum": 8,
            "multipleOf": 4,
            "description": "Min memory/replica.",
        }

    def test_nested_nodes_have_no_draft_marker(self, object_node: SchemaNode) -> None:
        document = to_json_schema(object_node)

        assert "$schema" not in document["properties"]["organizationId"]
        assert document["properties"]["organizationId"]["format"] == "uuid"
        assert document["properties"]["provider"]["enum"] == ["aws", "gcp", "azure"]
        assert document["properties"]["tags"]["items"] == {"type": "string"}

    def test_empty_object_has_no_required_list(self) -> None:
        document = to_json_schema(SchemaNode(type="object"))

        assert "required" not in document
        assert document["properties"] == {}

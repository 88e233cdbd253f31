"""
Domain Models - tool schemas, tool definitions and API credentials.

This module contains the domain models shared by the schema registry,
the tool dispatcher and the HTTP call adapter.

- SchemaNode: recursive description of an acceptable input shape, used for
  validation and for the discovery documents sent to MCP clients.
- ToolDefinition: one registry entry; name, description, input schema and
  the declarative route (method, path template, body field, header overrides).
- ToolInvocation: one incoming call_tool request.
- ApiCredentials: ClickHouse Cloud key ID and secret.

Pattern: Domain models as value objects (immutable once constructed)
"""

from enum import Enum
from string import Formatter
from typing import Any, Literal, Optional, Union
from urllib.parse import quote, urlencode

from pydantic import BaseModel, Field, SecretStr


# =============================================================================
# HttpMethod
# =============================================================================


class HttpMethod(str, Enum):
    """HTTP methods used by the ClickHouse Cloud API."""

    GET = "GET"
    POST = "POST"
    PATCH = "PATCH"
    DELETE = "DELETE"

    @property
    def carries_body(self) -> bool:
        """Only POST and PATCH requests send a JSON body."""
        return self in (HttpMethod.POST, HttpMethod.PATCH)


# =============================================================================
# SchemaNode
# =============================================================================


SchemaType = Literal["string", "number", "integer", "boolean", "object", "array"]


class SchemaNode(BaseModel):
    """
    Recursive description of an acceptable value.

    A node is a primitive (string, number, integer, boolean) with optional
    constraints, an object with named properties, or an array of nodes.
    Constraints on a leaf are expected to be jointly satisfiable; this is
    not checked at runtime.

    Attributes:
        type: The JSON type of the value.
        description: Human-readable description for discovery documents.
        enum: Closed set of allowed string literals (case-sensitive).
        format: String format; only "uuid" is recognised.
        minimum: Inclusive lower bound for numbers.
        maximum: Inclusive upper bound for numbers.
        multiple_of: Numbers must be an exact multiple of this value.
        properties: Named child nodes of an object, in declaration order.
        required: Names of properties that must be present.
        items: Node describing every element of an array.

    Example:
        >>> SchemaNode(
        ...     type="object",
        ...     properties={"organizationId": SchemaNode(type="string", format="uuid")},
        ...     required=("organizationId",),
        ... )
    """

    type: SchemaType
    description: Optional[str] = None
    enum: Optional[tuple[str, ...]] = None
    format: Optional[Literal["uuid"]] = None
    minimum: Optional[Union[int, float]] = None
    maximum: Optional[Union[int, float]] = None
    multiple_of: Optional[Union[int, float]] = None
    properties: dict[str, "SchemaNode"] = Field(default_factory=dict)
    required: tuple[str, ...] = ()
    items: Optional["SchemaNode"] = None

    model_config = {"frozen": True}

    def extend(self, **properties: "SchemaNode") -> "SchemaNode":
        """
        Return a copy of an object node with extra required properties.

        Args:
            **properties: Property nodes to add; each becomes required.

        Returns:
            A new object SchemaNode.
        """
        merged = {**self.properties, **properties}
        required = self.required + tuple(name for name in properties if name not in self.required)
        return self.model_copy(update={"properties": merged, "required": required})

    def extend_optional(self, **properties: "SchemaNode") -> "SchemaNode":
        """Return a copy of an object node with extra optional properties."""
        return self.model_copy(update={"properties": {**self.properties, **properties}})


# =============================================================================
# ApiCredentials
# =============================================================================


class ApiCredentials(BaseModel):
    """
    ClickHouse Cloud API key pair.

    The secret is a SecretStr so it never appears in repr() or logs.
    """

    key_id: str
    key_secret: SecretStr

    model_config = {"frozen": True}


# =============================================================================
# ToolDefinition
# =============================================================================


class ToolDefinition(BaseModel):
    """
    A registered tool and its declarative route to the upstream API.

    Adding a tool means constructing one of these and registering it;
    the dispatcher needs no per-tool code.

    Attributes:
        name: Unique tool identifier, stable across calls.
        description: Human-readable description of what the tool does.
        input_schema: Object SchemaNode the arguments must satisfy.
        method: HTTP method of the upstream call.
        path_template: Upstream path with ``{param}`` placeholders.
        body_field: Argument whose value becomes the request body.
        query_fields: Arguments forwarded as query string parameters.
        headers: Header overrides for the upstream call.
    """

    name: str = Field(..., description="Unique tool identifier")
    description: str = Field(..., description="Human-readable description")
    input_schema: SchemaNode = Field(..., description="Schema for tool arguments")
    method: HttpMethod = HttpMethod.GET
    path_template: str = Field(..., description="Upstream path template")
    body_field: Optional[str] = None
    query_fields: tuple[str, ...] = ()
    headers: dict[str, str] = Field(default_factory=dict)

    model_config = {"frozen": True}

    @property
    def path_params(self) -> tuple[str, ...]:
        """Names of the placeholders in the path template."""
        return tuple(
            field_name
            for _, field_name, _, _ in Formatter().parse(self.path_template)
            if field_name
        )

    def build_path(self, arguments: dict[str, Any]) -> str:
        """
        Build the concrete request path from validated arguments.

        Each path parameter is encoded as a single URL path segment.
        Query fields that are present are appended, booleans as true/false.

        Args:
            arguments: Arguments that already passed validation.

        Returns:
            The request path, relative to the API base URL.
        """
        segments = {name: quote(str(arguments[name]), safe="") for name in self.path_params}
        path = self.path_template.format(**segments)

        query = {
            name: _query_value(arguments[name])
            for name in self.query_fields
            if arguments.get(name) is not None
        }
        if query:
            path = f"{path}?{urlencode(query)}"
        return path

    def extract_body(self, arguments: dict[str, Any]) -> Optional[Any]:
        """Return the request body sub-object, or None if the tool has none."""
        if self.body_field is None:
            return None
        return arguments.get(self.body_field)


def _query_value(value: Any) -> str:
    if isinstance(value, bool):
        return "true" if value else "false"
    return str(value)


# =============================================================================
# ToolInvocation
# =============================================================================


class ToolInvocation(BaseModel):
    """
    A single call_tool request.

    Attributes:
        name: Tool name to execute.
        arguments: Raw, unvalidated tool arguments.
    """

    name: str = Field(..., description="Tool name to execute")
    arguments: dict[str, Any] = Field(default_factory=dict, description="Tool arguments")

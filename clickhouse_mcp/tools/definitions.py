"""
ClickHouse Cloud tool catalog.

Declarative registry entries for the ClickHouse Cloud API v1 endpoints the
server exposes. Input schemas follow the OpenAPI request shapes; the
service creation body is a subset of ServicePostRequest.
"""

from clickhouse_mcp.models.domain import HttpMethod, SchemaNode, ToolDefinition

TOOL_PREFIX = "clickhouse_"

CLOUD_PROVIDERS = ("aws", "gcp", "azure")

SERVICE_REGIONS = (
    "ap-south-1",
    "ap-southeast-1",
    "eu-central-1",
    "eu-west-1",
    "eu-west-2",
    "us-east-1",
    "us-east-2",
    "us-west-2",
    "ap-southeast-2",
    "ap-northeast-1",
    "me-central-1",
    "us-east1",
    "us-central1",
    "europe-west4",
    "asia-southeast1",
    "eastus",
    "eastus2",
    "westus3",
    "germanywestcentral",
)

SERVICE_STATE_COMMANDS = ("start", "stop")


# =============================================================================
# Path parameter schemas
# =============================================================================

ORGANIZATION_ID_PARAMS = SchemaNode(
    type="object",
    properties={
        "organizationId": SchemaNode(
            type="string", format="uuid", description="ID of the organization."
        ),
    },
    required=("organizationId",),
)

SERVICE_ID_PARAMS = ORGANIZATION_ID_PARAMS.extend(
    serviceId=SchemaNode(type="string", format="uuid", description="ID of the service."),
)

NO_PARAMS = SchemaNode(type="object")


# =============================================================================
# Request bodies
# =============================================================================


def _replica_memory(description: str) -> SchemaNode:
    return SchemaNode(type="number", minimum=8, multiple_of=4, description=description)


IP_ACCESS_LIST_ENTRY = SchemaNode(
    type="object",
    properties={
        "source": SchemaNode(type="string", description="IP or CIDR"),
        "description": SchemaNode(type="string", description="Optional description"),
    },
    required=("source",),
)

SERVICE_POST_REQUEST = SchemaNode(
    type="object",
    description="Service creation details.",
    properties={
        "name": SchemaNode(
            type="string", description="Name of the service (alphanumerical, max 50 chars)."
        ),
        "provider": SchemaNode(type="string", enum=CLOUD_PROVIDERS, description="Cloud provider."),
        "region": SchemaNode(type="string", enum=SERVICE_REGIONS, description="Service region."),
        "minReplicaMemoryGb": _replica_memory("Min memory/replica (GB, multiple of 4, >=8)."),
        "maxReplicaMemoryGb": _replica_memory("Max memory/replica (GB, multiple of 4, >=8)."),
        "numReplicas": SchemaNode(
            type="number",
            minimum=1,
            maximum=20,
            description="Number of replicas (1-20). Defaults vary by tier.",
        ),
        "ipAccessList": SchemaNode(
            type="array",
            items=IP_ACCESS_LIST_ENTRY,
            description="List of allowed IP addresses.",
        ),
    },
    required=("name", "provider", "region"),
)

SERVICE_STATE_PATCH_REQUEST = SchemaNode(
    type="object",
    description="Service state change command.",
    properties={
        "command": SchemaNode(
            type="string",
            enum=SERVICE_STATE_COMMANDS,
            description="Command to change the service state.",
        ),
    },
    required=("command",),
)


# =============================================================================
# Tool definitions
# =============================================================================

ORGANIZATIONS_PATH = "/v1/organizations"
ORGANIZATION_PATH = ORGANIZATIONS_PATH + "/{organizationId}"
SERVICES_PATH = ORGANIZATION_PATH + "/services"
SERVICE_PATH = SERVICES_PATH + "/{serviceId}"

CLICKHOUSE_TOOLS: list[ToolDefinition] = [
    ToolDefinition(
        name=f"{TOOL_PREFIX}listOrganizations",
        description="Get the list of organizations associated with the API key.",
        input_schema=NO_PARAMS,
        method=HttpMethod.GET,
        path_template=ORGANIZATIONS_PATH,
    ),
    ToolDefinition(
        name=f"{TOOL_PREFIX}getOrganizationDetails",
        description="Get details for a specific organization.",
        input_schema=ORGANIZATION_ID_PARAMS,
        method=HttpMethod.GET,
        path_template=ORGANIZATION_PATH,
    ),
    ToolDefinition(
        name=f"{TOOL_PREFIX}listServices",
        description="List services within a specific organization.",
        input_schema=ORGANIZATION_ID_PARAMS,
        method=HttpMethod.GET,
        path_template=SERVICES_PATH,
    ),
    ToolDefinition(
        name=f"{TOOL_PREFIX}getServiceDetails",
        description="Get details for a specific service within an organization.",
        input_schema=SERVICE_ID_PARAMS,
        method=HttpMethod.GET,
        path_template=SERVICE_PATH,
    ),
    ToolDefinition(
        name=f"{TOOL_PREFIX}createService",
        description="Create a new service within an organization.",
        input_schema=ORGANIZATION_ID_PARAMS.extend(body=SERVICE_POST_REQUEST),
        method=HttpMethod.POST,
        path_template=SERVICES_PATH,
        body_field="body",
    ),
    ToolDefinition(
        name=f"{TOOL_PREFIX}deleteService",
        description=(
            "Delete a specific service within an organization. "
            "The service must be stopped first."
        ),
        input_schema=SERVICE_ID_PARAMS,
        method=HttpMethod.DELETE,
        path_template=SERVICE_PATH,
    ),
    ToolDefinition(
        name=f"{TOOL_PREFIX}listApiKeys",
        description="List API keys for a specific organization.",
        input_schema=ORGANIZATION_ID_PARAMS,
        method=HttpMethod.GET,
        path_template=ORGANIZATION_PATH + "/keys",
    ),
    ToolDefinition(
        name=f"{TOOL_PREFIX}updateServiceState",
        description="Start or stop a specific service.",
        input_schema=SERVICE_ID_PARAMS.extend(body=SERVICE_STATE_PATCH_REQUEST),
        method=HttpMethod.PATCH,
        path_template=SERVICE_PATH + "/state",
        body_field="body",
    ),
    ToolDefinition(
        name=f"{TOOL_PREFIX}getServicePrometheusMetrics",
        description="Get prometheus metrics for a specific service.",
        input_schema=SERVICE_ID_PARAMS.extend_optional(
            filtered_metrics=SchemaNode(
                type="boolean",
                description="Return a filtered list of Prometheus metrics.",
            ),
        ),
        method=HttpMethod.GET,
        path_template=SERVICE_PATH + "/prometheus",
        query_fields=("filtered_metrics",),
        headers={"Accept": "text/plain"},
    ),
]

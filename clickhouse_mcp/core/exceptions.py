"""
Custom exceptions for the ClickHouse MCP server.

This module provides the error taxonomy used across the server. All
exceptions inherit from ClickHouseMCPError and carry an error code so the
dispatcher can report failures consistently and log them with context.

Taxonomy:
- ConfigurationError: API credentials are not configured.
- ToolValidationError: tool arguments do not satisfy the tool's schema.
- UpstreamError: the ClickHouse Cloud API call failed (status, body, network).
- UnknownToolError: the requested tool is not in the registry.
- ToolCallError: the dispatch-boundary wrapper naming the failing tool.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Any, Optional


# =============================================================================
# Error Codes
# =============================================================================


class ErrorCode(str, Enum):
    """
    Error codes for ClickHouse MCP exceptions.

    These codes provide a consistent way to identify error types
    in tool responses and in logging.
    """

    SERVER_ERROR = "SERVER_ERROR"
    CONFIGURATION_ERROR = "CONFIGURATION_ERROR"
    VALIDATION_ERROR = "VALIDATION_ERROR"
    UPSTREAM_ERROR = "UPSTREAM_ERROR"
    UNKNOWN_TOOL = "UNKNOWN_TOOL"
    TOOL_CALL_ERROR = "TOOL_CALL_ERROR"


# =============================================================================
# Base Exception
# =============================================================================


class ClickHouseMCPError(Exception):
    """
    Base exception for all ClickHouse MCP errors.

    Attributes:
        message: Human-readable error message.
        error_code: Machine-readable error code from ErrorCode enum.
    """

    def __init__(
        self,
        message: str,
        error_code: str = ErrorCode.SERVER_ERROR,
        **kwargs: Any,
    ) -> None:
        """
        Initialize the exception.

        Args:
            message: Human-readable error message.
            error_code: Machine-readable error code.
            **kwargs: Additional attributes to set on the exception.
        """
        super().__init__(message)
        self.message = message
        self.error_code = error_code

        for key, value in kwargs.items():
            setattr(self, key, value)


# =============================================================================
# ConfigurationError
# =============================================================================


class ConfigurationError(ClickHouseMCPError):
    """
    Raised when required configuration is missing.

    Reported per tool call; it never stops the process.
    """

    def __init__(
        self,
        message: str,
        error_code: str = ErrorCode.CONFIGURATION_ERROR,
        **kwargs: Any,
    ) -> None:
        super().__init__(message, error_code, **kwargs)


# =============================================================================
# ToolValidationError
# =============================================================================


@dataclass(frozen=True)
class Violation:
    """A single failed schema rule for one argument field."""

    field: str
    rule: str
    message: str

    def __str__(self) -> str:
        if self.field:
            return f"{self.field}: {self.message}"
        return self.message


class ToolValidationError(ClickHouseMCPError):
    """
    Raised when tool arguments fail schema validation.

    Validation is all-or-nothing: the error lists every violated field
    and rule, and no HTTP call is made.

    Attributes:
        violations: Every Violation found in the arguments.
    """

    def __init__(
        self,
        violations: list[Violation],
        error_code: str = ErrorCode.VALIDATION_ERROR,
        **kwargs: Any,
    ) -> None:
        details = "; ".join(str(v) for v in violations)
        super().__init__(f"Invalid arguments: {details}", error_code, **kwargs)
        self.violations = violations

    @property
    def fields(self) -> list[str]:
        """Names of the fields that failed validation."""
        return [v.field for v in self.violations]


# =============================================================================
# UpstreamError
# =============================================================================


class UpstreamError(ClickHouseMCPError):
    """
    Raised when a ClickHouse Cloud API call fails.

    Covers non-2xx responses, unparsable bodies and transport failures.
    Never retried.

    Attributes:
        status_code: HTTP status code (None for transport failures).
        method: HTTP method of the failed call.
        path: Request path of the failed call.
    """

    def __init__(
        self,
        message: str,
        status_code: Optional[int] = None,
        method: Optional[str] = None,
        path: Optional[str] = None,
        error_code: str = ErrorCode.UPSTREAM_ERROR,
        **kwargs: Any,
    ) -> None:
        super().__init__(message, error_code, **kwargs)
        self.status_code = status_code
        self.method = method
        self.path = path


# =============================================================================
# UnknownToolError
# =============================================================================


class UnknownToolError(ClickHouseMCPError):
    """Raised when a requested tool is not found in the registry."""

    def __init__(
        self,
        tool_name: str,
        error_code: str = ErrorCode.UNKNOWN_TOOL,
        **kwargs: Any,
    ) -> None:
        super().__init__(f"Unknown tool: {tool_name}", error_code, **kwargs)
        self.tool_name = tool_name


# =============================================================================
# ToolCallError
# =============================================================================


class ToolCallError(ClickHouseMCPError):
    """
    Dispatch-boundary failure for a single tool invocation.

    The message always has the form ``Tool <name> failed: <cause>``.

    Attributes:
        tool_name: Name of the tool that failed.
        cause: The underlying ClickHouseMCPError.
    """

    def __init__(
        self,
        tool_name: str,
        cause: ClickHouseMCPError,
        error_code: str = ErrorCode.TOOL_CALL_ERROR,
        **kwargs: Any,
    ) -> None:
        super().__init__(f"Tool {tool_name} failed: {cause.message}", error_code, **kwargs)
        self.tool_name = tool_name
        self.cause = cause

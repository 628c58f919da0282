"""Core domain surface for erold-mcp (transport-agnostic)."""

from .client import EroldClient, RetryConfig, build_query_params, unwrap_envelope
from .config import ClientConfig, get_config, validate_config
from .errors import (
    ApiError,
    ConfigurationError,
    EroldClientError,
    EroldParseError,
    format_error,
    is_retryable,
)
from .guidelines import GuidelineService
from .mappers import project_from_wire, project_to_wire
from .registry import (
    discover_tool_modules,
    iter_tool_functions,
    register_discovered_tools,
)

__all__ = [
    # Client
    "EroldClient",
    "RetryConfig",
    "build_query_params",
    "unwrap_envelope",
    # Exceptions
    "EroldClientError",
    "ApiError",
    "ConfigurationError",
    "EroldParseError",
    "format_error",
    "is_retryable",
    # Config helpers
    "ClientConfig",
    "get_config",
    "validate_config",
    # Mapping
    "project_from_wire",
    "project_to_wire",
    # Guidelines
    "GuidelineService",
    # Registry helpers
    "discover_tool_modules",
    "iter_tool_functions",
    "register_discovered_tools",
]

"""erold_mcp package exports."""

from .core import (
    ApiError,
    ConfigurationError,
    EroldClient,
    EroldClientError,
    EroldParseError,
    GuidelineService,
    RetryConfig,
    format_error,
)
from .core.client import CLIENT_VERSION as __version__

__all__ = [
    "EroldClient",
    "RetryConfig",
    "GuidelineService",
    "EroldClientError",
    "ApiError",
    "ConfigurationError",
    "EroldParseError",
    "format_error",
    "__version__",
]

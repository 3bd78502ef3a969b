"""Error types and result-to-exception helpers."""

from ghink_openapi.errors.exceptions import (
    ConfigurationError,
    EnvelopeDecodeError,
    OpenAPIError,
    RequestBuildError,
    RequestFailedError,
    RetryExhaustedError,
    UpstreamError,
)
from ghink_openapi.errors.handler import raise_for_result

__all__ = [
    "ConfigurationError",
    "EnvelopeDecodeError",
    "OpenAPIError",
    "RequestBuildError",
    "RequestFailedError",
    "RetryExhaustedError",
    "UpstreamError",
    "raise_for_result",
]

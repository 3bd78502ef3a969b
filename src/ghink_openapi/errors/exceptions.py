"""Structured exceptions for Open API calls."""


class OpenAPIError(Exception):
    """Base exception for SDK errors."""

    pass


class ConfigurationError(OpenAPIError, ValueError):
    """Invalid client configuration."""

    pass


class RequestBuildError(OpenAPIError):
    """Payload encoding or request construction failed before any I/O."""

    pass


class EnvelopeDecodeError(OpenAPIError):
    """Response body is not a valid ``{code, msg, data}`` envelope."""

    pass


class RetryExhaustedError(OpenAPIError):
    """Every attempt failed with a retryable condition."""

    def __init__(self, attempts: int, last_error: Exception | None = None):
        super().__init__(f"request failed after {attempts} attempts")
        self.attempts = attempts
        self.last_error = last_error


class RequestFailedError(OpenAPIError):
    """A typed call could not obtain a usable result from the pipeline."""

    def __init__(self, message: str, action: str | None = None):
        super().__init__(message)
        self.action = action


class UpstreamError(OpenAPIError):
    """The upstream answered, but rejected the request with a business code."""

    def __init__(self, message: str, code: int, msg: str = "", action: str | None = None):
        super().__init__(message)
        self.code = code
        self.msg = msg
        self.action = action

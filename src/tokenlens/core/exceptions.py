"""tokenlens exception hierarchy.

This module defines the base exception class and specialized exceptions
for the upstream request policy layer. Internal layers raise these; only
the HTTP routes translate them into response payloads.
"""


class TokenLensError(Exception):
    """Base exception for all tokenlens errors."""

    pass


class ConfigurationError(TokenLensError):
    """Raised when configuration is invalid or missing.

    Example:
        raise ConfigurationError("AVE_API_KEY is not configured")
    """

    pass


class ValidationError(TokenLensError):
    """Raised when caller input is missing or malformed.

    Example:
        raise ValidationError("Missing required parameters: address and chain")
    """

    pass


class ExternalServiceError(TokenLensError):
    """Raised when an external service call fails.

    Attributes:
        service: Name of the external service that failed.
        status_code: HTTP status code if available, None otherwise.

    Example:
        raise ExternalServiceError(service="ave", message="Bad gateway", status_code=502)
    """

    def __init__(
        self,
        service: str,
        message: str,
        status_code: int | None = None,
    ) -> None:
        self.service = service
        self.status_code = status_code
        super().__init__(f"{service}: {message}")


class UpstreamStatusError(ExternalServiceError):
    """Upstream answered with a non-2xx status."""

    pass


class RateLimitError(UpstreamStatusError):
    """Upstream answered 429 Too Many Requests."""

    def __init__(self, service: str, message: str = "429 rate limit exceeded") -> None:
        super().__init__(service=service, message=message, status_code=429)


class UpstreamTimeoutError(ExternalServiceError):
    """A single upstream attempt exceeded its timeout."""

    pass


class UpstreamConnectionError(ExternalServiceError):
    """The upstream could not be reached (DNS, refused, reset)."""

    pass


class ShapeMismatchError(ExternalServiceError):
    """Upstream returned 2xx but the body matched no recognized shape."""

    pass


class UpstreamExhaustedError(ExternalServiceError):
    """Every candidate request for an operation failed.

    Attributes:
        operation: Logical operation name (e.g. "holders").
        attempts: Number of candidates tried.
        last_error: The last error observed while trying candidates.
    """

    def __init__(
        self,
        service: str,
        operation: str,
        attempts: int,
        last_error: Exception | None,
    ) -> None:
        self.operation = operation
        self.attempts = attempts
        self.last_error = last_error
        status_code = getattr(last_error, "status_code", None)
        super().__init__(
            service=service,
            message=f"{operation}: all {attempts} candidates failed: {last_error}",
            status_code=status_code,
        )

"""Custom exceptions for the OpenRouter client."""
from typing import Optional


class OpenRouterClientError(Exception):
    """Base exception for all OpenRouter client errors."""
    pass


class OpenRouterRateLimitError(OpenRouterClientError):
    """Raised when the OpenRouter rate limit is exceeded (HTTP 429)."""

    def __init__(self, message: str, retry_after: Optional[int] = None):
        """
        Initialize rate limit error.

        Args:
            message: Error message
            retry_after: Seconds the service asked us to wait (from Retry-After header)
        """
        super().__init__(message)
        self.retry_after = retry_after


class OpenRouterAPIError(OpenRouterClientError):
    """Raised for OpenRouter API errors (4xx/5xx excluding 429) and empty completions."""

    def __init__(self, message: str, status_code: int, response_body: Optional[str] = None):
        """
        Initialize API error.

        Args:
            message: Error message
            status_code: HTTP status code
            response_body: Response body from API
        """
        super().__init__(message)
        self.status_code = status_code
        self.response_body = response_body


class OpenRouterTimeoutError(OpenRouterClientError):
    """Raised when an OpenRouter request times out."""
    pass

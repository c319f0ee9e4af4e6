"""Custom exceptions for the Gemini narrative client."""
from typing import Optional


class GeminiClientError(Exception):
    """Base exception for all Gemini client errors."""
    pass


class GeminiConfigurationError(GeminiClientError):
    """Raised when no usable Gemini API key is configured."""
    pass


class GeminiRateLimitError(GeminiClientError):
    """Raised when Gemini API rate limit is exceeded (HTTP 429)."""

    def __init__(self, message: str, retry_after: Optional[int] = None):
        """
        Initialize rate limit error.

        Args:
            message: Error message
            retry_after: Seconds to wait before retry (from Retry-After header)
        """
        super().__init__(message)
        self.retry_after = retry_after


class GeminiAPIError(GeminiClientError):
    """Raised for Gemini API errors (4xx/5xx excluding 429) and unusable responses."""

    def __init__(self, message: str, status_code: int, response_body: Optional[str] = None):
        super().__init__(message)
        self.status_code = status_code
        self.response_body = response_body


class GeminiTimeoutError(GeminiClientError):
    """Raised when Gemini API request times out."""
    pass

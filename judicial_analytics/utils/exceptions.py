"""
Custom exceptions for the judicial analytics engine.
"""


class AnalyticsError(Exception):
    """Base exception for all analytics-related errors."""

    def __init__(self, message: str, judge_id: str = None):
        self.message = message
        self.judge_id = judge_id
        super().__init__(self.message)

    def __str__(self):
        error_parts = [self.message]
        if self.judge_id:
            error_parts.append(f"Judge: {self.judge_id}")
        return " - ".join(error_parts)


class JudgeNotFoundError(AnalyticsError):
    """Raised when a judge identifier does not resolve."""
    pass


class RateLimitExceeded(AnalyticsError):
    """Raised when a caller exceeds its request budget for a judge."""

    def __init__(self, message: str, retry_after: float = None, judge_id: str = None):
        self.retry_after = retry_after
        super().__init__(message, judge_id)

    def __str__(self):
        error_str = super().__str__()
        if self.retry_after:
            error_str += f" - Retry after: {self.retry_after:.0f}s"
        return error_str


class UpstreamReadError(AnalyticsError):
    """Raised when case or opinion listing fails."""
    pass


class EstimatorError(AnalyticsError):
    """Raised when the statistical analyzer cannot produce analytics."""
    pass


class EnhancementError(AnalyticsError):
    """Raised when no model provider produced a usable estimate."""
    pass


class CacheReadError(AnalyticsError):
    """Raised when a cache tier cannot be read."""
    pass


class CacheWriteError(AnalyticsError):
    """Raised when a cache tier cannot be written."""
    pass


class ClientError(Exception):
    """Base exception for HTTP client errors."""

    def __init__(self, message: str, url: str = None, status_code: int = None):
        self.message = message
        self.url = url
        self.status_code = status_code
        super().__init__(self.message)

    def __str__(self):
        error_parts = [self.message]
        if self.url:
            error_parts.append(f"URL: {self.url}")
        if self.status_code:
            error_parts.append(f"Status: {self.status_code}")
        return " - ".join(error_parts)


class NetworkError(ClientError):
    """Raised when network-related errors occur."""
    pass


class AuthenticationError(ClientError):
    """Raised when authentication is required or fails."""
    pass


class ParsingError(ClientError):
    """Raised when parsing a response fails."""
    pass

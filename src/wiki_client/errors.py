"""Typed exception hierarchy for wiki content API errors.

This module defines all custom exceptions used by the wiki client library.
All exceptions inherit from WikiError base class for easy catching and
include descriptive messages with context to help with debugging.
"""


class SyncError(Exception):
    """Base exception for all wiki-mirror errors.

    Use this to catch any application-level error from the mirror tool.
    """
    pass


class WikiError(SyncError):
    """Base exception for all wiki API errors."""
    pass


class PageNotFoundError(WikiError):
    """Raised when a requested listing or content URL does not exist."""

    def __init__(self, url: str):
        super().__init__(f"Content not found at {url}")
        self.url = url


class APIUnreachableError(WikiError):
    """Raised when the wiki API is not available or unreachable."""

    def __init__(self, endpoint: str):
        super().__init__(f"API is not available at {endpoint}")
        self.endpoint = endpoint


class APIAccessError(WikiError):
    """Raised when the API returns an error status for a request."""

    def __init__(self, message: str = "Wiki API failure"):
        super().__init__(message)


class ContentDecodeError(WikiError):
    """Raised when an API response does not have the expected JSON shape."""

    def __init__(self, url: str, message: str):
        super().__init__(f"Could not decode response from {url}: {message}")
        self.url = url
        self.message = message

"""Wiki content API client for the mirror.

This package wraps the Confluence REST content API (listing and export view
endpoints) and translates transport failures into typed exceptions.
"""

from .errors import (
    SyncError,
    WikiError,
    PageNotFoundError,
    APIUnreachableError,
    APIAccessError,
    ContentDecodeError,
)

__all__ = [
    "SyncError",
    "WikiError",
    "PageNotFoundError",
    "APIUnreachableError",
    "APIAccessError",
    "ContentDecodeError",
]

"""Typed exception hierarchy for mirror pipeline errors.

This module defines all custom exceptions raised while sanitizing and
writing mirrored pages. All exceptions inherit from MirrorError.
"""

from typing import Optional

from src.wiki_client.errors import SyncError


class MirrorError(SyncError):
    """Base exception for all mirror pipeline errors."""
    pass


class FilesystemError(MirrorError):
    """Raised when filesystem operations fail (mkdir, write, permissions, etc)."""

    def __init__(self, file_path: str, operation: str, reason: Optional[str] = None):
        message = f"Filesystem operation '{operation}' failed for {file_path}"
        if reason:
            message += f": {reason}"
        super().__init__(message)
        self.file_path = file_path
        self.operation = operation
        self.reason = reason


class PagePathError(MirrorError):
    """Raised when a web UI link cannot be mapped inside the output directory."""

    def __init__(self, webui: str, message: str):
        super().__init__(f"Cannot derive output path for '{webui}': {message}")
        self.webui = webui
        self.message = message


class MirrorCancelledError(MirrorError):
    """Raised by a page pipeline that observed the run's cancellation signal."""

    def __init__(self, page_id: str):
        super().__init__(f"Pipeline for page {page_id} cancelled")
        self.page_id = page_id

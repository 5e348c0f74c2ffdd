"""Fetch-sanitize-write pipeline that mirrors wiki pages to disk.

This package contains the sanitizer policy, the page writer, the per-page
pipeline and the list walker that fans pipelines out per listing page.
"""

from src.mirror.errors import (
    FilesystemError,
    MirrorCancelledError,
    MirrorError,
    PagePathError,
)
from src.mirror.list_walker import ListWalker, WalkSummary
from src.mirror.page_pipeline import PagePipeline
from src.mirror.page_writer import PageWriter, derive_page_path
from src.mirror.sanitizer import HTMLSanitizer, SanitizerPolicy, default_policy
from src.mirror.task_group import TaskGroup

__all__ = [
    # Errors
    'FilesystemError',
    'MirrorCancelledError',
    'MirrorError',
    'PagePathError',
    # Components
    'HTMLSanitizer',
    'ListWalker',
    'PagePipeline',
    'PageWriter',
    'SanitizerPolicy',
    'TaskGroup',
    'WalkSummary',
    'default_policy',
    'derive_page_path',
]

"""Test fixtures for the wiki mirror.

This module provides test fixtures for:
- Sample listing and content payloads shaped like the Confluence REST API
- Sample export-view HTML bodies
- Git repository fixtures (working tree with a bare origin remote)
"""

from .sample_listings import (
    BASE_URL,
    make_content_payload,
    make_listing_payload,
    make_result,
)
from .sample_pages import (
    SAMPLE_EXPORT_VIEW,
    SAMPLE_EXPORT_VIEW_WITH_SCRIPTS,
    SAMPLE_EXPORT_VIEW_WITH_TABLE,
)
from .git_test_repos import mirror_repo

__all__ = [
    'BASE_URL',
    'make_content_payload',
    'make_listing_payload',
    'make_result',
    'SAMPLE_EXPORT_VIEW',
    'SAMPLE_EXPORT_VIEW_WITH_SCRIPTS',
    'SAMPLE_EXPORT_VIEW_WITH_TABLE',
    'mirror_repo',
]

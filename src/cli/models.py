"""Data models for CLI operations.

This module defines the exit codes and the mirror configuration used by
the CLI. All models use dataclasses for clean, type-safe data structures.
"""

from dataclasses import dataclass
from enum import IntEnum
from typing import Optional


class ExitCode(IntEnum):
    """Exit codes for CLI operations.

    These exit codes provide meaningful feedback about the operation result:
    - SUCCESS (0): Mirror written and published
    - GENERAL_ERROR (1): General error (config issues, unexpected failures)
    - NETWORK_ERROR (4): Wiki API unreachable or returned an error
    - FILESYSTEM_ERROR (5): A page could not be written
    - GIT_ERROR (6): Staging, committing or pushing failed

    Example:
        >>> exit_code = ExitCode.SUCCESS
        >>> sys.exit(exit_code)
    """
    SUCCESS = 0
    GENERAL_ERROR = 1
    NETWORK_ERROR = 4
    FILESYSTEM_ERROR = 5
    GIT_ERROR = 6


@dataclass
class MirrorConfig:
    """Settings for one mirror run.

    Attributes:
        base_url: Wiki base URL that listing cursors are joined onto
        output_dir: Git working tree receiving the page files
        start_path: First listing cursor (defaults to the content listing)
        page_size: Listing ``limit`` parameter
        max_workers: Concurrent page pipelines per wave (None = page_size)
        request_timeout: HTTP timeout in seconds
        git_remote: Remote to push to
        git_branch: Branch to push
        git_timeout: Timeout for git push in seconds
        fail_on_empty_commit: Treat a run with no changes as an error

    Example:
        >>> config = MirrorConfig(output_dir="./dump", page_size=50)
    """
    base_url: str = "https://wiki.nci.nih.gov"
    output_dir: str = "/tmp/confluence_dump"
    start_path: Optional[str] = None
    page_size: int = 25
    max_workers: Optional[int] = None
    request_timeout: int = 30
    git_remote: str = "origin"
    git_branch: str = "main"
    git_timeout: int = 120
    fail_on_empty_commit: bool = False

    @property
    def effective_workers(self) -> int:
        """Concurrency bound actually used for each wave."""
        return self.max_workers or self.page_size

"""Command-line interface for the wiki mirror.

This package provides the `wiki-mirror` CLI tool that walks a Confluence
content listing, writes one sanitized HTML file per page into a git working
tree, and publishes the result with a single commit and push.
"""

from .mirror_command import MirrorCommand
from .models import ExitCode, MirrorConfig
from .errors import CLIError, ConfigError

__all__ = [
    'MirrorCommand',
    'ExitCode',
    'MirrorConfig',
    'CLIError',
    'ConfigError',
]

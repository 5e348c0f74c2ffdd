"""Git integration for publishing the mirror.

This package stages, commits and pushes the mirrored page tree once a run
has written every page.
"""

from src.git_integration.errors import GitRepositoryError
from src.git_integration.git_repository import GitRepository

__all__ = [
    'GitRepositoryError',
    'GitRepository',
]

"""Pytest configuration and fixtures for integration tests.

Integration tests run the complete mirror against an in-memory wiki and a
real git working tree whose origin is a local bare repository. No network
access is needed.
"""

from pathlib import Path
from typing import Generator, Tuple

import pytest

from tests.fixtures.git_test_repos import mirror_repo


@pytest.fixture(scope="function")
def mirror_repos() -> Generator[Tuple[Path, Path], None, None]:
    """Working tree on main plus its bare origin, removed after the test.

    Example:
        >>> def test_publish(mirror_repos):
        ...     work_path, remote_path = mirror_repos
    """
    with mirror_repo() as repos:
        yield repos

"""Git repository fixtures for testing.

These fixtures provide a mirror working tree with a bare ``origin`` remote
so the full stage/commit/push cycle can run against real git.

Usage:
    from tests.fixtures.git_test_repos import mirror_repo

    with mirror_repo() as (work_path, remote_path):
        # work_path is a git working tree on branch main
        pass
"""

import shutil
import subprocess
import tempfile
from contextlib import contextmanager
from pathlib import Path
from typing import Generator, Tuple


def _git(args, cwd: Path) -> subprocess.CompletedProcess:
    return subprocess.run(
        ["git", *args],
        cwd=cwd,
        check=True,
        capture_output=True,
        text=True,
    )


@contextmanager
def mirror_repo() -> Generator[Tuple[Path, Path], None, None]:
    """Create a working tree on ``main`` whose ``origin`` is a local bare repo.

    Yields:
        Tuple of (working tree path, bare remote path)
    """
    temp_dir = Path(tempfile.mkdtemp(prefix="test_mirror_repo_"))
    work_path = temp_dir / "work"
    remote_path = temp_dir / "remote.git"
    work_path.mkdir()

    try:
        _git(["init", "--bare", str(remote_path)], cwd=temp_dir)

        _git(["init"], cwd=work_path)
        _git(["symbolic-ref", "HEAD", "refs/heads/main"], cwd=work_path)
        _git(["config", "user.name", "Test User"], cwd=work_path)
        _git(["config", "user.email", "test@example.com"], cwd=work_path)
        _git(["config", "commit.gpgsign", "false"], cwd=work_path)
        _git(["remote", "add", "origin", str(remote_path)], cwd=work_path)

        yield work_path, remote_path
    finally:
        shutil.rmtree(temp_dir, ignore_errors=True)


def commit_count(repo_path: Path, ref: str = "HEAD") -> int:
    """Number of commits reachable from ``ref`` (0 if the ref does not exist)."""
    result = subprocess.run(
        ["git", "rev-list", "--count", ref],
        cwd=repo_path,
        capture_output=True,
        text=True,
    )
    if result.returncode != 0:
        return 0
    return int(result.stdout.strip())

"""Git repository management for the wiki mirror.

This module provides the GitRepository class that publishes the mirrored
page tree: stage everything, commit with a timestamped message, and push to
the remote tracking branch. It uses subprocess to execute git commands, with
the output directory as the working directory.
"""

import logging
import os
import subprocess
from datetime import datetime
from typing import List, Optional

from src.git_integration.errors import GitRepositoryError

logger = logging.getLogger(__name__)

# Timeout for local git commands in seconds
GIT_TIMEOUT = 60

# Timeout for git push in seconds (network bound)
GIT_PUSH_TIMEOUT = 120

DEFAULT_REMOTE = "origin"
DEFAULT_BRANCH = "main"


def dump_commit_message(now: Optional[datetime] = None) -> str:
    """Build the commit message for a mirror snapshot.

    Example:
        >>> dump_commit_message(datetime(2024, 1, 15, 10, 30))
        'wiki dump on 2024-01-15 10:30:00'
    """
    now = now or datetime.now().astimezone()
    return f"wiki dump on {now}"


class GitRepository:
    """Publishes the mirror working tree.

    The working tree is expected to be an existing clone whose remote
    already points at the mirror repository.

    Example:
        >>> repo = GitRepository("/tmp/confluence_dump")
        >>> repo.ensure_repository()
        >>> repo.commit_all_and_push(dump_commit_message())
    """

    def __init__(self, repo_path: str, timeout: int = GIT_TIMEOUT, push_timeout: int = GIT_PUSH_TIMEOUT):
        """Initialize git repository manager.

        Args:
            repo_path: Path to the mirror working tree
            timeout: Timeout for local git commands in seconds
            push_timeout: Timeout for git push in seconds
        """
        self.repo_path = repo_path
        self.timeout = timeout
        self.push_timeout = push_timeout
        self._ensure_absolute_path()

    def _ensure_absolute_path(self) -> None:
        """Convert repo_path to absolute path if relative."""
        if not os.path.isabs(self.repo_path):
            self.repo_path = os.path.abspath(self.repo_path)

    def _run_git(
        self,
        args: List[str],
        operation: str,
        timeout: Optional[int] = None,
    ) -> subprocess.CompletedProcess:
        """Run a git command in the repository.

        Returns the completed process without checking the return code.

        Raises:
            GitRepositoryError: If git is missing or the command times out
        """
        timeout = timeout or self.timeout
        logger.debug(f"Running git {' '.join(args)} in {self.repo_path}")
        try:
            return subprocess.run(
                ["git", *args],
                cwd=self.repo_path,
                capture_output=True,
                text=True,
                timeout=timeout,
            )
        except subprocess.TimeoutExpired:
            raise GitRepositoryError(
                repo_path=self.repo_path,
                message=f"Git {operation} timed out after {timeout} seconds",
            )
        except FileNotFoundError:
            raise GitRepositoryError(
                repo_path=self.repo_path,
                message="Git command not found. Please install git.",
            )

    def is_repository(self) -> bool:
        """Check whether repo_path is a git working tree."""
        return os.path.exists(os.path.join(self.repo_path, ".git"))

    def ensure_repository(self) -> None:
        """Verify the working tree exists before any page is written.

        Raises:
            GitRepositoryError: If repo_path is not a git working tree
        """
        if not self.is_repository():
            raise GitRepositoryError(
                repo_path=self.repo_path,
                message="Not a git repository (clone the mirror repository first)",
            )

    def stage_all(self) -> None:
        """Stage every change in the working tree (``git add .``).

        Raises:
            GitRepositoryError: If staging fails
        """
        result = self._run_git(["add", "."], "add")
        if result.returncode != 0:
            raise GitRepositoryError(
                repo_path=self.repo_path,
                message="Failed to stage changes",
                git_output=result.stderr,
            )

    def has_staged_changes(self) -> bool:
        """Check whether the index differs from HEAD.

        Raises:
            GitRepositoryError: If git cannot compare the index
        """
        result = self._run_git(["diff", "--cached", "--quiet"], "diff")
        if result.returncode == 0:
            return False
        if result.returncode == 1:
            return True
        raise GitRepositoryError(
            repo_path=self.repo_path,
            message="Failed to inspect staged changes",
            git_output=result.stderr,
        )

    def commit(self, message: str) -> str:
        """Commit staged changes.

        Args:
            message: Commit message

        Returns:
            Commit SHA

        Raises:
            GitRepositoryError: If the commit fails (including nothing to commit)
        """
        result = self._run_git(["commit", "-m", message], "commit")
        if result.returncode != 0:
            raise GitRepositoryError(
                repo_path=self.repo_path,
                message="Failed to commit changes",
                git_output=result.stderr or result.stdout,
            )

        sha = self._get_head_sha()
        logger.info(f"Committed mirror snapshot: {sha[:8]}")
        return sha

    def push(self, remote: str = DEFAULT_REMOTE, branch: str = DEFAULT_BRANCH) -> None:
        """Push the branch to the remote.

        Raises:
            GitRepositoryError: If the push fails
        """
        result = self._run_git(["push", remote, branch], "push", timeout=self.push_timeout)
        if result.returncode != 0:
            raise GitRepositoryError(
                repo_path=self.repo_path,
                message=f"Failed to push {branch} to {remote}",
                git_output=result.stderr,
            )
        logger.info(f"Pushed {branch} to {remote}")

    def _get_head_sha(self) -> str:
        """Get current HEAD commit SHA.

        Raises:
            GitRepositoryError: If git command fails
        """
        result = self._run_git(["rev-parse", "HEAD"], "rev-parse")
        if result.returncode != 0:
            raise GitRepositoryError(
                repo_path=self.repo_path,
                message="Failed to get HEAD SHA",
                git_output=result.stderr,
            )
        return result.stdout.strip()

    def commit_all_and_push(
        self,
        message: str,
        remote: str = DEFAULT_REMOTE,
        branch: str = DEFAULT_BRANCH,
        push: bool = True,
        fail_on_empty: bool = False,
    ) -> Optional[str]:
        """Stage everything, commit and push in one finalize step.

        Args:
            message: Commit message
            remote: Remote to push to
            branch: Branch to push
            push: Whether to push after committing
            fail_on_empty: Treat an empty diff as an error instead of a no-op

        Returns:
            Commit SHA, or None if there was nothing to commit

        Raises:
            GitRepositoryError: If any sub-step fails
        """
        self.stage_all()

        if not self.has_staged_changes():
            if fail_on_empty:
                raise GitRepositoryError(
                    repo_path=self.repo_path,
                    message="Nothing to commit",
                )
            logger.info("Mirror unchanged since last snapshot; nothing to commit")
            return None

        sha = self.commit(message)
        if push:
            self.push(remote, branch)
        return sha

"""Mirror command orchestration for CLI.

This module provides the MirrorCommand class that drives a complete mirror
run: walk every listing page to exhaustion, writing one sanitized file per
page, then publish the tree with a single stage/commit/push step. Any
failure before the publish step means nothing is committed.
"""

import logging
import threading
from pathlib import Path
from typing import List, Optional

from rich.markup import escape

from src.cli.errors import CLIError
from src.cli.models import ExitCode, MirrorConfig
from src.cli.output import OutputHandler
from src.git_integration.errors import GitRepositoryError
from src.git_integration.git_repository import GitRepository, dump_commit_message
from src.mirror.errors import MirrorError
from src.mirror.list_walker import ListWalker
from src.mirror.page_pipeline import PagePipeline
from src.mirror.page_writer import PageWriter
from src.mirror.sanitizer import HTMLSanitizer, SanitizerPolicy, default_policy
from src.models.listing_page import ListingPage
from src.wiki_client.api_wrapper import APIWrapper
from src.wiki_client.errors import WikiError

logger = logging.getLogger(__name__)


class MirrorCommand:
    """Orchestrates the complete mirror workflow for the CLI.

    The mirror workflow:
        1. Check the output directory is a git working tree
        2. Walk the listing; each listing page is mirrored as one concurrent wave
        3. Stage, commit and push the tree once (skipped with commit=False)
        4. Return an exit code describing the outcome

    Example:
        >>> config = ConfigLoader.load()
        >>> exit_code = MirrorCommand(config, output_handler=OutputHandler(verbosity=1)).run()
        >>> sys.exit(exit_code)
    """

    def __init__(
        self,
        config: MirrorConfig,
        output_handler: Optional[OutputHandler] = None,
        api: Optional[APIWrapper] = None,
        git_repo: Optional[GitRepository] = None,
        policy: Optional[SanitizerPolicy] = None,
    ):
        """Initialize mirror command with dependencies.

        Args:
            config: Settings for this run
            output_handler: OutputHandler for terminal output (optional)
            api: APIWrapper for the wiki (optional)
            git_repo: GitRepository for publishing (optional)
            policy: Sanitizer policy (optional, defaults to default_policy())

        Note:
            All dependencies are optional to support testing. In production
            they are created from the config.
        """
        self.config = config
        self.output_handler = output_handler or OutputHandler()
        self.api = api or APIWrapper(
            config.base_url,
            timeout=config.request_timeout,
            pool_size=config.effective_workers,
        )
        self.git_repo = git_repo or GitRepository(
            config.output_dir, push_timeout=config.git_timeout
        )
        self.policy = policy or default_policy()
        self.cancel_event = threading.Event()

    def run(self, commit: bool = True, push: bool = True) -> ExitCode:
        """Execute the mirror run and translate failures to exit codes.

        Args:
            commit: Whether to stage and commit after writing every page
            push: Whether to push the commit

        Returns:
            ExitCode describing the outcome
        """
        output = self.output_handler

        try:
            return self._run(commit=commit, push=push)

        except WikiError as e:
            logger.error(f"Wiki API error: {e}")
            output.error(f"Wiki API error: {escape(str(e))}")
            return ExitCode.NETWORK_ERROR

        except MirrorError as e:
            logger.error(f"Mirror error: {e}")
            output.error(f"Mirror error: {escape(str(e))}")
            return ExitCode.FILESYSTEM_ERROR

        except GitRepositoryError as e:
            logger.error(f"Git error: {e}")
            output.error(f"Git error: {escape(str(e))}")
            if e.git_output:
                output.print(e.git_output.strip())
            return ExitCode.GIT_ERROR

        except CLIError as e:
            logger.error(f"Mirror failed: {e}")
            output.error(f"Mirror failed: {escape(str(e))}")
            return ExitCode.GENERAL_ERROR

        except Exception as e:
            logger.exception("Unexpected error during mirror run")
            output.error(f"Unexpected error: {escape(str(e))}")
            return ExitCode.GENERAL_ERROR

    def _run(self, commit: bool, push: bool) -> ExitCode:
        config = self.config
        output = self.output_handler

        if commit:
            self.git_repo.ensure_repository()

        sanitizer = HTMLSanitizer(self.policy)
        writer = PageWriter(config.output_dir)
        pipeline = PagePipeline(self.api, sanitizer, writer)
        walker = ListWalker(
            api=self.api,
            pipeline=pipeline,
            base_url=config.base_url,
            page_size=config.page_size,
            max_workers=config.effective_workers,
            cancel_event=self.cancel_event,
            on_batch=self._report_batch,
        )

        output.info(escape(f"Mirroring {config.base_url} into {config.output_dir}"))
        summary = walker.walk(config.start_path)

        sha = None
        if commit:
            logger.info("committing")
            with output.spinner("Committing mirror snapshot..."):
                sha = self.git_repo.commit_all_and_push(
                    dump_commit_message(),
                    remote=config.git_remote,
                    branch=config.git_branch,
                    push=push,
                    fail_on_empty=config.fail_on_empty_commit,
                )
        else:
            logger.info("Skipping commit (--no-commit)")

        output.print_summary(
            listing_pages=summary.listing_pages,
            pages_written=summary.pages_written,
            commit_sha=sha,
            published=commit,
        )
        return ExitCode.SUCCESS

    def _report_batch(self, listing: ListingPage, paths: List[Path]) -> None:
        self.output_handler.info(
            f"  listing offset {listing.start}: wrote {len(paths)} page(s)"
        )
        for path in paths:
            self.output_handler.debug(f"    {escape(str(path))}")

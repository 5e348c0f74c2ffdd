"""Main CLI entry point for the wiki-mirror command.

This module provides the Typer application that serves as the entry point
for the wiki-mirror command-line tool. It uses options on the main command
rather than subcommands: one invocation is one full mirror run.
"""

import logging
import sys
from datetime import datetime
from pathlib import Path
from typing import Optional

import typer
from rich.markup import escape

from src.cli.config import ConfigLoader
from src.cli.errors import ConfigError
from src.cli.mirror_command import MirrorCommand
from src.cli.models import ExitCode
from src.cli.output import OutputHandler

__version__ = "0.1.0"

app = typer.Typer(
    name="wiki-mirror",
    help="""Mirror a Confluence wiki into a git repository of sanitized HTML pages.

EXAMPLE:
  wiki-mirror --base-url https://wiki.example.org --output-dir ./dump -v 1""",
    add_completion=False,
    rich_markup_mode=None,
    no_args_is_help=False,
)

# Module logger
logger = logging.getLogger(__name__)

# Verbosity flag -> level of the 'src' logger; 2 and above mean DEBUG
VERBOSITY_LEVELS = {0: logging.WARNING, 1: logging.INFO}

DATE_FORMAT = "%Y-%m-%d %H:%M:%S"
CONSOLE_FORMAT = "%(asctime)s [%(levelname)8s] %(threadName)s: %(message)s"
FILE_FORMAT = "%(asctime)s - %(name)s - %(threadName)s - %(levelname)s - %(message)s"


def _attach_handler(target: logging.Logger, handler: logging.Handler, level: int, fmt: str) -> None:
    handler.setLevel(level)
    handler.setFormatter(logging.Formatter(fmt, datefmt=DATE_FORMAT))
    target.addHandler(handler)


def _configure_logging(verbosity: int, logdir: Optional[str] = None) -> None:
    """Configure the 'src' logger for a run.

    Third-party loggers (atlassian, urllib3) and the root logger keep their
    own configuration. Page pipelines log from worker threads, so records
    carry the thread name.

    Args:
        verbosity: 0=WARNING, 1=INFO, 2 or more=DEBUG
        logdir: Optional directory for a timestamped log file
    """
    level = VERBOSITY_LEVELS.get(verbosity, logging.DEBUG)

    app_logger = logging.getLogger("src")
    app_logger.setLevel(level)
    _attach_handler(app_logger, logging.StreamHandler(sys.stderr), level, CONSOLE_FORMAT)

    if logdir:
        log_path = Path(logdir)
        log_path.mkdir(parents=True, exist_ok=True)
        log_file = log_path / f"wiki-mirror_{datetime.now():%Y%m%d_%H%M%S}.log"

        _attach_handler(
            app_logger,
            logging.FileHandler(log_file, encoding="utf-8"),
            level,
            FILE_FORMAT,
        )
        logger.info(f"Logging to file: {log_file}")


@app.command()
def main_command(
    config_path: Optional[str] = typer.Option(
        None,
        "--config",
        "-c",
        help="YAML configuration file (default: wiki-mirror.yaml if present)",
        metavar="FILE",
    ),
    base_url: Optional[str] = typer.Option(
        None,
        "--base-url",
        help="Wiki base URL (e.g., https://wiki.example.org)",
        metavar="URL",
    ),
    output_dir: Optional[str] = typer.Option(
        None,
        "--output-dir",
        help="Git working tree that receives the mirrored pages",
        metavar="DIR",
    ),
    page_size: Optional[int] = typer.Option(
        None,
        "--page-size",
        help="Results requested per listing page",
    ),
    max_workers: Optional[int] = typer.Option(
        None,
        "--max-workers",
        help="Concurrent page fetches per listing page (default: page size)",
    ),
    timeout: Optional[int] = typer.Option(
        None,
        "--timeout",
        help="HTTP request timeout in seconds",
    ),
    no_commit: bool = typer.Option(
        False,
        "--no-commit",
        help="Write pages only; skip git add/commit/push",
    ),
    no_push: bool = typer.Option(
        False,
        "--no-push",
        help="Commit the snapshot but do not push it",
    ),
    logdir: Optional[str] = typer.Option(
        None,
        "--logdir",
        help="Directory for log files (creates timestamped log file)",
    ),
    verbosity: int = typer.Option(
        0,
        "--verbosity",
        "-v",
        help="Verbosity level: 0=summary, 1=info, 2=debug",
    ),
    no_color: bool = typer.Option(
        False,
        "--no-color",
        help="Disable colored output",
    ),
    version: bool = typer.Option(
        False,
        "--version",
        "-V",
        help="Show version and exit",
    ),
) -> None:
    """Mirror every wiki page into the output directory, then commit and push.

    \b
    EXAMPLES:
      wiki-mirror                                    # Use wiki-mirror.yaml / defaults
      wiki-mirror --output-dir ./dump --no-push      # Commit locally only
      wiki-mirror --no-commit -v 1                   # Write pages, no git
    """
    if version:
        typer.echo(f"wiki-mirror version {__version__}")
        raise typer.Exit()

    _configure_logging(verbosity, logdir)
    output = OutputHandler(verbosity=verbosity, no_color=no_color)

    try:
        config = ConfigLoader.load(config_path)
        config = ConfigLoader.apply_overrides(
            config,
            base_url=base_url,
            output_dir=output_dir,
            page_size=page_size,
            max_workers=max_workers,
            request_timeout=timeout,
        )
    except ConfigError as e:
        logger.error(f"Invalid configuration: {e}")
        output.error(escape(str(e)))
        raise typer.Exit(ExitCode.GENERAL_ERROR)

    command = MirrorCommand(config, output_handler=output)
    exit_code = command.run(commit=not no_commit, push=not no_push)

    raise typer.Exit(exit_code)


def main() -> None:
    """Main entry point for the CLI application.

    This function is called when the module is executed directly or
    when the console script is invoked.
    """
    app()


# Allow running as: python -m src.cli.main
if __name__ == "__main__":
    main()

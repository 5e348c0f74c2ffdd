"""Output path derivation and file persistence for mirrored pages.

Each page is written to ``{output_dir}/{base_url + webui, minus https://}.html``,
so the mirror tree follows the host and web path of the wiki. Writing is
idempotent: the file is overwritten in full on every run.
"""

import logging
import os
from pathlib import Path, PurePosixPath
from typing import Union

from src.models.page_descriptor import PageDescriptor
from .errors import FilesystemError, PagePathError

logger = logging.getLogger(__name__)

# Permissive modes kept from the historical dump layout
DIR_MODE = 0o755
FILE_MODE = 0o755

SCHEME_PREFIX = "https://"
PAGE_SUFFIX = ".html"


def derive_page_path(output_dir: Union[str, Path], base_url: str, webui: str) -> Path:
    """Derive the output file path for a page.

    Concatenates ``base_url`` and ``webui``, strips a leading ``https://``,
    roots the remainder at ``output_dir`` and appends ``.html``.

    Args:
        output_dir: Root directory of the mirror
        base_url: Listing base URL (e.g., https://wiki.example.org)
        webui: Page web UI path (e.g., /display/SPACE/Page+Title)

    Returns:
        Absolute-or-relative Path under output_dir

    Raises:
        PagePathError: If the derived path would leave output_dir

    Example:
        >>> derive_page_path("/tmp/dump", "https://wiki.example.org", "/display/X/Home")
        PosixPath('/tmp/dump/wiki.example.org/display/X/Home.html')
    """
    relative = base_url + webui
    if relative.startswith(SCHEME_PREFIX):
        relative = relative[len(SCHEME_PREFIX):]
    relative = relative.lstrip("/")

    if not relative:
        raise PagePathError(webui, "path is empty")

    parts = PurePosixPath(relative).parts
    if ".." in parts:
        raise PagePathError(webui, "path escapes the output directory")

    return Path(output_dir).joinpath(*parts[:-1], parts[-1] + PAGE_SUFFIX)


class PageWriter:
    """Persists sanitized page content under the output directory.

    Concurrent writers touch disjoint paths; directory creation tolerates
    a sibling pipeline having created the same parent first.

    Example:
        >>> writer = PageWriter("/tmp/confluence_dump")
        >>> path = writer.write("https://wiki.example.org", descriptor, "<p>hi</p>\\n")
    """

    def __init__(self, output_dir: Union[str, Path]):
        """Initialize the writer.

        Args:
            output_dir: Root directory of the mirror (the git working tree)
        """
        self.output_dir = Path(output_dir)

    def path_for(self, base_url: str, descriptor: PageDescriptor) -> Path:
        """Return the output path for a descriptor."""
        return derive_page_path(self.output_dir, base_url, descriptor.links.webui)

    def write(self, base_url: str, descriptor: PageDescriptor, content: str) -> Path:
        """Write sanitized content for one page, overwriting any previous file.

        Args:
            base_url: Listing base URL the descriptor was returned with
            descriptor: Page descriptor (its webui link names the file)
            content: Sanitized HTML

        Returns:
            Path of the written file

        Raises:
            PagePathError: If no valid path can be derived
            FilesystemError: If the directory or file cannot be written
        """
        path = self.path_for(base_url, descriptor)

        try:
            os.makedirs(path.parent, mode=DIR_MODE, exist_ok=True)
        except OSError as e:
            raise FilesystemError(str(path.parent), 'mkdir', str(e))

        try:
            path.write_bytes(content.encode("utf-8"))
            os.chmod(path, FILE_MODE)
        except OSError as e:
            raise FilesystemError(str(path), 'write', str(e))

        logger.debug(f"Wrote page {descriptor.page_id} to {path}")
        return path

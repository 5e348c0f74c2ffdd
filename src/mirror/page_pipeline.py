"""Fetch, sanitize and write a single page."""

import logging
import threading
from pathlib import Path

from src.models.page_descriptor import PageDescriptor
from src.wiki_client.api_wrapper import APIWrapper
from .errors import MirrorCancelledError
from .page_writer import PageWriter
from .sanitizer import HTMLSanitizer

logger = logging.getLogger(__name__)


class PagePipeline:
    """Composes fetcher, sanitizer and writer for one page descriptor.

    The cancellation event is checked before the network fetch and before
    the write, so a failed sibling stops this page at its next step.
    """

    def __init__(self, api: APIWrapper, sanitizer: HTMLSanitizer, writer: PageWriter):
        self.api = api
        self.sanitizer = sanitizer
        self.writer = writer

    def run(
        self,
        base_url: str,
        descriptor: PageDescriptor,
        cancel_event: threading.Event,
    ) -> Path:
        """Mirror one page.

        Args:
            base_url: Listing base URL used for path derivation
            descriptor: Page to mirror
            cancel_event: Run-wide cancellation signal

        Returns:
            Path of the written file

        Raises:
            MirrorCancelledError: If the run was cancelled before a step
            WikiError: If the fetch fails
            MirrorError: If the write fails
        """
        if cancel_event.is_set():
            raise MirrorCancelledError(descriptor.page_id)

        logger.debug(f"Fetching page {descriptor.page_id} ({descriptor.title})")
        raw_html = self.api.get_export_view(descriptor.links.self_url)
        content = self.sanitizer.sanitize(raw_html)

        if cancel_event.is_set():
            raise MirrorCancelledError(descriptor.page_id)

        return self.writer.write(base_url, descriptor, content)

"""Sequential pagination over the content listing with per-page fan-out.

Each listing page is one wave: every descriptor on it is mirrored
concurrently, and the walker only requests the next listing page after the
whole wave has finished. Any failure ends the walk.
"""

import logging
import threading
from dataclasses import dataclass, field
from pathlib import Path
from typing import Callable, List, Optional

from src.models.listing_page import ListingPage
from src.wiki_client.api_wrapper import APIWrapper
from .page_pipeline import PagePipeline
from .task_group import TaskGroup

logger = logging.getLogger(__name__)

# Listing endpoint path relative to the wiki base URL
CONTENT_LISTING_PATH = "/rest/api/content"

DEFAULT_PAGE_SIZE = 25


@dataclass
class WalkSummary:
    """Totals for a completed walk.

    Attributes:
        listing_pages: Number of listing pages fetched
        pages_written: Number of page files written
        written_paths: Paths of every written file, in listing order
    """
    listing_pages: int = 0
    pages_written: int = 0
    written_paths: List[Path] = field(default_factory=list)


class ListWalker:
    """Walks the paginated listing and mirrors every page it returns.

    Example:
        >>> walker = ListWalker(api, pipeline, "https://wiki.example.org", page_size=25)
        >>> summary = walker.walk()
        >>> print(f"{summary.pages_written} pages from {summary.listing_pages} listings")
    """

    def __init__(
        self,
        api: APIWrapper,
        pipeline: PagePipeline,
        base_url: str,
        page_size: int = DEFAULT_PAGE_SIZE,
        max_workers: Optional[int] = None,
        cancel_event: Optional[threading.Event] = None,
        on_batch: Optional[Callable[[ListingPage, List[Path]], None]] = None,
    ):
        """Initialize the walker.

        Args:
            api: API wrapper used for listing requests
            pipeline: Per-page pipeline run for every descriptor
            base_url: Wiki base URL that listing cursors are joined onto
            page_size: Listing ``limit`` parameter
            max_workers: Concurrency bound per wave (defaults to page_size)
            cancel_event: Run-wide cancellation signal
            on_batch: Called after each listing page's wave completes
        """
        self.api = api
        self.pipeline = pipeline
        self.base_url = base_url.rstrip('/')
        self.page_size = page_size
        self.max_workers = max_workers or page_size
        self.cancel_event = cancel_event or threading.Event()
        self.on_batch = on_batch

    @property
    def start_path(self) -> str:
        """First listing cursor, requesting ``page_size`` results."""
        return f"{CONTENT_LISTING_PATH}?limit={self.page_size}"

    def walk(self, start_path: Optional[str] = None) -> WalkSummary:
        """Follow the listing cursors until exhausted.

        Args:
            start_path: First cursor (defaults to start_path property)

        Returns:
            WalkSummary with totals

        Raises:
            WikiError: If a listing or content request fails
            MirrorError: If a page cannot be written
        """
        summary = WalkSummary()
        next_path: Optional[str] = start_path or self.start_path

        while next_path:
            url = f"{self.base_url}{next_path}"
            logger.info(f"listing {url}")

            listing = self.api.get_listing(url)
            summary.listing_pages += 1

            paths = self._process_batch(listing)
            summary.pages_written += len(paths)
            summary.written_paths.extend(paths)

            logger.info(
                f"Listing page {summary.listing_pages}: wrote {len(paths)} page(s) "
                f"({summary.pages_written} total)"
            )
            if self.on_batch is not None:
                self.on_batch(listing, paths)

            next_path = listing.next_url

        return summary

    def _process_batch(self, listing: ListingPage) -> List[Path]:
        """Mirror every descriptor of one listing page as a single wave."""
        base_url = listing.base_url or self.base_url
        group: TaskGroup = TaskGroup(self.max_workers, self.cancel_event)
        return group.run(
            lambda descriptor, cancel_event: self.pipeline.run(base_url, descriptor, cancel_event),
            listing.results,
        )

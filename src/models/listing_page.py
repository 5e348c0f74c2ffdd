"""Listing page data model."""

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

from src.models.page_descriptor import PageDescriptor
from src.wiki_client.errors import ContentDecodeError


@dataclass(frozen=True)
class ListingPage:
    """One page of the paginated content listing.

    Attributes:
        base_url: Base URL used to resolve relative web UI links
        next_url: Relative cursor for the next listing page (None at the end)
        results: Ordered page descriptors on this listing page
        self_url: URL of this listing page as reported by the server
        context: Web context path reported by the server
        start: Offset of the first result
        limit: Requested page size
        size: Number of results returned
    """
    base_url: str
    next_url: Optional[str]
    results: List[PageDescriptor] = field(default_factory=list)
    self_url: Optional[str] = None
    context: str = ""
    start: int = 0
    limit: int = 0
    size: int = 0

    @property
    def has_next(self) -> bool:
        """Whether pagination continues after this page."""
        return bool(self.next_url)

    @classmethod
    def from_dict(cls, data: Any, source_url: str) -> "ListingPage":
        """Decode a listing response payload.

        Args:
            data: Decoded JSON payload of ``GET /rest/api/content``
            source_url: URL the payload was fetched from (for error context)

        Returns:
            ListingPage with decoded descriptors

        Raises:
            ContentDecodeError: If the payload does not look like a listing
        """
        if not isinstance(data, dict):
            raise ContentDecodeError(
                source_url, f"listing must be a JSON object, got {type(data).__name__}"
            )

        links: Dict[str, Any] = data.get('_links') or {}
        if not isinstance(links, dict):
            raise ContentDecodeError(source_url, "malformed '_links'")

        raw_results = data.get('results')
        if raw_results is None:
            raw_results = []
        if not isinstance(raw_results, list):
            raise ContentDecodeError(source_url, "'results' must be a list")

        results = [PageDescriptor.from_dict(item, source_url) for item in raw_results]

        try:
            start = int(data.get('start') or 0)
            limit = int(data.get('limit') or 0)
            size = int(data.get('size') or len(results))
        except (TypeError, ValueError) as e:
            raise ContentDecodeError(source_url, f"malformed paging fields: {e}") from e

        return cls(
            base_url=links.get('base') or "",
            next_url=links.get('next') or None,
            results=results,
            self_url=links.get('self'),
            context=links.get('context') or "",
            start=start,
            limit=limit,
            size=size,
        )

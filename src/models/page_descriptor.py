"""Page descriptor data model."""

from dataclasses import dataclass
from typing import Any, Dict, Optional

from src.wiki_client.errors import ContentDecodeError


@dataclass(frozen=True)
class PageLinks:
    """Navigation links attached to one listing result.

    Attributes:
        self_url: Absolute REST URL used to fetch the full content
        webui: Web UI path relative to the listing base URL
        tinyui: Short link path (informational only)
        editui: Editor path (informational only)
    """
    self_url: str
    webui: str
    tinyui: Optional[str] = None
    editui: Optional[str] = None


@dataclass(frozen=True)
class PageDescriptor:
    """Identifies one remote content item from a listing response.

    Descriptors are immutable once received and are consumed by the
    page pipeline of the listing page they arrived on.

    Attributes:
        page_id: Unique content ID
        page_type: Content type (e.g., "page", "blogpost")
        status: Content status (e.g., "current")
        title: Content title
        links: Navigation links for fetching and path derivation
    """
    page_id: str
    page_type: str
    status: str
    title: str
    links: PageLinks

    @classmethod
    def from_dict(cls, data: Dict[str, Any], source_url: str = "listing") -> "PageDescriptor":
        """Build a descriptor from one ``results[]`` entry of a listing response.

        Args:
            data: Decoded JSON object for one result
            source_url: Listing URL the entry came from (for error context)

        Returns:
            PageDescriptor with its links populated

        Raises:
            ContentDecodeError: If the id or the self/webui links are missing
        """
        if not isinstance(data, dict):
            raise ContentDecodeError(
                source_url, f"result must be an object, got {type(data).__name__}"
            )

        page_id = data.get('id')
        if not page_id:
            raise ContentDecodeError(source_url, "result is missing 'id'")

        links = data.get('_links') or {}
        if not isinstance(links, dict):
            raise ContentDecodeError(source_url, f"result {page_id} has malformed '_links'")

        self_url = links.get('self')
        webui = links.get('webui')
        if not self_url or not webui:
            raise ContentDecodeError(
                source_url, f"result {page_id} is missing '_links.self' or '_links.webui'"
            )

        return cls(
            page_id=str(page_id),
            page_type=data.get('type', ''),
            status=data.get('status', ''),
            title=data.get('title', ''),
            links=PageLinks(
                self_url=self_url,
                webui=webui,
                tinyui=links.get('tinyui'),
                editui=links.get('editui'),
            ),
        )

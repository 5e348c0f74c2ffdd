"""Data models for wiki listing pages and page descriptors."""

from src.models.listing_page import ListingPage
from src.models.page_descriptor import PageDescriptor, PageLinks

__all__ = ['ListingPage', 'PageDescriptor', 'PageLinks']

"""
Pydantic schemas for URL metadata scraping.
"""

from pydantic import BaseModel


class MetadataRequest(BaseModel):
    """Schema for requesting metadata of a page."""
    url: str


class PageMetadata(BaseModel):
    """Metadata extracted from a fetched page. Missing values are empty strings."""
    url: str
    title: str = ""
    description: str = ""
    favicon: str = ""

"""Domain model for an article extracted from a URL."""

from typing import Optional

from pydantic import BaseModel, Field


class ExtractedArticle(BaseModel):
    """Plain-text article content plus metadata.

    ``content`` is the text fed into the analysis pipeline.
    """

    title: str = Field(default="", description="Article title")
    content: str = Field(..., description="Readable article text")
    length: int = Field(..., description="Length of the content in characters")
    excerpt: str = Field(default="", description="Short description or lede")
    site_name: Optional[str] = Field(default=None, alias="siteName")
    byline: Optional[str] = Field(default=None)
    published_time: Optional[str] = Field(default=None, alias="publishedTime")
    publish_date: Optional[str] = Field(default=None, alias="publishDate")
    author: Optional[str] = Field(default=None)

    class Config:
        """Pydantic model configuration."""
        frozen = True
        populate_by_name = True

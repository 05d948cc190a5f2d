"""Article model for stored feed entries."""

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, Field
from pydantic.alias_generators import to_camel

from .base import DBModel


class Article(DBModel):
    """Article model. One row per distinct link."""

    title: str = Field(..., description="Article title")
    description: Optional[str] = Field(None, description="Article description/summary")
    content: Optional[str] = Field(None, description="Article body (mirrors description for RSS)")
    link: str = Field(..., description="Canonical article URL, unique")
    source: str = Field(..., description="Lower-cased source name")
    image_url: Optional[str] = Field(None, description="Associated image URL")
    published_at: datetime = Field(..., description="Publication timestamp")


class NewArticle(BaseModel):
    """Validated insert shape for an article."""

    title: str = Field(..., min_length=1, description="Article title")
    description: Optional[str] = Field(None, description="Article description/summary")
    content: Optional[str] = Field(None, description="Article body")
    link: str = Field(..., min_length=1, description="Canonical article URL")
    source: str = Field(..., min_length=1, max_length=50, description="Lower-cased source name")
    image_url: Optional[str] = Field(None, description="Associated image URL")
    published_at: datetime = Field(..., description="Publication timestamp")

    class Config:
        """Pydantic config."""

        populate_by_name = True
        alias_generator = to_camel
        str_strip_whitespace = True

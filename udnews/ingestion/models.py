"""Data models for ingestion."""

from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field

from ..errors import ItemPersistError


class ParsedItem(BaseModel):
    """Feed item as extracted by the parser. Never stored directly."""

    title: str = Field(..., description="Item title")
    description: str = Field("", description="Item description/summary")
    link: str = Field(..., description="Item URL")
    image_url: Optional[str] = Field(None, description="Enclosure or thumbnail image URL")
    published_at: datetime = Field(..., description="Publication date, or parse time as fallback")


class IngestResult(BaseModel):
    """Outcome of ingesting one source's items."""

    model_config = ConfigDict(arbitrary_types_allowed=True)

    new_count: int = Field(0, description="Articles stored by this ingest")
    skipped_count: int = Field(0, description="Items whose link was already stored")
    failures: List[ItemPersistError] = Field(default_factory=list, description="Item-level failures")

    @property
    def failed_count(self) -> int:
        return len(self.failures)

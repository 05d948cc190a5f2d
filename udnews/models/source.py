"""Source model for RSS feed sources."""

from datetime import datetime
from enum import Enum
from typing import Optional

from pydantic import Field

from .base import DBModel


class SourceStatus(str, Enum):
    """Health of a source as of its last ingestion attempt."""

    UNKNOWN = "unknown"
    ONLINE = "online"
    ERROR = "error"


class Source(DBModel):
    """RSS feed source model."""

    name: str = Field(..., description="Display name")
    url: str = Field(..., description="RSS feed URL, unique")
    is_active: bool = Field(True, description="Whether the source is ingested")
    last_fetched: Optional[datetime] = Field(None, description="Last successful fetch")
    status: SourceStatus = Field(SourceStatus.UNKNOWN, description="Source health")

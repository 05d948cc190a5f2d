"""Base model class for all database models."""

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, Field
from pydantic.alias_generators import to_camel


class DBModel(BaseModel):
    """Base model for all database models."""

    id: Optional[int] = Field(None, description="Primary key")
    created_at: Optional[datetime] = Field(None, description="Creation timestamp")
    updated_at: Optional[datetime] = Field(None, description="Last update timestamp")

    class Config:
        """Pydantic config."""

        from_attributes = True
        populate_by_name = True
        alias_generator = to_camel

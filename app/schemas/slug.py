# app/schemas/slug.py

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field


class SlugRead(BaseModel):
    """
    Response model for a single slug history row.
    """

    model_config = ConfigDict(from_attributes=True)

    id: int = Field(..., description="History row id; higher is more recent")
    slug: str = Field(..., description="Composed identifier, e.g. hello--2")
    name: str = Field(..., description="Name without sequence suffix")
    sequence: int = Field(..., description="1 for the unsuffixed form")
    sluggable_type: str = Field(..., description="Root type of the owner")
    sluggable_id: int = Field(..., description="Owner primary key")
    scope: Optional[str] = None
    created_at: datetime

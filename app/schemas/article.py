# app/schemas/article.py

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic_core import PydanticCustomError

from app.models.enums import ArticleKind


class ArticleCreate(BaseModel):
    title: str = Field(..., min_length=1, max_length=200, examples=["Hello world"])
    body: Optional[str] = Field(None, examples=["First post"])
    kind: ArticleKind = Field(ArticleKind.ARTICLE, description="Article subtype")


class ArticleUpdate(BaseModel):
    """
    Partial update. Sending ``"slug": null`` explicitly clears the slug so
    it is regenerated from the title.
    """

    title: Optional[str] = Field(None, min_length=1, max_length=200)
    body: Optional[str] = None
    slug: Optional[str] = Field(None, description="Only null is accepted")

    @field_validator("slug")
    def validate_slug_cleared(cls, v):
        if v is not None:
            raise PydanticCustomError(
                "slug_not_settable", "slug can only be cleared, not set directly"
            )
        return v


class ArticleRead(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int = Field(..., description="Article primary key")
    kind: ArticleKind
    title: str
    body: Optional[str] = None
    slug: Optional[str] = Field(None, description="Current friendly identifier")
    created_at: datetime
    updated_at: datetime

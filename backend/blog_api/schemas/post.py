"""Post Schemas — create/update payloads, list query, and post views.

Invariants:
    - PostCreate.title: 1-200 chars, stripped, non-empty
    - PostUpdate must carry at least one field; title cannot be cleared
    - PostQuery bounds: page >= 1, 1 <= limit <= 100; authorId is the query name of author_id
"""

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from blog_api.core.pagination import MAX_ID
from blog_api.schemas.comment import AuthorSummary, CommentResponse
from blog_api.schemas.common import PageQuery, strip_required


class PostCreate(BaseModel):
    title: str = Field(min_length=1, max_length=200)
    content: str | None = Field(None, max_length=10_000)
    published: bool = False

    @field_validator("title")
    @classmethod
    def strip_title(cls, v: str) -> str:
        return strip_required(v, "title")


class PostUpdate(BaseModel):
    title: str | None = Field(None, min_length=1, max_length=200)
    content: str | None = Field(None, max_length=10_000)
    published: bool | None = None

    @field_validator("title")
    @classmethod
    def strip_title(cls, v: str | None) -> str:
        if v is None:
            raise ValueError("title cannot be null")
        return strip_required(v, "title")

    @field_validator("published")
    @classmethod
    def published_not_null(cls, v: bool | None) -> bool:
        if v is None:
            raise ValueError("published cannot be null")
        return v

    @model_validator(mode="after")
    def require_one_field(self):
        if not self.model_fields_set:
            raise ValueError("at least one of title, content, published is required")
        return self


class PostQuery(PageQuery):
    """List filters: pagination, case-insensitive search, published/author filters."""
    model_config = ConfigDict(populate_by_name=True)

    search: str | None = Field(None, max_length=100)
    published: bool | None = None
    author_id: int | None = Field(None, gt=0, le=MAX_ID, alias="authorId")

    @field_validator("search")
    @classmethod
    def blank_search_is_none(cls, v: str | None) -> str | None:
        if v is None:
            return None
        return v.strip() or None


class PostResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    title: str
    content: str | None
    published: bool
    author_id: int
    created_at: datetime
    updated_at: datetime


class PostSummaryResponse(PostResponse):
    author: AuthorSummary


class PostDetailResponse(PostSummaryResponse):
    comments: list[CommentResponse] = []

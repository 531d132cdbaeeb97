"""Comment Schemas — comment payload and views, plus the author summary shared with posts."""

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field, field_validator

from blog_api.schemas.common import strip_required


class AuthorSummary(BaseModel):
    """Minimal author view embedded in posts and comments."""
    model_config = ConfigDict(from_attributes=True)

    id: int
    name: str | None
    email: str


class CommentCreate(BaseModel):
    content: str = Field(min_length=1, max_length=2000)

    @field_validator("content")
    @classmethod
    def strip_content(cls, v: str) -> str:
        return strip_required(v, "content")


class CommentResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    content: str
    post_id: int
    author_id: int
    author: AuthorSummary | None = None
    created_at: datetime
    updated_at: datetime

"""User Schemas — account creation/update payloads and public user views.

Invariants:
    - email is normalized to lowercase before it reaches the repository
    - UserUpdate must carry at least one field
    - UserCreate.posts (optional) are created in the same transaction as the user
"""

from datetime import datetime

from pydantic import BaseModel, ConfigDict, EmailStr, Field, field_validator, model_validator

from blog_api.schemas.auth import RegisterRequest
from blog_api.schemas.common import (
    PASSWORD_MAX_LENGTH,
    PASSWORD_MIN_LENGTH,
    check_password_strength,
    strip_required,
)
from blog_api.schemas.post import PostCreate


class UserCreate(RegisterRequest):
    posts: list[PostCreate] | None = Field(None, max_length=20)


class UserUpdate(BaseModel):
    email: EmailStr | None = None
    password: str | None = Field(
        None, min_length=PASSWORD_MIN_LENGTH, max_length=PASSWORD_MAX_LENGTH,
    )
    name: str | None = Field(None, min_length=1, max_length=100)

    @field_validator("email")
    @classmethod
    def lower_email(cls, v: str | None) -> str:
        if v is None:
            raise ValueError("email cannot be null")
        return v.lower()

    @field_validator("password")
    @classmethod
    def strong_password(cls, v: str | None) -> str:
        if v is None:
            raise ValueError("password cannot be null")
        return check_password_strength(v)

    @field_validator("name")
    @classmethod
    def strip_name(cls, v: str | None) -> str | None:
        return strip_required(v, "name") if v is not None else v

    @model_validator(mode="after")
    def require_one_field(self):
        if not self.model_fields_set:
            raise ValueError("at least one of email, name, password is required")
        return self


class UserResponse(BaseModel):
    """Public user view; the password hash never leaves the server."""
    model_config = ConfigDict(from_attributes=True)

    id: int
    email: str
    name: str | None
    created_at: datetime
    updated_at: datetime


class UserDetailResponse(UserResponse):
    post_count: int = 0

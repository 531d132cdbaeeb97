"""Shared field validators, the page query model, and the success envelope."""

import re
from typing import Any

from pydantic import BaseModel, Field

from blog_api.core.pagination import DEFAULT_LIMIT, DEFAULT_PAGE, MAX_LIMIT, MAX_PAGE

PASSWORD_MIN_LENGTH = 8
PASSWORD_MAX_LENGTH = 100

_HAS_LETTER = re.compile(r"[A-Za-z]")
_HAS_DIGIT = re.compile(r"\d")


class PageQuery(BaseModel):
    page: int = Field(DEFAULT_PAGE, ge=1, le=MAX_PAGE)
    limit: int = Field(DEFAULT_LIMIT, ge=1, le=MAX_LIMIT)


def check_password_strength(v: str) -> str:
    if not _HAS_LETTER.search(v) or not _HAS_DIGIT.search(v):
        raise ValueError("password must contain at least one letter and one number")
    return v


def strip_required(v: str, field_name: str) -> str:
    v = v.strip()
    if not v:
        raise ValueError(f"{field_name} cannot be empty or whitespace")
    return v


def success(data: Any = None, **extra: Any) -> dict:
    """Wrap a payload in the {success: true, data} envelope."""
    body: dict[str, Any] = {"success": True, "data": data}
    body.update(extra)
    return body

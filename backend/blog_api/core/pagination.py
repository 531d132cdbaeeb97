"""Pagination — page/limit to offset and response meta."""

import math

DEFAULT_PAGE = 1
DEFAULT_LIMIT = 10
MAX_LIMIT = 100
# keeps offset_for() inside a 64-bit OFFSET
MAX_PAGE = 1_000_000
# ids are 32-bit INTEGER columns; anything larger can never exist
MAX_ID = 2**31 - 1


def offset_for(page: int, limit: int) -> int:
    return (page - 1) * limit


def build_meta(page: int, limit: int, total: int) -> dict:
    """Meta block returned alongside every paginated list."""
    total_pages = math.ceil(total / limit) if limit else 0
    return {
        "page": page,
        "limit": limit,
        "total": total,
        "total_pages": total_pages,
        "has_next": page < total_pages,
        "has_prev": page > 1,
    }

"""Offset pagination over in-memory result lists"""
import math
from typing import Any, Dict, List, Tuple

MAX_LIMIT = 100


def clamp_page(page: Any, default: int = 1) -> int:
    try:
        page = int(page)
    except (TypeError, ValueError):
        return default
    return max(page, 1)


def clamp_limit(limit: Any, default: int = 20) -> int:
    try:
        limit = int(limit)
    except (TypeError, ValueError):
        return default
    return min(max(limit, 1), MAX_LIMIT)


def paginate(items: List[Any], page: Any = 1, limit: Any = 20) -> Tuple[List[Any], Dict[str, Any]]:
    """
    Slice a result list into one page

    Args:
        items: Full, already ordered result list
        page: 1-based page number (values below 1 become 1)
        limit: Page size, clamped to 1..100

    Returns:
        Tuple of (page items, pagination info). totalPages is
        ceil(total / limit), so an empty list has 0 pages.
    """
    page = clamp_page(page)
    limit = clamp_limit(limit)
    total = len(items)
    start = (page - 1) * limit
    end = start + limit

    return items[start:end], {
        'currentPage': page,
        'totalPages': math.ceil(total / limit),
        'total': total,
        'limit': limit,
        'hasNext': end < total,
        'hasPrev': page > 1
    }

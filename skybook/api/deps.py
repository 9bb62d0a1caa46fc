from fastapi import Query

from skybook.core.config import settings

def page_limit(limit: int = Query(settings.DEFAULT_PAGE_SIZE, ge=0)) -> int:
    """Page size from `?limit=`, capped at MAX_PAGE_SIZE."""
    return min(limit, settings.MAX_PAGE_SIZE)

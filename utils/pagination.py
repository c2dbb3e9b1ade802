import math


def clamp_page(page: int | None, page_size: int | None, default_size: int, max_size: int) -> tuple[int, int]:
    """Normalise 1-indexed paging input: page >= 1, 1 <= page_size <= max_size."""
    page = max(page or 1, 1)
    page_size = min(max(page_size or default_size, 1), max_size)
    return page, page_size


def total_pages(total: int, page_size: int) -> int:
    return math.ceil(total / page_size)


def offset_for(page: int, page_size: int) -> int:
    return (page - 1) * page_size

"""Offset pagination arithmetic."""

from ..schemas.tour import PaginationMeta


def page_offset(page: int, limit: int) -> int:
    """Rows to skip before the first row of ``page``."""
    return (page - 1) * limit


def total_pages(total: int, limit: int) -> int:
    """Number of pages needed for ``total`` rows; 0 for an empty result."""
    if limit < 1:
        raise ValueError(f"limit must be positive, got {limit}")
    if total <= 0:
        return 0
    return -(-total // limit)


def build_pagination(page: int, limit: int, total: int) -> PaginationMeta:
    """
    Assemble page metadata.

    A page past the last one is still well-formed: the result set is empty,
    ``has_next`` is False and ``has_prev`` stays True.
    """
    pages = total_pages(total, limit)
    return PaginationMeta(
        page=page,
        limit=limit,
        total=total,
        total_pages=pages,
        has_next=page < pages,
        has_prev=page > 1,
    )

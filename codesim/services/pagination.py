"""Navigation helpers over a server-paginated collection.

All functions are pure: they compute which page to request and leave the
fetch itself to the analysis client.
"""

from __future__ import annotations

from codesim.models.code_file import PageInfo


def has_previous(page: PageInfo) -> bool:
    """True when a page exists before ``page``."""
    return page.number > 0


def has_next(page: PageInfo) -> bool:
    """True when a page exists after ``page``. False for an empty collection."""
    return page.number + 1 < page.total_pages


def request_page(current: PageInfo, delta: int) -> int:
    """Return ``current.number + delta`` clamped to the valid page range.

    The result is always in ``[0, max(total_pages - 1, 0)]``, so an empty
    collection always yields page 0.
    """
    last = max(current.total_pages - 1, 0)
    return min(max(current.number + delta, 0), last)

"""File library view controller.

Drives which library page is fetched and how the current page is shown.
Every page request is tagged; a response whose tag is no longer the latest
(the user navigated again while it was in flight) is discarded.

Search, language filter, and sort are local transforms over the items of
the page already loaded and never trigger a fetch.
"""

from __future__ import annotations

import logging
from typing import Literal

from codesim.errors import PageOutOfRangeError
from codesim.models.code_file import (
    CodeFile,
    FilesPage,
    LibraryItem,
    LibraryViewResponse,
    PageInfo,
)
from codesim.repositories.analysis_api import AnalysisClient
from codesim.services.pagination import has_next, has_previous, request_page
from codesim.services.selection import SelectionSet

logger = logging.getLogger(__name__)

SortBy = Literal["name", "date", "language"]
SortOrder = Literal["asc", "desc"]


def _sort_key(sort_by: SortBy):
    if sort_by == "name":
        return lambda f: f.file_name.casefold()
    if sort_by == "language":
        return lambda f: f.language.value
    return lambda f: f.created_at


def filter_and_sort(
    files: list[CodeFile],
    search: str | None = None,
    language: str | None = None,
    sort_by: SortBy = "date",
    sort_order: SortOrder = "desc",
) -> list[CodeFile]:
    """Case-insensitive name search, exact language match, then sort."""
    needle = (search or "").strip().casefold()
    kept = [
        f
        for f in files
        if needle in f.file_name.casefold()
        and (not language or f.language.value == language)
    ]
    return sorted(kept, key=_sort_key(sort_by), reverse=sort_order == "desc")


class LibraryView:
    """Current library page for one session plus the stale-response guard."""

    def __init__(self, page_size: int = 10) -> None:
        self.page_size = page_size
        self.current: FilesPage | None = None
        self.requested_page = 0
        self._latest_tag = 0

    @property
    def page_info(self) -> PageInfo | None:
        return self.current.page if self.current is not None else None

    def begin_request(self, page_index: int) -> int:
        """Record a new page request and return its tag."""
        self._latest_tag += 1
        self.requested_page = page_index
        return self._latest_tag

    def accept(self, tag: int, response: FilesPage) -> bool:
        """Install ``response`` if ``tag`` is still the latest request."""
        if tag != self._latest_tag:
            logger.warning(
                "Discarding stale library page %d (request %d, latest %d)",
                response.page.number,
                tag,
                self._latest_tag,
            )
            return False
        self.current = response
        return True

    async def load(self, client: AnalysisClient, page_index: int) -> FilesPage | None:
        """Fetch ``page_index``; returns None when a newer request superseded it.

        The index is clamped to the last known page count.  When the service
        reports the page is past its last page (files were removed since),
        the last existing page is loaded instead.  A failed fetch propagates
        and leaves the displayed page unchanged.
        """
        if self.current is not None:
            last = max(self.current.page.total_pages - 1, 0)
            page_index = min(max(page_index, 0), last)
        tag = self.begin_request(page_index)
        try:
            response = await client.list_files(page_index, self.page_size)
        except PageOutOfRangeError as exc:
            if tag != self._latest_tag:
                return None
            last = max(exc.total_pages - 1, 0)
            logger.info(
                "Library page %d no longer exists, loading page %d", page_index, last
            )
            tag = self.begin_request(last)
            response = await client.list_files(last, self.page_size)
        if not self.accept(tag, response):
            return None
        logger.info(
            "Loaded library page %d/%d (%d files)",
            response.page.number + 1,
            max(response.page.total_pages, 1),
            len(response.content),
        )
        return response

    async def go(self, client: AnalysisClient, delta: int) -> FilesPage | None:
        """Move ``delta`` pages from the current one, clamped to the valid range."""
        if self.current is None:
            return await self.load(client, 0)
        return await self.load(client, request_page(self.current.page, delta))

    async def refresh(self, client: AnalysisClient) -> FilesPage | None:
        """Reload the page currently shown (or last requested)."""
        index = self.current.page.number if self.current is not None else self.requested_page
        return await self.load(client, index)

    def view(
        self,
        selection: SelectionSet,
        search: str | None = None,
        language: str | None = None,
        sort_by: SortBy = "date",
        sort_order: SortOrder = "desc",
    ) -> LibraryViewResponse:
        """Render the current page with selection marks and navigation flags."""
        page = self.page_info
        files = self.current.content if self.current is not None else []
        items = [
            LibraryItem(file=f, selected=selection.contains(f))
            for f in filter_and_sort(files, search, language, sort_by, sort_order)
        ]
        return LibraryViewResponse(
            items=items,
            page=page,
            has_previous=has_previous(page) if page is not None else False,
            has_next=has_next(page) if page is not None else False,
        )

"""Tests for the library view controller: paging, stale responses, local sort."""

from __future__ import annotations

import asyncio
import math

import pytest

from codesim.errors import TransportError
from codesim.models.code_file import FilesPage, PageInfo
from codesim.services.library import LibraryView, filter_and_sort
from codesim.services.selection import SelectionSet


class _GatedListing:
    """list_files stub whose responses are released page by page."""

    def __init__(self, make_file, total: int = 4) -> None:
        self.files = [make_file(i) for i in range(1, total + 1)]
        self.gates: dict[int, asyncio.Event] = {}

    def gate(self, page: int) -> asyncio.Event:
        return self.gates.setdefault(page, asyncio.Event())

    async def list_files(self, page: int, size: int) -> FilesPage:
        await self.gate(page).wait()
        return FilesPage(
            content=self.files[page * size : (page + 1) * size],
            page=PageInfo(
                number=page,
                size=size,
                totalElements=len(self.files),
                totalPages=math.ceil(len(self.files) / size),
            ),
        )


@pytest.fixture()
def seeded_service(fake_service):
    for name, language in [
        ("beta.py", "PYTHON"),
        ("Alpha.java", "JAVA"),
        ("gamma.go", "GO"),
        ("delta.py", "PYTHON"),
        ("Epsilon.java", "JAVA"),
    ]:
        fake_service.add_file(name, language)
    return fake_service


class TestLoading:
    async def test_load_and_navigate(self, seeded_service, analysis_client) -> None:
        view = LibraryView(page_size=2)
        await view.load(analysis_client, 0)
        assert view.page_info.number == 0
        assert view.page_info.total_pages == 3

        await view.go(analysis_client, 1)
        assert view.page_info.number == 1

        await view.go(analysis_client, 50)
        assert view.page_info.number == 2
        assert [f.file_name for f in view.current.content] == ["Epsilon.java"]

        await view.go(analysis_client, -50)
        assert view.page_info.number == 0

    async def test_go_before_first_load_fetches_page_zero(
        self, seeded_service, analysis_client
    ) -> None:
        view = LibraryView(page_size=2)
        await view.go(analysis_client, 3)
        assert view.page_info.number == 0

    async def test_refresh_reloads_current_page(self, seeded_service, analysis_client) -> None:
        view = LibraryView(page_size=2)
        await view.load(analysis_client, 2)
        seeded_service.add_file("zeta.rb", "RUBY")

        await view.refresh(analysis_client)

        assert view.page_info.number == 2
        assert view.page_info.total_elements == 6
        assert [f.file_name for f in view.current.content] == [
            "Epsilon.java",
            "zeta.rb",
        ]

    async def test_page_past_the_end_loads_last_page(
        self, seeded_service, analysis_client
    ) -> None:
        view = LibraryView(page_size=2)
        response = await view.load(analysis_client, 7)

        assert response.page.number == 2
        assert view.page_info.number == 2
        assert view.requested_page == 2
        pages = [r.url.params["page"] for r in seeded_service.requests]
        assert pages == ["7", "2"]

    async def test_refresh_after_files_removed(
        self, seeded_service, analysis_client
    ) -> None:
        """The shown page disappeared; refresh lands on the new last page."""
        view = LibraryView(page_size=2)
        await view.load(analysis_client, 2)
        seeded_service.files.pop()

        await view.refresh(analysis_client)

        assert view.page_info.number == 1
        assert view.page_info.total_pages == 2
        assert [f.file_name for f in view.current.content] == [
            "gamma.go",
            "delta.py",
        ]

    async def test_refresh_of_emptied_library(
        self, seeded_service, analysis_client
    ) -> None:
        view = LibraryView(page_size=2)
        await view.load(analysis_client, 1)
        seeded_service.files.clear()

        await view.refresh(analysis_client)

        assert view.page_info.number == 0
        assert view.page_info.total_pages == 0
        assert view.current.content == []

    async def test_load_is_clamped_to_known_pages(
        self, seeded_service, analysis_client
    ) -> None:
        view = LibraryView(page_size=2)
        await view.load(analysis_client, 0)
        seeded_service.requests.clear()

        await view.load(analysis_client, 40)

        assert view.page_info.number == 2
        assert [r.url.params["page"] for r in seeded_service.requests] == ["2"]

    async def test_failed_load_keeps_displayed_page(
        self, seeded_service, analysis_client
    ) -> None:
        view = LibraryView(page_size=2)
        await view.load(analysis_client, 1)
        shown = view.current

        seeded_service.fail_status = 502
        with pytest.raises(TransportError):
            await view.go(analysis_client, 1)
        assert view.current is shown

    async def test_stale_response_is_discarded(self, make_file) -> None:
        """A slow page-0 response arriving after page 1 does not replace it."""
        client = _GatedListing(make_file)
        view = LibraryView(page_size=2)

        slow = asyncio.create_task(view.load(client, 0))
        await asyncio.sleep(0)
        fast = asyncio.create_task(view.load(client, 1))
        await asyncio.sleep(0)

        client.gate(1).set()
        assert (await fast).page.number == 1

        client.gate(0).set()
        assert await slow is None
        assert view.page_info.number == 1
        assert [f.id for f in view.current.content] == [3, 4]


class TestView:
    async def test_marks_selected_files(self, seeded_service, analysis_client, make_file) -> None:
        view = LibraryView(page_size=5)
        await view.load(analysis_client, 0)
        selection = SelectionSet().toggle(make_file(2)).toggle(make_file(99))

        rendered = view.view(selection, sort_by="name", sort_order="asc")

        marks = {item.file.id: item.selected for item in rendered.items}
        assert marks == {1: False, 2: True, 3: False, 4: False, 5: False}
        assert not rendered.has_previous
        assert not rendered.has_next

    def test_empty_view_before_load(self) -> None:
        rendered = LibraryView().view(SelectionSet())
        assert rendered.items == []
        assert rendered.page is None
        assert not rendered.has_next

    def test_filter_and_sort(self, make_file) -> None:
        files = [
            make_file(1, "beta.py", "PYTHON"),
            make_file(2, "Alpha.java", "JAVA"),
            make_file(3, "alphabet.py", "PYTHON"),
        ]
        by_name = filter_and_sort(files, sort_by="name", sort_order="asc")
        assert [f.id for f in by_name] == [2, 3, 1]

        # Default: newest first
        assert [f.id for f in filter_and_sort(files)] == [3, 2, 1]

        searched = filter_and_sort(files, search="  ALPHA ", sort_by="date", sort_order="asc")
        assert [f.id for f in searched] == [2, 3]

        python_only = filter_and_sort(files, language="PYTHON", sort_by="language")
        assert {f.id for f in python_only} == {1, 3}

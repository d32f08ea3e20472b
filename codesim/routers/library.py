"""File library API router.

Endpoints:
- GET  /library            -- fetch a page of uploaded files (defaults to the current page)
- POST /library/navigate   -- move by ``delta`` pages, clamped to the valid range
- POST /library/refresh    -- reload the current page
- GET  /library/view       -- search/filter/sort the loaded page without fetching
"""

from __future__ import annotations

from typing import Literal

from fastapi import APIRouter, Depends, Query

from codesim.dependencies import get_analysis_client, get_session
from codesim.errors import ComparisonError
from codesim.models.code_file import LibraryViewResponse
from codesim.repositories.analysis_api import AnalysisClient
from codesim.routers._errors import to_http_exception
from codesim.services.session import SessionState

router = APIRouter(prefix="/library", tags=["library"])


@router.get("", response_model=LibraryViewResponse)
async def get_library_page(
    page: int | None = Query(None, ge=0, description="0-based page index"),
    session: SessionState = Depends(get_session),
    client: AnalysisClient = Depends(get_analysis_client),
) -> LibraryViewResponse:
    """Load a library page and mark the files already selected."""
    try:
        if page is None:
            await session.library.refresh(client)
        else:
            await session.library.load(client, page)
    except ComparisonError as e:
        raise to_http_exception(e)
    return session.library.view(session.selection)


@router.post("/navigate", response_model=LibraryViewResponse)
async def navigate_library(
    delta: int = Query(..., description="Pages to move; negative goes back"),
    session: SessionState = Depends(get_session),
    client: AnalysisClient = Depends(get_analysis_client),
) -> LibraryViewResponse:
    try:
        await session.library.go(client, delta)
    except ComparisonError as e:
        raise to_http_exception(e)
    return session.library.view(session.selection)


@router.post("/refresh", response_model=LibraryViewResponse)
async def refresh_library(
    session: SessionState = Depends(get_session),
    client: AnalysisClient = Depends(get_analysis_client),
) -> LibraryViewResponse:
    try:
        await session.library.refresh(client)
    except ComparisonError as e:
        raise to_http_exception(e)
    return session.library.view(session.selection)


@router.get("/view", response_model=LibraryViewResponse)
def view_library(
    search: str | None = Query(None, description="Case-insensitive file name search"),
    language: str | None = Query(None, description="Exact language match"),
    sort_by: Literal["name", "date", "language"] = Query("date"),
    sort_order: Literal["asc", "desc"] = Query("desc"),
    session: SessionState = Depends(get_session),
) -> LibraryViewResponse:
    """Local transform of the loaded page; never contacts the analysis service."""
    return session.library.view(
        session.selection,
        search=search,
        language=language,
        sort_by=sort_by,
        sort_order=sort_order,
    )

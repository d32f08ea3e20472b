"""Comparison API router.

Endpoints:
- GET  /comparisons/modes   -- which modes can run with the current selection
- PUT  /comparisons/mode    -- choose the comparison mode
- POST /comparisons/run     -- run the chosen comparison
- GET  /comparisons/result  -- last outcome, error, and in-flight flag
"""

from __future__ import annotations

from fastapi import APIRouter, Depends

from codesim.config import get_settings
from codesim.dependencies import get_analysis_client, get_session
from codesim.errors import ComparisonError
from codesim.models.comparison import (
    ComparisonFilters,
    ComparisonOutcome,
    ModesResponse,
    PanelStateResponse,
    RunComparisonRequest,
    SelectModeRequest,
)
from codesim.repositories.analysis_api import AnalysisClient
from codesim.routers._errors import to_http_exception
from codesim.services.session import SessionState

router = APIRouter(prefix="/comparisons", tags=["comparisons"])


def _modes(session: SessionState) -> ModesResponse:
    selection = session.selection
    return ModesResponse(
        selection_size=selection.size(),
        in_flight=session.panel.in_flight,
        modes=session.panel.availability(selection),
    )


@router.get("/modes", response_model=ModesResponse)
def list_modes(session: SessionState = Depends(get_session)) -> ModesResponse:
    return _modes(session)


@router.put("/mode", response_model=ModesResponse)
def select_mode(
    request: SelectModeRequest,
    session: SessionState = Depends(get_session),
) -> ModesResponse:
    session.panel.select_mode(request.mode)
    return _modes(session)


@router.post("/run", response_model=ComparisonOutcome)
async def run_comparison(
    request: RunComparisonRequest,
    session: SessionState = Depends(get_session),
    client: AnalysisClient = Depends(get_analysis_client),
) -> ComparisonOutcome:
    """Run the chosen comparison against the session's selection.

    Returns 409 when the selection does not fit the mode or another
    comparison is still running, 502 when the analysis service fails.
    """
    if request.mode is not None:
        session.panel.select_mode(request.mode)
    filters = ComparisonFilters(
        language_filter=request.language_filter or None,
        min_similarity=request.min_similarity,
    )
    try:
        return await session.panel.run(
            client,
            session.selection,
            filters,
            page_size=get_settings().compare_all_page_size,
        )
    except ComparisonError as e:
        raise to_http_exception(e)


@router.get("/result", response_model=PanelStateResponse)
def get_result(session: SessionState = Depends(get_session)) -> PanelStateResponse:
    panel = session.panel
    return PanelStateResponse(
        mode=panel.mode,
        in_flight=panel.in_flight,
        outcome=panel.outcome,
        error=panel.error,
    )

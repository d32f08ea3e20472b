"""Selection API router.

Endpoints:
- GET    /selection         -- selected files in insertion order
- POST   /selection/toggle  -- add a file, or remove it if already selected
- DELETE /selection         -- clear the selection
"""

from __future__ import annotations

from fastapi import APIRouter, Depends

from codesim.dependencies import get_session
from codesim.models.code_file import CodeFile
from codesim.models.selection import SelectionResponse
from codesim.services.selection import SelectionSet
from codesim.services.session import SessionState

router = APIRouter(prefix="/selection", tags=["selection"])


def _to_response(selection: SelectionSet) -> SelectionResponse:
    target = selection.target
    return SelectionResponse(
        files=list(selection.files),
        size=selection.size(),
        target_file_id=target.id if target is not None else None,
    )


@router.get("", response_model=SelectionResponse)
def get_selection(session: SessionState = Depends(get_session)) -> SelectionResponse:
    return _to_response(session.selection)


@router.post("/toggle", response_model=SelectionResponse)
def toggle_selection(
    file: CodeFile,
    session: SessionState = Depends(get_session),
) -> SelectionResponse:
    """Toggle ``file`` by id. The first file still selected is the batch target."""
    return _to_response(session.toggle(file))


@router.delete("", response_model=SelectionResponse)
def clear_selection(session: SessionState = Depends(get_session)) -> SelectionResponse:
    return _to_response(session.clear_selection())

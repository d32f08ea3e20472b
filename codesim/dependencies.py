"""FastAPI dependency injection for the analysis client and session state."""

from fastapi import Depends, Request

from codesim.config import get_settings
from codesim.repositories.analysis_api import AnalysisClient
from codesim.services.session import SessionState, SessionStore

DEFAULT_SESSION_ID = "default"


def get_analysis_client(request: Request) -> AnalysisClient:
    """Return the application-wide AnalysisClient stored on app.state."""
    return request.app.state.analysis_client


def get_session_store(request: Request) -> SessionStore:
    """Return the application-wide SessionStore stored on app.state."""
    return request.app.state.session_store


def get_session(
    request: Request,
    store: SessionStore = Depends(get_session_store),
) -> SessionState:
    """Resolve the caller's session from the session header."""
    header = get_settings().session_header
    session_id = request.headers.get(header) or DEFAULT_SESSION_ID
    return store.get(session_id)

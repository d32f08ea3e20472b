"""codesim FastAPI application entry point."""

import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from codesim.config import get_settings
from codesim.repositories.analysis_api import AnalysisClient
from codesim.services.session import SessionStore

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    """Manage application startup and shutdown.

    On startup:
    - Create the shared AnalysisClient (one httpx connection pool).
    - Create the in-memory SessionStore.
    - Store both on app.state for dependency injection.

    On shutdown:
    - Close the AnalysisClient.
    """
    settings = get_settings()

    analysis_client = AnalysisClient(
        base_url=settings.analysis_base_url,
        timeout=settings.request_timeout,
    )
    app.state.analysis_client = analysis_client

    app.state.session_store = SessionStore(
        page_size=settings.library_page_size,
        max_sessions=settings.max_sessions,
    )

    logger.info("Using analysis service at %s", settings.analysis_base_url)

    yield

    # Shutdown
    await analysis_client.close()


settings = get_settings()
logging.basicConfig(
    level=settings.log_level.upper(),
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)

app = FastAPI(
    title="codesim",
    description="Code similarity console: library, selection, and comparisons",
    version="0.1.0",
    lifespan=lifespan,
)

# Behind a reverse proxy the front end is served from the same origin.
if not settings.behind_proxy:
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

# Router includes
from codesim.routers import comparisons, library, selection, uploads  # noqa: E402

app.include_router(library.router)
app.include_router(selection.router)
app.include_router(comparisons.router)
app.include_router(uploads.router)


@app.get("/health")
async def health_check() -> dict[str, str]:
    """Simple health check endpoint."""
    return {"status": "ok"}

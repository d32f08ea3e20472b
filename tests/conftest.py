"""Shared pytest fixtures for codesim tests."""

from __future__ import annotations

import json
import math
import re
from collections.abc import Callable
from datetime import datetime, timedelta
from typing import Any

import httpx
import pytest
from fastapi import FastAPI

from codesim.models.code_file import CodeFile
from codesim.repositories.analysis_api import AnalysisClient
from codesim.routers import comparisons, library, selection, uploads
from codesim.services.session import SessionStore

BASE_URL = "http://analysis.test"


def _file_payload(file_id: int, name: str, language: str) -> dict[str, Any]:
    created = datetime(2024, 1, 1, 9, 0) + timedelta(hours=file_id)
    return {
        "id": file_id,
        "fileName": name,
        "content": f"// {name}",
        "language": language,
        "createdAt": created.isoformat(),
        "trigram_vector": {"abc": file_id},
    }


def _page(items: list, page: int, size: int) -> dict[str, Any]:
    total = len(items)
    return {
        "content": items[page * size : (page + 1) * size],
        "page": {
            "number": page,
            "size": size,
            "totalElements": total,
            "totalPages": math.ceil(total / size) if size else 0,
        },
    }


class FakeAnalysisService:
    """In-process stand-in for the remote analysis service.

    Mounted through ``httpx.MockTransport``; records every request it sees.
    """

    def __init__(self) -> None:
        self.files: list[dict[str, Any]] = []
        self.requests: list[httpx.Request] = []
        self.pair_score: Any = 42.5
        self.scores: dict[int, float] = {}
        self.fail_status: int | None = None
        self.fail_message = "analysis backend exploded"

    def add_file(self, name: str, language: str = "JAVA") -> dict[str, Any]:
        payload = _file_payload(len(self.files) + 1, name, language)
        self.files.append(payload)
        return payload

    def _results(self, file_ids: list[int], params: dict[str, Any]) -> list[dict]:
        min_similarity = float(params.get("minSimilarity") or 0)
        language = params.get("languageFilter")
        out = []
        for f in self.files:
            if f["id"] not in file_ids:
                continue
            score = self.scores.get(f["id"], 0.0)
            if score < min_similarity:
                continue
            if language and f["language"] != language:
                continue
            out.append(
                {
                    "fileId": f["id"],
                    "fileName": f["fileName"],
                    "language": f["language"],
                    "similarity": score,
                }
            )
        return out

    def handle(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        if self.fail_status is not None:
            return httpx.Response(self.fail_status, text=self.fail_message)

        path = request.url.path.removeprefix("/api/code-files")
        params = dict(request.url.params)

        if path == "/files":
            page, size = int(params["page"]), int(params["size"])
            return httpx.Response(200, json=_page(self.files, page, size))
        if path == "/compare":
            return httpx.Response(200, json=self.pair_score)
        if path.startswith("/compare-all/"):
            target = int(path.rsplit("/", 1)[1])
            ids = [f["id"] for f in self.files if f["id"] != target]
            results = self._results(ids, params)
            page, size = int(params["page"]), int(params["size"])
            return httpx.Response(200, json=_page(results, page, size))
        if path == "/compare-batch":
            body = json.loads(request.content)
            return httpx.Response(200, json=self._results(body["fileIds"], body))
        if path == "/upload":
            match = re.search(rb'filename="([^"]+)"', request.content)
            name = match.group(1).decode() if match else "upload.java"
            return httpx.Response(200, json=self.add_file(name))
        if path == "/upload/batch":
            for name in re.findall(rb'filename="([^"]+)"', request.content):
                self.add_file(name.decode())
            return httpx.Response(200, text="Files uploaded successfully")
        return httpx.Response(404, text=f"No route for {path}")

    def paths(self) -> list[str]:
        return [r.url.path for r in self.requests]


@pytest.fixture()
def fake_service() -> FakeAnalysisService:
    return FakeAnalysisService()


@pytest.fixture()
async def analysis_client(fake_service: FakeAnalysisService) -> AnalysisClient:
    """AnalysisClient wired to the fake service through a mock transport."""
    client = AnalysisClient(
        base_url=BASE_URL,
        timeout=5.0,
        transport=httpx.MockTransport(fake_service.handle),
    )
    yield client
    await client.close()


@pytest.fixture()
def make_file() -> Callable[..., CodeFile]:
    """Factory for CodeFile values: ``make_file(3, "Three.java")``."""

    def _make(file_id: int, name: str | None = None, language: str = "JAVA") -> CodeFile:
        return CodeFile.model_validate(
            _file_payload(file_id, name or f"File{file_id}.java", language)
        )

    return _make


@pytest.fixture()
def api_app(analysis_client: AnalysisClient) -> FastAPI:
    """FastAPI app with all routers, wired to the fake analysis service."""
    api_app = FastAPI()
    api_app.state.analysis_client = analysis_client
    api_app.state.session_store = SessionStore(page_size=2)

    api_app.include_router(library.router)
    api_app.include_router(selection.router)
    api_app.include_router(comparisons.router)
    api_app.include_router(uploads.router)

    @api_app.get("/health")
    async def health_check() -> dict[str, str]:
        return {"status": "ok"}

    return api_app


@pytest.fixture()
async def app_client(api_app: FastAPI) -> httpx.AsyncClient:
    """Yield an async HTTP client for the test app."""
    async with httpx.AsyncClient(
        transport=httpx.ASGITransport(app=api_app),
        base_url="http://testserver",
    ) as client:
        yield client

"""HTTP client for the remote code analysis service.

The only module that performs network I/O.  Every call goes through
``_request`` which applies the configured timeout and maps failures onto
the orchestration error taxonomy:

- non-2xx status, timeout, connection failure -> TransportError
- invalid JSON or unexpected payload shape    -> MalformedResponseError

Nothing is retried here.
"""

from __future__ import annotations

import logging
from collections.abc import Sequence
from typing import Any

import httpx
from pydantic import TypeAdapter, ValidationError

from codesim.errors import (
    MalformedResponseError,
    PageOutOfRangeError,
    TransportError,
)
from codesim.models.code_file import CodeFile, FilesPage
from codesim.models.comparison import SimilarityPage, SimilarityResult

logger = logging.getLogger(__name__)

API_PREFIX = "/api/code-files"

_similarity_list = TypeAdapter(list[SimilarityResult])


def _past_last_page(payload: Any) -> int | None:
    """Return totalPages when the listing echoes a page number past the last page.

    Spring-style listings answer an out-of-range request with the requested
    number and an empty page instead of an error.
    """
    page = payload.get("page") if isinstance(payload, dict) else None
    if not isinstance(page, dict):
        return None
    number, total_pages = page.get("number"), page.get("totalPages")
    if not isinstance(number, int) or not isinstance(total_pages, int):
        return None
    if number >= max(total_pages, 1) and total_pages >= 0:
        return total_pages
    return None


class AnalysisClient:
    """Async client for the analysis/storage service's ``/api/code-files`` routes."""

    def __init__(
        self,
        base_url: str,
        timeout: float = 30.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self.client = httpx.AsyncClient(
            base_url=base_url,
            timeout=httpx.Timeout(timeout),
            transport=transport,
        )

    async def close(self) -> None:
        await self.client.aclose()

    # ------------------------------------------------------------------
    # Transport
    # ------------------------------------------------------------------

    async def _request(self, method: str, path: str, **kwargs: Any) -> httpx.Response:
        url = f"{API_PREFIX}{path}"
        try:
            response = await self.client.request(method, url, **kwargs)
        except httpx.TimeoutException as exc:
            logger.warning("%s %s timed out", method, url)
            raise TransportError(f"Analysis service timed out: {method} {url}") from exc
        except httpx.HTTPError as exc:
            logger.warning("%s %s failed: %s", method, url, exc)
            raise TransportError(f"Analysis service unreachable: {exc}") from exc

        if response.is_error:
            message = response.text.strip() or response.reason_phrase
            logger.warning(
                "%s %s returned %d: %s", method, url, response.status_code, message
            )
            raise TransportError(message, status_code=response.status_code)

        logger.info("%s %s -> %d", method, url, response.status_code)
        return response

    @staticmethod
    def _json(response: httpx.Response) -> Any:
        try:
            return response.json()
        except ValueError as exc:
            raise MalformedResponseError(
                f"Analysis service returned invalid JSON: {response.text[:200]!r}"
            ) from exc

    # ------------------------------------------------------------------
    # Library
    # ------------------------------------------------------------------

    async def list_files(self, page: int, size: int) -> FilesPage:
        """Fetch one page of uploaded files."""
        response = await self._request(
            "GET", "/files", params={"page": page, "size": size}
        )
        payload = self._json(response)
        try:
            return FilesPage.model_validate(payload)
        except ValidationError as exc:
            total_pages = _past_last_page(payload)
            if total_pages is not None:
                raise PageOutOfRangeError(page, total_pages) from exc
            raise MalformedResponseError(f"Unexpected file listing: {exc}") from exc

    async def upload_file(
        self, file_name: str, data: bytes, language: str
    ) -> CodeFile:
        """Upload one file; the service answers with the stored CodeFile."""
        response = await self._request(
            "POST",
            "/upload",
            files={"file": (file_name, data)},
            data={"language": language},
        )
        try:
            return CodeFile.model_validate(self._json(response))
        except ValidationError as exc:
            raise MalformedResponseError(f"Unexpected upload response: {exc}") from exc

    async def upload_files(
        self, files: Sequence[tuple[str, bytes]], language: str
    ) -> str:
        """Upload several files at once; returns the service's message."""
        response = await self._request(
            "POST",
            "/upload/batch",
            files=[("files", (name, data)) for name, data in files],
            data={"language": language},
        )
        return response.text

    # ------------------------------------------------------------------
    # Comparisons
    # ------------------------------------------------------------------

    async def compare_pair(self, file_id_a: int, file_id_b: int) -> float:
        """Similarity of two files as a number in [0, 100]."""
        response = await self._request(
            "GET", "/compare", params={"fileId1": file_id_a, "fileId2": file_id_b}
        )
        score = self._json(response)
        if isinstance(score, bool) or not isinstance(score, (int, float)):
            raise MalformedResponseError(
                f"Pairwise comparison returned a non-numeric score: {score!r}"
            )
        return float(score)

    async def compare_against_all(
        self,
        file_id: int,
        page: int,
        size: int,
        language_filter: str | None = None,
        min_similarity: float | None = None,
    ) -> SimilarityPage:
        """One page of similarities between ``file_id`` and the whole corpus."""
        params: dict[str, Any] = {"page": page, "size": size}
        if language_filter:
            params["languageFilter"] = language_filter
        if min_similarity is not None:
            params["minSimilarity"] = min_similarity
        response = await self._request(
            "GET", f"/compare-all/{file_id}", params=params
        )
        try:
            return SimilarityPage.model_validate(self._json(response))
        except ValidationError as exc:
            raise MalformedResponseError(
                f"Unexpected against-all response: {exc}"
            ) from exc

    async def compare_batch(
        self,
        target_file_id: int,
        other_file_ids: Sequence[int],
        language_filter: str | None = None,
        min_similarity: float | None = None,
    ) -> list[SimilarityResult]:
        """Similarities between the target and each listed file."""
        body: dict[str, Any] = {
            "targetFileId": target_file_id,
            "fileIds": list(other_file_ids),
        }
        if language_filter:
            body["languageFilter"] = language_filter
        if min_similarity is not None:
            body["minSimilarity"] = min_similarity
        response = await self._request("POST", "/compare-batch", json=body)
        try:
            return _similarity_list.validate_python(self._json(response))
        except ValidationError as exc:
            raise MalformedResponseError(f"Unexpected batch response: {exc}") from exc

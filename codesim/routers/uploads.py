"""Upload API router.

Endpoints:
- GET  /languages  -- supported languages and their file extensions
- POST /uploads    -- validate and upload one or more files, then refresh the library
"""

from __future__ import annotations

import logging

from fastapi import APIRouter, Depends, File, Form, UploadFile

from codesim.config import get_settings
from codesim.dependencies import get_analysis_client, get_session
from codesim.errors import ComparisonError
from codesim.models.code_file import SupportedLanguage
from codesim.models.upload import LanguageInfo, UploadedFileInfo, UploadResponse
from codesim.repositories.analysis_api import AnalysisClient
from codesim.routers._errors import to_http_exception
from codesim.services.session import SessionState
from codesim.services.upload_validation import (
    LANGUAGE_EXTENSIONS,
    format_file_size,
    validate_uploads,
)

logger = logging.getLogger(__name__)

router = APIRouter(tags=["uploads"])


@router.get("/languages", response_model=list[LanguageInfo])
def list_languages() -> list[LanguageInfo]:
    return [
        LanguageInfo(name=language, extensions=list(extensions))
        for language, extensions in LANGUAGE_EXTENSIONS.items()
    ]


async def _upload_size(upload: UploadFile, limit: int) -> int:
    """Size of ``upload`` without reading more than ``limit + 1`` bytes."""
    if upload.size is not None:
        return upload.size
    head = await upload.read(limit + 1)
    await upload.seek(0)
    return len(head)


@router.post("/uploads", response_model=UploadResponse, status_code=201)
async def upload_files(
    files: list[UploadFile] = File(..., description="Source files to upload"),
    language: SupportedLanguage = Form(...),
    session: SessionState = Depends(get_session),
    client: AnalysisClient = Depends(get_analysis_client),
) -> UploadResponse:
    """Upload files for ``language``.

    Every file is validated first; if any is rejected nothing is sent and no
    file body is read past the size limit.  A failed upload leaves the
    selection and the displayed page untouched.
    """
    max_bytes = get_settings().max_upload_bytes
    try:
        validate_uploads(
            [(f.filename or "", await _upload_size(f, max_bytes)) for f in files],
            language,
            max_bytes=max_bytes,
        )
        payloads = [(f.filename or "", await f.read()) for f in files]
        if len(payloads) == 1:
            name, data = payloads[0]
            stored = await client.upload_file(name, data, language.value)
            message = f"Uploaded {stored.file_name} as file {stored.id}"
        else:
            message = await client.upload_files(payloads, language.value)
    except ComparisonError as e:
        raise to_http_exception(e)

    logger.info("Uploaded %d %s file(s)", len(payloads), language.value)

    try:
        await session.library.refresh(client)
    except ComparisonError as e:
        # The upload itself succeeded; the next library fetch will pick it up
        logger.warning("Library refresh after upload failed: %s", e)

    return UploadResponse(
        success=True,
        language=language,
        files=[
            UploadedFileInfo(
                file_name=name, size=len(data), size_label=format_file_size(len(data))
            )
            for name, data in payloads
        ],
        message=message,
    )

"""Translate orchestration errors into HTTP responses.

- PreconditionError (incl. in-progress) -> 409
- UploadValidationError                 -> 400
- TransportError with upstream 404      -> 404
- other TransportError / malformed      -> 502
"""

from __future__ import annotations

from fastapi import HTTPException

from codesim.errors import (
    ComparisonError,
    PreconditionError,
    TransportError,
    UploadValidationError,
)


def to_http_exception(exc: ComparisonError) -> HTTPException:
    """Return the HTTPException a router should raise for ``exc``."""
    if isinstance(exc, PreconditionError):
        return HTTPException(status_code=409, detail=exc.message)
    if isinstance(exc, UploadValidationError):
        return HTTPException(status_code=400, detail=exc.problems)
    if isinstance(exc, TransportError) and exc.status_code == 404:
        return HTTPException(status_code=404, detail=exc.message)
    return HTTPException(status_code=502, detail=str(exc))

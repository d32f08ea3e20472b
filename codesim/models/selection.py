"""Pydantic models for the selection API."""

from pydantic import BaseModel

from codesim.models.code_file import CodeFile


class SelectionResponse(BaseModel):
    """Selected files in insertion order; the first one is the batch target."""

    files: list[CodeFile]
    size: int
    target_file_id: int | None = None

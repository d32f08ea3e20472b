"""Pydantic models for the upload API."""

from pydantic import BaseModel

from codesim.models.code_file import SupportedLanguage


class LanguageInfo(BaseModel):
    """A supported language and the file extensions accepted for it."""

    name: SupportedLanguage
    extensions: list[str]


class UploadedFileInfo(BaseModel):
    """A file accepted by the upload endpoint."""

    file_name: str
    size: int
    size_label: str


class UploadResponse(BaseModel):
    """Result of POST /uploads."""

    success: bool
    language: SupportedLanguage
    files: list[UploadedFileInfo]
    message: str | None = None

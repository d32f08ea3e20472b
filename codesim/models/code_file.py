"""Pydantic models for code files and paginated listings.

Field aliases match the analysis service's camelCase JSON
(``fileName``, ``createdAt``, ``totalElements`` ...).
"""

from __future__ import annotations

import math
from datetime import datetime
from enum import Enum

from pydantic import BaseModel, ConfigDict, Field, model_validator


class SupportedLanguage(str, Enum):
    """Languages the analysis service can vectorize."""

    JAVA = "JAVA"
    PYTHON = "PYTHON"
    CPP = "CPP"
    GO = "GO"
    RUBY = "RUBY"
    ADA = "ADA"
    JAVASCRIPT = "JAVASCRIPT"
    TYPESCRIPT = "TYPESCRIPT"


class CodeFile(BaseModel):
    """An uploaded source file. Immutable from the client's perspective."""

    model_config = ConfigDict(populate_by_name=True, frozen=True)

    id: int
    file_name: str = Field(alias="fileName")
    content: str = ""
    language: SupportedLanguage
    created_at: datetime = Field(alias="createdAt")
    trigram_vector: dict[str, int] = Field(default_factory=dict)


class PageInfo(BaseModel):
    """One page of a server-paginated collection (0-based ``number``)."""

    model_config = ConfigDict(populate_by_name=True, frozen=True)

    number: int = Field(ge=0)
    size: int = Field(ge=0)
    total_elements: int = Field(alias="totalElements", ge=0)
    total_pages: int = Field(alias="totalPages", ge=0)

    @model_validator(mode="after")
    def _check_consistency(self) -> "PageInfo":
        if self.size > 0:
            expected = total_pages_for(self.total_elements, self.size)
            if self.total_pages != expected:
                raise ValueError(
                    f"totalPages={self.total_pages} does not match "
                    f"ceil({self.total_elements}/{self.size})={expected}"
                )
        if self.number >= max(self.total_pages, 1):
            raise ValueError(
                f"page number {self.number} out of range for {self.total_pages} pages"
            )
        return self


class FilesPage(BaseModel):
    """Listing payload: one page of code files plus its PageInfo."""

    content: list[CodeFile]
    page: PageInfo


class LibraryItem(BaseModel):
    """A library row as rendered: the file plus its selection mark."""

    file: CodeFile
    selected: bool


class LibraryViewResponse(BaseModel):
    """Current library page after local search/sort, with navigation flags."""

    items: list[LibraryItem]
    page: PageInfo | None
    has_previous: bool
    has_next: bool


def total_pages_for(total_elements: int, size: int) -> int:
    """Return ``ceil(total_elements / size)``; 0 when ``size`` is 0."""
    if size <= 0:
        return 0
    return math.ceil(total_elements / size)

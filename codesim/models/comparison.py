"""Pydantic models for comparison requests, results, and panel state."""

from __future__ import annotations

from enum import Enum

from pydantic import BaseModel, ConfigDict, Field

from codesim.models.code_file import PageInfo


class ComparisonMode(str, Enum):
    """The three mutually exclusive comparison strategies."""

    PAIRWISE = "pairwise"
    AGAINST_ALL = "against-all"
    BATCH = "batch"


class ComparisonFilters(BaseModel):
    """Optional filters for against-all and batch comparisons."""

    model_config = ConfigDict(frozen=True)

    language_filter: str | None = None
    min_similarity: float = Field(1, ge=1, le=100)


class SimilarityResult(BaseModel):
    """One compared file and its similarity score (0-100) to the target."""

    model_config = ConfigDict(populate_by_name=True, frozen=True)

    file_id: int = Field(alias="fileId")
    file_name: str = Field(alias="fileName")
    language: str
    similarity: float


class SimilarityPage(BaseModel):
    """One page of against-all comparison results."""

    content: list[SimilarityResult]
    page: PageInfo


class ClassifiedScore(BaseModel):
    """A score with its display tier and semantic colour."""

    similarity: float
    tier: str
    color: str


class ClassifiedResult(ClassifiedScore):
    """SimilarityResult enriched with tier and colour."""

    file_id: int
    file_name: str
    language: str


class ComparisonOutcome(BaseModel):
    """Result of one comparison run.

    ``pairwise`` is set for pairwise runs; ``results`` (sorted by
    similarity, highest first) for against-all and batch runs.
    """

    mode: ComparisonMode
    pairwise: ClassifiedScore | None = None
    results: list[ClassifiedResult] = []


class ModeAvailability(BaseModel):
    """Whether a mode can run with the current selection, and why."""

    mode: ComparisonMode
    label: str
    description: str
    requirement: str
    can_run: bool
    selected: bool
    target_file_id: int | None = None


class ModesResponse(BaseModel):
    """All comparison modes for the session's current selection."""

    selection_size: int
    in_flight: bool
    modes: list[ModeAvailability]


class SelectModeRequest(BaseModel):
    """Request body for PUT /comparisons/mode."""

    mode: ComparisonMode


class RunComparisonRequest(BaseModel):
    """Request body for POST /comparisons/run.

    ``mode`` defaults to the mode currently chosen on the panel.
    """

    mode: ComparisonMode | None = None
    language_filter: str | None = None
    min_similarity: float = Field(1, ge=1, le=100)


class PanelStateResponse(BaseModel):
    """Snapshot of the comparison panel for the session."""

    mode: ComparisonMode
    in_flight: bool
    outcome: ComparisonOutcome | None = None
    error: str | None = None

"""Comparison mode selection, request building, and dispatch.

Three mutually exclusive strategies, each with a precondition over the
selection size:

- pairwise     exactly 2 files, symmetric
- against-all  exactly 1 file, compared with the whole remote corpus
- batch        2 or more files, first-inserted is the target

``build_request`` turns (mode, selection, filters) into one of the
request variants below or raises PreconditionError before any I/O.
``execute_request`` dispatches a variant to the analysis client and
classifies what comes back.  ``ComparisonPanel`` holds the per-session
runtime state, including the in-flight guard.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field

from codesim.errors import (
    ComparisonError,
    ComparisonInProgressError,
    MalformedResponseError,
    PreconditionError,
)
from codesim.models.comparison import (
    ComparisonFilters,
    ComparisonMode,
    ComparisonOutcome,
    ModeAvailability,
    SimilarityResult,
)
from codesim.repositories.analysis_api import AnalysisClient
from codesim.services.classifier import classify_results, classify_score
from codesim.services.pagination import has_next
from codesim.services.selection import SelectionSet

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ModeInfo:
    """Display text for a comparison mode."""

    label: str
    description: str
    requirement: str


MODE_INFO: dict[ComparisonMode, ModeInfo] = {
    ComparisonMode.PAIRWISE: ModeInfo(
        label="Pairwise Comparison",
        description="Compare two selected files directly",
        requirement="requires exactly 2 selected files",
    ),
    ComparisonMode.AGAINST_ALL: ModeInfo(
        label="Compare Against All",
        description="Compare one file against all files in the database",
        requirement="requires exactly 1 selected file",
    ),
    ComparisonMode.BATCH: ModeInfo(
        label="Batch Comparison",
        description="Compare the first selected file against all other selected files",
        requirement="requires 2 or more selected files",
    ),
}


def can_run(mode: ComparisonMode, selection_size: int) -> bool:
    """Whether ``mode``'s precondition holds for ``selection_size`` files."""
    match mode:
        case ComparisonMode.PAIRWISE:
            return selection_size == 2
        case ComparisonMode.AGAINST_ALL:
            return selection_size == 1
        case ComparisonMode.BATCH:
            return selection_size >= 2
    return False


# ---------------------------------------------------------------------------
# Request variants
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class PairwiseRequest:
    file_id_a: int
    file_id_b: int


@dataclass(frozen=True)
class AgainstAllRequest:
    file_id: int
    filters: ComparisonFilters = field(default_factory=ComparisonFilters)


@dataclass(frozen=True)
class BatchRequest:
    target_file_id: int
    other_file_ids: tuple[int, ...]
    filters: ComparisonFilters = field(default_factory=ComparisonFilters)


ComparisonRequest = PairwiseRequest | AgainstAllRequest | BatchRequest


def build_request(
    mode: ComparisonMode,
    selection: SelectionSet,
    filters: ComparisonFilters | None = None,
) -> ComparisonRequest:
    """Build the outbound request for ``mode``.

    Raises PreconditionError when the selection does not satisfy the mode.
    Filters are ignored for pairwise comparisons.
    """
    size = selection.size()
    if not can_run(mode, size):
        info = MODE_INFO[mode]
        raise PreconditionError(
            f"{info.label} {info.requirement}; {size} selected"
        )
    filters = filters or ComparisonFilters()
    files = selection.files

    match mode:
        case ComparisonMode.PAIRWISE:
            return PairwiseRequest(file_id_a=files[0].id, file_id_b=files[1].id)
        case ComparisonMode.AGAINST_ALL:
            return AgainstAllRequest(file_id=files[0].id, filters=filters)
        case ComparisonMode.BATCH:
            return BatchRequest(
                target_file_id=files[0].id,
                other_file_ids=tuple(f.id for f in files[1:]),
                filters=filters,
            )
    raise PreconditionError(f"Unknown comparison mode: {mode!r}")


# ---------------------------------------------------------------------------
# Dispatch
# ---------------------------------------------------------------------------


async def fetch_against_all(
    client: AnalysisClient, request: AgainstAllRequest, page_size: int
) -> list[SimilarityResult]:
    """Page through against-all results until the last page and merge them."""
    results: list[SimilarityResult] = []
    page_index = 0
    while True:
        page = await client.compare_against_all(
            request.file_id,
            page=page_index,
            size=page_size,
            language_filter=request.filters.language_filter,
            min_similarity=request.filters.min_similarity,
        )
        if page.page.number != page_index:
            raise MalformedResponseError(
                f"Requested result page {page_index}, received page {page.page.number}"
            )
        results.extend(page.content)
        if not has_next(page.page):
            return results
        page_index += 1


async def execute_request(
    client: AnalysisClient,
    request: ComparisonRequest,
    *,
    page_size: int,
) -> ComparisonOutcome:
    """Send ``request`` to the analysis service and classify the response.

    ``page_size`` is the against-all page size, normally
    ``Settings.compare_all_page_size``.
    """
    match request:
        case PairwiseRequest(file_id_a=a, file_id_b=b):
            score = await client.compare_pair(a, b)
            logger.info("Pairwise %d vs %d: %.2f", a, b, score)
            return ComparisonOutcome(
                mode=ComparisonMode.PAIRWISE, pairwise=classify_score(score)
            )
        case AgainstAllRequest():
            results = await fetch_against_all(client, request, page_size)
            logger.info(
                "Against-all for file %d: %d results", request.file_id, len(results)
            )
            return ComparisonOutcome(
                mode=ComparisonMode.AGAINST_ALL, results=classify_results(results)
            )
        case BatchRequest():
            results = await client.compare_batch(
                request.target_file_id,
                request.other_file_ids,
                language_filter=request.filters.language_filter,
                min_similarity=request.filters.min_similarity,
            )
            logger.info(
                "Batch for target %d against %d files: %d results",
                request.target_file_id,
                len(request.other_file_ids),
                len(results),
            )
            return ComparisonOutcome(
                mode=ComparisonMode.BATCH, results=classify_results(results)
            )
    raise TypeError(f"Unsupported comparison request: {request!r}")


# ---------------------------------------------------------------------------
# Panel state
# ---------------------------------------------------------------------------


class ComparisonPanel:
    """Chosen mode, in-flight guard, and last outcome for one session.

    The mode only changes through ``select_mode``.  A failed run records
    its message in ``error`` and keeps the previous ``outcome``.
    """

    def __init__(self, mode: ComparisonMode = ComparisonMode.PAIRWISE) -> None:
        self.mode = mode
        self.in_flight = False
        self.outcome: ComparisonOutcome | None = None
        self.error: str | None = None

    def select_mode(self, mode: ComparisonMode) -> None:
        self.mode = mode

    def can_run(self, selection: SelectionSet) -> bool:
        """Whether the run trigger is enabled."""
        return not self.in_flight and can_run(self.mode, selection.size())

    def availability(self, selection: SelectionSet) -> list[ModeAvailability]:
        size = selection.size()
        target_id = selection.target.id if selection.target is not None else None
        items = []
        for mode, info in MODE_INFO.items():
            runnable = can_run(mode, size)
            # Pairwise is symmetric and has no target
            has_target = runnable and mode != ComparisonMode.PAIRWISE
            items.append(
                ModeAvailability(
                    mode=mode,
                    label=info.label,
                    description=info.description,
                    requirement=info.requirement,
                    can_run=runnable,
                    selected=mode == self.mode,
                    target_file_id=target_id if has_target else None,
                )
            )
        return items

    async def run(
        self,
        client: AnalysisClient,
        selection: SelectionSet,
        filters: ComparisonFilters | None = None,
        *,
        page_size: int,
    ) -> ComparisonOutcome:
        """Build and execute a comparison for the current mode.

        Raises ComparisonInProgressError while another run is pending and
        PreconditionError before any I/O when the selection does not fit.
        """
        if self.in_flight:
            raise ComparisonInProgressError()
        request = build_request(self.mode, selection, filters)

        self.in_flight = True
        self.error = None
        try:
            outcome = await execute_request(client, request, page_size=page_size)
        except ComparisonError as exc:
            logger.warning("%s comparison failed: %s", self.mode.value, exc)
            self.error = str(exc)
            raise
        finally:
            self.in_flight = False

        self.outcome = outcome
        return outcome

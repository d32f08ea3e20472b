"""Exception hierarchy for comparison orchestration.

- PreconditionError: the current selection cannot satisfy the requested mode
- ComparisonInProgressError: a comparison is already running for the session
- TransportError: the analysis service failed or could not be reached
- MalformedResponseError: the analysis service answered with an unexpected shape
- UploadValidationError: one or more files were rejected before upload
- PageOutOfRangeError: a library page past the last one was requested

None of these are retried here; retry policy belongs to the caller.
"""

from __future__ import annotations


class ComparisonError(Exception):
    """Base class for all orchestration failures surfaced to the UI layer."""

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


class PreconditionError(ComparisonError):
    """The requested comparison mode cannot run with the current selection."""


class ComparisonInProgressError(PreconditionError):
    """A comparison is already in flight; the trigger is disabled until it settles."""

    def __init__(self) -> None:
        super().__init__("A comparison is already running")


class TransportError(ComparisonError):
    """Network or service-level failure.

    ``status_code`` is the HTTP status returned by the analysis service, or
    ``None`` when no response was received (timeout, refused connection).
    """

    def __init__(self, message: str, status_code: int | None = None) -> None:
        super().__init__(message)
        self.status_code = status_code

    def __str__(self) -> str:
        if self.status_code is None:
            return self.message
        return f"{self.message} (HTTP {self.status_code})"


class MalformedResponseError(ComparisonError):
    """Response payload violates the documented contract."""


class UploadValidationError(ComparisonError):
    """One or more files failed client-side validation."""

    def __init__(self, problems: list[str]) -> None:
        super().__init__("; ".join(problems))
        self.problems = problems


class PageOutOfRangeError(ComparisonError):
    """A listing page was requested past the last page of the collection.

    ``total_pages`` is the page count the service reported with its answer.
    """

    def __init__(self, page: int, total_pages: int) -> None:
        super().__init__(f"Page {page} is past the last page ({total_pages} pages)")
        self.page = page
        self.total_pages = total_pages

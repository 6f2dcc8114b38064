"""
Failure classification for catalog and collection operations.

Every failure the caller can see is a KnownError subclass carrying a kind,
a user-appropriate message and an optional suggestion. Per-record problems
(bad JSON file, unusable CSV row) are logged and skipped instead.
"""

from enum import Enum
from typing import Any

from pydantic import BaseModel, Field


class FailureKind(str, Enum):
    """Classification of failure types."""

    # Input validation failures
    INVALID_INPUT = "invalid_input"
    INPUT_TOO_LARGE = "input_too_large"
    UNKNOWN_CARD = "unknown_card"

    # Resource failures
    NOT_FOUND = "not_found"

    # Build and load failures
    LAYOUT_NOT_RECOGNIZED = "layout_not_recognized"
    CATALOG_UNAVAILABLE = "catalog_unavailable"


class FailureDetail(BaseModel):
    """Detailed information about a failure."""

    kind: FailureKind = Field(
        ...,
        description="Classification of the failure",
    )
    message: str = Field(
        ...,
        description="User-appropriate explanation of what went wrong",
    )
    detail: str | None = Field(
        default=None,
        description="Additional technical detail (optional)",
    )
    suggestion: str | None = Field(
        default=None,
        description="Suggested action for the user",
    )


class KnownError(Exception):
    """
    Base class for exceptions that represent known, explainable failures.

    Subclass this for errors where the system knows exactly what went wrong.
    """

    def __init__(
        self,
        kind: FailureKind,
        message: str,
        detail: str | None = None,
        suggestion: str | None = None,
        status_code: int = 400,
    ):
        self.kind = kind
        self.message = message
        self.detail = detail
        self.suggestion = suggestion
        self.status_code = status_code
        super().__init__(message)

    def to_detail(self) -> FailureDetail:
        """Convert to a FailureDetail."""
        return FailureDetail(
            kind=self.kind,
            message=self.message,
            detail=self.detail,
            suggestion=self.suggestion,
        )

    def to_response(self) -> dict[str, Any]:
        """JSON body for HTTP responses."""
        return {"failure": self.to_detail().model_dump(mode="json")}


class LayoutNotRecognizedError(KnownError):
    """Raised when a source tree matches none of the known export layouts."""

    def __init__(self, root: str, language: str, attempted: list[str]):
        self.root = root
        self.language = language
        self.attempted = attempted
        super().__init__(
            kind=FailureKind.LAYOUT_NOT_RECOGNIZED,
            message=(
                f"Unknown source layout for root '{root}' and language '{language}'. "
                f"Tried: {', '.join(attempted)}."
            ),
            suggestion=(
                f"Expected <root>/{language}/cards/**/*.json, "
                f"<root>/data/{language}/*.json, or "
                f"<root>/<export>-{language}/json/cards_*.json."
            ),
            status_code=422,
        )


class CatalogUnavailableError(KnownError):
    """Raised when the catalog artifact is missing, unreadable or empty."""

    def __init__(self, source: str, reason: str):
        self.source = source
        super().__init__(
            kind=FailureKind.CATALOG_UNAVAILABLE,
            message=f"Card catalog not available from {source}: {reason}",
            suggestion=(
                "Build it with `python -m cardbinder.jobs.build_catalog` "
                "or check CARDBINDER_CATALOG_SOURCE."
            ),
            status_code=503,
        )


class InvalidImportError(KnownError):
    """Raised when import text cannot be interpreted at all."""

    def __init__(self, message: str, detail: str | None = None):
        super().__init__(
            kind=FailureKind.INVALID_INPUT,
            message=message,
            detail=detail,
            status_code=400,
        )


class ImportTooLargeError(KnownError):
    """Raised when an import exceeds the maximum number of data lines."""

    def __init__(self, max_lines: int, actual_lines: int):
        self.max_lines = max_lines
        self.actual_lines = actual_lines
        super().__init__(
            kind=FailureKind.INPUT_TOO_LARGE,
            message=f"CSV too large. Maximum is {max_lines} data lines.",
            detail=f"Received {actual_lines} data lines",
            suggestion="Split the file into smaller imports.",
            status_code=413,
        )


class UnknownCardError(KnownError):
    """Raised when a card code is not present in the catalog."""

    def __init__(self, codes: list[str]):
        self.codes = codes
        super().__init__(
            kind=FailureKind.UNKNOWN_CARD,
            message="Card code not found in the catalog.",
            detail=", ".join(codes),
            suggestion="Check the code or rebuild the catalog.",
            status_code=404,
        )


class ItemNotFoundError(KnownError):
    """Raised when a collection item id does not exist."""

    def __init__(self, item_id: str):
        self.item_id = item_id
        super().__init__(
            kind=FailureKind.NOT_FOUND,
            message=f"Collection item '{item_id}' not found.",
            status_code=404,
        )

"""
Failure Envelope: Unified Response Classification.

Every request that reaches the HTTP layer or the worker channel ends in one
of three outcomes:

- Success: the request completed and carries its payload
- KnownFailure: the system knows why it failed (no data loaded, bad export,
  unknown request kind, worker terminated)
- UnknownFailure: anything else

Request-level failures are tied to the correlation id of the request that
caused them. Row-level import defects never reach this module; the importer
absorbs them.

AUTHORITY BOUNDARY:
All user-visible responses pass through `finalize_response()`.
"""

from enum import Enum
from typing import Any, Generic, TypeVar

from pydantic import BaseModel, Field


class FailureKind(str, Enum):
    """Classification of failure types."""

    # Input failures
    INVALID_INPUT = "invalid_input"
    INVALID_EXPORT = "invalid_export"
    UNKNOWN_REQUEST = "unknown_request"

    # State failures
    NO_DATA_LOADED = "no_data_loaded"

    # Channel failures
    TRANSPORT_FAILURE = "transport_failure"

    # Unknown
    UNKNOWN = "unknown"


class OutcomeType(str, Enum):
    """High-level outcome classification."""

    SUCCESS = "success"
    KNOWN_FAILURE = "known_failure"
    UNKNOWN_FAILURE = "unknown_failure"


T = TypeVar("T")


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
    request_id: str | None = Field(
        default=None,
        description="Correlation id of the request that failed",
    )


class ApiResponse(BaseModel, Generic[T]):
    """
    Universal response envelope.

    Every response is classified into one of the outcome types so no
    failure reaches the caller unexplained.
    """

    outcome: OutcomeType = Field(
        ...,
        description="High-level classification of the result",
    )
    data: T | None = Field(
        default=None,
        description="Response data (present on success)",
    )
    failure: FailureDetail | None = Field(
        default=None,
        description="Failure details (present on non-success)",
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
        status_code: int = 400,
        request_id: str | None = None,
    ):
        self.kind = kind
        self.message = message
        self.detail = detail
        self.status_code = status_code
        self.request_id = request_id
        super().__init__(message)

    def to_response(self) -> ApiResponse[Any]:
        """Convert to a finalized ApiResponse."""
        response: ApiResponse[Any] = ApiResponse(
            outcome=OutcomeType.KNOWN_FAILURE,
            failure=FailureDetail(
                kind=self.kind,
                message=self.message,
                detail=self.detail,
                request_id=self.request_id,
            ),
        )
        return finalize_response(response)


class NoDataLoadedError(KnownError):
    """A query or match was requested for an export that is not loaded."""

    def __init__(self, session_id: str | None = None):
        self.session_id = session_id
        detail = f"session_id={session_id}" if session_id else None
        super().__init__(
            kind=FailureKind.NO_DATA_LOADED,
            message="No Helvault data loaded",
            detail=detail,
            status_code=404,
        )


class UnknownRequestError(KnownError):
    """The worker was handed a request kind it does not handle."""

    def __init__(self, request_kind: str):
        self.request_kind = request_kind
        super().__init__(
            kind=FailureKind.UNKNOWN_REQUEST,
            message=f"Unknown request kind: {request_kind}",
            status_code=400,
        )


class HelvaultFormatError(KnownError):
    """The uploaded bytes are not a readable Helvault export."""

    def __init__(self, reason: str):
        super().__init__(
            kind=FailureKind.INVALID_EXPORT,
            message="Failed to load Helvault",
            detail=reason,
            status_code=400,
        )


# =============================================================================
# FAILURE AUTHORITY BOUNDARY
# =============================================================================

STANDARD_UNKNOWN_MESSAGE = "The request failed for an unexpected reason."

# Track finalized responses
_finalized_responses: set[int] = set()


def finalize_response(response: ApiResponse[Any]) -> ApiResponse[Any]:
    """
    Finalize a response through the authority boundary.

    Raises:
        ValueError: If response structure is invalid
    """
    if response.outcome == OutcomeType.SUCCESS:
        if response.failure is not None:
            raise ValueError("Success response must not have failure details")
    else:
        if response.failure is None:
            raise ValueError(f"{response.outcome.value} response must have failure details")

    _finalized_responses.add(id(response))

    return response


def is_finalized(response: ApiResponse[Any]) -> bool:
    """Check if a response has passed through the authority boundary."""
    return id(response) in _finalized_responses


def create_unknown_failure(
    exception: BaseException,
    request_id: str | None = None,
) -> ApiResponse[Any]:
    """
    Create an unknown failure response from an exception.

    The message is fixed; only the exception type is exposed.
    """
    response: ApiResponse[Any] = ApiResponse(
        outcome=OutcomeType.UNKNOWN_FAILURE,
        failure=FailureDetail(
            kind=FailureKind.UNKNOWN,
            message=STANDARD_UNKNOWN_MESSAGE,
            detail=type(exception).__name__,
            request_id=request_id,
        ),
    )
    return finalize_response(response)

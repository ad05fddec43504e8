"""
Worker request and response messages.

Each operation the worker performs is its own request type, tagged by
`kind`. Raw messages (JSON from the HTTP layer) are parsed into the tagged
union with `parse_request`, which reports unknown kinds by name.
"""

from typing import Annotated, Any, Literal

from pydantic import BaseModel, ConfigDict, Field, TypeAdapter, ValidationError

from bagofholding.models.failure import FailureKind, KnownError, UnknownRequestError
from bagofholding.models.snapshot import ImportSummary


class _Request(BaseModel):
    model_config = ConfigDict(frozen=True)


class LoadHelvaultRequest(_Request):
    """Import an export. Produces a new session."""

    kind: Literal["load-helvault"] = "load-helvault"
    data: bytes = Field(..., description="Raw .helvault file contents")


class QueryCardsRequest(_Request):
    """Search the printings of a loaded export."""

    kind: Literal["query-cards"] = "query-cards"
    session_id: str
    set: str | None = None
    name: str | None = None
    colors: list[str] = Field(default_factory=list)
    types: list[str] = Field(default_factory=list)
    limit: int | None = Field(default=None, ge=0)
    offset: int = Field(default=0, ge=0)


class QueryInventoryRequest(_Request):
    """List inventory rows of a loaded export, optionally for one collection."""

    kind: Literal["query-inventory"] = "query-inventory"
    session_id: str
    collection_id: str | None = None


class MatchDecklistRequest(_Request):
    """Resolve decklist text against a loaded export."""

    kind: Literal["match-decklist"] = "match-decklist"
    session_id: str
    decklist: str


class CloseSessionRequest(_Request):
    """Forget a loaded export."""

    kind: Literal["close-session"] = "close-session"
    session_id: str


WorkerRequest = Annotated[
    LoadHelvaultRequest
    | QueryCardsRequest
    | QueryInventoryRequest
    | MatchDecklistRequest
    | CloseSessionRequest,
    Field(discriminator="kind"),
]

REQUEST_KINDS = frozenset(
    {
        "load-helvault",
        "query-cards",
        "query-inventory",
        "match-decklist",
        "close-session",
    }
)

# Response kind reported for each request kind
RESPONSE_KINDS: dict[str, str] = {
    "load-helvault": "helvault-loaded",
    "query-cards": "cards-query-result",
    "query-inventory": "inventory-query-result",
    "match-decklist": "match-result",
    "close-session": "session-closed",
}

_request_adapter = TypeAdapter(WorkerRequest)


def parse_request(raw: dict[str, Any]) -> WorkerRequest:
    """
    Parse a raw message into its request type.

    Raises:
        UnknownRequestError: If the kind is missing or not handled
        KnownError: If the message does not fit its request type
    """
    kind = raw.get("kind")
    if kind not in REQUEST_KINDS:
        raise UnknownRequestError(str(kind))

    try:
        return _request_adapter.validate_python(raw)
    except ValidationError as e:
        raise KnownError(
            kind=FailureKind.INVALID_INPUT,
            message=f"Invalid {kind} request",
            detail=str(e),
        ) from e


class LoadResult(BaseModel):
    """Payload of a load: the new session and what was imported."""

    session_id: str
    summary: ImportSummary


class WorkerResponse(BaseModel):
    """A completed request, tied to its correlation id."""

    id: str
    kind: str
    payload: Any = None

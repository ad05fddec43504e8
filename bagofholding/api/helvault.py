"""
Helvault API endpoints.

Upload an export, then query it and match decklists against it by session
id. All work runs on the background worker.
"""

from typing import Annotated, Any

from fastapi import APIRouter, Body, Depends, HTTPException, Query, Request, status
from fastapi.encoders import jsonable_encoder
from pydantic import BaseModel, Field

from bagofholding.api.decklist import DeckListEntryModel, DeckListTextRequest
from bagofholding.api.dependencies import get_helvault_client
from bagofholding.config import settings
from bagofholding.models.card import Card
from bagofholding.models.deck import MatchResult
from bagofholding.models.failure import FailureKind, KnownError
from bagofholding.models.inventory import InventoryItem
from bagofholding.models.snapshot import ImportSummary
from bagofholding.services.inventory_queries import CardFilters
from bagofholding.worker.client import HelvaultClient
from bagofholding.worker.messages import LoadHelvaultRequest, parse_request

router = APIRouter(prefix="/helvault", tags=["helvault"])

ClientDep = Annotated[HelvaultClient, Depends(get_helvault_client)]


class LoadResponse(BaseModel):
    """Response for an uploaded export."""

    session_id: str = Field(..., description="Pass to later queries and matches")
    summary: ImportSummary


class CardsResponse(BaseModel):
    cards: list[Card] = Field(default_factory=list)
    total: int = 0


class InventoryResponse(BaseModel):
    inventory: list[InventoryItem] = Field(default_factory=list)
    total_copies: int = 0


class MatchLine(BaseModel):
    """Resolution of one decklist entry."""

    entry: DeckListEntryModel
    owned: list[InventoryItem] = Field(default_factory=list)
    owned_count: int = 0
    missing: int = 0
    bling: list[Card] = Field(default_factory=list)

    @classmethod
    def from_result(cls, result: MatchResult) -> "MatchLine":
        return cls(
            entry=DeckListEntryModel.from_entry(result.entry),
            owned=list(result.owned),
            owned_count=result.owned_count,
            missing=result.missing,
            bling=list(result.bling),
        )


class MatchResponse(BaseModel):
    results: list[MatchLine] = Field(default_factory=list)
    total_requested: int = 0
    total_missing: int = 0


class CloseResponse(BaseModel):
    session_id: str
    closed: bool


@router.post("", response_model=LoadResponse)
async def upload_helvault(request: Request, client: ClientDep) -> LoadResponse:
    """
    Import a .helvault export sent as the raw request body.

    The import runs on the worker; the returned session id identifies the
    loaded data for the other endpoints.
    """
    data = await request.body()

    if not data:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Export body cannot be empty",
        )
    if len(data) > settings.max_export_bytes:
        raise HTTPException(
            status_code=status.HTTP_413_REQUEST_ENTITY_TOO_LARGE,
            detail=f"Export exceeds {settings.max_export_bytes} bytes",
        )

    result = await client.open_helvault(data)
    return LoadResponse(session_id=result.session_id, summary=result.summary)


@router.get("/{session_id}/cards", response_model=CardsResponse)
async def get_cards(
    session_id: str,
    client: ClientDep,
    set_code: Annotated[str | None, Query(alias="set")] = None,
    name: str | None = None,
    colors: Annotated[list[str] | None, Query()] = None,
    types: Annotated[list[str] | None, Query()] = None,
    limit: Annotated[int | None, Query(ge=0)] = None,
    offset: Annotated[int, Query(ge=0)] = 0,
) -> CardsResponse:
    """Search printings of a loaded export."""
    page = await client.query_cards(
        session_id,
        CardFilters(set=set_code, name=name, colors=colors or [], types=types or []),
        limit=limit,
        offset=offset,
    )
    return CardsResponse(cards=page.cards, total=page.total)


@router.get("/{session_id}/inventory", response_model=InventoryResponse)
async def get_inventory(
    session_id: str,
    client: ClientDep,
    collection_id: str | None = None,
) -> InventoryResponse:
    """Inventory rows of a loaded export, optionally for one collection."""
    items = await client.query_inventory(session_id, collection_id)
    return InventoryResponse(
        inventory=items,
        total_copies=sum(item.copies for item in items),
    )


@router.post("/{session_id}/match", response_model=MatchResponse)
async def match_decklist(
    session_id: str,
    request: DeckListTextRequest,
    client: ClientDep,
) -> MatchResponse:
    """
    Resolve a decklist against a loaded export.

    Copies are allocated from collections in priority order.
    """
    results = await client.match_decklist(session_id, request.text)
    return MatchResponse(
        results=[MatchLine.from_result(result) for result in results],
        total_requested=sum(result.entry.qty for result in results),
        total_missing=sum(result.missing for result in results),
    )


@router.delete("/{session_id}", response_model=CloseResponse)
async def close_helvault(session_id: str, client: ClientDep) -> CloseResponse:
    """Forget a loaded export."""
    closed = await client.close_session(session_id)
    return CloseResponse(session_id=session_id, closed=closed)


@router.post("/rpc")
async def call_worker(
    message: Annotated[dict[str, Any], Body()],
    client: ClientDep,
) -> dict[str, Any]:
    """
    Send a raw worker message ({"kind": ..., ...}).

    Exports are uploaded through POST /helvault, not through this endpoint.
    """
    worker_request = parse_request(message)
    if isinstance(worker_request, LoadHelvaultRequest):
        raise KnownError(
            kind=FailureKind.INVALID_INPUT,
            message="Upload exports with POST /helvault",
        )

    response = await client.rpc.call(worker_request)
    encoded: dict[str, Any] = jsonable_encoder(response)
    return encoded

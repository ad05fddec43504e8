"""
Worker request handlers.

`HelvaultWorker.handle` runs in the background context (a worker thread) and
dispatches on the request type. Every handler is synchronous and returns the
response payload; failures are raised and reported by the channel against
the request's correlation id.
"""

import logging
from typing import Any

from bagofholding.analysis.matching import compute_matches
from bagofholding.config import settings
from bagofholding.models.failure import FailureKind, KnownError, UnknownRequestError
from bagofholding.parsers.decklist import parse_deck_list
from bagofholding.services.helvault_importer import load_helvault
from bagofholding.services.inventory_queries import CardFilters, query_cards, query_inventory
from bagofholding.worker.messages import (
    CloseSessionRequest,
    LoadHelvaultRequest,
    LoadResult,
    MatchDecklistRequest,
    QueryCardsRequest,
    QueryInventoryRequest,
)
from bagofholding.worker.sessions import SessionRegistry

logger = logging.getLogger(__name__)


class HelvaultWorker:
    """Executes worker requests against the sessions it owns."""

    def __init__(self, max_sessions: int | None = None) -> None:
        self.sessions = SessionRegistry(
            max_sessions if max_sessions is not None else settings.max_sessions
        )

    def handle(self, request: Any) -> Any:
        """
        Execute one request and return its payload.

        Raises:
            UnknownRequestError: If the request is not a known request type
            NoDataLoadedError: If the request names a session that is not loaded
            HelvaultFormatError: If a load is handed something other than an export
        """
        logger.debug("Handling %s request", getattr(request, "kind", type(request).__name__))

        match request:
            case LoadHelvaultRequest(data=data):
                snapshot = load_helvault(data)
                session = self.sessions.add(snapshot)
                return LoadResult(session_id=session.id, summary=snapshot.summary())

            case QueryCardsRequest():
                snapshot = self.sessions.get(request.session_id).snapshot
                filters = CardFilters(
                    set=request.set,
                    name=request.name,
                    colors=list(request.colors),
                    types=list(request.types),
                )
                return query_cards(snapshot, filters, limit=request.limit, offset=request.offset)

            case QueryInventoryRequest(session_id=session_id, collection_id=collection_id):
                snapshot = self.sessions.get(session_id).snapshot
                try:
                    return query_inventory(snapshot, collection_id)
                except ValueError as e:
                    raise KnownError(
                        kind=FailureKind.INVALID_INPUT,
                        message="Invalid collection id",
                        detail=str(e),
                    ) from e

            case MatchDecklistRequest(session_id=session_id, decklist=decklist):
                snapshot = self.sessions.get(session_id).snapshot
                entries = parse_deck_list(decklist)
                return compute_matches(
                    entries,
                    snapshot.inventory,
                    snapshot.cards,
                    snapshot.collections,
                )

            case CloseSessionRequest(session_id=session_id):
                return self.sessions.remove(session_id)

            case _:
                kind = getattr(request, "kind", type(request).__name__)
                raise UnknownRequestError(str(kind))

"""
High-level client for Helvault operations.

Wraps the worker channel with one coroutine per operation.
"""

from bagofholding.models.deck import MatchResult
from bagofholding.models.inventory import InventoryItem
from bagofholding.services.inventory_queries import CardFilters, CardPage
from bagofholding.worker.handlers import HelvaultWorker
from bagofholding.worker.messages import (
    CloseSessionRequest,
    LoadHelvaultRequest,
    LoadResult,
    MatchDecklistRequest,
    QueryCardsRequest,
    QueryInventoryRequest,
)
from bagofholding.worker.rpc import WorkerRPC


class HelvaultClient:
    """Client for a background Helvault worker."""

    def __init__(self, rpc: WorkerRPC) -> None:
        self.rpc = rpc

    async def open_helvault(self, data: bytes) -> LoadResult:
        """
        Import a .helvault export.

        Returns:
            LoadResult with the session id to pass to later calls and the
            imported inventory rows and aggregates
        """
        response = await self.rpc.call(LoadHelvaultRequest(data=data))
        result: LoadResult = response.payload
        return result

    async def query_cards(
        self,
        session_id: str,
        filters: CardFilters | None = None,
        limit: int | None = None,
        offset: int = 0,
    ) -> CardPage:
        filters = filters or CardFilters()
        response = await self.rpc.call(
            QueryCardsRequest(
                session_id=session_id,
                set=filters.set,
                name=filters.name,
                colors=filters.colors,
                types=filters.types,
                limit=limit,
                offset=offset,
            )
        )
        page: CardPage = response.payload
        return page

    async def query_inventory(
        self,
        session_id: str,
        collection_id: str | None = None,
    ) -> list[InventoryItem]:
        response = await self.rpc.call(
            QueryInventoryRequest(session_id=session_id, collection_id=collection_id)
        )
        items: list[InventoryItem] = response.payload
        return items

    async def match_decklist(self, session_id: str, decklist: str) -> list[MatchResult]:
        """Parse decklist text and resolve it against a loaded export."""
        response = await self.rpc.call(
            MatchDecklistRequest(session_id=session_id, decklist=decklist)
        )
        results: list[MatchResult] = response.payload
        return results

    async def close_session(self, session_id: str) -> bool:
        response = await self.rpc.call(CloseSessionRequest(session_id=session_id))
        return bool(response.payload)

    def terminate(self) -> None:
        """Terminate the worker. Outstanding calls fail immediately."""
        self.rpc.terminate()


def create_helvault_client(
    max_workers: int | None = None,
    max_sessions: int | None = None,
) -> HelvaultClient:
    """
    Create a worker and a client for it.

    Args:
        max_workers: Worker threads (defaults to settings.worker_threads)
        max_sessions: Loaded exports kept (defaults to settings.max_sessions)
    """
    worker = HelvaultWorker(max_sessions=max_sessions)
    return HelvaultClient(WorkerRPC(worker, max_workers=max_workers))

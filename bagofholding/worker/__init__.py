from bagofholding.worker.client import HelvaultClient, create_helvault_client
from bagofholding.worker.handlers import HelvaultWorker
from bagofholding.worker.messages import (
    CloseSessionRequest,
    LoadHelvaultRequest,
    LoadResult,
    MatchDecklistRequest,
    QueryCardsRequest,
    QueryInventoryRequest,
    WorkerRequest,
    WorkerResponse,
    parse_request,
)
from bagofholding.worker.rpc import (
    WorkerCrashedError,
    WorkerRequestError,
    WorkerRPC,
    WorkerTerminatedError,
)
from bagofholding.worker.sessions import HelvaultSession, SessionRegistry

__all__ = [
    "CloseSessionRequest",
    "HelvaultClient",
    "HelvaultSession",
    "HelvaultWorker",
    "LoadHelvaultRequest",
    "LoadResult",
    "MatchDecklistRequest",
    "QueryCardsRequest",
    "QueryInventoryRequest",
    "SessionRegistry",
    "WorkerCrashedError",
    "WorkerRPC",
    "WorkerRequest",
    "WorkerRequestError",
    "WorkerResponse",
    "WorkerTerminatedError",
    "create_helvault_client",
    "parse_request",
]

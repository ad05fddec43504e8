from bagofholding.models.card import Card
from bagofholding.models.collection import Collection, sort_by_priority
from bagofholding.models.deck import DeckListEntry, MatchResult
from bagofholding.models.failure import (
    ApiResponse,
    FailureDetail,
    FailureKind,
    HelvaultFormatError,
    KnownError,
    NoDataLoadedError,
    OutcomeType,
    UnknownRequestError,
    create_unknown_failure,
    finalize_response,
    is_finalized,
)
from bagofholding.models.inventory import InventoryAggregate, InventoryItem
from bagofholding.models.snapshot import HelvaultSnapshot, ImportSummary

__all__ = [
    "ApiResponse",
    "Card",
    "Collection",
    "DeckListEntry",
    "FailureDetail",
    "FailureKind",
    "HelvaultFormatError",
    "HelvaultSnapshot",
    "ImportSummary",
    "InventoryAggregate",
    "InventoryItem",
    "KnownError",
    "MatchResult",
    "NoDataLoadedError",
    "OutcomeType",
    "UnknownRequestError",
    "create_unknown_failure",
    "finalize_response",
    "is_finalized",
    "sort_by_priority",
]

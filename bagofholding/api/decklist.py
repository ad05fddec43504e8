"""
Decklist API endpoints.

Parse decklist text into entries and render entries back to text.
"""

from fastapi import APIRouter
from pydantic import BaseModel, Field

from bagofholding.models.deck import DeckListEntry
from bagofholding.parsers.decklist import format_deck_list, parse_deck_list

router = APIRouter(prefix="/decklist", tags=["decklist"])


class DeckListEntryModel(BaseModel):
    """One decklist entry."""

    name: str = Field(..., min_length=1)
    qty: int = Field(..., gt=0)
    set: str | None = None
    collector_number: str | None = None
    scryfall_id: str | None = None

    @classmethod
    def from_entry(cls, entry: DeckListEntry) -> "DeckListEntryModel":
        return cls(
            name=entry.name,
            qty=entry.qty,
            set=entry.set,
            collector_number=entry.collector_number,
            scryfall_id=entry.scryfall_id,
        )

    def to_entry(self) -> DeckListEntry:
        return DeckListEntry(
            name=self.name,
            qty=self.qty,
            set=self.set,
            collector_number=self.collector_number,
            scryfall_id=self.scryfall_id,
        )


class DeckListTextRequest(BaseModel):
    """Decklist text."""

    text: str = Field(
        ...,
        description="One entry per line: <qty>[x] <name>[ (<set>)]",
        examples=["4 Lightning Bolt\n1x Sol Ring (C21)"],
    )


class ParseResponse(BaseModel):
    entries: list[DeckListEntryModel] = Field(default_factory=list)
    total_cards: int = 0


class FormatRequest(BaseModel):
    entries: list[DeckListEntryModel]


class FormatResponse(BaseModel):
    text: str


@router.post("/parse", response_model=ParseResponse)
async def parse_decklist(request: DeckListTextRequest) -> ParseResponse:
    """
    Parse decklist text.

    Comments, blank lines and unreadable lines are skipped.
    """
    entries = parse_deck_list(request.text)
    return ParseResponse(
        entries=[DeckListEntryModel.from_entry(entry) for entry in entries],
        total_cards=sum(entry.qty for entry in entries),
    )


@router.post("/format", response_model=FormatResponse)
async def format_decklist(request: FormatRequest) -> FormatResponse:
    """Render entries as decklist text."""
    return FormatResponse(text=format_deck_list([entry.to_entry() for entry in request.entries]))

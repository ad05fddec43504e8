from dataclasses import dataclass


@dataclass(frozen=True, slots=True)
class Card:
    """
    One known printing of a card.

    Attributes:
        scryfall_id: Printing identity (unique per printing)
        oracle_id: Card identity, shared by every printing and reprint
        name: Card name as printed
        set: Set code (e.g., "lea", "m11")
        collector_number: Collector number within the set
        lang: Language code (e.g., "en")
        finishes: Physical finishes seen for this printing (e.g., nonfoil, foil)
        rarity: common, uncommon, rare, mythic, ...
        mana_cost: Mana cost string (e.g., "{1}{R}"), None when absent
        cmc: Numeric mana value
        colors: Colour letters (W, U, B, R, G) in WUBRG order
        type_line: Full type line (e.g., "Instant")
    """

    scryfall_id: str
    oracle_id: str
    name: str
    set: str
    collector_number: str
    lang: str
    finishes: tuple[str, ...]
    rarity: str
    mana_cost: str | None = None
    cmc: float = 0
    colors: tuple[str, ...] = ()
    type_line: str = ""

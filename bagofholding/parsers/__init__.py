from bagofholding.parsers.decklist import (
    format_deck_list,
    format_deck_list_entry,
    parse_deck_list,
)

__all__ = [
    "format_deck_list",
    "format_deck_list_entry",
    "parse_deck_list",
]

from bagofholding.models.deck import DeckListEntry
from bagofholding.parsers.decklist import (
    format_deck_list,
    format_deck_list_entry,
    parse_deck_list,
)


class TestParseDeckList:
    def test_parse_simple_lines(self) -> None:
        text = "4 Lightning Bolt\n1 Sol Ring\n2x Counterspell"
        result = parse_deck_list(text)

        assert result == [
            DeckListEntry(name="Lightning Bolt", qty=4),
            DeckListEntry(name="Sol Ring", qty=1),
            DeckListEntry(name="Counterspell", qty=2),
        ]

    def test_parse_set_code(self) -> None:
        result = parse_deck_list("2 Lightning Bolt (M11)")

        assert len(result) == 1
        assert result[0].name == "Lightning Bolt"
        assert result[0].qty == 2
        assert result[0].set == "M11"

    def test_parse_set_code_without_space(self) -> None:
        result = parse_deck_list("1x Sol Ring(C21)")

        assert result[0].name == "Sol Ring"
        assert result[0].set == "C21"

    def test_uppercase_x_suffix(self) -> None:
        result = parse_deck_list("3X Opt")

        assert result == [DeckListEntry(name="Opt", qty=3)]

    def test_drops_zero_and_negative_quantities(self) -> None:
        text = "0 Zero Quantity\n-1 Negative Quantity\n1 Sol Ring"
        result = parse_deck_list(text)

        assert [entry.name for entry in result] == ["Sol Ring"]

    def test_skips_comments_and_blank_lines(self) -> None:
        text = """// Main deck
# Creatures

4 Monastery Swiftspear
   
// Spells
4 Lightning Bolt"""
        result = parse_deck_list(text)

        assert [entry.name for entry in result] == ["Monastery Swiftspear", "Lightning Bolt"]

    def test_drops_malformed_lines(self) -> None:
        text = "Lightning Bolt\nfour Lightning Bolt\n4\n4 Lightning Bolt"
        result = parse_deck_list(text)

        assert result == [DeckListEntry(name="Lightning Bolt", qty=4)]

    def test_quantity_must_be_ascii_digits(self) -> None:
        text = "\u0664 Lightning Bolt\n\u0663x Counterspell\n2 Opt"
        result = parse_deck_list(text)

        assert result == [DeckListEntry(name="Opt", qty=2)]

    def test_split_card_name(self) -> None:
        """Split cards keep their // separator; only leading // marks a comment."""
        result = parse_deck_list("1 Fire // Ice")

        assert result[0].name == "Fire // Ice"

    def test_trims_whitespace(self) -> None:
        result = parse_deck_list("   4   Lightning Bolt   ")

        assert result == [DeckListEntry(name="Lightning Bolt", qty=4)]

    def test_empty_input(self) -> None:
        assert parse_deck_list("") == []
        assert parse_deck_list("   \n\n") == []

    def test_windows_line_endings(self) -> None:
        result = parse_deck_list("4 Lightning Bolt\r\n1 Sol Ring\r\n")

        assert [entry.name for entry in result] == ["Lightning Bolt", "Sol Ring"]


class TestFormatDeckList:
    def test_format_entry(self) -> None:
        assert format_deck_list_entry(DeckListEntry(name="Sol Ring", qty=1)) == "1 Sol Ring"

    def test_format_entry_with_set(self) -> None:
        entry = DeckListEntry(name="Lightning Bolt", qty=4, set="M11")
        assert format_deck_list_entry(entry) == "4 Lightning Bolt (M11)"

    def test_format_list(self) -> None:
        entries = [
            DeckListEntry(name="Lightning Bolt", qty=4),
            DeckListEntry(name="Sol Ring", qty=1, set="C21"),
        ]
        assert format_deck_list(entries) == "4 Lightning Bolt\n1 Sol Ring (C21)"

    def test_format_empty(self) -> None:
        assert format_deck_list([]) == ""

    def test_round_trip(self) -> None:
        entries = [
            DeckListEntry(name="Lightning Bolt", qty=4, set="M11"),
            DeckListEntry(name="Sol Ring", qty=1),
            DeckListEntry(name="Fire // Ice", qty=2, set="MH2"),
            DeckListEntry(name="Sheoldred, the Apocalypse", qty=24),
        ]

        assert parse_deck_list(format_deck_list(entries)) == entries

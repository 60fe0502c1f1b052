"""
Tests for voice command normalization.

Typed messages pass through untouched; voice transcripts are mapped through
the phrase table first and item extraction second.
"""
import pytest

from bites_bot.normalizer import (
    extract_quantity,
    find_spoken_item,
    match_voice_phrase,
    normalize_command,
)


class TestTextPassThrough:

    def test_text_is_not_normalized(self, catalog):
        assert normalize_command("I want two cokes", False, catalog) == "I want two cokes"

    def test_text_command_unchanged(self, catalog):
        assert normalize_command("add M1 2", False, catalog) == "add M1 2"


class TestPhraseTable:

    @pytest.mark.parametrize("spoken,command", [
        ("can you show menu please", "menu"),
        ("show my cart", "cart"),
        ("please clear cart", "clear"),
        ("remove all items", "clear"),
        ("i'd like to check out now", "checkout"),
        ("place order", "checkout"),
        ("show appetizers", "starters"),
        ("show main courses", "mains"),
        ("show beverages", "drinks"),
        ("what can i do here", "help"),
    ])
    def test_phrases(self, catalog, spoken, command):
        assert normalize_command(spoken, True, catalog) == command

    def test_first_phrase_in_table_wins(self):
        # "view menu" is declared before "my cart"
        assert match_voice_phrase("view menu and my cart") == "menu"

    def test_phrase_beats_item_extraction(self, catalog):
        assert normalize_command("i want to place order", True, catalog) == "checkout"

    def test_no_phrase(self):
        assert match_voice_phrase("good evening") is None


class TestItemExtraction:

    def test_two_cokes(self, catalog):
        assert normalize_command("I want two cokes", True, catalog) == "add DR1 2"

    def test_transcript_is_lowercased_and_trimmed(self, catalog):
        assert normalize_command("  Add THREE Spring Rolls  ", True, catalog) == "add S1 3"

    def test_quantity_defaults_to_one(self, catalog):
        assert normalize_command("i want a chicken burger", True, catalog) == "add M2 1"

    def test_digit_quantity(self, catalog):
        assert normalize_command("order 4 tiramisu", True, catalog) == "add D2 4"

    def test_partial_name(self, catalog):
        # "chicken" is part of both chicken dishes; the first in menu order wins
        assert normalize_command("add chicken", True, catalog) == "add S2 1"

    def test_alias(self, catalog):
        assert normalize_command("i want two pizzas", True, catalog) == "add M1 2"

    def test_only_one_item_extracted(self, catalog):
        # Best-effort: the first menu item found, the last number heard
        assert normalize_command("add two pizzas and one coke", True, catalog) == "add M1 1"

    def test_cue_without_item_passes_through(self, catalog):
        assert normalize_command("i want a unicorn", True, catalog) == "i want a unicorn"

    def test_item_without_cue_passes_through(self, catalog):
        assert normalize_command("pizza", True, catalog) == "pizza"

    def test_empty_transcript(self, catalog):
        assert normalize_command("   ", True, catalog) == ""


class TestExtractQuantity:

    @pytest.mark.parametrize("text,expected", [
        ("i want two cokes", 2),
        ("add 3 coffee", 3),
        ("add coffee", 1),
        ("add ten wings", 10),
        ("add 2 no make it 5 wings", 5),
        ("add 0 coffee", 1),
    ])
    def test_quantity(self, text, expected):
        assert extract_quantity(text) == expected

    def test_number_words_inside_other_words_ignored(self):
        # "someone" contains "one"
        assert extract_quantity("add someone's coffee twice") == 1


class TestFindSpokenItem:

    def test_full_name(self, catalog):
        assert find_spoken_item("add fresh orange juice", catalog).id == "DR2"

    def test_unknown(self, catalog):
        assert find_spoken_item("add a sandwich", catalog) is None

    def test_filler_only_matches_nothing(self, catalog):
        assert find_spoken_item("i want a", catalog) is None

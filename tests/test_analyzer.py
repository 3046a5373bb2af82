# ABOUTME: Unit tests for tokenizing, counting, special-key resolution and bigrams
import pytest
from collections import Counter

from keyheat.analyzer import (
    SPECIAL_KEY_TABLE,
    KeyNormalizer,
    count_bigrams,
    count_frequencies,
    rank_bigrams,
    rank_frequencies,
    resolve_key_frequency,
    tokenize,
)


class TestTokenize:
    """Test splitting raw logs into tokens."""

    def test_mixed_whitespace(self):
        assert tokenize("  a\tb\nc ") == ["a", "b", "c"]

    def test_empty_and_blank_input(self):
        assert tokenize("") == []
        assert tokenize(" \n\t \r\n") == []

    def test_tokens_are_kept_verbatim(self):
        """Bracket markup, punctuation and case survive untouched."""
        assert tokenize("<Tab> A a , <ShiftLeft>\n<Space>") == [
            "<Tab>", "A", "a", ",", "<ShiftLeft>", "<Space>"
        ]


class TestFrequencies:
    """Test frequency counting and ranking."""

    def test_counts_sum_to_token_count(self):
        tokens = tokenize("a b a <Tab> a b c")
        frequencies = count_frequencies(tokens)

        assert sum(frequencies.values()) == len(tokens)
        assert frequencies["a"] == 3
        assert frequencies["<Tab>"] == 1

    def test_case_sensitive(self):
        frequencies = count_frequencies(["A", "a", "a"])
        assert frequencies == {"A": 1, "a": 2}

    def test_first_seen_order(self):
        frequencies = count_frequencies(["z", "y", "z", "x"])
        assert list(frequencies) == ["z", "y", "x"]

    def test_ranking_is_stable_for_ties(self):
        frequencies = {"x": 3, "y": 3, "z": 1}
        assert rank_frequencies(frequencies) == [("x", 3), ("y", 3), ("z", 1)]

    def test_ranking_ties_follow_first_seen_order(self):
        frequencies = count_frequencies(["q", "w", "e", "w", "q", "e", "r"])
        assert [token for token, _ in rank_frequencies(frequencies)] == [
            "q", "w", "e", "r"
        ]

    def test_ranking_truncates(self):
        frequencies = count_frequencies(["a", "a", "b", "c"])
        assert rank_frequencies(frequencies, top_n=1) == [("a", 2)]


class TestResolveKeyFrequency:
    """Test printed key to logged token resolution."""

    def test_alias_beats_literal(self):
        assert resolve_key_frequency("Tab", {"<Tab>": 5, "tab": 2}) == 5

    def test_first_alias_wins(self):
        frequencies = {"<ShiftRight>": 7, "<ShiftLeft>": 4}
        assert resolve_key_frequency("Shift", frequencies) == 4

    def test_later_alias_used_when_earlier_missing(self):
        assert resolve_key_frequency("enter", {"<Return>": 9}) == 9

    def test_fallback_to_verbatim_key(self):
        assert resolve_key_frequency("q", {"q": 3}) == 3

    def test_verbatim_fallback_keeps_case(self):
        frequencies = {"q": 3}
        assert resolve_key_frequency("Q", frequencies) == 0

    def test_alias_table_miss_falls_back_to_literal(self):
        """A table entry with no logged alias still tries the printed key."""
        assert resolve_key_frequency("Esc", {"Esc": 2}) == 2

    def test_absent_key(self):
        assert resolve_key_frequency("zzz", {}) == 0

    def test_zero_count_alias_counts_as_present(self):
        frequencies = {"<Tab>": 0, "tab": 2}
        assert resolve_key_frequency("Tab", frequencies) == 0

    def test_counter_lookup_does_not_insert(self):
        frequencies = Counter({"a": 1})
        resolve_key_frequency("Tab", frequencies)
        assert "<Tab>" not in frequencies

    def test_non_ascii_label(self):
        assert resolve_key_frequency("全角/半角", {"<H>": 2, "<F>": 1}) == 1

    def test_table_is_read_only(self):
        with pytest.raises(TypeError):
            SPECIAL_KEY_TABLE["tab"] = ("x",)


class TestKeyNormalizer:
    """Test the configurable normalizer."""

    def test_default_table(self):
        normalizer = KeyNormalizer()
        assert normalizer.resolve("Space", {"<Space>": 11}) == 11

    def test_extra_aliases(self):
        normalizer = KeyNormalizer({"Henkan": ["<Convert>", "henkan"]})
        assert normalizer.resolve("henkan", {"<Convert>": 4, "henkan": 1}) == 4
        assert normalizer.table["henkan"] == ("<Convert>", "henkan")

    def test_extra_alias_overrides_builtin(self):
        normalizer = KeyNormalizer({"tab": ["tab"]})
        assert normalizer.resolve("Tab", {"<Tab>": 5, "tab": 2}) == 2

    def test_single_string_alias(self):
        normalizer = KeyNormalizer({"fn": "<Function>"})
        assert normalizer.resolve("Fn", {"<Function>": 3}) == 3


class TestBigrams:
    """Test bigram extraction and ranking."""

    def test_adjacent_pairs(self):
        bigrams = count_bigrams(["a", "a", "b"])
        assert bigrams == {("a", "a"): 1, ("a", "b"): 1}
        assert sum(bigrams.values()) == 2

    def test_order_matters(self):
        bigrams = count_bigrams(["a", "b", "a"])
        assert bigrams[("a", "b")] == 1
        assert bigrams[("b", "a")] == 1

    def test_short_sequences(self):
        assert count_bigrams([]) == {}
        assert count_bigrams(["a"]) == {}

    def test_total_is_length_minus_one(self):
        tokens = tokenize("h e l l o <Space> w o r l d")
        assert sum(count_bigrams(tokens).values()) == len(tokens) - 1

    def test_ranking_ties_first_seen(self):
        bigrams = count_bigrams(tokenize("a a b\na"))
        assert rank_bigrams(bigrams, 10) == [
            (("a", "a"), 1), (("a", "b"), 1), (("b", "a"), 1)
        ]

    def test_ranking_truncates_to_top_n(self):
        bigrams = count_bigrams(["x", "y", "x", "y", "z"])
        assert rank_bigrams(bigrams, 1) == [(("x", "y"), 2)]

    def test_top_n_larger_than_entries(self):
        bigrams = count_bigrams(["a", "b"])
        assert rank_bigrams(bigrams, 1000) == [(("a", "b"), 1)]

    def test_invalid_top_n(self):
        with pytest.raises(ValueError):
            rank_bigrams(count_bigrams(["a", "b"]), 0)

"""Unit tests for keyword extraction and commercial-intent scoring."""

import pytest

from contextads.domain.keywords import (
    build_search_query,
    calculate_commercial_intent,
    extract_keywords,
)


class TestExtractKeywords:
    def test_unigrams_then_bigrams(self):
        assert extract_keywords("I want to buy a new laptop") == [
            "buy",
            "new",
            "laptop",
            "buy new",
            "new laptop",
        ]

    def test_stop_words_and_short_tokens_dropped(self):
        result = extract_keywords("I want to buy a new laptop")
        for word in ("i", "want", "to", "a"):
            assert word not in result

    def test_bigram_spans_dropped_short_word(self):
        """Short tokens leave the stream before pairing."""
        assert extract_keywords("buy a laptop") == ["buy", "laptop", "buy laptop"]

    def test_stop_word_breaks_bigram(self):
        assert extract_keywords("hiking with boots") == ["hiking", "boots"]

    def test_punctuation_is_stripped(self):
        assert extract_keywords("Laptops, phones & tablets!") == [
            "laptops",
            "phones",
            "tablets",
            "laptops phones",
            "phones tablets",
        ]

    def test_lowercases(self):
        assert extract_keywords("GAMING Laptop") == ["gaming", "laptop", "gaming laptop"]

    def test_deduplicates_preserving_first_position(self):
        result = extract_keywords("laptop deals laptop deals")
        assert result.count("laptop") == 1
        assert result.count("laptop deals") == 1
        assert result[0] == "laptop"

    @pytest.mark.parametrize("text", ["", "   ", "a an the", "?!"])
    def test_nothing_significant(self, text):
        assert extract_keywords(text) == []

    def test_none_is_treated_as_empty(self):
        assert extract_keywords(None) == []


class TestCommercialIntent:
    def test_lexicon_and_product(self):
        assert calculate_commercial_intent("best price for a laptop") == pytest.approx(0.7)

    def test_product_only(self):
        assert calculate_commercial_intent("tell me about gaming laptop") == pytest.approx(0.3)

    def test_no_signal(self):
        assert calculate_commercial_intent("hello there, how are you") == 0.0

    def test_saturates_at_one(self):
        assert calculate_commercial_intent("buy buy buy buy buy laptop") == 1.0

    def test_product_match_is_case_insensitive(self):
        assert calculate_commercial_intent("New LAPTOP") == pytest.approx(0.3)

    def test_product_match_needs_whole_word(self):
        assert calculate_commercial_intent("laptops everywhere") == 0.0

    def test_lexicon_words_with_punctuation_do_not_count(self):
        """Intent uses raw whitespace tokens, so 'price?' is not 'price'."""
        assert calculate_commercial_intent("what is the price?") == 0.0

    def test_result_is_rounded(self):
        score = calculate_commercial_intent("deal sale cheap")
        assert score == 0.6
        assert 0.0 <= score <= 1.0


class TestBuildSearchQuery:
    def test_first_five_terms(self):
        keywords = ["a1", "b2", "c3", "d4", "e5", "f6"]
        assert build_search_query(keywords) == "a1 b2 c3 d4 e5"

    def test_custom_limit(self):
        assert build_search_query(["gaming", "laptop", "deal"], limit=2) == "gaming laptop"

    def test_empty(self):
        assert build_search_query([]) == ""

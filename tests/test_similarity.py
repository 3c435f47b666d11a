"""Tests for suggest/similarity.py - edit distance and similarity scores."""

import pytest

from riviere.suggest.similarity import levenshtein_distance, similarity_score


class TestLevenshteinDistance:
    """Tests for levenshtein_distance()."""

    @pytest.mark.parametrize(
        "a,b,expected",
        [
            ("kitten", "sitting", 3),
            ("flaw", "lawn", 2),
            ("", "abc", 3),
            ("abc", "", 3),
            ("abc", "abc", 0),
            ("", "", 0),
        ],
    )
    def test_known_distances(self, a, b, expected):
        assert levenshtein_distance(a, b) == expected

    def test_is_case_sensitive(self):
        assert levenshtein_distance("Order", "order") == 1

    def test_counts_characters_not_bytes(self):
        """A multi-byte character is one edit."""
        assert levenshtein_distance("café", "cafe") == 1

    def test_symmetric(self):
        assert levenshtein_distance("place-order", "placeorder") == levenshtein_distance(
            "placeorder", "place-order"
        )


class TestSimilarityScore:
    """Tests for similarity_score()."""

    @pytest.mark.parametrize("value", ["a", "Order Placed", "orders:api:api:create-order"])
    def test_identical_strings_score_one(self, value):
        assert similarity_score(value, value) == 1.0

    def test_both_empty_scores_one(self):
        assert similarity_score("", "") == 1.0

    def test_one_empty_scores_zero(self):
        assert similarity_score("abc", "") == 0.0
        assert similarity_score("", "abc") == 0.0

    def test_case_insensitive(self):
        assert similarity_score("ORDER", "order") == 1.0

    def test_symmetric(self):
        assert similarity_score("Order", "Orders") == similarity_score("Orders", "Order")

    def test_normalized_by_longest_string(self):
        # one insertion over six characters
        assert similarity_score("order", "orders") == pytest.approx(1 - 1 / 6)

    def test_completely_different_strings(self):
        assert similarity_score("abc", "xyz") == 0.0

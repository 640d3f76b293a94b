"""Tests for edit distance, fuzzy token matching, and LCS alignment."""

import pytest

from shadowtalk.core.alignment import align, close_tolerance, edit_distance, is_close


class TestEditDistance:

    @pytest.mark.parametrize("a, b, expected", [
        ("", "", 0),
        ("abc", "abc", 0),
        ("", "abc", 3),
        ("abc", "", 3),
        ("kitten", "sitting", 3),
        ("flaw", "lawn", 2),
        ("recognize", "recognise", 1),
    ])
    def test_known_distances(self, a, b, expected):
        assert edit_distance(a, b) == expected

    def test_symmetric(self):
        assert edit_distance("shadow", "meadow") == edit_distance("meadow", "shadow")


class TestIsClose:

    @pytest.mark.parametrize("length, expected", [
        (1, 1), (3, 1), (4, 2), (6, 2), (7, 2), (10, 3), (20, 6),
    ])
    def test_tolerance_scales_with_length(self, length, expected):
        assert close_tolerance(length) == expected

    def test_spelling_variants_are_close(self):
        assert is_close("recognize", "recognise")
        assert is_close("colour", "color")

    def test_different_short_words_are_not_close(self):
        assert not is_close("cat", "dog")
        assert not is_close("to", "the")

    def test_identical_tokens_are_close(self):
        assert is_close("same", "same")

    def test_single_letter_substitution_in_short_word_is_close(self):
        assert is_close("cat", "cut")


class TestAlign:

    def test_identical_sequences_match_fully(self):
        tokens = ["hello", "everyone", "welcome"]
        result = align(tokens, tokens)
        assert result.matched_count == 3
        assert result.pairs == ((0, 0), (1, 1), (2, 2))

    def test_empty_sides(self):
        assert align([], ["a"]).matched_count == 0
        assert align(["a"], []).matched_count == 0
        assert align([], []).pairs == ()

    def test_missing_word(self):
        reference = ["hello", "everyone", "welcome", "to", "the", "show"]
        candidate = ["hello", "everyone", "welcome", "the", "show"]
        result = align(reference, candidate)
        assert result.matched_count == 5
        assert 3 not in result.matched_reference_indices
        assert result.matched_candidate_indices == frozenset(range(5))

    def test_fuzzy_pair_is_aligned(self):
        result = align(["i", "recognize", "it"], ["i", "recognise", "it"])
        assert result.matched_count == 3
        assert (1, 1) in result.pairs

    def test_swapped_words_prefer_advancing_reference_on_tie(self):
        result = align(["alpha", "bravo"], ["bravo", "alpha"])
        assert result.matched_count == 1
        assert result.pairs == ((0, 1),)
        assert result.matched_reference_indices == frozenset({0})
        assert result.matched_candidate_indices == frozenset({1})

    def test_extra_candidate_words_are_skipped(self):
        result = align(["go", "home"], ["um", "go", "home", "now"])
        assert result.pairs == ((0, 1), (1, 2))

    @pytest.mark.parametrize("reference, candidate", [
        (["a", "b", "c"], ["c", "b", "a"]),
        (["one", "two", "three", "four"], ["two", "four", "one"]),
        (["the", "quick", "brown", "fox"], ["a", "quick", "brown", "box"]),
    ])
    def test_pairs_are_strictly_increasing_and_counted(self, reference, candidate):
        result = align(reference, candidate)
        assert result.matched_count == len(result.pairs)
        for (r1, c1), (r2, c2) in zip(result.pairs, result.pairs[1:]):
            assert r1 < r2 and c1 < c2
        assert result.matched_count <= min(len(reference), len(candidate))

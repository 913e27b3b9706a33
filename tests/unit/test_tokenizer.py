"""Unit tests for routing text normalization"""

import pytest
from qara.routing.tokenizer import token_overlap, tokenize


class TestTokenize:
    """Test tokenize()"""

    def test_lowercases_and_splits(self):
        assert tokenize("Deep Research Quantum") == ["deep", "research", "quantum"]

    def test_strips_punctuation_without_splitting(self):
        assert tokenize("What's up, doc?") == ["whats", "up", "doc"]

    def test_collapses_whitespace(self):
        assert tokenize("  research \t AI\nsafety  ") == ["research", "ai", "safety"]

    @pytest.mark.parametrize("text", ["", "   ", "?!...", "--"])
    def test_empty_results(self, text):
        assert tokenize(text) == []

    def test_keeps_digits_and_underscores(self):
        assert tokenize("gpt_4 vs llama3") == ["gpt_4", "vs", "llama3"]


class TestTokenOverlap:
    """Test token_overlap()"""

    def test_identical_sets_score_one(self):
        assert token_overlap({"a", "b"}, {"b", "a"}) == 1.0

    def test_disjoint_sets_score_zero(self):
        assert token_overlap({"a"}, {"b", "c"}) == 0.0

    def test_divides_by_larger_set(self):
        assert token_overlap({"please", "investigate"}, {"investigate"}) == 0.5
        assert token_overlap({"x", "y", "z", "w"}, {"x"}) == 0.25

    def test_empty_sets_do_not_divide_by_zero(self):
        assert token_overlap(set(), set()) == 0.0
        assert token_overlap(set(), {"a"}) == 0.0

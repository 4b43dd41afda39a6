"""Tests for topic keyword extraction."""

from parley.conversation.topics import extract_keywords, merge_topics


class TestExtractKeywords:
    """Tests for extract_keywords."""

    def test_drops_stop_words_and_short_tokens(self) -> None:
        """Should keep only meaningful words longer than two characters."""
        assert extract_keywords("Are we still on for the movie tonight?") == [
            "still",
            "movie",
            "tonight",
        ]

    def test_strips_punctuation_and_lowercases(self) -> None:
        """Should split on punctuation and lowercase."""
        assert extract_keywords("Pizza, PASTA & salad!") == ["pizza", "pasta", "salad"]

    def test_respects_limit(self) -> None:
        """Should return at most ``limit`` keywords."""
        words = "alpha bravo charlie delta echo foxtrot golf"
        assert extract_keywords(words, limit=3) == ["alpha", "bravo", "charlie"]

    def test_empty_content(self) -> None:
        """Should return nothing for empty content."""
        assert extract_keywords("") == []


class TestMergeTopics:
    """Tests for merge_topics."""

    def test_dedupes_preserving_order(self) -> None:
        """Should keep first occurrence order."""
        assert merge_topics(["movie", "pizza"], ["pizza", "beach"]) == [
            "movie",
            "pizza",
            "beach",
        ]

    def test_caps_result(self) -> None:
        """Should never exceed the cap."""
        existing = [f"topic{i}" for i in range(10)]
        assert merge_topics(existing, ["extra"], cap=10) == existing

"""Unit tests for rich-text helpers."""

from huddle.util.text import ELLIPSIS, make_excerpt, strip_markup


class TestStripMarkup:
    """Tests for strip_markup."""

    def test_block_tags_do_not_merge_words(self):
        """Paragraph boundaries become whitespace."""
        assert strip_markup("<p>Hello</p><p>world</p>") == "Hello world"

    def test_inline_tags_and_entities(self):
        """Inline tags vanish and entities are decoded."""
        text = strip_markup("<p>Q&amp;A with <strong>Grace</strong>&nbsp;today</p>")
        assert text == "Q&A with Grace today"

    def test_empty_input(self):
        assert strip_markup("") == ""


class TestMakeExcerpt:
    """Tests for make_excerpt."""

    def test_window_around_match(self):
        """50 characters before and 80 after the match, with ellipses."""
        # Arrange
        text = "a" * 100 + "needle" + "b" * 100

        # Act
        excerpt = make_excerpt(text, "NEEDLE")

        # Assert
        assert excerpt.startswith(ELLIPSIS + "a" * 50 + "needle")
        assert excerpt.endswith("b" * 80 + ELLIPSIS)
        assert len(excerpt) == 50 + 6 + 80 + 2

    def test_match_near_start_has_no_leading_ellipsis(self):
        excerpt = make_excerpt("Budget review moved to Friday", "budget")

        assert excerpt == "Budget review moved to Friday"

    def test_no_literal_match_uses_leading_text(self):
        """Without a literal match the first 130 characters are returned."""
        text = "x" * 200

        excerpt = make_excerpt(text, "missing")

        assert excerpt == "x" * 130 + ELLIPSIS

    def test_short_text_without_match_is_returned_whole(self):
        assert make_excerpt("Short note", "budget") == "Short note"

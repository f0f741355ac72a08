"""Tests for tuikit.utils -- cluster widths and character classes."""

from __future__ import annotations

import pytest

from tuikit.utils import (
    can_break_after,
    cluster_width,
    is_line_break,
    is_punctuation_char,
    is_whitespace_char,
    is_wide_char,
    is_word_char,
    visible_width,
)


# ---------------------------------------------------------------------------
# Widths
# ---------------------------------------------------------------------------


class TestClusterWidth:
    """Terminal cell width of single grapheme clusters."""

    def test_ascii(self) -> None:
        assert cluster_width("a") == 1

    def test_empty(self) -> None:
        assert cluster_width("") == 0

    def test_wide_cjk(self) -> None:
        assert cluster_width("世") == 2

    def test_combining_sequence(self) -> None:
        assert cluster_width("e\u0301") == 1

    def test_emoji_zwj_sequence(self) -> None:
        assert cluster_width("\U0001f468\u200d\U0001f469\u200d\U0001f467") == 2

    def test_flag(self) -> None:
        assert cluster_width("\U0001f1fa\U0001f1f8") == 2

    @pytest.mark.parametrize("brk", ["\n", "\r\n", "\u2028"])
    def test_line_breaks_take_no_cells(self, brk: str) -> None:
        assert cluster_width(brk) == 0

    def test_tab_uses_tab_size(self) -> None:
        assert cluster_width("\t") == 4
        assert cluster_width("\t", tab_size=8) == 8

    def test_control_character(self) -> None:
        assert cluster_width("\x01") == 0


class TestVisibleWidth:
    """Width of a run of text on one row."""

    def test_plain_ascii(self) -> None:
        assert visible_width("hello") == 5

    def test_empty_string(self) -> None:
        assert visible_width("") == 0

    def test_mixed_width(self) -> None:
        assert visible_width("a世b") == 4

    def test_tabs(self) -> None:
        assert visible_width("a\tb", tab_size=2) == 4


# ---------------------------------------------------------------------------
# Classification
# ---------------------------------------------------------------------------


class TestClassification:
    """Character classes used by word motions and wrapping."""

    def test_line_breaks(self) -> None:
        for brk in ["\n", "\r", "\r\n", "\x85", "\u2029"]:
            assert is_line_break(brk)
        assert not is_line_break(" ")

    def test_whitespace(self) -> None:
        assert is_whitespace_char(" ")
        assert is_whitespace_char("\t")
        assert is_whitespace_char("\u3000")
        assert not is_whitespace_char("a")

    def test_punctuation(self) -> None:
        for ch in ".,;:!?()[]{}-_":
            assert is_punctuation_char(ch), ch
        assert is_punctuation_char("。")
        assert not is_punctuation_char("a")
        assert not is_punctuation_char("")

    def test_word_characters(self) -> None:
        assert is_word_char("a")
        assert is_word_char("7")
        assert is_word_char("世")
        assert not is_word_char(" ")
        assert not is_word_char(".")

    def test_wide(self) -> None:
        assert is_wide_char("世")
        assert is_wide_char("\uff21")
        assert not is_wide_char("a")


class TestCanBreakAfter:
    """Line break opportunities between two clusters."""

    def test_after_space_before_word(self) -> None:
        assert can_break_after(" ", "a")

    def test_not_inside_space_run(self) -> None:
        assert not can_break_after(" ", " ")

    def test_not_inside_word(self) -> None:
        assert not can_break_after("a", "b")

    def test_after_hyphen(self) -> None:
        assert can_break_after("-", "k")
        assert not can_break_after("-", " ")

    def test_ideographs(self) -> None:
        assert can_break_after("世", "界")
        assert can_break_after("a", "世")

    def test_not_before_closing_punctuation(self) -> None:
        assert not can_break_after("世", "。")
        assert not can_break_after(" ", ")")

    def test_not_at_end_of_text(self) -> None:
        assert not can_break_after(" ", "")

    def test_not_after_line_break(self) -> None:
        assert not can_break_after("\n", "a")

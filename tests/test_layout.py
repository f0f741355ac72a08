"""Tests for tuikit.text.layout.LineLayout -- incremental wrapping."""

from __future__ import annotations

import pytest

from tuikit.errors import StaleLayoutError
from tuikit.text.chain import PieceChain, Position
from tuikit.text.layout import LineLayout


def lines(text: str, width: int = 0, wrap: str = "none", tab_size: int = 4) -> list[str]:
    return LineLayout(PieceChain(text), width, wrap, tab_size).visual_lines()  # type: ignore[arg-type]


class TestNoWrap:
    """Rows end only at hard line breaks."""

    def test_single_line(self) -> None:
        assert lines("hello world", width=5) == ["hello world"]

    def test_hard_breaks(self) -> None:
        assert lines("a\nb\n") == ["a", "b", ""]

    def test_crlf_break(self) -> None:
        assert lines("a\r\nb") == ["a", "b"]

    def test_unicode_line_separator(self) -> None:
        assert lines("a\u2028b") == ["a", "b"]

    def test_empty_text_has_one_row(self) -> None:
        layout = LineLayout(PieceChain())
        assert layout.line_count() == 1
        assert layout.visual_lines() == [""]

    def test_widest_line(self) -> None:
        layout = LineLayout(PieceChain("ab\nabcd\nx"), wrap="none")
        layout.line_count()
        assert layout.widest_line == 4

    def test_width_change_keeps_rows(self) -> None:
        layout = LineLayout(PieceChain("a\nb"), width=10, wrap="none")
        layout.line_count()
        assert not layout.configure(width=3)
        assert layout.complete


class TestCharacterWrap:
    """Break as soon as the next cluster would not fit."""

    def test_space_stays_on_row(self) -> None:
        assert lines("aaaa bbbb", width=5, wrap="character") == ["aaaa ", "bbbb"]

    def test_long_run(self) -> None:
        assert lines("abcdefgh", width=3, wrap="character") == ["abc", "def", "gh"]

    def test_wide_characters(self) -> None:
        assert lines("世界世界", width=5, wrap="character") == ["世界", "世界"]

    def test_zero_width_viewport_makes_progress(self) -> None:
        assert lines("abc", width=0, wrap="character") == ["a", "b", "c"]


class TestWordWrap:
    """Prefer the last break opportunity on the row."""

    def test_break_at_space(self) -> None:
        assert lines("aaaa bbbb", width=5, wrap="word") == ["aaaa", "bbbb"]

    def test_multiple_words(self) -> None:
        assert lines("the quick brown fox", width=10, wrap="word") == ["the quick", "brown fox"]

    def test_trailing_spaces_hang(self) -> None:
        assert lines("ab    cd", width=4, wrap="word") == ["ab", "cd"]

    def test_break_after_hyphen(self) -> None:
        assert lines("well-known", width=6, wrap="word") == ["well-", "known"]

    def test_falls_back_to_character_wrap(self) -> None:
        assert lines("abcdefgh", width=3, wrap="word") == ["abc", "def", "gh"]

    def test_hard_break_resets_row(self) -> None:
        assert lines("ab cd\nef gh", width=4, wrap="word") == ["ab", "cd", "ef", "gh"]

    def test_tab_width_counts(self) -> None:
        assert lines("a\tb", width=4, wrap="character", tab_size=4) == ["a", "\t", "b"]


class TestIncrementalLayout:
    """Lazy extension and truncation of the line-start table."""

    def test_extends_only_as_far_as_requested(self) -> None:
        layout = LineLayout(PieceChain("x\n" * 100), wrap="none")
        layout.extend_lines(3)
        assert len(layout.line_starts) == 5
        assert not layout.complete

    def test_line_count_completes_table(self) -> None:
        layout = LineLayout(PieceChain("x\n" * 100), wrap="none")
        assert layout.line_count() == 101
        assert layout.complete

    def test_line_starts_increase(self) -> None:
        layout = LineLayout(PieceChain("ab cd ef gh"), width=3, wrap="word")
        layout.line_count()
        indices = [p.index for p in layout.line_starts]
        assert indices == sorted(indices)
        assert len(set(indices)) == len(indices)

    def test_truncate_keeps_earlier_rows(self) -> None:
        layout = LineLayout(PieceChain("a\nb\nc\nd\n"), wrap="none")
        layout.line_count()
        kept = layout.truncate(layout.line_starts[3].index)
        assert kept == 2
        assert len(layout.line_starts) == 2
        assert not layout.complete

    def test_relayout_after_edit(self) -> None:
        chain = PieceChain("aaaa bbbb")
        layout = LineLayout(chain, width=5, wrap="word")
        assert layout.visual_lines() == ["aaaa", "bbbb"]
        pos = chain.position_at(2)
        chain.replace(pos, chain.position_at(5), "")
        layout.truncate(2)
        assert layout.visual_lines() == ["aabbb", "b"]

    def test_edit_at_start_refreshes_first_row(self) -> None:
        chain = PieceChain()
        layout = LineLayout(chain, width=10)
        layout.line_count()
        start = chain.start()
        chain.replace(start, start, "new")
        layout.truncate(0)
        assert layout.visual_lines() == ["new"]

    def test_row_of(self) -> None:
        layout = LineLayout(PieceChain("ab\ncd\nef"), wrap="none")
        assert layout.row_of(0) == 0
        assert layout.row_of(2) == 0
        assert layout.row_of(3) == 1
        assert layout.row_of(8) == 2
        assert layout.row_of(4, hint=2) == 1

    def test_row_of_soft_break_belongs_to_next_row(self) -> None:
        layout = LineLayout(PieceChain("abcdef"), width=3, wrap="character")
        assert layout.row_of(3) == 1

    def test_stale_line_start_raises(self) -> None:
        chain = PieceChain("abc\ndef")
        layout = LineLayout(chain)
        layout.line_starts.append(Position(chain.start().span, 99, 5))
        with pytest.raises(StaleLayoutError):
            layout.extend_lines(5)

    def test_line_start_in_unlinked_span_raises(self) -> None:
        chain = PieceChain("abc\ndef")
        layout = LineLayout(chain, wrap="none")
        layout.extend_lines(0)
        assert layout.line_starts[-1].index == 4
        chain.replace(chain.start(), chain.end(), "x")
        with pytest.raises(StaleLayoutError):
            layout.extend_lines(5)

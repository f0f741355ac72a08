"""Tests for tuikit.screen -- styles and the in-memory cell grid."""

from __future__ import annotations

from tuikit.screen import DEFAULT_STYLE, CellBuffer, Rect, Screen, Style


class TestStyle:
    def test_defaults(self) -> None:
        assert DEFAULT_STYLE == Style()
        assert DEFAULT_STYLE.foreground is None
        assert not DEFAULT_STYLE.reverse

    def test_with_helpers_return_copies(self) -> None:
        style = Style().with_foreground("red").with_background("#000000").with_reverse()
        assert style == Style(foreground="red", background="#000000", reverse=True)
        assert DEFAULT_STYLE == Style()


class TestCellBuffer:
    """CellBuffer records what widgets paint."""

    def test_implements_screen(self) -> None:
        assert isinstance(CellBuffer(), Screen)

    def test_size(self) -> None:
        assert CellBuffer(10, 3).size() == (10, 3)

    def test_starts_blank(self) -> None:
        assert CellBuffer(4, 2).lines() == ["", ""]

    def test_set_content(self) -> None:
        screen = CellBuffer(5, 1)
        bold = Style(bold=True)
        screen.set_content(1, 0, "x", "", bold)
        assert screen.row_text(0) == " x   "
        assert screen.cell(1, 0).style == bold

    def test_combining_characters(self) -> None:
        screen = CellBuffer(3, 1)
        screen.set_content(0, 0, "e", "\u0301", DEFAULT_STYLE)
        assert screen.cell(0, 0).text == "e\u0301"
        assert screen.cell(1, 0).text == " "

    def test_wide_character_marks_continuation(self) -> None:
        screen = CellBuffer(4, 1)
        screen.set_content(0, 0, "世", "", DEFAULT_STYLE)
        assert screen.cell(1, 0).continuation
        assert screen.cell(1, 0).text == ""
        assert screen.lines() == ["世"]

    def test_out_of_range_is_ignored(self) -> None:
        screen = CellBuffer(2, 2)
        screen.set_content(5, 0, "x", "", DEFAULT_STYLE)
        screen.set_content(0, -1, "x", "", DEFAULT_STYLE)
        assert screen.lines() == ["", ""]

    def test_cursor(self) -> None:
        screen = CellBuffer(2, 2)
        assert screen.cursor is None
        screen.show_cursor(1, 1)
        assert screen.cursor == (1, 1)
        screen.hide_cursor()
        assert screen.cursor is None

    def test_clear(self) -> None:
        screen = CellBuffer(3, 1)
        screen.set_content(0, 0, "a", "", DEFAULT_STYLE)
        screen.show_cursor(0, 0)
        screen.clear()
        assert screen.lines() == [""]
        assert screen.cursor is None


class TestRect:
    def test_defaults(self) -> None:
        assert Rect() == Rect(0, 0, 0, 0)

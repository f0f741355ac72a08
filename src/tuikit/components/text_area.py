"""Multi-line text area with selection, clipboard, undo/redo and wrapping.

The widget owns a ``PieceChain`` holding the text and a ``LineLayout``
caching where visual rows start. Every edit goes through ``_replace``,
which records an undoable change, truncates the layout from the edited
row onward and relocates the cursor lazily from the last known row.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field, replace
from typing import Callable, Iterator, Literal, Protocol

import grapheme as _grapheme

from tuikit.clipboard import Clipboard, InternalClipboard
from tuikit.keybindings import TextAreaAction, TextAreaKeybindingsManager
from tuikit.keys import (
    BRACKETED_PASTE_END,
    BRACKETED_PASTE_START,
    MouseEvent,
    is_printable,
    parse_mouse,
)
from tuikit.screen import DEFAULT_STYLE, Rect, Screen, Style
from tuikit.text.chain import PieceChain, Position, UndoResult
from tuikit.text.layout import LineLayout, WrapMode
from tuikit.text.stepper import LINE_MUST_BREAK, WORD, Cluster
from tuikit.utils import (
    cluster_width,
    is_line_break,
    is_punctuation_char,
    is_whitespace_char,
)

logger = logging.getLogger(__name__)

# Cells of context kept left and right of the cursor when wrapping is off.
_PREFIX_MARGIN = 5
_SUFFIX_MARGIN = 3

EditKind = Literal["typing-space", "typing", "backspace", "delete", "other"]


# ---------------------------------------------------------------------------
# Data classes
# ---------------------------------------------------------------------------


@dataclass
class TextAreaOptions:
    new_line: str = "\n"
    tab_size: int = 4
    # In UTF-8 bytes; 0 means unlimited.
    max_length: int = 0
    wrap: WrapMode = "word"
    placeholder: str = ""


@dataclass
class TextAreaTheme:
    text_style: Style = DEFAULT_STYLE
    selected_style: Style = field(default_factory=lambda: Style(reverse=True))
    placeholder_style: Style = field(default_factory=lambda: Style(foreground="gray"))


@dataclass(frozen=True)
class TextChange:
    """A replaced range of the pre-edit text and the text now in its place."""

    start: int
    end: int
    text: str


@dataclass
class Cursor:
    """A location in the laid-out text.

    ``column`` is the requested column, kept across vertical moves through
    shorter rows; ``actual_column`` is where the cursor is painted. A
    ``row`` of -1 means the row has not been located since the last edit.
    """

    row: int
    column: int
    actual_column: int
    pos: Position


class TextAreaListener(Protocol):
    def text_changed(self, text_area: TextArea, change: TextChange) -> None: ...

    def cursor_moved(self, text_area: TextArea) -> None: ...


# ---------------------------------------------------------------------------
# TextArea
# ---------------------------------------------------------------------------


class TextArea:
    """Multi-line text editing widget.

    Paints into any ``Screen`` within its rectangle and accepts raw
    terminal input through ``handle_input`` or named actions through
    ``handle_action``.
    """

    def __init__(
        self,
        text: str = "",
        options: TextAreaOptions | None = None,
        theme: TextAreaTheme | None = None,
        keybindings: TextAreaKeybindingsManager | None = None,
        clipboard: Clipboard | None = None,
    ) -> None:
        if options is None:
            options = TextAreaOptions()
        self._options = options
        self._theme = theme or TextAreaTheme()
        self._keybindings = keybindings or TextAreaKeybindingsManager()
        self._clipboard: Clipboard = clipboard or InternalClipboard()
        self._listeners: list[TextAreaListener] = []

        self.focused: bool = False
        self._rect = Rect(0, 0, 80, 24)

        self._chain = PieceChain(text, options.max_length)
        self._layout = LineLayout(self._chain, self._rect.width, options.wrap, options.tab_size)
        self._cursor = self._cursor_for(0, 0)
        self._anchor = self._cursor
        self._row_offset: int = 0
        self._column_offset: int = 0

        # Kind of the last edit, for grouping undo steps
        self._last_kind: EditKind | None = None

        # Bracketed paste mode buffering
        self._paste_buffer: str = ""
        self._is_in_paste: bool = False

        # Mouse drag selection in progress
        self._dragging: bool = False

        self._actions: dict[TextAreaAction, Callable[[], object]] = {
            "cursorUp": self.cursor_up,
            "cursorDown": self.cursor_down,
            "cursorLeft": self.cursor_left,
            "cursorRight": self.cursor_right,
            "cursorWordLeft": self.word_left,
            "cursorWordRight": self.word_right,
            "cursorLineStart": self.line_start,
            "cursorLineEnd": self.line_end,
            "pageUp": self.page_up,
            "pageDown": self.page_down,
            "selectUp": lambda: self.cursor_up(extend=True),
            "selectDown": lambda: self.cursor_down(extend=True),
            "selectLeft": lambda: self.cursor_left(extend=True),
            "selectRight": lambda: self.cursor_right(extend=True),
            "selectWordLeft": lambda: self.word_left(extend=True),
            "selectWordRight": lambda: self.word_right(extend=True),
            "selectLineStart": lambda: self.line_start(extend=True),
            "selectLineEnd": lambda: self.line_end(extend=True),
            "selectPageUp": lambda: self.page_up(extend=True),
            "selectPageDown": lambda: self.page_down(extend=True),
            "selectAll": self.select_all,
            "scrollUp": lambda: self.scroll(-1, 0),
            "scrollDown": lambda: self.scroll(1, 0),
            "scrollLeft": lambda: self.scroll(0, -1),
            "scrollRight": lambda: self.scroll(0, 1),
            "deleteCharBackward": self.backspace,
            "deleteCharForward": self.delete,
            "deleteWordBackward": self.delete_word_backward,
            "deleteToLineEnd": self.delete_to_line_end,
            "deleteLine": self.delete_line,
            "newLine": self.new_line,
            "tab": self.tab,
            "copy": self.copy,
            "cut": self.cut,
            "paste": self.paste,
            "undo": self.undo,
            "redo": self.redo,
        }

    # -- Configuration -------------------------------------------------------

    def set_rect(self, x: int, y: int, width: int, height: int) -> None:
        self._rect = Rect(x, y, max(0, width), max(0, height))
        self._relayout(width=self._rect.width)

    def get_rect(self) -> Rect:
        return self._rect

    def set_wrap(self, wrap: WrapMode) -> None:
        self._options.wrap = wrap
        if wrap != "none":
            self._column_offset = 0
        self._relayout(wrap=wrap)

    def set_tab_size(self, tab_size: int) -> None:
        self._options.tab_size = max(0, tab_size)
        self._relayout(tab_size=self._options.tab_size)

    def set_max_length(self, max_length: int) -> None:
        self._options.max_length = max(0, max_length)
        self._chain.max_length = self._options.max_length

    def set_placeholder(self, placeholder: str) -> None:
        self._options.placeholder = placeholder

    def set_new_line(self, new_line: str) -> None:
        self._options.new_line = new_line

    def set_theme(self, theme: TextAreaTheme) -> None:
        self._theme = theme

    def set_clipboard(self, clipboard: Clipboard) -> None:
        self._clipboard = clipboard

    def _relayout(self, **changes: object) -> None:
        if self._layout.configure(**changes):  # type: ignore[arg-type]
            # Rows must be located again.
            self._cursor = replace(self._cursor, row=-1)
            self._anchor = replace(self._anchor, row=-1)
        self.clamp_to_cursor()

    # -- Listeners -----------------------------------------------------------

    def add_listener(self, listener: TextAreaListener) -> None:
        self._listeners.append(listener)

    def remove_listener(self, listener: TextAreaListener) -> None:
        if listener in self._listeners:
            self._listeners.remove(listener)

    def _notify_text(self, change: TextChange) -> None:
        for listener in list(self._listeners):
            listener.text_changed(self, change)

    def _notify_cursor(self) -> None:
        for listener in list(self._listeners):
            listener.cursor_moved(self)

    # -- Text ----------------------------------------------------------------

    def get_text(self) -> str:
        return self._chain.get_text()

    def set_text(self, text: str, cursor_at_end: bool = False) -> TextChange:
        """Replace the whole text, discarding undo history."""
        change = TextChange(0, self._chain.length, text)
        self._chain = PieceChain(text, self._options.max_length)
        self._layout.set_chain(self._chain)
        self._row_offset = 0
        self._column_offset = 0
        self._last_kind = None
        index = len(text) if cursor_at_end else 0
        self._cursor = Cursor(-1, 0, 0, self._chain.position_at(index))
        self._anchor = self._cursor
        self.clamp_to_cursor()
        logger.debug("Text set (%d characters)", len(text))
        self._notify_text(change)
        self._notify_cursor()
        return change

    def get_visual_lines(self) -> list[str]:
        """Return the painted text of every row."""
        return self._layout.visual_lines()

    def get_line_count(self) -> int:
        return self._layout.line_count()

    # -- Cursor location -----------------------------------------------------

    def _cursor_for(self, row: int, column: int) -> Cursor:
        """Return a cursor on *row* (clamped) at *column* (-1 = end of row)."""
        layout = self._layout
        row = max(0, row)
        if not layout.has_row(row):
            row = len(layout.line_starts) - 1

        clusters = list(layout.row_clusters(row))
        # The cursor never sits after a row's hard break or on the far side
        # of a soft break (that position belongs to the next row).
        if clusters and (clusters[-1].boundaries & LINE_MUST_BREAK or layout.row_end(row) is not None):
            clusters.pop()

        pos = layout.line_starts[row]
        actual = 0
        for cluster in clusters:
            if column >= 0 and actual + cluster.width > column:
                break
            actual += cluster.width
            pos = cluster.next
        return Cursor(row, column if column >= 0 else actual, actual, pos)

    def _locate(self, index: int, hint: int = 0) -> Cursor:
        """Return the cursor for character *index*, scanning rows from *hint*."""
        layout = self._layout
        row = layout.row_of(index, hint)
        pos = layout.line_starts[row]
        actual = 0
        for cluster in layout.row_clusters(row):
            if cluster.start.index >= index:
                break
            actual += cluster.width
            pos = cluster.next
        return Cursor(row, actual, actual, pos)

    def _resolve(self) -> Cursor:
        if self._cursor.row < 0:
            self._cursor = self._locate(self._cursor.pos.index, self._row_offset)
        return self._cursor

    def clamp_to_cursor(self, search_hint: int = 0) -> None:
        """Scroll so that the cursor is inside the viewport.

        Locates the cursor's row first if an edit invalidated it, scanning
        the line table forward from row *search_hint*.
        """
        if self._cursor.row < 0:
            self._cursor = self._locate(self._cursor.pos.index, search_hint)
        cursor = self._cursor

        height = self._rect.height
        if cursor.row < self._row_offset:
            self._row_offset = cursor.row
        elif height > 0 and cursor.row >= self._row_offset + height:
            self._row_offset = cursor.row - height + 1

        if self._layout.wrap != "none":
            self._column_offset = 0
            return
        width = self._rect.width
        column = cursor.actual_column
        if width <= 0:
            self._column_offset = column
            return
        prefix = min(_PREFIX_MARGIN, (width - 1) // 2)
        suffix = min(_SUFFIX_MARGIN, width - 1 - prefix)
        if column - self._column_offset < prefix:
            self._column_offset = max(0, column - prefix)
        elif column - self._column_offset > width - 1 - suffix:
            self._column_offset = column - (width - 1 - suffix)

    def get_cursor(self) -> tuple[int, int]:
        """Return the cursor's ``(row, column)`` in the laid-out text."""
        cursor = self._resolve()
        return cursor.row, cursor.actual_column

    def get_cursor_index(self) -> int:
        return self._cursor.pos.index

    def get_offset(self) -> tuple[int, int]:
        return self._row_offset, self._column_offset

    def set_offset(self, row: int, column: int) -> None:
        self._row_offset = max(0, row)
        self._column_offset = max(0, column) if self._layout.wrap == "none" else 0

    def _place_cursor(self, cursor: Cursor, extend: bool = False) -> None:
        moved = cursor.pos.index != self._cursor.pos.index
        self._cursor = cursor
        if not extend:
            self._anchor = cursor
        self._last_kind = None
        self.clamp_to_cursor(max(0, cursor.row))
        if moved:
            self._notify_cursor()

    # -- Cluster scanning ----------------------------------------------------

    def _clusters_from(self, index: int) -> Iterator[Cluster]:
        return self._layout.stepper.clusters(self._chain.position_at(index))

    def _clusters_before(self, index: int) -> Iterator[Cluster]:
        """Yield the clusters ending at or before *index*, nearest first."""
        row = self._layout.row_of(index, max(0, self._cursor.row))
        while row >= 0:
            clusters = [c for c in self._layout.row_clusters(row) if c.next.index <= index]
            yield from reversed(clusters)
            row -= 1

    def _previous_boundary(self, index: int) -> int:
        cluster = next(self._clusters_before(index), None)
        return cluster.start.index if cluster is not None else 0

    def _next_boundary(self, index: int) -> int:
        cluster = next(self._clusters_from(index), None)
        return cluster.next.index if cluster is not None else index

    def _word_left_index(self, index: int) -> int:
        clusters = self._clusters_before(index)
        current = next(clusters, None)
        if current is None:
            return index
        if current.boundaries & LINE_MUST_BREAK:
            return current.start.index

        target = index
        # Skip trailing whitespace
        while current is not None and _is_blank(current):
            target = current.start.index
            current = next(clusters, None)

        if current is not None and is_punctuation_char(current.text):
            # Skip punctuation run
            while current is not None and is_punctuation_char(current.text):
                target = current.start.index
                current = next(clusters, None)
        else:
            # Skip word run
            while current is not None and current.boundaries & WORD:
                target = current.start.index
                current = next(clusters, None)
        return target

    def _word_right_index(self, index: int) -> int:
        clusters = self._clusters_from(index)
        current = next(clusters, None)
        if current is None:
            return index
        if current.boundaries & LINE_MUST_BREAK:
            return current.next.index

        target = index
        # Skip leading whitespace
        while current is not None and _is_blank(current):
            target = current.next.index
            current = next(clusters, None)

        if current is not None and is_punctuation_char(current.text):
            # Skip punctuation run
            while current is not None and is_punctuation_char(current.text):
                target = current.next.index
                current = next(clusters, None)
        else:
            # Skip word run
            while current is not None and current.boundaries & WORD:
                target = current.next.index
                current = next(clusters, None)
        return target

    def _line_bounds(self, index: int) -> tuple[int, int, int]:
        """Return the start and end of the hard line at *index*, and the end
        including its line break."""
        start = 0
        for cluster in self._clusters_before(index):
            if cluster.boundaries & LINE_MUST_BREAK:
                start = cluster.next.index
                break
        end = after = self._chain.length
        for cluster in self._clusters_from(index):
            if cluster.boundaries & LINE_MUST_BREAK:
                end, after = cluster.start.index, cluster.next.index
                break
        return start, end, after

    # -- Cursor movement -----------------------------------------------------

    def move_cursor(self, row: int, column: int, extend: bool = False) -> None:
        """Move to *row* and *column*, clamped; a negative column is the end of the row."""
        self._place_cursor(self._cursor_for(row, column), extend)

    def move_to_index(self, index: int, extend: bool = False) -> None:
        index = max(0, min(index, self._chain.length))
        self._place_cursor(self._locate(index, max(0, self._cursor.row)), extend)

    def cursor_left(self, extend: bool = False) -> None:
        index = self._cursor.pos.index
        if not extend and self.has_selection():
            self.move_to_index(self.get_selection()[0])
            return
        if index > 0:
            self.move_to_index(self._previous_boundary(index), extend)

    def cursor_right(self, extend: bool = False) -> None:
        index = self._cursor.pos.index
        if not extend and self.has_selection():
            self.move_to_index(self.get_selection()[1])
            return
        if index < self._chain.length:
            self.move_to_index(self._next_boundary(index), extend)

    def cursor_up(self, extend: bool = False) -> None:
        cursor = self._resolve()
        self._place_cursor(self._cursor_for(cursor.row - 1, cursor.column), extend)

    def cursor_down(self, extend: bool = False) -> None:
        cursor = self._resolve()
        self._place_cursor(self._cursor_for(cursor.row + 1, cursor.column), extend)

    def line_start(self, extend: bool = False) -> None:
        self.move_cursor(self._resolve().row, 0, extend)

    def line_end(self, extend: bool = False) -> None:
        self.move_cursor(self._resolve().row, -1, extend)

    def word_left(self, extend: bool = False) -> None:
        self.move_to_index(self._word_left_index(self._cursor.pos.index), extend)

    def word_right(self, extend: bool = False) -> None:
        self.move_to_index(self._word_right_index(self._cursor.pos.index), extend)

    def page_up(self, extend: bool = False) -> None:
        cursor = self._resolve()
        page = max(1, self._rect.height)
        self._row_offset = max(0, self._row_offset - page)
        self._place_cursor(self._cursor_for(cursor.row - page, cursor.column), extend)

    def page_down(self, extend: bool = False) -> None:
        cursor = self._resolve()
        page = max(1, self._rect.height)
        target = self._cursor_for(cursor.row + page, cursor.column)
        if self._layout.has_row(self._row_offset + page):
            self._row_offset += page
        self._place_cursor(target, extend)

    def scroll(self, rows: int, columns: int) -> None:
        """Scroll the viewport without moving the cursor."""
        if rows < 0:
            self._row_offset = max(0, self._row_offset + rows)
        elif rows > 0 and self._layout.has_row(self._row_offset + rows):
            self._row_offset += rows
        if columns and self._layout.wrap == "none":
            widest = max(0, self._layout.widest_line - self._rect.width + 1)
            self._column_offset = max(0, min(self._column_offset + columns, widest))

    # -- Selection -----------------------------------------------------------

    def get_selection(self) -> tuple[int, int, int]:
        """Return ``(from, to, start_row)`` of the selection, ``from <= to``."""
        start = self._anchor.pos.index
        end = self._cursor.pos.index
        if end < start:
            start, end = end, start
        row = self._layout.row_of(start, self._row_offset)
        return start, end, row

    def has_selection(self) -> bool:
        return self._anchor.pos.index != self._cursor.pos.index

    def get_selected_text(self) -> str:
        start, end, _ = self.get_selection()
        return self._chain.get_range(self._chain.position_at(start), self._chain.position_at(end))

    def select(self, start: int, end: int) -> None:
        """Select the half-open character range ``[start, end)``."""
        length = self._chain.length
        start = max(0, min(start, length))
        end = max(0, min(end, length))
        anchor = self._locate(start, self._row_offset)
        self._place_cursor(self._locate(end, anchor.row))
        self._anchor = anchor

    def select_all(self) -> None:
        self.select(0, self._chain.length)

    # -- Clipboard -----------------------------------------------------------

    def copy(self) -> None:
        if self.has_selection():
            self._clipboard.copy(self.get_selected_text())

    def cut(self) -> None:
        if self.has_selection():
            self._clipboard.copy(self.get_selected_text())
            self._delete_selection()

    def paste(self) -> None:
        text = self._clipboard.paste()
        if text:
            self.insert_text(text)

    # -- Editing -------------------------------------------------------------

    def _replace(self, start: int, end: int, text: str, kind: EditKind) -> TextChange | None:
        """Replace ``[start, end)`` with *text* as an undoable edit."""
        chain = self._chain
        continuation = kind != "other" and (
            kind == self._last_kind or (self._last_kind == "typing" and kind == "typing-space")
        )
        new_end = chain.replace(
            chain.position_at(start),
            chain.position_at(end),
            text,
            continuation=continuation,
            cursor=self._cursor.pos.index,
        )
        if new_end is None:
            return None

        self._last_kind = kind
        kept = self._layout.truncate(start)
        self._cursor = Cursor(-1, 0, 0, chain.position_at(new_end.index))
        self._anchor = self._cursor
        self.clamp_to_cursor(kept - 1)

        change = TextChange(start, end, text)
        self._notify_text(change)
        self._notify_cursor()
        return change

    def replace_text(self, start: int, end: int, text: str) -> TextChange | None:
        """Replace the character range ``[start, end)`` with *text*.

        Returns None if the edit was rejected because the text would
        exceed the maximum length.
        """
        length = self._chain.length
        start = max(0, min(start, length))
        end = max(0, min(end, length))
        if end < start:
            start, end = end, start
        self._last_kind = None
        return self._replace(start, end, text, "other")

    def insert_text(self, text: str) -> TextChange | None:
        """Insert *text* at the cursor, replacing the selection if any."""
        if not text:
            return None
        start, end, _ = self.get_selection()
        if start != end:
            self._last_kind = None
        if _grapheme.length(text, 2) == 1:
            kind: EditKind = "typing-space" if is_whitespace_char(text) else "typing"
        else:
            kind = "other"
        return self._replace(start, end, text, kind)

    def _delete_selection(self) -> TextChange | None:
        start, end, _ = self.get_selection()
        self._last_kind = None
        return self._replace(start, end, "", "other")

    def new_line(self) -> None:
        """Insert the line break sequence, or copy and unselect a selection."""
        if self.has_selection():
            self.copy()
            self._anchor = self._cursor
            self._last_kind = None
            return
        index = self._cursor.pos.index
        self._replace(index, index, self._options.new_line, "other")

    def tab(self) -> None:
        self.insert_text(" " * self._options.tab_size)

    def backspace(self) -> None:
        if self.has_selection():
            self._delete_selection()
            return
        index = self._cursor.pos.index
        if index > 0:
            self._replace(self._previous_boundary(index), index, "", "backspace")

    def delete(self) -> None:
        if self.has_selection():
            self._delete_selection()
            return
        index = self._cursor.pos.index
        if index < self._chain.length:
            self._replace(index, self._next_boundary(index), "", "delete")

    def delete_to_line_end(self) -> None:
        """Delete up to the end of the line, or the line break if already there."""
        index = self._cursor.pos.index
        _, end, after = self._line_bounds(index)
        if end == index:
            end = after
        if end > index:
            self._replace(index, end, "", "other")

    def delete_line(self) -> None:
        """Delete the whole line the cursor is on, including its line break."""
        start, _, after = self._line_bounds(self._cursor.pos.index)
        if after > start:
            self._replace(start, after, "", "other")

    def delete_word_backward(self) -> None:
        index = self._cursor.pos.index
        target = self._word_left_index(index)
        if target < index:
            self._replace(target, index, "", "other")

    # -- Undo / redo ---------------------------------------------------------

    def can_undo(self) -> bool:
        return self._chain.can_undo

    def can_redo(self) -> bool:
        return self._chain.can_redo

    def undo(self) -> TextChange | None:
        old_length = self._chain.length
        return self._apply_history(self._chain.undo(), old_length)

    def redo(self) -> TextChange | None:
        old_length = self._chain.length
        return self._apply_history(self._chain.redo(), old_length)

    def _apply_history(self, result: UndoResult | None, old_length: int) -> TextChange | None:
        if result is None:
            return None
        chain = self._chain
        self._last_kind = None
        kept = self._layout.truncate(result.index)
        self._cursor = Cursor(-1, 0, 0, chain.position_at(result.cursor))
        self._anchor = self._cursor
        self.clamp_to_cursor(kept - 1)

        # Everything from the first affected character on may have changed.
        change = TextChange(
            result.index,
            old_length,
            chain.get_range(chain.position_at(result.index), chain.end()),
        )
        self._notify_text(change)
        self._notify_cursor()
        return change

    # -- Input ---------------------------------------------------------------

    def handle_action(self, action: TextAreaAction) -> bool:
        """Run a named action. Returns ``False`` if the action is unknown."""
        handler = self._actions.get(action)
        if handler is None:
            return False
        handler()
        return True

    def handle_input(self, data: str) -> None:
        # Handle bracketed paste mode
        if BRACKETED_PASTE_START in data:
            self._is_in_paste = True
            self._paste_buffer = ""
            data = data.replace(BRACKETED_PASTE_START, "")

        if self._is_in_paste:
            self._paste_buffer += data
            end_index = self._paste_buffer.find(BRACKETED_PASTE_END)
            if end_index == -1:
                return
            paste_content = self._paste_buffer[:end_index]
            remaining = self._paste_buffer[end_index + len(BRACKETED_PASTE_END) :]
            self._is_in_paste = False
            self._paste_buffer = ""
            if paste_content:
                self._handle_paste(paste_content)
            if remaining:
                self.handle_input(remaining)
            return

        mouse = parse_mouse(data)
        if mouse is not None:
            event, consumed = mouse
            self.handle_mouse(event)
            if data[consumed:]:
                self.handle_input(data[consumed:])
            return

        action = self._keybindings.find_action(data)
        if action is not None:
            self.handle_action(action)
            return

        if is_printable(data):
            self.insert_text(data)

    def _handle_paste(self, text: str) -> None:
        # Normalize line endings to the configured line break
        text = text.replace("\r\n", "\n").replace("\r", "\n")
        if self._options.new_line != "\n":
            text = text.replace("\n", self._options.new_line)
        logger.debug("Paste of %d characters", len(text))
        start, end, _ = self.get_selection()
        self._last_kind = None
        self._replace(start, end, text, "other")

    def handle_mouse(self, event: MouseEvent) -> bool:
        """Handle a mouse event. Returns ``True`` if it was consumed."""
        rect = self._rect
        x = event.x - rect.x
        y = event.y - rect.y
        inside = 0 <= x < rect.width and 0 <= y < rect.height

        if event.action in ("wheel_up", "wheel_down"):
            if not inside:
                return False
            self.scroll(-1 if event.action == "wheel_up" else 1, 0)
            return True

        if event.action == "press" and event.button == "left":
            if not inside:
                return False
            self.focused = True
            self._dragging = True
            self.move_cursor(
                self._row_offset + y, self._column_offset + x, extend=event.shift
            )
            return True

        if event.action == "drag" and self._dragging:
            x = max(0, min(x, max(0, rect.width - 1)))
            y = max(0, min(y, max(0, rect.height - 1)))
            self.move_cursor(self._row_offset + y, self._column_offset + x, extend=True)
            return True

        if event.action == "release" and self._dragging:
            self._dragging = False
            return True

        return False

    # -- Rendering -----------------------------------------------------------

    def draw(self, screen: Screen) -> None:
        rect = self._rect
        theme = self._theme
        for y in range(rect.height):
            for x in range(rect.width):
                screen.set_content(rect.x + x, rect.y + y, " ", "", theme.text_style)

        if self._chain.length == 0 and self._options.placeholder:
            self._draw_placeholder(screen)
            if self.focused and rect.width > 0 and rect.height > 0:
                screen.show_cursor(rect.x, rect.y)
            else:
                screen.hide_cursor()
            return

        selection_start, selection_end, _ = self.get_selection()
        layout = self._layout
        for y in range(rect.height):
            row = self._row_offset + y
            if not layout.has_row(row):
                break
            column = 0
            for cluster in layout.row_clusters(row):
                x = column - self._column_offset
                if x >= rect.width:
                    break
                selected = selection_start <= cluster.start.index < selection_end
                style = theme.selected_style if selected else theme.text_style
                if cluster.boundaries & LINE_MUST_BREAK:
                    if selected and x >= 0:
                        screen.set_content(rect.x + x, rect.y + y, " ", "", style)
                    break
                if x >= 0 and x + cluster.width <= rect.width:
                    self._paint_cluster(screen, rect.x + x, rect.y + y, cluster, style)
                column += cluster.width

        cursor = self._resolve()
        cursor_x = cursor.actual_column - self._column_offset
        cursor_y = cursor.row - self._row_offset
        if self.focused and 0 <= cursor_x < rect.width and 0 <= cursor_y < rect.height:
            screen.show_cursor(rect.x + cursor_x, rect.y + cursor_y)
        else:
            screen.hide_cursor()

    def _paint_cluster(self, screen: Screen, x: int, y: int, cluster: Cluster, style: Style) -> None:
        if cluster.text == "\t":
            for i in range(cluster.width):
                screen.set_content(x + i, y, " ", "", style)
        elif cluster.width > 0:
            screen.set_content(x, y, cluster.text[0], cluster.text[1:], style)

    def _draw_placeholder(self, screen: Screen) -> None:
        """Paint the placeholder, word-wrapped to the widget's width."""
        rect = self._rect
        style = self._theme.placeholder_style
        tab_size = self._options.tab_size
        x = y = 0
        # Clusters painted on the current row and where the last word began
        row: list[tuple[str, int]] = []
        last_break: int | None = None

        def paint(text: str, col: int, line: int) -> None:
            if text == "\t" or not text.strip():
                return
            screen.set_content(rect.x + col, rect.y + line, text[0], text[1:], style)

        for text in _grapheme.graphemes(self._options.placeholder):
            if y >= rect.height:
                return
            if is_line_break(text):
                x, y, row, last_break = 0, y + 1, [], None
                continue
            width = cluster_width(text, tab_size)
            if x + width > rect.width and x > 0:
                x, y, row, last_break = self._wrap_placeholder(screen, row, last_break, x, y, width)
                if y >= rect.height:
                    return
                if is_whitespace_char(text):
                    continue
            if width > rect.width:
                continue
            paint(text, x, y)
            row.append((text, width))
            x += width
            if is_whitespace_char(text):
                last_break = len(row)

    def _wrap_placeholder(
        self,
        screen: Screen,
        row: list[tuple[str, int]],
        last_break: int | None,
        x: int,
        y: int,
        width: int,
    ) -> tuple[int, int, list[tuple[str, int]], int | None]:
        """Start a new placeholder row, carrying the partial word over when it
        fits there together with the next cluster."""
        rect = self._rect
        style = self._theme.placeholder_style
        moved = row[last_break:] if last_break else []
        moved_width = sum(w for _, w in moved)
        if not moved or moved_width + width > rect.width or y + 1 >= rect.height:
            return 0, y + 1, [], None

        column = x - moved_width
        for _, w in moved:
            for i in range(w):
                screen.set_content(rect.x + column + i, rect.y + y, " ", "", style)
            column += w

        x = 0
        for text, w in moved:
            if text != "\t" and text.strip():
                screen.set_content(rect.x + x, rect.y + y + 1, text[0], text[1:], style)
            x += w
        return x, y + 1, list(moved), None


def _is_blank(cluster: Cluster) -> bool:
    return is_whitespace_char(cluster.text) and not cluster.boundaries & LINE_MUST_BREAK

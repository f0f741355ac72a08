"""Render target protocol and an in-memory cell grid.

Widgets paint into a ``Screen``: a grid of cells addressed by ``(x, y)``,
each holding a primary character, its combining characters and a
``Style``. ``CellBuffer`` implements the protocol without any terminal I/O
and is what tests and off-screen rendering use.
"""

from __future__ import annotations

from dataclasses import dataclass, replace
from typing import Protocol, runtime_checkable

from tuikit.utils import cluster_width

# ---------------------------------------------------------------------------
# Style
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class Style:
    """Colours and attributes of a cell.

    Colours are free-form strings understood by the host terminal layer
    (e.g. ``"red"`` or ``"#ff8800"``); ``None`` means the terminal default.
    """

    foreground: str | None = None
    background: str | None = None
    bold: bool = False
    italic: bool = False
    underline: bool = False
    reverse: bool = False

    def with_foreground(self, color: str | None) -> Style:
        return replace(self, foreground=color)

    def with_background(self, color: str | None) -> Style:
        return replace(self, background=color)

    def with_reverse(self, reverse: bool = True) -> Style:
        return replace(self, reverse=reverse)


DEFAULT_STYLE = Style()


@dataclass(frozen=True)
class Rect:
    x: int = 0
    y: int = 0
    width: int = 0
    height: int = 0


# ---------------------------------------------------------------------------
# Screen protocol
# ---------------------------------------------------------------------------


@runtime_checkable
class Screen(Protocol):
    """A grid of character cells."""

    def size(self) -> tuple[int, int]:
        """Return ``(width, height)``."""
        ...

    def set_content(self, x: int, y: int, primary: str, combining: str, style: Style) -> None:
        """Set the cell at ``(x, y)``. Out-of-range coordinates are ignored."""
        ...

    def show_cursor(self, x: int, y: int) -> None: ...

    def hide_cursor(self) -> None: ...


# ---------------------------------------------------------------------------
# In-memory implementation
# ---------------------------------------------------------------------------


@dataclass
class Cell:
    primary: str = " "
    combining: str = ""
    style: Style = DEFAULT_STYLE
    # Set on the cells covered by the right half of a wide character.
    continuation: bool = False

    @property
    def text(self) -> str:
        return "" if self.continuation else self.primary + self.combining


class CellBuffer:
    """In-memory ``Screen`` that records cell contents for inspection."""

    def __init__(self, width: int = 80, height: int = 24) -> None:
        self._width = width
        self._height = height
        self._cells: list[list[Cell]] = [[Cell() for _ in range(width)] for _ in range(height)]
        self.cursor: tuple[int, int] | None = None

    # -- Screen protocol -----------------------------------------------------

    def size(self) -> tuple[int, int]:
        return self._width, self._height

    def set_content(self, x: int, y: int, primary: str, combining: str, style: Style) -> None:
        if not (0 <= x < self._width and 0 <= y < self._height):
            return
        row = self._cells[y]
        row[x] = Cell(primary=primary, combining=combining, style=style)
        width = cluster_width(primary + combining)
        for i in range(1, width):
            if x + i < self._width:
                row[x + i] = Cell(primary="", style=style, continuation=True)

    def show_cursor(self, x: int, y: int) -> None:
        self.cursor = (x, y)

    def hide_cursor(self) -> None:
        self.cursor = None

    # -- Inspection ----------------------------------------------------------

    def clear(self) -> None:
        for row in self._cells:
            for x in range(self._width):
                row[x] = Cell()
        self.cursor = None

    def cell(self, x: int, y: int) -> Cell:
        return self._cells[y][x]

    def row_text(self, y: int) -> str:
        """Return the characters painted on row *y*."""
        return "".join(cell.text for cell in self._cells[y])

    def lines(self) -> list[str]:
        """Return every row with trailing blanks removed."""
        return [self.row_text(y).rstrip() for y in range(self._height)]

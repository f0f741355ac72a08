"""Incremental line layout.

Keeps a table of positions at which visual rows begin. The table is a
cache: it is extended lazily, only as far as a caller needs, and truncated
whenever an edit may have changed the rows after a given point.
"""

from __future__ import annotations

import bisect
import logging
from typing import Iterator, Literal

from tuikit.errors import StaleLayoutError
from tuikit.text.chain import PieceChain, Position
from tuikit.text.stepper import (
    LINE_CAN_BREAK,
    LINE_MUST_BREAK,
    SPACE,
    Cluster,
    GraphemeStepper,
)

logger = logging.getLogger(__name__)

WrapMode = Literal["none", "character", "word"]


class LineLayout:
    """Computes where visual rows start for a given width and wrap mode.

    Row ``i`` spans ``[line_starts[i], line_starts[i + 1])``; the last row
    runs to the end of the text once the table is complete.
    """

    def __init__(
        self,
        chain: PieceChain,
        width: int = 0,
        wrap: WrapMode = "word",
        tab_size: int = 4,
    ) -> None:
        self.chain = chain
        self.stepper = GraphemeStepper(chain, tab_size)
        self.width = width
        self.wrap: WrapMode = wrap
        self.line_starts: list[Position] = []
        self.widest_line = 0
        self.complete = False
        self.reset()

    # -- Configuration -------------------------------------------------------

    def reset(self) -> None:
        """Forget all rows."""
        self.line_starts = [self.chain.start()]
        self.widest_line = 0
        self.complete = False

    def configure(
        self,
        width: int | None = None,
        wrap: WrapMode | None = None,
        tab_size: int | None = None,
    ) -> bool:
        """Change layout parameters, resetting the table if any differ.

        Returns ``True`` if the table was reset.
        """
        changed = False
        if wrap is not None and wrap != self.wrap:
            self.wrap = wrap
            changed = True
        if tab_size is not None and tab_size != self.stepper.tab_size:
            self.stepper.tab_size = tab_size
            changed = True
        if width is not None and width != self.width:
            self.width = width
            # Without wrapping rows do not depend on the width.
            changed = changed or self.wrap != "none"
        if changed:
            logger.debug("Layout reset (width=%d, wrap=%s)", self.width, self.wrap)
            self.reset()
        return changed

    def set_chain(self, chain: PieceChain) -> None:
        self.chain = chain
        self.stepper.chain = chain
        self.reset()

    # -- Cache maintenance ---------------------------------------------------

    def truncate(self, index: int) -> int:
        """Drop rows that an edit at character *index* may have changed.

        Keeps the rows starting strictly before *index*, less one so that a
        preceding word-wrapped row can reflow. Returns the number of rows
        kept.
        """
        keep = bisect.bisect_left([p.index for p in self.line_starts], index)
        keep = max(1, keep - 1)
        if keep < len(self.line_starts):
            del self.line_starts[keep:]
        # An edit at the very start links a new first span.
        self.line_starts[0] = self.chain.start()
        self.complete = False
        return keep

    def extend_lines(self, through_line: int) -> None:
        """Lay out rows until row *through_line* is bounded or the text ends."""
        if self.complete or len(self.line_starts) > through_line + 1:
            return

        start = self.line_starts[-1]
        try:
            self.chain.validate(start)
        except IndexError as exc:
            raise StaleLayoutError(f"line start {start} is not on the chain") from exc
        if not self.chain.is_linked(start.span):
            raise StaleLayoutError(f"line start {start} lies in an unlinked span")

        wrap = self.wrap != "none"
        word_wrap = self.wrap == "word"
        width = self.width

        pending, pos, end = "", start, start
        line_width = 0
        trailing_space = 0
        last_option: Position | None = None
        last_option_width = 0
        last_option_space = 0

        while len(self.line_starts) <= through_line + 1:
            step = self.stepper.step(pending, pos, end)
            if step is None:
                self.widest_line = max(self.widest_line, line_width)
                self.complete = True
                return

            # In word-wrap mode whitespace hangs past the right edge.
            hangs = word_wrap and step.boundaries & SPACE
            if wrap and line_width > 0 and line_width + step.width > width and not hangs:
                if word_wrap and last_option is not None:
                    self._start_row(last_option, last_option_width - last_option_space)
                    line_width -= last_option_width
                else:
                    self._start_row(pos, line_width)
                    line_width = 0
                last_option = None

            if step.boundaries & LINE_MUST_BREAK:
                self._start_row(step.pos, line_width)
                line_width = 0
                trailing_space = 0
                last_option = None
            else:
                line_width += step.width
                trailing_space = trailing_space + step.width if step.boundaries & SPACE else 0
                if word_wrap and step.boundaries & LINE_CAN_BREAK:
                    last_option = step.pos
                    last_option_width = line_width
                    last_option_space = trailing_space

            pending, pos, end = step.remaining, step.pos, step.end

    def _start_row(self, pos: Position, previous_width: int) -> None:
        self.widest_line = max(self.widest_line, previous_width)
        self.line_starts.append(pos)

    # -- Queries -------------------------------------------------------------

    def line_count(self) -> int:
        """Return the number of rows, laying out the whole text if needed."""
        while not self.complete:
            self.extend_lines(len(self.line_starts) * 2)
        return len(self.line_starts)

    def has_row(self, row: int) -> bool:
        self.extend_lines(row)
        return 0 <= row < len(self.line_starts)

    def last_row(self, row: int) -> bool:
        """Return ``True`` if *row* is the final row of the text."""
        self.extend_lines(row)
        return self.complete and row == len(self.line_starts) - 1

    def row_end(self, row: int) -> Position | None:
        """Return the start of the row after *row*, or None for the last row."""
        self.extend_lines(row)
        if row + 1 < len(self.line_starts):
            return self.line_starts[row + 1]
        return None

    def row_of(self, index: int, hint: int = 0) -> int:
        """Return the row containing character *index*.

        Scans forward from row *hint*, extending the table as needed. A
        position that begins a row belongs to that row.
        """
        starts = self.line_starts
        hint = max(0, min(hint, len(starts) - 1))
        if starts[hint].index > index:
            hint = max(0, bisect.bisect_right([p.index for p in starts], index) - 1)
        row = hint
        while True:
            self.extend_lines(row)
            if row + 1 >= len(self.line_starts):
                return row
            if self.line_starts[row + 1].index > index:
                return row
            row += 1

    def row_clusters(self, row: int) -> Iterator[Cluster]:
        """Yield the clusters of *row*, including a trailing hard break."""
        if not self.has_row(row):
            return
        yield from self.stepper.clusters(self.line_starts[row], self.row_end(row))

    def row_text(self, row: int) -> str:
        """Return the painted text of *row*.

        Hard line breaks are removed, and in word-wrap mode so is the
        whitespace hanging at a soft break.
        """
        clusters = list(self.row_clusters(row))
        if clusters and clusters[-1].boundaries & LINE_MUST_BREAK:
            clusters.pop()
        elif self.wrap == "word" and self.row_end(row) is not None:
            while clusters and clusters[-1].boundaries & SPACE:
                clusters.pop()
        return "".join(c.text for c in clusters)

    def visual_lines(self) -> list[str]:
        return [self.row_text(row) for row in range(self.line_count())]

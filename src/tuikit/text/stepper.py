"""Grapheme-cluster iteration over a piece chain.

A cluster may straddle span boundaries, so the stepper keeps a small
look-ahead buffer composed from as many spans as needed and hands it to the
``grapheme`` segmenter. Every read of buffer content other than full
serialisation goes through here.
"""

from __future__ import annotations

from typing import Iterator, NamedTuple

import grapheme

from tuikit.text.chain import TAIL, PieceChain, Position
from tuikit.utils import (
    can_break_after,
    cluster_width,
    is_line_break,
    is_punctuation_char,
    is_whitespace_char,
)

# Upper bound on the look-ahead, in characters. Large enough for any
# realistic cluster (emoji ZWJ sequences, stacked combining marks) plus the
# first character of the one after it.
MAX_LOOKAHEAD = 32

# Boundary flags describing the cluster just stepped over.
LINE_MUST_BREAK = 1  # the cluster is a hard line break
LINE_CAN_BREAK = 2  # a soft wrap may follow this cluster
WORD = 4  # the cluster belongs to a word
SPACE = 8  # the cluster is whitespace (including line breaks)


class Step(NamedTuple):
    """Result of one ``GraphemeStepper.step`` call."""

    cluster: str
    remaining: str
    boundaries: int
    width: int
    pos: Position
    end: Position


class Cluster(NamedTuple):
    """A cluster yielded by ``GraphemeStepper.clusters``."""

    text: str
    width: int
    boundaries: int
    start: Position
    next: Position


def classify(cluster: str, following: str) -> int:
    """Return the boundary flags for *cluster* given the cluster after it."""
    flags = 0
    if is_line_break(cluster):
        flags |= LINE_MUST_BREAK | SPACE
    elif is_whitespace_char(cluster):
        flags |= SPACE
    elif not is_punctuation_char(cluster):
        flags |= WORD
    if can_break_after(cluster, following):
        flags |= LINE_CAN_BREAK
    return flags


class GraphemeStepper:
    """Walks a ``PieceChain`` one grapheme cluster at a time."""

    def __init__(self, chain: PieceChain, tab_size: int = 4) -> None:
        self.chain = chain
        self.tab_size = tab_size

    def _fill(self, pending: str, end: Position) -> tuple[str, Position]:
        chain = self.chain
        while len(pending) < MAX_LOOKAHEAD and end.span != TAIL:
            span = chain.span(end.span)
            take = min(span.size - end.offset, MAX_LOOKAHEAD - len(pending))
            pending += chain.span_text(end.span, end.offset, end.offset + take)
            if end.offset + take >= span.size:
                end = Position(span.next, 0, end.index + take)
            else:
                end = Position(end.span, end.offset + take, end.index + take)
        return pending, end

    def step(self, pending: str, pos: Position, end: Position) -> Step | None:
        """Step over the cluster at *pos*.

        *pending* is text already read starting at *pos*, and *end* is the
        position just after it (pass ``""`` and *pos* to start fresh).
        Returns None at the end of the text.
        """
        pending, end = self._fill(pending, end)
        if not pending:
            return None

        clusters = grapheme.graphemes(pending)
        cluster = next(clusters)
        following = next(clusters, "")
        rest = pending[len(cluster) :]

        return Step(
            cluster=cluster,
            remaining=rest,
            boundaries=classify(cluster, following),
            width=cluster_width(cluster, self.tab_size),
            pos=self.chain.advance(pos, len(cluster)),
            end=end,
        )

    def clusters(self, start: Position, stop: Position | None = None) -> Iterator[Cluster]:
        """Yield the clusters from *start* up to (excluding) *stop*."""
        self.chain.validate(start)
        limit = stop.index if stop is not None else None
        pending, pos, end = "", start, start
        while limit is None or pos.index < limit:
            step = self.step(pending, pos, end)
            if step is None:
                return
            yield Cluster(step.cluster, step.width, step.boundaries, pos, step.pos)
            pending, pos, end = step.remaining, step.pos, step.end

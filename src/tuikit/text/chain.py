"""Piece chain text buffer.

The document is an ordered chain of spans. Each span references a run of
characters in one of two backing stores: the immutable initial text or an
append-only edit buffer. Spans live in an arena (a plain list) and link to
each other by index, so nothing is ever freed: a deleted span is simply
unlinked, which also lets undo restore a previous chain by rewriting two
arena slots and re-walking the back-links between them.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, replace as _copy
from typing import Iterator, NamedTuple

from tuikit.errors import InvalidPositionError
from tuikit.undo_stack import UndoStack

logger = logging.getLogger(__name__)

HEAD = 0
TAIL = 1


@dataclass
class Span:
    """A run of text in one of the backing stores.

    A negative ``length`` references the initial text (the run is
    ``-length`` characters long), a non-negative one the edit buffer.
    ``previous`` and ``next`` are arena indices; -1 marks the chain ends.
    """

    previous: int
    next: int
    offset: int
    length: int

    @property
    def size(self) -> int:
        return abs(self.length)

    @property
    def initial(self) -> bool:
        return self.length < 0


class Position(NamedTuple):
    """A location in the chain.

    ``span`` is the arena index, ``offset`` the character offset within the
    span and ``index`` the absolute character offset in the document. The
    end of the text is always ``(TAIL, 0, length)``.
    """

    span: int
    offset: int
    index: int


@dataclass
class UndoEntry:
    """Snapshot of the spans bounding one replaced range.

    ``before``/``after`` are the live arena slots that were rewritten and
    ``before_copy``/``after_copy`` hold their contents prior to the edit.
    Undo and redo swap the two pairs.
    """

    before: int
    after: int
    before_copy: int
    after_copy: int
    length: int
    byte_length: int
    index: int
    cursor_before: int
    cursor_after: int
    inserted: int = -1
    continuation: bool = False


class UndoResult(NamedTuple):
    """Outcome of an undo or redo: the first affected index and the new cursor."""

    index: int
    cursor: int


def _utf8_size(text: str) -> int:
    return len(text.encode("utf-8", "surrogatepass"))


class PieceChain:
    """A piece table over an initial text and an append-only edit buffer."""

    def __init__(self, text: str = "", max_length: int = 0) -> None:
        self._initial: str = text
        self._edits: list[str] = []
        self._spans: list[Span] = [
            Span(previous=-1, next=TAIL, offset=0, length=0),
            Span(previous=HEAD, next=-1, offset=0, length=0),
        ]
        self._length: int = 0
        self._bytes: int = 0
        # Limit on the UTF-8 encoded size; 0 means unlimited.
        self.max_length: int = max_length
        self._history: UndoStack[UndoEntry] = UndoStack()

        if text:
            self._spans.append(Span(previous=HEAD, next=TAIL, offset=0, length=-len(text)))
            self._spans[HEAD].next = 2
            self._spans[TAIL].previous = 2
            self._length = len(text)
            self._bytes = _utf8_size(text)

    # -- Accessors -----------------------------------------------------------

    @property
    def length(self) -> int:
        return self._length

    @property
    def byte_length(self) -> int:
        """Size of the text in UTF-8 bytes, the unit ``max_length`` counts in."""
        return self._bytes

    def __len__(self) -> int:
        return self._length

    def span(self, index: int) -> Span:
        if not 0 <= index < len(self._spans):
            raise InvalidPositionError(f"span index {index} outside arena of {len(self._spans)}")
        return self._spans[index]

    def span_text(self, index: int, start: int = 0, end: int | None = None) -> str:
        """Return the text of span *index*, optionally sliced."""
        s = self.span(index)
        size = s.size
        if end is None or end > size:
            end = size
        if start >= end:
            return ""
        if s.initial:
            return self._initial[s.offset + start : s.offset + end]
        return "".join(self._edits[s.offset + start : s.offset + end])

    def iter_spans(self) -> Iterator[tuple[int, Span]]:
        """Yield ``(index, span)`` for every span between the sentinels."""
        index = self._spans[HEAD].next
        while index != TAIL:
            s = self._spans[index]
            yield index, s
            index = s.next

    def start(self) -> Position:
        return Position(self._spans[HEAD].next, 0, 0)

    def end(self) -> Position:
        return Position(TAIL, 0, self._length)

    def get_text(self) -> str:
        return "".join(self.span_text(index) for index, _ in self.iter_spans())

    def get_range(self, start: Position, end: Position) -> str:
        """Return the text in the half-open range ``[start, end)``."""
        if end.index <= start.index:
            return ""
        parts: list[str] = []
        index, offset = start.span, start.offset
        remaining = end.index - start.index
        while index != TAIL and remaining > 0:
            text = self.span_text(index, offset, offset + remaining)
            parts.append(text)
            remaining -= len(text)
            index, offset = self._spans[index].next, 0
        return "".join(parts)

    def position_at(self, index: int) -> Position:
        """Return the position of the absolute character *index* (clamped)."""
        if index <= 0:
            return self.start()
        if index >= self._length:
            return self.end()
        total = 0
        for span_index, s in self.iter_spans():
            if index < total + s.size:
                return Position(span_index, index - total, index)
            total += s.size
        return self.end()

    def validate(self, pos: Position) -> None:
        """Raise if *pos* does not name a valid place in the arena."""
        s = self.span(pos.span)
        if pos.offset < 0 or (pos.offset >= s.size and pos.span != TAIL):
            raise InvalidPositionError(f"offset {pos.offset} outside span {pos.span} of size {s.size}")

    def is_linked(self, index: int) -> bool:
        """Return ``True`` if span *index* is currently part of the chain."""
        if index == HEAD:
            return True
        previous = self.span(index).previous
        return 0 <= previous < len(self._spans) and self._spans[previous].next == index

    def advance(self, pos: Position, count: int) -> Position:
        """Return the position *count* characters after *pos*."""
        span_index, offset = pos.span, pos.offset + count
        while span_index != TAIL:
            size = self._spans[span_index].size
            if offset < size:
                break
            offset -= size
            span_index = self._spans[span_index].next
        if span_index == TAIL:
            return Position(TAIL, 0, min(pos.index + count, self._length))
        return Position(span_index, offset, pos.index + count)

    # -- Span operations -----------------------------------------------------

    def insert_span(self, text: str, before: int) -> int:
        """Append *text* to the edit buffer and link a new span before *before*."""
        s = Span(
            previous=self._spans[before].previous,
            next=before,
            offset=len(self._edits),
            length=len(text),
        )
        self._edits.extend(text)
        index = len(self._spans)
        self._spans.append(s)
        self._spans[s.previous].next = index
        self._spans[before].previous = index
        self._length += len(text)
        self._bytes += _utf8_size(text)
        return index

    def split_span(self, index: int, offset: int) -> int:
        """Split span *index* at *offset* and return the trailing span.

        Returns *index* unchanged if *offset* is not strictly inside the span.
        """
        if index <= TAIL or index >= len(self._spans):
            return index
        s = self._spans[index]
        size = s.size
        if offset <= 0 or offset >= size:
            return index
        sign = -1 if s.initial else 1
        trailing = Span(
            previous=index,
            next=s.next,
            offset=s.offset + offset,
            length=sign * (size - offset),
        )
        new_index = len(self._spans)
        self._spans.append(trailing)
        self._spans[s.next].previous = new_index
        s.next = new_index
        s.length = sign * offset
        return new_index

    def delete_span(self, index: int) -> int:
        """Unlink span *index* and return the index of the span after it."""
        if index <= TAIL or index >= len(self._spans):
            return index
        s = self._spans[index]
        self._spans[s.previous].next = s.next
        self._spans[s.next].previous = s.previous
        self._length -= s.size
        self._bytes -= _utf8_size(self.span_text(index))
        return s.next

    # -- Editing -------------------------------------------------------------

    def replace(
        self,
        delete_start: Position,
        delete_end: Position,
        insert_text: str,
        continuation: bool = False,
        cursor: int | None = None,
    ) -> Position | None:
        """Replace ``[delete_start, delete_end)`` with *insert_text*.

        Returns the position just after the inserted text, or None when the
        edit would exceed ``max_length`` (in which case nothing changes).
        With *continuation* set the edit joins the current undo group; a
        single append to the span created by that group's last entry grows
        the span in place instead of recording a new entry. *cursor* is the
        cursor index before the edit, restored on undo.
        """
        if delete_end.index < delete_start.index:
            delete_start, delete_end = delete_end, delete_start
        self.validate(delete_start)
        self.validate(delete_end)

        deleted = delete_end.index - delete_start.index
        deleted_bytes = _utf8_size(self.get_range(delete_start, delete_end))
        inserted_bytes = _utf8_size(insert_text)
        if self.max_length > 0 and self._bytes - deleted_bytes + inserted_bytes > self.max_length:
            logger.debug(
                "Rejected edit at %d: size would exceed %d bytes", delete_start.index, self.max_length
            )
            return None
        if not deleted and not insert_text:
            return delete_end
        if cursor is None:
            cursor = delete_end.index

        top = self._history.top()
        if top is None or self._history.can_redo:
            continuation = False

        if continuation and not deleted and top is not None and self._can_append(top, delete_start):
            span = self._spans[top.inserted]
            self._edits.extend(insert_text)
            span.length += len(insert_text)
            self._length += len(insert_text)
            self._bytes += inserted_bytes
            top.cursor_after = delete_start.index + len(insert_text)
            return Position(delete_start.span, delete_start.offset, delete_start.index + len(insert_text))

        # Split the boundary spans so the range covers whole spans.
        first = self.split_span(delete_start.span, delete_start.offset)
        end_span, end_offset = delete_end.span, delete_end.offset
        if end_span == delete_start.span and delete_start.offset > 0:
            end_span, end_offset = first, end_offset - delete_start.offset
        after = self.split_span(end_span, end_offset)
        before = self._spans[first].previous

        entry = UndoEntry(
            before=before,
            after=after,
            before_copy=len(self._spans),
            after_copy=len(self._spans) + 1,
            length=self._length,
            byte_length=self._bytes,
            index=delete_start.index,
            cursor_before=cursor,
            cursor_after=delete_start.index + len(insert_text),
            continuation=continuation,
        )
        self._spans.append(_copy(self._spans[before]))
        self._spans.append(_copy(self._spans[after]))

        # The covered spans are unlinked as a block; their own links stay
        # intact so that undo can put them back.
        self._spans[before].next = after
        self._spans[after].previous = before
        self._length -= deleted
        self._bytes -= deleted_bytes

        if insert_text:
            entry.inserted = self.insert_span(insert_text, after)

        self._history.push(entry)
        return Position(after, 0, delete_start.index + len(insert_text))

    def _can_append(self, top: UndoEntry, pos: Position) -> bool:
        if top.inserted < 0 or pos.offset != 0:
            return False
        span = self._spans[top.inserted]
        return (
            span.next == pos.span
            and self._spans[pos.span].previous == top.inserted
            and span.offset + span.length == len(self._edits)
        )

    # -- Undo / redo ---------------------------------------------------------

    def _swap(self, entry: UndoEntry) -> None:
        spans = self._spans
        spans[entry.before], spans[entry.before_copy] = spans[entry.before_copy], spans[entry.before]
        spans[entry.after], spans[entry.after_copy] = spans[entry.after_copy], spans[entry.after]
        self._length, entry.length = entry.length, self._length
        self._bytes, entry.byte_length = entry.byte_length, self._bytes
        self._relink(entry.before, entry.after)

    def _relink(self, before: int, after: int) -> None:
        """Rewrite the back-links from *before* through the span following *after*.

        Restoring the two boundary slots fixes the forward links only; spans
        in between, and the neighbour of a boundary split by a later edit,
        may still point back at spans that are no longer on the chain.
        """
        spans = self._spans
        index = before
        while index != TAIL:
            following = spans[index].next
            spans[following].previous = index
            if index == after:
                break
            index = following

    def undo(self) -> UndoResult | None:
        """Revert the most recent undo group."""
        group = self._history.undo()
        if not group:
            return None
        for entry in group:
            self._swap(entry)
        logger.debug("Undid %d edit(s), length now %d", len(group), self._length)
        return UndoResult(
            index=min(entry.index for entry in group),
            cursor=group[-1].cursor_before,
        )

    def redo(self) -> UndoResult | None:
        """Re-apply the most recently undone group."""
        group = self._history.redo()
        if not group:
            return None
        for entry in group:
            self._swap(entry)
        logger.debug("Redid %d edit(s), length now %d", len(group), self._length)
        return UndoResult(
            index=min(entry.index for entry in group),
            cursor=group[-1].cursor_after,
        )

    @property
    def can_undo(self) -> bool:
        return self._history.can_undo

    @property
    def can_redo(self) -> bool:
        return self._history.can_redo

    @property
    def undo_depth(self) -> int:
        """Number of entries (not groups) that can currently be undone."""
        return self._history.length

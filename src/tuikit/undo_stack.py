"""Undo/redo history with grouped (coalesced) entries."""

from __future__ import annotations

from typing import Generic, Protocol, TypeVar


class _Groupable(Protocol):
    continuation: bool


S = TypeVar("S", bound=_Groupable)


class UndoStack(Generic[S]):
    """Stores undo entries and the redo tail behind them.

    Entries whose ``continuation`` flag is set belong to the same group as
    the entry pushed before them; ``undo`` and ``redo`` always move a whole
    group. Pushing a new entry discards anything that was undone.
    """

    def __init__(self) -> None:
        self._stack: list[S] = []
        self._next: int = 0

    def push(self, entry: S) -> None:
        """Push an entry, discarding the redo tail."""
        del self._stack[self._next :]
        self._stack.append(entry)
        self._next = len(self._stack)

    def top(self) -> S | None:
        """Return the most recent entry that can be undone, or None."""
        return self._stack[self._next - 1] if self._next > 0 else None

    def undo(self) -> list[S]:
        """Return the entries of the most recent group, newest first."""
        group: list[S] = []
        while self._next > 0:
            self._next -= 1
            entry = self._stack[self._next]
            group.append(entry)
            if not entry.continuation:
                break
        return group

    def redo(self) -> list[S]:
        """Return the entries of the next undone group, oldest first."""
        group: list[S] = []
        while self._next < len(self._stack):
            entry = self._stack[self._next]
            if group and not entry.continuation:
                break
            group.append(entry)
            self._next += 1
        return group

    def clear(self) -> None:
        """Remove all entries."""
        self._stack.clear()
        self._next = 0

    @property
    def can_undo(self) -> bool:
        return self._next > 0

    @property
    def can_redo(self) -> bool:
        return self._next < len(self._stack)

    @property
    def length(self) -> int:
        return self._next

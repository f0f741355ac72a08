"""Clipboard used by the text area's copy, cut and paste actions."""

from __future__ import annotations

from typing import Protocol, runtime_checkable


@runtime_checkable
class Clipboard(Protocol):
    """Storage for copied text.

    Hosts that want the operating system clipboard supply their own
    implementation to the text area.
    """

    def copy(self, text: str) -> None: ...

    def paste(self) -> str: ...


class InternalClipboard:
    """A single in-process text slot."""

    def __init__(self) -> None:
        self._text: str = ""

    def copy(self, text: str) -> None:
        self._text = text

    def paste(self) -> str:
        return self._text

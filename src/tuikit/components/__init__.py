"""TUI components."""

from tuikit.components.text_area import (
    Cursor,
    TextArea,
    TextAreaListener,
    TextAreaOptions,
    TextAreaTheme,
    TextChange,
)

__all__ = [
    "Cursor",
    "TextArea",
    "TextAreaListener",
    "TextAreaOptions",
    "TextAreaTheme",
    "TextChange",
]

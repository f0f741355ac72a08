"""tuikit: terminal UI widgets built around a piece-chain text engine."""

# Clipboard
from tuikit.clipboard import Clipboard, InternalClipboard

# Components (re-exported from components package)
from tuikit.components import (
    Cursor,
    TextArea,
    TextAreaListener,
    TextAreaOptions,
    TextAreaTheme,
    TextChange,
)

# Errors
from tuikit.errors import InvalidPositionError, StaleLayoutError, TextBufferError

# Keybindings
from tuikit.keybindings import (
    DEFAULT_TEXT_AREA_KEYBINDINGS,
    TextAreaAction,
    TextAreaKeybindingsManager,
)

# Keyboard and mouse input handling
from tuikit.keys import Key, KeyId, MouseEvent, matches_key, parse_key, parse_mouse

# Render target
from tuikit.screen import CellBuffer, Rect, Screen, Style

# Text engine
from tuikit.text import GraphemeStepper, LineLayout, PieceChain, Position, WrapMode

# Undo
from tuikit.undo_stack import UndoStack

# Utilities
from tuikit.utils import cluster_width, visible_width

__all__ = [
    # Clipboard
    "Clipboard",
    "InternalClipboard",
    # Components
    "Cursor",
    "TextArea",
    "TextAreaListener",
    "TextAreaOptions",
    "TextAreaTheme",
    "TextChange",
    # Errors
    "InvalidPositionError",
    "StaleLayoutError",
    "TextBufferError",
    # Keybindings
    "DEFAULT_TEXT_AREA_KEYBINDINGS",
    "TextAreaAction",
    "TextAreaKeybindingsManager",
    # Keys
    "Key",
    "KeyId",
    "MouseEvent",
    "matches_key",
    "parse_key",
    "parse_mouse",
    # Render target
    "CellBuffer",
    "Rect",
    "Screen",
    "Style",
    # Text engine
    "GraphemeStepper",
    "LineLayout",
    "PieceChain",
    "Position",
    "WrapMode",
    # Undo
    "UndoStack",
    # Utilities
    "cluster_width",
    "visible_width",
]

"""Text engine: piece chain buffer, grapheme stepper and line layout."""

from tuikit.text.chain import HEAD, TAIL, PieceChain, Position, Span, UndoEntry, UndoResult
from tuikit.text.layout import LineLayout, WrapMode
from tuikit.text.stepper import (
    LINE_CAN_BREAK,
    LINE_MUST_BREAK,
    MAX_LOOKAHEAD,
    SPACE,
    WORD,
    Cluster,
    GraphemeStepper,
    Step,
)

__all__ = [
    "HEAD",
    "LINE_CAN_BREAK",
    "LINE_MUST_BREAK",
    "MAX_LOOKAHEAD",
    "SPACE",
    "TAIL",
    "WORD",
    "Cluster",
    "GraphemeStepper",
    "LineLayout",
    "PieceChain",
    "Position",
    "Span",
    "Step",
    "UndoEntry",
    "UndoResult",
    "WrapMode",
]

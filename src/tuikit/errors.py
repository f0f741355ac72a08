"""Exceptions raised when the text engine's internal contracts are broken.

Editing and navigation never raise for out-of-range input; they clamp.
These exceptions signal programming errors in the engine or its callers.
"""

from __future__ import annotations


class TextBufferError(Exception):
    """Base class for text engine contract violations."""


class InvalidPositionError(TextBufferError, IndexError):
    """A position names a span outside the arena or an offset past its end."""


class StaleLayoutError(TextBufferError, RuntimeError):
    """A cached line start no longer lies on the piece chain."""

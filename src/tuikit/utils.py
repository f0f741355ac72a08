"""Unicode text utilities: cluster widths and character classification.

Provides the terminal cell width of grapheme clusters and the small set of
character classes the text engine needs for word motions and line breaking.
"""

from __future__ import annotations

import re
import unicodedata

import grapheme
import wcwidth as _wcwidth

# ---------------------------------------------------------------------------
# Character classes
# ---------------------------------------------------------------------------

# Mandatory line breaks (a CR LF pair is a single grapheme cluster).
LINE_BREAKS = frozenset({"\n", "\r", "\r\n", "\v", "\f", "\x85", "\u2028", "\u2029"})

_WHITESPACE = frozenset({" ", "\t", "\n", "\r", "\r\n", "\f", "\v", "\u00a0", "\u3000"})

# Punctuation characters for word-break classification
_PUNCTUATION_REGEX = re.compile(r"[(){}\[\]<>.,;:'\"!?\+\-=*/\\|&%\^$#@~`]")

# A line may be broken after these when followed by a word character.
_HYPHENS = frozenset({"-", "\u2010", "\u2012", "\u2013", "\u2014", "/"})

# Closing punctuation that must not start a line.
_NO_BREAK_BEFORE = frozenset(
    ")]}>.,;:!?%、。，．：；？！"
    "」』）〕］｝〉》・…‥ー"
)

# ---------------------------------------------------------------------------
# Width cache (capped at 512 entries)
# ---------------------------------------------------------------------------

_width_cache: dict[str, int] = {}
_WIDTH_CACHE_MAX = 512


def _cache_width(key: str, value: int) -> int:
    if len(_width_cache) >= _WIDTH_CACHE_MAX:
        _width_cache.clear()
    _width_cache[key] = value
    return value


# ---------------------------------------------------------------------------
# Grapheme width
# ---------------------------------------------------------------------------


def _grapheme_width(g: str) -> int:
    """Return the terminal display width of a single grapheme cluster.

    Rules:
    1. Zero-width characters (control, combining marks, etc.) -> 0
    2. Emoji (multi-codepoint, contains VS16 U+FE0F, ZWJ sequences, etc.) -> 2
    3. Otherwise delegate to wcwidth for the first meaningful codepoint.
    """
    if not g:
        return 0

    # Single codepoint fast path
    if len(g) == 1:
        cp = ord(g)
        if cp < 0x20 or (0x7F <= cp <= 0x9F):
            return 0
        return max(_wcwidth.wcwidth(g), 0)

    for ch in g:
        cp = ord(ch)
        if cp == 0xFE0F:  # VS16
            return 2
        if cp == 0x200D:  # ZWJ
            return 2
        if 0x1F3FB <= cp <= 0x1F3FF:  # Skin tone modifiers
            return 2
        if 0x1F1E6 <= cp <= 0x1F1FF:  # Regional indicators
            return 2

    first_cp = ord(g[0])
    if first_cp < 0x20 or (0x7F <= first_cp <= 0x9F):
        return 0
    if first_cp >= 0x1F000:
        return 2

    cat = unicodedata.category(g[0])
    if cat.startswith("M") or cat == "Cf":
        return 0

    return max(_wcwidth.wcwidth(g[0]), 0)


def cluster_width(cluster: str, tab_size: int = 4) -> int:
    """Return the number of screen cells occupied by *cluster*.

    Line breaks occupy no cells. A tab occupies *tab_size* cells.
    """
    if not cluster or cluster in LINE_BREAKS:
        return 0
    if cluster == "\t":
        return tab_size
    if len(cluster) == 1 and " " <= cluster <= "~":
        return 1

    cached = _width_cache.get(cluster)
    if cached is not None:
        return cached
    return _cache_width(cluster, _grapheme_width(cluster))


def visible_width(text: str, tab_size: int = 4) -> int:
    """Calculate the number of screen cells *text* occupies on one row."""
    if not text:
        return 0
    if text.isascii() and text.isprintable():
        return len(text)
    return sum(cluster_width(g, tab_size) for g in grapheme.graphemes(text))


# ---------------------------------------------------------------------------
# Character classification
# ---------------------------------------------------------------------------


def is_line_break(cluster: str) -> bool:
    """Return ``True`` if *cluster* is a mandatory line break."""
    return cluster in LINE_BREAKS


def is_whitespace_char(char: str) -> bool:
    """Return ``True`` if *char* is a whitespace character."""
    return char in _WHITESPACE


def is_punctuation_char(char: str) -> bool:
    """Return ``True`` if *char* is a punctuation character."""
    if not char:
        return False
    if _PUNCTUATION_REGEX.match(char):
        return True
    return unicodedata.category(char[0]).startswith("P")


def is_word_char(char: str) -> bool:
    """Return ``True`` if *char* is part of a word (not space, not punctuation)."""
    return bool(char) and not is_whitespace_char(char) and not is_punctuation_char(char)


def is_wide_char(char: str) -> bool:
    """Return ``True`` for East Asian wide or fullwidth characters."""
    return bool(char) and unicodedata.east_asian_width(char[0]) in ("W", "F")


def can_break_after(cluster: str, following: str) -> bool:
    """Return ``True`` if a line may be broken between *cluster* and *following*.

    Implements the subset of the Unicode line breaking rules used for word
    wrapping: a break is allowed after a run of spaces, after a hyphen that
    is followed by a word character, and around ideographic (wide)
    characters unless the next character is closing punctuation.
    """
    if not following or is_line_break(cluster):
        return False
    if following in _NO_BREAK_BEFORE:
        return False
    if is_whitespace_char(cluster):
        return not is_whitespace_char(following)
    if cluster in _HYPHENS:
        return is_word_char(following)
    if is_wide_char(cluster) or is_wide_char(following):
        return not is_whitespace_char(following)
    return False

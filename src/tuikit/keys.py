"""Keyboard and mouse input decoding for terminal applications.

Turns raw terminal input into key identifiers such as ``"ctrl+a"``,
``"shift+left"`` or ``"alt+b"``, and SGR mouse reports into ``MouseEvent``
values. ``matches_key`` checks whether raw input corresponds to a named
key identifier.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Literal

# ---------------------------------------------------------------------------
# Type alias
# ---------------------------------------------------------------------------

KeyId = str

# ---------------------------------------------------------------------------
# Key helper object
# ---------------------------------------------------------------------------


class Key:
    """Named key constants and modifier combinators."""

    # Special keys
    escape = "escape"
    enter = "enter"
    tab = "tab"
    space = "space"
    backspace = "backspace"
    delete = "delete"
    insert = "insert"
    home = "home"
    end = "end"
    page_up = "pageUp"
    page_down = "pageDown"
    up = "up"
    down = "down"
    left = "left"
    right = "right"

    @staticmethod
    def ctrl(key: str) -> str:
        return f"ctrl+{key}"

    @staticmethod
    def shift(key: str) -> str:
        return f"shift+{key}"

    @staticmethod
    def alt(key: str) -> str:
        return f"alt+{key}"

    @staticmethod
    def ctrl_shift(key: str) -> str:
        return f"ctrl+shift+{key}"


# ---------------------------------------------------------------------------
# Constants
# ---------------------------------------------------------------------------

MODIFIERS: dict[str, int] = {
    "shift": 1,
    "alt": 2,
    "ctrl": 4,
}

# Canonical modifier order in key identifiers.
_MODIFIER_ORDER = ("ctrl", "shift", "alt")

LOCK_MASK = 64 + 128

BRACKETED_PASTE_START = "\x1b[200~"
BRACKETED_PASTE_END = "\x1b[201~"

# Unmodified escape sequences -> key names
LEGACY_KEY_SEQUENCES: dict[str, str] = {
    "\x1b[A": "up",
    "\x1b[B": "down",
    "\x1b[C": "right",
    "\x1b[D": "left",
    "\x1b[H": "home",
    "\x1b[F": "end",
    "\x1bOA": "up",
    "\x1bOB": "down",
    "\x1bOC": "right",
    "\x1bOD": "left",
    "\x1bOH": "home",
    "\x1bOF": "end",
    "\x1b[2~": "insert",
    "\x1b[3~": "delete",
    "\x1b[5~": "pageUp",
    "\x1b[6~": "pageDown",
    "\x1b[1~": "home",
    "\x1b[4~": "end",
    "\x1b[7~": "home",
    "\x1b[8~": "end",
    "\x1b[Z": "shift+tab",
}

# Final byte of ``CSI 1 ; <mod> <final>`` sequences.
_CSI_LETTER_KEYS: dict[str, str] = {
    "A": "up",
    "B": "down",
    "C": "right",
    "D": "left",
    "H": "home",
    "F": "end",
}

# Parameter of ``CSI <code> ; <mod> ~`` sequences.
_CSI_TILDE_KEYS: dict[int, str] = {
    1: "home",
    2: "insert",
    3: "delete",
    4: "end",
    5: "pageUp",
    6: "pageDown",
    7: "home",
    8: "end",
}

_CSI_LETTER_RE = re.compile(r"^\x1b\[1;(\d+)([A-DHF])$")
_CSI_TILDE_RE = re.compile(r"^\x1b\[(\d+);(\d+)~$")
_SGR_MOUSE_RE = re.compile(r"^\x1b\[<(\d+);(\d+);(\d+)([Mm])")

_NAMED_KEYS = (
    "escape",
    "enter",
    "tab",
    "space",
    "backspace",
    "delete",
    "insert",
    "home",
    "end",
    "pageUp",
    "pageDown",
    "up",
    "down",
    "left",
    "right",
)


# ---------------------------------------------------------------------------
# Key ID parsing
# ---------------------------------------------------------------------------


def parse_key_id(key_id: str) -> dict[str, object] | None:
    """Split a key identifier like ``"ctrl+shift+a"`` into its components.

    Returns a dict with:
    - ``modifiers``: int bitmask (shift=1, alt=2, ctrl=4)
    - ``key``: the base key string

    Returns ``None`` if the key_id is empty.
    """
    if not key_id:
        return None

    parts = key_id.split("+")
    modifier = 0
    key_parts: list[str] = []

    for part in parts:
        lower = part.lower()
        if lower in MODIFIERS and len(parts) > 1:
            modifier |= MODIFIERS[lower]
        else:
            key_parts.append(part)

    key = "+".join(key_parts) if key_parts else ""
    if not key:
        return None

    return {"modifiers": modifier, "key": key}


def _format_key(modifiers: int, key: str) -> str:
    prefix = "".join(f"{name}+" for name in _MODIFIER_ORDER if modifiers & MODIFIERS[name])
    return prefix + key


def normalize_key_id(key_id: str) -> str | None:
    """Return *key_id* with its modifiers in canonical order and a lowercase key."""
    parsed = parse_key_id(key_id)
    if parsed is None:
        return None
    key = str(parsed["key"])
    if len(key) > 1:
        # Named keys keep their camel case ("pageUp").
        key = next((k for k in _NAMED_KEYS if k.lower() == key.lower()), key.lower())
    else:
        key = key.lower()
    return _format_key(int(parsed["modifiers"]), key)  # type: ignore[arg-type]


# ---------------------------------------------------------------------------
# Raw control character helper
# ---------------------------------------------------------------------------


def raw_ctrl_char(key: str) -> str | None:
    """Return the control character for a key, or ``None`` if not applicable.

    For example, ``raw_ctrl_char("a")`` returns ``"\\x01"``.
    """
    if len(key) != 1:
        return None
    code = ord(key.lower())
    if ord("a") <= code <= ord("z"):
        return chr(code & 0x1F)
    ctrl_map: dict[str, str] = {
        "[": chr(27),
        "\\": chr(28),
        "]": chr(29),
        "^": chr(30),
        "_": chr(31),
        "@": chr(0),
        "?": chr(127),
    }
    return ctrl_map.get(key)


# ---------------------------------------------------------------------------
# parse_key: determine what key was pressed from raw input
# ---------------------------------------------------------------------------


def _modifier_param(value: str) -> int:
    return (int(value) - 1) & ~LOCK_MASK


def parse_key(data: str) -> str | None:  # noqa: C901
    """Parse raw terminal input and return the key identifier, or ``None``.

    The returned string uses the same format as ``matches_key`` expects:
    e.g. ``"a"``, ``"ctrl+a"``, ``"shift+left"``, ``"alt+b"``.
    """
    if not data:
        return None

    # --- Legacy escape sequences ---
    named = LEGACY_KEY_SEQUENCES.get(data)
    if named is not None:
        return named

    match = _CSI_LETTER_RE.match(data)
    if match:
        return _format_key(_modifier_param(match.group(1)), _CSI_LETTER_KEYS[match.group(2)])

    match = _CSI_TILDE_RE.match(data)
    if match:
        key = _CSI_TILDE_KEYS.get(int(match.group(1)))
        if key is None:
            return None
        return _format_key(_modifier_param(match.group(2)), key)

    # --- Simple single-byte keys ---
    if data == "\x1b":
        return "escape"
    if data == "\r" or data == "\n":
        return "enter"
    if data == "\t":
        return "tab"
    if data == " ":
        return "space"
    if data == "\x7f":
        return "backspace"
    if data == "\x00":
        return "ctrl+space"

    # --- Ctrl + letter (0x01 - 0x1a) ---
    if len(data) == 1 and 1 <= ord(data) <= 26:
        return "ctrl+" + chr(ord(data) + ord("a") - 1)
    if len(data) == 1 and 28 <= ord(data) <= 31:
        return "ctrl+" + "\\]^_"[ord(data) - 28]

    # --- Alt + key (ESC prefix) ---
    if len(data) == 2 and data[0] == "\x1b":
        ch = data[1]
        if ch == "\x1b":
            return "alt+escape"
        if ch == "\r" or ch == "\n":
            return "alt+enter"
        if ch == "\t":
            return "alt+tab"
        if ch == " ":
            return "alt+space"
        if ch == "\x7f" or ch == "\x08":
            return "alt+backspace"
        if 1 <= ord(ch) <= 26:
            return "ctrl+alt+" + chr(ord(ch) + ord("a") - 1)
        if ch.isupper():
            return "shift+alt+" + ch.lower()
        if ch.isprintable():
            return "alt+" + ch.lower()

    # --- Plain printable character ---
    if len(data) == 1 and data.isprintable():
        return data

    return None


def matches_key(data: str, key_id: str) -> bool:
    """Check whether raw terminal *data* is the key named by *key_id*."""
    parsed = parse_key(data)
    if parsed is None:
        return False
    expected = normalize_key_id(key_id)
    if expected is None:
        return False
    if parsed == expected:
        return True
    # An uppercase letter is also reported as shift+letter.
    return len(parsed) == 1 and parsed.isupper() and expected == "shift+" + parsed.lower()


def is_printable(data: str) -> bool:
    """Return ``True`` if *data* is plain text rather than a control sequence."""
    return bool(data) and not data.startswith("\x1b") and all(
        ch.isprintable() or ch == "\t" for ch in data
    )


# ---------------------------------------------------------------------------
# Mouse
# ---------------------------------------------------------------------------

MouseAction = Literal["press", "release", "drag", "move", "wheel_up", "wheel_down"]
MouseButton = Literal["left", "middle", "right", "none"]

_BUTTONS: dict[int, MouseButton] = {0: "left", 1: "middle", 2: "right", 3: "none"}


@dataclass(frozen=True)
class MouseEvent:
    """A decoded mouse report. Coordinates are zero-based screen cells."""

    x: int
    y: int
    action: MouseAction
    button: MouseButton = "left"
    shift: bool = False
    alt: bool = False
    ctrl: bool = False


def parse_mouse(data: str) -> tuple[MouseEvent, int] | None:
    """Decode an SGR mouse report (``ESC [ < b ; x ; y M|m``).

    Returns the event and the number of characters consumed, or ``None``
    if *data* does not start with a mouse report.
    """
    match = _SGR_MOUSE_RE.match(data)
    if not match:
        return None
    code = int(match.group(1))
    x = int(match.group(2)) - 1
    y = int(match.group(3)) - 1
    released = match.group(4) == "m"

    shift = bool(code & 4)
    alt = bool(code & 8)
    ctrl = bool(code & 16)
    button = _BUTTONS[code & 3]

    action: MouseAction
    if code & 64:
        action = "wheel_down" if code & 1 else "wheel_up"
        button = "none"
    elif code & 32:
        action = "move" if button == "none" else "drag"
    elif released:
        action = "release"
    else:
        action = "press"

    event = MouseEvent(x=x, y=y, action=action, button=button, shift=shift, alt=alt, ctrl=ctrl)
    return event, match.end()

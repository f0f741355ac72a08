"""Text area keybindings manager."""

from __future__ import annotations

from typing import Literal

from tuikit.keys import KeyId, matches_key

TextAreaAction = Literal[
    # Cursor movement
    "cursorUp",
    "cursorDown",
    "cursorLeft",
    "cursorRight",
    "cursorWordLeft",
    "cursorWordRight",
    "cursorLineStart",
    "cursorLineEnd",
    "pageUp",
    "pageDown",
    # Selection
    "selectUp",
    "selectDown",
    "selectLeft",
    "selectRight",
    "selectWordLeft",
    "selectWordRight",
    "selectLineStart",
    "selectLineEnd",
    "selectPageUp",
    "selectPageDown",
    "selectAll",
    # Scrolling
    "scrollUp",
    "scrollDown",
    "scrollLeft",
    "scrollRight",
    # Deletion
    "deleteCharBackward",
    "deleteCharForward",
    "deleteWordBackward",
    "deleteToLineEnd",
    "deleteLine",
    # Text input
    "newLine",
    "tab",
    # Clipboard
    "copy",
    "cut",
    "paste",
    # Undo
    "undo",
    "redo",
]

TextAreaKeybindingsConfig = dict[TextAreaAction, KeyId | list[KeyId]]

DEFAULT_TEXT_AREA_KEYBINDINGS: dict[TextAreaAction, KeyId | list[KeyId]] = {
    # Cursor movement
    "cursorUp": "up",
    "cursorDown": "down",
    "cursorLeft": "left",
    "cursorRight": "right",
    "cursorWordLeft": ["ctrl+left", "alt+b"],
    "cursorWordRight": ["ctrl+right", "alt+f"],
    "cursorLineStart": ["home", "ctrl+a"],
    "cursorLineEnd": ["end", "ctrl+e"],
    "pageUp": ["pageUp", "ctrl+b"],
    "pageDown": ["pageDown", "ctrl+f"],
    # Selection
    "selectUp": "shift+up",
    "selectDown": "shift+down",
    "selectLeft": "shift+left",
    "selectRight": "shift+right",
    "selectWordLeft": ["ctrl+shift+left", "shift+alt+b"],
    "selectWordRight": ["ctrl+shift+right", "shift+alt+f"],
    "selectLineStart": "shift+home",
    "selectLineEnd": "shift+end",
    "selectPageUp": "shift+pageUp",
    "selectPageDown": "shift+pageDown",
    "selectAll": "ctrl+l",
    # Scrolling
    "scrollUp": "alt+up",
    "scrollDown": "alt+down",
    "scrollLeft": "alt+left",
    "scrollRight": "alt+right",
    # Deletion
    "deleteCharBackward": ["backspace", "ctrl+h"],
    "deleteCharForward": ["delete", "ctrl+d"],
    "deleteWordBackward": ["ctrl+w", "alt+backspace"],
    "deleteToLineEnd": "ctrl+k",
    "deleteLine": "ctrl+u",
    # Text input
    "newLine": "enter",
    "tab": "tab",
    # Clipboard
    "copy": "ctrl+q",
    "cut": "ctrl+x",
    "paste": "ctrl+v",
    # Undo
    "undo": "ctrl+z",
    "redo": "ctrl+y",
}


class TextAreaKeybindingsManager:
    """Maps text area actions to the keys that trigger them."""

    def __init__(self, config: TextAreaKeybindingsConfig | None = None) -> None:
        self._action_to_keys: dict[TextAreaAction, list[KeyId]] = {}
        self._build_maps(config or {})

    def _build_maps(self, config: TextAreaKeybindingsConfig) -> None:
        self._action_to_keys.clear()

        # Start with defaults
        for action, keys in DEFAULT_TEXT_AREA_KEYBINDINGS.items():
            key_array = keys if isinstance(keys, list) else [keys]
            self._action_to_keys[action] = list(key_array)

        # Override with user config
        for action, keys in config.items():
            key_array = keys if isinstance(keys, list) else [keys]
            self._action_to_keys[action] = list(key_array)

    def matches(self, data: str, action: TextAreaAction) -> bool:
        """Check if input matches a specific action."""
        keys = self._action_to_keys.get(action)
        if not keys:
            return False
        return any(matches_key(data, key) for key in keys)

    def find_action(self, data: str) -> TextAreaAction | None:
        """Return the first action bound to the key in *data*, if any."""
        for action in self._action_to_keys:
            if self.matches(data, action):
                return action
        return None

    def get_keys(self, action: TextAreaAction) -> list[KeyId]:
        """Get keys bound to an action."""
        return self._action_to_keys.get(action, [])

    def set_config(self, config: TextAreaKeybindingsConfig) -> None:
        """Update configuration."""
        self._build_maps(config)


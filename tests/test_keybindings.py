"""Tests for tuikit.keybindings -- text area keybindings manager."""

from __future__ import annotations

import pytest

from tuikit.components.text_area import TextArea
from tuikit.keybindings import DEFAULT_TEXT_AREA_KEYBINDINGS, TextAreaKeybindingsManager


# ---------------------------------------------------------------------------
# DEFAULT_TEXT_AREA_KEYBINDINGS constant
# ---------------------------------------------------------------------------


class TestDefaultTextAreaKeybindings:
    """DEFAULT_TEXT_AREA_KEYBINDINGS has the expected shape and actions."""

    def test_has_cursor_movement_actions(self):
        for action in [
            "cursorUp", "cursorDown", "cursorLeft", "cursorRight",
            "cursorWordLeft", "cursorWordRight",
            "cursorLineStart", "cursorLineEnd",
            "pageUp", "pageDown",
        ]:
            assert action in DEFAULT_TEXT_AREA_KEYBINDINGS, f"Missing action: {action}"

    def test_has_selection_actions(self):
        for action in [
            "selectUp", "selectDown", "selectLeft", "selectRight",
            "selectWordLeft", "selectWordRight", "selectAll",
        ]:
            assert action in DEFAULT_TEXT_AREA_KEYBINDINGS, f"Missing action: {action}"

    def test_has_editing_actions(self):
        for action in [
            "deleteCharBackward", "deleteCharForward", "deleteWordBackward",
            "deleteToLineEnd", "deleteLine", "newLine", "tab",
        ]:
            assert action in DEFAULT_TEXT_AREA_KEYBINDINGS, f"Missing action: {action}"

    def test_has_clipboard_and_history(self):
        for action in ["copy", "cut", "paste", "undo", "redo"]:
            assert action in DEFAULT_TEXT_AREA_KEYBINDINGS, f"Missing action: {action}"

    def test_new_line_is_enter(self):
        assert DEFAULT_TEXT_AREA_KEYBINDINGS["newLine"] == "enter"

    def test_undo_and_redo(self):
        assert DEFAULT_TEXT_AREA_KEYBINDINGS["undo"] == "ctrl+z"
        assert DEFAULT_TEXT_AREA_KEYBINDINGS["redo"] == "ctrl+y"

    def test_no_key_is_bound_twice(self):
        seen: dict[str, str] = {}
        for action, keys in DEFAULT_TEXT_AREA_KEYBINDINGS.items():
            for key in keys if isinstance(keys, list) else [keys]:
                assert key not in seen, f"{key} bound to {seen.get(key)} and {action}"
                seen[key] = action


# ---------------------------------------------------------------------------
# TextAreaKeybindingsManager
# ---------------------------------------------------------------------------


class TestTextAreaKeybindingsManagerConstruction:
    """The manager loads defaults and applies overrides."""

    def test_default_construction(self):
        mgr = TextAreaKeybindingsManager()
        for action in DEFAULT_TEXT_AREA_KEYBINDINGS:
            assert len(mgr.get_keys(action)) > 0, f"Action {action} should have at least one key"

    def test_override(self):
        mgr = TextAreaKeybindingsManager(config={"newLine": "shift+enter"})
        assert mgr.get_keys("newLine") == ["shift+enter"]
        assert mgr.get_keys("cursorUp") == ["up"]

    def test_override_with_list(self):
        mgr = TextAreaKeybindingsManager(config={"undo": ["ctrl+z", "ctrl+_"]})
        assert mgr.get_keys("undo") == ["ctrl+z", "ctrl+_"]

    def test_unknown_action_returns_empty(self):
        mgr = TextAreaKeybindingsManager()
        assert mgr.get_keys("nonExistentAction") == []  # type: ignore[arg-type]


class TestTextAreaKeybindingsManagerMatches:
    """matches and find_action route raw input to actions."""

    @pytest.mark.parametrize(
        "data,action",
        [
            ("\x1b[A", "cursorUp"),
            ("\x1b[D", "cursorLeft"),
            ("\x1b[1;5D", "cursorWordLeft"),
            ("\x1bb", "cursorWordLeft"),
            ("\x1bf", "cursorWordRight"),
            ("\x01", "cursorLineStart"),
            ("\x1b[F", "cursorLineEnd"),
            ("\x1b[5~", "pageUp"),
            ("\x1b[1;2C", "selectRight"),
            ("\x1b[1;6D", "selectWordLeft"),
            ("\x1bB", "selectWordLeft"),
            ("\x0c", "selectAll"),
            ("\x1b[1;3A", "scrollUp"),
            ("\x7f", "deleteCharBackward"),
            ("\x08", "deleteCharBackward"),
            ("\x1b[3~", "deleteCharForward"),
            ("\x17", "deleteWordBackward"),
            ("\x1b\x7f", "deleteWordBackward"),
            ("\x0b", "deleteToLineEnd"),
            ("\x15", "deleteLine"),
            ("\r", "newLine"),
            ("\t", "tab"),
            ("\x11", "copy"),
            ("\x18", "cut"),
            ("\x16", "paste"),
            ("\x1a", "undo"),
            ("\x19", "redo"),
        ],
    )
    def test_default_bindings(self, data, action):
        mgr = TextAreaKeybindingsManager()
        assert mgr.matches(data, action) is True
        assert mgr.find_action(data) == action

    def test_plain_text_has_no_action(self):
        mgr = TextAreaKeybindingsManager()
        assert mgr.find_action("a") is None
        assert mgr.find_action(" ") is None

    def test_unknown_action_does_not_match(self):
        mgr = TextAreaKeybindingsManager()
        assert mgr.matches("\r", "nonExistentAction") is False  # type: ignore[arg-type]

    def test_matches_after_override(self):
        mgr = TextAreaKeybindingsManager(config={"newLine": "ctrl+j"})
        assert mgr.matches("\r", "newLine") is False

    def test_set_config(self):
        mgr = TextAreaKeybindingsManager()
        mgr.set_config({"copy": "ctrl+c"})
        assert mgr.matches("\x03", "copy") is True
        assert mgr.matches("\x11", "copy") is False
        assert mgr.matches("\x1b[A", "cursorUp") is True


# ---------------------------------------------------------------------------
# Text area wiring
# ---------------------------------------------------------------------------


class TestTextAreaKeybindings:
    """Each text area routes input through its own manager."""

    def test_default_manager_per_instance(self):
        first = TextArea()
        second = TextArea()
        first.handle_input("a")
        first.handle_input("\x1a")
        second.handle_input("b")
        assert first.get_text() == ""
        assert second.get_text() == "b"

    def test_text_area_uses_given_bindings(self):
        area = TextArea(keybindings=TextAreaKeybindingsManager(config={"undo": "ctrl+g"}))
        area.handle_input("a")
        area.handle_input("\x1a")
        assert area.get_text() == "a"
        area.handle_input("\x07")
        assert area.get_text() == ""

    def test_bindings_are_not_shared(self):
        custom = TextArea(keybindings=TextAreaKeybindingsManager(config={"undo": "ctrl+g"}))
        plain = TextArea()
        custom.handle_input("x")
        plain.handle_input("x")
        plain.handle_input("\x07")
        assert plain.get_text() == "x"

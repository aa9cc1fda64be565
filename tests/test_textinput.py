import pytest

from packwiz_tui.layout import strip_escapes
from packwiz_tui.textinput import TextInput


def focused(**kwargs):
    field = TextInput(**kwargs)
    field.focus()
    return field


def type_text(field, text):
    for ch in text:
        field.handle_key(ch)


def test_typing_builds_value():
    field = focused()
    type_text(field, "jei")
    assert field.value == "jei"
    assert field.cursor == len("jei")


def test_unfocused_ignores_keys():
    field = TextInput()
    assert field.handle_key("a") is False
    assert field.value == ""


def test_blur_stops_input():
    field = focused()
    type_text(field, "ab")
    field.blur()
    assert field.handle_key("c") is False
    assert field.value == "ab"


def test_char_limit_enforced():
    field = focused(char_limit=4)
    type_text(field, "abcdefg")
    assert field.value == "abcd"


def test_backspace_removes_before_cursor():
    field = focused()
    type_text(field, "abc")
    field.handle_key("backspace")
    assert field.value == "ab"


def test_insert_at_cursor():
    field = focused()
    type_text(field, "ac")
    field.handle_key("left")
    field.handle_key("b")
    assert field.value == "abc"


def test_home_and_end():
    field = focused()
    type_text(field, "bc")
    field.handle_key("home")
    field.handle_key("a")
    field.handle_key("end")
    field.handle_key("d")
    assert field.value == "abcd"


def test_delete_removes_under_cursor():
    field = focused()
    type_text(field, "abc")
    field.handle_key("home")
    field.handle_key("delete")
    assert field.value == "bc"


def test_ctrl_u_clears_to_start():
    field = focused()
    type_text(field, "hello")
    field.handle_key("left")
    field.handle_key("left")
    field.handle_key("ctrl+u")
    assert field.value == "lo"
    assert field.cursor == 0


def test_ctrl_w_deletes_previous_word():
    field = focused()
    type_text(field, "foo bar")
    field.handle_key("ctrl+w")
    assert field.value == "foo "


def test_space_key_inserts_space():
    field = focused()
    type_text(field, "a")
    field.handle_key("space")
    type_text(field, "b")
    assert field.value == "a b"


@pytest.mark.parametrize("key", ["f5", "ctrl+x", "tab", "esc"])
def test_unknown_keys_not_consumed(key):
    field = focused()
    assert field.handle_key(key) is False
    assert field.value == ""


def test_reset_value_clamps_cursor():
    field = focused()
    type_text(field, "abc")
    field.value = ""
    field.handle_key("x")
    assert field.value == "x"


def test_view_shows_placeholder_when_empty():
    field = TextInput(placeholder="e.g. jei")
    assert strip_escapes(field.view()) == "> e.g. jei"


def test_focused_placeholder_keeps_text():
    field = focused(placeholder="search mods…")
    assert strip_escapes(field.view()) == field.prompt + "search mods…"


def test_view_shows_value_with_prompt():
    field = focused(placeholder="unused")
    type_text(field, "jei")
    shown = strip_escapes(field.view())
    assert shown.startswith(field.prompt)
    assert "jei" in shown
    assert "unused" not in shown


def test_view_scrolls_to_cursor():
    field = focused(width=5)
    type_text(field, "abcdefghij")
    shown = strip_escapes(field.view())[len(field.prompt):]
    assert len(shown) <= field.width
    assert "j" in shown
    assert "a" not in shown


def test_unfocused_view_plain_text():
    field = TextInput()
    field.value = "hello"
    assert field.view() == field.prompt + "hello"
import pytest
from blessed.keyboard import Keystroke

from packwiz_tui.cli import decode_mouse, key_name, main
from packwiz_tui.tasks import MouseReleased


def test_decode_left_release_is_zero_based():
    assert decode_mouse("\x1b[<0;10;5m") == MouseReleased(x=9, y=4)


def test_decode_origin_cell():
    assert decode_mouse("\x1b[<0;1;1m") == MouseReleased(x=0, y=0)


@pytest.mark.parametrize(
    "sequence",
    [
        "\x1b[<0;10;5M",  # press, not release
        "\x1b[<2;10;5m",  # right button
        "\x1b[<1;10;5m",  # middle button
        "\x1b[<32;10;5m",  # motion
        "\x1b[<64;10;5M",  # wheel
        "\x1b[A",
        "",
        "\x1b[<0;10m",
    ],
)
def test_decode_ignores_other_reports(sequence):
    assert decode_mouse(sequence) is None


@pytest.mark.parametrize(
    "text, expected",
    [
        ("\x03", "ctrl+c"),
        ("\r", "enter"),
        ("\n", "enter"),
        ("\x1b", "esc"),
        ("\x7f", "backspace"),
        ("q", "q"),
        ("/", "/"),
        (" ", " "),
        ("1", "1"),
    ],
)
def test_key_name_plain_text(text, expected):
    assert key_name(text) == expected


@pytest.mark.parametrize(
    "seq, name, expected",
    [
        ("\x1b[A", "KEY_UP", "up"),
        ("\x1b[B", "KEY_DOWN", "down"),
        ("\x1b[D", "KEY_LEFT", "left"),
        ("\x1b[C", "KEY_RIGHT", "right"),
        ("\x1b[3~", "KEY_DELETE", "delete"),
    ],
)
def test_key_name_sequences(seq, name, expected):
    assert key_name(Keystroke(seq, code=300, name=name)) == expected


def test_key_name_enter_keystroke():
    assert key_name(Keystroke("\r", code=343, name="KEY_ENTER")) == "enter"


def test_key_name_unknown_sequence_uses_lowercase_name():
    assert key_name(Keystroke("\x1bOP", code=265, name="KEY_F1")) == "f1"


def test_key_name_control_letter():
    assert key_name("\x07") == "ctrl+g"


def test_key_name_empty_is_none():
    assert key_name(Keystroke("")) is None


def test_main_rejects_unknown_option():
    with pytest.raises(SystemExit) as info:
        main(["--no-such-option"])
    assert info.value.code == 2


def test_main_without_terminal_fails(capsys):
    assert main([]) == 1
    assert "Error" in capsys.readouterr().err
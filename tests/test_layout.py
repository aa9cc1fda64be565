import pytest

from packwiz_tui.layout import (
    Align,
    Style,
    join_horizontal,
    join_vertical,
    place,
    strip_escapes,
    text_height,
    visible_width,
)


def test_strip_escapes_recovers_text():
    rendered = Style(bold=True, foreground="#ff6b2b").render("hi")
    assert strip_escapes(rendered) == "hi"
    assert "\x1b[" in rendered


def test_plain_style_renders_unchanged():
    assert Style().render("plain") == "plain"


def test_foreground_uses_truecolor():
    assert "38;2;255;0;0" in Style(foreground="#ff0000").render("x")


def test_invalid_colour_rejected():
    with pytest.raises(ValueError):
        Style(foreground="orange")


def test_invalid_border_rejected():
    with pytest.raises(ValueError):
        Style(border="wavy")


def test_visible_width_ignores_escapes():
    assert visible_width(Style(bold=True).render("日本")) == visible_width("日本")
    assert visible_width("日本") == 2 * visible_width("日")


def test_text_height_counts_lines():
    lines = ["a", "b", "c", "d"]
    assert text_height("\n".join(lines)) == len(lines)


def test_padding_surrounds_text():
    assert strip_escapes(Style(padding=(0, 1)).render("x")) == " x "


def test_width_pads_lines():
    rendered = Style().with_size(width=10).render("ab\nabcd")
    for line in rendered.split("\n"):
        assert visible_width(line) == 10


def test_height_adds_blank_lines():
    rendered = Style().with_size(height=5).render("ab")
    assert text_height(rendered) == 5


def test_with_size_keeps_other_fields():
    base = Style(bold=True, width=3)
    sized = base.with_size(height=4)
    assert sized.bold is True
    assert sized.width == 3
    assert sized.height == 4


def test_border_wraps_content():
    content = "one\ntwo\nthree"
    rendered = Style(border="rounded", border_foreground="#2a3045").render(content)
    lines = rendered.split("\n")
    assert len(lines) == text_height(content) + 2
    widths = {visible_width(line) for line in lines}
    assert len(widths) == 1
    assert widths.pop() == visible_width(content) + 2
    assert strip_escapes(lines[0])[0] == "╭"


def test_join_vertical_pads_to_widest():
    joined = join_vertical(Align.LEFT, "a", "abcdef", "abc")
    lines = joined.split("\n")
    assert len(lines) == 3
    assert all(visible_width(line) == visible_width("abcdef") for line in lines)
    assert lines[0].startswith("a")


def test_join_vertical_center_balances():
    lines = join_vertical(Align.CENTER, "ab", "abcdef").split("\n")
    lead = len(lines[0]) - len(lines[0].lstrip(" "))
    trail = len(lines[0]) - len(lines[0].rstrip(" "))
    assert lead == trail


def test_join_horizontal_combines_blocks():
    left, right = "a\nb\nc", "xy"
    joined = join_horizontal(Align.TOP, left, right)
    lines = joined.split("\n")
    assert len(lines) == text_height(left)
    assert lines[0] == "a" + right
    assert all(visible_width(line) == visible_width(left) + visible_width(right) for line in lines)


def test_join_horizontal_bottom_alignment():
    lines = join_horizontal(Align.BOTTOM, "a\nb", "z").split("\n")
    assert lines[-1].endswith("z")
    assert lines[0].strip() == "a"


def test_place_fills_area():
    placed = place(20, 7, Align.CENTER, Align.CENTER, "hello\nworld")
    lines = placed.split("\n")
    assert len(lines) == 7
    assert all(visible_width(line) == 20 for line in lines)
    assert any("hello" in line for line in lines)


def test_place_center_odd_gap():
    assert place(5, 1, Align.CENTER, Align.TOP, "ab") == " ab  "


def test_place_top_keeps_content_first():
    placed = place(10, 4, Align.LEFT, Align.TOP, "hi")
    assert placed.split("\n")[0].startswith("hi")


def test_place_does_not_shrink_wide_content():
    content = "abcdefghij"
    assert place(4, 1, Align.CENTER, Align.CENTER, content) == content
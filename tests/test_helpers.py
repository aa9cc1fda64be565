import pytest

from packwiz_tui.helpers import ELLIPSIS, clamp, truncate, visible_window


def test_truncate_keeps_short_text():
    assert truncate("hello", 10) == "hello"


def test_truncate_keeps_exact_length():
    assert truncate("hello", 5) == "hello"


def test_truncate_cuts_with_ellipsis():
    result = truncate("abcdefgh", 5)
    assert len(result) == 5
    assert result.endswith(ELLIPSIS)
    assert "abcdefgh".startswith(result[:-1])


def test_truncate_counts_characters_not_bytes():
    result = truncate("ééééééé", 3)
    assert len(result) == 3
    assert result[:2] == "éé"


def test_truncate_rejects_nonpositive_limit():
    with pytest.raises(ValueError):
        truncate("abc", 0)


@pytest.mark.parametrize(
    "n, lo, hi, expected",
    [(5, 0, 10, 5), (-1, 0, 10, 0), (11, 0, 10, 10), (0, 0, 10, 0), (10, 0, 10, 10)],
)
def test_clamp(n, lo, hi, expected):
    assert clamp(n, lo, hi) == expected


def test_clamp_lower_bound_wins_when_below():
    assert clamp(70, 40, 20) == 20
    assert clamp(10, 40, 20) == 40


def test_visible_window_short_list_shows_all():
    assert visible_window(2, 5, 10) == (0, 5)


@pytest.mark.parametrize("total", [11, 20, 50])
@pytest.mark.parametrize("height", [4, 7, 10])
def test_visible_window_invariants(total, height):
    for selected in range(total):
        start, end = visible_window(selected, total, height)
        assert end - start == height
        assert 0 <= start <= selected < end <= total


def test_visible_window_at_end_sticks_to_bottom():
    start, end = visible_window(49, 50, 10)
    assert end == 50
    assert start == 40
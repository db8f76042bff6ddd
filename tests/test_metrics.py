"""Tests for sheetfit.metrics — character weights, line counting, text height."""
import pytest

from sheetfit.errors import OutOfRangeFontSize
from sheetfit.metrics import (
    char_weight,
    line_count,
    line_count_from_height,
    max_chars_per_line,
    text_height_pixels,
)


# ── Character classes ─────────────────────────────────────────────────────────

@pytest.mark.parametrize("ch", ['"', "'", ".", ","])
def test_zero_weight_punctuation(ch):
    assert char_weight(ch) == 0.0


@pytest.mark.parametrize("ch", ["l", "i", "j"])
def test_narrow_letters(ch):
    assert char_weight(ch) == 0.25


@pytest.mark.parametrize("ch", list("(){}[]!ftI"))
def test_third_width_class(ch):
    assert char_weight(ch) == 0.3333


@pytest.mark.parametrize("ch", list(" -_*07az"))
def test_half_width_class(ch):
    assert char_weight(ch) == 0.5


@pytest.mark.parametrize("ch", list("AQZ"))
def test_uppercase_class(ch):
    assert char_weight(ch) == 0.8


@pytest.mark.parametrize("ch", ["가", "é", "٣", "#", "@", "漢"])
def test_everything_else_is_full_width(ch):
    assert char_weight(ch) == 1.0


# ── Line counting ─────────────────────────────────────────────────────────────

def test_empty_text_has_no_lines():
    assert line_count("", 10) == 0


def test_newlines_alone_are_blank_lines():
    assert line_count("\n", 10) == 1
    assert line_count("\n\n", 10) == 2
    assert line_count("\r", 10) == 1
    assert line_count("\r\n", 10) == 2


def test_exact_capacity_is_one_line():
    assert line_count("abcdefgh", 4) == 1        # 8 * 0.5 == 4


def test_exceeding_capacity_by_any_amount_wraps():
    assert line_count("abcdefghi", 4) == 2       # 4.5
    assert line_count("abcdefghl", 4) == 2       # 4.25


def test_zero_weight_tail_does_not_add_a_line():
    assert line_count("abcdefgh.", 4) == 1


def test_trailing_newline_is_not_counted_twice():
    assert line_count("ab\n", 10) == 1
    assert line_count("abcdefgh\n", 4) == 1


def test_newline_separated_runs():
    assert line_count("ab\ncd", 10) == 2
    assert line_count("ab\n\ncd", 10) == 3
    assert line_count("\nab", 10) == 2


def test_runs_wrap_independently():
    # 6 + 6 weight with capacity 4: 2 lines each
    assert line_count("가나다라마바\n가나다라마바", 4) == 4


def test_only_zero_weight_characters():
    assert line_count("...", 4) == 0
    assert line_count("..\n", 4) == 1


# ── Capacity and height ───────────────────────────────────────────────────────

def test_max_chars_per_line_uses_point_size_as_pixels():
    assert max_chars_per_line(200, 10) == 15     # 200 // 13
    assert max_chars_per_line(56, 10) == 4


def test_max_chars_per_line_never_zero():
    assert max_chars_per_line(5, 10) == 1
    assert max_chars_per_line(0, 10) == 1


def test_text_height_pixels():
    assert text_height_pixels("", 56, 10) == 0
    assert text_height_pixels("abc", 56, 10) == 18
    assert text_height_pixels("abc\n\n\n", 56, 10) == 54
    assert text_height_pixels("abcdefghi", 56, 10) == 36


def test_text_height_uses_cell_font_line_height():
    assert text_height_pixels("abc", 200, 14) == 27
    assert text_height_pixels("abc", 200, 5) == 12


def test_text_height_out_of_range_font():
    with pytest.raises(OutOfRangeFontSize):
        text_height_pixels("abc", 200, 30)


def test_line_count_from_height():
    assert line_count_from_height(0, 10) == 0
    assert line_count_from_height(30, 10) == 2
    assert line_count_from_height(36, 10) == 2
    assert line_count_from_height(37, 10) == 3

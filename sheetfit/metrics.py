"""
sheetfit/metrics.py — Heuristic line-count and text-height estimation.

No glyph metrics are available, so each character contributes a fixed
weight (fraction of one average character) according to its class:

  0.0     quote, apostrophe, period, comma
  0.25    l i j
  0.3333  ( ) { } [ ] ! f t I
  0.5     space - _ * 0-9 a-z
  0.8     A-Z
  1.0     everything else (all non-ASCII, e.g. Hangul)

'\\n' and '\\r' are line separators, not weighted characters.

A cell line holds `max_chars_per_line` weight units, where that capacity is
floor(column px / font size in px). Font size in px is the point→pixel ratio
applied to the point size itself, not the width table used for columns.
"""
from __future__ import annotations

import math
from typing import Dict

from .fonts import character_height_pixels
from .units import points_to_pixels


NEWLINES = ("\n", "\r")

_WEIGHTS: Dict[str, float] = {}
for _ch in "\"'.,":
    _WEIGHTS[_ch] = 0.0
for _ch in "lij":
    _WEIGHTS[_ch] = 0.25
for _ch in "(){}[]!ftI":
    _WEIGHTS[_ch] = 0.3333
for _ch in " -_*0123456789abcdefghijklmnopqrstuvwxyz":
    _WEIGHTS.setdefault(_ch, 0.5)
for _ch in "ABCDEFGHIJKLMNOPQRSTUVWXYZ":
    _WEIGHTS.setdefault(_ch, 0.8)
del _ch

DEFAULT_WEIGHT = 1.0


def char_weight(ch: str) -> float:
    return _WEIGHTS.get(ch, DEFAULT_WEIGHT)


def max_chars_per_line(column_width_pixels: int, font_points: float) -> int:
    """Line capacity in weight units. Never below 1."""
    font_pixels = points_to_pixels(font_points)
    if font_pixels <= 0:
        return 1
    return max(1, column_width_pixels // font_pixels)


def line_count(text: str, max_chars: float) -> int:
    """
    Count the visual lines `text` occupies when wrapped at `max_chars`.

    A newline closes the pending run as ceil(run / max_chars) lines, or counts
    one blank line when nothing is pending. The end-of-string flush only runs
    when the last character was not a newline, so a trailing newline is
    never counted twice.
    """
    total = 0
    pending = 0.0
    last = len(text) - 1

    for i, ch in enumerate(text):
        if ch in NEWLINES:
            if pending > 0:
                total += math.ceil(pending / max_chars)
                pending = 0.0
            else:
                total += 1
            continue

        pending += char_weight(ch)

        if i == last:
            total += math.ceil(pending / max_chars)

    return total


def text_height_pixels(text: str, column_width_pixels: int, font_points: float) -> int:
    capacity = max_chars_per_line(column_width_pixels, font_points)
    return line_count(text, capacity) * character_height_pixels(font_points)


def line_count_from_height(height_pixels: int, font_points: float) -> int:
    """Number of text lines needed to cover `height_pixels`."""
    return math.ceil(height_pixels / character_height_pixels(font_points))

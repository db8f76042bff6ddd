"""
sheetfit/fonts.py — Static per-point-size character metrics.

Pixel width and line height of one average character of the base font,
measured at 96 DPI for sizes 5pt..21pt. There is no interpolation: a size
outside the table raises OutOfRangeFontSize.

Lookups truncate fractional sizes (10.9pt reads the 10pt entry).
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Dict

from .errors import out_of_range_font_size


BASE_FONT_NAME = "Malgun Gothic"
BASE_FONT_POINTS = 10

MIN_FONT_POINTS = 5
MAX_FONT_POINTS = 21


@dataclass(frozen=True)
class FontMetricsEntry:
    point_size: int
    pixel_width: int
    pixel_height: int


#              pt: (width px, height px)
_RAW_METRICS = {
    5:  (4, 12),
    6:  (4, 13),
    7:  (5, 13),
    8:  (6, 16),
    9:  (7, 16),
    10: (7, 18),
    11: (8, 22),
    12: (9, 23),
    13: (9, 26),
    14: (10, 27),
    15: (11, 32),
    16: (12, 35),
    17: (13, 35),
    18: (13, 35),
    19: (14, 40),
    20: (15, 42),
    21: (15, 42),
}

FONT_METRICS: Dict[int, FontMetricsEntry] = {
    pt: FontMetricsEntry(pt, w, h) for pt, (w, h) in _RAW_METRICS.items()
}


def font_metrics(points: float) -> FontMetricsEntry:
    entry = FONT_METRICS.get(int(points))
    if entry is None:
        raise out_of_range_font_size(points, MIN_FONT_POINTS, MAX_FONT_POINTS)
    return entry


def character_width_pixels(points: float) -> int:
    return font_metrics(points).pixel_width


def character_height_pixels(points: float) -> int:
    """Line height in pixels for one line of text at this size."""
    return font_metrics(points).pixel_height


def base_character_width_pixels() -> int:
    return character_width_pixels(BASE_FONT_POINTS)

"""
sheetfit/units.py — Conversions between points, pixels and the two native
spreadsheet units (96 DPI).

  points  ↔ pixels      1pt = 4/3px; pixel results truncate toward zero.
  pixels  → column      px / baseCharWidth * 256, truncated.
  column  → pixels      native * baseCharWidth // 256 (integer math).
  chars   → column      round((chars * cw + 5) / cw * 256), half-up; the 5px
                        is the cell padding the engine adds on display.
  points  → row         points * 20.
  pixels  → row         int(px * 0.75) * 20; truncation happens on the
                        intermediate points value, not on the final result.

Column math always uses the 10pt base font, never the cell's own font.
All functions are pure; only a font-table miss can raise.
"""
from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Type, TypeVar, Union

from openpyxl.utils.units import pixels_to_EMU

from .fonts import base_character_width_pixels


POINTS_PER_PIXEL = 0.75
COLUMN_WIDTH_UNIT = 256
ROW_HEIGHT_UNIT = 20
COLUMN_PADDING_PIXELS = 5.0


def pixels_to_points(pixels: int) -> float:
    return POINTS_PER_PIXEL * pixels


def points_to_pixels(points: float) -> int:
    return int(points / POINTS_PER_PIXEL)


def pixels_to_column_width(pixels: int) -> int:
    """Pixels → native column width (1/256 of a base character)."""
    return int(pixels / base_character_width_pixels() * COLUMN_WIDTH_UNIT)


def column_width_to_native(characters: float) -> int:
    """Excel character width (as typed in the UI) → native column width."""
    cw = base_character_width_pixels()
    return math.floor((characters * cw + COLUMN_PADDING_PIXELS) / cw * COLUMN_WIDTH_UNIT + 0.5)


def column_width_to_pixels(native: int) -> int:
    return int(native) * base_character_width_pixels() // COLUMN_WIDTH_UNIT


def points_to_row_height(points: int) -> int:
    return int(points) * ROW_HEIGHT_UNIT


def pixels_to_row_height(pixels: int) -> int:
    points = int(pixels_to_points(pixels))
    return points_to_row_height(points)


def row_height_to_points(native: int) -> float:
    return native / ROW_HEIGHT_UNIT


def row_height_to_pixels(native: int) -> int:
    return points_to_pixels(row_height_to_points(native))


def pixels_to_emu(pixels: int) -> int:
    """Whole pixels to EMU (9525 per pixel) for drawing anchors."""
    return pixels_to_EMU(int(pixels))


# ── Tagged dimensions ────────────────────────────────────────────────────────

@dataclass(frozen=True)
class Points:
    value: float


@dataclass(frozen=True)
class Pixels:
    value: int


@dataclass(frozen=True)
class ColumnUnits:
    value: int


@dataclass(frozen=True)
class RowUnits:
    value: int


Dimension = Union[Points, Pixels, ColumnUnits, RowUnits]
D = TypeVar("D", Points, Pixels, ColumnUnits, RowUnits)


def _to_pixels(dim: Dimension) -> Pixels:
    if isinstance(dim, Pixels):
        return dim
    if isinstance(dim, Points):
        return Pixels(points_to_pixels(dim.value))
    if isinstance(dim, ColumnUnits):
        return Pixels(column_width_to_pixels(dim.value))
    if isinstance(dim, RowUnits):
        return Pixels(row_height_to_pixels(dim.value))
    raise TypeError(f"Not a dimension: {dim!r}")


def convert(dim: Dimension, target: Type[D]) -> D:
    """
    Explicit conversion between tagged dimensions.

    Points ↔ RowUnits convert directly (no pixel round-trip); every other
    pair goes through pixels with the truncation rules above. Column and row
    units are never converted into one another.
    """
    if isinstance(dim, target):
        return dim
    if {type(dim), target} == {ColumnUnits, RowUnits}:
        raise TypeError("Column and row units cannot be converted into each other")
    if isinstance(dim, Points) and target is RowUnits:
        return RowUnits(points_to_row_height(dim.value))
    if isinstance(dim, RowUnits) and target is Points:
        return Points(row_height_to_points(dim.value))

    px = _to_pixels(dim).value
    if target is Pixels:
        return Pixels(px)
    if target is Points:
        return Points(pixels_to_points(px))
    if target is ColumnUnits:
        return ColumnUnits(pixels_to_column_width(px))
    if target is RowUnits:
        return RowUnits(pixels_to_row_height(px))
    raise TypeError(f"Unsupported target unit: {target!r}")

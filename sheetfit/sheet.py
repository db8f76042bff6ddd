"""
sheetfit/sheet.py — Sheet-level dimensions and cell selection.

Column widths and row heights are held in native units, exactly as the
engine stores them, and pixel values are always derived from those native
values. A row height written in pixels therefore reads back through the
points truncation (18px -> 13pt -> 17px); the cell engine compares against
that read-back value.

Defaults: 8 characters per column, 15 points per row.
"""
from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Dict, Tuple

from .cell import CellLayout
from .parsing import parse_cell_ref
from .units import (
    COLUMN_WIDTH_UNIT,
    column_width_to_native,
    column_width_to_pixels,
    pixels_to_column_width,
    pixels_to_points,
    pixels_to_row_height,
    points_to_pixels,
    points_to_row_height,
    row_height_to_pixels,
)

if TYPE_CHECKING:
    from .document import LayoutDocument

logger = logging.getLogger(__name__)


DEFAULT_COLUMN_CHARACTERS = 8
DEFAULT_ROW_POINTS = 15.0


class SheetLayout:
    def __init__(self, document: "LayoutDocument") -> None:
        self.document = document
        self._model = document.model
        self.handle = self._model.create_sheet()
        self._column_widths: Dict[int, int] = {}
        self._row_heights: Dict[int, int] = {}
        self._default_column_characters = DEFAULT_COLUMN_CHARACTERS
        self._default_row_points = DEFAULT_ROW_POINTS
        self._cells: Dict[Tuple[int, int], CellLayout] = {}

    # ---------- Name ----------

    @property
    def name(self) -> str:
        return self._model.sheet_name(self.handle)

    def set_name(self, name: str) -> "SheetLayout":
        self.document.ensure_open()
        self._model.set_sheet_name(self.handle, name)
        return self

    # ---------- Defaults ----------

    def set_default_column_width(self, characters: int) -> "SheetLayout":
        self.document.ensure_open()
        self._default_column_characters = int(characters)
        self._model.set_default_column_width(self.handle, self._default_column_characters)
        return self

    def set_default_column_width_in_pixels(self, pixels: int) -> "SheetLayout":
        return self.set_default_column_width(pixels_to_column_width(pixels) // COLUMN_WIDTH_UNIT)

    def set_default_row_height_in_points(self, points: float) -> "SheetLayout":
        self.document.ensure_open()
        self._default_row_points = float(points)
        self._model.set_default_row_height(self.handle, self._default_row_points)
        return self

    def set_default_row_height_in_pixels(self, pixels: int) -> "SheetLayout":
        return self.set_default_row_height_in_points(pixels_to_points(pixels))

    # ---------- Columns ----------

    def _set_column_native(self, col: int, native: int) -> "SheetLayout":
        self.document.ensure_open()
        self._column_widths[col] = native
        self._model.set_column_width(self.handle, col, native)
        return self

    def set_column_width(self, col: int, characters: float) -> "SheetLayout":
        """Width in Excel character units, as typed in the column-width dialog."""
        return self._set_column_native(col, column_width_to_native(characters))

    def set_column_width_in_pixels(self, col: int, pixels: int) -> "SheetLayout":
        return self._set_column_native(col, pixels_to_column_width(pixels))

    def column_width_native(self, col: int) -> int:
        native = self._column_widths.get(col)
        if native is None:
            return self._default_column_characters * COLUMN_WIDTH_UNIT
        return native

    def column_width_pixels(self, col: int) -> int:
        return column_width_to_pixels(self.column_width_native(col))

    # ---------- Rows ----------

    def _set_row_native(self, row: int, native: int) -> "SheetLayout":
        self.document.ensure_open()
        self._row_heights[row] = native
        self._model.set_row_height(self.handle, row, native)
        return self

    def set_row_height_in_points(self, row: int, points: int) -> "SheetLayout":
        return self._set_row_native(row, points_to_row_height(points))

    def set_row_height_in_pixels(self, row: int, pixels: int) -> "SheetLayout":
        return self._set_row_native(row, pixels_to_row_height(pixels))

    def row_height_pixels(self, row: int) -> int:
        native = self._row_heights.get(row)
        if native is None:
            return points_to_pixels(self._default_row_points)
        return row_height_to_pixels(native)

    def grow_row(self, row: int, pixels: int) -> bool:
        """
        Raise the row to `pixels` when it is currently shorter; never lower it.
        Returns True when the row was written.
        """
        current = self.row_height_pixels(row)
        if current >= pixels:
            return False
        self.set_row_height_in_pixels(row, pixels)
        logger.debug("Row %d grown %dpx -> %dpx (reads back %dpx)", row, current, pixels, self.row_height_pixels(row))
        return True

    # ---------- Cells ----------

    def select_cell(self, row: int, col: int) -> CellLayout:
        self.document.ensure_open()
        key = (row, col)
        cell = self._cells.get(key)
        if cell is None:
            cell = CellLayout(self, row, col)
            self._cells[key] = cell
        return cell

    def select_ref(self, ref: str) -> CellLayout:
        row, col = parse_cell_ref(ref)
        return self.select_cell(row, col)

    def merge(self, r1: int, r2: int, c1: int, c2: int) -> "SheetLayout":
        self.document.ensure_open()
        self._model.merge_range(self.handle, r1, r2, c1, c2)
        return self

    def merge_refs(self, start: str, end: str) -> "SheetLayout":
        r1, c1 = parse_cell_ref(start)
        r2, c2 = parse_cell_ref(end)
        return self.merge(r1, r2, c1, c2)

    def merge_and_select(self, r1: int, r2: int, c1: int, c2: int) -> CellLayout:
        """Merge the range and return the layout of its top-left cell."""
        self.merge(r1, r2, c1, c2)
        return self.select_cell(r1, c1)

    def finish(self) -> "LayoutDocument":
        return self.document

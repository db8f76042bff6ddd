"""
sheetfit/cell.py — Per-cell layout engine.

A CellLayout accumulates content in order: text, images and file icons are
appended below whatever the cell already holds. Each append

  1. estimates the height of the cumulative text (sheetfit.metrics),
  2. grows the row when the estimate exceeds it (rows never shrink),
  3. for media, pads the text with newlines so the text's own height covers
     the drawing, and anchors the drawing at the pixel height the text had
     before the append.

The stored text is never wrapped; wrapping exists only in the estimate.
Appends observe every prior append to the same cell, so calls are strictly
order-dependent. Mutators return the cell for chaining.
"""
from __future__ import annotations

import logging
from dataclasses import replace
from typing import TYPE_CHECKING, Callable, List, Optional, Tuple, Union

from .metrics import NEWLINES, line_count_from_height, text_height_pixels
from .models import (
    MOVE_DONT_RESIZE,
    AnchorRect,
    CellLayoutState,
    CellStyle,
    FileResource,
    ImageResource,
    PlacedResource,
    Position,
    ResourceKind,
    RGB,
)
from .parsing import format_cell_ref

if TYPE_CHECKING:
    from .sheet import SheetLayout

logger = logging.getLogger(__name__)


def is_at_line_start(text: str) -> bool:
    """
    True when new content would start on a fresh line: the text is empty, or
    ends with two identical newline characters ("\\n\\n" or "\\r\\r").
    A "\\n\\r" or "\\r\\n" tail does not count.
    """
    if text == "":
        return True
    return len(text) >= 2 and text[-1] in NEWLINES and text[-1] == text[-2]


def fit_to_width(width: int, height: int, max_width: int) -> Tuple[int, int]:
    """
    Scale (width, height) so the longer side equals `max_width`, keeping the
    aspect ratio. Sizes already smaller than `max_width` on both sides are
    returned unchanged (never upscaled).
    """
    if width < max_width and height < max_width:
        return width, height
    scale = max_width / (width if width > height else height)
    return int(width * scale), int(height * scale)


class CellLayout:
    def __init__(self, sheet: "SheetLayout", row: int, col: int) -> None:
        self.sheet = sheet
        self.row = row
        self.col = col
        self._document = sheet.document
        self._model = sheet.document.model
        self._text = ""
        self._placed: List[PlacedResource] = []

        settings = self._document.settings
        self.style = CellStyle(
            font_name=settings.base_font_name,
            font_points=settings.base_font_points,
        )

        self._model.get_or_create_row(sheet.handle, row)
        self.handle = self._model.create_cell(sheet.handle, row, col)
        self._model.set_cell_style(self.handle, self.style)

    # ---------- State ----------

    @property
    def ref(self) -> str:
        """A1-style reference of this cell."""
        return format_cell_ref(self.row, self.col)

    @property
    def text(self) -> str:
        return self._text

    @property
    def font_points(self) -> float:
        return self.style.font_points

    @property
    def column_width_pixels(self) -> int:
        return self.sheet.column_width_pixels(self.col)

    @property
    def row_height_pixels(self) -> int:
        return self.sheet.row_height_pixels(self.row)

    @property
    def placed(self) -> Tuple[PlacedResource, ...]:
        return tuple(self._placed)

    def state(self) -> CellLayoutState:
        return CellLayoutState(
            row=self.row,
            col=self.col,
            current_text=self._text,
            current_row_height_pixels=self.row_height_pixels,
            column_width_pixels=self.column_width_pixels,
            font_point_size=self.font_points,
            placed=tuple(self._placed),
        )

    def text_height_pixels(self, text: str) -> int:
        return text_height_pixels(text, self.column_width_pixels, self.font_points)

    def _set_text(self, text: str) -> None:
        self._text = text
        self._model.set_cell_text(self.handle, text)

    # ---------- Appends ----------

    def append_text(self, text: Optional[str]) -> "CellLayout":
        self._document.ensure_open()
        if not text:
            return self
        full = self._text + text
        height = self.text_height_pixels(full)
        self._set_text(full)
        self.sheet.grow_row(self.row, height)
        return self

    def append_image(self, image: ImageResource, padding: Optional[int] = None) -> "CellLayout":
        """
        Append an image below the current content.

        The image never exceeds the column width nor its own size; its longer
        side is scaled to the column width when either side reaches it.
        """
        width, height = fit_to_width(image.width, image.height, self.column_width_pixels)
        return self._append_media(width, height, padding, lambda pos: self.place_image(image, pos))

    def append_file(self, file: FileResource, padding: Optional[int] = None) -> "CellLayout":
        """Append an embedded file, shown as a square icon (30px by default)."""
        size = self._document.settings.file_icon_size
        return self._append_media(size, size, padding, lambda pos: self.place_file(file, pos))

    def _append_media(
        self,
        width: int,
        height: int,
        padding: Optional[int],
        place: Callable[[Position], None],
    ) -> "CellLayout":
        self._document.ensure_open()
        if padding is None:
            padding = self._document.settings.default_padding

        text = self._text
        top = self.text_height_pixels(text)

        # One newline closes the current line, the rest are blank lines
        # reserved for the drawing. Empty text already counts as one line.
        blank_lines = line_count_from_height(height, self.font_points)
        newlines = blank_lines + (0 if is_at_line_start(text) else 1)
        padded = text + "\n" * newlines
        bottom = self.text_height_pixels(padded)

        # Raises InvalidPosition before anything is mutated.
        position = Position(padding, top + padding, width - padding, top + height - padding)

        self.sheet.grow_row(self.row, bottom)
        place(position)
        self._set_text(padded)
        return self

    # ---------- Explicit placement ----------

    def place_image(self, image: ImageResource, position: Position) -> "CellLayout":
        self._document.ensure_open()
        asset = self._document.images.resolve(image.key, ResourceKind.IMAGE, image.payload, image.format)
        anchor = AnchorRect(self.row, self.col, position)
        self._model.place_drawing(self.sheet.handle, self.handle, asset, anchor.to_native(), MOVE_DONT_RESIZE)
        self._placed.append(PlacedResource(image.key, ResourceKind.IMAGE, anchor))
        logger.debug("Image %r placed in %s at %s", image.key, self.ref, position)
        return self

    def place_file(self, file: FileResource, position: Position) -> "CellLayout":
        self._document.ensure_open()
        package = self._document.files.resolve(file.key, ResourceKind.FILE, file.payload, file.format)
        icon = self._document.icon_handle(file.format)
        anchor = AnchorRect(self.row, self.col, position)
        drawing = self._model.place_drawing(
            self.sheet.handle,
            self.handle,
            package,
            anchor.to_native(),
            MOVE_DONT_RESIZE,
            icon=icon,
        )
        self._model.force_icon_display(drawing)
        self._placed.append(PlacedResource(file.key, ResourceKind.FILE, anchor))
        logger.debug("File %r placed in %s at %s", file.key, self.ref, position)
        return self

    def image_keys(self):
        return self._document.image_keys()

    # ---------- Dimensions ----------

    def set_width(self, characters: float) -> "CellLayout":
        self.sheet.set_column_width(self.col, characters)
        return self

    def set_width_in_pixels(self, pixels: int) -> "CellLayout":
        self.sheet.set_column_width_in_pixels(self.col, pixels)
        return self

    def set_height_in_points(self, points: int) -> "CellLayout":
        self.sheet.set_row_height_in_points(self.row, points)
        return self

    def set_height_in_pixels(self, pixels: int) -> "CellLayout":
        self.sheet.set_row_height_in_pixels(self.row, pixels)
        return self

    # ---------- Style pass-through ----------

    def _restyle(self, **changes) -> "CellLayout":
        self._document.ensure_open()
        style = replace(self.style, **changes)
        self._model.set_cell_style(self.handle, style)
        self.style = style
        return self

    def set_cell_style(self, style: CellStyle) -> "CellLayout":
        self._document.ensure_open()
        self._model.set_cell_style(self.handle, style)
        self.style = style
        return self

    def set_font_points(self, points: float) -> "CellLayout":
        # Not validated here; an unsupported size fails on the next append.
        return self._restyle(font_points=points)

    def set_bold(self, bold: bool = True) -> "CellLayout":
        return self._restyle(bold=bold)

    def set_font_color(self, r: int, g: int, b: int) -> "CellLayout":
        return self._restyle(font_color=(r, g, b))

    def set_cell_color(self, r: int, g: int, b: int) -> "CellLayout":
        return self._restyle(fill_color=(r, g, b))

    def set_horizontal_alignment(self, alignment: str) -> "CellLayout":
        return self._restyle(horizontal=alignment)

    def set_vertical_alignment(self, alignment: str) -> "CellLayout":
        return self._restyle(vertical=alignment)

    def set_data_format(self, number_format: Union[str, int]) -> "CellLayout":
        """Format code such as "#,##0", or a built-in format index (49 is text)."""
        return self._restyle(number_format=number_format)

    def set_border_style(self, style: str, edges: Tuple[str, ...] = ("top", "bottom", "left", "right")) -> "CellLayout":
        borders = replace(self.style.borders, **{edge: style for edge in edges})
        return self._restyle(borders=borders)

    def set_border_color(self, r: int, g: int, b: int, edges: Tuple[str, ...] = ("top", "bottom", "left", "right")) -> "CellLayout":
        color: RGB = (r, g, b)
        borders = replace(self.style.borders, **{f"{edge}_color": color for edge in edges})
        return self._restyle(borders=borders)

    def set_top_border_style(self, style: str) -> "CellLayout":
        return self.set_border_style(style, ("top",))

    def set_bottom_border_style(self, style: str) -> "CellLayout":
        return self.set_border_style(style, ("bottom",))

    def set_left_border_style(self, style: str) -> "CellLayout":
        return self.set_border_style(style, ("left",))

    def set_right_border_style(self, style: str) -> "CellLayout":
        return self.set_border_style(style, ("right",))

    # ---------- Navigation ----------

    def finish(self) -> "SheetLayout":
        return self.sheet

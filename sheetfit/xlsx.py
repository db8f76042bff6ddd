"""
sheetfit/xlsx.py — openpyxl-backed Document Model.

Row/column indices arriving here are 0-based; openpyxl's are 1-based, so
every call shifts by one. Native units are converted back to openpyxl's
own: column width in characters (native / 256), row height in points
(native / 20).

Embedded files: openpyxl cannot write OLE object parts, so file payloads are
NOT written to the saved workbook. Only the file's icon picture is drawn at
the anchor. The payload stays available in memory in `embedded_objects`,
one entry per registered package with every placement of it, until close().
Registering a package logs a WARNING. force_icon_display() does nothing,
because the drawn picture already is the icon.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass, field
from io import BytesIO
from typing import Dict, List, Optional, Tuple

from openpyxl import Workbook
from openpyxl.cell.cell import Cell
from openpyxl.drawing.image import Image as XLImage
from openpyxl.drawing.spreadsheet_drawing import AnchorMarker, TwoCellAnchor
from openpyxl.styles import Alignment, Border, Font, PatternFill, Side
from openpyxl.styles.numbers import BUILTIN_FORMATS
from openpyxl.utils import get_column_letter
from openpyxl.worksheet.worksheet import Worksheet

from .errors import BAD_NUMBER_FORMAT, AppError
from .models import (
    AnchorMode,
    CellStyle,
    ImageFormat,
    NativeAnchor,
    RGB,
    rgb_to_hex,
)
from .units import COLUMN_WIDTH_UNIT, ROW_HEIGHT_UNIT

logger = logging.getLogger(__name__)


_EDIT_AS = {
    "move_and_resize": "twoCell",
    "move_dont_resize": "oneCell",
    "absolute": "absolute",
}


@dataclass
class _Asset:
    kind: str                       # "image" | "object"
    payload: bytes
    name: str = ""
    fmt: Optional[ImageFormat] = None


@dataclass
class EmbeddedObject:
    name: str
    payload: bytes
    placements: List[Tuple[str, NativeAnchor]] = field(default_factory=list)   # (sheet title, anchor)


@dataclass
class Drawing:
    image: XLImage
    asset: int
    icon: Optional[int] = None


class OpenpyxlDocument:
    """Document Model over an in-memory openpyxl Workbook."""

    def __init__(self, workbook: Optional[Workbook] = None) -> None:
        self.workbook = workbook if workbook is not None else Workbook()
        self._fresh_default: Optional[Worksheet] = self.workbook.active
        self._assets: List[_Asset] = []
        self._drawings: List[Tuple[Drawing, bytes]] = []
        self.embedded_objects: Dict[int, EmbeddedObject] = {}

    # ---------- Sheets, rows, cells ----------

    def create_sheet(self) -> Worksheet:
        # Hand out the workbook's initial blank sheet before creating more.
        if self._fresh_default is not None:
            ws, self._fresh_default = self._fresh_default, None
            return ws
        return self.workbook.create_sheet()

    def set_sheet_name(self, sheet: Worksheet, name: str) -> None:
        sheet.title = name

    def sheet_name(self, sheet: Worksheet) -> str:
        return sheet.title

    def create_cell(self, sheet: Worksheet, row: int, col: int) -> Cell:
        return sheet.cell(row=row + 1, column=col + 1)

    def get_or_create_row(self, sheet: Worksheet, row: int):
        return sheet.row_dimensions[row + 1]

    def set_cell_text(self, cell: Cell, text: str) -> None:
        cell.value = text
        if text.startswith("="):
            cell.data_type = "s"    # literal text, not a formula

    def set_cell_style(self, cell: Cell, style: CellStyle) -> None:
        cell.font = Font(
            name=style.font_name,
            size=style.font_points,
            bold=style.bold,
            color=_color(style.font_color),
        )
        cell.alignment = Alignment(
            horizontal=style.horizontal,
            vertical=style.vertical,
            wrap_text=style.wrap_text,
        )
        if style.fill_color is not None:
            hex_color = rgb_to_hex(style.fill_color)
            cell.fill = PatternFill(fill_type="solid", fgColor=hex_color, bgColor=hex_color)
        b = style.borders
        cell.border = Border(
            top=Side(style=b.top, color=_color(b.top_color)),
            bottom=Side(style=b.bottom, color=_color(b.bottom_color)),
            left=Side(style=b.left, color=_color(b.left_color)),
            right=Side(style=b.right, color=_color(b.right_color)),
        )
        if isinstance(style.number_format, int):
            if style.number_format not in BUILTIN_FORMATS:
                raise AppError(
                    BAD_NUMBER_FORMAT,
                    f"No built-in number format with index {style.number_format}",
                    {"index": style.number_format},
                )
            cell.number_format = BUILTIN_FORMATS[style.number_format]
        elif style.number_format:
            cell.number_format = style.number_format

    def merge_range(self, sheet: Worksheet, r1: int, r2: int, c1: int, c2: int) -> None:
        sheet.merge_cells(
            start_row=r1 + 1,
            end_row=r2 + 1,
            start_column=c1 + 1,
            end_column=c2 + 1,
        )

    # ---------- Dimensions ----------

    def set_column_width(self, sheet: Worksheet, col: int, native_width: int) -> None:
        sheet.column_dimensions[get_column_letter(col + 1)].width = native_width / COLUMN_WIDTH_UNIT

    def set_row_height(self, sheet: Worksheet, row: int, native_height: int) -> None:
        sheet.row_dimensions[row + 1].height = native_height / ROW_HEIGHT_UNIT

    def set_default_column_width(self, sheet: Worksheet, characters: int) -> None:
        sheet.sheet_format.defaultColWidth = characters

    def set_default_row_height(self, sheet: Worksheet, points: float) -> None:
        sheet.sheet_format.defaultRowHeight = points
        sheet.sheet_format.customHeight = True

    # ---------- Assets & drawings ----------

    def register_binary_asset(self, payload: bytes, fmt: ImageFormat) -> int:
        self._assets.append(_Asset(kind="image", payload=payload, fmt=fmt))
        return len(self._assets) - 1

    def register_object_package(self, payload: bytes, display_name: str) -> int:
        self._assets.append(_Asset(kind="object", payload=payload, name=display_name))
        handle = len(self._assets) - 1
        self.embedded_objects[handle] = EmbeddedObject(name=display_name, payload=payload)
        logger.warning(
            "Embedded file %r (%d bytes) is drawn as an icon only; openpyxl cannot save its payload",
            display_name,
            len(payload),
        )
        return handle

    def asset_count(self) -> int:
        return len(self._assets)

    def place_drawing(
        self,
        sheet: Worksheet,
        cell: Cell,
        asset: int,
        anchor: NativeAnchor,
        anchor_mode: AnchorMode = "move_dont_resize",
        icon: Optional[int] = None,
    ) -> Drawing:
        source = self._assets[asset]
        if icon is None:
            picture_bytes = source.payload
        else:
            picture_bytes = self._assets[icon].payload
            self.embedded_objects[asset].placements.append((sheet.title, anchor))

        image = XLImage(BytesIO(picture_bytes))
        image.anchor = TwoCellAnchor(
            editAs=_EDIT_AS[anchor_mode],
            _from=AnchorMarker(col=anchor.col1, colOff=anchor.dx1, row=anchor.row1, rowOff=anchor.dy1),
            to=AnchorMarker(col=anchor.col2, colOff=anchor.dx2, row=anchor.row2, rowOff=anchor.dy2),
        )
        sheet.add_image(image)

        drawing = Drawing(image=image, asset=asset, icon=icon)
        self._drawings.append((drawing, picture_bytes))
        logger.debug("Placed asset %d at %s on %r", asset, cell.coordinate, sheet.title)
        return drawing

    def force_icon_display(self, drawing: Drawing) -> None:
        """No-op: file drawings are always the icon picture, never a content preview."""

    # ---------- Output ----------

    def serialize(self) -> bytes:
        # openpyxl closes each image stream while saving; rewind with fresh ones.
        for drawing, picture_bytes in self._drawings:
            drawing.image.ref = BytesIO(picture_bytes)
        out = BytesIO()
        self.workbook.save(out)
        return out.getvalue()

    def close(self) -> None:
        self.workbook.close()
        self._assets.clear()
        self._drawings.clear()
        self.embedded_objects.clear()


def _color(rgb: Optional[RGB]) -> Optional[str]:
    return rgb_to_hex(rgb) if rgb is not None else None

from __future__ import annotations

from io import BytesIO
from typing import Any, Dict, List, Optional, Tuple

import pytest
from PIL import Image

from sheetfit.config import LayoutSettings
from sheetfit.document import LayoutDocument
from sheetfit.models import CellStyle, ImageFormat, NativeAnchor


class RecordingModel:
    """
    In-memory Document Model that records every call.
    Sheets are dicts, cells are (sheet_index, row, col) tuples, asset handles
    are ints.
    """

    def __init__(self, fail_embed: bool = False) -> None:
        self.fail_embed = fail_embed
        self.sheets: List[Dict[str, Any]] = []
        self.texts: Dict[Tuple[int, int, int], str] = {}
        self.styles: Dict[Tuple[int, int, int], CellStyle] = {}
        self.assets: List[Tuple[str, bytes, Any]] = []
        self.drawings: List[Dict[str, Any]] = []
        self.icon_forced: List[Dict[str, Any]] = []
        self.calls: List[str] = []

    def create_sheet(self):
        sheet = {
            "index": len(self.sheets),
            "name": f"Sheet{len(self.sheets) + 1}",
            "columns": {},
            "rows": {},
            "merged": [],
            "default_column": None,
            "default_row": None,
        }
        self.sheets.append(sheet)
        self.calls.append("create_sheet")
        return sheet

    def set_sheet_name(self, sheet, name):
        sheet["name"] = name

    def sheet_name(self, sheet):
        return sheet["name"]

    def create_cell(self, sheet, row, col):
        self.calls.append("create_cell")
        return (sheet["index"], row, col)

    def get_or_create_row(self, sheet, row):
        return row

    def set_cell_text(self, cell, text):
        self.calls.append("set_cell_text")
        self.texts[cell] = text

    def set_cell_style(self, cell, style):
        self.styles[cell] = style

    def merge_range(self, sheet, r1, r2, c1, c2):
        sheet["merged"].append((r1, r2, c1, c2))

    def set_column_width(self, sheet, col, native_width):
        sheet["columns"][col] = native_width

    def set_row_height(self, sheet, row, native_height):
        self.calls.append("set_row_height")
        sheet["rows"][row] = native_height

    def set_default_column_width(self, sheet, characters):
        sheet["default_column"] = characters

    def set_default_row_height(self, sheet, points):
        sheet["default_row"] = points

    def register_binary_asset(self, payload: bytes, fmt: ImageFormat):
        self.calls.append("register_binary_asset")
        self.assets.append(("image", payload, fmt))
        return len(self.assets) - 1

    def register_object_package(self, payload: bytes, display_name: str):
        self.calls.append("register_object_package")
        if self.fail_embed:
            raise OSError("embed failed")
        self.assets.append(("object", payload, display_name))
        return len(self.assets) - 1

    def place_drawing(self, sheet, cell, asset, anchor: NativeAnchor, anchor_mode="move_dont_resize", icon: Optional[int] = None):
        self.calls.append("place_drawing")
        drawing = {
            "sheet": sheet["index"],
            "cell": cell,
            "asset": asset,
            "anchor": anchor,
            "mode": anchor_mode,
            "icon": icon,
        }
        self.drawings.append(drawing)
        return drawing

    def force_icon_display(self, drawing):
        self.icon_forced.append(drawing)

    def serialize(self) -> bytes:
        return b"recorded"

    def close(self) -> None:
        self.calls.append("close")

    def count(self, name: str) -> int:
        return self.calls.count(name)


def png_bytes(width: int, height: int, color=(200, 40, 40)) -> bytes:
    buf = BytesIO()
    Image.new("RGB", (width, height), color).save(buf, format="PNG")
    return buf.getvalue()


@pytest.fixture
def settings() -> LayoutSettings:
    return LayoutSettings()


@pytest.fixture
def model() -> RecordingModel:
    return RecordingModel()


@pytest.fixture
def model_factory():
    return RecordingModel


@pytest.fixture
def doc(model, settings) -> LayoutDocument:
    return LayoutDocument(model=model, settings=settings)


@pytest.fixture
def sheet(doc):
    return doc.active_sheet


@pytest.fixture
def make_png():
    return png_bytes

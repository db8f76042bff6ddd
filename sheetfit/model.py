"""
sheetfit/model.py — The Document Model port.

Everything the layout core needs from a spreadsheet engine. The core never
inspects which engine backs a document; optional capabilities degrade to
no-ops inside the adapter rather than being branched on here.

Handles (sheet, cell, asset, drawing) are opaque to the core.
"""
from __future__ import annotations

from typing import Any, Optional, Protocol

from .models import AnchorMode, CellStyle, ImageFormat, NativeAnchor


class DocumentModel(Protocol):
    def create_sheet(self) -> Any: ...

    def set_sheet_name(self, sheet: Any, name: str) -> None: ...

    def sheet_name(self, sheet: Any) -> str: ...

    def create_cell(self, sheet: Any, row: int, col: int) -> Any: ...

    def get_or_create_row(self, sheet: Any, row: int) -> Any: ...

    def set_cell_text(self, cell: Any, text: str) -> None: ...

    def set_cell_style(self, cell: Any, style: CellStyle) -> None: ...

    def merge_range(self, sheet: Any, r1: int, r2: int, c1: int, c2: int) -> None: ...

    def set_column_width(self, sheet: Any, col: int, native_width: int) -> None: ...

    def set_row_height(self, sheet: Any, row: int, native_height: int) -> None: ...

    def set_default_column_width(self, sheet: Any, characters: int) -> None: ...

    def set_default_row_height(self, sheet: Any, points: float) -> None: ...

    def register_binary_asset(self, payload: bytes, fmt: ImageFormat) -> Any: ...

    def register_object_package(self, payload: bytes, display_name: str) -> Any: ...

    def place_drawing(
        self,
        sheet: Any,
        cell: Any,
        asset: Any,
        anchor: NativeAnchor,
        anchor_mode: AnchorMode = "move_dont_resize",
        icon: Optional[Any] = None,
    ) -> Any: ...

    def force_icon_display(self, drawing: Any) -> None: ...

    def serialize(self) -> bytes: ...

    def close(self) -> None: ...

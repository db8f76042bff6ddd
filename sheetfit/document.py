"""
sheetfit/document.py — Document session.

Owns everything that is shared across the cells of one document: the
Document Model, the two resource registries (images, files), the sheets and
the layout settings. Nothing here is process-wide; two documents never see
each other's assets.

A document is not thread-safe. Confine it to one thread for its lifetime,
or guard it with one lock.
"""
from __future__ import annotations

import logging
from typing import Any, List, Optional

from .config import LayoutSettings, resolve_settings
from .errors import AppError, CLOSED, SHEET_NOT_FOUND
from .icons import icon_keys, load_icon
from .model import DocumentModel
from .models import FileFormat, ImageFormat, ResourceKind
from .registry import ResourceRegistry
from .sheet import SheetLayout
from .xlsx import OpenpyxlDocument

logger = logging.getLogger(__name__)


class LayoutDocument:
    def __init__(
        self,
        model: Optional[DocumentModel] = None,
        settings: Optional[LayoutSettings] = None,
    ) -> None:
        if model is None:
            model = OpenpyxlDocument()
        self.model = model
        self.settings = settings if settings is not None else resolve_settings()
        self.images = ResourceRegistry(model, ResourceKind.IMAGE)
        self.files = ResourceRegistry(model, ResourceKind.FILE)
        self._sheets: List[SheetLayout] = []
        self._active: Optional[SheetLayout] = None
        self._closed = False

        self.add_sheet()
        self.select_sheet(0)
        self._register_icons()
        logger.info("Layout document created (%d icon assets)", len(self.images))

    def ensure_open(self) -> None:
        """Raise CLOSED once the document has been closed. Sheets and cells call this too."""
        if self._closed:
            raise AppError(CLOSED, "Document is closed")

    def _register_icons(self) -> None:
        for key in icon_keys():
            payload = load_icon(key, self.settings.icon_dir)
            self.images.resolve(key, ResourceKind.IMAGE, payload, ImageFormat.PNG)

    def icon_handle(self, fmt: FileFormat) -> Any:
        """Asset handle of the icon drawn for files of `fmt`."""
        return self.images.get(fmt.icon_key)

    # ---------- Sheets ----------

    def add_sheet(self) -> "LayoutDocument":
        self.ensure_open()
        self._sheets.append(SheetLayout(self))
        return self

    def select_sheet(self, index: int) -> SheetLayout:
        self.ensure_open()
        if index < 0 or index >= len(self._sheets):
            raise AppError(
                SHEET_NOT_FOUND,
                f"No sheet at index {index}",
                {"index": index, "sheet_count": len(self._sheets)},
            )
        self._active = self._sheets[index]
        return self._active

    @property
    def active_sheet(self) -> SheetLayout:
        self.ensure_open()
        return self._active

    def sheet_index(self, sheet: SheetLayout) -> int:
        """Index of `sheet` in this document, -1 when it belongs elsewhere."""
        for i, s in enumerate(self._sheets):
            if s is sheet:
                return i
        return -1

    def sheet_names(self) -> List[str]:
        return [s.name for s in self._sheets]

    # ---------- Registries ----------

    def image_keys(self):
        return set(self.images.keys())

    def file_keys(self):
        return set(self.files.keys())

    # ---------- Output ----------

    def serialize(self) -> bytes:
        self.ensure_open()
        data = self.model.serialize()
        logger.info("Serialized document: %d sheets, %d bytes", len(self._sheets), len(data))
        return data

    def close(self) -> None:
        if self._closed:
            return
        self.model.close()
        self._closed = True
        logger.info("Layout document closed")

    def serialize_and_close(self) -> bytes:
        try:
            return self.serialize()
        finally:
            self.close()

    def __enter__(self) -> "LayoutDocument":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()

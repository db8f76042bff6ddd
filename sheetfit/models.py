from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from io import BytesIO
from typing import Literal, Optional, Tuple, Union

from PIL import Image

from .errors import invalid_position
from .units import pixels_to_emu


# ---- Embedded media ----

class ResourceKind(str, Enum):
    IMAGE = "image"
    FILE = "file"


class ImageFormat(Enum):
    """Picture type codes understood by the spreadsheet engine."""
    EMF = 2     # Extended windows meta file
    WMF = 3     # Windows Meta File
    PICT = 4    # Mac PICT format
    JPEG = 5
    PNG = 6
    DIB = 7     # Device independent bitmap


class FileFormat(Enum):
    """File category and the key of the icon image drawn for it."""
    EXCEL = ("excel", "icon_excel.png")
    POWER_POINT = ("power_point", "icon_power_point.png")
    WORD = ("word", "icon_word.png")
    TEXT = ("text", "icon_txt.png")
    ETC = ("etc", "icon_file.png")
    JPG = ("jpg", "icon_image.png")
    PNG = ("png", "icon_image.png")
    PDF = ("pdf", "icon_pdf.png")

    @property
    def icon_key(self) -> str:
        return self.value[1]


@dataclass
class ImageResource:
    """
    Image payload plus the caller-chosen registry key.
    Pixel size is read from the payload once, on construction.
    """
    payload: bytes
    format: ImageFormat
    key: str
    width: int = field(init=False)
    height: int = field(init=False)

    def __post_init__(self) -> None:
        with Image.open(BytesIO(self.payload)) as im:
            self.width, self.height = im.size


@dataclass
class FileResource:
    """Opaque file payload; `name` is both the registry key and display name."""
    payload: bytes
    format: FileFormat
    name: str

    @property
    def key(self) -> str:
        return self.name


# ---- Placement ----

@dataclass(frozen=True)
class Position:
    """Sub-cell pixel offsets of a drawing; all values must be >= 0."""
    dx1: int
    dy1: int
    dx2: int
    dy2: int

    def __post_init__(self) -> None:
        if self.dx1 < 0 or self.dy1 < 0 or self.dx2 < 0 or self.dy2 < 0:
            raise invalid_position(self.dx1, self.dy1, self.dx2, self.dy2)


AnchorMode = Literal["move_and_resize", "move_dont_resize", "absolute"]
MOVE_DONT_RESIZE: AnchorMode = "move_dont_resize"


@dataclass(frozen=True)
class NativeAnchor:
    """Anchor rectangle in engine units: 0-based cells, EMU offsets."""
    row1: int
    col1: int
    row2: int
    col2: int
    dx1: int
    dy1: int
    dx2: int
    dy2: int


@dataclass(frozen=True)
class AnchorRect:
    """Single-cell anchor rectangle in pixels."""
    row: int
    col: int
    position: Position

    def to_native(self) -> NativeAnchor:
        p = self.position
        return NativeAnchor(
            row1=self.row,
            col1=self.col,
            row2=self.row,
            col2=self.col,
            dx1=pixels_to_emu(p.dx1),
            dy1=pixels_to_emu(p.dy1),
            dx2=pixels_to_emu(p.dx2),
            dy2=pixels_to_emu(p.dy2),
        )


@dataclass(frozen=True)
class PlacedResource:
    key: str
    kind: ResourceKind
    anchor: AnchorRect


# ---- Cell style (pass-through property set) ----

RGB = Tuple[int, int, int]


@dataclass
class Borders:
    top: Optional[str] = None
    bottom: Optional[str] = None
    left: Optional[str] = None
    right: Optional[str] = None
    top_color: Optional[RGB] = None
    bottom_color: Optional[RGB] = None
    left_color: Optional[RGB] = None
    right_color: Optional[RGB] = None


@dataclass
class CellStyle:
    """
    Plain data consumed by the Document Model's set_cell_style.
    New cells are top-aligned and wrap text.
    """
    font_name: str
    font_points: float
    bold: bool = False
    font_color: Optional[RGB] = None
    fill_color: Optional[RGB] = None
    horizontal: Optional[str] = None
    vertical: Optional[str] = "top"
    wrap_text: bool = True
    number_format: Union[str, int, None] = None     # format code, or a built-in format index
    borders: Borders = field(default_factory=Borders)


# ---- Per-cell layout snapshot ----

@dataclass(frozen=True)
class CellLayoutState:
    row: int
    col: int
    current_text: str
    current_row_height_pixels: int
    column_width_pixels: int
    font_point_size: float
    placed: Tuple[PlacedResource, ...] = ()


def rgb_to_hex(rgb: RGB) -> str:
    """Convert RGB tuple to 'RRGGBB' (clamped to 0..255)."""
    r, g, b = [max(0, min(255, int(v))) for v in rgb]
    return f"{r:02X}{g:02X}{b:02X}"


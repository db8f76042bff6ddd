"""
sheetfit/icons.py — Icon images drawn for embedded files.

One PNG per distinct FileFormat icon key. A file named after the key inside
the configured icon directory wins; otherwise a small labelled tile is
rendered with Pillow.
"""
from __future__ import annotations

import logging
from io import BytesIO
from pathlib import Path
from typing import Dict, Optional

from PIL import Image, ImageDraw

from .models import FileFormat, RGB

logger = logging.getLogger(__name__)


ICON_PIXELS = 32

_TILES: Dict[str, tuple] = {
    "icon_excel.png":       ("XLS", (33, 115, 70)),
    "icon_power_point.png": ("PPT", (196, 67, 33)),
    "icon_word.png":        ("DOC", (43, 87, 154)),
    "icon_txt.png":         ("TXT", (96, 96, 96)),
    "icon_file.png":        ("FILE", (128, 128, 128)),
    "icon_image.png":       ("IMG", (142, 68, 173)),
    "icon_pdf.png":         ("PDF", (200, 30, 30)),
}


def icon_keys():
    """Distinct icon keys, in FileFormat declaration order."""
    seen = []
    for ff in FileFormat:
        if ff.icon_key not in seen:
            seen.append(ff.icon_key)
    return seen


def render_icon(label: str, color: RGB, size: int = ICON_PIXELS) -> bytes:
    im = Image.new("RGB", (size, size), (255, 255, 255))
    draw = ImageDraw.Draw(im)
    draw.rectangle([1, 1, size - 2, size - 2], fill=color, outline=(64, 64, 64))
    draw.text((3, size // 2 - 5), label, fill=(255, 255, 255))
    buf = BytesIO()
    im.save(buf, format="PNG")
    return buf.getvalue()


def load_icon(key: str, icon_dir: Optional[str] = None) -> bytes:
    if icon_dir:
        p = Path(icon_dir) / key
        if p.is_file():
            return p.read_bytes()
        logger.debug("Icon %s not found in %s, rendering default", key, icon_dir)
    label, color = _TILES.get(key, ("FILE", (128, 128, 128)))
    return render_icon(label, color)

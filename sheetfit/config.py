from __future__ import annotations

import json
import os
from dataclasses import asdict, dataclass, fields
from pathlib import Path
from typing import Any, Dict, Optional

from .errors import AppError, BAD_CONFIG
from .fonts import BASE_FONT_NAME, BASE_FONT_POINTS


ENV_ICON_DIR = "SHEETFIT_ICON_DIR"
ENV_FILE_ICON_SIZE = "SHEETFIT_FILE_ICON_SIZE"
ENV_DEFAULT_PADDING = "SHEETFIT_DEFAULT_PADDING"


@dataclass
class LayoutSettings:
    """
    Document-wide layout knobs.
    base_font_points only seeds new cells; column math is pinned to 10pt.
    """
    base_font_name: str = BASE_FONT_NAME
    base_font_points: int = BASE_FONT_POINTS
    file_icon_size: int = 30          # px, square
    default_padding: int = 0          # px
    icon_dir: Optional[str] = None

    def __post_init__(self) -> None:
        if self.file_icon_size <= 0:
            raise AppError(BAD_CONFIG, f"file_icon_size must be > 0 (got {self.file_icon_size})")
        if self.default_padding < 0:
            raise AppError(BAD_CONFIG, f"default_padding must be >= 0 (got {self.default_padding})")

    # ---------- Serialization ----------

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "LayoutSettings":
        known = {f.name for f in fields(cls)}
        unknown = set(data) - known
        if unknown:
            raise AppError(BAD_CONFIG, "Unknown settings", {"keys": sorted(unknown)})
        try:
            return cls(**data)
        except TypeError as e:
            raise AppError(BAD_CONFIG, f"Invalid settings: {e}")

    # ---------- File IO ----------

    def save_json(self, path: str) -> None:
        p = Path(path)
        p.parent.mkdir(parents=True, exist_ok=True)
        p.write_text(json.dumps(self.to_dict(), indent=2), encoding="utf-8")

    @classmethod
    def load_json(cls, path: str) -> "LayoutSettings":
        try:
            data = json.loads(Path(path).read_text(encoding="utf-8"))
        except json.JSONDecodeError as e:
            raise AppError(BAD_CONFIG, f"Settings file is not valid JSON: {e}", {"path": path})
        if not isinstance(data, dict):
            raise AppError(BAD_CONFIG, "Settings file must hold a JSON object", {"path": path})
        return cls.from_dict(data)


def _env_int(name: str) -> Optional[int]:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return None
    try:
        return int(raw)
    except ValueError:
        raise AppError(BAD_CONFIG, f"{name} must be an integer (got {raw!r})")


def resolve_settings(path: Optional[str] = None) -> LayoutSettings:
    """Resolve layout settings.

    Priority:
    1) JSON file at `path`, when given
    2) SHEETFIT_* env vars
    3) Built-in defaults
    """
    if path:
        return LayoutSettings.load_json(path)

    overrides: Dict[str, Any] = {}
    icon_dir = os.getenv(ENV_ICON_DIR)
    if icon_dir:
        overrides["icon_dir"] = icon_dir
    size = _env_int(ENV_FILE_ICON_SIZE)
    if size is not None:
        overrides["file_icon_size"] = size
    padding = _env_int(ENV_DEFAULT_PADDING)
    if padding is not None:
        overrides["default_padding"] = padding
    return LayoutSettings(**overrides)

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, Optional


@dataclass
class AppError(Exception):
    """
    Layout error with a short code and structured details.
    Raised synchronously by the call that triggered it; never deferred.
    """
    code: str
    message: str
    details: Optional[Dict[str, Any]] = None

    def __str__(self) -> str:
        if self.details:
            return f"{self.code}: {self.message} ({self.details})"
        return f"{self.code}: {self.message}"


# ── Error codes (keep stable for tests and callers) ──────────────────────────

FONT_SIZE_OUT_OF_RANGE = "FONT_SIZE_OUT_OF_RANGE"
INVALID_POSITION       = "INVALID_POSITION"
SHEET_NOT_FOUND        = "SHEET_NOT_FOUND"
BAD_CELL_REF           = "BAD_CELL_REF"
BAD_CONFIG             = "BAD_CONFIG"
CLOSED                 = "CLOSED"
BAD_NUMBER_FORMAT      = "BAD_NUMBER_FORMAT"


class OutOfRangeFontSize(AppError):
    """No font-table entry exists for the requested point size."""


class InvalidPosition(AppError):
    """A placement rectangle has a negative offset."""


def out_of_range_font_size(points: float, low: int, high: int) -> OutOfRangeFontSize:
    return OutOfRangeFontSize(
        FONT_SIZE_OUT_OF_RANGE,
        f"No font metrics for {points}pt (supported: {low}-{high}pt)",
        {"points": points, "min": low, "max": high},
    )


def invalid_position(dx1: int, dy1: int, dx2: int, dy2: int) -> InvalidPosition:
    return InvalidPosition(
        INVALID_POSITION,
        "Placement offsets must be greater than or equal to zero.",
        {"dx1": dx1, "dy1": dy1, "dx2": dx2, "dy2": dy2},
    )

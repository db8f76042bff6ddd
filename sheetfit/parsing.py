from __future__ import annotations

import re
from typing import Tuple

from .errors import AppError, BAD_CELL_REF


_COL_RE = re.compile(r"^[A-Z]+$")
_CELL_REF_RE = re.compile(r"^\s*\$?([A-Z]+)\$?(\d+)\s*$")


def col_letters_to_index(col: str) -> int:
    """
    Convert Excel column letters to 1-based index (A->1, Z->26, AA->27).
    """
    s = (col or "").strip().upper()
    if not s or not _COL_RE.match(s):
        raise AppError(BAD_CELL_REF, f"Bad column: {col!r}")
    n = 0
    for ch in s:
        n = n * 26 + (ord(ch) - ord("A") + 1)
    return n


def col_index_to_letters(n: int) -> str:
    """
    Convert 1-based index to Excel column letters (1->A).
    """
    if n <= 0:
        raise AppError(BAD_CELL_REF, f"Bad column index: {n}")
    out = []
    x = n
    while x:
        x, rem = divmod(x - 1, 26)
        out.append(chr(ord("A") + rem))
    return "".join(reversed(out))


def parse_cell_ref(ref: str) -> Tuple[int, int]:
    """
    Parse an A1-style reference into 0-based (row, col).
    'A1' -> (0, 0), 'C12' -> (11, 2). '$' markers are ignored.
    """
    m = _CELL_REF_RE.match((ref or "").upper())
    if not m:
        raise AppError(BAD_CELL_REF, f"Bad cell reference: {ref!r}")
    row = int(m.group(2))
    if row < 1:
        raise AppError(BAD_CELL_REF, f"Bad cell reference: {ref!r}")
    return row - 1, col_letters_to_index(m.group(1)) - 1


def format_cell_ref(row: int, col: int) -> str:
    """0-based (row, col) -> 'A1' style reference."""
    if row < 0:
        raise AppError(BAD_CELL_REF, f"Bad row index: {row}")
    return f"{col_index_to_letters(col + 1)}{row + 1}"

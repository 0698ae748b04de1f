"""Rectangular ranges built from an anchor/focus pair"""

from __future__ import annotations

from collections.abc import Iterator

from core.exceptions import MalformedAddress
from core.models import Address, CellRange, RangeBounds, Sheet

from .address import as_address, format_address, parse_address


def normalize(anchor: Address, focus: Address) -> RangeBounds:
    """Rectangle spanned by two corners; symmetric in its arguments."""
    return RangeBounds(
        min_col=min(anchor.column, focus.column),
        max_col=max(anchor.column, focus.column),
        min_row=min(anchor.row, focus.row),
        max_row=max(anchor.row, focus.row),
    )


def make_range(anchor: Address | str, focus: Address | str | None = None) -> CellRange:
    """Build a range; a missing focus selects the anchor cell only."""
    start = as_address(anchor)
    end = as_address(focus) if focus is not None else start
    return CellRange(anchor=start, focus=end)


def bounds(cell_range: CellRange) -> RangeBounds:
    return normalize(cell_range.anchor, cell_range.focus)


def top_left(cell_range: CellRange) -> Address:
    box = bounds(cell_range)
    return Address(column=box.min_col, row=box.min_row)


def bottom_right(cell_range: CellRange) -> Address:
    box = bounds(cell_range)
    return Address(column=box.max_col, row=box.max_row)


def is_single_cell(cell_range: CellRange) -> bool:
    box = bounds(cell_range)
    return box.min_col == box.max_col and box.min_row == box.max_row


def to_range_string(cell_range: CellRange) -> str:
    """Single cell as A1, otherwise A1:C9 from the normalized corners."""
    start = format_address(top_left(cell_range))
    if is_single_cell(cell_range):
        return start
    return f"{start}:{format_address(bottom_right(cell_range))}"


def parse_range(text: str) -> CellRange:
    """Parse "A1" or "A1:C9" (corners in any order)."""
    if not isinstance(text, str):
        raise MalformedAddress(text, "range must be a string")
    parts = text.strip().split(":")
    if len(parts) == 1:
        return make_range(parse_address(parts[0]))
    if len(parts) == 2:
        return make_range(parse_address(parts[0]), parse_address(parts[1]))
    raise MalformedAddress(text, "range must be ADDR or ADDR:ADDR")


def select_all(sheet: Sheet) -> CellRange:
    """Range covering the sheet's whole current capacity."""
    return CellRange(
        anchor=Address(column=0, row=1),
        focus=Address(column=sheet.column_count - 1, row=sheet.row_count),
    )


def contains(cell_range: CellRange, address: Address) -> bool:
    box = bounds(cell_range)
    return (
        box.min_col <= address.column <= box.max_col
        and box.min_row <= address.row <= box.max_row
    )


def iter_rows(cell_range: CellRange) -> Iterator[list[Address]]:
    """Addresses row by row, left to right."""
    box = bounds(cell_range)
    for row in range(box.min_row, box.max_row + 1):
        yield [
            Address(column=col, row=row)
            for col in range(box.min_col, box.max_col + 1)
        ]


def size(cell_range: CellRange) -> tuple[int, int]:
    """(rows, columns)"""
    box = bounds(cell_range)
    return box.max_row - box.min_row + 1, box.max_col - box.min_col + 1

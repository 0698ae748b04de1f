"""Grid store: sheet tabs, sparse cells and capacity growth"""

from __future__ import annotations

import logging
from typing import Optional

from config import settings
from core.exceptions import SheetNotFound
from core.models import Address, Cell, CellPatch, CellRange, Sheet, WorkbookSnapshot

from .address import as_address, format_address, parse_address
from .ranges import bounds

logger = logging.getLogger(__name__)


def get_cell(sheet: Sheet, address: Address | str) -> Cell:
    """Stored cell, or a blank default when nothing was ever written there."""
    key = format_address(as_address(address))
    cell = sheet.cells.get(key)
    return cell if cell is not None else Cell()


def set_cell(sheet: Sheet, address: Address | str, patch: CellPatch | dict) -> Cell:
    """Merge patch into the cell at address, creating it lazily."""
    if isinstance(patch, dict):
        patch = CellPatch(**patch)
    target = as_address(address)
    key = format_address(target)
    current = sheet.cells.get(key) or Cell()
    updated = current.model_copy(update=patch.model_dump(exclude_none=True))
    sheet.cells[key] = updated
    return updated


def clear_cell(sheet: Sheet, address: Address | str) -> Cell:
    """Empty the raw input; the cell and its formatting stay."""
    return set_cell(sheet, address, CellPatch(raw=""))


def ensure_capacity(sheet: Sheet, address: Address | str) -> bool:
    """Grow row/column bounds when address is within the margin of an edge.

    Growth always leaves the address more than the margin away from the new
    edge, so repeating the call with the same or a smaller address is a no-op.
    Returns True when the sheet shape changed.
    """
    target = as_address(address)
    margin = settings.CAPACITY_MARGIN
    row_index = target.row - 1
    grew = False

    if row_index >= sheet.row_count - margin:
        sheet.row_count = max(
            sheet.row_count + settings.ROW_GROWTH_STEP,
            row_index + margin + 1,
        )
        grew = True

    if target.column >= sheet.column_count - margin:
        sheet.column_count = max(
            sheet.column_count + settings.COLUMN_GROWTH_STEP,
            target.column + margin + 1,
        )
        grew = True

    if grew:
        logger.debug(
            "Sheet %s grew to %d rows x %d columns",
            sheet.id, sheet.row_count, sheet.column_count
        )
    return grew


def used_range(sheet: Sheet) -> Optional[CellRange]:
    """Bounding box of every cell with non-empty raw input."""
    filled = [parse_address(key) for key, cell in sheet.cells.items() if cell.raw != ""]
    if not filled:
        return None
    return CellRange(
        anchor=Address(
            column=min(a.column for a in filled),
            row=min(a.row for a in filled),
        ),
        focus=Address(
            column=max(a.column for a in filled),
            row=max(a.row for a in filled),
        ),
    )


def clip_to_used(sheet: Sheet, cell_range: CellRange) -> CellRange:
    """Range cut back at the bottom and right to the last filled row and column.

    The top-left corner is kept. An empty overlap leaves only that corner.
    """
    box = bounds(cell_range)
    start = Address(column=box.min_col, row=box.min_row)
    area = used_range(sheet)
    if area is None:
        return CellRange(anchor=start, focus=start)
    used = bounds(area)
    end = Address(
        column=max(box.min_col, min(box.max_col, used.max_col)),
        row=max(box.min_row, min(box.max_row, used.max_row)),
    )
    return CellRange(anchor=start, focus=end)


def new_sheet(sheet_id: str, name: str) -> Sheet:
    return Sheet(
        id=sheet_id,
        name=name,
        row_count=settings.DEFAULT_ROW_COUNT,
        column_count=settings.DEFAULT_COLUMN_COUNT,
    )


class Workbook:
    """Ordered collection of sheet tabs with one active sheet"""

    def __init__(self, sheets: Optional[list[Sheet]] = None, active_sheet_id: Optional[str] = None):
        self._sheets: dict[str, Sheet] = {}
        self._counter = 0
        for sheet in sheets or []:
            self._sheets[sheet.id] = sheet
            self._counter += 1
        if not self._sheets:
            self.add_sheet()
        if active_sheet_id in self._sheets:
            self.active_sheet_id = active_sheet_id
        else:
            self.active_sheet_id = next(iter(self._sheets))

    @property
    def sheets(self) -> list[Sheet]:
        return list(self._sheets.values())

    @property
    def active_sheet(self) -> Sheet:
        return self._sheets[self.active_sheet_id]

    def get_sheet(self, sheet_id: str) -> Sheet:
        try:
            return self._sheets[sheet_id]
        except KeyError:
            raise SheetNotFound(sheet_id) from None

    def set_active(self, sheet_id: str) -> Sheet:
        sheet = self.get_sheet(sheet_id)
        self.active_sheet_id = sheet.id
        return sheet

    def add_sheet(self, name: Optional[str] = None, activate: bool = True) -> Sheet:
        """Append a blank default-sized tab ("Sheet N" / "sheetN")."""
        self._counter += 1
        sheet_id = f"sheet{self._counter}"
        while sheet_id in self._sheets:
            self._counter += 1
            sheet_id = f"sheet{self._counter}"
        sheet = new_sheet(sheet_id, name or f"Sheet {self._counter}")
        self._sheets[sheet_id] = sheet
        if activate:
            self.active_sheet_id = sheet_id
        logger.info("Created sheet %s (%s)", sheet.id, sheet.name)
        return sheet

    def remove_sheet(self, sheet_id: str) -> bool:
        """Drop a tab; the last remaining tab is never removed."""
        self.get_sheet(sheet_id)
        if len(self._sheets) <= 1:
            return False
        del self._sheets[sheet_id]
        if self.active_sheet_id == sheet_id:
            self.active_sheet_id = next(iter(self._sheets))
        logger.info("Removed sheet %s", sheet_id)
        return True

    def rename_sheet(self, sheet_id: str, name: str) -> Sheet:
        sheet = self.get_sheet(sheet_id)
        if name and name.strip():
            sheet.name = name.strip()
        return sheet

    def import_rows(self, rows: list[list[str]], name: Optional[str] = None) -> Sheet:
        """Create a populated tab from a 2-D array of strings."""
        sheet = self.add_sheet(name)
        last: Optional[Address] = None
        for row_number, row in enumerate(rows, start=1):
            for column, value in enumerate(row):
                text = "" if value is None else str(value)
                if text == "":
                    continue
                address = Address(column=column, row=row_number)
                set_cell(sheet, address, CellPatch(raw=text))
                if last is None:
                    last = address
                else:
                    last = Address(
                        column=max(last.column, column),
                        row=max(last.row, row_number),
                    )
        if last is not None:
            ensure_capacity(sheet, last)
        logger.info(
            "Imported %d rows into sheet %s (%d x %d)",
            len(rows), sheet.id, sheet.row_count, sheet.column_count
        )
        return sheet

    def snapshot(self) -> WorkbookSnapshot:
        return WorkbookSnapshot(sheets=self.sheets, active_sheet_id=self.active_sheet_id)

    @classmethod
    def from_snapshot(cls, snapshot: WorkbookSnapshot) -> "Workbook":
        return cls(sheets=list(snapshot.sheets), active_sheet_id=snapshot.active_sheet_id)

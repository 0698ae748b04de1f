import pytest

from core.enums import Alignment
from core.exceptions import SheetNotFound
from core.models import CellPatch
from grid.ranges import parse_range, to_range_string
from grid.store import (
    Workbook, clear_cell, clip_to_used, ensure_capacity, get_cell, new_sheet, set_cell, used_range
)


def test_get_cell_defaults_to_blank():
    sheet = new_sheet("sheet1", "Sheet 1")
    cell = get_cell(sheet, "C3")
    assert cell.raw == ""
    assert not cell.is_bold
    assert "C3" not in sheet.cells


def test_set_cell_merges_patch():
    sheet = new_sheet("sheet1", "Sheet 1")
    set_cell(sheet, "a1", {"raw": "hello", "is_bold": True})
    set_cell(sheet, "A1", CellPatch(align=Alignment.RIGHT))
    cell = get_cell(sheet, "A1")
    assert cell.raw == "hello"
    assert cell.is_bold
    assert cell.align == Alignment.RIGHT


def test_clear_cell_keeps_formatting():
    sheet = new_sheet("sheet1", "Sheet 1")
    set_cell(sheet, "B2", {"raw": "x", "is_italic": True})
    clear_cell(sheet, "B2")
    assert sheet.cells["B2"].raw == ""
    assert sheet.cells["B2"].is_italic


def test_ensure_capacity_grows_near_edges():
    sheet = new_sheet("sheet1", "Sheet 1")
    assert (sheet.row_count, sheet.column_count) == (25, 11)

    assert not ensure_capacity(sheet, "A10")
    assert ensure_capacity(sheet, "A21")
    assert sheet.row_count == 35
    assert sheet.column_count == 11

    assert ensure_capacity(sheet, "G1")
    assert sheet.column_count == 16


def test_ensure_capacity_is_idempotent_and_monotonic():
    sheet = new_sheet("sheet1", "Sheet 1")
    ensure_capacity(sheet, "Z100")
    shape = (sheet.row_count, sheet.column_count)
    assert sheet.row_count > 100
    assert sheet.column_count > 26

    assert not ensure_capacity(sheet, "Z100")
    assert not ensure_capacity(sheet, "A1")
    assert (sheet.row_count, sheet.column_count) == shape


def test_used_range():
    sheet = new_sheet("sheet1", "Sheet 1")
    assert used_range(sheet) is None
    set_cell(sheet, "B2", {"raw": "1"})
    set_cell(sheet, "D5", {"raw": "2"})
    set_cell(sheet, "F9", {"raw": ""})
    assert to_range_string(used_range(sheet)) == "B2:D5"


def test_clip_to_used_keeps_top_left():
    sheet = new_sheet("sheet1", "Sheet 1")
    assert to_range_string(clip_to_used(sheet, parse_range("B2:XFD1048576"))) == "B2"
    set_cell(sheet, "B2", {"raw": "1"})
    set_cell(sheet, "D5", {"raw": "2"})
    assert to_range_string(clip_to_used(sheet, parse_range("A1:XFD1048576"))) == "A1:D5"
    assert to_range_string(clip_to_used(sheet, parse_range("C3:C4"))) == "C3:C4"
    assert to_range_string(clip_to_used(sheet, parse_range("E6:Z99"))) == "E6"


def test_workbook_tabs():
    workbook = Workbook()
    assert [sheet.id for sheet in workbook.sheets] == ["sheet1"]
    assert workbook.active_sheet.name == "Sheet 1"

    second = workbook.add_sheet()
    assert (second.id, second.name) == ("sheet2", "Sheet 2")
    assert workbook.active_sheet_id == "sheet2"

    workbook.rename_sheet("sheet2", "  Budget ")
    workbook.rename_sheet("sheet2", "   ")
    assert workbook.get_sheet("sheet2").name == "Budget"

    assert workbook.remove_sheet("sheet2")
    assert workbook.active_sheet_id == "sheet1"
    assert not workbook.remove_sheet("sheet1")

    with pytest.raises(SheetNotFound):
        workbook.get_sheet("sheet9")


def test_import_rows_populates_new_sheet():
    workbook = Workbook()
    rows = [["Name", "Score"], ["Ann", "3"], ["Bob", ""]]
    sheet = workbook.import_rows(rows, "Scores")

    assert sheet.name == "Scores"
    assert workbook.active_sheet_id == sheet.id
    assert get_cell(sheet, "B2").raw == "3"
    assert "B3" not in sheet.cells
    assert (sheet.row_count, sheet.column_count) == (25, 11)


def test_import_rows_grows_for_large_data():
    workbook = Workbook()
    rows = [[str(column) for column in range(12)] for _ in range(40)]
    sheet = workbook.import_rows(rows)
    assert sheet.row_count > 40
    assert sheet.column_count > 12


def test_snapshot_round_trip_keeps_active_tab():
    workbook = Workbook()
    workbook.add_sheet("Data")
    set_cell(workbook.active_sheet, "A1", {"raw": "=1+1"})
    restored = Workbook.from_snapshot(workbook.snapshot())
    assert restored.active_sheet_id == "sheet2"
    assert get_cell(restored.active_sheet, "A1").raw == "=1+1"
    assert restored.add_sheet().id == "sheet3"

import pytest

from core.exceptions import MalformedAddress
from core.models import Address
from grid.ranges import (
    bottom_right, contains, iter_rows, make_range, normalize, parse_range,
    select_all, size, to_range_string, top_left
)
from grid.store import new_sheet


def test_normalize_is_symmetric():
    a = Address(column=2, row=7)
    b = Address(column=0, row=3)
    assert normalize(a, b) == normalize(b, a)
    box = normalize(a, b)
    assert (box.min_col, box.max_col, box.min_row, box.max_row) == (0, 2, 3, 7)


def test_range_string_uses_normalized_corners():
    cell_range = make_range("C5", "A1")
    assert to_range_string(cell_range) == "A1:C5"
    assert top_left(cell_range) == Address(column=0, row=1)
    assert bottom_right(cell_range) == Address(column=2, row=5)


def test_single_cell_range_string():
    assert to_range_string(make_range("B2")) == "B2"
    assert to_range_string(make_range("B2", "B2")) == "B2"


def test_parse_range():
    assert to_range_string(parse_range("b3:a1")) == "A1:B3"
    assert to_range_string(parse_range("D4")) == "D4"
    with pytest.raises(MalformedAddress):
        parse_range("A1:B2:C3")
    with pytest.raises(MalformedAddress):
        parse_range("A1:")


def test_rows_contains_and_size():
    cell_range = parse_range("A1:B2")
    rows = [[str(address) for address in row] for row in iter_rows(cell_range)]
    assert rows == [["A1", "B1"], ["A2", "B2"]]
    assert contains(cell_range, Address(column=1, row=2))
    assert not contains(cell_range, Address(column=2, row=2))
    assert size(parse_range("A1:C5")) == (5, 3)


def test_select_all_spans_capacity():
    sheet = new_sheet("sheet1", "Sheet 1")
    assert to_range_string(select_all(sheet)) == "A1:K25"

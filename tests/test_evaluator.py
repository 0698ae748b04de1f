import pytest

from grid.evaluator import FormulaError, evaluate, evaluate_arithmetic, is_sentinel, resolve_cell, resolve_range
from grid.ranges import parse_range
from grid.store import new_sheet, set_cell


@pytest.fixture
def sheet():
    sheet = new_sheet("sheet1", "Sheet 1")
    for address, raw in {
        "A1": "10",
        "A2": "20",
        "A3": "-5",
        "B1": "hello",
        "C1": "=A1*2",
        "C2": "=A1+C1",
        "D1": "=D1+1",
        "E1": "=E2",
        "E2": "=E1+1",
        "G1": "=2+3",
    }.items():
        set_cell(sheet, address, {"raw": raw})
    return sheet


def test_plain_values_are_echoed(sheet):
    assert evaluate("hello", sheet) == "hello"
    assert evaluate("", sheet) == ""
    assert evaluate(None, sheet) == ""
    assert evaluate("12", sheet) == "12"


@pytest.mark.parametrize(
    "raw, expected",
    [
        ("=1+2", "3"),
        ("=2+3*4", "14"),
        ("=(2+3)*4", "20"),
        ("=10/4", "2.5"),
        ("=-3+1", "-2"),
        ("=0.1+0.2", "0.3"),
        ("= 7 - 2 ", "5"),
    ],
)
def test_arithmetic(sheet, raw, expected):
    assert evaluate(raw, sheet) == expected


@pytest.mark.parametrize("raw", ["=1/0", "=", "=1+", "=(1+2", "=2**3", "=foo", "=__import__('os')"])
def test_arithmetic_failures_are_error(sheet, raw):
    assert evaluate(raw, sheet) == "#ERROR"


def test_references_resolve_one_hop(sheet):
    assert evaluate("=A1+A2", sheet) == "30"
    assert evaluate("=A3*2", sheet) == "-10"
    assert evaluate("=a1+1", sheet) == "11"
    assert resolve_cell(sheet, "C1") == "20"


def test_blank_reference_counts_as_zero(sheet):
    assert evaluate("=Z9+1", sheet) == "1"


def test_text_reference_is_error(sheet):
    assert evaluate("=B1+1", sheet) == "#ERROR"


def test_self_reference_is_circular(sheet):
    assert resolve_cell(sheet, "D1") == "#CIRCULAR"


def test_mutual_reference_is_circular(sheet):
    assert resolve_cell(sheet, "E1") == "#CIRCULAR"
    assert resolve_cell(sheet, "E2") == "#CIRCULAR"


def test_multi_hop_reference_is_nested(sheet):
    assert resolve_cell(sheet, "C2") == "#NESTED"
    assert evaluate("=C2+1", sheet) == "#NESTED"


def test_similar_reference_names_are_not_circular(sheet):
    set_cell(sheet, "A10", {"raw": "=A1+1"})
    assert resolve_cell(sheet, "A10") == "11"


@pytest.mark.parametrize(
    "raw, expected",
    [
        ("=SUM(A1:A3)", "25"),
        ("=AVERAGE(A1:A2)", "15"),
        ("=avg(A1:A2)", "15"),
        ("=COUNT(A1:B1)", "1"),
        ("=MIN(A1:A3)", "-5"),
        ("=MAX(A1:A3)", "20"),
        ("=PRODUCT(A1:A2)", "200"),
        ("=SUM(A1:A2, 5)", "35"),
        ("=SUM(A1:A2)*2", "60"),
        ("=SUM(G1, A1)", "15"),
    ],
)
def test_aggregate_functions(sheet, raw, expected):
    assert evaluate(raw, sheet) == expected


def test_aggregate_function_failures(sheet):
    assert evaluate("=AVERAGE(B1)", sheet) == "#ERROR"
    assert evaluate('=IF(A1>0,"Positive","Negative")', sheet) == "#ERROR"
    assert evaluate("=SUM(C2)", sheet) == "#NESTED"


def test_range_skips_its_own_formula_cell(sheet):
    set_cell(sheet, "A4", {"raw": "=SUM(A1:A4)"})
    assert resolve_cell(sheet, "A4") == "25"


def test_aggregate_over_owner_cell_is_circular(sheet):
    set_cell(sheet, "F1", {"raw": "=SUM(F1)"})
    assert resolve_cell(sheet, "F1") == "#CIRCULAR"
    set_cell(sheet, "F2", {"raw": "=F3"})
    set_cell(sheet, "F3", {"raw": "=SUM(F1:F2)"})
    assert resolve_cell(sheet, "F3") == "#CIRCULAR"


def test_referenced_aggregate_resolves(sheet):
    set_cell(sheet, "H1", {"raw": "=SUM(1,2)"})
    set_cell(sheet, "H2", {"raw": "=H1+1"})
    set_cell(sheet, "H3", {"raw": "=MAX(4, 9)*2"})
    assert resolve_cell(sheet, "H1") == "3"
    assert resolve_cell(sheet, "H2") == "4"
    assert evaluate("=H3-H1", sheet) == "15"


def test_referenced_aggregate_over_range_is_nested(sheet):
    set_cell(sheet, "H1", {"raw": "=SUM(A1:A2)"})
    assert resolve_cell(sheet, "H1") == "30"
    assert evaluate("=H1+1", sheet) == "#NESTED"


def test_tiny_referenced_values_keep_precision():
    sheet = new_sheet("sheet1", "Sheet 1")
    set_cell(sheet, "A1", {"raw": "=1/100000000000000000"})
    set_cell(sheet, "A2", {"raw": "=A1*100000000000000000000"})
    set_cell(sheet, "A3", {"raw": "=SUM(A1)*100000000000000000000"})
    assert resolve_cell(sheet, "A2") == "1000"
    assert resolve_cell(sheet, "A3") == "1000"


def test_aggregate_over_huge_range_only_reads_stored_cells():
    sheet = new_sheet("sheet1", "Sheet 1")
    set_cell(sheet, "A1", {"raw": "1"})
    set_cell(sheet, "ZZ50000", {"raw": "2"})
    set_cell(sheet, "B2", {"raw": "=SUM(A1:XFD1048576)"})
    assert resolve_cell(sheet, "B2") == "3"
    assert evaluate("=COUNT(A1:XFD1048576)", sheet, owner="B2") == "2"
    assert evaluate("=AVERAGE(C3:XFD1048576)", sheet) == "2"


def test_resolve_range(sheet):
    assert resolve_range(sheet, parse_range("A1:C1")) == [["10", "hello", "20"]]


def test_formula_text_is_never_executed():
    with pytest.raises(FormulaError):
        evaluate_arithmetic("__import__('os').getcwd()")


def test_is_sentinel():
    assert is_sentinel("#ERROR")
    assert is_sentinel("#NESTED")
    assert not is_sentinel("#N/A")

import pytest

from core.enums import Aggregate, Intent, MessageRole
from core.exceptions import NoNumericData, NoSelection, UnsupportedIntentInput
from core.models import SelectionContext
from grid.ranges import parse_range
from grid.store import new_sheet, set_cell
from handlers.calculation import CalculationHandler, detect_operation, distance_group_averages


def make_context(cells, selection=None):
    sheet = new_sheet("sheet1", "Sheet 1")
    for address, raw in cells.items():
        set_cell(sheet, address, {"raw": raw})
    cell_range = parse_range(selection) if selection else None
    return SelectionContext(range=cell_range, active_sheet=sheet)


NUMBERS = {"A1": "10", "A2": "20", "A3": "30"}


@pytest.mark.parametrize(
    "query, operation",
    [
        ("what is the sum", Aggregate.SUM),
        ("total please", Aggregate.SUM),
        ("mean of these", Aggregate.AVERAGE),
        ("highest value", Aggregate.MAX),
        ("the lowest one", Aggregate.MIN),
        ("count them", Aggregate.COUNT),
        ("do something", None),
    ],
)
def test_detect_operation(query, operation):
    assert detect_operation(query) == operation


@pytest.mark.asyncio
@pytest.mark.parametrize(
    "query, expected",
    [
        ("sum", "The sum of A1:A3 is 60"),
        ("average", "The average of A1:A3 is 20"),
        ("max", "The maximum of A1:A3 is 30"),
        ("min", "The minimum of A1:A3 is 10"),
        ("count", "The count of A1:A3 is 3"),
    ],
)
async def test_aggregates(query, expected):
    handler = CalculationHandler()
    message = await handler.handle(query, make_context(NUMBERS, "A1:A3"))
    assert message.role == MessageRole.ASSISTANT
    assert message.intent == Intent.CALCULATION
    assert message.content == expected
    assert message.attachments.references == ["A1:A3"]


@pytest.mark.asyncio
async def test_non_numeric_values_are_ignored():
    cells = {"A1": "Label", "A2": "4", "B1": "x", "B2": "=A2*2"}
    message = await CalculationHandler().handle("sum", make_context(cells, "A1:B2"))
    assert message.content == "The sum of A1:B2 is 12"
    assert message.attachments.calculation.count == 2


@pytest.mark.asyncio
async def test_requires_selection():
    with pytest.raises(NoSelection):
        await CalculationHandler().handle("sum", make_context(NUMBERS))


@pytest.mark.asyncio
async def test_unknown_operator():
    with pytest.raises(UnsupportedIntentInput):
        await CalculationHandler().handle("do something", make_context(NUMBERS, "A1:A3"))


@pytest.mark.asyncio
async def test_no_numeric_data():
    cells = {"A1": "a", "A2": "b"}
    with pytest.raises(NoNumericData):
        await CalculationHandler().handle("sum", make_context(cells, "A1:A2"))


DISTANCES = {
    "A1": "City", "B1": "Distance (miles)",
    "A2": "Paris", "B2": "10",
    "A3": "Paris", "B3": "20",
    "A4": "Rome", "B4": "30",
}


def test_distance_group_averages():
    rows = [["City", "Distance (miles)"], ["Paris", "10"], ["Paris", "20"], ["Rome", "30"]]
    assert distance_group_averages(rows) == ("City", [15.0, 30.0])
    assert distance_group_averages([["City", "Distance"], ["Paris", "10"], ["Rome", "30"]]) is None
    assert distance_group_averages([["City", "Price"], ["Paris", "10"], ["Paris", "30"]]) is None


@pytest.mark.asyncio
async def test_distance_data_is_averaged_per_label_first():
    handler = CalculationHandler()
    message = await handler.handle("sum", make_context(DISTANCES, "A1:B4"))
    assert message.content == "The sum of A1:B4 is 45 (averaged per City first)"
    message = await handler.handle("average", make_context(DISTANCES, "A1:B4"))
    assert message.content.startswith("The average of A1:B4 is 22.5")

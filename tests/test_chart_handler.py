import pytest

from core.enums import ChartType, Intent
from core.exceptions import NoNumericData, NoSelection
from core.models import ChartPoint, SelectionContext
from grid.ranges import parse_range
from grid.store import new_sheet, set_cell
from handlers.chart import ChartHandler, cap_points, chart_title, detect_chart_type


def make_context(cells, selection=None):
    sheet = new_sheet("sheet1", "Sheet 1")
    for address, raw in cells.items():
        set_cell(sheet, address, {"raw": raw})
    cell_range = parse_range(selection) if selection else None
    return SelectionContext(range=cell_range, active_sheet=sheet)


SALES = {
    "A1": "Region", "B1": "Sales", "C1": "Units",
    "A2": "North", "B2": "10", "C2": "1",
    "A3": "South", "B3": "20", "C3": "2",
    "A4": "North", "B4": "5", "C4": "3",
}


@pytest.mark.parametrize(
    "query, chart_type",
    [
        ("make a chart", ChartType.BAR),
        ("column chart please", ChartType.BAR),
        ("line graph", ChartType.LINE),
        ("pie chart", ChartType.PIE),
        ("donut chart", ChartType.DOUGHNUT),
        ("scatter plot", ChartType.SCATTER),
        ("show the trend over time", ChartType.LINE),
        ("breakdown of sales", ChartType.PIE),
    ],
)
def test_detect_chart_type(query, chart_type):
    assert detect_chart_type(query) == chart_type


def test_chart_title_templates():
    assert chart_title("chart", "Sales", "Region") == "Sales by Region"
    assert chart_title("distribution chart", "Sales", "Region") == "Distribution of Sales by Region"
    assert chart_title("compare regions", "Sales", "Region") == "Comparison of Sales across Region"
    assert chart_title("trend", "Sales", "Month") == "Sales trend by Month"


def test_cap_points_rolls_rest_into_other():
    points = [ChartPoint(label=f"c{i}", value=float(i)) for i in range(1, 9)]
    capped = cap_points(points, 6)
    assert [point.label for point in capped] == ["c8", "c7", "c6", "c5", "c4", "Other"]
    assert capped[-1].value == 6.0
    assert cap_points(points[:3], 6) == points[:3]


@pytest.mark.asyncio
async def test_chart_merges_duplicate_categories():
    message = await ChartHandler().handle("chart sales by region", make_context(SALES, "A1:C4"))
    spec = message.attachments.chart_spec

    assert message.intent == Intent.CHART
    assert message.content == "Here's a bar chart of Sales by Region"
    assert spec.title == "Sales by Region"
    assert spec.category_axis_label == "Region"
    assert spec.value_axis_label == "Sales"
    assert [(p.label, p.value) for p in spec.points] == [("North", 15.0), ("South", 20.0)]
    assert message.attachments.references == ["A1:C4"]


@pytest.mark.asyncio
async def test_query_header_selects_value_axis():
    message = await ChartHandler().handle("pie chart of units", make_context(SALES, "A1:C4"))
    spec = message.attachments.chart_spec
    assert spec.value_axis_label == "Units"
    assert spec.suggested_type == ChartType.PIE
    assert [(p.label, p.value) for p in spec.points] == [("North", 4.0), ("South", 2.0)]


@pytest.mark.asyncio
async def test_falls_back_to_used_range():
    message = await ChartHandler().handle("chart", make_context(SALES))
    assert message.attachments.references == ["A1:C4"]
    assert message.attachments.chart_spec.value_axis_label == "Sales"


@pytest.mark.asyncio
async def test_numbers_without_labels_use_row_numbers():
    cells = {"A1": "3", "A2": "4", "A3": "5"}
    message = await ChartHandler().handle("chart", make_context(cells, "A1:A3"))
    spec = message.attachments.chart_spec
    assert spec.category_axis_label == "Row"
    assert spec.value_axis_label == "Column A"
    assert [p.label for p in spec.points] == ["Row 1", "Row 2", "Row 3"]


@pytest.mark.asyncio
async def test_distance_values_are_averaged():
    cells = {
        "A1": "Route", "B1": "Distance (km)",
        "A2": "Home", "B2": "4",
        "A3": "Home", "B3": "6",
        "A4": "Work", "B4": "12",
    }
    message = await ChartHandler().handle("chart", make_context(cells, "A1:B4"))
    points = message.attachments.chart_spec.points
    assert [(p.label, p.value) for p in points] == [("Home", 5.0), ("Work", 12.0)]


@pytest.mark.asyncio
async def test_categories_are_capped():
    cells = {"A1": "Name", "B1": "Score"}
    for row in range(2, 12):
        cells[f"A{row}"] = f"P{row}"
        cells[f"B{row}"] = str(row)
    message = await ChartHandler(max_categories=4).handle("chart", make_context(cells, "A1:B11"))
    points = message.attachments.chart_spec.points
    assert [p.label for p in points] == ["P11", "P10", "P9", "Other"]
    assert points[-1].value == sum(range(2, 9))


@pytest.mark.asyncio
async def test_empty_sheet_without_selection():
    with pytest.raises(NoSelection):
        await ChartHandler().handle("chart", make_context({}))


@pytest.mark.asyncio
async def test_text_only_selection():
    cells = {"A1": "a", "A2": "b"}
    with pytest.raises(NoNumericData):
        await ChartHandler().handle("chart", make_context(cells, "A1:A2"))


@pytest.mark.asyncio
async def test_oversized_selection_charts_filled_cells():
    message = await ChartHandler().handle("chart sales by region", make_context(SALES, "A1:ZZ99999"))
    spec = message.attachments.chart_spec
    assert [(p.label, p.value) for p in spec.points] == [("North", 15.0), ("South", 20.0)]
    assert message.attachments.references == ["A1:ZZ99999"]

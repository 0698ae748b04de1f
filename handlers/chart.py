"""Chart handler: turns the selection into a renderer-independent chart spec"""

import logging
from typing import Final, Optional, Sequence

from config import settings
from core.enums import ChartType, Intent
from core.exceptions import NoNumericData, NoSelection
from core.models import CellRange, ChartPoint, ChartSpec, ChatMessage, SelectionContext
from grid.address import column_name
from grid.evaluator import is_sentinel
from grid.ranges import bounds
from grid.store import used_range
from grid.values import to_number
from utils.fuzzy import match_header
from utils.synonyms import normalize_text, tokenize

from .base import BaseHandler, is_distance_header, looks_like_header

logger = logging.getLogger(__name__)

OTHER_LABEL: Final[str] = "Other"

CHART_TYPE_ALIASES: Final[dict[str, ChartType]] = {
    "bar": ChartType.BAR,
    "column": ChartType.BAR,
    "line": ChartType.LINE,
    "pie": ChartType.PIE,
    "area": ChartType.AREA,
    "scatter": ChartType.SCATTER,
    "doughnut": ChartType.DOUGHNUT,
    "donut": ChartType.DOUGHNUT,
}


def detect_chart_type(query: str) -> ChartType:
    """Explicit chart word first, then cue words, bar otherwise."""
    for token in tokenize(query):
        if token in CHART_TYPE_ALIASES:
            return CHART_TYPE_ALIASES[token]
    cues = set(normalize_text(query))
    if "trend" in cues:
        return ChartType.LINE
    if "distribution" in cues:
        return ChartType.PIE
    return ChartType.BAR


def chart_title(query: str, value_label: str, category_label: str) -> str:
    cues = set(normalize_text(query))
    if "distribution" in cues:
        return f"Distribution of {value_label} by {category_label}"
    if "compare" in cues:
        return f"Comparison of {value_label} across {category_label}"
    if "trend" in cues:
        return f"{value_label} trend by {category_label}"
    return f"{value_label} by {category_label}"


def classify_columns(data: list[list[str]], width: int, threshold: float) -> list[Optional[bool]]:
    """Per column: True numeric, False textual, None when empty."""
    kinds: list[Optional[bool]] = []
    for index in range(width):
        filled = [
            row[index] for row in data
            if index < len(row) and row[index].strip() and not is_sentinel(row[index])
        ]
        if not filled:
            kinds.append(None)
            continue
        numeric = sum(1 for value in filled if to_number(value) is not None)
        kinds.append(numeric / len(filled) >= threshold)
    return kinds


def merge_points(pairs: list[tuple[str, float]], average: bool) -> list[ChartPoint]:
    """Merge duplicate labels by summing, or averaging for distance data."""
    totals: dict[str, float] = {}
    counts: dict[str, int] = {}
    for label, value in pairs:
        totals[label] = totals.get(label, 0.0) + value
        counts[label] = counts.get(label, 0) + 1
    return [
        ChartPoint(label=label, value=total / counts[label] if average else total)
        for label, total in totals.items()
    ]


def cap_points(points: list[ChartPoint], limit: int) -> list[ChartPoint]:
    """Keep the largest limit-1 categories and roll the rest into "Other"."""
    if len(points) <= limit:
        return points
    ranked = sorted(points, key=lambda point: point.value, reverse=True)
    kept = ranked[:limit - 1]
    rest = sum(point.value for point in ranked[limit - 1:])
    return kept + [ChartPoint(label=OTHER_LABEL, value=rest)]


class ChartHandler(BaseHandler):
    """Builds a ChartSpec from the selection (or the used range)"""

    def __init__(
        self,
        max_categories: Optional[int] = None,
        numeric_threshold: Optional[float] = None
    ):
        self.max_categories = max_categories or settings.CHART_MAX_CATEGORIES
        self.numeric_threshold = numeric_threshold or settings.NUMERIC_COLUMN_THRESHOLD

    @property
    def intent(self) -> Intent:
        return Intent.CHART

    def _target_range(self, context: SelectionContext) -> CellRange:
        if context.range is not None:
            return context.range
        fallback = used_range(context.active_sheet)
        if fallback is None:
            raise NoSelection("Please select a data range to chart")
        return fallback

    async def handle(
        self,
        query: str,
        context: SelectionContext,
        transcript: Sequence[ChatMessage] = ()
    ) -> ChatMessage:
        cell_range = self._target_range(context)
        data_range = self.data_range(context, cell_range)
        rows = self.selected_values(context, data_range)
        box = bounds(data_range)
        width = box.max_col - box.min_col + 1

        if len(rows) >= 2 and looks_like_header(rows[0]):
            headers = [value.strip() or column_name(box.min_col + i) for i, value in enumerate(rows[0])]
            data = rows[1:]
            first_data_row = box.min_row + 1
        else:
            headers = [f"Column {column_name(box.min_col + i)}" for i in range(width)]
            data = rows
            first_data_row = box.min_row

        kinds = classify_columns(data, width, self.numeric_threshold)
        numeric = [i for i, kind in enumerate(kinds) if kind is True]
        textual = [i for i, kind in enumerate(kinds) if kind is False]
        if not numeric:
            raise NoNumericData("No numeric column to chart in the selection")

        value_index = numeric[0]
        category_index = textual[0] if textual else None

        mentioned = match_header(tokenize(query), headers)
        if mentioned is not None:
            index = headers.index(mentioned)
            if index in numeric:
                value_index = index
            elif index in textual:
                category_index = index
            logger.debug("Query mentions header %r", mentioned)

        value_label = headers[value_index]
        category_label = headers[category_index] if category_index is not None else "Row"

        pairs: list[tuple[str, float]] = []
        for offset, row in enumerate(data):
            value = to_number(row[value_index]) if value_index < len(row) else None
            if value is None:
                continue
            if category_index is None:
                label = f"Row {first_data_row + offset}"
            else:
                label = row[category_index].strip() if category_index < len(row) else ""
                if not label:
                    continue
            pairs.append((label, value))

        if not pairs:
            raise NoNumericData("No numeric values to chart in the selection")

        points = merge_points(pairs, average=is_distance_header(value_label))
        points = cap_points(points, self.max_categories)
        chart_type = detect_chart_type(query)

        spec = ChartSpec(
            title=chart_title(query, value_label, category_label),
            category_axis_label=category_label,
            value_axis_label=value_label,
            points=points,
            suggested_type=chart_type,
        )
        return self.reply(
            f"Here's a {chart_type.value} chart of {value_label} by {category_label}",
            cell_range,
            chart_spec=spec,
        )

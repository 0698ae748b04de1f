"""Calculation handler: sum / average / max / min / count over the selection"""

import logging
from typing import Optional, Sequence

from core.enums import Aggregate, Intent
from core.exceptions import NoNumericData, UnsupportedIntentInput
from core.models import CalculationResult, ChatMessage, SelectionContext
from grid.ranges import to_range_string
from grid.values import format_number, to_number
from utils.synonyms import normalize_text

from .base import BaseHandler, is_distance_header, looks_like_header

logger = logging.getLogger(__name__)

# Checked in order; the first keyword present picks the operator
OPERATOR_KEYWORDS: list[tuple[str, Aggregate]] = [
    ("sum", Aggregate.SUM),
    ("average", Aggregate.AVERAGE),
    ("max", Aggregate.MAX),
    ("min", Aggregate.MIN),
    ("count", Aggregate.COUNT),
]


def detect_operation(query: str) -> Optional[Aggregate]:
    tokens = set(normalize_text(query))
    for keyword, operation in OPERATOR_KEYWORDS:
        if keyword in tokens:
            return operation
    return None


def aggregate(operation: Aggregate, values: list[float]) -> float:
    if not values:
        raise NoNumericData()
    if operation == Aggregate.SUM:
        return sum(values)
    if operation == Aggregate.AVERAGE:
        return sum(values) / len(values)
    if operation == Aggregate.MAX:
        return max(values)
    if operation == Aggregate.MIN:
        return min(values)
    return float(len(values))


def distance_group_averages(rows: list[list[str]]) -> Optional[tuple[str, list[float]]]:
    """Per-label averages for distance-like tables with repeated labels.

    Applies when the header row names a distance metric (distance / miles / km)
    in a column after the first and the first column repeats a label. Returns
    the label header and one average per label, in first-seen order.
    """
    if len(rows) < 2 or not looks_like_header(rows[0]):
        return None
    header, data = rows[0], rows[1:]
    metric = next(
        (index for index, name in enumerate(header) if index > 0 and is_distance_header(name)),
        None,
    )
    if metric is None:
        return None

    labels = [row[0].strip() for row in data if row and row[0].strip()]
    if len(set(labels)) == len(labels):
        return None

    groups: dict[str, list[float]] = {}
    for row in data:
        if not row or metric >= len(row):
            continue
        label = row[0].strip()
        value = to_number(row[metric])
        if not label or value is None:
            continue
        groups.setdefault(label, []).append(value)

    return header[0], [sum(values) / len(values) for values in groups.values()]


class CalculationHandler(BaseHandler):
    """Aggregates the numeric values of the selected range"""

    @property
    def intent(self) -> Intent:
        return Intent.CALCULATION

    async def handle(
        self,
        query: str,
        context: SelectionContext,
        transcript: Sequence[ChatMessage] = ()
    ) -> ChatMessage:
        cell_range = self.require_range(context)
        operation = detect_operation(query)
        if operation is None:
            raise UnsupportedIntentInput(
                "I could not understand the calculation you want to perform",
                intent=self.intent.value,
            )

        rows = self.selected_values(context, cell_range)
        grouped = distance_group_averages(rows)
        note = ""
        if grouped is not None:
            label_header, values = grouped
            note = f" (averaged per {label_header or 'label'} first)"
            logger.info("Distance data: aggregating %d group averages", len(values))
        else:
            values = [
                number
                for row in rows
                for number in (to_number(value) for value in row)
                if number is not None
            ]

        if not values:
            raise NoNumericData()

        result = aggregate(operation, values)
        reference = to_range_string(cell_range)
        return self.reply(
            f"The {operation.label} of {reference} is {format_number(result)}{note}",
            cell_range,
            calculation=CalculationResult(operation=operation, value=result, count=len(values)),
        )

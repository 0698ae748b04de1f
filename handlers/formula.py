"""Formula suggestion handler"""

from typing import Sequence

from core.enums import Intent, MessageRole
from core.models import ChatMessage, FormulaTarget, SelectionContext
from grid.address import format_address
from grid.ranges import bottom_right, to_range_string
from utils.synonyms import normalize_text

from .base import BaseHandler

# Keyword -> template, checked in order; SUM when nothing matches
FORMULA_TEMPLATES: list[tuple[tuple[str, ...], str]] = [
    (("sum",), "=SUM({range})"),
    (("average",), "=AVERAGE({range})"),
    (("count",), "=COUNT({range})"),
    (("min",), "=MIN({range})"),
    (("max",), "=MAX({range})"),
    (("if", "conditional", "condition"), '=IF({range}>0,"Positive","Negative")'),
]
DEFAULT_TEMPLATE = "=SUM({range})"


def suggest_formula(query: str, range_text: str) -> str:
    tokens = set(normalize_text(query))
    for keywords, template in FORMULA_TEMPLATES:
        if any(keyword in tokens for keyword in keywords):
            return template.format(range=range_text)
    return DEFAULT_TEMPLATE.format(range=range_text)


class FormulaHandler(BaseHandler):
    """Suggests a formula over the selection, applied to its bottom-right cell"""

    @property
    def intent(self) -> Intent:
        return Intent.FORMULA

    async def handle(
        self,
        query: str,
        context: SelectionContext,
        transcript: Sequence[ChatMessage] = ()
    ) -> ChatMessage:
        if context.range is None:
            return ChatMessage(
                role=MessageRole.ASSISTANT,
                content="Please select the cells the formula should cover first.",
                intent=self.intent,
            )

        range_text = to_range_string(context.range)
        formula = suggest_formula(query, range_text)
        target = format_address(bottom_right(context.range))
        return self.reply(
            f"Suggested formula: {formula} (apply to write it into {target})",
            context.range,
            formula=formula,
            formula_target=FormulaTarget(sheet_id=context.active_sheet.id, address=target),
        )

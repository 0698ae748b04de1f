"""Shared plumbing for query handlers"""

from typing import Optional, Sequence

from core.enums import Intent, MessageRole
from core.exceptions import NoSelection
from core.interfaces import QueryHandler
from core.models import CellRange, ChatAttachments, ChatMessage, SelectionContext
from grid.evaluator import is_sentinel, resolve_range
from grid.ranges import to_range_string
from grid.store import clip_to_used
from grid.values import is_numeric

DISTANCE_MARKERS = ("distance", "miles", "km")


def is_distance_header(header: str) -> bool:
    """Header naming a distance-like metric (distance / miles / km)"""
    lowered = str(header).lower()
    return any(marker in lowered for marker in DISTANCE_MARKERS)


def looks_like_header(row: list[str]) -> bool:
    """First row is a header when it has text and no numbers"""
    filled = [value for value in row if value.strip()]
    return bool(filled) and not any(is_numeric(value) or is_sentinel(value) for value in filled)


class BaseHandler(QueryHandler):
    """Query handler with selection helpers"""

    def require_range(self, context: SelectionContext, message: Optional[str] = None) -> CellRange:
        if context.range is None:
            raise NoSelection(message) if message else NoSelection()
        return context.range

    def data_range(self, context: SelectionContext, cell_range: CellRange) -> CellRange:
        """Selection trimmed to the filled part of the active sheet"""
        return clip_to_used(context.active_sheet, cell_range)

    def selected_values(self, context: SelectionContext, cell_range: CellRange) -> list[list[str]]:
        """Display values of the range up to the last filled cell, formulas already resolved"""
        return resolve_range(context.active_sheet, self.data_range(context, cell_range))

    def reply(
        self,
        content: str,
        cell_range: Optional[CellRange] = None,
        **attachments
    ) -> ChatMessage:
        references = [to_range_string(cell_range)] if cell_range is not None else []
        return ChatMessage(
            role=MessageRole.ASSISTANT,
            content=content,
            intent=self.intent,
            attachments=ChatAttachments(references=references, **attachments),
        )


class ComingSoonHandler(BaseHandler):
    """Placeholder reply for intents without a backend yet"""

    feature: str = "This feature"
    _intent: Intent = Intent.GENERAL

    @property
    def intent(self) -> Intent:
        return self._intent

    async def handle(
        self,
        query: str,
        context: SelectionContext,
        transcript: Sequence[ChatMessage] = ()
    ) -> ChatMessage:
        return self.reply(f'{self.feature} for "{query.strip()}" coming soon!')

"""Free-form questions answered by the completion service"""

from typing import Optional, Sequence

from core.enums import Intent
from core.exceptions import LLMError
from core.interfaces import CompletionService
from core.models import ChatMessage, SelectionContext

from .base import BaseHandler


class GeneralHandler(BaseHandler):
    """Fallback for anything the keyword rules did not route"""

    def __init__(self, completion: Optional[CompletionService] = None):
        self._completion = completion

    @property
    def intent(self) -> Intent:
        return Intent.GENERAL

    @property
    def completion(self) -> CompletionService:
        if self._completion is None:
            from llm.assistant import SpreadsheetAssistant
            self._completion = SpreadsheetAssistant()
        return self._completion

    async def handle(
        self,
        query: str,
        context: SelectionContext,
        transcript: Sequence[ChatMessage] = ()
    ) -> ChatMessage:
        text = await self.completion.complete(query, list(transcript), context)
        if not text:
            raise LLMError("The assistant returned an empty response")
        return self.reply(text, context.range)

"""Completion service backed by the LLM client"""

from typing import Dict, List, Optional

from core.enums import MessageRole
from core.interfaces import CompletionService
from core.models import ChatMessage, SelectionContext

from .client import LLMClient
from .prompts import SpreadsheetAssistantPrompt, build_sheet_context


def to_history(transcript: List[ChatMessage]) -> List[Dict[str, str]]:
    """Map transcript entries to provider chat roles, dropping errors and system notes"""
    history = []
    for message in transcript:
        if message.role == MessageRole.USER:
            history.append({"role": "user", "content": message.content})
        elif message.role == MessageRole.ASSISTANT:
            history.append({"role": "assistant", "content": message.content})
    return history


class SpreadsheetAssistant(CompletionService):
    """Answers free-form questions with the sheet as system context"""

    def __init__(self, client: Optional[LLMClient] = None):
        self._client = client
        self.prompt_builder = SpreadsheetAssistantPrompt()

    @property
    def client(self) -> LLMClient:
        # Created on first use so a missing API key only fails general chat
        if self._client is None:
            self._client = LLMClient()
        return self._client

    async def complete(
        self,
        prompt: str,
        transcript: List[ChatMessage],
        context: SelectionContext
    ) -> str:
        system = self.prompt_builder.build_prompt(build_sheet_context(context))
        return await self.client.complete(
            prompt,
            system=system,
            history=to_history(transcript),
        )

"""Chat orchestrator: conversation state, selection and intent dispatch"""

import logging
import re
from typing import Dict, Optional

from config import settings
from core.enums import Intent, MessageRole
from core.exceptions import CognisheetError, LLMError, NoSelection, UnsupportedIntentInput
from core.interfaces import CompletionService, QueryHandler
from core.models import (
    Address, CellRange, ChatAttachments, ChatMessage, SelectionContext, Sheet
)
from grid.ranges import bottom_right, make_range, parse_range, select_all, to_range_string
from grid.store import Workbook, ensure_capacity, set_cell
from handlers import default_handlers

from .classifier import IntentClassifier

logger = logging.getLogger(__name__)

RANGE_PREFIX = re.compile(r"^([A-Z]+[0-9]+:[A-Z]+[0-9]+)\s+", re.IGNORECASE)
BUSY_MESSAGE = "Please wait for the current response to finish"


def split_range_prefix(text: str) -> tuple[Optional[CellRange], str]:
    """Leading "A1:B5 " selects that range for the turn; returns (range, rest)."""
    match = RANGE_PREFIX.match(text)
    if not match:
        return None, text
    try:
        cell_range = parse_range(match.group(1))
    except CognisheetError:
        return None, text
    return cell_range, text[match.end():].strip()


class ChatOrchestrator:
    """Owns the transcript and the current selection of one workbook"""

    def __init__(
        self,
        workbook: Workbook,
        completion: Optional[CompletionService] = None,
        classifier: Optional[IntentClassifier] = None,
        handlers: Optional[Dict[Intent, QueryHandler]] = None
    ):
        self.workbook = workbook
        self.classifier = classifier or IntentClassifier()
        self.handlers = handlers if handlers is not None else default_handlers(completion)
        self.transcript: list[ChatMessage] = []
        self.selection: Optional[CellRange] = None
        self.is_processing = False
        self._stop_requested = False

    # ─────────────────────────────────────────────────────────
    # Selection
    # ─────────────────────────────────────────────────────────

    @property
    def active_sheet(self) -> Sheet:
        return self.workbook.active_sheet

    def select(self, anchor: Address | str, focus: Address | str | None = None) -> CellRange:
        self.selection = make_range(anchor, focus)
        ensure_capacity(self.active_sheet, bottom_right(self.selection))
        return self.selection

    def select_range(self, text: str) -> CellRange:
        cell_range = parse_range(text)
        return self.select(cell_range.anchor, cell_range.focus)

    def select_all(self) -> CellRange:
        self.selection = select_all(self.active_sheet)
        return self.selection

    def clear_selection(self) -> None:
        self.selection = None

    def switch_sheet(self, sheet_id: str) -> Sheet:
        """Activate a tab; the selection belongs to the previous one."""
        sheet = self.workbook.set_active(sheet_id)
        self.selection = None
        return sheet

    def range_reference(self) -> str:
        """Current range as text for insertion into the chat input"""
        if self.selection is None:
            raise NoSelection()
        return to_range_string(self.selection)

    def context(self, cell_range: Optional[CellRange] = None) -> SelectionContext:
        """Handler context; cell_range overrides the selection for one turn"""
        return SelectionContext(
            range=cell_range if cell_range is not None else self.selection,
            active_sheet=self.active_sheet,
        )

    # ─────────────────────────────────────────────────────────
    # Conversation
    # ─────────────────────────────────────────────────────────

    def history(self) -> list[ChatMessage]:
        """Previous user/assistant turns handed to the handlers"""
        turns = [
            message for message in self.transcript
            if message.role in (MessageRole.USER, MessageRole.ASSISTANT)
        ]
        limit = settings.CHAT_HISTORY_TURNS
        return turns[-limit:] if limit > 0 else []

    async def send_message(self, text: Optional[str]) -> Optional[ChatMessage]:
        """
        Route one user message to its handler

        Returns:
            The reply appended to the transcript, or None for blank input
            and for replies discarded after stop()
        """
        if text is None or not text.strip():
            return None
        if self.is_processing:
            return self._append(self._error_message(BUSY_MESSAGE))

        content = text.strip()
        prefix, query = split_range_prefix(content)
        if prefix is not None:
            logger.debug("Range prefix %s used for this turn", to_range_string(prefix))

        history = self.history()
        references = [to_range_string(prefix)] if prefix is not None else []
        self._append(ChatMessage(
            role=MessageRole.USER,
            content=content,
            attachments=ChatAttachments(references=references) if references else None,
        ))

        self.is_processing = True
        self._stop_requested = False
        try:
            reply = await self._dispatch(query or content, history, prefix)
        finally:
            self.is_processing = False

        if self._stop_requested:
            self._stop_requested = False
            logger.info("Discarded response that arrived after stop")
            return None
        return self._append(reply)

    async def _dispatch(
        self,
        query: str,
        history: list[ChatMessage],
        cell_range: Optional[CellRange] = None
    ) -> ChatMessage:
        match = self.classifier.classify(query)
        handler = self.handlers.get(match.intent) or self.handlers.get(Intent.GENERAL)
        if handler is None:
            return self._error_message(f"No handler for {match.intent.value} requests")

        logger.info("Routing message to %s handler", handler.intent.value)
        try:
            return await handler.handle(query, self.context(cell_range), history)
        except LLMError as e:
            logger.error("Completion failed: %s", e)
            return self._error_message(f"AI Error: {e}", match.intent)
        except CognisheetError as e:
            logger.warning("%s handler failed: %s", handler.intent.value, e)
            return self._error_message(str(e), match.intent)

    def stop(self) -> bool:
        """Drop the in-flight reply when it arrives; the request itself keeps running."""
        if not self.is_processing:
            return False
        self._stop_requested = True
        return True

    def clear(self) -> None:
        self.transcript = []
        self._stop_requested = self.is_processing

    # ─────────────────────────────────────────────────────────
    # Write-back
    # ─────────────────────────────────────────────────────────

    def apply_formula(self, message: ChatMessage) -> str:
        """Write a suggested formula into its target cell; returns the address"""
        attachments = message.attachments
        if attachments is None or not attachments.formula or attachments.formula_target is None:
            raise UnsupportedIntentInput("This message has no formula to apply", intent=Intent.FORMULA.value)

        target = attachments.formula_target
        sheet = self.workbook.get_sheet(target.sheet_id)
        set_cell(sheet, target.address, {"raw": attachments.formula})
        ensure_capacity(sheet, target.address)
        logger.info("Applied %s to %s!%s", attachments.formula, sheet.id, target.address)
        return target.address

    def import_file(self, file_path: str) -> ChatMessage:
        """Import a CSV / Excel file as new tabs and report it in the transcript"""
        from parsers.importer import import_file

        try:
            sheets = import_file(file_path, self.workbook)
        except CognisheetError as e:
            logger.warning("Import of %s failed: %s", file_path, e)
            return self._append(self._error_message(f"Import failed: {e}"))

        self.selection = None
        names = ", ".join(sheet.name for sheet in sheets)
        return self._append(ChatMessage(
            role=MessageRole.SYSTEM,
            content=f"Imported {len(sheets)} sheet(s): {names}",
        ))

    def _append(self, message: ChatMessage) -> ChatMessage:
        self.transcript.append(message)
        return message

    def _error_message(self, content: str, intent: Optional[Intent] = None) -> ChatMessage:
        return ChatMessage(role=MessageRole.ERROR, content=content, intent=intent)

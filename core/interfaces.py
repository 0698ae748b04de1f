"""Abstract base classes for Cognisheet components"""

from abc import ABC, abstractmethod
from typing import TYPE_CHECKING, Sequence

if TYPE_CHECKING:
    from .enums import Intent
    from .models import ChatMessage, ImportResult, SelectionContext


class QueryHandler(ABC):
    """Fulfils one chat intent against the current selection"""

    @property
    @abstractmethod
    def intent(self) -> "Intent":
        """Intent this handler serves"""
        pass

    @abstractmethod
    async def handle(
        self,
        query: str,
        context: "SelectionContext",
        transcript: Sequence["ChatMessage"] = ()
    ) -> "ChatMessage":
        """Answer the query; raise a CognisheetError on failure"""
        pass


class CompletionService(ABC):
    """Opaque text-in/text-out AI backend"""

    @abstractmethod
    async def complete(
        self,
        prompt: str,
        transcript: list["ChatMessage"],
        context: "SelectionContext"
    ) -> str:
        """Return the assistant reply for prompt"""
        pass


class FileParser(ABC):
    """Abstract base class for file parsers"""

    @property
    @abstractmethod
    def supported_extensions(self) -> list[str]:
        """List of supported file extensions"""
        pass

    @abstractmethod
    def parse(self, file_path: str) -> "ImportResult":
        """Parse file and return ImportResult"""
        pass

    @abstractmethod
    def detect_encoding(self, file_path: str) -> str:
        """Detect file encoding"""
        pass


class LLMTask(ABC):
    """Abstract base class for LLM-powered tasks"""

    @property
    @abstractmethod
    def prompt_template(self) -> str:
        """Prompt template for this task"""
        pass

    @abstractmethod
    def build_prompt(self, context: dict) -> str:
        """Build prompt from context"""
        pass

"""LLM integration module"""

from .client import LLMClient
from .prompts import SpreadsheetAssistantPrompt, build_sheet_context
from .assistant import SpreadsheetAssistant

__all__ = [
    "LLMClient",
    "SpreadsheetAssistantPrompt",
    "SpreadsheetAssistant",
    "build_sheet_context",
]

"""Core abstractions for Cognisheet"""

from .models import *
from .enums import *
from .exceptions import *
from .interfaces import *

__all__ = [
    # Models
    "Address",
    "Cell",
    "CellPatch",
    "Sheet",
    "RangeBounds",
    "CellRange",
    "SelectionContext",
    "WorkbookSnapshot",
    "IntentMatch",
    "ChartPoint",
    "ChartSpec",
    "CalculationResult",
    "FormulaTarget",
    "ChatAttachments",
    "ChatMessage",
    "ImportedSheet",
    "ImportResult",
    # Enums
    "FileType",
    "Alignment",
    "Sentinel",
    "Intent",
    "MessageRole",
    "Aggregate",
    "ChartType",
    "LLMProvider",
    # Exceptions
    "CognisheetError",
    "MalformedAddress",
    "SheetNotFound",
    "NoSelection",
    "NoNumericData",
    "UnsupportedIntentInput",
    "LLMError",
    "FileParseError",
    "PersistenceError",
    # Interfaces
    "QueryHandler",
    "CompletionService",
    "FileParser",
    "LLMTask",
]

"""Core enumerations for Cognisheet"""

from enum import Enum


class FileType(str, Enum):
    """Supported import file types"""
    EXCEL_XLSX = "xlsx"
    EXCEL_XLS = "xls"
    CSV = "csv"


class Alignment(str, Enum):
    """Horizontal text alignment of a cell"""
    LEFT = "left"
    CENTER = "center"
    RIGHT = "right"


class Sentinel(str, Enum):
    """Display values returned in place of a failed formula"""
    ERROR = "#ERROR"
    CIRCULAR = "#CIRCULAR"
    NESTED = "#NESTED"


class Intent(str, Enum):
    """Classified purpose of a chat message"""
    CHART = "chart"
    CALCULATION = "calculation"
    FORMULA = "formula"
    WEB_RESEARCH = "web_research"
    DOCUMENT_EXTRACTION = "document_extraction"
    GENERAL = "general"


class MessageRole(str, Enum):
    """Author of a chat message"""
    USER = "user"
    ASSISTANT = "assistant"
    SYSTEM = "system"
    ERROR = "error"


class Aggregate(str, Enum):
    """Aggregate operators understood by the calculation handler"""
    SUM = "sum"
    AVERAGE = "average"
    MAX = "max"
    MIN = "min"
    COUNT = "count"

    @property
    def label(self) -> str:
        """Wording used in chat replies"""
        return {
            Aggregate.MAX: "maximum",
            Aggregate.MIN: "minimum",
        }.get(self, self.value)


class ChartType(str, Enum):
    """Chart types a chart spec may suggest"""
    BAR = "bar"
    LINE = "line"
    PIE = "pie"
    AREA = "area"
    SCATTER = "scatter"
    DOUGHNUT = "doughnut"


class LLMProvider(str, Enum):
    """Supported LLM providers"""
    ANTHROPIC = "anthropic"
    OPENAI = "openai"
    GEMINI = "gemini"

"""Core data models for Cognisheet"""

from pydantic import BaseModel, ConfigDict, Field
from typing import Optional
from datetime import datetime
from .enums import (
    Alignment, Aggregate, ChartType, FileType, Intent, MessageRole
)


# ─────────────────────────────────────────────────────────────
# Grid
# ─────────────────────────────────────────────────────────────

class Address(BaseModel):
    """Zero-based column, one-based row"""
    model_config = ConfigDict(frozen=True)

    column: int = Field(ge=0)
    row: int = Field(ge=1)

    def __str__(self) -> str:
        # Imported here to avoid circular dependency
        from grid.address import format_address
        return format_address(self)


class Cell(BaseModel):
    """Literal user input plus formatting; display value is derived on read"""
    raw: str = ""
    is_bold: bool = False
    is_italic: bool = False
    align: Alignment = Alignment.LEFT
    wrap: bool = False


class CellPatch(BaseModel):
    """Partial update merged into a cell; unset fields are left alone"""
    raw: Optional[str] = None
    is_bold: Optional[bool] = None
    is_italic: Optional[bool] = None
    align: Optional[Alignment] = None
    wrap: Optional[bool] = None


class Sheet(BaseModel):
    """One tab's sparse grid of cells"""
    id: str
    name: str
    row_count: int = Field(ge=1)
    column_count: int = Field(ge=1)
    cells: dict[str, Cell] = {}  # "A1" -> Cell


class RangeBounds(BaseModel):
    """Normalized rectangle, zero-based columns and one-based rows"""
    model_config = ConfigDict(frozen=True)

    min_col: int
    max_col: int
    min_row: int
    max_row: int


class CellRange(BaseModel):
    """Anchor/focus pair as produced by a drag"""
    model_config = ConfigDict(frozen=True)

    anchor: Address
    focus: Address

    def __str__(self) -> str:
        from grid.ranges import to_range_string
        return to_range_string(self)


class SelectionContext(BaseModel):
    """The only grid state the chat layer reads"""
    range: Optional[CellRange] = None
    active_sheet: Sheet


class WorkbookSnapshot(BaseModel):
    """Serializable view of every sheet tab"""
    sheets: list[Sheet] = []
    active_sheet_id: Optional[str] = None


# ─────────────────────────────────────────────────────────────
# Chat
# ─────────────────────────────────────────────────────────────

class IntentMatch(BaseModel):
    """Classifier output"""
    intent: Intent
    phrase: Optional[str] = None  # Keyword that triggered the rule


class ChartPoint(BaseModel):
    label: str
    value: float


class ChartSpec(BaseModel):
    """Renderer-independent chart description"""
    title: str
    category_axis_label: str
    value_axis_label: str
    points: list[ChartPoint] = []
    suggested_type: ChartType = ChartType.BAR


class CalculationResult(BaseModel):
    operation: Aggregate
    value: float
    count: int = 0  # Numeric values that took part


class FormulaTarget(BaseModel):
    """Cell that receives a suggested formula when applied"""
    sheet_id: str
    address: str


class ChatAttachments(BaseModel):
    formula: Optional[str] = None
    formula_target: Optional[FormulaTarget] = None
    chart_spec: Optional[ChartSpec] = None
    calculation: Optional[CalculationResult] = None
    references: list[str] = []


class ChatMessage(BaseModel):
    """Single transcript entry"""
    role: MessageRole
    content: str
    intent: Optional[Intent] = None
    attachments: Optional[ChatAttachments] = None
    created_at: datetime = Field(default_factory=datetime.now)


# ─────────────────────────────────────────────────────────────
# Import
# ─────────────────────────────────────────────────────────────

class ImportedSheet(BaseModel):
    """Rows of one parsed worksheet"""
    name: str
    rows: list[list[str]] = []


class ImportResult(BaseModel):
    """Parsed file ready to become sheets"""
    file_path: str
    file_name: str
    file_type: FileType
    file_size_bytes: int
    encoding: Optional[str] = None
    sheets: list[ImportedSheet] = []

"""LLM prompt templates"""

from typing import Any, Dict, List

from config import settings
from core.interfaces import LLMTask
from core.models import SelectionContext
from grid.evaluator import resolve_range
from grid.ranges import to_range_string
from grid.store import used_range


def build_sheet_context(context: SelectionContext) -> Dict[str, Any]:
    """
    Collect what the assistant prompt needs from the grid

    The first row of the used range is treated as headers.

    Args:
        context: Current selection and active sheet

    Returns:
        Dict with sheet_name, headers, rows, total_rows and selection
    """
    sheet = context.active_sheet
    area = used_range(sheet)
    rows: List[List[str]] = resolve_range(sheet, area) if area is not None else []
    headers = rows[0] if rows else []
    return {
        "sheet_name": sheet.name,
        "headers": headers,
        "rows": rows[1:],
        "total_rows": max(len(rows) - 1, 0),
        "selection": to_range_string(context.range) if context.range is not None else None,
    }


class SpreadsheetAssistantPrompt(LLMTask):
    """System prompt for free-form questions about the sheet"""

    @property
    def prompt_template(self) -> str:
        return """You are an AI assistant specialized in analyzing spreadsheet data in Cognisheet.
Your primary goal is to help users understand their data and extract insights.

{spreadsheet_context}

Guidelines for your responses:
1. Always analyze the actual spreadsheet data provided to answer questions.
2. Be specific and reference actual values from the data in your answers.
3. When the user asks for calculations or analysis, provide both the answer and the method.
4. If the user asks about specific information (like distances, names, values), look for it in the data.
5. If you're unsure about something or the data doesn't contain the information, be honest about it.
6. Keep responses concise but informative."""

    @property
    def data_template(self) -> str:
        return """You are analyzing the sheet "{sheet_name}" with the following data:

Headers: {headers}
Total rows: {total_rows}
{selection}
Here's the data in table format:

{table}

IMPORTANT: Base your answers directly on this data. When providing calculations or
analysis, show your work and reference specific cells or columns. When appropriate,
wrap code in markdown code blocks using triple backticks."""

    @property
    def empty_template(self) -> str:
        return """No spreadsheet data is currently available.
Please ask the user to upload a spreadsheet file or select data from their spreadsheet."""

    def build_prompt(self, context: Dict[str, Any]) -> str:
        headers = [str(h) for h in context.get("headers", [])]
        if not any(h.strip() for h in headers):
            return self.prompt_template.format(spreadsheet_context=self.empty_template)

        rows = context.get("rows", [])
        limit = context.get("preview_rows", settings.CONTEXT_PREVIEW_ROWS)
        total = context.get("total_rows", len(rows))

        lines = [" | ".join(headers), " | ".join("---" for _ in headers)]
        for row in rows[:limit]:
            lines.append(" | ".join(str(value or "") for value in row))
        if total > limit:
            lines.append(f"... and {total - limit} more rows")

        selection = context.get("selection")
        data = self.data_template.format(
            sheet_name=context.get("sheet_name", "Sheet"),
            headers=", ".join(headers),
            total_rows=total,
            selection=f"Current selection: {selection}\n" if selection else "",
            table="\n".join(lines),
        )
        return self.prompt_template.format(spreadsheet_context=data)

"""Console rendering of sheets and chat messages"""

from typing import List, Optional

from core.enums import MessageRole
from core.models import Address, CellRange, ChartSpec, ChatMessage, Sheet
from grid.address import column_name
from grid.evaluator import resolve_cell
from grid.ranges import contains, select_all
from grid.store import used_range
from grid.values import format_number

MIN_ROWS = 10
MIN_COLUMNS = 5
COLUMN_WIDTH = 12
BAR_WIDTH = 30

ROLE_MARKERS = {
    MessageRole.USER: "You",
    MessageRole.ASSISTANT: "AI",
    MessageRole.SYSTEM: "[i]",
    MessageRole.ERROR: "[✗]",
}


def _fit(text: str, width: int) -> str:
    if len(text) > width:
        return text[:width - 1] + "…"
    return text.ljust(width)


def render_sheet(sheet: Sheet, selection: Optional[CellRange] = None) -> str:
    """Resolved values of the used part of the sheet as a fixed-width table"""
    area = used_range(sheet)
    full = select_all(sheet)
    last_row = max(area.focus.row if area else 0, MIN_ROWS)
    last_col = max(area.focus.column + 1 if area else 0, MIN_COLUMNS)
    last_row = min(last_row, full.focus.row)
    last_col = min(last_col, full.focus.column + 1)

    lines = [f"{sheet.name} ({sheet.row_count} x {sheet.column_count})"]
    header = "".ljust(5) + "".join(_fit(column_name(i), COLUMN_WIDTH) for i in range(last_col))
    lines.append(header.rstrip())
    for row in range(1, last_row + 1):
        cells = []
        for column in range(last_col):
            address = Address(column=column, row=row)
            value = resolve_cell(sheet, address)
            if selection is not None and contains(selection, address):
                value = f"[{value}]"
            cells.append(_fit(value, COLUMN_WIDTH))
        lines.append((str(row).ljust(5) + "".join(cells)).rstrip())
    return "\n".join(lines)


def render_chart(spec: ChartSpec) -> str:
    """Horizontal text bars, one per point"""
    lines = [f"{spec.title} [{spec.suggested_type.value}]"]
    if not spec.points:
        return lines[0]
    label_width = max(len(point.label) for point in spec.points)
    peak = max(abs(point.value) for point in spec.points) or 1.0
    for point in spec.points:
        bar = "█" * max(int(round(abs(point.value) / peak * BAR_WIDTH)), 1)
        lines.append(f"  {point.label.ljust(label_width)} {bar} {format_number(point.value)}")
    lines.append(f"  ({spec.category_axis_label} / {spec.value_axis_label})")
    return "\n".join(lines)


def render_message(message: ChatMessage) -> str:
    marker = ROLE_MARKERS.get(message.role, message.role.value)
    lines: List[str] = [f"{marker}: {message.content}"]
    attachments = message.attachments
    if attachments is not None:
        if attachments.chart_spec is not None:
            lines.append(render_chart(attachments.chart_spec))
        if attachments.formula and attachments.formula_target is not None:
            lines.append(
                f"  → {attachments.formula} "
                f"(:apply writes it to {attachments.formula_target.address})"
            )
    return "\n".join(lines)

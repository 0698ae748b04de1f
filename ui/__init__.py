"""Console user interface"""

from .render import render_chart, render_message, render_sheet
from .session import ConsoleSession

__all__ = ["render_chart", "render_message", "render_sheet", "ConsoleSession"]

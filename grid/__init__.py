"""Grid model: addresses, ranges, cell storage and formula evaluation"""

from .address import column_index, column_name, format_address, parse_address
from .evaluator import evaluate, is_sentinel, resolve_cell, resolve_range
from .ranges import make_range, normalize, parse_range, select_all, to_range_string
from .store import Workbook, ensure_capacity, get_cell, set_cell, used_range

__all__ = [
    "column_index",
    "column_name",
    "format_address",
    "parse_address",
    "evaluate",
    "is_sentinel",
    "resolve_cell",
    "resolve_range",
    "make_range",
    "normalize",
    "parse_range",
    "select_all",
    "to_range_string",
    "Workbook",
    "ensure_capacity",
    "get_cell",
    "set_cell",
    "used_range",
]

"""Column letters <-> zero-based index, and A1 cell addresses"""

from __future__ import annotations

import re

from core.exceptions import MalformedAddress
from core.models import Address

CELL_REFERENCE_PATTERN = re.compile(r"[A-Z]+[0-9]+")

_COLUMN_NAME_PATTERN = re.compile(r"^[A-Z]+$")
_ADDRESS_PATTERN = re.compile(r"^([A-Z]+)([0-9]+)$")


def column_name(index: int) -> str:
    """Encode a zero-based column index as a bijective base-26 label (0 -> A, 26 -> AA)."""
    if isinstance(index, bool) or not isinstance(index, int) or index < 0:
        raise MalformedAddress(index, "column index must be a non-negative integer")
    chunks: list[str] = []
    current = index + 1
    while current > 0:
        current -= 1
        chunks.append(chr(ord("A") + current % 26))
        current //= 26
    return "".join(reversed(chunks))


def column_index(name: str) -> int:
    """Decode a column label (A, Z, AA, ...) to its zero-based index."""
    if not isinstance(name, str):
        raise MalformedAddress(name, "column label must be a string")
    normalized = name.strip().upper()
    if not _COLUMN_NAME_PATTERN.match(normalized):
        raise MalformedAddress(name, "column label must be letters only")
    index = 0
    for char in normalized:
        index = index * 26 + (ord(char) - ord("A") + 1)
    return index - 1


def parse_address(text: str) -> Address:
    """Parse "B12" into Address(column=1, row=12)."""
    if not isinstance(text, str):
        raise MalformedAddress(text, "cell address must be a string")
    match = _ADDRESS_PATTERN.match(text.strip().upper())
    if not match:
        raise MalformedAddress(text)
    row = int(match.group(2))
    if row < 1:
        raise MalformedAddress(text, "rows start at 1")
    return Address(column=column_index(match.group(1)), row=row)


def format_address(address: Address) -> str:
    return f"{column_name(address.column)}{address.row}"


def as_address(value: Address | str) -> Address:
    """Accept either an Address or its text form."""
    if isinstance(value, Address):
        return value
    return parse_address(value)


def is_cell_reference(text: str) -> bool:
    return bool(_ADDRESS_PATTERN.match(text))


def find_references(expression: str) -> list[str]:
    """Cell-reference tokens in order of appearance."""
    return CELL_REFERENCE_PATTERN.findall(expression)

"""Base file parser"""

import math
from abc import ABC, abstractmethod
from typing import Any, List

from core.interfaces import FileParser as IFileParser
from core.models import ImportResult


def to_text(value: Any) -> str:
    """Cell value as the literal text a user would have typed"""
    if value is None:
        return ""
    if isinstance(value, float) and math.isnan(value):
        return ""
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return str(value)


def trim_rows(rows: List[List[str]]) -> List[List[str]]:
    """Drop trailing blank cells of each row and trailing blank rows"""
    trimmed = []
    for row in rows:
        row = list(row)
        while row and not row[-1].strip():
            row.pop()
        trimmed.append(row)
    while trimmed and not trimmed[-1]:
        trimmed.pop()
    return trimmed


class FileParser(IFileParser, ABC):
    """Abstract base class for file parsers"""

    @abstractmethod
    def parse(self, file_path: str) -> ImportResult:
        """Parse file and return ImportResult"""
        pass

    @abstractmethod
    def detect_encoding(self, file_path: str) -> str:
        """Detect file encoding"""
        pass

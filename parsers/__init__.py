"""File parsers"""

from .base import FileParser
from .excel import ExcelParser
from .csv import CSVParser
from .importer import Importer, import_file

__all__ = ["FileParser", "ExcelParser", "CSVParser", "Importer", "import_file"]

"""Import CSV / Excel files into workbook tabs"""

import logging
from pathlib import Path
from typing import Dict, List

from core.exceptions import FileParseError
from core.models import ImportResult, Sheet
from grid.store import Workbook

from .base import FileParser
from .csv import CSVParser
from .excel import ExcelParser

logger = logging.getLogger(__name__)


class Importer:
    """Picks a parser by file extension"""

    def __init__(self):
        excel = ExcelParser()
        csv = CSVParser()
        self.parsers: Dict[str, FileParser] = {
            ".xlsx": excel,
            ".xls": excel,
            ".csv": csv,
        }

    def parse(self, file_path: str) -> ImportResult:
        path = Path(file_path)
        ext = path.suffix.lower()

        if ext not in self.parsers:
            raise FileParseError(
                f"Unsupported file type: {ext or path.name}. "
                f"Supported: {', '.join(self.parsers.keys())}",
                file_path
            )

        return self.parsers[ext].parse(str(path))

    def load_into(self, file_path: str, workbook: Workbook) -> List[Sheet]:
        """Parse the file and add one populated tab per imported sheet"""
        result = self.parse(file_path)
        sheets = [workbook.import_rows(imported.rows, imported.name) for imported in result.sheets]
        if not sheets:
            raise FileParseError(f"No sheets found in {result.file_name}", file_path)
        logger.info("Imported %s as %d sheet(s)", result.file_name, len(sheets))
        return sheets


def import_file(file_path: str, workbook: Workbook) -> List[Sheet]:
    return Importer().load_into(file_path, workbook)

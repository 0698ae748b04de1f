"""Excel file parser"""

import logging
from pathlib import Path
from typing import List

import openpyxl
import pandas as pd

from core.models import ImportResult, ImportedSheet
from core.enums import FileType
from core.exceptions import FileParseError
from .base import FileParser, to_text, trim_rows

logger = logging.getLogger(__name__)


class ExcelParser(FileParser):
    """Parser for Excel files (.xlsx, .xls), one sheet per worksheet"""

    @property
    def supported_extensions(self) -> List[str]:
        return [".xlsx", ".xls"]

    def detect_encoding(self, file_path: str) -> str:
        """Excel files are binary, no encoding needed"""
        return "binary"

    def parse(self, file_path: str) -> ImportResult:
        """Parse Excel file"""
        path = Path(file_path)

        if not path.exists():
            raise FileParseError(f"File not found: {file_path}", file_path)

        if path.suffix.lower() == ".xlsx":
            file_type = FileType.EXCEL_XLSX
        else:
            file_type = FileType.EXCEL_XLS

        try:
            if file_type == FileType.EXCEL_XLSX:
                sheets = self._read_xlsx(path)
            else:
                sheets = self._read_xls(path)
        except Exception as e:
            raise FileParseError(
                f"Failed to parse Excel file: {e}",
                file_path
            ) from e

        logger.info("Parsed %s (%d worksheets)", path.name, len(sheets))
        return ImportResult(
            file_path=str(path.absolute()),
            file_name=path.name,
            file_type=file_type,
            file_size_bytes=path.stat().st_size,
            encoding=None,
            sheets=sheets
        )

    def _read_xlsx(self, path: Path) -> List[ImportedSheet]:
        # Formulas are kept as typed so they evaluate in the grid
        workbook = openpyxl.load_workbook(path, data_only=False, read_only=True)
        try:
            sheets = []
            for sheet_name in workbook.sheetnames:
                worksheet = workbook[sheet_name]
                rows = [
                    [to_text(value) for value in row]
                    for row in worksheet.iter_rows(values_only=True)
                ]
                sheets.append(ImportedSheet(name=sheet_name, rows=trim_rows(rows)))
            return sheets
        finally:
            workbook.close()

    def _read_xls(self, path: Path) -> List[ImportedSheet]:
        excel_file = pd.ExcelFile(path)
        sheets = []
        for sheet_name in excel_file.sheet_names:
            df = pd.read_excel(
                excel_file,
                sheet_name=sheet_name,
                header=None,
                dtype=str,
                keep_default_na=False
            )
            rows = [[to_text(value) for value in row] for row in df.values.tolist()]
            sheets.append(ImportedSheet(name=sheet_name, rows=trim_rows(rows)))
        return sheets

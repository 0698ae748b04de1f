"""CSV file parser"""

import logging
from pathlib import Path
from typing import List

import pandas as pd

from core.models import ImportResult, ImportedSheet
from core.enums import FileType
from core.exceptions import FileParseError
from utils.encoding import detect_encoding
from .base import FileParser, to_text, trim_rows

logger = logging.getLogger(__name__)


class CSVParser(FileParser):
    """Parser for CSV files"""

    @property
    def supported_extensions(self) -> List[str]:
        return [".csv"]

    def detect_encoding(self, file_path: str) -> str:
        """Detect CSV file encoding"""
        return detect_encoding(Path(file_path))

    def parse(self, file_path: str) -> ImportResult:
        """Parse CSV file into a single sheet named after the file"""
        path = Path(file_path)

        if not path.exists():
            raise FileParseError(f"File not found: {file_path}", file_path)

        try:
            encoding = self.detect_encoding(path)
            file_size = path.stat().st_size

            if file_size == 0:
                rows = []
            else:
                delimiter = self._detect_delimiter(path, encoding)
                df = pd.read_csv(
                    path,
                    encoding=encoding,
                    delimiter=delimiter,
                    header=None,
                    dtype=str,
                    keep_default_na=False,
                    on_bad_lines='skip'
                )
                rows = [[to_text(value) for value in row] for row in df.values.tolist()]

        except Exception as e:
            raise FileParseError(
                f"Failed to parse CSV file: {e}",
                file_path
            ) from e

        logger.info("Parsed %s (%s, %d rows)", path.name, encoding, len(rows))
        return ImportResult(
            file_path=str(path.absolute()),
            file_name=path.name,
            file_type=FileType.CSV,
            file_size_bytes=file_size,
            encoding=encoding,
            sheets=[ImportedSheet(name=path.stem, rows=trim_rows(rows))]
        )

    def _detect_delimiter(self, path: Path, encoding: str) -> str:
        """Detect CSV delimiter"""
        delimiters = [',', '\t', '|', ';']

        with open(path, 'r', encoding=encoding) as f:
            sample = f.read(4096)

        scores = {}
        for delim in delimiters:
            counts = [line.count(delim) for line in sample.split('\n')[:10] if line.strip()]
            if counts and min(counts) > 0:
                avg = sum(counts) / len(counts)
                variance = sum((c - avg) ** 2 for c in counts) / len(counts)
                scores[delim] = min(counts) if variance < 2 else 0

        return max(scores, key=scores.get) if scores else ','

"""
Grid Normalizer - Reads delimited text and workbooks into a rectangular text grid
"""
import csv
import io
import logging
from pathlib import Path
from typing import List, Optional, Union

import pandas as pd

from ..exceptions import GridReadError
from ..models.extraction_models import Grid
from ..shared_utils.text_cleaner import TextCleaner

logger = logging.getLogger(__name__)

TEXT_EXTENSIONS = ('.csv', '.txt', '.tsv')
WORKBOOK_EXTENSIONS = ('.xlsx', '.xlsm', '.xls')
CANDIDATE_DELIMITERS = ',\t;|'
TEXT_ENCODINGS = ('utf-8-sig', 'cp1252')


class GridNormalizer:
    """Turns an uploaded budget sheet into a Grid of trimmed text cells."""

    def __init__(self, text_cleaner: Optional[TextCleaner] = None):
        self.text_cleaner = text_cleaner or TextCleaner()

    def read_grid(self, source: Union[str, Path, bytes], filename: Optional[str] = None,
                  sheet_name: Union[int, str] = 0) -> Grid:
        """
        Read a file path or raw bytes into a Grid.

        Args:
            source: Path to the file, or its raw bytes
            filename: Original file name; required with bytes to pick the reader
            sheet_name: Workbook sheet to read (first sheet by default)

        Raises:
            GridReadError: unsupported type, undecodable bytes or malformed text
        """
        if isinstance(source, (bytes, bytearray)):
            data = bytes(source)
            name = filename or ''
        else:
            path = Path(source)
            name = filename or path.name
            try:
                data = path.read_bytes()
            except OSError as e:
                raise GridReadError(f"Could not open {path}: {e}") from e

        extension = Path(name).suffix.lower()
        if extension in TEXT_EXTENSIONS:
            rows = self.parse_delimited(self._decode(data, name))
        elif extension in WORKBOOK_EXTENSIONS:
            rows = self._read_workbook(data, name, sheet_name)
        else:
            raise GridReadError(f"Unsupported file type: {name or '<unnamed>'}")

        grid = self.from_rows(rows)
        logger.info(f"Read {name}: {grid.row_count} rows x {grid.col_count} columns")
        return grid

    def from_rows(self, rows: List[List[object]]) -> Grid:
        """Build a Grid from already-split rows, cleaning each cell."""
        cleaned = [[self.text_cleaner.clean_cell('' if c is None else str(c)) for c in row] for row in rows]
        return Grid.from_rows(cleaned)

    def _decode(self, data: bytes, name: str) -> str:
        for encoding in TEXT_ENCODINGS:
            try:
                return data.decode(encoding)
            except UnicodeDecodeError:
                continue
        raise GridReadError(f"Could not decode {name} as text")

    def _sniff_delimiter(self, text: str) -> str:
        sample = text[:8192]
        try:
            return csv.Sniffer().sniff(sample, delimiters=CANDIDATE_DELIMITERS).delimiter
        except csv.Error:
            if '\t' in sample and ',' not in sample:
                return '\t'
            return ','

    def parse_delimited(self, text: str, delimiter: Optional[str] = None) -> List[List[str]]:
        """Split delimited text into rows, honouring quoted delimiters and doubled quotes."""
        if delimiter is None:
            delimiter = self._sniff_delimiter(text)
        try:
            return [row for row in csv.reader(io.StringIO(text, newline=''), delimiter=delimiter, strict=True)]
        except csv.Error as e:
            raise GridReadError(f"Malformed delimited text: {e}") from e

    def _read_workbook(self, data: bytes, name: str, sheet_name: Union[int, str]) -> List[List[object]]:
        engine = 'openpyxl' if name.lower().endswith(('.xlsx', '.xlsm')) else None
        try:
            df = pd.read_excel(io.BytesIO(data), sheet_name=sheet_name, header=None, dtype=str, engine=engine)
        except Exception as e:
            raise GridReadError(f"Could not read workbook {name}: {e}") from e
        df = df.fillna('')
        return df.values.tolist()


# Singleton instance
_grid_normalizer_instance = None


def get_grid_normalizer() -> GridNormalizer:
    """Get singleton GridNormalizer instance."""
    global _grid_normalizer_instance
    if _grid_normalizer_instance is None:
        _grid_normalizer_instance = GridNormalizer()
    return _grid_normalizer_instance

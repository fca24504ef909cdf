"""
ExcelReader: turn an in-memory workbook buffer into named sheets.

Encapsulates:
- container sniffing (Open XML zip vs legacy OLE2 ``.xls``)
- openpyxl vs xlrd engine selection
- conversion of each worksheet into a positional ``pandas.DataFrame``
"""

from __future__ import annotations

import io
from dataclasses import dataclass
from typing import Any, List, Optional, Tuple

import pandas as pd
from openpyxl import load_workbook

from escopo.extractors.excel.config import ExtractorConfig, DEFAULT_CONFIG
from escopo.logger import get_logger

logger = get_logger(__name__)

ZIP_MAGIC = b"PK\x03\x04"
OLE2_MAGIC = b"\xd0\xcf\x11\xe0\xa1\xb1\x1a\xe1"


class MalformedWorkbookError(ValueError):
    """The buffer is not a spreadsheet workbook this reader can open."""


@dataclass
class SheetData:
    """
    One worksheet: its name and raw cell values.

    ``df`` has no header and integer column labels; cells keep their raw
    type (str, int, float, datetime or None). Row ``i`` of ``df`` is row
    ``i + 1`` of the sheet.
    """

    name: str
    df: pd.DataFrame

    @property
    def rows(self) -> List[List[Any]]:
        return [list(r) for r in self.df.itertuples(index=False, name=None)]

    def __len__(self) -> int:
        return len(self.df)


class ExcelReader:
    """Load every worksheet of a workbook buffer, in workbook order."""

    def __init__(self, cfg: ExtractorConfig = DEFAULT_CONFIG):
        self._cfg = cfg

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    def read_workbook(self, data: bytes) -> List[SheetData]:
        """
        Parse *data* and return ``[SheetData, ...]`` in sheet order.

        Raises:
            MalformedWorkbookError: empty buffer, unknown container, or the
                engine failed to open it
        """
        kind = self.detect_format(data)
        if kind == "xls":
            sheets = self._read_xls(data)
        else:
            sheets = self._read_xlsx(data)
        logger.debug(
            "Read %d sheets (%s): %s",
            len(sheets), kind, [(s.name, len(s)) for s in sheets],
        )
        return sheets

    def list_sheet_names(self, data: bytes) -> Tuple[List[str], str]:
        """Return ``(sheet_names, backend)`` without materialising rows."""
        kind = self.detect_format(data)
        if kind == "xls":
            book = self._open_xls(data)
            return list(book.sheet_names()), "xlrd"
        wb = self._open_xlsx(data)
        try:
            return [ws.title for ws in wb.worksheets], "openpyxl"
        finally:
            wb.close()

    @staticmethod
    def detect_format(data: Optional[bytes]) -> str:
        """Return ``"xlsx"`` or ``"xls"`` from the leading magic bytes."""
        if not data:
            raise MalformedWorkbookError("empty workbook buffer")
        head = bytes(data[:8])
        if head.startswith(ZIP_MAGIC):
            return "xlsx"
        if head == OLE2_MAGIC:
            return "xls"
        raise MalformedWorkbookError("buffer is not a spreadsheet workbook (unknown container)")

    # ------------------------------------------------------------------
    # Internal helpers
    # ------------------------------------------------------------------

    @staticmethod
    def _open_xlsx(data: bytes) -> Any:
        try:
            return load_workbook(io.BytesIO(data), read_only=True, data_only=True)
        except Exception as exc:
            raise MalformedWorkbookError(f"cannot open workbook: {exc}") from exc

    @staticmethod
    def _open_xls(data: bytes) -> Any:
        import xlrd

        try:
            return xlrd.open_workbook(file_contents=data)
        except Exception as exc:
            raise MalformedWorkbookError(f"cannot open legacy workbook: {exc}") from exc

    def _read_xlsx(self, data: bytes) -> List[SheetData]:
        wb = self._open_xlsx(data)
        try:
            sheets: List[SheetData] = []
            for ws in wb.worksheets:
                try:
                    rows = [tuple(r) for r in ws.iter_rows(min_row=1, min_col=1, values_only=True)]
                except Exception as exc:
                    raise MalformedWorkbookError(
                        f"cannot read worksheet {ws.title!r}: {exc}"
                    ) from exc
                sheets.append(SheetData(name=ws.title, df=_frame(rows)))
            return sheets
        finally:
            wb.close()

    def _read_xls(self, data: bytes) -> List[SheetData]:
        book = self._open_xls(data)
        sheets: List[SheetData] = []
        for ws in book.sheets():
            rows = [tuple(ws.row_values(ri)) for ri in range(ws.nrows)]
            sheets.append(SheetData(name=ws.name, df=_frame(rows)))
        return sheets


def _frame(rows: List[tuple]) -> pd.DataFrame:
    # object dtype keeps ints as ints and None as None
    if not rows:
        return pd.DataFrame(dtype=object)
    return pd.DataFrame(rows, dtype=object)

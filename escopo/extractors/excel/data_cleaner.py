"""
DataCleaner: value normalisation utilities for the ingestion pipeline.

Responsibilities:
- Cell-level string conversion (``cell_to_str``)
- Empty-cell and blank-row detection
- Digit-run extraction for year / bimester style cells
- Header-text normalisation (form used for synonym matching)
"""

from __future__ import annotations

import unicodedata
from datetime import date, datetime
from typing import Any, Iterable

import pandas as pd

from escopo.extractors.excel.config import DIGIT_RUN_RE


class DataCleaner:
    """Stateless helper that normalises raw cell values and header text."""

    # ----- cell → string ---------------------------------------------------

    @staticmethod
    def is_empty(value: Any) -> bool:
        if value is None or pd.isna(value):
            return True
        return DataCleaner.cell_to_str(value) == ""

    @staticmethod
    def is_blank_row(cells: Iterable[Any]) -> bool:
        """``True`` when every cell of *cells* is empty (or there are none)."""
        return all(DataCleaner.is_empty(c) for c in (cells or []))

    @staticmethod
    def cell_to_str(value: Any) -> str:
        """Convert an arbitrary cell value to a clean string."""
        if value is None or pd.isna(value):
            return ""
        if isinstance(value, str):
            return value.strip()
        if isinstance(value, bool):
            return str(value)
        if isinstance(value, float) and value.is_integer():
            # Numeric cells come back as 6.0 from some engines.
            return str(int(value))
        if isinstance(value, (datetime, date, pd.Timestamp)):
            try:
                if isinstance(value, datetime):
                    return value.isoformat(sep=" ", timespec="seconds")
                return value.isoformat()
            except Exception:
                return str(value).strip()
        # Rich-text objects from openpyxl may expose .plain or .text
        plain_attr = getattr(value, "plain", None)
        if isinstance(plain_attr, str):
            return plain_attr.strip()
        text_attr = getattr(value, "text", None)
        if isinstance(text_attr, str):
            return text_attr.strip()
        text = str(value).strip()
        if text.lower() in {"nan", "none", "nat"}:
            return ""
        return text

    # ----- numeric extraction ----------------------------------------------

    @staticmethod
    def extract_number(value: Any) -> str:
        """
        Return the first run of ASCII digits in *value*'s text, or ``""``.

        ``"8º ano"`` → ``"8"``, ``"Bimestre 2"`` → ``"2"``. Cells holding
        several numbers (``"6 e 7"``) yield only the first one.
        """
        text = DataCleaner.cell_to_str(value)
        if not text:
            return ""
        m = DIGIT_RUN_RE.search(text)
        return m.group(0) if m else ""

    # ----- header text normalisation ---------------------------------------

    @staticmethod
    def normalize_header_text(text: Any) -> str:
        """
        Canonical form for header matching: NFC, trimmed, case-folded.

        Composed and decomposed accents (``"Série"`` typed either way)
        compare equal; internal spacing and punctuation are left as-is.
        """
        raw = DataCleaner.cell_to_str(text)
        if not raw:
            return ""
        return unicodedata.normalize("NFC", raw).strip().casefold()

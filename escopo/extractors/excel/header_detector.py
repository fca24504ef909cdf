"""
HeaderDetector: identify which row of a worksheet is the header row.

Hand-maintained workbooks put the header at varying positions (titles,
notes or blank rows above it) and word it differently from sheet to sheet,
so the detector scans a small window of leading rows and accepts the first
one that names enough of the mandatory columns.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

import pandas as pd

from escopo.extractors.excel.config import ExtractorConfig, DEFAULT_CONFIG
from escopo.extractors.excel.data_cleaner import DataCleaner
from escopo.extractors.excel.vocabulary import HeaderVocabulary, get_default_vocabulary
from escopo.logger import get_logger

logger = get_logger(__name__)


@dataclass
class HeaderLocation:
    """Result of a successful scan."""

    row_idx: int
    cells: List[str]
    matched_fields: List[str]
    scanned_rows: List[Dict[str, Any]] = field(default_factory=list)


class HeaderDetector:
    """
    Stateless detector; thresholds come from :class:`ExtractorConfig`,
    column names from the :class:`HeaderVocabulary`.
    """

    def __init__(
        self,
        cfg: ExtractorConfig = DEFAULT_CONFIG,
        vocabulary: Optional[HeaderVocabulary] = None,
    ):
        self._cfg = cfg
        self._vocab = vocabulary or get_default_vocabulary()

    # -----------------------------------------------------------------
    # Row matching
    # -----------------------------------------------------------------

    def mandatory_fields_in_row(self, cells: List[Any]) -> List[str]:
        """Names of mandatory fields that have at least one matching cell in *cells*."""
        found: List[str] = []
        for spec in self._vocab.mandatory:
            if any(spec.matches(c) for c in cells):
                found.append(spec.name)
        return found

    # -----------------------------------------------------------------
    # Header row selection
    # -----------------------------------------------------------------

    def locate(self, df: pd.DataFrame, sheet_name: str = "") -> Optional[HeaderLocation]:
        """
        Return the first of the leading ``header_search_rows`` non-blank
        rows naming at least ``min_mandatory_found`` mandatory columns, or
        ``None``.

        Blank rows are never candidates and do not count toward the window;
        ``row_idx`` is still the physical row index in *df*.
        """
        limit = self._cfg.header_search_rows
        scanned: List[Dict[str, Any]] = []
        non_blank_seen = 0

        for i in range(len(df)):
            if non_blank_seen >= limit:
                break
            cells = row_values(df, i)
            if DataCleaner.is_blank_row(cells):
                scanned.append({"row_idx": i, "blank": True, "matched": []})
                continue
            non_blank_seen += 1
            matched = self.mandatory_fields_in_row(cells)
            scanned.append({"row_idx": i, "blank": False, "matched": matched})
            if len(matched) >= self._cfg.min_mandatory_found:
                logger.debug(
                    "Header row for sheet %r at index %d (matched %s)",
                    sheet_name, i, matched,
                )
                return HeaderLocation(
                    row_idx=i,
                    cells=[DataCleaner.cell_to_str(c) for c in cells],
                    matched_fields=matched,
                    scanned_rows=scanned,
                )

        logger.debug(
            "No header row within %d non-blank rows of sheet %r: %s",
            limit, sheet_name, scanned,
        )
        return None


def row_values(df: pd.DataFrame, idx: int) -> List[Any]:
    """Raw cell values of row *idx* as a plain list."""
    return df.iloc[idx].tolist()

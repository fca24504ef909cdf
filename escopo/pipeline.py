"""
Pipeline: orchestrates reader → header detector → schema mapper → row normaliser.

ingest_workbook      – bytes + level → IngestionResult (items + per-sheet diagnostics)
process_escopo_file  – bytes + level → List[ScopeSequenceItem]

Only :class:`MalformedWorkbookError` escapes; sheet- and row-level problems
are recorded in the result and logged.
"""

from __future__ import annotations

from typing import List, Optional, Tuple

from escopo.extractors.excel.config import ExtractorConfig, DEFAULT_CONFIG
from escopo.extractors.excel.data_cleaner import DataCleaner
from escopo.extractors.excel.header_detector import HeaderDetector, row_values
from escopo.extractors.excel.reader import ExcelReader, SheetData
from escopo.extractors.excel.row_normalizer import RowNormalizer
from escopo.extractors.excel.schema_mapper import MappingFailure, SchemaMapper
from escopo.extractors.excel.vocabulary import HeaderVocabulary, get_default_vocabulary
from escopo.ir import IngestionResult, ScopeSequenceItem, SheetOutcome
from escopo.logger import get_logger

logger = get_logger(__name__)


class WorkbookIngestor:
    """Wires the four stages together for one configuration/vocabulary."""

    def __init__(
        self,
        cfg: ExtractorConfig = DEFAULT_CONFIG,
        vocabulary: Optional[HeaderVocabulary] = None,
    ):
        self._cfg = cfg
        self._vocab = vocabulary or get_default_vocabulary()
        self.reader = ExcelReader(cfg)
        self.detector = HeaderDetector(cfg, self._vocab)
        self.mapper = SchemaMapper(cfg, self._vocab)
        self.normalizer = RowNormalizer(self._vocab)

    def is_excluded(self, sheet_name: str) -> bool:
        name = DataCleaner.normalize_header_text(sheet_name)
        return name in {DataCleaner.normalize_header_text(n) for n in self._cfg.excluded_sheet_names}

    def ingest(self, data: bytes, level: str) -> IngestionResult:
        sheets = self.reader.read_workbook(data)
        result = IngestionResult(level=level)
        logger.info("Ingesting workbook for level %r: %d sheets", level, len(sheets))

        for sheet in sheets:
            items, outcome = self.ingest_sheet(sheet)
            result.items.extend(items)
            result.sheets.append(outcome)
            if outcome.reason in ("no_header_row", "missing_mandatory_columns"):
                result.warnings.append(_describe_skip(outcome))

        logger.info(
            "Workbook for level %r: %d items, %d rows skipped, %d/%d sheets skipped",
            level, len(result.items), result.rows_skipped,
            len(result.skipped_sheets), len(result.sheets),
        )
        return result

    def ingest_sheet(self, sheet: SheetData) -> Tuple[List[ScopeSequenceItem], SheetOutcome]:
        subject = sheet.name.strip()

        if self.is_excluded(sheet.name):
            logger.info("Skipping non-curricular sheet %r", sheet.name)
            return [], SheetOutcome(sheet_name=sheet.name, status="skipped", reason="excluded_sheet")

        if len(sheet.df) == 0 or all(
            DataCleaner.is_blank_row(row_values(sheet.df, i)) for i in range(len(sheet.df))
        ):
            logger.warning("Sheet %r is empty. Skipping.", sheet.name)
            return [], SheetOutcome(sheet_name=sheet.name, status="skipped", reason="empty_sheet")

        location = self.detector.locate(sheet.df, sheet_name=sheet.name)
        if location is None:
            logger.warning(
                "Could not identify a header row in the first %d non-blank rows of sheet %r. Skipping.",
                self._cfg.header_search_rows, sheet.name,
            )
            return [], SheetOutcome(sheet_name=sheet.name, status="skipped", reason="no_header_row")

        mapping = self.mapper.map_headers(location.cells)
        if isinstance(mapping, MappingFailure):
            outcome = SheetOutcome(
                sheet_name=sheet.name,
                status="skipped",
                reason="missing_mandatory_columns",
                header_row_idx=location.row_idx,
                header_by_field=mapping.partial.header_by_field if mapping.partial else {},
                missing_fields=mapping.missing_fields,
                suggestions=mapping.suggestions,
            )
            logger.warning("%s", _describe_skip(outcome))
            return [], outcome

        items: List[ScopeSequenceItem] = []
        rows_skipped = 0
        for i in range(location.row_idx + 1, len(sheet.df)):
            row = self.normalizer.normalize(row_values(sheet.df, i), mapping, subject)
            if row.accepted:
                items.append(row.item)
            elif row.rejected:
                rows_skipped += 1

        logger.info(
            "Sheet %r: header at row %d, %d items, %d rows skipped (columns: %s)",
            sheet.name, location.row_idx, len(items), rows_skipped, mapping.header_by_field,
        )
        return items, SheetOutcome(
            sheet_name=sheet.name,
            status="ok",
            header_row_idx=location.row_idx,
            header_by_field=mapping.header_by_field,
            items_count=len(items),
            rows_skipped=rows_skipped,
        )


def _describe_skip(outcome: SheetOutcome) -> str:
    if outcome.reason == "missing_mandatory_columns":
        parts = []
        for name in outcome.missing_fields:
            hint = outcome.suggestions.get(name)
            parts.append(f"{name} (closest header: {hint!r})" if hint else name)
        return f"Sheet {outcome.sheet_name!r} is missing required columns: {', '.join(parts)}"
    if outcome.reason == "no_header_row":
        return f"Sheet {outcome.sheet_name!r} has no recognisable header row"
    return f"Sheet {outcome.sheet_name!r} skipped: {outcome.reason}"


# ---------------------------------------------------------------------------
# Module-level entry points
# ---------------------------------------------------------------------------

def ingest_workbook(
    data: bytes,
    level: str,
    cfg: Optional[ExtractorConfig] = None,
    vocabulary: Optional[HeaderVocabulary] = None,
) -> IngestionResult:
    """
    Parse a workbook buffer into normalised items plus diagnostics.

    Args:
        data: raw workbook bytes (.xlsx, or legacy .xls)
        level: education level label; carried through, never interpreted
        cfg: tunables; :data:`DEFAULT_CONFIG` when omitted
        vocabulary: header vocabulary; the bundled one when omitted

    Raises:
        MalformedWorkbookError: *data* is not a readable workbook
    """
    return WorkbookIngestor(cfg or DEFAULT_CONFIG, vocabulary).ingest(data, level)


def process_escopo_file(data: bytes, level: str) -> List[ScopeSequenceItem]:
    """Flat item list for *data*; see :func:`ingest_workbook`."""
    return ingest_workbook(data, level).items

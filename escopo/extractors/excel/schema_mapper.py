"""
SchemaMapper: map a located header row onto canonical field names.

Uses the same synonym rule as :class:`HeaderDetector` (trimmed, NFC,
case-folded exact match). For each field the synonyms are tried in
vocabulary order and the leftmost column carrying the first matching
synonym wins.

Typical call sequence inside the pipeline::

    mapper = SchemaMapper(vocabulary=vocab)
    result = mapper.map_headers(location.cells)
    if isinstance(result, MappingFailure):
        ...  # sheet skipped, result.missing_fields / result.suggestions logged
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Union

from rapidfuzz import fuzz, process

from escopo.extractors.excel.config import ExtractorConfig, DEFAULT_CONFIG
from escopo.extractors.excel.data_cleaner import DataCleaner
from escopo.extractors.excel.vocabulary import FieldSpec, HeaderVocabulary, get_default_vocabulary


@dataclass
class HeaderMapping:
    """canonical field → column index; optional fields map to ``None`` when absent."""

    column_by_field: Dict[str, Optional[int]]
    header_by_field: Dict[str, str] = field(default_factory=dict)

    def column(self, name: str) -> Optional[int]:
        return self.column_by_field.get(name)


@dataclass
class MappingFailure:
    """Mandatory fields without a column, plus the closest header cell for each."""

    missing_fields: List[str]
    suggestions: Dict[str, str] = field(default_factory=dict)
    partial: Optional[HeaderMapping] = None


MappingResult = Union[HeaderMapping, MappingFailure]


class SchemaMapper:
    """Header cells → :class:`HeaderMapping` or :class:`MappingFailure`."""

    def __init__(
        self,
        cfg: ExtractorConfig = DEFAULT_CONFIG,
        vocabulary: Optional[HeaderVocabulary] = None,
    ):
        self._cfg = cfg
        self._vocab = vocabulary or get_default_vocabulary()

    # ------------------------------------------------------------------
    # Column lookup
    # ------------------------------------------------------------------

    @staticmethod
    def find_column(cells: List[Any], spec: FieldSpec) -> Optional[int]:
        """Index of the column matching *spec*, honouring synonym order."""
        normalized = [DataCleaner.normalize_header_text(c) for c in cells]
        for synonym in spec.normalized_synonyms:
            if not synonym:
                continue
            for idx, text in enumerate(normalized):
                if text == synonym:
                    return idx
        return None

    def map_headers(self, cells: List[Any]) -> MappingResult:
        column_by_field: Dict[str, Optional[int]] = {}
        header_by_field: Dict[str, str] = {}
        for spec in self._vocab:
            idx = self.find_column(cells, spec)
            column_by_field[spec.name] = idx
            if idx is not None:
                header_by_field[spec.name] = DataCleaner.cell_to_str(cells[idx])

        mapping = HeaderMapping(column_by_field=column_by_field, header_by_field=header_by_field)
        missing = [s.name for s in self._vocab.mandatory if column_by_field.get(s.name) is None]
        if missing:
            return MappingFailure(
                missing_fields=missing,
                suggestions=self.suggest(cells, missing, mapping),
                partial=mapping,
            )
        return mapping

    # ------------------------------------------------------------------
    # Diagnostics
    # ------------------------------------------------------------------

    def suggest(
        self,
        cells: List[Any],
        missing: List[str],
        mapping: HeaderMapping,
    ) -> Dict[str, str]:
        """
        For each missing field, the unmapped header cell closest to one of
        its synonyms (rapidfuzz WRatio). Used in log messages only; never
        changes the mapping.
        """
        used = {i for i in mapping.column_by_field.values() if i is not None}
        candidates = {
            i: DataCleaner.cell_to_str(c)
            for i, c in enumerate(cells)
            if i not in used and DataCleaner.cell_to_str(c)
        }
        if not candidates:
            return {}
        choices = {i: DataCleaner.normalize_header_text(t) for i, t in candidates.items()}
        suggestions: Dict[str, str] = {}
        for name in missing:
            spec = self._vocab.get(name)
            if spec is None:
                continue
            best_score, best_idx = -1.0, None
            for synonym in spec.normalized_synonyms:
                result = process.extractOne(synonym, choices, scorer=fuzz.WRatio)
                if result and result[1] > best_score:
                    best_score, best_idx = result[1], result[2]
            if best_idx is not None and best_score >= self._cfg.suggestion_min_score:
                suggestions[name] = candidates[best_idx]
        return suggestions

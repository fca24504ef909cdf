"""
RowNormalizer: one data row → :class:`ScopeSequenceItem` or a rejection.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

from escopo.extractors.excel.data_cleaner import DataCleaner
from escopo.extractors.excel.schema_mapper import HeaderMapping
from escopo.extractors.excel.vocabulary import (
    ITEM_OPTIONAL_FIELDS,
    MANDATORY_FIELDS,
    FieldSpec,
    HeaderVocabulary,
    get_default_vocabulary,
)
from escopo.ir import ScopeSequenceItem


@dataclass
class RowOutcome:
    """
    Tagged result for a single row.

    Exactly one of: ``item`` set (accepted), ``blank`` true (ignored), or
    ``missing_fields`` non-empty (rejected).
    """

    item: Optional[ScopeSequenceItem] = None
    blank: bool = False
    missing_fields: List[str] = field(default_factory=list)

    @property
    def accepted(self) -> bool:
        return self.item is not None

    @property
    def rejected(self) -> bool:
        return self.item is None and not self.blank

    @classmethod
    def blank_row(cls) -> "RowOutcome":
        return cls(blank=True)


class RowNormalizer:
    def __init__(self, vocabulary: Optional[HeaderVocabulary] = None):
        self._vocab = vocabulary or get_default_vocabulary()

    @staticmethod
    def field_value(row: List[Any], column: Optional[int], spec: FieldSpec) -> str:
        if column is None or column >= len(row):
            return ""
        cell = row[column]
        if spec.numeric:
            return DataCleaner.extract_number(cell)
        return DataCleaner.cell_to_str(cell)

    def normalize(self, row: List[Any], mapping: HeaderMapping, subject: str) -> RowOutcome:
        if DataCleaner.is_blank_row(row):
            return RowOutcome.blank_row()

        values: Dict[str, str] = {}
        extras: Dict[str, str] = {}
        for spec in self._vocab:
            value = self.field_value(row, mapping.column(spec.name), spec)
            if spec.name in MANDATORY_FIELDS or spec.name in ITEM_OPTIONAL_FIELDS:
                values[spec.name] = value
            elif value:
                extras[spec.name] = value

        subject = (subject or "").strip()
        missing = [name for name in MANDATORY_FIELDS if not values.get(name)]
        if not subject:
            missing.insert(0, "subject")
        if missing:
            return RowOutcome(missing_fields=missing)

        item = ScopeSequenceItem(
            subject=subject,
            year_or_grade=values["year_or_grade"],
            term=values["term"],
            skill_code=values["skill_code"],
            knowledge_object=values["knowledge_object"],
            content=values["content"],
            objectives=values.get("objectives") or None,
            extras=extras,
        )
        return RowOutcome(item=item)

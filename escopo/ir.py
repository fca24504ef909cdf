"""
Intermediate representation
===========================

Records produced by the ingestion pipeline: the normalised
:class:`ScopeSequenceItem`, the per-sheet :class:`SheetOutcome` and the
aggregate :class:`IngestionResult`.
"""

from typing import Any, Dict, List, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

# Grouping labels used by the lesson-planning product. The core never
# validates a level against this list; it only groups stored items by it.
EDUCATION_LEVELS = (
    "Anos Iniciais",
    "Anos Finais",
    "Ensino Médio",
    "Ensino Médio Técnico - 2ª Série",
    "Ensino Médio Técnico - 3ª Série",
    "Ensino Médio Noturno",
)

SheetStatus = Literal["ok", "skipped"]
SkipReason = Literal[
    "excluded_sheet",
    "empty_sheet",
    "no_header_row",
    "missing_mandatory_columns",
]


class ScopeSequenceItem(BaseModel):
    """
    One curriculum row: subject / year / bimester / skill / knowledge object / content.

    Attributes:
        subject: worksheet name the row came from
        year_or_grade: digits only ("6º ano" → "6")
        term: bimester, digits only
        skill_code: skill code or text (e.g. "EF06CI01")
        knowledge_object: knowledge object text
        content: content text
        objectives: optional objectives text
        extras: other recognised optional columns (cycle, lesson, title, ...)
    """

    model_config = ConfigDict(
        frozen=True,
        alias_generator=to_camel,
        populate_by_name=True,
    )

    subject: str = Field(min_length=1)
    year_or_grade: str = Field(min_length=1)
    term: str = Field(min_length=1)
    skill_code: str = Field(min_length=1)
    knowledge_object: str = Field(min_length=1)
    content: str = Field(min_length=1)
    objectives: Optional[str] = None
    extras: Dict[str, str] = Field(default_factory=dict)

    def to_json_dict(self) -> Dict[str, Any]:
        """camelCase dict without ``objectives`` when absent and without empty ``extras``."""
        data = self.model_dump(by_alias=True, exclude_none=True)
        if not data.get("extras"):
            data.pop("extras", None)
        return data


class SheetOutcome(BaseModel):
    """
    What happened to one worksheet.

    ``status == "ok"`` means the header was found and mapped; the sheet may
    still contribute zero items if every data row was rejected.
    """

    sheet_name: str
    status: SheetStatus
    reason: Optional[SkipReason] = None
    header_row_idx: Optional[int] = None
    header_by_field: Dict[str, str] = Field(default_factory=dict)
    missing_fields: List[str] = Field(default_factory=list)
    suggestions: Dict[str, str] = Field(default_factory=dict)
    items_count: int = 0
    rows_skipped: int = 0

    @property
    def skipped(self) -> bool:
        return self.status == "skipped"


class IngestionResult(BaseModel):
    """Flat item list for one workbook upload plus its diagnostics."""

    level: str
    items: List[ScopeSequenceItem] = Field(default_factory=list)
    sheets: List[SheetOutcome] = Field(default_factory=list)
    warnings: List[str] = Field(default_factory=list)

    @property
    def rows_skipped(self) -> int:
        return sum(s.rows_skipped for s in self.sheets)

    @property
    def skipped_sheets(self) -> List[SheetOutcome]:
        return [s for s in self.sheets if s.skipped]

    def items_by_sheet(self) -> Dict[str, int]:
        return {s.sheet_name: s.items_count for s in self.sheets}

"""
Header vocabulary: canonical field → accepted header texts.

The vocabulary is configuration data (``headers.yaml`` shipped with the
package, or a replacement file named by ``HEADER_VOCABULARY_PATH``) so that
the matching algorithm stays independent of the curriculum wording.
"""

from __future__ import annotations

from dataclasses import dataclass
from functools import cached_property
from pathlib import Path
from typing import Any, Dict, Iterator, List, Optional, Tuple

import yaml

from escopo.extractors.excel.data_cleaner import DataCleaner

DEFAULT_VOCABULARY_PATH = Path(__file__).resolve().parent / "headers.yaml"

# Fields a ScopeSequenceItem is built from; all must be declared mandatory.
MANDATORY_FIELDS: Tuple[str, ...] = (
    "year_or_grade",
    "term",
    "skill_code",
    "knowledge_object",
    "content",
)
ITEM_OPTIONAL_FIELDS: Tuple[str, ...] = ("objectives",)


class VocabularyError(ValueError):
    """Raised when a vocabulary file is missing or malformed."""


@dataclass(frozen=True)
class FieldSpec:
    name: str
    synonyms: Tuple[str, ...]
    mandatory: bool = False
    numeric: bool = False

    @cached_property
    def normalized_synonyms(self) -> Tuple[str, ...]:
        return tuple(DataCleaner.normalize_header_text(s) for s in self.synonyms)

    def matches(self, cell: Any) -> bool:
        text = DataCleaner.normalize_header_text(cell)
        return bool(text) and text in self.normalized_synonyms


@dataclass(frozen=True)
class HeaderVocabulary:
    """Ordered collection of :class:`FieldSpec`, mandatory and optional."""

    fields: Tuple[FieldSpec, ...]

    def __iter__(self) -> Iterator[FieldSpec]:
        return iter(self.fields)

    def get(self, name: str) -> Optional[FieldSpec]:
        for spec in self.fields:
            if spec.name == name:
                return spec
        return None

    @property
    def mandatory(self) -> Tuple[FieldSpec, ...]:
        return tuple(f for f in self.fields if f.mandatory)

    @property
    def optional(self) -> Tuple[FieldSpec, ...]:
        return tuple(f for f in self.fields if not f.mandatory)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "HeaderVocabulary":
        raw_fields = data.get("fields") if isinstance(data, dict) else None
        if not isinstance(raw_fields, dict) or not raw_fields:
            raise VocabularyError("vocabulary must define a non-empty 'fields' mapping")
        specs: List[FieldSpec] = []
        for name, body in raw_fields.items():
            body = body if isinstance(body, dict) else {}
            synonyms = _ensure_str_list(body.get("synonyms"))
            if not synonyms:
                raise VocabularyError(f"field {name!r} has no synonyms")
            specs.append(
                FieldSpec(
                    name=str(name),
                    synonyms=tuple(synonyms),
                    mandatory=bool(body.get("mandatory", False)),
                    numeric=bool(body.get("numeric", False)),
                )
            )
        vocabulary = cls(fields=tuple(specs))
        declared_mandatory = {f.name for f in vocabulary.mandatory}
        missing = [name for name in MANDATORY_FIELDS if name not in declared_mandatory]
        if missing:
            raise VocabularyError(
                f"vocabulary must declare these fields as mandatory: {', '.join(missing)}"
            )
        unexpected = sorted(declared_mandatory - set(MANDATORY_FIELDS))
        if unexpected:
            raise VocabularyError(f"only item fields can be mandatory, got: {', '.join(unexpected)}")
        return vocabulary


def _ensure_str_list(value: Any) -> List[str]:
    """Keep non-blank strings; also accepts a single string."""
    if isinstance(value, str):
        value = [value]
    if not isinstance(value, list):
        return []
    out: List[str] = []
    for item in value:
        if isinstance(item, str) and item.strip():
            out.append(item.strip())
    return out


def load_vocabulary(path: Optional[str] = None) -> HeaderVocabulary:
    """
    Load a vocabulary from YAML.

    Args:
        path: YAML file; the bundled ``headers.yaml`` when omitted

    Raises:
        VocabularyError: the file is missing, unparsable or incomplete
    """
    vocab_path = Path(path).expanduser() if path else DEFAULT_VOCABULARY_PATH
    if not vocab_path.is_file():
        raise VocabularyError(f"vocabulary file not found: {vocab_path}")
    try:
        data = yaml.safe_load(vocab_path.read_text(encoding="utf-8"))
    except yaml.YAMLError as exc:
        raise VocabularyError(f"invalid YAML in {vocab_path}: {exc}") from exc
    return HeaderVocabulary.from_dict(data or {})


_default_vocabulary: Optional[HeaderVocabulary] = None


def get_default_vocabulary() -> HeaderVocabulary:
    """Bundled vocabulary, parsed once."""
    global _default_vocabulary
    if _default_vocabulary is None:
        _default_vocabulary = load_vocabulary()
    return _default_vocabulary

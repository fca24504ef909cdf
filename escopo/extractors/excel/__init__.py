"""
Workbook ingestion subpackage.

Public API:
  - ExcelReader            (buffer → named sheets)
  - HeaderDetector         (header row identification)
  - SchemaMapper           (header cells → canonical field columns)
  - RowNormalizer          (data row → ScopeSequenceItem)
  - DataCleaner            (cell/value normalisation)
  - HeaderVocabulary       (canonical field → synonyms, from YAML)
  - ExtractorConfig        (tunable thresholds)
"""

from escopo.extractors.excel.config import ExtractorConfig, DEFAULT_CONFIG
from escopo.extractors.excel.data_cleaner import DataCleaner
from escopo.extractors.excel.header_detector import HeaderDetector, HeaderLocation
from escopo.extractors.excel.reader import ExcelReader, MalformedWorkbookError, SheetData
from escopo.extractors.excel.row_normalizer import RowNormalizer, RowOutcome
from escopo.extractors.excel.schema_mapper import HeaderMapping, MappingFailure, SchemaMapper
from escopo.extractors.excel.vocabulary import (
    FieldSpec,
    HeaderVocabulary,
    VocabularyError,
    get_default_vocabulary,
    load_vocabulary,
)

__all__ = [
    "ExtractorConfig",
    "DEFAULT_CONFIG",
    "DataCleaner",
    "HeaderDetector",
    "HeaderLocation",
    "ExcelReader",
    "MalformedWorkbookError",
    "SheetData",
    "RowNormalizer",
    "RowOutcome",
    "SchemaMapper",
    "HeaderMapping",
    "MappingFailure",
    "FieldSpec",
    "HeaderVocabulary",
    "VocabularyError",
    "get_default_vocabulary",
    "load_vocabulary",
]

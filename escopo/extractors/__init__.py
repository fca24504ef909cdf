"""
Extractors for escopo-sequência sources.

Provides:
- excel: workbook reader, header detection, header mapping, row normalisation
"""

from escopo.extractors.excel import ExcelReader, MalformedWorkbookError

__all__ = [
    "ExcelReader",
    "MalformedWorkbookError",
]

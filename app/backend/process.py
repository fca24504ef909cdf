"""
Backend process module
======================

Wraps the ingestion pipeline for the HTTP and CLI surfaces:
ingest workbook → replace the level in the store → JSON-safe summary.
"""

import json
import os
from pathlib import Path
from typing import Any, Dict, Optional

from escopo.config import get_settings
from escopo.extractors.excel.config import ExtractorConfig
from escopo.extractors.excel.vocabulary import HeaderVocabulary, get_default_vocabulary, load_vocabulary
from escopo.ir import IngestionResult
from escopo.logger import get_logger
from escopo.pipeline import ingest_workbook
from escopo.store import ScopeSequenceStore

logger = get_logger(__name__)

NO_VALID_ROWS_WARNING = "no_valid_rows_found"


def resolve_vocabulary() -> HeaderVocabulary:
    """Vocabulary named by ``HEADER_VOCABULARY_PATH``, else the bundled one."""
    path = get_settings().HEADER_VOCABULARY_PATH
    if path and path.strip():
        return load_vocabulary(path.strip())
    return get_default_vocabulary()


def build_summary(result: IngestionResult, saved: int, filename: Optional[str] = None) -> Dict[str, Any]:
    """Turn an :class:`IngestionResult` into the dict returned by the API and CLI."""
    warnings = list(result.warnings)
    if not result.items:
        warnings.append(NO_VALID_ROWS_WARNING)
    return {
        "filename": filename,
        "level": result.level,
        "items_count": len(result.items),
        "rows_skipped": result.rows_skipped,
        "saved": saved,
        "sheets": [s.model_dump() for s in result.sheets],
        "warnings": warnings,
        "items": [item.to_json_dict() for item in result.items],
    }


def process_upload(
    data: bytes,
    level: str,
    store: Optional[ScopeSequenceStore] = None,
    filename: Optional[str] = None,
    dry_run: bool = False,
) -> Dict[str, Any]:
    """
    Ingest one uploaded workbook for *level* and persist the items.

    The stored items of *level* are replaced only when the upload produced
    at least one item; an empty result leaves the store untouched.

    Raises:
        MalformedWorkbookError: *data* is not a readable workbook
    """
    settings = get_settings()
    result = ingest_workbook(
        data,
        level,
        cfg=ExtractorConfig.from_settings(settings),
        vocabulary=resolve_vocabulary(),
    )
    saved = 0
    if result.items and not dry_run:
        saved = (store or ScopeSequenceStore()).replace_level(level, result.items)
    elif not result.items:
        logger.warning("Upload %s for level %r produced no valid rows", filename or "<buffer>", level)
    return build_summary(result, saved, filename=filename)


def _resolve_output_json_name(output_filename: Optional[str] = None) -> str:
    if output_filename and output_filename.strip():
        return output_filename.strip()
    env_output_name = os.getenv("OUTPUT_JSON_NAME", "").strip()
    if env_output_name:
        return env_output_name
    return "result.json"


def write_json_output(
    result: Dict[str, Any],
    output_dir: str,
    output_filename: Optional[str] = None,
) -> str:
    """
    Write *result* as JSON into *output_dir*.

    The file name comes from *output_filename* or the ``OUTPUT_JSON_NAME``
    environment variable, defaulting to ``result.json``.
    """
    output_path = Path(output_dir).resolve()
    output_path.mkdir(parents=True, exist_ok=True)
    json_path = output_path / _resolve_output_json_name(output_filename)
    with open(json_path, "w", encoding="utf-8") as f:
        json.dump(result, f, ensure_ascii=False, indent=2, default=str)
    return str(json_path)

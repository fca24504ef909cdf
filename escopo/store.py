"""
Scope-sequence store
====================

JSON-file persistence for ingested items, grouped by education level.
Saving a level replaces everything stored for it: re-uploading a corrected
workbook never leaves rows from the previous upload behind.
"""

from __future__ import annotations

import json
import os
import tempfile
from pathlib import Path
from typing import Any, Dict, Iterable, List, Optional

from pydantic import ValidationError

from escopo.config import get_settings
from escopo.ir import EDUCATION_LEVELS, ScopeSequenceItem
from escopo.logger import get_logger

logger = get_logger(__name__)


class StoreError(RuntimeError):
    """The backing file exists but cannot be read as a store."""


class ScopeSequenceStore:
    """
    ``{level: [item, ...]}`` persisted as UTF-8 JSON at *path*.

    Each call re-reads the file, so several store instances on the same
    path see each other's writes.
    """

    def __init__(self, path: Optional[str] = None):
        self.path = Path(path or get_settings().STORE_PATH).expanduser()

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    def replace_level(self, level: str, items: Iterable[ScopeSequenceItem]) -> int:
        """
        Replace every stored item of *level* with *items*.

        An empty *items* leaves the stored data untouched and returns 0.
        """
        items = list(items)
        if not items:
            logger.info("No data provided to save for level %r.", level)
            return 0
        data = self._load()
        previous = len(data.get(level, []))
        data[level] = [item.to_json_dict() for item in items]
        self._dump(data)
        logger.info(
            "Replaced %d old items with %d new items for level %r.",
            previous, len(items), level,
        )
        return len(items)

    def get_level(self, level: str) -> List[ScopeSequenceItem]:
        return self._parse_items(level, self._load().get(level, []))

    def get_all(self) -> Dict[str, List[ScopeSequenceItem]]:
        """Every known education level (possibly empty) plus any other stored level."""
        data = self._load()
        result: Dict[str, List[ScopeSequenceItem]] = {level: [] for level in EDUCATION_LEVELS}
        for level, raw_items in data.items():
            result[level] = self._parse_items(level, raw_items)
        return result

    def counts(self) -> Dict[str, int]:
        return {level: len(items) for level, items in self.get_all().items()}

    def delete_level(self, level: str) -> int:
        data = self._load()
        removed = len(data.pop(level, []))
        if removed:
            self._dump(data)
            logger.info("Deleted %d items for level %r.", removed, level)
        return removed

    # ------------------------------------------------------------------
    # Internal helpers
    # ------------------------------------------------------------------

    def _load(self) -> Dict[str, List[Dict[str, Any]]]:
        if not self.path.exists():
            return {}
        try:
            data = json.loads(self.path.read_text(encoding="utf-8"))
        except (OSError, json.JSONDecodeError) as exc:
            raise StoreError(f"cannot read store {self.path}: {exc}") from exc
        if not isinstance(data, dict):
            raise StoreError(f"store {self.path} must contain a JSON object")
        return {str(k): v for k, v in data.items() if isinstance(v, list)}

    def _dump(self, data: Dict[str, List[Dict[str, Any]]]) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        fd, tmp_path = tempfile.mkstemp(prefix=".escopo_", suffix=".json", dir=str(self.path.parent))
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as fh:
                json.dump(data, fh, ensure_ascii=False, indent=2)
            os.replace(tmp_path, self.path)
        except Exception:
            Path(tmp_path).unlink(missing_ok=True)
            raise

    def _parse_items(self, level: str, raw_items: List[Any]) -> List[ScopeSequenceItem]:
        try:
            return [ScopeSequenceItem.model_validate(raw) for raw in raw_items]
        except ValidationError as exc:
            raise StoreError(f"invalid item stored for level {level!r}: {exc}") from exc

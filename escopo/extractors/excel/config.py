"""
Centralised configuration for the workbook ingestion pipeline.

Tunable thresholds, sheet-name conventions and shared regex patterns live
here so that the detector, mapper and normaliser stay free of hard-coded
values.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Any, Tuple


# ---------------------------------------------------------------------------
# Pre-compiled regex patterns (shared across modules)
# ---------------------------------------------------------------------------

# ASCII digits only; ``\d`` would also accept other Unicode digit classes.
DIGIT_RUN_RE = re.compile(r"[0-9]+")
WHITESPACE_RE = re.compile(r"\s+")


# ---------------------------------------------------------------------------
# Sheet-name conventions
# ---------------------------------------------------------------------------

# Table-of-contents and cover sheets carry no curriculum rows.
EXCLUDED_SHEET_NAMES: Tuple[str, ...] = ("índice", "capa")


# ---------------------------------------------------------------------------
# ExtractorConfig — tunable thresholds
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class ExtractorConfig:
    """Immutable bag of tunables used by the ingestion pipeline."""

    # Header detection
    header_search_rows: int = 10
    min_mandatory_found: int = 3

    # Sheets skipped by (trimmed, case-insensitive) name
    excluded_sheet_names: Tuple[str, ...] = EXCLUDED_SHEET_NAMES

    # Diagnostics: rapidfuzz score a header cell needs to be suggested
    suggestion_min_score: int = 60

    @classmethod
    def from_settings(cls, settings: Any) -> "ExtractorConfig":
        """Build a config from an :class:`escopo.config.Settings` instance."""
        return cls(
            header_search_rows=int(getattr(settings, "HEADER_SEARCH_ROWS", cls.header_search_rows)),
            min_mandatory_found=int(getattr(settings, "MIN_MANDATORY_FOUND", cls.min_mandatory_found)),
        )


# Singleton default config
DEFAULT_CONFIG = ExtractorConfig()

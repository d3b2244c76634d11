"""Shared exports for the session summaries feature."""
from __future__ import annotations

from .analyzer import (
    detect_functionality,
    determine_completion_status,
    generate_next_steps,
    generate_title,
    summarize_session,
)
from .service import (
    MissingInputError,
    SummaryInputError,
    SummaryService,
    UnsupportedLanguageError,
    request_from_arguments,
)
from .storage import SummaryStore, get_default_summaries_dir, load_summary_file
from .types import SavedSummaryFile, SessionSummary, SummarizeRequest


__all__ = [
    "SummarizeRequest",
    "SessionSummary",
    "SavedSummaryFile",
    "SummaryStore",
    "get_default_summaries_dir",
    "load_summary_file",
    "summarize_session",
    "detect_functionality",
    "determine_completion_status",
    "generate_next_steps",
    "generate_title",
    "SummaryService",
    "SummaryInputError",
    "MissingInputError",
    "UnsupportedLanguageError",
    "request_from_arguments",
]

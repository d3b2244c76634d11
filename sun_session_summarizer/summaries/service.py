"""Shared orchestration layer for generating and storing summaries."""
from __future__ import annotations

import logging
from pathlib import Path
from typing import Any, List, Mapping, Optional

from ..messages import parse_session_content
from .analyzer import summarize_session
from .storage import SummaryStore
from .types import (
    DEFAULT_LANGUAGE,
    LANGUAGES,
    SavedSummaryFile,
    SessionSummary,
    SummarizeRequest,
)


class SummaryInputError(ValueError):
    """Base error for requests rejected before analysis starts."""


class MissingInputError(SummaryInputError):
    """Raised when a required field is absent or empty."""


class UnsupportedLanguageError(SummaryInputError):
    """Raised when the requested summary language has no locale table."""


class SummaryService:
    """Public facade used by the tool server, CLI commands and the browser."""

    def __init__(
        self,
        summary_root: Optional[Path] = None,
        *,
        store: Optional[SummaryStore] = None,
        logger: Optional[logging.Logger] = None,
    ) -> None:
        self._store = store or SummaryStore(summary_root)
        self._logger = logger or logging.getLogger(__name__)

    @property
    def store(self) -> SummaryStore:
        return self._store

    def analyze(self, request: SummarizeRequest) -> SessionSummary:
        """Validate ``request`` and return its summary without saving it."""
        self._validate(request)
        session = parse_session_content(request.session_content, request.context)
        summary = summarize_session(session, request.functionality or None, request.language)
        self._log_debug(
            "analyzed",
            {
                "message_count": summary.message_count,
                "functionality": summary.functionality,
                "language": summary.language,
            },
        )
        return summary

    def summarize(self, request: SummarizeRequest) -> SavedSummaryFile:
        """Analyze the request and persist the resulting summary."""
        summary = self.analyze(request)
        saved = self._store.save(summary, context=request.context)
        self._log_debug("saved", {"path": str(saved.path), "status": summary.completion_status})
        return saved

    def list_summaries(self) -> List[SavedSummaryFile]:
        return self._store.list()

    def get_summary(self, filename: str) -> Optional[str]:
        if not filename or not filename.strip():
            raise MissingInputError("Filename is required")
        content = self._store.get(filename)
        if content is None:
            self._log_debug("not-found", {"filename": filename})
        return content

    def _validate(self, request: SummarizeRequest) -> None:
        if not request.session_content:
            raise MissingInputError("Session content is required")
        if request.language not in LANGUAGES:
            raise UnsupportedLanguageError(
                f"Unsupported language '{request.language}'; expected one of: {', '.join(LANGUAGES)}"
            )

    def _log_debug(self, event: str, extra: Mapping[str, object]) -> None:
        if not self._logger:
            return
        payload = {"event": event}
        payload.update(dict(extra))
        self._logger.debug("summary-service", extra={"summary": payload})


def request_from_arguments(arguments: Mapping[str, Any]) -> SummarizeRequest:
    """Build a request from tool-call arguments (camelCase keys)."""
    language = arguments.get("language") or DEFAULT_LANGUAGE
    content = arguments.get("sessionContent")
    return SummarizeRequest(
        session_content=content if isinstance(content, str) else "",
        functionality=arguments.get("functionality") or None,
        context=arguments.get("context") or None,
        language=str(language).strip().lower(),
    )

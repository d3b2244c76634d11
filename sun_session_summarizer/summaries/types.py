"""Dataclasses shared across the summaries feature."""
from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Dict, Mapping, Optional, Tuple

from ..messages import SessionData, SessionMessage

LANGUAGES = ("zh", "en")
DEFAULT_LANGUAGE = "zh"
COMPLETION_STATUSES = ("completed", "partial", "failed", "ongoing")


@dataclass(frozen=True)
class SummarizeRequest:
    """Immutable request payload used by both the tool server and the CLI."""

    session_content: str
    functionality: Optional[str] = None
    context: Optional[str] = None
    language: str = DEFAULT_LANGUAGE


@dataclass(frozen=True)
class SessionSummary:
    """Structured result of analysing a session."""

    title: str
    essence: str
    completion_status: str
    key_points: Tuple[str, ...]
    outcomes: Tuple[str, ...]
    next_steps: Optional[Tuple[str, ...]]
    timestamp: datetime
    message_count: int
    functionality: str
    language: str

    def to_dict(self) -> Dict[str, Any]:
        """Return the camelCase mapping used in front matter and on the wire."""
        payload: Dict[str, Any] = {
            "title": self.title,
            "essence": self.essence,
            "completionStatus": self.completion_status,
            "keyPoints": list(self.key_points),
            "outcomes": list(self.outcomes),
        }
        if self.next_steps:
            payload["nextSteps"] = list(self.next_steps)
        payload.update(
            {
                "timestamp": self.timestamp.isoformat(),
                "messageCount": self.message_count,
                "functionality": self.functionality,
                "language": self.language,
            }
        )
        return payload

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "SessionSummary":
        next_steps = data.get("nextSteps")
        language = data.get("language", DEFAULT_LANGUAGE)
        status = data.get("completionStatus", "partial")
        return cls(
            title=str(data.get("title", "")),
            essence=str(data.get("essence", "")),
            completion_status=status if status in COMPLETION_STATUSES else "partial",
            key_points=tuple(str(item) for item in data.get("keyPoints") or () if item),
            outcomes=tuple(str(item) for item in data.get("outcomes") or () if item),
            next_steps=_optional_steps(next_steps),
            timestamp=coerce_datetime(data.get("timestamp")),
            message_count=int(data.get("messageCount", 0)),
            functionality=str(data.get("functionality", "")),
            language=language if language in LANGUAGES else DEFAULT_LANGUAGE,
        )


@dataclass(frozen=True)
class SavedSummaryFile:
    """A summary persisted to disk together with its location."""

    filename: str
    path: Path
    summary: SessionSummary
    created_at: datetime


def coerce_datetime(value: Any) -> datetime:
    """Accept a datetime or ISO string (YAML may hand back either).

    Naive values are taken to be UTC so results always compare with each other.
    """
    if isinstance(value, datetime):
        return _as_aware(value)
    if isinstance(value, str) and value.strip():
        try:
            return _as_aware(datetime.fromisoformat(value.strip()))
        except ValueError:
            pass
    return datetime.fromtimestamp(0, tz=timezone.utc)


def _as_aware(value: datetime) -> datetime:
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value


def _optional_steps(value: Any) -> Optional[Tuple[str, ...]]:
    steps = tuple(str(item) for item in value or () if item)
    return steps or None

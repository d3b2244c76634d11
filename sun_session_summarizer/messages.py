"""Shared helpers for turning raw conversation text into role-tagged messages."""
from __future__ import annotations

import re
from dataclasses import dataclass
from datetime import datetime, timezone
from pathlib import Path
from typing import Iterable, List, Optional, Tuple

ROLES = ("user", "assistant", "system")
CONVERSATION_MARKERS = ("Human:", "Assistant:")

_MARKER_SPLIT = re.compile(r"(?=Human:|Assistant:)")
_MARKER_ROLES = (("Human:", "user"), ("Assistant:", "assistant"))


@dataclass(frozen=True)
class SessionMessage:
    """One role-tagged message; list order is conversational order."""

    role: str
    content: str
    timestamp: Optional[datetime] = None


@dataclass(frozen=True)
class SessionData:
    """Parsed conversation handed to the analyzer."""

    messages: Tuple[SessionMessage, ...] = ()
    start_time: Optional[datetime] = None
    context: Optional[str] = None


def _now() -> datetime:
    return datetime.now(timezone.utc)


def iter_messages(text: str) -> Iterable[SessionMessage]:
    """Yield messages for each ``Human:``/``Assistant:`` segment of ``text``.

    Text appearing before the first marker is dropped.
    """
    for segment in _MARKER_SPLIT.split(text):
        trimmed = segment.strip()
        if not trimmed:
            continue
        for marker, role in _MARKER_ROLES:
            if trimmed.startswith(marker):
                yield SessionMessage(
                    role=role,
                    content=trimmed[len(marker):].strip(),
                    timestamp=_now(),
                )
                break


def parse_session_content(text: str, context: Optional[str] = None) -> SessionData:
    """Parse conversation text into :class:`SessionData`.

    Transcripts without any speaker marker become a single user message whose
    content is the text exactly as given.
    """
    messages: List[SessionMessage]
    if any(marker in text for marker in CONVERSATION_MARKERS):
        messages = list(iter_messages(text))
    else:
        messages = [SessionMessage(role="user", content=text, timestamp=_now())]

    return SessionData(messages=tuple(messages), start_time=_now(), context=context)


def read_session_text(path: Path) -> str:
    """Read a transcript file as UTF-8 text."""
    with path.open("r", encoding="utf-8") as handle:
        return handle.read()

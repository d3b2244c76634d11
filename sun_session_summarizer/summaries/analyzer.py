"""Rule-based conversation analyzer that turns messages into a summary."""
from __future__ import annotations

import logging
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import List, Optional, Sequence, Tuple

from . import patterns
from .extractors import (
    extract_action,
    extract_error,
    extract_main_request,
    extract_solution,
    find_code_blocks,
    split_sentences,
    summarize_code_block,
)
from .patterns import contains_any, get_locale
from .types import DEFAULT_LANGUAGE, LANGUAGES, SessionData, SessionMessage, SessionSummary

logger = logging.getLogger(__name__)


@dataclass
class ConversationAnalysis:
    """Fragments collected from a single pass over the messages."""

    requests: List[str] = field(default_factory=list)
    actions: List[str] = field(default_factory=list)
    code_summaries: List[str] = field(default_factory=list)
    errors: List[str] = field(default_factory=list)
    solutions: List[str] = field(default_factory=list)


def analyze_messages(messages: Sequence[SessionMessage]) -> ConversationAnalysis:
    """Run every extractor over the messages, preserving message order."""
    analysis = ConversationAnalysis()
    for message in messages:
        content = message.content.lower()
        if message.role == "user":
            if contains_any(content, patterns.REQUEST_TRIGGERS):
                analysis.requests.append(extract_main_request(message.content))
        elif message.role == "assistant":
            if contains_any(content, patterns.ACTION_TRIGGERS):
                analysis.actions.append(extract_action(message.content))

            analysis.code_summaries.extend(
                summarize_code_block(block) for block in find_code_blocks(message.content)
            )

            if contains_any(content, patterns.ERROR_TRIGGERS):
                analysis.errors.append(extract_error(message.content))
            if contains_any(content, patterns.SOLUTION_TRIGGERS):
                analysis.solutions.append(extract_solution(message.content))
    return analysis


def _joined_lower(messages: Sequence[SessionMessage]) -> str:
    return " ".join(message.content for message in messages).lower()


def detect_functionality(messages: Sequence[SessionMessage], language: str = DEFAULT_LANGUAGE) -> str:
    """Label the conversation with the first topic whose pattern matches."""
    locale = get_locale(language)
    all_content = _joined_lower(messages)
    for pattern, label in locale.topics:
        if pattern.search(all_content):
            return label
    return locale.default_topic


def generate_title(functionality: str, language: str = DEFAULT_LANGUAGE) -> str:
    return get_locale(language).title_template.format(functionality=functionality)


def determine_completion_status(messages: Sequence[SessionMessage]) -> str:
    last_content = _joined_lower(messages[-patterns.COMPLETION_WINDOW:])
    for status, keywords in patterns.COMPLETION_RULES:
        if contains_any(last_content, keywords):
            return status
    return patterns.DEFAULT_COMPLETION_STATUS


def generate_next_steps(
    messages: Sequence[SessionMessage], errors: Sequence[str]
) -> Optional[Tuple[str, ...]]:
    """Suggest up to three follow-up actions, or ``None`` when there are none."""
    next_steps: List[str] = []

    if errors:
        next_steps.append(patterns.UNRESOLVED_ERRORS_STEP)

    for message in messages[-patterns.NEXT_STEP_WINDOW:]:
        if not contains_any(message.content.lower(), patterns.NEXT_STEP_KEYWORDS):
            continue
        sentence = next(
            (
                candidate
                for candidate in split_sentences(message.content)
                if contains_any(candidate, patterns.NEXT_STEP_KEYWORDS)
            ),
            None,
        )
        if sentence and len(sentence) < patterns.NEXT_STEP_MAX_LENGTH:
            next_steps.append(sentence.strip())

    all_content = _joined_lower(messages)
    for mentioned, finished, step in patterns.PENDING_WORK_RULES:
        if mentioned in all_content and finished not in all_content:
            next_steps.append(step)

    limited = tuple(step for step in next_steps if step)[: patterns.NEXT_STEP_LIMIT]
    return limited or None


def build_essence(requests: Sequence[str], actions: Sequence[str]) -> str:
    if not requests and not actions:
        return patterns.ESSENCE_FALLBACK
    main_request = (requests[0] if requests else "") or patterns.ESSENCE_REQUEST_FALLBACK
    main_action = (actions[0] if actions else "") or patterns.ESSENCE_ACTION_FALLBACK
    return patterns.ESSENCE_TEMPLATE.format(request=main_request, action=main_action)


def build_key_points(analysis: ConversationAnalysis) -> Tuple[str, ...]:
    limits = patterns.KEY_POINT_SLICES
    candidates = (
        analysis.requests[: limits["requests"]]
        + analysis.actions[: limits["actions"]]
        + analysis.code_summaries[: limits["code"]]
    )
    return tuple(point for point in candidates if point)


def build_outcomes(analysis: ConversationAnalysis) -> Tuple[str, ...]:
    completed_actions = [
        action for action in analysis.actions if contains_any(action, patterns.OUTCOME_KEYWORDS)
    ]
    candidates = [item for item in analysis.solutions + completed_actions if item]
    return tuple(candidates[: patterns.OUTCOME_LIMIT])


def summarize_session(
    session: SessionData,
    functionality: Optional[str] = None,
    language: str = DEFAULT_LANGUAGE,
) -> SessionSummary:
    """Assemble a :class:`SessionSummary` from parsed session data.

    ``functionality`` overrides topic detection when given. The function does
    no I/O and never raises for sparse input; missing insights fall back to
    fixed placeholder text.
    """
    if language not in LANGUAGES:
        language = DEFAULT_LANGUAGE
    messages = tuple(session.messages or ())
    analysis = analyze_messages(messages)
    resolved_functionality = functionality or detect_functionality(messages, language)

    summary = SessionSummary(
        title=generate_title(resolved_functionality, language),
        essence=build_essence(analysis.requests, analysis.actions),
        completion_status=determine_completion_status(messages),
        key_points=build_key_points(analysis),
        outcomes=build_outcomes(analysis),
        next_steps=generate_next_steps(messages, analysis.errors),
        timestamp=datetime.now(timezone.utc),
        message_count=len(messages),
        functionality=resolved_functionality,
        language=language,
    )
    logger.debug(
        "session-analyzed",
        extra={
            "summary": {
                "message_count": summary.message_count,
                "functionality": summary.functionality,
                "status": summary.completion_status,
                "errors": len(analysis.errors),
            }
        },
    )
    return summary

"""Stateless text extractors applied to single message bodies.

Each extractor returns a short fragment derived from the message. When no
pattern matches, the documented fallback value is returned instead of raising.
"""
from __future__ import annotations

from typing import List, Optional, Pattern, Sequence

from .patterns import (
    ACTION_PATTERNS,
    ACTION_PREFIX_LENGTH,
    ACTION_SENTENCE_BOUNDS,
    CODE_BLOCK,
    CODE_DECLARATION_KEYWORDS,
    ELLIPSIS,
    ERROR_FALLBACK,
    ERROR_PATTERNS,
    REQUEST_MAX_LENGTH,
    SENTENCE_SPLIT,
    SOLUTION_FALLBACK,
    SOLUTION_PATTERNS,
)


def split_sentences(content: str) -> List[str]:
    return SENTENCE_SPLIT.split(content)


def first_match(content: str, patterns: Sequence[Pattern[str]]) -> Optional[str]:
    """Return the trimmed text of the first pattern that matches, if any."""
    for pattern in patterns:
        match = pattern.search(content)
        if match:
            return match.group(0).strip()
    return None


def extract_main_request(content: str) -> str:
    """First sentence of a user message, clipped to 100 characters."""
    first_sentence = split_sentences(content)[0]
    if len(first_sentence) > REQUEST_MAX_LENGTH:
        return first_sentence[:REQUEST_MAX_LENGTH] + ELLIPSIS
    return first_sentence


def extract_action(content: str) -> str:
    """Describe what the assistant did in a message.

    Tries the action capture patterns first, then the first sentence of a
    reasonable length, and finally the opening characters of the message.
    """
    matched = first_match(content, ACTION_PATTERNS)
    if matched:
        return matched

    lower, upper = ACTION_SENTENCE_BOUNDS
    for sentence in split_sentences(content):
        if lower < len(sentence) < upper:
            return sentence.strip()

    return content[:ACTION_PREFIX_LENGTH] + ELLIPSIS


def find_code_blocks(content: str) -> List[str]:
    return CODE_BLOCK.findall(content)


def summarize_code_block(code_block: str) -> str:
    """One-line description of a fenced code block."""
    lines = code_block.split("\n")
    language = lines[0].replace("```", "", 1).strip()
    code_lines = lines[1:-1]

    declarations: List[str] = []
    for line in code_lines:
        for keywords in CODE_DECLARATION_KEYWORDS:
            if any(keyword in line for keyword in keywords):
                declarations.append(line.strip())

    if declarations:
        suffix = " 等" if len(declarations) > 1 else ""
        return f"{language}代码: {declarations[0]}{suffix}"

    return f"{language}代码片段 ({len(code_lines)}行)"


def extract_error(content: str) -> str:
    return first_match(content, ERROR_PATTERNS) or ERROR_FALLBACK


def extract_solution(content: str) -> str:
    return first_match(content, SOLUTION_PATTERNS) or SOLUTION_FALLBACK

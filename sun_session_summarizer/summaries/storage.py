"""Filesystem helpers for persisting and locating summary files."""
from __future__ import annotations

import logging
import os
from datetime import datetime, timezone
from pathlib import Path
from typing import Dict, List, Optional, Tuple

import yaml

from .rendering import render_summary_markdown
from .types import SavedSummaryFile, SessionSummary, coerce_datetime

_FRONT_MATTER_DELIMITER = "---"
SUMMARY_SUFFIX = ".mdc"
SUMMARIES_DIR_ENV = "SUN_SUMMARIES_DIR"

logger = logging.getLogger(__name__)


def get_default_summaries_dir() -> Path:
    env_dir = os.getenv(SUMMARIES_DIR_ENV)
    if env_dir and env_dir.strip():
        return Path(env_dir.strip()).expanduser()
    return Path("~/.sun/summaries").expanduser()


class SummaryStore:
    """Stores one ``.mdc`` file per summary under a single directory."""

    def __init__(self, summary_root: Optional[Path] = None) -> None:
        root = Path(summary_root) if summary_root else get_default_summaries_dir()
        self.summary_root = root.expanduser().resolve()

    def save(self, summary: SessionSummary, *, context: Optional[str] = None) -> SavedSummaryFile:
        """Write ``summary`` to a new file and return where it landed."""
        created_at = datetime.now(timezone.utc)
        path = self._unique_path(created_at, summary.functionality)
        metadata: Dict[str, object] = summary.to_dict()
        metadata["createdAt"] = created_at.isoformat()
        if context:
            metadata["context"] = context
        write_summary(path, render_summary_markdown(summary, context), metadata)
        logger.debug("summary-saved", extra={"summary": {"path": str(path)}})
        return SavedSummaryFile(filename=path.name, path=path, summary=summary, created_at=created_at)

    def list(self) -> List[SavedSummaryFile]:
        """Return every readable summary, newest first."""
        if not self.summary_root.is_dir():
            return []
        entries: List[SavedSummaryFile] = []
        for path in sorted(self.summary_root.glob(f"*{SUMMARY_SUFFIX}")):
            if not path.is_file():
                continue
            try:
                entries.append(load_summary_file(path))
            except (OSError, ValueError, yaml.YAMLError) as exc:
                logger.warning("Skipping unreadable summary %s: %s", path, exc)
        entries.sort(key=lambda entry: (entry.created_at, entry.filename), reverse=True)
        return entries

    def get(self, filename: str) -> Optional[str]:
        """Return the raw text of a stored summary, or ``None`` if absent."""
        path = self.resolve(filename)
        if path is None:
            return None
        # Hand-edited files may not be valid UTF-8; serve them anyway.
        with path.open("r", encoding="utf-8", errors="replace") as handle:
            return handle.read()

    def resolve(self, filename: str) -> Optional[Path]:
        name = (filename or "").strip()
        # Only bare names inside the summaries directory are served.
        if not name or Path(name).name != name or name in {".", ".."}:
            return None
        for candidate in (name, f"{name}{SUMMARY_SUFFIX}"):
            path = self.summary_root / candidate
            if path.is_file():
                return path
        return None

    def _unique_path(self, created_at: datetime, functionality: str) -> Path:
        stem = f"{created_at.astimezone():%Y%m%d-%H%M%S}-{_slugify(functionality)}"
        path = self.summary_root / f"{stem}{SUMMARY_SUFFIX}"
        counter = 2
        while path.exists():
            path = self.summary_root / f"{stem}-{counter}{SUMMARY_SUFFIX}"
            counter += 1
        return path


def load_summary_file(markdown_path: Path) -> SavedSummaryFile:
    """Read a summary file and rebuild the record stored in its front matter."""
    markdown_path = Path(markdown_path)
    raw_text = markdown_path.read_text(encoding="utf-8")
    metadata, _body = split_front_matter(raw_text)
    if not metadata:
        raise ValueError(f"Summary file {markdown_path} has no front matter")
    created_raw = metadata.get("createdAt")
    if created_raw:
        created_at = coerce_datetime(created_raw)
    else:
        created_at = datetime.fromtimestamp(markdown_path.stat().st_mtime, tz=timezone.utc)
    return SavedSummaryFile(
        filename=markdown_path.name,
        path=markdown_path,
        summary=SessionSummary.from_dict(metadata),
        created_at=created_at,
    )


def write_summary(markdown_path: Path, body: str, metadata: Dict[str, object]) -> Path:
    """Persist summary markdown with YAML front matter."""
    markdown_path = Path(markdown_path)
    markdown_path.parent.mkdir(parents=True, exist_ok=True)
    if not isinstance(metadata, dict):
        raise TypeError("metadata must be a mapping")
    front_matter = yaml.safe_dump(dict(metadata), sort_keys=False, allow_unicode=True).strip()
    body = body if body.endswith("\n") else f"{body}\n"
    sections = [
        f"{_FRONT_MATTER_DELIMITER}\n{front_matter}\n{_FRONT_MATTER_DELIMITER}",
        "",  # blank line between metadata and body
        body,
    ]
    markdown_path.write_text("\n".join(sections), encoding="utf-8")
    return markdown_path


def _slugify(value: str) -> str:
    normalized = "".join(ch.lower() if ch.isalnum() else "-" for ch in value.strip())
    parts = [part for part in normalized.split("-") if part]
    slug = "-".join(parts)
    return slug or "summary"


def split_front_matter(content: str) -> Tuple[Dict[str, object], str]:
    lines = content.splitlines()
    if not lines or lines[0].strip() != _FRONT_MATTER_DELIMITER:
        return {}, content

    for idx in range(1, len(lines)):
        if lines[idx].strip() == _FRONT_MATTER_DELIMITER:
            front_matter_text = "\n".join(lines[1:idx]).strip()
            metadata = yaml.safe_load(front_matter_text) if front_matter_text else {}
            if metadata is None:
                metadata = {}
            if not isinstance(metadata, dict):
                raise ValueError("Summary front matter must deserialize to a mapping")
            body = "\n".join(lines[idx + 1 :]).lstrip("\n")
            if body and not body.endswith("\n"):
                body = f"{body}\n"
            return metadata, body

    # No closing delimiter found; treat entire file as body to avoid data loss.
    return {}, content if content.endswith("\n") else f"{content}\n"

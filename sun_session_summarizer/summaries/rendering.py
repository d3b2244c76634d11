"""Markdown rendering for summaries and the tool responses that embed them."""
from __future__ import annotations

from typing import Iterable, List, Optional, Sequence

from .patterns import get_locale
from .types import SavedSummaryFile, SessionSummary


def _bullets(items: Iterable[str], marker: str = "-") -> List[str]:
    return [f"{marker} {item}" for item in items]


def _section(heading: str, lines: Sequence[str]) -> List[str]:
    return [f"## {heading}", *lines, ""]


def render_summary_markdown(summary: SessionSummary, context: Optional[str] = None) -> str:
    """Render the Markdown body stored below the front matter."""
    headings = get_locale(summary.language).headings
    lines = [
        f"# {summary.title}",
        "",
        f"- **{headings['functionality']}**: {summary.functionality}",
        f"- **{headings['status']}**: {summary.completion_status}",
        f"- **{headings['messages']}**: {summary.message_count}",
        f"- **{headings['created']}**: {summary.timestamp.isoformat(timespec='seconds')}",
        "",
    ]
    lines += _section(headings["essence"], [summary.essence])
    if summary.key_points:
        lines += _section(headings["key_points"], _bullets(summary.key_points))
    if summary.outcomes:
        lines += _section(headings["outcomes"], _bullets(summary.outcomes))
    if summary.next_steps:
        lines += _section(headings["next_steps"], _bullets(summary.next_steps))
    if context:
        lines += _section(headings["context"], [context.strip()])
    return "\n".join(lines).rstrip("\n") + "\n"


def render_saved_confirmation(saved: SavedSummaryFile) -> str:
    """Text returned to the caller after a summary has been written."""
    summary = saved.summary
    headings = get_locale(summary.language).headings
    lines = [
        f"✅ {headings['saved']}",
        "",
        f"📁 **{headings['file']}**: {saved.filename}",
        f"📍 **{headings['path']}**: {saved.path}",
        f"🎯 **{headings['functionality']}**: {summary.functionality}",
        f"📊 **{headings['status']}**: {summary.completion_status}",
        f"💬 **{headings['messages']}**: {summary.message_count}",
        "",
    ]
    lines += _section(headings["essence"], [summary.essence])
    lines += _section(headings["key_points"], _bullets(summary.key_points, "•"))
    lines += _section(headings["outcomes"], _bullets(summary.outcomes, "•"))
    if summary.next_steps:
        lines += _section(headings["next_steps"], _bullets(summary.next_steps, "•"))
    lines += ["---", headings["list_hint"], headings["get_hint"]]
    return "\n".join(lines)


def render_summary_list(entries: Sequence[SavedSummaryFile]) -> str:
    if not entries:
        return "📂 暂无保存的会话总结\n\n使用 `-sun` 命令创建第一个会话总结！"

    blocks = []
    for index, entry in enumerate(entries, start=1):
        created = entry.created_at.astimezone().strftime("%Y-%m-%d %H:%M:%S")
        blocks.append(
            f"{index}. **{entry.filename}**\n"
            f"   📅 创建时间: {created}\n"
            f"   🎯 功能: {entry.summary.functionality}\n"
            f"   📊 状态: {entry.summary.completion_status}"
        )
    listing = "\n\n".join(blocks)
    return (
        f"📂 **已保存的会话总结** ({len(entries)}个)\n\n"
        f"{listing}\n\n"
        "---\n"
        "使用 `sun_get_summary` 获取特定总结的详细内容"
    )


def render_summary_content(filename: str, content: str) -> str:
    return f"📄 **{filename}**\n\n{content}"


def render_not_found(filename: str) -> str:
    return f"❌ 未找到文件: {filename}"


def render_error(message: str) -> str:
    return f"❌ Error: {message}"

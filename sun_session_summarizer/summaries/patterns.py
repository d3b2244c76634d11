"""Keyword and pattern tables driving the heuristic analyzer.

Every table is ordered and evaluated first-match-wins. Locale-specific text
lives in ``LOCALES`` keyed by language code so adding a locale only means
adding an entry there.
"""
from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Dict, Pattern, Sequence, Tuple

SENTENCE_SPLIT = re.compile(r"[。！？\n]")
CODE_BLOCK = re.compile(r"```[\s\S]*?```")

# Trigger keywords are matched against lower-cased message content.
REQUEST_TRIGGERS = ("创建", "做", "实现")
ACTION_TRIGGERS = ("创建", "实现", "完成")
ERROR_TRIGGERS = ("错误", "error", "失败")
SOLUTION_TRIGGERS = ("解决", "修复", "成功")
OUTCOME_KEYWORDS = ("创建", "实现", "完成")

ACTION_PATTERNS: Tuple[Pattern[str], ...] = tuple(
    re.compile(pattern)
    for pattern in (
        r"创建了?(.{1,50})",
        r"实现了?(.{1,50})",
        r"完成了?(.{1,50})",
        r"添加了?(.{1,50})",
        r"修改了?(.{1,50})",
    )
)
ERROR_PATTERNS: Tuple[Pattern[str], ...] = tuple(
    re.compile(pattern)
    for pattern in (
        r"错误[:：](.{1,100})",
        r"Error[:：](.{1,100})",
        r"失败[:：](.{1,100})",
        r"问题[:：](.{1,100})",
    )
)
SOLUTION_PATTERNS: Tuple[Pattern[str], ...] = tuple(
    re.compile(pattern)
    for pattern in (
        r"解决了?(.{1,100})",
        r"修复了?(.{1,100})",
        r"成功(.{1,100})",
        r"完成了?(.{1,100})",
    )
)

CODE_DECLARATION_KEYWORDS = (
    ("function ", "def ", "async "),
    ("class ", "interface "),
    ("import ", "from "),
)

ERROR_FALLBACK = "遇到技术问题"
SOLUTION_FALLBACK = "问题已解决"

# (status, keywords) checked in order against the trailing messages.
COMPLETION_RULES: Tuple[Tuple[str, Tuple[str, ...]], ...] = (
    ("completed", ("完成", "成功", "解决")),
    ("failed", ("错误", "失败", "问题")),
    ("ongoing", ("继续", "下一步")),
)
DEFAULT_COMPLETION_STATUS = "partial"
COMPLETION_WINDOW = 3

NEXT_STEP_WINDOW = 5
NEXT_STEP_LIMIT = 3
NEXT_STEP_KEYWORDS = ("下一步", "接下来", "后续")
UNRESOLVED_ERRORS_STEP = "解决剩余的技术问题"
# (mentioned, unless already reported as, suggested step)
PENDING_WORK_RULES: Tuple[Tuple[str, str, str], ...] = (
    ("测试", "测试完成", "进行功能测试"),
    ("部署", "部署完成", "部署到生产环境"),
)

ESSENCE_TEMPLATE = "用户{request}，助手{action}，通过协作完成了相关技术任务。"
ESSENCE_REQUEST_FALLBACK = "技术需求"
ESSENCE_ACTION_FALLBACK = "提供了技术支持"
ESSENCE_FALLBACK = "进行了技术讨论和问题解决"

REQUEST_MAX_LENGTH = 100
ACTION_SENTENCE_BOUNDS = (10, 100)
ACTION_PREFIX_LENGTH = 80
NEXT_STEP_MAX_LENGTH = 100
ELLIPSIS = "..."

KEY_POINT_SLICES = {"requests": 3, "actions": 3, "code": 2}
OUTCOME_LIMIT = 5

_TOPIC_PATTERNS: Tuple[str, ...] = (
    r"mcp.*server|server.*mcp",
    r"web.*app|应用.*开发|网站",
    r"api.*开发|接口.*开发",
    r"数据库|database",
    r"测试|test",
    r"部署|deploy",
    r"bug.*修复|错误.*修复",
    r"代码.*优化|性能.*优化",
    r"文档|documentation",
    r"配置|config",
)


@dataclass(frozen=True)
class Locale:
    """Locale-specific labels used when assembling and rendering summaries."""

    code: str
    topic_labels: Sequence[str]
    default_topic: str
    title_template: str
    headings: Dict[str, str]

    @property
    def topics(self) -> Tuple[Tuple[Pattern[str], str], ...]:
        return tuple(zip(_COMPILED_TOPICS, self.topic_labels))


_COMPILED_TOPICS = tuple(re.compile(pattern) for pattern in _TOPIC_PATTERNS)

LOCALES: Dict[str, Locale] = {
    "zh": Locale(
        code="zh",
        topic_labels=(
            "MCP服务器开发",
            "Web应用开发",
            "API开发",
            "数据库操作",
            "测试开发",
            "部署配置",
            "Bug修复",
            "代码优化",
            "文档编写",
            "配置管理",
        ),
        default_topic="技术开发",
        title_template="{functionality}会话总结",
        headings={
            "saved": "会话总结已保存！",
            "file": "文件",
            "path": "路径",
            "functionality": "功能",
            "status": "状态",
            "messages": "消息数",
            "created": "创建时间",
            "essence": "核心精髓",
            "key_points": "关键要点",
            "outcomes": "完成成果",
            "next_steps": "后续步骤",
            "context": "上下文",
            "list_hint": "使用 `sun_list_summaries` 查看所有保存的总结",
            "get_hint": "使用 `sun_get_summary` 获取特定总结内容",
        },
    ),
    "en": Locale(
        code="en",
        topic_labels=(
            "MCP Server Development",
            "Web Application Development",
            "API Development",
            "Database Operations",
            "Testing Development",
            "Deployment Configuration",
            "Bug Fixing",
            "Code Optimization",
            "Documentation Writing",
            "Configuration Management",
        ),
        default_topic="Technical Development",
        title_template="{functionality} Session Summary",
        headings={
            "saved": "Session summary saved!",
            "file": "File",
            "path": "Path",
            "functionality": "Functionality",
            "status": "Status",
            "messages": "Messages",
            "created": "Created",
            "essence": "Core Essence",
            "key_points": "Key Points",
            "outcomes": "Outcomes",
            "next_steps": "Next Steps",
            "context": "Context",
            "list_hint": "Use `sun_list_summaries` to view all saved summaries",
            "get_hint": "Use `sun_get_summary` to get specific summary content",
        },
    ),
}


def get_locale(language: str) -> Locale:
    """Return the locale table for ``language``, falling back to Chinese."""
    return LOCALES.get(language, LOCALES["zh"])


def contains_any(text: str, keywords: Sequence[str]) -> bool:
    return any(keyword in text for keyword in keywords)

from __future__ import annotations

from typing import List, Optional

import pydoc
from prompt_toolkit.application import Application, run_in_terminal
from prompt_toolkit.data_structures import Point
from prompt_toolkit.key_binding import KeyBindings
from prompt_toolkit.layout import HSplit, Layout, ScrollOffsets, Window
from prompt_toolkit.layout.controls import FormattedTextControl
from prompt_toolkit.layout.dimension import D
from prompt_toolkit.styles import Style

from .summaries import SavedSummaryFile, SummaryService


class SummaryBrowser:
    """Interactive browser backed by prompt_toolkit."""

    PAGE_JUMP = 10

    def __init__(self, service: SummaryService, limit: Optional[int] = None) -> None:
        self.service = service
        self.limit = limit
        self.entries: List[SavedSummaryFile] = []
        self.selected_index = 0
        self.status = ""
        self._app: Optional[Application] = None
        self._table_header = ""
        self._table_rows: List[str] = []
        self.reload()

    def reload(self) -> None:
        from .cli import format_summary_table

        entries = self.service.list_summaries()
        self.entries = entries[: self.limit] if self.limit else entries
        self.selected_index = min(self.selected_index, max(len(self.entries) - 1, 0))
        self._table_header, self._table_rows = format_summary_table(self.entries)
        count = len(self.entries)
        noun = "summary" if count == 1 else "summaries"
        self.status = f"{count} {noun} under {self.service.store.summary_root}"
        self._invalidate()

    def _invalidate(self) -> None:
        if self._app:
            self._app.invalidate()

    def _current_entry(self) -> Optional[SavedSummaryFile]:
        if not self.entries:
            return None
        index = min(max(self.selected_index, 0), len(self.entries) - 1)
        return self.entries[index]

    def _show_summary(self, entry: SavedSummaryFile) -> None:
        try:
            text = entry.path.read_text(encoding="utf-8", errors="replace")
        except OSError as exc:
            self.status = f"Failed to read summary: {exc}"
            self._invalidate()
            return

        def display() -> None:  # pragma: no cover - interactive
            pydoc.pager(text)

        run_in_terminal(display)
        self.status = f"Displayed summary -> {entry.path}"
        self._invalidate()

    # ---- Layout helpers -------------------------------------------------
    def _entry_fragments(self) -> list[tuple[str, str]]:
        fragments: list[tuple[str, str]] = []
        for idx, line in enumerate(self._table_rows):
            style = "class:summary-list.selected" if idx == self.selected_index else "class:summary-list"
            fragments.append((style, line))
            if idx != len(self._table_rows) - 1:
                fragments.append(("", "\n"))
        return fragments

    def _header_fragment(self) -> list[tuple[str, str]]:
        return [("class:summary-list.header", self._table_header)]

    def _detail_fragments(self) -> list[tuple[str, str]]:
        entry = self._current_entry()
        if entry is None:
            return [("class:detail", "No summaries saved yet.")]

        summary = entry.summary
        lines = [
            f"{summary.title} ({summary.language})",
            f"Status: {summary.completion_status} | Messages: {summary.message_count}",
            f"Essence: {summary.essence}",
        ]
        if summary.outcomes:
            lines.append(f"Outcomes: {'; '.join(summary.outcomes)}")
        if summary.next_steps:
            lines.append(f"Next steps: {'; '.join(summary.next_steps)}")
        lines.append(f"Path: {entry.path}")
        return [("class:detail", "\n".join(lines))]

    def _instructions_fragment(self) -> list[tuple[str, str]]:
        text = "Up/Down navigate | PgUp/PgDn jump | Home/End | Enter/s view | r reload | q quit"
        return [("class:instructions", text)]

    def _status_fragment(self) -> list[tuple[str, str]]:
        return [("class:status", self.status)]

    # ---- Key bindings ---------------------------------------------------
    def _build_key_bindings(self) -> KeyBindings:
        kb = KeyBindings()

        @kb.add("up")
        def _(event) -> None:  # pragma: no cover - interactive behaviour
            self._move_selection(-1)

        @kb.add("down")
        def _(event) -> None:  # pragma: no cover - interactive behaviour
            self._move_selection(1)

        @kb.add("pageup")
        def _(event) -> None:  # pragma: no cover - interactive behaviour
            self._move_selection(-self.PAGE_JUMP)

        @kb.add("pagedown")
        def _(event) -> None:  # pragma: no cover - interactive behaviour
            self._move_selection(self.PAGE_JUMP)

        @kb.add("home")
        def _(event) -> None:  # pragma: no cover - interactive behaviour
            self._set_selection(0)

        @kb.add("end")
        def _(event) -> None:  # pragma: no cover - interactive behaviour
            if self.entries:
                self._set_selection(len(self.entries) - 1)

        @kb.add("enter")
        @kb.add("s")
        def _(event) -> None:  # pragma: no cover - interactive behaviour
            entry = self._current_entry()
            if entry is None:
                self.status = "No summary selected."
                self._invalidate()
                return
            self._show_summary(entry)

        @kb.add("r")
        def _(event) -> None:  # pragma: no cover - interactive behaviour
            self.reload()

        @kb.add("q")
        @kb.add("Q")
        @kb.add("escape")
        @kb.add("c-c")
        def _(event) -> None:  # pragma: no cover - interactive behaviour
            event.app.exit(result=0)

        return kb

    # ---- Selection helpers ----------------------------------------------
    def _move_selection(self, delta: int) -> None:
        if not self.entries:
            return
        new_index = max(0, min(len(self.entries) - 1, self.selected_index + delta))
        self._set_selection(new_index)

    def _set_selection(self, index: int) -> None:
        if not self.entries or index == self.selected_index:
            return
        self.selected_index = index
        self._invalidate()

    # ---- Public API -----------------------------------------------------
    def run(self) -> int:
        def cursor_position() -> Point:
            if not self._table_rows:
                return Point(0, 0)
            index = min(max(self.selected_index, 0), len(self._table_rows) - 1)
            return Point(0, index)

        header_window = Window(
            content=FormattedTextControl(self._header_fragment, focusable=False),
            height=1,
            always_hide_cursor=True,
        )
        body_window = Window(
            content=FormattedTextControl(
                self._entry_fragments,
                focusable=True,
                get_cursor_position=cursor_position,
            ),
            height=D(min=3),
            wrap_lines=False,
            always_hide_cursor=True,
            scroll_offsets=ScrollOffsets(top=2, bottom=2),
        )
        detail_window = Window(
            content=FormattedTextControl(self._detail_fragments, focusable=False),
            height=D(min=4),
            wrap_lines=True,
            always_hide_cursor=True,
        )

        layout = Layout(
            HSplit(
                [
                    header_window,
                    body_window,
                    Window(height=1, char="-", always_hide_cursor=True),
                    detail_window,
                    Window(height=1, char="-", always_hide_cursor=True),
                    Window(
                        content=FormattedTextControl(self._instructions_fragment),
                        height=1,
                        always_hide_cursor=True,
                    ),
                    Window(
                        content=FormattedTextControl(self._status_fragment),
                        height=1,
                        always_hide_cursor=True,
                    ),
                ]
            )
        )

        style = Style.from_dict(
            {
                "summary-list": "",
                "summary-list.selected": "reverse",
                "summary-list.header": "bold",
                "instructions": "fg:#888888",
                "status": "fg:#000000 bg:#e5e5e5",
                "detail": "",
            }
        )

        self._app = Application(
            layout=layout,
            key_bindings=self._build_key_bindings(),
            style=style,
            full_screen=True,
        )
        result = self._app.run()
        return 0 if result is None else result


def browse_summaries(service: SummaryService, limit: Optional[int] = None) -> int:
    browser = SummaryBrowser(service, limit=limit)
    return browser.run()

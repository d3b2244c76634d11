from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path
from typing import Optional, Sequence

from .messages import read_session_text
from .summaries import (
    SavedSummaryFile,
    SummarizeRequest,
    SummaryInputError,
    SummaryService,
    get_default_summaries_dir,
)
from .summaries.rendering import render_saved_confirmation, render_summary_markdown


def configure_logging(verbose: bool) -> None:
    # stdout carries tool output and protocol traffic; logs go to stderr.
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
        stream=sys.stderr,
    )


def create_summary_service(summaries_dir: Optional[Path]) -> SummaryService:
    summaries_dir = (summaries_dir or get_default_summaries_dir()).expanduser()
    return SummaryService(summary_root=summaries_dir)


def read_session_input(candidate: str) -> str:
    if candidate == "-":
        return sys.stdin.read()
    path = Path(candidate).expanduser()
    if not path.is_file():
        raise FileNotFoundError(f"Session transcript not found: {candidate}")
    return read_session_text(path)


def format_summary_table(entries: Sequence[SavedSummaryFile]) -> tuple[str, list[str]]:
    columns = ("Idx", "Filename", "Created", "Status", "Functionality")
    rows = [
        (
            str(index),
            entry.filename,
            entry.created_at.astimezone().strftime("%Y-%m-%d %H:%M"),
            entry.summary.completion_status,
            entry.summary.functionality,
        )
        for index, entry in enumerate(entries, start=1)
    ]
    widths = [
        max([len(columns[col])] + [len(row[col]) for row in rows]) for col in range(len(columns))
    ]

    def render(values: Sequence[str]) -> str:
        cells = [values[0].rjust(widths[0])]
        cells += [value.ljust(width) for value, width in zip(values[1:], widths[1:])]
        return "  ".join(cells).rstrip()

    return render(columns), [render(row) for row in rows]


def handle_summarize(args: argparse.Namespace, parser: argparse.ArgumentParser, service: SummaryService) -> int:
    try:
        session_content = read_session_input(args.input)
    except (FileNotFoundError, OSError) as exc:
        parser.error(str(exc))
        return 2

    request = SummarizeRequest(
        session_content=session_content,
        functionality=args.functionality,
        context=args.context,
        language=args.language,
    )
    try:
        if args.stdout:
            summary = service.analyze(request)
            sys.stdout.write(render_summary_markdown(summary, args.context))
            return 0
        saved = service.summarize(request)
    except SummaryInputError as exc:
        parser.error(str(exc))
        return 2
    except OSError as exc:
        parser.error(f"Failed to write summary: {exc}")
        return 2

    print(render_saved_confirmation(saved))
    return 0


def handle_list(args: argparse.Namespace, service: SummaryService) -> int:
    entries = service.list_summaries()
    if args.limit:
        entries = entries[: args.limit]
    if not entries:
        print(f"No summaries found under {service.store.summary_root}")
        return 0

    print(f"Summaries under {service.store.summary_root}")
    header, lines = format_summary_table(entries)
    print(header)
    for line in lines:
        print(line)
    return 0


def handle_show(args: argparse.Namespace, parser: argparse.ArgumentParser, service: SummaryService) -> int:
    try:
        content = service.get_summary(args.filename)
    except SummaryInputError as exc:
        parser.error(str(exc))
        return 2
    if content is None:
        print(f"Summary not found: {args.filename}", file=sys.stderr)
        return 1
    sys.stdout.write(content)
    if not content.endswith("\n"):
        sys.stdout.write("\n")
    return 0


def build_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(
        prog="sun-session-summarizer",
        description="Summarize conversation transcripts into .mdc files and browse saved summaries.",
    )
    p.add_argument(
        "--summaries-dir",
        type=Path,
        help="Directory holding saved summaries (default: $SUN_SUMMARIES_DIR or ~/.sun/summaries)",
    )
    p.add_argument("-v", "--verbose", action="store_true", help="Log debug output to stderr")

    sub = p.add_subparsers(dest="cmd", required=True)

    p_summarize = sub.add_parser("summarize", help="Summarize a transcript and save it")
    p_summarize.add_argument(
        "input",
        nargs="?",
        default="-",
        help="Transcript file using Human:/Assistant: markers, or '-' for stdin (default: -)",
    )
    p_summarize.add_argument("--functionality", help="Override the detected functionality/topic label")
    p_summarize.add_argument("--context", help="Additional context stored alongside the summary")
    p_summarize.add_argument(
        "--language",
        choices=["zh", "en"],
        default="zh",
        help="Language for the summary labels (default: zh)",
    )
    p_summarize.add_argument(
        "--stdout",
        action="store_true",
        help="Print the Markdown summary instead of saving it",
    )

    p_list = sub.add_parser("list", help="List saved summaries, newest first")
    p_list.add_argument("--limit", type=int, default=20, help="Limit number of entries (default: 20)")

    p_show = sub.add_parser("show", help="Print a saved summary")
    p_show.add_argument("filename", help="Summary filename (the .mdc suffix is optional)")

    sub.add_parser("serve", help="Run the stdio tool server")

    p_browse = sub.add_parser("browse", help="Interactively browse saved summaries")
    p_browse.add_argument("--limit", type=int, help="Limit number of entries")

    return p


def main(argv: Optional[list[str]] = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    configure_logging(args.verbose)

    service = create_summary_service(args.summaries_dir)

    if args.cmd == "summarize":
        return handle_summarize(args, parser, service)

    if args.cmd == "list":
        return handle_list(args, service)

    if args.cmd == "show":
        return handle_show(args, parser, service)

    if args.cmd == "serve":
        from .server import run_server

        return run_server(service)

    if args.cmd == "browse":
        try:
            from .browser import browse_summaries
        except ModuleNotFoundError as exc:
            if exc.name == "prompt_toolkit":
                parser.error(
                    "Interactive browsing requires optional dependency 'prompt_toolkit'. "
                    "Install it from the repo with `python -m pip install .[browser]`."
                )
            raise

        return browse_summaries(service, limit=args.limit)

    parser.error("Unknown command")
    return 2


if __name__ == "__main__":  # pragma: no cover
    raise SystemExit(main())

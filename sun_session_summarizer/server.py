"""Stdio tool server exposing the session summarizer.

Speaks newline-delimited JSON-RPC 2.0 (the MCP stdio transport) so any
MCP-compatible agent can summarize the current session and browse saved
summaries.

MCP config (.mcp.json):
    {
      "mcpServers": {
        "sun": {
          "type": "stdio",
          "command": "sun-session-summarizer",
          "args": ["serve"]
        }
      }
    }
"""
from __future__ import annotations

import json
import logging
import sys
from typing import IO, Any, Dict, Mapping, Optional

from . import __version__
from .summaries import SummaryInputError, SummaryService, request_from_arguments
from .summaries.rendering import (
    render_error,
    render_not_found,
    render_saved_confirmation,
    render_summary_content,
    render_summary_list,
)

SERVER_NAME = "sun-session-summarizer"
PROTOCOL_VERSION = "2024-11-05"

METHOD_NOT_FOUND = -32601
PARSE_ERROR = -32700

logger = logging.getLogger(__name__)


class UnknownToolError(LookupError):
    """Raised when a tool name is not registered."""


TOOLS = [
    {
        "name": "sun_summarize",
        "description": (
            "Summarize current session and save as .mdc file when -sun command is used. "
            "Use -sun for Chinese or -sun en for English"
        ),
        "inputSchema": {
            "type": "object",
            "properties": {
                "sessionContent": {
                    "type": "string",
                    "description": "The session content to summarize (conversation messages)",
                },
                "functionality": {
                    "type": "string",
                    "description": "Optional: Main functionality or topic of the session",
                },
                "context": {
                    "type": "string",
                    "description": "Optional: Additional context about the session",
                },
                "language": {
                    "type": "string",
                    "enum": ["zh", "en"],
                    "description": "Language for the summary: zh for Chinese (default), en for English",
                },
            },
            "required": ["sessionContent"],
        },
    },
    {
        "name": "sun_list_summaries",
        "description": "List all saved session summaries",
        "inputSchema": {"type": "object", "properties": {}},
    },
    {
        "name": "sun_get_summary",
        "description": "Get content of a specific summary file",
        "inputSchema": {
            "type": "object",
            "properties": {
                "filename": {
                    "type": "string",
                    "description": "Name of the summary file to retrieve",
                },
            },
            "required": ["filename"],
        },
    },
]


class ToolServer:
    """Dispatches JSON-RPC requests to the summary service."""

    def __init__(self, service: SummaryService) -> None:
        self.service = service

    def call_tool(self, name: str, arguments: Mapping[str, Any]) -> str:
        """Run a tool and return its text result; raises on bad input."""
        if name == "sun_summarize":
            saved = self.service.summarize(request_from_arguments(arguments))
            return render_saved_confirmation(saved)

        elif name == "sun_list_summaries":
            return render_summary_list(self.service.list_summaries())

        elif name == "sun_get_summary":
            filename = arguments.get("filename") or ""
            content = self.service.get_summary(str(filename))
            if content is None:
                return render_not_found(str(filename))
            return render_summary_content(str(filename), content)

        raise UnknownToolError(f"Unknown tool: {name}")

    def handle_tool_call(self, name: str, arguments: Mapping[str, Any]) -> Dict[str, Any]:
        """Wrap a tool call as an MCP result, converting failures to text."""
        try:
            text = self.call_tool(name, arguments)
        except (SummaryInputError, UnknownToolError, OSError) as exc:
            logger.warning("Tool %s failed: %s", name, exc)
            return {"content": [{"type": "text", "text": render_error(str(exc))}], "isError": True}
        except Exception as exc:
            logger.exception("Tool %s raised unexpectedly", name)
            message = str(exc) or "Unknown error occurred"
            return {"content": [{"type": "text", "text": render_error(message)}], "isError": True}
        return {"content": [{"type": "text", "text": text}], "isError": False}

    def handle_request(self, request: Mapping[str, Any]) -> Optional[Dict[str, Any]]:
        """Handle a JSON-RPC request and return a response (``None`` for notifications)."""
        method = request.get("method", "")
        req_id = request.get("id")
        params = request.get("params") or {}

        if method == "initialize":
            return _result(
                req_id,
                {
                    "protocolVersion": PROTOCOL_VERSION,
                    "capabilities": {"tools": {}},
                    "serverInfo": {"name": SERVER_NAME, "version": __version__},
                },
            )

        elif method == "tools/list":
            return _result(req_id, {"tools": TOOLS})

        elif method == "tools/call":
            arguments = params.get("arguments") or {}
            if not isinstance(arguments, Mapping):
                arguments = {}
            return _result(req_id, self.handle_tool_call(params.get("name", ""), arguments))

        elif method == "ping":
            return _result(req_id, {})

        elif method.startswith("notifications/"):
            return None

        if req_id is not None:
            return _error(req_id, METHOD_NOT_FOUND, f"Method not found: {method}")
        return None

    def serve(self, stdin: IO[str], stdout: IO[str]) -> None:
        """Read JSON-RPC lines from ``stdin`` until EOF, answering on ``stdout``."""
        logger.info("%s %s started", SERVER_NAME, __version__)
        for line in stdin:
            line = line.strip()
            if not line:
                continue
            try:
                request = json.loads(line)
            except json.JSONDecodeError as exc:
                logger.warning("Discarding malformed request: %s", exc)
                _send(stdout, _error(None, PARSE_ERROR, "Parse error"))
                continue
            if not isinstance(request, dict):
                continue

            response = self.handle_request(request)
            if response is not None:
                _send(stdout, response)
        logger.info("%s stopped", SERVER_NAME)


def _result(req_id: Any, result: Mapping[str, Any]) -> Dict[str, Any]:
    return {"jsonrpc": "2.0", "id": req_id, "result": dict(result)}


def _error(req_id: Any, code: int, message: str) -> Dict[str, Any]:
    return {"jsonrpc": "2.0", "id": req_id, "error": {"code": code, "message": message}}


def _send(stdout: IO[str], obj: Mapping[str, Any]) -> None:
    """Write a JSON-RPC message to stdout."""
    stdout.write(json.dumps(obj, ensure_ascii=False) + "\n")
    stdout.flush()


def run_server(service: SummaryService, stdin: Optional[IO[str]] = None, stdout: Optional[IO[str]] = None) -> int:
    """Run the tool server on stdio; stdout is reserved for protocol traffic."""
    server = ToolServer(service)
    try:
        server.serve(stdin or sys.stdin, stdout or sys.stdout)
    except KeyboardInterrupt:
        logger.info("%s interrupted", SERVER_NAME)
    return 0

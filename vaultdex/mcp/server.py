"""MCP server exposing the vault index over stdio.

Implements a minimal MCP-over-stdio JSON-RPC loop with LSP-style framing.

Tools:
- note_index_tree: file tree, tag table and totals
- write_note_tips: the vault's writing guide
- query_note: tag / exact-name / keyword search (filters combine with AND)
- read_note: raw note text by vault-relative path
- write_note: create a note, or append to an existing one
"""

from __future__ import annotations

import argparse
import json
import logging
import sys
from pathlib import Path
from typing import Any

from .. import __version__
from ..config import load_config, root_from_env
from ..errors import InvalidInputError, NoteNotFoundError
from ..log import configure_logging
from ..service import VaultService
from ..vault.query import QueryFilter

logger = logging.getLogger(__name__)

DEFAULT_PROTOCOL_VERSION = "2024-11-05"

INSTRUCTIONS = (
    "Markdown knowledge vault. Provides note indexing, querying, reading and writing. "
    "Call write_note_tips first to learn the vault's conventions."
)


def _jsonrpc_error(code: int, message: str, *, request_id: Any) -> dict[str, Any]:
    return {"jsonrpc": "2.0", "id": request_id, "error": {"code": code, "message": message}}


def _jsonrpc_result(result: Any, *, request_id: Any) -> dict[str, Any]:
    return {"jsonrpc": "2.0", "id": request_id, "result": result}


class MessageStream:
    """JSON-RPC message framing over a pair of binary streams.

    MCP clients vary on stdio framing. Some use LSP-style Content-Length headers,
    others send newline-delimited JSON. The framing is detected from the first
    message received and replies use the same framing.
    """

    def __init__(self, stdin: Any, stdout: Any) -> None:
        self.stdin = stdin
        self.stdout = stdout
        self.use_lsp_framing: bool | None = None

    def read(self) -> dict[str, Any] | None:
        first = self.stdin.readline()
        while first and not first.strip():
            first = self.stdin.readline()
        if not first:
            return None

        if first.lower().startswith(b"content-length:"):
            if self.use_lsp_framing is None:
                self.use_lsp_framing = True
            headers: dict[str, str] = {}
            line = first
            while line and line.strip():
                try:
                    k, v = line.decode("ascii", errors="ignore").split(":", 1)
                    headers[k.strip().lower()] = v.strip()
                except ValueError:
                    pass
                line = self.stdin.readline()

            try:
                length = int(headers.get("content-length", "0"))
            except ValueError:
                length = 0
            if length <= 0:
                return None
            body = self.stdin.read(length)
            return json.loads(body.decode("utf-8"))

        if self.use_lsp_framing is None:
            self.use_lsp_framing = False
        return json.loads(first.decode("utf-8"))

    def write(self, message: dict[str, Any]) -> None:
        body = json.dumps(message, ensure_ascii=False, separators=(",", ":")).encode("utf-8")

        # Default to LSP framing if we haven't yet seen a request (should be rare).
        use_lsp = True if self.use_lsp_framing is None else self.use_lsp_framing

        if use_lsp:
            self.stdout.write(f"Content-Length: {len(body)}\r\n\r\n".encode("ascii"))
            self.stdout.write(body)
        else:
            self.stdout.write(body + b"\n")
        self.stdout.flush()


def coerce_string_list(value: Any, field: str) -> list[str]:
    """Accept a list, a JSON-array string, or a comma-separated string."""
    if value is None:
        return []
    if isinstance(value, str):
        text = value.strip()
        if not text:
            return []
        if text.startswith("["):
            try:
                parsed = json.loads(text)
            except json.JSONDecodeError:
                parsed = None
            if isinstance(parsed, list) and all(isinstance(v, str) for v in parsed):
                return [v.strip() for v in parsed if v.strip()]
        return [part.strip() for part in text.split(",") if part.strip()]
    if isinstance(value, list):
        if not all(isinstance(v, str) for v in value):
            raise InvalidInputError(f"{field} must be a list of strings")
        return [v.strip() for v in value if v.strip()]
    raise InvalidInputError(f"{field} must be a list of strings or a comma-separated string")


def _optional_string(arguments: dict[str, Any], field: str) -> str | None:
    value = arguments.get(field)
    if value is None:
        return None
    if not isinstance(value, str):
        raise InvalidInputError(f"{field} must be a string")
    return value


def _required(arguments: dict[str, Any], field: str) -> Any:
    if field not in arguments or arguments[field] is None:
        raise InvalidInputError(f"Missing required argument: {field}")
    return arguments[field]


def _required_string(arguments: dict[str, Any], field: str) -> str:
    value = _required(arguments, field)
    if not isinstance(value, str):
        raise InvalidInputError(f"{field} must be a string")
    return value


_STRING_LIST_SCHEMA = {
    "anyOf": [{"type": "array", "items": {"type": "string"}}, {"type": "string"}],
}


def _tool_defs(service: VaultService) -> list[dict[str, Any]]:
    def tool(name: str, description: str, schema: dict[str, Any]) -> dict[str, Any]:
        return {"name": name, "description": description, "inputSchema": schema}

    return [
        tool(
            "note_index_tree",
            "Full file tree of the vault plus every tag in use with note counts. No parameters.",
            {"type": "object", "properties": {}},
        ),
        tool(
            "write_note_tips",
            "Writing guide for this vault: directories, file naming, metadata, callouts and wikilinks. "
            "Call this before writing if you are unsure about any convention. No parameters.",
            {"type": "object", "properties": {}},
        ),
        tool(
            "query_note",
            "Search notes. Filters combine: tags (every tag must match), exact_name (file name without "
            ".md), keyword (substring of name, aliases, tags or path). At least one is required. "
            'Examples: {"tags": ["docker"]} | {"exact_name": "docker-guide"} | '
            '{"tags": ["rust"], "keyword": "mcp"}',
            {
                "type": "object",
                "properties": {
                    "tags": {**_STRING_LIST_SCHEMA, "description": 'Tags to intersect, e.g. ["docker", "linux"] or "docker, linux"'},
                    "exact_name": {"type": "string", "description": "File name without extension"},
                    "keyword": {"type": "string", "description": "Case-insensitive substring"},
                },
            },
        ),
        tool(
            "read_note",
            "Read a note's full text by vault-relative path (as returned by query_note or note_index_tree). "
            'Example: {"path": "tech/docker-guide.md"}',
            {
                "type": "object",
                "required": ["path"],
                "properties": {"path": {"type": "string"}},
            },
        ),
        tool(
            "write_note",
            "Write a note. The metadata header is generated; if the note exists the content is appended "
            "and its updated date refreshed. All parameters are required.",
            {
                "type": "object",
                "required": ["directory", "filename", "tags", "aliases", "status", "content"],
                "properties": {
                    "directory": {"type": "string", "enum": list(service.config.categories)},
                    "filename": {"type": "string", "description": "Lowercase words joined by hyphens, no extension"},
                    "tags": _STRING_LIST_SCHEMA,
                    "aliases": _STRING_LIST_SCHEMA,
                    "status": {"type": "string", "enum": list(service.config.statuses)},
                    "content": {"type": "string", "description": "Markdown body without the metadata header"},
                },
            },
        ),
    ]


def _as_tool_text(text: str) -> dict[str, Any]:
    return {"content": [{"type": "text", "text": text}]}


def handle_tool_call(service: VaultService, name: str, arguments: dict[str, Any]) -> dict[str, Any]:
    """Dispatch one tools/call request and return the MCP result payload."""
    if name == "note_index_tree":
        return _as_tool_text(service.list_index())

    if name == "write_note_tips":
        return _as_tool_text(service.guidance())

    if name == "query_note":
        query = QueryFilter.build(
            coerce_string_list(arguments.get("tags"), "tags"),
            _optional_string(arguments, "exact_name"),
            _optional_string(arguments, "keyword"),
        )
        return _as_tool_text(service.query_text(query))

    if name == "read_note":
        return _as_tool_text(service.read(_required_string(arguments, "path")))

    if name == "write_note":
        result = service.write(
            _required_string(arguments, "directory"),
            _required_string(arguments, "filename"),
            tags=coerce_string_list(_required(arguments, "tags"), "tags"),
            aliases=coerce_string_list(_required(arguments, "aliases"), "aliases"),
            status=_required_string(arguments, "status"),
            content=_required_string(arguments, "content"),
        )
        return _as_tool_text(result.message)

    raise InvalidInputError(f"Unknown tool: {name}")


def _server_info() -> dict[str, Any]:
    return {"name": "vaultdex", "version": __version__}


def serve(service: VaultService, stdin: Any, stdout: Any) -> int:
    """Run the JSON-RPC loop until EOF or ``exit``."""
    stream = MessageStream(stdin, stdout)
    initialized = False

    while True:
        try:
            msg = stream.read()
        except (json.JSONDecodeError, UnicodeDecodeError) as e:
            stream.write(_jsonrpc_error(-32700, f"Parse error: {e}", request_id=None))
            continue
        if msg is None:
            return 0
        if not isinstance(msg, dict):
            # Batches and bare values are not supported
            stream.write(_jsonrpc_error(-32600, "Invalid Request: expected a JSON object", request_id=None))
            continue

        request_id = msg.get("id")
        method = msg.get("method")
        params = msg.get("params") or {}

        # Notifications (no id) must not receive responses.
        if request_id is None:
            if method == "exit":
                return 0
            continue

        try:
            if method == "initialize":
                initialized = True
                requested_version = params.get("protocolVersion") if isinstance(params, dict) else None
                protocol_version = (
                    requested_version.strip()
                    if isinstance(requested_version, str) and requested_version.strip()
                    else DEFAULT_PROTOCOL_VERSION
                )
                result = {
                    "protocolVersion": protocol_version,
                    "capabilities": {"tools": {"listChanged": False}},
                    "serverInfo": _server_info(),
                    "instructions": INSTRUCTIONS,
                }
                stream.write(_jsonrpc_result(result, request_id=request_id))
                continue

            if method == "ping":
                stream.write(_jsonrpc_result({}, request_id=request_id))
                continue

            if method == "shutdown":
                stream.write(_jsonrpc_result(None, request_id=request_id))
                continue

            if method == "tools/list":
                stream.write(_jsonrpc_result({"tools": _tool_defs(service)}, request_id=request_id))
                continue

            if method == "tools/call":
                if not initialized:
                    raise InvalidInputError("Server not initialized")
                if not isinstance(params, dict):
                    raise InvalidInputError("params must be an object")
                tool_name = params.get("name")
                arguments = params.get("arguments") or {}
                if not isinstance(tool_name, str):
                    raise InvalidInputError("tools/call requires name")
                if not isinstance(arguments, dict):
                    raise InvalidInputError("tools/call arguments must be an object")
                result = handle_tool_call(service, tool_name, arguments)
                stream.write(_jsonrpc_result(result, request_id=request_id))
                continue

            stream.write(_jsonrpc_error(-32601, f"Method not found: {method}", request_id=request_id))

        except (InvalidInputError, NoteNotFoundError) as e:
            logger.warning(f"{method} rejected: {e}")
            stream.write(_jsonrpc_error(-32602, str(e), request_id=request_id))
        except Exception as e:
            logger.exception(f"{method} failed")
            stream.write(_jsonrpc_error(-32603, str(e), request_id=request_id))


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(description="MCP server for a Markdown note vault")
    parser.add_argument("--vault", type=Path, default=root_from_env(), help="Vault root (env VAULTDEX_ROOT)")
    parser.add_argument("--config", type=Path, default=None, help="YAML config (default <vault>/vaultdex.yml)")
    args = parser.parse_args(argv)

    if args.vault is None:
        print("A vault root is required (--vault or VAULTDEX_ROOT).", file=sys.stderr)
        return 2

    configure_logging()
    service = VaultService(load_config(args.vault.resolve(), args.config))
    logger.info(f"vaultdex MCP server starting, vault: {service.root}")
    return serve(service, sys.stdin.buffer, sys.stdout.buffer)


if __name__ == "__main__":
    raise SystemExit(main())

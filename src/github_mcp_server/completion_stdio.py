"""Stdio transport that answers ``completion/complete`` itself.

Works like :func:`mcp.server.stdio.stdio_server`: JSON-RPC lines are read
from stdin and handed to the session as :class:`SessionMessage` objects,
and outgoing messages are written one per line to stdout. Lines whose
``method`` is ``completion/complete`` never reach the session; they are
answered by the completion handler and the reply is written directly.
"""

from __future__ import annotations

import json
import logging
import sys
from collections.abc import AsyncIterator, Awaitable, Callable
from contextlib import asynccontextmanager
from io import TextIOWrapper
from typing import Any

import anyio
import anyio.abc
import anyio.lowlevel
from anyio.streams.memory import MemoryObjectReceiveStream, MemoryObjectSendStream
from mcp import types
from mcp.shared.message import SessionMessage
from pydantic import ValidationError

logger = logging.getLogger(__name__)

COMPLETE_METHOD = "completion/complete"

CompletionHandler = Callable[[types.CompleteRequest], Awaitable[types.CompleteResult]]


def _error(request_id: Any, code: int, message: str) -> dict[str, Any]:
    return {"jsonrpc": "2.0", "id": request_id, "error": {"code": code, "message": message}}


def is_completion_request(line: str) -> bool:
    """True for lines the shim answers itself, including unparseable ones naming the method."""
    try:
        payload = json.loads(line)
    except json.JSONDecodeError:
        return COMPLETE_METHOD in line
    return isinstance(payload, dict) and payload.get("method") == COMPLETE_METHOD


async def handle_completion_message(line: str, handler: CompletionHandler) -> dict[str, Any] | None:
    """Answer *line* if it is a completion request.

    Returns ``None`` when the line is something else and should be passed
    on to the session, otherwise the JSON-RPC response (result or error)
    with the request id preserved.
    """
    try:
        payload = json.loads(line)
    except json.JSONDecodeError:
        if COMPLETE_METHOD in line:
            return _error(None, types.PARSE_ERROR, "Failed to parse completion request")
        return None
    if not isinstance(payload, dict) or payload.get("method") != COMPLETE_METHOD:
        return None

    request_id = payload.get("id")
    try:
        request = types.CompleteRequest.model_validate(payload)
    except ValidationError:
        return _error(request_id, types.INVALID_REQUEST, "Failed to parse completion request")

    try:
        result = await handler(request)
    except Exception as exc:
        logger.warning("completion handler failed", exc_info=True)
        return _error(request_id, types.INTERNAL_ERROR, str(exc))

    return {
        "jsonrpc": "2.0",
        "id": request_id,
        "result": result.model_dump(by_alias=True, mode="json", exclude_none=True),
    }


@asynccontextmanager
async def completion_aware_stdio_server(
    completion_handler: CompletionHandler,
    stdin: anyio.AsyncFile[str] | None = None,
    stdout: anyio.AsyncFile[str] | None = None,
    *,
    log_commands: bool = False,
) -> AsyncIterator[
    tuple[
        MemoryObjectReceiveStream[SessionMessage | Exception],
        MemoryObjectSendStream[SessionMessage],
    ]
]:
    """Yield ``(read_stream, write_stream)`` for :meth:`mcp.server.Server.run`."""
    if not stdin:
        stdin = anyio.wrap_file(TextIOWrapper(sys.stdin.buffer, encoding="utf-8"))
    if not stdout:
        stdout = anyio.wrap_file(TextIOWrapper(sys.stdout.buffer, encoding="utf-8"))
    out = stdout

    read_stream_writer: MemoryObjectSendStream[SessionMessage | Exception]
    read_stream: MemoryObjectReceiveStream[SessionMessage | Exception]
    write_stream: MemoryObjectSendStream[SessionMessage]
    write_stream_reader: MemoryObjectReceiveStream[SessionMessage]
    read_stream_writer, read_stream = anyio.create_memory_object_stream(0)
    write_stream, write_stream_reader = anyio.create_memory_object_stream(0)
    write_lock = anyio.Lock()

    async def write_line(line: str) -> None:
        if log_commands:
            logger.info("rpc_out", extra={"args_data": line})
        async with write_lock:
            await out.write(line + "\n")
            await out.flush()

    async def answer(line: str) -> None:
        response = await handle_completion_message(line, completion_handler)
        if response is not None:
            await write_line(json.dumps(response))

    async def stdin_reader(tg: anyio.abc.TaskGroup) -> None:
        try:
            async with read_stream_writer:
                async for line in stdin:
                    if not line.strip():
                        continue
                    if log_commands:
                        logger.info("rpc_in", extra={"args_data": line.rstrip("\n")})
                    if is_completion_request(line):
                        tg.start_soon(answer, line)
                        continue
                    try:
                        message = types.JSONRPCMessage.model_validate_json(line)
                    except Exception as exc:
                        await read_stream_writer.send(exc)
                        continue
                    await read_stream_writer.send(SessionMessage(message))
        except anyio.ClosedResourceError:
            await anyio.lowlevel.checkpoint()

    async def stdout_writer() -> None:
        try:
            async with write_stream_reader:
                async for session_message in write_stream_reader:
                    await write_line(session_message.message.model_dump_json(by_alias=True, exclude_none=True))
        except anyio.ClosedResourceError:
            await anyio.lowlevel.checkpoint()

    async with anyio.create_task_group() as tg:
        tg.start_soon(stdin_reader, tg)
        tg.start_soon(stdout_writer)
        yield read_stream, write_stream

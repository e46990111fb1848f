"""Tests for the stdio transport that answers completion requests itself."""

from __future__ import annotations

import io
import json
from typing import Any

import anyio
from mcp import types
from mcp.shared.message import SessionMessage

from github_mcp_server.completion_stdio import (
    completion_aware_stdio_server,
    handle_completion_message,
    is_completion_request,
)


def _request(request_id: Any = 1, **params: Any) -> str:
    body = params or {
        "ref": {"type": "ref/resource", "uri": "repo://{owner}/{repo}/contents{/path*}"},
        "argument": {"name": "owner", "value": "oc"},
    }
    return json.dumps({"jsonrpc": "2.0", "id": request_id, "method": "completion/complete", "params": body})


async def _octo(request: types.CompleteRequest) -> types.CompleteResult:
    value = request.params.argument.value
    return types.CompleteResult(completion=types.Completion(values=[f"{value}to"], total=1, hasMore=False))


async def _broken(request: types.CompleteRequest) -> types.CompleteResult:
    raise RuntimeError("search unavailable")


class TestIsCompletionRequest:
    def test_exact_method(self) -> None:
        assert is_completion_request(_request())

    def test_other_method_mentioning_it(self) -> None:
        line = json.dumps({"jsonrpc": "2.0", "id": 1, "method": "tools/call", "params": {"x": "completion/complete"}})
        assert not is_completion_request(line)

    def test_garbage(self) -> None:
        assert is_completion_request("{completion/complete")
        assert not is_completion_request("{nope")


class TestHandleCompletionMessage:
    async def test_result_keeps_id(self) -> None:
        response = await handle_completion_message(_request("abc"), _octo)
        assert response == {
            "jsonrpc": "2.0",
            "id": "abc",
            "result": {"completion": {"values": ["octo"], "total": 1, "hasMore": False}},
        }

    async def test_other_messages_pass_through(self) -> None:
        line = json.dumps({"jsonrpc": "2.0", "id": 1, "method": "tools/list"})
        assert await handle_completion_message(line, _octo) is None
        assert await handle_completion_message("[1, 2]", _octo) is None
        assert await handle_completion_message("not json", _octo) is None

    async def test_parse_error(self) -> None:
        response = await handle_completion_message('{"method": "completion/complete", ', _octo)
        assert response is not None
        assert response["id"] is None
        assert response["error"]["code"] == types.PARSE_ERROR

    async def test_invalid_request(self) -> None:
        response = await handle_completion_message(_request(7, argument={"name": "owner"}), _octo)
        assert response is not None
        assert response["id"] == 7
        assert response["error"]["code"] == types.INVALID_REQUEST

    async def test_handler_failure(self) -> None:
        response = await handle_completion_message(_request(3), _broken)
        assert response == {
            "jsonrpc": "2.0",
            "id": 3,
            "error": {"code": types.INTERNAL_ERROR, "message": "search unavailable"},
        }


class TestCompletionAwareStdioServer:
    async def test_routes_completion_and_session_messages(self) -> None:
        ping = json.dumps({"jsonrpc": "2.0", "id": 2, "method": "ping"})
        stdin = io.StringIO(_request(1) + "\n\n" + ping + "\n")
        stdout = io.StringIO()

        async with completion_aware_stdio_server(_octo, anyio.wrap_file(stdin), anyio.wrap_file(stdout)) as (
            read_stream,
            write_stream,
        ):
            received = await read_stream.receive()
            assert isinstance(received, SessionMessage)
            assert isinstance(received.message.root, types.JSONRPCRequest)
            assert received.message.root.method == "ping"

            reply = types.JSONRPCMessage(types.JSONRPCResponse(jsonrpc="2.0", id=2, result={}))
            await write_stream.send(SessionMessage(reply))
            await write_stream.aclose()

        lines = [json.loads(line) for line in stdout.getvalue().splitlines()]
        assert {"jsonrpc": "2.0", "id": 2, "result": {}} in lines
        assert {
            "jsonrpc": "2.0",
            "id": 1,
            "result": {"completion": {"values": ["octo"], "total": 1, "hasMore": False}},
        } in lines
        assert len(lines) == 2

    async def test_invalid_json_reaches_session_as_exception(self) -> None:
        stdin = io.StringIO("{broken\n")
        stdout = io.StringIO()

        async with completion_aware_stdio_server(_octo, anyio.wrap_file(stdin), anyio.wrap_file(stdout)) as (
            read_stream,
            write_stream,
        ):
            received = await read_stream.receive()
            assert isinstance(received, Exception)
            await write_stream.aclose()

        assert stdout.getvalue() == ""

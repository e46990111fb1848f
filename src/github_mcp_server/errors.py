"""GitHub error values and the request-scoped error holder.

Handlers that hit a REST or GraphQL failure call
:func:`new_api_error_response` / :func:`new_graphql_error_response`. Those
helpers record the error in the holder attached to the current context (if
any) and hand back the ``isError`` tool result to return. The dispatcher
attaches a fresh holder per request and reads it after the handler returns,
so errors recorded by deeply nested coroutines are visible without being
threaded back through return values.
"""

from __future__ import annotations

import threading
from collections.abc import Iterator
from contextlib import contextmanager
from contextvars import ContextVar
from dataclasses import dataclass, field
from typing import TYPE_CHECKING

from mcp.types import CallToolResult, TextContent

if TYPE_CHECKING:
    import httpx


class GitHubAPIError(Exception):
    """A failed GitHub REST call: message, optional response, and cause."""

    def __init__(self, message: str, response: httpx.Response | None, cause: BaseException | str) -> None:
        super().__init__(message)
        self.message = message
        self.response = response
        self.cause = cause

    def __str__(self) -> str:
        return f"{self.message}: {self.cause}"


class GitHubGraphQLError(Exception):
    """A failed GitHub GraphQL query or mutation."""

    def __init__(self, message: str, cause: BaseException | str) -> None:
        super().__init__(message)
        self.message = message
        self.cause = cause

    def __str__(self) -> str:
        return f"{self.message}: {self.cause}"


class MissingErrorContext(LookupError):
    """Raised by the readers when no holder is attached to the context."""


@dataclass
class RequestErrors:
    """Shared, lock-guarded error collector for a single request."""

    api_errors: list[GitHubAPIError] = field(default_factory=list)
    graphql_errors: list[GitHubGraphQLError] = field(default_factory=list)
    _lock: threading.Lock = field(default_factory=threading.Lock, repr=False, compare=False)

    def add_api_error(self, err: GitHubAPIError) -> None:
        with self._lock:
            self.api_errors.append(err)

    def add_graphql_error(self, err: GitHubGraphQLError) -> None:
        with self._lock:
            self.graphql_errors.append(err)

    def clear(self) -> None:
        with self._lock:
            self.api_errors.clear()
            self.graphql_errors.clear()

    def snapshot(self) -> tuple[list[GitHubAPIError], list[GitHubGraphQLError]]:
        with self._lock:
            return list(self.api_errors), list(self.graphql_errors)


_request_errors: ContextVar[RequestErrors | None] = ContextVar("github_request_errors", default=None)


def with_error_tracking() -> RequestErrors:
    """Attach an empty holder to the current context and return it.

    If a holder is already attached it is cleared and reused, so the caller
    always starts from an empty error set.
    """
    holder = _request_errors.get()
    if holder is not None:
        holder.clear()
        return holder
    holder = RequestErrors()
    _request_errors.set(holder)
    return holder


@contextmanager
def error_tracking() -> Iterator[RequestErrors]:
    """Scope a fresh holder to a ``with`` block (one request)."""
    holder = RequestErrors()
    token = _request_errors.set(holder)
    try:
        yield holder
    finally:
        _request_errors.reset(token)


def _holder() -> RequestErrors:
    holder = _request_errors.get()
    if holder is None:
        msg = "context does not contain GitHubCtxErrors"
        raise MissingErrorContext(msg)
    return holder


def get_api_errors() -> list[GitHubAPIError]:
    return _holder().snapshot()[0]


def get_graphql_errors() -> list[GitHubGraphQLError]:
    return _holder().snapshot()[1]


def error_result(message: str) -> CallToolResult:
    """Build an ``isError`` tool result carrying *message*."""
    return CallToolResult(content=[TextContent(type="text", text=message)], isError=True)


def new_api_error(message: str, response: httpx.Response | None, cause: BaseException | str) -> GitHubAPIError:
    """Record a REST error in the current holder (no-op without one) and return it."""
    err = GitHubAPIError(message, response, cause)
    holder = _request_errors.get()
    if holder is not None:
        holder.add_api_error(err)
    return err


def new_api_error_response(
    message: str,
    response: httpx.Response | None,
    cause: BaseException | str,
) -> CallToolResult:
    return error_result(str(new_api_error(message, response, cause)))


def new_graphql_error_response(message: str, cause: BaseException | str) -> CallToolResult:
    err = GitHubGraphQLError(message, cause)
    holder = _request_errors.get()
    if holder is not None:
        holder.add_graphql_error(err)
    return error_result(str(err))

"""Typed extraction of tool parameters from MCP argument maps.

Pure functions: no MCP, httpx or Click dependencies. Every failure raises
:class:`ParameterError`; the tool dispatcher converts it into an
``isError`` tool result so the RPC itself still succeeds.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, TypeVar

_T = TypeVar("_T")

_MAX_PER_PAGE = 100
DEFAULT_PAGE = 1
DEFAULT_PER_PAGE = 30

# JSON type names, keyed by the Python type a caller asks for.
_JSON_NAMES: dict[type, str] = {
    str: "string",
    int: "number",
    float: "number",
    bool: "boolean",
    list: "array",
    dict: "object",
}


class ParameterError(ValueError):
    """A tool argument is missing, mistyped or out of range."""


@dataclass(frozen=True)
class PaginationParams:
    page: int = DEFAULT_PAGE
    per_page: int = DEFAULT_PER_PAGE


def json_type_name(value: Any) -> str:
    """Return the JSON type name of a decoded JSON value."""
    if value is None:
        return "null"
    if isinstance(value, bool):
        return "boolean"
    for py_type, name in _JSON_NAMES.items():
        if isinstance(value, py_type):
            return name
    return type(value).__name__


def _matches(value: Any, kind: type) -> bool:
    if kind is bool:
        return isinstance(value, bool)
    if kind in (int, float):
        return isinstance(value, int | float) and not isinstance(value, bool)
    return isinstance(value, kind)


def _convert(value: Any, kind: type[_T]) -> _T:
    if kind is int:
        return int(value)  # type: ignore[return-value]
    if kind is float:
        return float(value)  # type: ignore[return-value]
    return value  # type: ignore[no-any-return]


def _zero(kind: type[_T]) -> _T:
    return kind()


def required(args: dict[str, Any], name: str, kind: type[_T]) -> _T:
    """Return a required parameter of JSON type *kind*.

    The parameter must be present, of the right type, and not the type's
    zero value (``""``, ``0``, ``False``, empty list or object).
    """
    if name not in args or args[name] is None:
        raise ParameterError(f"missing required parameter: {name}")
    value = args[name]
    if not _matches(value, kind):
        raise ParameterError(f"parameter {name} is not of type {_JSON_NAMES[kind]}")
    converted = _convert(value, kind)
    if converted == _zero(kind):
        raise ParameterError(f"missing required parameter: {name}")
    return converted


def required_int(args: dict[str, Any], name: str) -> int:
    """Required number parameter truncated to an integer."""
    return required(args, name, int)


def optional_ok(args: dict[str, Any], name: str, kind: type[_T]) -> tuple[_T, bool]:
    """Return ``(value, present)``; absent or null parameters yield the zero value."""
    if name not in args or args[name] is None:
        return _zero(kind), False
    value = args[name]
    if not _matches(value, kind):
        raise ParameterError(f"parameter {name} is not of type {_JSON_NAMES[kind]}, is {json_type_name(value)}")
    return _convert(value, kind), True


def optional(args: dict[str, Any], name: str, kind: type[_T]) -> _T:
    value, _ = optional_ok(args, name, kind)
    return value


def optional_int(args: dict[str, Any], name: str) -> int:
    return optional(args, name, int)


def optional_int_with_default(args: dict[str, Any], name: str, default: int) -> int:
    """Optional integer where both absence and ``0`` mean *default*."""
    value = optional(args, name, int)
    return value if value != 0 else default


def optional_bool_with_default(args: dict[str, Any], name: str, default: bool) -> bool:
    value, present = optional_ok(args, name, bool)
    return value if present else default


def optional_string_array(args: dict[str, Any], name: str) -> list[str]:
    """Return a list of strings, accepting items that coerce cleanly to strings.

    Absent or null yields ``[]``. Numbers are converted with ``str()``;
    booleans, objects and nested arrays are rejected.
    """
    value = args.get(name)
    if value is None:
        return []
    if not isinstance(value, list):
        raise ParameterError(f"parameter {name} could not be coerced to []string, is {json_type_name(value)}")
    result: list[str] = []
    for item in value:
        if isinstance(item, str):
            result.append(item)
        elif isinstance(item, int | float) and not isinstance(item, bool):
            result.append(str(item))
        else:
            raise ParameterError(f"parameter {name} could not be coerced to []string, is {json_type_name(item)}")
    return result


def optional_pagination(
    args: dict[str, Any],
    *,
    per_page_key: str = "perPage",
) -> PaginationParams:
    """Extract ``page`` and ``perPage`` (or the handler's chosen key).

    ``page`` defaults to 1 and must be >= 1; the page size defaults to 30 and
    must lie in 1..100.
    """
    page, page_set = optional_ok(args, "page", int)
    per_page, per_page_set = optional_ok(args, per_page_key, int)
    if not page_set:
        page = DEFAULT_PAGE
    if not per_page_set:
        per_page = DEFAULT_PER_PAGE
    if page < 1:
        raise ParameterError("page must be >= 1")
    if per_page < 1 or per_page > _MAX_PER_PAGE:
        raise ParameterError(f"{per_page_key} must be between 1 and {_MAX_PER_PAGE}")
    return PaginationParams(page=page, per_page=per_page)


def pagination_schema(per_page_key: str = "perPage") -> dict[str, Any]:
    """JSON-Schema properties shared by every paginated tool."""
    return {
        "page": {"type": "number", "minimum": 1, "description": "Page number for pagination (min 1)"},
        per_page_key: {
            "type": "number",
            "minimum": 1,
            "maximum": _MAX_PER_PAGE,
            "description": "Results per page for pagination (min 1, max 100)",
        },
    }

"""Strict JSON decoding of request bodies.

A body must hold exactly one JSON value that validates against the destination
model without coercion. Every rejection is raised as a ``MalformedRequest``
subclass; positions are byte offsets into the body.
"""

import json
import re
from typing import Any, TypeVar

from pydantic import BaseModel, ValidationError

from brain.errors import (
    EmptyBody,
    MalformedRequest,
    MalformedSyntax,
    TrailingContent,
    TypeMismatch,
    UnknownField,
)

ModelT = TypeVar("ModelT", bound=BaseModel)

_WHITESPACE = re.compile(r"[ \t\n\r]*")
# string literals are matched so constants inside them are skipped
_CONSTANT = re.compile(r'"(?:[^"\\]|\\.)*"|(NaN|-?Infinity)')


class _NonStandardConstant(ValueError):
    def __init__(self, name: str) -> None:
        super().__init__(name)
        self.name = name


def _reject_constant(name: str) -> Any:
    raise _NonStandardConstant(name)


_decoder = json.JSONDecoder(parse_constant=_reject_constant)


def decode_json_body(body: bytes, model: type[ModelT]) -> ModelT:
    """Decode exactly one JSON object from ``body`` into ``model``.

    Member names match the model's fields exactly or, failing that,
    case-insensitively. A top-level ``null`` decodes to the model's defaults.

    Raises:
        EmptyBody: the body is empty or only whitespace.
        MalformedSyntax: the body is not valid JSON.
        UnknownField: a member has no matching field.
        TypeMismatch: a value has the wrong JSON type for its field.
        TrailingContent: anything but whitespace follows the first value.
    """
    try:
        text = body.decode("utf-8")
    except UnicodeDecodeError as exc:
        raise MalformedSyntax(exc.start) from exc

    start = _skip_whitespace(text, 0)
    if start == len(text):
        raise EmptyBody()

    try:
        value, end = _decoder.raw_decode(text, start)
    except json.JSONDecodeError as exc:
        raise MalformedSyntax(_byte_offset(text, exc.pos)) from exc
    except _NonStandardConstant as exc:
        raise MalformedSyntax(_byte_offset(text, _constant_position(text, start))) from exc

    members: dict[str, int] = {}
    if value is None:
        value = {}
    elif isinstance(value, dict):
        members = _member_offsets(text, start)
        value = _fold_keys(value, model)

    try:
        decoded = model.model_validate(value)
    except ValidationError as exc:
        raise _classify(exc, members, _byte_offset(text, end)) from exc

    if _skip_whitespace(text, end) != len(text):
        raise TrailingContent()
    return decoded


def _skip_whitespace(text: str, pos: int) -> int:
    return _WHITESPACE.match(text, pos).end()


def _byte_offset(text: str, pos: int) -> int:
    return len(text[:pos].encode("utf-8"))


def _constant_position(text: str, start: int) -> int:
    """Return where the first NaN or Infinity outside a string literal begins."""
    for match in _CONSTANT.finditer(text, start):
        if match.group(1):
            return match.start(1)
    return start


def _member_offsets(text: str, start: int) -> dict[str, int]:
    """Map each top-level member name to the byte offset just past its value.

    ``text[start]`` must open an object that has already been decoded successfully.
    """
    offsets: dict[str, int] = {}
    pos = _skip_whitespace(text, start + 1)
    while text[pos] != "}":
        key, pos = _decoder.raw_decode(text, pos)
        # skip the ':' separator
        pos = _skip_whitespace(text, _skip_whitespace(text, pos) + 1)
        _, pos = _decoder.raw_decode(text, pos)
        offsets[key] = _byte_offset(text, pos)
        pos = _skip_whitespace(text, pos)
        if text[pos] == ",":
            pos = _skip_whitespace(text, pos + 1)
    return offsets


def _fold_keys(payload: dict[str, Any], model: type[BaseModel]) -> dict[str, Any]:
    """Rename members that match a field name only case-insensitively."""
    fields = {name.casefold(): name for name in model.model_fields}
    folded: dict[str, Any] = {}
    for key, value in payload.items():
        name = key if key in model.model_fields else fields.get(key.casefold(), key)
        folded[name] = value
    return folded


def _classify(exc: ValidationError, members: dict[str, int], value_end: int) -> MalformedRequest:
    """Turn the first failing member, in document order, into a client error."""

    def field_of(error: Any) -> str:
        return str(error["loc"][0]) if error["loc"] else ""

    def offset_of(field: str) -> int:
        matches = [
            offset for key, offset in members.items() if key.casefold() == field.casefold()
        ]
        return max(matches, default=value_end)

    first = min(exc.errors(), key=lambda error: offset_of(field_of(error)))
    field = field_of(first)
    if first["type"] == "extra_forbidden":
        return UnknownField(field)
    return TypeMismatch(field, offset_of(field))

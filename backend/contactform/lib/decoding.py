"""Strict decoding of the contact form request body.

The body must be exactly one JSON object with the four ``IncomingMessage``
fields. Anything else is turned into a ``DecodeError`` that carries the HTTP
status and the message shown to the client.
"""
import json
import re
from enum import Enum
from typing import Any, AsyncIterable, Dict, Optional, Tuple

from pydantic import BaseModel, ConfigDict, Field, ValidationError

JSON_MEDIA_TYPE = "application/json"
MAX_BODY_BYTES = 1048576  # 1MB

_WHITESPACE = re.compile(r"[ \t\n\r]*")


class IncomingMessage(BaseModel):
    """A contact form submission as sent by the website."""

    model_config = ConfigDict(strict=True, extra="forbid", frozen=True)

    name: str = Field(alias="Name")
    email: str = Field(alias="Email")
    title: str = Field(alias="Title")
    body: str = Field(alias="Body")


class DecodeErrorKind(str, Enum):
    UNSUPPORTED_MEDIA_TYPE = "unsupported_media_type"
    PAYLOAD_TOO_LARGE = "payload_too_large"
    MALFORMED_JSON = "malformed_json"
    TRUNCATED_JSON = "truncated_json"
    TYPE_MISMATCH = "type_mismatch"
    UNKNOWN_FIELD = "unknown_field"
    MISSING_FIELD = "missing_field"
    EMPTY_BODY = "empty_body"
    MULTIPLE_OBJECTS = "multiple_objects"


class DecodeError(Exception):
    """A client-facing request body error with its HTTP status."""

    def __init__(self, kind: DecodeErrorKind, status_code: int, message: str):
        super().__init__(message)
        self.kind = kind
        self.status_code = status_code
        self.message = message

    @classmethod
    def unsupported_media_type(cls) -> "DecodeError":
        return cls(DecodeErrorKind.UNSUPPORTED_MEDIA_TYPE, 415, "Content Type header is not application/json")

    @classmethod
    def payload_too_large(cls) -> "DecodeError":
        return cls(DecodeErrorKind.PAYLOAD_TOO_LARGE, 413, "Request body too large, must be no larger than 1MB")

    @classmethod
    def malformed(cls, position: int) -> "DecodeError":
        return cls(
            DecodeErrorKind.MALFORMED_JSON,
            400,
            f"Request body contains badly-formed JSON at position {position}",
        )

    @classmethod
    def truncated(cls) -> "DecodeError":
        return cls(DecodeErrorKind.TRUNCATED_JSON, 400, "Request body contains badly formed JSON")

    @classmethod
    def type_mismatch(cls, field: str, position: int) -> "DecodeError":
        return cls(
            DecodeErrorKind.TYPE_MISMATCH,
            400,
            f"Request body contains an invalid value for field {json.dumps(field)} at position {position}",
        )

    @classmethod
    def unknown_field(cls, field: str) -> "DecodeError":
        return cls(DecodeErrorKind.UNKNOWN_FIELD, 400, f"Request body contains unknown field {json.dumps(field)}")

    @classmethod
    def missing_field(cls, field: str) -> "DecodeError":
        return cls(DecodeErrorKind.MISSING_FIELD, 400, f"Request body is missing field {json.dumps(field)}")

    @classmethod
    def empty_body(cls) -> "DecodeError":
        return cls(DecodeErrorKind.EMPTY_BODY, 400, "Request body must not be empty")

    @classmethod
    def multiple_objects(cls) -> "DecodeError":
        return cls(DecodeErrorKind.MULTIPLE_OBJECTS, 400, "Request body can only contain one JSON object")


def _reject_constant(name: str):
    raise ValueError(f"invalid literal {name}")


_decoder = json.JSONDecoder(parse_constant=_reject_constant)


def _skip_ws(doc: str, pos: int) -> int:
    return _WHITESPACE.match(doc, pos).end()


_LITERALS = ("true", "false", "null", "-")


def _is_cut_short(rest: str) -> bool:
    return bool(rest) and any(lit.startswith(rest) for lit in _LITERALS)


def _decode_value(doc: str, pos: int) -> Tuple[Any, int]:
    try:
        return _decoder.raw_decode(doc, pos)
    except json.JSONDecodeError as exc:
        if exc.pos >= len(doc) or exc.msg.startswith("Unterminated string") or _is_cut_short(doc[exc.pos:]):
            raise DecodeError.truncated() from exc
        raise DecodeError.malformed(exc.pos) from exc
    except RecursionError as exc:
        # nesting deeper than the scanner can follow
        raise DecodeError.malformed(pos) from exc
    except ValueError as exc:
        # NaN / Infinity are not JSON
        raise DecodeError.malformed(pos) from exc


def _scan_object(doc: str, pos: int) -> Tuple[Dict[str, Any], Dict[str, int], int]:
    """Read the object starting at ``doc[pos] == "{"``.

    Returns the members, the offset just past each member's value, and the
    offset just past the closing brace.
    """
    members: Dict[str, Any] = {}
    ends: Dict[str, int] = {}
    n = len(doc)

    pos = _skip_ws(doc, pos + 1)
    if pos < n and doc[pos] == "}":
        return members, ends, pos + 1

    while True:
        if pos >= n:
            raise DecodeError.truncated()
        if doc[pos] != '"':
            raise DecodeError.malformed(pos)
        key, pos = _decode_value(doc, pos)

        pos = _skip_ws(doc, pos)
        if pos >= n:
            raise DecodeError.truncated()
        if doc[pos] != ":":
            raise DecodeError.malformed(pos)

        value, pos = _decode_value(doc, _skip_ws(doc, pos + 1))
        members[key] = value
        ends[key] = pos

        pos = _skip_ws(doc, pos)
        if pos >= n:
            raise DecodeError.truncated()
        if doc[pos] == ",":
            pos = _skip_ws(doc, pos + 1)
            continue
        if doc[pos] == "}":
            return members, ends, pos + 1
        raise DecodeError.malformed(pos)


def _first_field_error(exc: ValidationError, ends: Dict[str, int]) -> DecodeError:
    positioned = []
    missing = []
    for err in exc.errors():
        field = str(err["loc"][0]) if err["loc"] else ""
        if err["type"] == "missing":
            missing.append(DecodeError.missing_field(field))
        elif err["type"] == "extra_forbidden":
            positioned.append((ends.get(field, 0), DecodeError.unknown_field(field)))
        else:
            positioned.append((ends.get(field, 0), DecodeError.type_mismatch(field, ends.get(field, 0))))
    if positioned:
        return min(positioned, key=lambda p: p[0])[1]
    return missing[0]


def parse_incoming_message(raw: bytes) -> IncomingMessage:
    """Decode a complete request body into an ``IncomingMessage``."""
    doc = raw.decode("utf-8", errors="replace")
    start = _skip_ws(doc, 0)
    if start >= len(doc):
        raise DecodeError.empty_body()

    if doc[start] == "{":
        members, ends, end = _scan_object(doc, start)
    else:
        # Surface syntax errors first, then reject the non-object value
        _, end = _decode_value(doc, start)
        raise DecodeError.type_mismatch("", end)

    if _skip_ws(doc, end) < len(doc):
        raise DecodeError.multiple_objects()

    try:
        return IncomingMessage.model_validate(members)
    except ValidationError as exc:
        raise _first_field_error(exc, ends) from exc


async def read_limited_body(stream: AsyncIterable[bytes], limit: int = MAX_BODY_BYTES) -> bytes:
    buf = bytearray()
    async for chunk in stream:
        buf.extend(chunk)
        if len(buf) > limit:
            raise DecodeError.payload_too_large()
    return bytes(buf)


async def decode_json_body(
    content_type: Optional[str],
    stream: AsyncIterable[bytes],
    limit: int = MAX_BODY_BYTES,
) -> IncomingMessage:
    """Check the content type, read at most ``limit`` bytes and decode them.

    Raises ``DecodeError`` for anything the client got wrong. Errors raised by
    the stream itself (e.g. a disconnect) are left to the caller.
    """
    if content_type != JSON_MEDIA_TYPE:
        raise DecodeError.unsupported_media_type()
    raw = await read_limited_body(stream, limit)
    return parse_incoming_message(raw)

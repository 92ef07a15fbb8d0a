"""Session payload codec.

Payloads are rendered as canonical JSON (sorted keys, compact separators)
and wrapped in URL-safe base64 without padding so the result can be used
as a cookie value without quoting. Equal payloads always produce the same
string, which is what change detection relies on.
"""
from __future__ import annotations
import base64
import binascii
import json
from dataclasses import dataclass
from typing import Any, Mapping, Union

from cookie_session.errors import MalformedPayload


@dataclass(frozen=True)
class Decoded:
    payload: dict[str, Any]


@dataclass(frozen=True)
class DecodeError:
    reason: str


DecodeResult = Union[Decoded, DecodeError]


def _reject_constant(name: str) -> Any:
    # json.loads accepts NaN/Infinity by default; they are not valid JSON
    raise ValueError(f"non-standard JSON constant {name}")


def serialize(payload: Mapping[str, Any]) -> str:
    """Encode `payload` into a deterministic, cookie-safe string.

    Raises TypeError/ValueError when the payload is not JSON-compatible.
    """
    body = json.dumps(
        dict(payload),
        sort_keys=True,
        separators=(",", ":"),
        ensure_ascii=True,
        allow_nan=False,
    )
    return base64.urlsafe_b64encode(body.encode("utf-8")).decode("ascii").rstrip("=")


def decode(raw: str) -> DecodeResult:
    """Decode a cookie value, returning `Decoded` or `DecodeError`.

    Both base64 alphabets and padded or unpadded input are accepted.
    """
    if not isinstance(raw, str) or not raw:
        return DecodeError("empty value")
    text = raw.strip().replace("+", "-").replace("/", "_").rstrip("=")
    try:
        data = base64.b64decode(text + "=" * (-len(text) % 4), altchars=b"-_", validate=True)
    except (binascii.Error, ValueError) as e:
        return DecodeError(f"invalid base64: {e}")
    try:
        body = data.decode("utf-8")
    except UnicodeDecodeError:
        return DecodeError("invalid utf-8")
    try:
        payload = json.loads(body, parse_constant=_reject_constant)
    except RecursionError:
        return DecodeError("invalid json: nesting too deep")
    except ValueError as e:
        return DecodeError(f"invalid json: {e}")
    if not isinstance(payload, dict):
        return DecodeError(f"expected a JSON object, got {type(payload).__name__}")
    return Decoded(payload)


def deserialize(raw: str) -> dict[str, Any]:
    """Inverse of `serialize`. Raises MalformedPayload on invalid input."""
    result = decode(raw)
    if isinstance(result, DecodeError):
        raise MalformedPayload(result.reason)
    return result.payload
